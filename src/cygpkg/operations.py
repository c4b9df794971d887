from __future__ import annotations

import lzma
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from . import index, runner
from .config import Config
from .downloader import Downloader
from .errors import DownloadError, IndexFileError, UsageError
from .filters import drop_matching, indent, replace_char, skip_lines
from .logger import log

# Installer list syntax; echoed back in its output and shown space-separated
PACKAGE_DELIMITER = ","
EXTRACT_PROGRESS = "Extracting from file"


@dataclass(frozen=True)
class Invocation:
    """Everything the parser learned from the command line."""

    command: Optional[str] = None
    args: Tuple[str, ...] = ()
    debug: bool = False
    verbose: bool = False
    interactive: bool = False


@dataclass(frozen=True)
class InventoryAction:
    flags: Tuple[str, ...]
    message: str
    header_lines: int = 0
    required: Optional[str] = None


INVENTORY_ACTIONS = {
    "check": InventoryAction(("--check-setup",), "Checking installed packages", header_lines=2),
    "dump": InventoryAction(("--check-setup", "--dump-only"), "Dumping installed packages", header_lines=2),
    "list": InventoryAction(("--list-package",), "Listing package contents"),
    "find": InventoryAction(("--find-package",), "Finding package owning file", required="FILE"),
    "query": InventoryAction(("--package-query",), "Querying package database", required="REGEXP"),
}


# -------------------------
# Installer
# -------------------------
def installer_argv(config: Config, inv: Invocation, packages_flag: str) -> List[str]:
    argv = [
        config.installer,
        "--arch", config.arch,
        "--local-install",
        "--local-package-dir", str(config.package_dir),
    ]
    if not inv.interactive:
        argv.append("--quiet-mode")
    if inv.verbose:
        argv.append("--verbose")
    if config.root_dir:
        argv.extend(["--root", config.root_dir])
    argv.extend([packages_flag, PACKAGE_DELIMITER.join(inv.args)])
    return argv


def _run_installer(config: Config, inv: Invocation, packages_flag: str, action: str) -> int:
    if not inv.args:
        raise UsageError(f"{inv.command}: no packages given")

    log("INFO", "%s: %s", action, " ".join(inv.args))
    log("DEBUG", "interactive=%s verbose=%s", inv.interactive, inv.verbose)
    argv = installer_argv(config, inv, packages_flag)
    chain = [drop_matching(EXTRACT_PROGRESS), replace_char(PACKAGE_DELIMITER, " ")]
    return runner.run(argv, chain)


def install(config: Config, inv: Invocation) -> int:
    return _run_installer(config, inv, "--packages", "Installing")


def remove(config: Config, inv: Invocation) -> int:
    return _run_installer(config, inv, "--remove-packages", "Removing")


# -------------------------
# Inventory utility
# -------------------------
def inventory(config: Config, inv: Invocation) -> int:
    action = INVENTORY_ACTIONS.get(inv.command)
    if action is None:
        raise UsageError(f"Unrecognized inventory command: {inv.command}")
    if action.required and not inv.args:
        raise UsageError(f"{inv.command}: missing {action.required} argument")

    log("INFO", action.message)
    argv = [config.inventory, *action.flags, *inv.args]
    return runner.run(argv, [skip_lines(action.header_lines), indent("  ")])


# -------------------------
# Package index
# -------------------------
def search(config: Config, inv: Invocation) -> int:
    pattern = " ".join(inv.args)
    log("INFO", "Searching %s for '%s'", config.index_file, pattern)
    for line in index.search(index.read_lines(config.index_file), pattern):
        print(line)
    return 0


def describe(config: Config, inv: Invocation) -> int:
    if not inv.args:
        raise UsageError(f"{inv.command}: no packages given")

    lines = index.read_lines(config.index_file)
    for name in inv.args:
        block = index.describe(lines, name)
        if block is None:
            log("WARN", "Package '%s' not found in %s", name, config.index_file)
            continue
        for line in block:
            print(line)
        print()
    return 0


def update(config: Config, inv: Invocation) -> int:
    """Fetch setup.xz from the mirror and install it as the local index file."""
    if len(inv.args) > 1:
        raise UsageError(f"{inv.command}: expected at most one MIRROR argument")
    mirror = inv.args[0] if inv.args else config.mirror
    url = f"{mirror.rstrip('/')}/{config.arch}/setup.xz"
    target = Path(config.index_file)

    log("INFO", "Updating package index from %s", url)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, suffix=".xz")
    os.close(fd)
    tmp = Path(tmp_name)
    downloader = Downloader(config)
    try:
        downloader.download_to_file(url, tmp)
        try:
            with lzma.open(tmp, "rb") as src:
                data = src.read()
        except lzma.LZMAError as e:
            raise DownloadError(f"Corrupt index archive from {url}: {e}")
        staged = target.with_suffix(target.suffix + ".new")
        try:
            staged.write_bytes(data)
            os.replace(staged, target)
        except OSError as e:
            staged.unlink(missing_ok=True)
            raise IndexFileError(f"Cannot write package index {target}: {e}")
    finally:
        downloader.close()
        tmp.unlink(missing_ok=True)

    print(f"Package index updated: {target}")
    return 0
