"""
Offline queries against the package index file (setup.ini).

Records start with a marker line ``@ <name>`` followed by metadata lines
such as ``sdesc:``, ``ldesc:``, ``category:`` and ``version:``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from .errors import IndexFileError, UsageError
from .filters import apply_chain, grep, indent, keep_prefix, replace_prefix

RECORD_MARKER = "@"
VERSION_FIELD = "version:"
DESCRIPTION_FIELDS = ("sdesc: ", "ldesc: ")


def read_lines(path: Union[str, Path]) -> List[str]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as fh:
            return [line.rstrip("\r\n") for line in fh]
    except FileNotFoundError:
        raise IndexFileError(f"Package index {path} not found; run 'cygpkg update' first")
    except OSError as e:
        raise IndexFileError(f"Cannot read package index {path}: {e}")


def search(lines: Sequence[str], pattern: Optional[str] = None) -> Iterator[str]:
    """Yield record header lines, marker blanked, that match pattern."""
    try:
        name_filter = grep(pattern or "")
    except re.error as e:
        raise UsageError(f"Invalid search pattern '{pattern}': {e}")
    return apply_chain(lines, [keep_prefix(RECORD_MARKER), replace_prefix(RECORD_MARKER, " "), name_filter])


def extract_block(lines: Sequence[str], name: str) -> Optional[List[str]]:
    """Lines from '@ name' through the first following 'version:' line, or None."""
    header = f"{RECORD_MARKER} {name}"
    for start, line in enumerate(lines):
        if line.rstrip() != header:
            continue
        block = []
        for entry in lines[start:]:
            block.append(entry)
            if entry.startswith(VERSION_FIELD):
                break
        return block
    return None


def _strip_description(line: str) -> str:
    for prefix in DESCRIPTION_FIELDS:
        if line.startswith(prefix):
            return line[len(prefix):]
    return line


def describe(lines: Sequence[str], name: str) -> Optional[List[str]]:
    block = extract_block(lines, name)
    if block is None:
        return None
    stripped = (_strip_description(line) for line in block)
    return list(apply_chain(stripped, [replace_prefix(RECORD_MARKER, " "), indent("  ")]))
