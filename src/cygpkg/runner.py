from __future__ import annotations

import subprocess
import sys
from typing import Optional, Sequence, TextIO

from .errors import ToolError
from .filters import LineFilter, apply_chain
from .logger import setup_logger

_logger = setup_logger()


def run(argv: Sequence[str], chain: Sequence[LineFilter] = (), out: Optional[TextIO] = None) -> int:
    """
    Run an external tool without a shell and print its output through a filter chain.

    stderr is merged into stdout so the tool's own error text reaches the user
    through the same chain. Returns the tool's exit status.
    """
    out = out or sys.stdout
    argv = list(argv)
    _logger.debug("Running: %s", subprocess.list2cmdline(argv))

    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            bufsize=1,
        )
    except FileNotFoundError:
        raise ToolError(f"Executable not found: {argv[0]}")
    except OSError as e:
        raise ToolError(f"Cannot start {argv[0]}: {e}")

    with proc:
        lines = (line.rstrip("\r\n") for line in proc.stdout)
        for line in apply_chain(lines, chain):
            print(line, file=out)
    rc = proc.wait()

    _logger.debug("%s exited with status %d", argv[0], rc)
    return rc
