"""
Exception hierarchy and exit codes.

Every fatal condition raised inside cygpkg is a CygpkgError. Only
cli.main turns them into an exit status.
"""

from __future__ import annotations

SUCCESS = 0
GENERAL_ERROR = 1
KEYBOARD_INTERRUPT = 130


class CygpkgError(Exception):
    exit_code = GENERAL_ERROR


class UsageError(CygpkgError):
    """Missing or unknown command, missing required argument, bad pattern."""


class FatalError(CygpkgError):
    """Raised by log("ERROR", ...)."""


class ToolError(CygpkgError):
    """An external executable could not be started."""


class IndexFileError(CygpkgError):
    """The package index file is missing or unreadable."""


class DownloadError(CygpkgError):
    pass
