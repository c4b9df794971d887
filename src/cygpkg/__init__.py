"""
cygpkg - A command-line front-end for Cygwin package management on Windows.

It drives the Cygwin installer and cygcheck, and answers search and
describe queries from the local setup.ini package index.

Modules:
- cli: Command-line parsing, dispatch and exit status.
- operations: Command implementations.
- index: Package index (setup.ini) queries.
- runner: External tool execution and output filtering.
- filters: Line-stream transforms.
- config: Configuration management.
- downloader: Mirror downloads for the update command.
"""

from .cli import main

__all__ = ["main"]
