"""
Line-stream transforms for external tool output.

Each filter takes an iterable of lines (without trailing newlines) and
yields lines. A chain is an ordered sequence of such callables.
"""

from __future__ import annotations

import itertools
import re
from typing import Callable, Iterable, Iterator, Sequence

LineFilter = Callable[[Iterable[str]], Iterator[str]]


def drop_matching(substring: str) -> LineFilter:
    def _filter(lines: Iterable[str]) -> Iterator[str]:
        return (line for line in lines if substring not in line)

    return _filter


def replace_char(old: str, new: str) -> LineFilter:
    def _filter(lines: Iterable[str]) -> Iterator[str]:
        return (line.replace(old, new) for line in lines)

    return _filter


def indent(prefix: str = "  ") -> LineFilter:
    def _filter(lines: Iterable[str]) -> Iterator[str]:
        return (prefix + line for line in lines)

    return _filter


def skip_lines(count: int) -> LineFilter:
    def _filter(lines: Iterable[str]) -> Iterator[str]:
        return itertools.islice(lines, count, None)

    return _filter


def replace_prefix(old: str, new: str) -> LineFilter:
    def _filter(lines: Iterable[str]) -> Iterator[str]:
        return (new + line[len(old):] if line.startswith(old) else line for line in lines)

    return _filter


def keep_prefix(prefix: str) -> LineFilter:
    def _filter(lines: Iterable[str]) -> Iterator[str]:
        return (line for line in lines if line.startswith(prefix))

    return _filter


def grep(pattern: str) -> LineFilter:
    """Keep lines matching a regular expression; an empty pattern keeps everything."""
    regex = re.compile(pattern) if pattern else None

    def _filter(lines: Iterable[str]) -> Iterator[str]:
        if regex is None:
            return iter(lines)
        return (line for line in lines if regex.search(line))

    return _filter


def apply_chain(lines: Iterable[str], chain: Sequence[LineFilter]) -> Iterator[str]:
    stream: Iterable[str] = lines
    for f in chain:
        stream = f(stream)
    return iter(stream)
