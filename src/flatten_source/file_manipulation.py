from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from flatten_source.config import FileCandidate

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


def wildcard_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a `*`/`?` wildcard into a compiled, start-anchored regex.

    Every other character is matched literally. The expression is anchored
    at the start only: there is no end anchor, so `*.c` also accepts
    `main.cpp`. Matching is case-insensitive.

    Args:
        pattern (str): the wildcard pattern, e.g. `*.c` or `src/?ain.*`

    Returns:
        re.Pattern[str]: the compiled expression
    """
    translated = (
        re.escape(pattern)
        .replace(r"\*", ".*")
        .replace(r"\?", ".")
        .replace(r"\/", "/")
    )
    return re.compile("^" + translated, re.IGNORECASE)


def matches(path: str, pattern: str) -> bool:
    """Check whether `path` starts with something matching the wildcard `pattern`.

    The empty pattern matches everything.

    Args:
        path (str): the candidate path, with forward slashes
        pattern (str): the wildcard pattern

    Returns:
        bool: True if the pattern matches at the start of `path`
    """
    return wildcard_to_regex(pattern).match(path) is not None


def split_patterns(patterns: str) -> list[str]:
    """Split a comma list of wildcards.

    Entries are not trimmed. An empty string gives `[""]`, which matches
    every path.
    """
    return patterns.split(",")


def matches_all(path: str, patterns: Sequence[str]) -> bool:
    """Check that `path` matches every pattern (conjunctive filter).

    Args:
        path (str): the candidate path
        patterns (Sequence[str]): the wildcard patterns

    Returns:
        bool: True if every pattern matches
    """
    return all(matches(path, p) for p in patterns)


def to_posix(path: str) -> str:
    """Normalize path separators to forward slashes."""
    return path.replace("\\", "/")


def walk_files(root: Path) -> list[str]:
    """Walk the directory tree rooted at `root` and return every file path.

    Directories and files are visited in sorted order so that two walks over
    an unchanged tree produce the same list. Paths keep the form of `root`
    (relative stays relative).

    Args:
        root (Path): the root directory to walk

    Returns:
        list[str]: the file paths found, `.git` internals included
    """
    results: list[str] = []
    for current, dirs, files in os.walk(root):
        dirs.sort()
        for f in sorted(files):
            p = os.path.join(current, f)  # noqa: PTH118
            if os.path.isfile(p):  # noqa: PTH113
                results.append(p)
    return results


def make_candidates(paths: Sequence[str], root: Path) -> list[FileCandidate]:
    """Build `FileCandidate` records for `paths` found under `root`.

    Args:
        paths (Sequence[str]): the enumerated file paths
        root (Path): the clone root the paths were found under

    Returns:
        list[FileCandidate]: one record per path, in input order
    """
    root_posix = to_posix(str(root)).rstrip("/")
    out: list[FileCandidate] = []
    for p in paths:
        posix = to_posix(p)
        rel = posix.removeprefix(root_posix).lstrip("/")
        out.append(FileCandidate(path=posix, rel=rel, size=os.path.getsize(p)))  # noqa: PTH202
    return out


def read_indented_lines(path: str) -> Iterator[str]:
    """Yield the lines of a text file that carry leading or trailing whitespace.

    A line is kept when `line.strip() != line`. Lines come without their
    terminator; `\\r\\n` and `\\r` are treated as line ends.

    Args:
        path (str): the file to read

    Yields:
        str: each whitespace-bearing line, in file order
    """
    with Path(path).open(encoding="utf-8", errors="replace") as f:
        for raw in f:
            line = raw.removesuffix("\n")
            if line.strip() != line:
                yield line
