from __future__ import annotations

import io
from typing import TYPE_CHECKING

from flatten_source.file_manipulation import read_indented_lines

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from flatten_source.config import FileCandidate

# Descending widths; each pass only catches runs of exactly that many spaces.
_SPACE_RUNS = ("     ", "    ", "   ", "  ")
_DROPPED_CHARS = ("\n", "\t", "\r")


def file_header(path: str) -> str:
    return f"---- {path} ---- \n"


def file_footer(name: str) -> str:
    return f"---- end of {name} ----\n\n"


def build_repository_text(candidates: Sequence[FileCandidate]) -> str:
    """Concatenate the delimited blocks of every candidate file.

    Each block is the header line, then the lines of the file that carry
    leading or trailing whitespace, then the footer line and a blank line.
    Lines without surrounding whitespace are left out.

    Args:
        candidates (Sequence[FileCandidate]): the files to render, already filtered

    Returns:
        str: the blocks, in candidate order
    """
    out = io.StringIO()
    for cand in candidates:
        out.write(file_header(cand.path))
        for line in read_indented_lines(cand.path):
            out.write(line + "\n")
        out.write(file_footer(cand.name))
    return out.getvalue()


def join_segments(texts: Iterable[str]) -> str:
    """Join caption texts, each followed by a single space (no final trim)."""
    return "".join(f"{t} " for t in texts)


def join_pages(texts: Iterable[str]) -> str:
    """Join page texts, each followed by a newline."""
    return "".join(f"{t}\n" for t in texts)


def collapse_whitespace(text: str) -> str:
    """Apply the fixed space-run substitutions, then delete line breaks and tabs.

    Runs of 5, 4, 3, then 2 spaces are each replaced with one space, in that
    order. This is not a general whitespace collapse: some long runs come out
    of the last pass as two spaces. Newlines, tabs and carriage returns are
    removed outright, so the words on both sides get joined.

    Args:
        text (str): raw text

    Returns:
        str: normalized text
    """
    for run in _SPACE_RUNS:
        text = text.replace(run, " ")
    for ch in _DROPPED_CHARS:
        text = text.replace(ch, "")
    return text
