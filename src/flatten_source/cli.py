"""
flatten_source: print the plain text behind a URL or path, for an LLM.

Overview
--------
One positional argument names the source. Its kind is detected from the
string itself:

1) **Video** (`youtube.com/watch?v=...`, `youtu.be/...`): the caption
   transcript, segments joined by spaces, with `[Music]` markers removed.

2) **Repository** (`github.com`, `gitlab.com`, `*.git`): the repository is
   cloned once into `cache/<name>`, then every file matching all `--include`
   wildcards is printed between `---- path ----` delimiters. Only lines with
   leading or trailing whitespace are kept.

3) **Document** (`*.pdf`): the text of every page, one page after another.

4) **Anything else**: the page or file text, with runs of spaces collapsed
   and line breaks removed.

Usage
-----
Run `flatten-source --help` for full options. Common examples:
    - A talk transcript:
        flatten-source "https://youtu.be/VnBYQrPacqg"

    - C sources of a repository, no size limit:
        flatten-source https://github.com/xing1357/SimpleOS --max-file-size 0

    - Headers only, logging to a file:
        flatten-source https://gitlab.com/enderice2/Fennix --include "*.h" --log-file ingest.log
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from flatten_source import __version__
from flatten_source.classifier import classify
from flatten_source.config import ExtractionResult, SourceKind
from flatten_source.document import extract_document
from flatten_source.generic import extract_generic
from flatten_source.logging import logger, setup_logging
from flatten_source.repository import DirectoryCloneCache, collect_repository
from flatten_source.settings import Settings, env_defaults
from flatten_source.transcript import fetch_transcript

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flatten_source.config import ClassifiedSource


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse command-line arguments into `Settings`.

    `FLATTEN_SOURCE_*` variables (environment or `.env`) provide the
    defaults; explicit options win.
    """
    defaults = Settings(**env_defaults())

    p = argparse.ArgumentParser(
        prog="flatten-source",
        description="Print the plain text of a video, repository, PDF or web page.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "source",
        nargs="?",
        default="",
        help="URL or local path to flatten.",
    )
    p.add_argument(
        "--include",
        type=str,
        default=defaults.include,
        help="Comma list of wildcards a repository file must all match.",
    )
    p.add_argument(
        "--exclude",
        type=str,
        default=defaults.exclude,
        help="Comma list of wildcards to exclude (accepted, not applied yet).",
    )
    p.add_argument(
        "--max-file-size",
        type=int,
        default=defaults.max_file_size,
        help="Skip repository files above this many bytes (0: no limit).",
    )
    p.add_argument(
        "--cache-dir",
        type=Path,
        default=defaults.cache_dir,
        help="Directory holding repository clones.",
    )
    p.add_argument(
        "--language",
        dest="languages",
        action="append",
        default=None,
        help="Preferred transcript language (repeatable).",
    )
    p.add_argument("--log-file", type=str, default=defaults.log_file, help="Log file path.")
    p.add_argument("--verbose", action="store_true", default=defaults.verbose, help="Log at INFO level.")
    args = p.parse_args(argv)
    if args.languages is None:
        args.languages = defaults.languages
    return Settings(noise_marker=defaults.noise_marker, **vars(args))


def dispatch(classified: ClassifiedSource, settings: Settings) -> ExtractionResult:
    """Run the extractor matching `classified.kind`.

    Video and repository failures come back inside the result. Document and
    generic errors are raised to the caller.

    Args:
        classified (ClassifiedSource): the classified source
        settings (Settings): runtime settings

    Returns:
        ExtractionResult: the text to print and any recovered failure
    """
    match classified.kind:
        case SourceKind.VIDEO:
            result = fetch_transcript(classified.video_id, settings.languages)
            return result.model_copy(update={"text": result.text.replace(settings.noise_marker, "")})
        case SourceKind.REPOSITORY:
            return collect_repository(
                classified.url,
                include_patterns=settings.include,
                exclude_patterns=settings.exclude,
                max_file_size=settings.max_file_size,
                cache=DirectoryCloneCache(settings.cache_dir),
            )
        case SourceKind.DOCUMENT:
            return ExtractionResult(kind=SourceKind.DOCUMENT, text=extract_document(classified.url))
        case _:
            return ExtractionResult(kind=SourceKind.GENERIC, text=extract_generic(classified.url))


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file or settings.verbose:
        setup_logging(settings.log_file or None, logging.INFO if settings.verbose else logging.WARNING)

    classified = classify(settings.source)
    if classified.kind is SourceKind.VIDEO and not classified.video_id:
        print(f"Could not get YouTube video ID from `{classified.video_id}`", file=sys.stderr)
        return 0

    result = dispatch(classified, settings)
    if not result.ok:
        logger.info("extraction_failed", kind=str(result.kind), failure=result.failure)

    print(result.text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
