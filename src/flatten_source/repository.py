from __future__ import annotations

import subprocess  # noqa: S404
from pathlib import Path
from shutil import which
from typing import TYPE_CHECKING, Protocol

from flatten_source.config import (
    CLONE_FAILURE_TEMPLATE,
    DEFAULT_CACHE_DIR,
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DEFAULT_MAX_FILE_SIZE,
    ExtractionResult,
    SourceKind,
)
from flatten_source.exceptions import CloneError, GitNotFoundError
from flatten_source.file_manipulation import make_candidates, matches_all, split_patterns, walk_files
from flatten_source.logging import logger
from flatten_source.output_construction import build_repository_text

if TYPE_CHECKING:
    from flatten_source.config import FileCandidate


class CloneCache(Protocol):
    """Name-keyed store of local repository clones."""

    def path_for(self, name: str) -> Path:
        """Return the directory that holds (or would hold) the clone for `name`."""
        ...

    def ensure(self, url: str, name: str) -> Path:
        """Make sure a clone for `name` exists and return its directory.

        Raises:
            CloneError: if the clone is missing and cannot be created.
        """
        ...


class DirectoryCloneCache:
    """Clone cache backed by one directory per repository name.

    An existing directory is reused as-is: it is never refreshed, never
    checked against the requested URL and never cleaned up.
    """

    def __init__(self, root: str | Path = DEFAULT_CACHE_DIR, git_bin: str = "git") -> None:
        self.root = Path(root)
        self.git_bin = git_bin

    def path_for(self, name: str) -> Path:
        return self.root / name

    def ensure(self, url: str, name: str) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        dest = self.path_for(name)
        if dest.exists():
            logger.info("clone_reused", name=name, path=str(dest))
            return dest

        git = which(self.git_bin)
        if git is None:
            raise GitNotFoundError(url=url, destination=dest)

        logger.info("clone_started", url=url, path=str(dest))
        proc = subprocess.run(  # noqa: S603
            [git, "clone", url, str(dest)],
            text=True,
            capture_output=True,
            check=False,
        )
        if proc.returncode != 0:
            raise CloneError(url=url, destination=dest, returncode=proc.returncode, stderr=proc.stderr)
        return dest


def repo_name_from_url(url: str) -> str:
    """Return the last `/` segment of `url` without a trailing `.git`."""
    return url.split("/")[-1].removesuffix(".git")


def select_candidates(
    clone_dir: Path,
    include_patterns: str,
    max_file_size: int,
) -> list[FileCandidate]:
    """Enumerate and filter the files of a clone.

    Every include pattern has to match the enumerated path. Duplicates are
    dropped, then `.git` internals, files above `max_file_size` (when it is
    at least 1) and empty files are skipped.

    Args:
        clone_dir (Path): the clone directory
        include_patterns (str): comma list of wildcards, all of which must match
        max_file_size (int): size limit in bytes, 0 for none

    Returns:
        list[FileCandidate]: the surviving files, in enumeration order
    """
    patterns = split_patterns(include_patterns)
    paths = [p for p in walk_files(clone_dir) if matches_all(p.replace("\\", "/"), patterns)]
    paths = list(dict.fromkeys(paths))

    out: list[FileCandidate] = []
    for cand in make_candidates(paths, clone_dir):
        if cand.is_git_internal:
            continue
        if cand.exceeds(max_file_size):
            logger.info("file_skipped_too_big", path=cand.path, size=cand.size)
            continue
        if cand.is_empty:
            continue
        out.append(cand)
    return out


def collect_repository(
    url: str,
    include_patterns: str = DEFAULT_INCLUDE,
    exclude_patterns: str = DEFAULT_EXCLUDE,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    cache: CloneCache | None = None,
) -> ExtractionResult:
    """Clone (once) and flatten a repository into delimited text blocks.

    A failed clone is not raised: the returned result carries the failure
    message both as `text` and as `failure`.

    Args:
        url (str): the repository URL
        include_patterns (str): comma list of wildcards a file must all match
        exclude_patterns (str): comma list of wildcards; accepted but not applied
        max_file_size (int): skip files larger than this many bytes, 0 disables
        cache (CloneCache | None): where clones live; defaults to `./cache`

    Returns:
        ExtractionResult: the flattened repository text
    """
    if cache is None:
        cache = DirectoryCloneCache()
    name = repo_name_from_url(url)

    try:
        clone_dir = cache.ensure(url, name)
    except CloneError as e:
        logger.info("clone_failed", url=url, returncode=e.returncode, stderr=e.stderr)
        message = CLONE_FAILURE_TEMPLATE.format(url=url)
        return ExtractionResult(kind=SourceKind.REPOSITORY, text=message, failure=message)

    # TODO: apply exclude patterns to the candidates; they are only logged for now.
    if exclude_patterns:
        logger.info("exclude_patterns_ignored", patterns=split_patterns(exclude_patterns))

    candidates = select_candidates(clone_dir, include_patterns, max_file_size)
    logger.info("repository_flattened", name=name, files=len(candidates))
    return ExtractionResult(kind=SourceKind.REPOSITORY, text=build_repository_text(candidates))


def extract_repository(
    url: str,
    include_patterns: str = DEFAULT_INCLUDE,
    exclude_patterns: str = DEFAULT_EXCLUDE,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    cache: CloneCache | None = None,
) -> str:
    """Return the flattened repository text, or the clone failure message."""
    return collect_repository(url, include_patterns, exclude_patterns, max_file_size, cache).text
