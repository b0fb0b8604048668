from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FlattenSourceError(Exception):
    """Base exception for errors in the flatten_source package."""


@dataclass(frozen=True)
class CloneError(FlattenSourceError):
    """Raised when a repository cannot be cloned into the cache."""

    url: str
    destination: Path
    returncode: int = 1
    stderr: str = ""


@dataclass(frozen=True)
class GitNotFoundError(CloneError):
    """Raised when no `git` executable is available on PATH."""

    message: str = "The `git` executable could not be found."
