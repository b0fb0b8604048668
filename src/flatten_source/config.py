from __future__ import annotations

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_INCLUDE = "*.c"
DEFAULT_EXCLUDE = ""
DEFAULT_MAX_FILE_SIZE = 22_000
DEFAULT_CACHE_DIR = "cache"
DEFAULT_LANGUAGES: tuple[str, ...] = ("en",)

TRANSCRIPT_NOISE_MARKER = "[Music]"
CLONE_FAILURE_TEMPLATE = "Failure to clone repository at `{url}`"
GIT_DIR_PREFIX = ".git"


class SourceKind(StrEnum):
    """Kind of source an input URL or path points to."""

    VIDEO = auto()
    REPOSITORY = auto()
    DOCUMENT = auto()
    GENERIC = auto()


class ClassifiedSource(BaseModel):
    """Outcome of classifying a command-line source.

    Attributes:
        kind: The detected source kind.
        video_id: Video identifier, only meaningful for `SourceKind.VIDEO`.
        url: The source, normalized for its kind (repositories get a `.git` suffix).
    """

    model_config = ConfigDict(frozen=True)

    kind: SourceKind = Field(default=SourceKind.GENERIC, description="Detected source kind")
    video_id: str = Field(default="", description="Video identifier (video sources only)")
    url: str = Field(default="", description="Normalized source URL or path")


class FileCandidate(BaseModel):
    """A file discovered while walking a cloned repository.

    Attributes:
        path: Forward-slash path as enumerated, e.g. `cache/demo/src/main.c`.
        rel: Path relative to the clone root.
        size: File size in bytes.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Enumerated path with forward slashes")
    rel: str = Field(..., description="Path relative to the clone root")
    size: int = Field(..., ge=0, description="File size in bytes")

    @computed_field
    @property
    def name(self) -> str:
        """Final path component, used in the end-of-file delimiter."""
        return self.path.rsplit("/", 1)[-1]

    @computed_field
    @property
    def is_git_internal(self) -> bool:
        """Whether the file lives in the repository's `.git` area."""
        return self.rel.startswith(GIT_DIR_PREFIX)

    @computed_field
    @property
    def is_empty(self) -> bool:
        """Whether the file has no content at all."""
        return self.size == 0

    def exceeds(self, max_file_size: int) -> bool:
        """Check the size threshold; anything below 1 means no limit."""
        return max_file_size >= 1 and self.size > max_file_size


class ExtractionResult(BaseModel):
    """Text produced for one source, plus an optional failure description.

    `text` is always what gets written to standard output. Extractors that
    recover from an error still report it through `failure`.
    """

    model_config = ConfigDict(frozen=True)

    kind: SourceKind
    text: str = ""
    failure: str | None = None

    @computed_field
    @property
    def ok(self) -> bool:
        return self.failure is None
