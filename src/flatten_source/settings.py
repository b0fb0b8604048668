from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field

from flatten_source.config import (
    DEFAULT_CACHE_DIR,
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DEFAULT_LANGUAGES,
    DEFAULT_MAX_FILE_SIZE,
    TRANSCRIPT_NOISE_MARKER,
)

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "FLATTEN_SOURCE_"
_LIST_FIELDS = frozenset({"languages"})


class Settings(BaseModel):
    """Configuration settings for the flatten_source command."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: str = Field(default="", description="URL or local path to flatten.")
    include: str = Field(
        default=DEFAULT_INCLUDE,
        description="Comma list of wildcards a repository file must all match.",
    )
    # Accepted and carried through, but repository extraction does not apply it yet.
    exclude: str = Field(
        default=DEFAULT_EXCLUDE,
        description="Comma list of wildcards to exclude (currently inert).",
    )
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        ge=0,
        description="Skip repository files larger than this many bytes; 0 disables.",
    )
    cache_dir: Path = Field(
        default=Path(DEFAULT_CACHE_DIR),
        description="Directory holding one clone per repository name.",
    )
    languages: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LANGUAGES),
        description="Preferred transcript languages, in order.",
    )
    noise_marker: str = Field(
        default=TRANSCRIPT_NOISE_MARKER,
        description="Marker stripped from transcript text.",
    )
    log_file: str = Field(default="", description="Log file path.")
    verbose: bool = Field(default=False, description="Log at INFO level.")


def env_defaults(env_file: str | Path | None = None) -> dict[str, str | list[str]]:
    """Collect `FLATTEN_SOURCE_*` overrides from a `.env` file and the environment.

    The process environment wins over the `.env` file. Keys are returned
    lower-cased and without the prefix, e.g. `FLATTEN_SOURCE_CACHE_DIR` becomes
    `cache_dir`.

    Args:
        env_file: `.env` file to read. Defaults to the one found from the working directory.

    Returns:
        dict[str, str | list[str]]: the overrides, keyed by `Settings` field name
    """
    path = ENV_FILE if env_file is None else str(env_file)
    merged: dict[str, str | None] = {}
    if path:
        merged.update(dotenv_values(path))
    merged.update(os.environ)

    out: dict[str, str | list[str]] = {}
    for key, value in merged.items():
        if value is None or not key.startswith(ENV_PREFIX):
            continue
        name = key.removeprefix(ENV_PREFIX).lower()
        if name in _LIST_FIELDS:
            out[name] = [v.strip() for v in value.split(",") if v.strip()]
        elif name in Settings.model_fields:
            out[name] = value
    return out
