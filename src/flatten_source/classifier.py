"""Decide which extractor a command-line source belongs to.

The rule blocks run one after another and a later block overwrites what an
earlier one decided: video markers first, then repository hosts, then the
`.pdf` suffix. A string that trips several blocks (say a `.git` URL on a
video domain) ends up with the last matching kind. That ordering is kept on
purpose so existing invocations keep their output.
"""

from __future__ import annotations

from flatten_source.config import ClassifiedSource, SourceKind
from flatten_source.logging import logger

_REPOSITORY_HOSTS = ("github.com", "gitlab.com")


def _between(text: str, start: str, stop: str = "?") -> str:
    """Return the text after `start` up to the next `stop`, or "" without `start`."""
    _, found, rest = text.partition(start)
    if not found:
        return ""
    return rest.split(stop, 1)[0]


def classify(url: str) -> ClassifiedSource:
    """Classify `url` as a video, repository, document or generic source.

    Substring tests are done on the lower-cased input; ids and the returned
    URL come from the original string.

    Args:
        url (str): URL or local path from the command line

    Returns:
        ClassifiedSource: the kind, the video id (if any) and the normalized URL
    """
    low = url.lower()
    kind = SourceKind.GENERIC
    video_id = ""

    if "youtube.com" in low:
        video_id = _between(url, "?v=")
        kind = SourceKind.VIDEO

    if "youtu.be" in low:
        video_id = _between(url, "youtu.be/")
        kind = SourceKind.VIDEO

    if any(host in low for host in _REPOSITORY_HOSTS) or low.endswith(".git"):
        if not low.endswith(".git"):
            url += ".git"
        kind = SourceKind.REPOSITORY

    if low.endswith(".pdf"):
        kind = SourceKind.DOCUMENT

    logger.info("source_classified", kind=str(kind), video_id=video_id, url=url)
    return ClassifiedSource(kind=kind, video_id=video_id, url=url)
