from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from youtube_transcript_api import YouTubeTranscriptApi

from flatten_source.config import DEFAULT_LANGUAGES, ExtractionResult, SourceKind
from flatten_source.logging import logger
from flatten_source.output_construction import join_segments

if TYPE_CHECKING:
    from collections.abc import Sequence


def fetch_transcript(
    video_id: str,
    languages: Sequence[str] = DEFAULT_LANGUAGES,
) -> ExtractionResult:
    """Fetch the captions of a video and join them into one string.

    Any error is reported on stderr and turned into an empty result whose
    `failure` holds the error message.

    Known issue: the provider can fail when several caption tracks share the
    same language code. Such failures surface through the same path.

    Args:
        video_id (str): the video identifier
        languages (Sequence[str]): preferred caption languages, in order

    Returns:
        ExtractionResult: the joined caption text, or an empty text with `failure` set
    """
    try:
        fetched = YouTubeTranscriptApi().fetch(video_id, languages=list(languages))
        text = join_segments(snippet.text for snippet in fetched)
    except Exception as e:
        details = "".join(traceback.format_exception(e))
        print(f"Error retrieving transcript: {details} | {e}", file=sys.stderr)
        logger.info("transcript_failed", video_id=video_id, error=str(e))
        return ExtractionResult(kind=SourceKind.VIDEO, text="", failure=str(e))

    logger.info("transcript_fetched", video_id=video_id, chars=len(text))
    return ExtractionResult(kind=SourceKind.VIDEO, text=text)


def extract_transcript(video_id: str, languages: Sequence[str] = DEFAULT_LANGUAGES) -> str:
    """Return the caption text of a video, or "" when it cannot be retrieved."""
    return fetch_transcript(video_id, languages).text
