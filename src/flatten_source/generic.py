from __future__ import annotations

from pathlib import Path

import httpx

from flatten_source.logging import logger
from flatten_source.output_construction import collapse_whitespace


def load_text(location: str) -> str:
    """Read raw text from a URL (`http...` or `www....`) or an existing local file.

    Local files are decoded as UTF-8 (BOM stripped, undecodable bytes
    replaced). Returns "" when `location` is neither. Network and I/O errors
    propagate.
    """
    if location.startswith(("http", "www.")):
        with httpx.Client(follow_redirects=True, timeout=None) as client:
            response = client.get(location)
            response.raise_for_status()
            return response.text
    path = Path(location)
    if path.is_file():
        return path.read_text(encoding="utf-8-sig", errors="replace")
    logger.info("generic_source_not_found", location=location)
    return ""


def extract_generic(location: str) -> str:
    """Return the text behind `location` with whitespace normalized."""
    return collapse_whitespace(load_text(location))
