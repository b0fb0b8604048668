from __future__ import annotations

import io
from pathlib import Path

import httpx
from pypdf import PdfReader

from flatten_source.logging import logger
from flatten_source.output_construction import join_pages


def load_document_bytes(location: str) -> bytes | None:
    """Fetch the raw bytes of a document from the network or from disk.

    Anything containing `http` is downloaded; otherwise an existing local
    file is read. Network errors propagate.

    Args:
        location (str): URL or local path

    Returns:
        bytes | None: the document bytes, or None when `location` is neither
    """
    if "http" in location:
        with httpx.Client(follow_redirects=True, timeout=None) as client:
            response = client.get(location)
            response.raise_for_status()
            return response.content
    path = Path(location)
    if path.is_file():
        return path.read_bytes()
    return None


def extract_document(location: str) -> str:
    """Return the text of every page of a PDF, each page followed by a newline.

    Parsing and network errors are not caught.

    Args:
        location (str): URL or local path of the PDF

    Returns:
        str: the page texts in page order, or "" when nothing could be loaded
    """
    data = load_document_bytes(location)
    if data is None:
        logger.info("document_not_found", location=location)
        return ""

    with io.BytesIO(data) as buffer:
        reader = PdfReader(buffer)
        pages = len(reader.pages)
        text = join_pages(page.extract_text() for page in reader.pages)
    logger.info("document_extracted", location=location, pages=pages)
    return text
