"""flatten_source: turn videos, repositories, PDFs and web pages into plain text."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("flatten-source")
except PackageNotFoundError:
    __version__ = "0.0.0"
