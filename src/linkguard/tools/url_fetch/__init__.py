"""Bounded page fetch and description extraction."""

from linkguard.tools.url_fetch.service import (
    FAILED_DESCRIPTION,
    NO_DESCRIPTION,
    ContentFetcher,
    FetchPolicy,
    FetchResult,
    PageFetcher,
    build_description,
    extract_page_content,
)

__all__ = [
    "FAILED_DESCRIPTION",
    "NO_DESCRIPTION",
    "ContentFetcher",
    "FetchPolicy",
    "FetchResult",
    "PageFetcher",
    "build_description",
    "extract_page_content",
]
