"""URL domain extraction and models."""

from linkguard.domain.url.extract import (
    URL_PATTERN,
    canonicalize_url,
    extract_urls,
    is_parseable_https,
)
from linkguard.domain.url.models import UrlAnalysis, utc_now

__all__ = [
    "URL_PATTERN",
    "UrlAnalysis",
    "canonicalize_url",
    "extract_urls",
    "is_parseable_https",
    "utc_now",
]
