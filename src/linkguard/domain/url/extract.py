"""URL extraction and canonicalization."""

from __future__ import annotations

from urllib.parse import urlparse, urlunparse
import re

URL_PATTERN = re.compile(r"https?://[\w\d\-._~:/?#\[\]@!$&'()*+,;=%]+")
_TRAILING_PUNCTUATION = re.compile(r"[.,;!?]+$")


def extract_urls(text: str, limit: int | None = None) -> list[str]:
    """Extract HTTP(S) URLs from text, in first-seen order, without duplicates."""

    found: list[str] = []
    for match in URL_PATTERN.findall(text or ""):
        if limit is not None and len(found) >= limit:
            break
        url = _TRAILING_PUNCTUATION.sub("", match)
        if url and url not in found:
            found.append(url)
    return found


def canonicalize_url(url: str) -> str:
    """Normalize URL to a stable lowercase scheme and host form."""

    raw = (url or "").strip()
    if not raw:
        return ""
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        return raw
    normalized = parsed._replace(scheme=parsed.scheme.lower(), netloc=parsed.netloc.lower())
    return urlunparse(normalized)


def is_parseable_https(url: str) -> bool:
    try:
        parsed = urlparse((url or "").strip())
        parsed.port  # raises on a malformed port
    except ValueError:
        return False
    return parsed.scheme == "https" and bool(parsed.hostname)
