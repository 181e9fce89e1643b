"""Safe page fetch and HTML description extraction."""

from __future__ import annotations

from dataclasses import dataclass
import ipaddress
import logging
import socket
import threading
import time
from typing import Protocol
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
import requests

from linkguard.config.settings import FetchSettings
from linkguard.core.errors import FetchError

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"
FAILED_DESCRIPTION = "Unable to scrape content"
MAX_DESCRIPTION_CHARS = 200
MAX_PARAGRAPHS = 3
_SKIP_TEXT_TAGS = ("script", "style", "noscript", "template")


@dataclass(frozen=True)
class FetchPolicy:
    timeout_s: float = 10.0
    max_bytes: int = 2_000_000
    max_redirects: int = 3
    max_text_chars: int = 100_000
    allow_private_network: bool = False
    user_agent: str = "Mozilla/5.0 (compatible; LinkguardFetcher/0.1)"

    @classmethod
    def from_settings(cls, settings: FetchSettings) -> "FetchPolicy":
        return cls(
            timeout_s=settings.timeout_ms / 1000.0,
            max_bytes=settings.max_bytes,
            max_redirects=settings.max_redirects,
            allow_private_network=settings.allow_private_network,
            user_agent=settings.user_agent,
        )


@dataclass(frozen=True)
class FetchResult:
    url: str
    ok: bool
    description: str
    text: str = ""
    title: str = ""
    status_code: int | None = None
    error: str | None = None


class PageFetcher(Protocol):
    def fetch(self, url: str) -> FetchResult: ...


def _is_private_ip(addr: str) -> bool:
    try:
        ip = ipaddress.ip_address(addr)
    except ValueError:
        return False
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_multicast
        or ip.is_reserved
        or ip.is_link_local
        or ip.is_unspecified
    )


def _check_network_target(url: str, allow_private: bool) -> None:
    parsed = urlparse(url.strip())
    if parsed.scheme not in {"http", "https"}:
        raise FetchError("unsupported_scheme")
    host = parsed.hostname or ""
    if not host:
        raise FetchError("missing_host")
    if allow_private:
        return
    try:
        infos = socket.getaddrinfo(host, None)
    except socket.gaierror as exc:
        raise FetchError("dns_resolution_failed") from exc
    for entry in infos:
        if _is_private_ip(str(entry[4][0])):
            raise FetchError("private_network_blocked")


def _clean(value: str | None) -> str:
    return " ".join((value or "").split())


def build_description(parts: list[str]) -> str:
    joined = " ".join(item for item in (_clean(part) for part in parts) if item)
    if not joined:
        return NO_DESCRIPTION
    if len(joined) > MAX_DESCRIPTION_CHARS:
        return joined[: MAX_DESCRIPTION_CHARS - 3] + "..."
    return joined


def extract_page_content(html: str, max_text_chars: int = 100_000) -> tuple[str, str, str]:
    """Return ``(title, description, visible_text)`` for an HTML document."""

    soup = BeautifulSoup(html or "", "html.parser")
    title = _clean(soup.title.get_text()) if soup.title else ""

    meta = soup.find("meta", attrs={"name": lambda value: bool(value) and value.lower() == "description"})
    meta_description = _clean(meta.get("content")) if meta else ""

    h1 = soup.find("h1")
    heading = _clean(h1.get_text(" ")) if h1 else ""

    paragraphs: list[str] = []
    for node in soup.find_all("p"):
        text = _clean(node.get_text(" "))
        if text:
            paragraphs.append(text)
        if len(paragraphs) >= MAX_PARAGRAPHS:
            break

    description = build_description([title, meta_description, heading, " ".join(paragraphs)])

    for node in soup(_SKIP_TEXT_TAGS):
        node.decompose()
    visible = _clean(soup.get_text(" "))[:max_text_chars]
    return title, description, visible


class ContentFetcher:
    def __init__(self, policy: FetchPolicy | None = None, session: requests.Session | None = None) -> None:
        self.policy = policy or FetchPolicy()
        self._session = session or requests.Session()

    def fetch(self, url: str) -> FetchResult:
        clean_url = (url or "").strip()
        try:
            if not clean_url:
                raise FetchError("empty_url")
            status_code, html = self._download(clean_url)
            title, description, text = extract_page_content(html, self.policy.max_text_chars)
        except FetchError as exc:
            logger.warning("Content fetch failed for %s: %s", clean_url, exc)
            return FetchResult(url=clean_url, ok=False, description=FAILED_DESCRIPTION, error=str(exc))
        return FetchResult(
            url=clean_url,
            ok=True,
            description=description,
            text=text,
            title=title,
            status_code=status_code,
        )

    def _download(self, url: str) -> tuple[int, str]:
        deadline = time.monotonic() + self.policy.timeout_s
        current = url
        for _ in range(self.policy.max_redirects + 1):
            _check_network_target(current, self.policy.allow_private_network)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise FetchError("timeout")
            try:
                response = self._session.get(
                    current,
                    headers={"User-Agent": self.policy.user_agent},
                    timeout=remaining,
                    stream=True,
                    allow_redirects=False,
                )
            except requests.RequestException as exc:
                raise FetchError(f"network_error: {type(exc).__name__}") from exc
            if response.is_redirect:
                location = response.headers.get("Location", "")
                response.close()
                current = urljoin(current, location)
                logger.debug("Following redirect to %s", current)
                continue
            return self._read_body(response, deadline)
        raise FetchError("too_many_redirects")

    def _read_body(self, response: requests.Response, deadline: float) -> tuple[int, str]:
        expired = threading.Event()
        watchdog = threading.Timer(max(0.0, deadline - time.monotonic()), _abort_read, args=(response, expired))
        watchdog.daemon = True
        watchdog.start()
        chunks: list[bytes] = []
        total = 0
        try:
            with response:
                if not 200 <= response.status_code < 300:
                    raise FetchError(f"http_error: {response.status_code}")
                try:
                    for block in response.iter_content(chunk_size=65536):
                        if expired.is_set() or time.monotonic() > deadline:
                            raise FetchError("timeout")
                        chunks.append(block)
                        total += len(block)
                        if total >= self.policy.max_bytes:
                            break
                except (requests.RequestException, OSError, ValueError) as exc:
                    if expired.is_set():
                        raise FetchError("timeout") from exc
                    raise FetchError(f"network_error: {type(exc).__name__}") from exc
                if expired.is_set():
                    raise FetchError("timeout")
                encoding = response.encoding or "utf-8"
        finally:
            watchdog.cancel()
        raw = b"".join(chunks)[: self.policy.max_bytes]
        try:
            return response.status_code, raw.decode(encoding, errors="replace")
        except LookupError:
            return response.status_code, raw.decode("utf-8", errors="replace")


def _abort_read(response: requests.Response, expired: threading.Event) -> None:
    """Shut the socket under a streamed body so a blocked read returns."""

    expired.set()
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        logger.debug("Socket already closed when the fetch deadline expired")
