"""HTTPS transport checks: scheme plus a currently-valid certificate chain."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import socket
import ssl
import time
from typing import Any, Callable
from urllib.parse import urlparse

from cryptography import x509

from linkguard.core.errors import TransportError

logger = logging.getLogger(__name__)

CertificateChainLoader = Callable[[str, int, float], list[dict[str, Any]]]


@dataclass(frozen=True)
class TransportReport:
    url: str
    scheme_ok: bool
    chain_length: int = 0
    all_valid: bool = False
    error: str | None = None

    @property
    def is_secure(self) -> bool:
        return self.scheme_ok and self.chain_length > 0 and self.all_valid and self.error is None


def _certificate_info(der: bytes) -> dict[str, Any]:
    cert = x509.load_der_x509_certificate(der)
    return {
        "subject": cert.subject.rfc4514_string(),
        "notBefore": cert.not_valid_before_utc.timestamp(),
        "notAfter": cert.not_valid_after_utc.timestamp(),
    }


def fetch_certificate_chain(
    host: str,
    port: int,
    timeout_s: float,
    context: ssl.SSLContext | None = None,
) -> list[dict[str, Any]]:
    """Handshake with a verifying context and return the chain as cert dicts.

    ``get_verified_chain`` yields DER blobs where the interpreter has it;
    older interpreters only expose the leaf.
    """

    ctx = context or ssl.create_default_context()
    try:
        with socket.create_connection((host, port), timeout=timeout_s) as sock:
            with ctx.wrap_socket(sock, server_hostname=host) as ssock:
                chain_getter = getattr(ssock, "get_verified_chain", None)
                if chain_getter is not None:
                    blobs = [bytes(item) for item in chain_getter()]
                else:
                    leaf = ssock.getpeercert(binary_form=True)
                    blobs = [leaf] if leaf else []
        return [_certificate_info(blob) for blob in blobs]
    except (OSError, ssl.SSLError, ValueError) as exc:
        raise TransportError(f"{type(exc).__name__}: {exc}") from exc


def _cert_time(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    return float(ssl.cert_time_to_seconds(str(value)))


def _cert_window_ok(cert: dict[str, Any], now: float) -> bool:
    not_before = cert.get("notBefore")
    not_after = cert.get("notAfter")
    if not not_before or not not_after:
        return False
    try:
        start = _cert_time(not_before)
        end = _cert_time(not_after)
    except ValueError:
        return False
    return start <= now <= end


class TransportValidator:
    def __init__(
        self,
        timeout_s: float = 5.0,
        chain_loader: CertificateChainLoader | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.timeout_s = timeout_s
        self._chain_loader = chain_loader or fetch_certificate_chain
        self._clock = clock or time.time

    def inspect(self, url: str) -> TransportReport:
        try:
            parsed = urlparse((url or "").strip())
            host = parsed.hostname
            port = parsed.port or 443
        except ValueError as exc:
            return TransportReport(url=url, scheme_ok=False, error=f"invalid_url: {exc}")
        if parsed.scheme != "https":
            return TransportReport(url=url, scheme_ok=False, error="not_https")
        if not host:
            return TransportReport(url=url, scheme_ok=True, error="missing_host")
        try:
            chain = self._chain_loader(host, port, self.timeout_s)
        except TransportError as exc:
            logger.warning("TLS validation failed for %s: %s", url, exc)
            return TransportReport(url=url, scheme_ok=True, error=str(exc))
        now = self._clock()
        all_valid = bool(chain) and all(_cert_window_ok(cert, now) for cert in chain)
        if not all_valid:
            logger.info("Certificate chain for %s is empty or outside its validity window", url)
        return TransportReport(url=url, scheme_ok=True, chain_length=len(chain), all_valid=all_valid)

    def is_secure(self, url: str) -> bool:
        return self.inspect(url).is_secure
