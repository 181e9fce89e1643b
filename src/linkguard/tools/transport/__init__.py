"""HTTPS and certificate-chain validation."""

from linkguard.tools.transport.tls import TransportReport, TransportValidator, fetch_certificate_chain

__all__ = ["TransportReport", "TransportValidator", "fetch_certificate_chain"]
