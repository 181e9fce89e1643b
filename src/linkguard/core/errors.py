"""Custom exceptions for linkguard."""


class LinkguardError(Exception):
    """Base exception for application-level errors."""


class ConfigError(LinkguardError):
    """Raised when configuration cannot be loaded or validated."""


class InputError(LinkguardError):
    """Raised when a caller supplies input that cannot be scored."""


class TransportError(LinkguardError):
    """TLS, certificate or DNS failure while validating a URL."""


class FetchError(LinkguardError):
    """Page could not be fetched or parsed."""


class ReputationError(LinkguardError):
    """Reputation provider returned no usable verdict."""

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class RationaleError(LinkguardError):
    """Natural-language rationale provider failed."""


class LexiconLoadError(LinkguardError):
    """A lexicon resource file could not be read."""
