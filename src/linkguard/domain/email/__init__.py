"""Email domain contracts."""

from linkguard.domain.email.models import BulkSpamAnalysis, EmailSpamRequest, LinkResult, SpamAnalysis

__all__ = ["BulkSpamAnalysis", "EmailSpamRequest", "LinkResult", "SpamAnalysis"]
