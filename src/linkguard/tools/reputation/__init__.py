"""Remote URL reputation lookup."""

from linkguard.tools.reputation.client import (
    ReputationClient,
    ReputationPolicy,
    ReputationProvider,
    ReputationVerdict,
)

__all__ = ["ReputationClient", "ReputationPolicy", "ReputationProvider", "ReputationVerdict"]
