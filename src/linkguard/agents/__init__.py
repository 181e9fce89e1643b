"""Service facade, wiring and rationale generation."""

from linkguard.agents.build import create_service, runtime_info
from linkguard.agents.rationale import RationaleGenerator, RationaleProvider
from linkguard.agents.service import SafetyService

__all__ = ["RationaleGenerator", "RationaleProvider", "SafetyService", "create_service", "runtime_info"]
