"""Configuration loading."""

from linkguard.config.settings import (
    AppConfig,
    FetchSettings,
    JobSettings,
    RationaleSettings,
    ReputationSettings,
    SpamSettings,
    TransportSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "FetchSettings",
    "JobSettings",
    "RationaleSettings",
    "ReputationSettings",
    "SpamSettings",
    "TransportSettings",
    "load_config",
]
