"""
community_core.config_enums - Enums related to client configuration.
"""

from __future__ import annotations

from enum import Enum

# Mini program envVersion values as reported by the host runtime
_ENV_VERSION_ALIASES = {
    "develop": "development",
    "trial": "staging",
    "release": "production",
}


class Environment(str, Enum):
    """Deployment stage of the client; production switches logs to JSON."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"

    @classmethod
    def _missing_(cls, value: object) -> Environment | None:
        if isinstance(value, str):
            alias = _ENV_VERSION_ALIASES.get(value.strip().lower())
            if alias is not None:
                return cls(alias)
        return None
