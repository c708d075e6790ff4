"""Engine configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Session defaults
    default_time_cap_min: float = 90.0

    # Coach nudge thresholds
    nudge_minutes_slack: float = 0.10
    nudge_ratio_low: float = 0.67
    nudge_ratio_high: float = 1.5

    # Program scoring
    low_attention_threshold: float = 3.0

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
    },
}


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        default_time_cap_min=float(os.getenv("PRGRM_DEFAULT_TIME_CAP_MIN", "90")),
        nudge_minutes_slack=float(os.getenv("PRGRM_NUDGE_MINUTES_SLACK", "0.10")),
        nudge_ratio_low=float(os.getenv("PRGRM_NUDGE_RATIO_LOW", "0.67")),
        nudge_ratio_high=float(os.getenv("PRGRM_NUDGE_RATIO_HIGH", "1.5")),
        low_attention_threshold=float(os.getenv("PRGRM_LOW_ATTENTION_THRESHOLD", "3.0")),
    )
