"""
Configuration models for the engine.
"""

from dataclasses import dataclass, field
from typing import List

from dateutil import tz

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class EngineConfig:
    """Engine configuration."""

    timezone: str = "America/Vancouver"
    real_deal_threshold: int = 15
    search_limit: int = 5
    happening_now_hours: int = 2
    upcoming_days: int = 30
    date_count_horizon_days: int = 14
    default_kids_age_range: List[int] = field(default_factory=lambda: [0, 18])
    log_level: str = "INFO"
    log_dir: str = "logs"

    def validate(self) -> bool:
        """Validate engine configuration."""
        if not self.timezone or not self.timezone.strip():
            raise ValueError("Timezone cannot be empty")

        if tz.gettz(self.timezone) is None:
            raise ValueError(f"Unknown timezone: {self.timezone}")

        if not isinstance(self.real_deal_threshold, int) or self.real_deal_threshold < 0:
            raise ValueError("Real deal threshold must be a non-negative integer")

        for name in (
            "search_limit",
            "happening_now_hours",
            "upcoming_days",
            "date_count_horizon_days",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer")

        if self.search_limit > 50:
            raise ValueError("Search limit cannot exceed 50")

        kids_range = self.default_kids_age_range
        if not isinstance(kids_range, list) or len(kids_range) != 2:
            raise ValueError("Default kids age range must be a list of two integers")

        if kids_range[0] > kids_range[1]:
            raise ValueError("Default kids age range minimum cannot exceed maximum")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {VALID_LOG_LEVELS}")

        if not self.log_dir or not self.log_dir.strip():
            raise ValueError("Log directory cannot be empty")

        return True

    @property
    def tzinfo(self):
        """Resolved tzinfo for the configured timezone."""
        return tz.gettz(self.timezone)
