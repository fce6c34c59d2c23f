"""Value types for trip status and countdown display."""

from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TripStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class TimeComponents(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: int = Field(default=0, ge=0)
    hours: int = Field(default=0, ge=0, le=23)
    minutes: int = Field(default=0, ge=0, le=59)
    seconds: int = Field(default=0, ge=0, le=59)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "TimeComponents":
        """Split a non-negative interval into whole units, dropping fractions of a second."""
        total = max(int(delta.total_seconds()), 0)
        days, rest = divmod(total, 86400)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)
        return cls(days=days, hours=hours, minutes=minutes, seconds=seconds)

    @property
    def is_zero(self) -> bool:
        return self.total_seconds == 0

    @property
    def total_seconds(self) -> int:
        return self.seconds + self.minutes * 60 + self.hours * 3600 + self.days * 86400

    def formatted(self, include_seconds: bool = True) -> str:
        """Render as e.g. ``2d 5h 30m 15s``; leading zero units are omitted."""
        parts: list[str] = []
        if self.days > 0:
            parts.append(f"{self.days}d")
        if self.hours > 0 or self.days > 0:
            parts.append(f"{self.hours}h")
        if self.minutes > 0 or self.hours > 0 or self.days > 0:
            parts.append(f"{self.minutes}m")
        if include_seconds:
            parts.append(f"{self.seconds}s")
        return " ".join(parts)
