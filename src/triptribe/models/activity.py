from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import Field, field_serializer, field_validator

from triptribe.models.base import RecordModel, UtcDatetime


class ActivityCategory(str, Enum):
    SIGHTSEEING = "Sightseeing"
    DINING = "Dining"
    ADVENTURE = "Adventure"
    RELAXATION = "Relaxation"
    CULTURAL = "Cultural"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    TRANSPORTATION = "Transportation"
    ACCOMMODATION = "Accommodation"
    OTHER = "Other"

    @property
    def icon_name(self) -> str:
        return _CATEGORY_ICONS[self]


_CATEGORY_ICONS: dict[ActivityCategory, str] = {
    ActivityCategory.SIGHTSEEING: "binoculars",
    ActivityCategory.DINING: "fork.knife",
    ActivityCategory.ADVENTURE: "figure.hiking",
    ActivityCategory.RELAXATION: "beach.umbrella",
    ActivityCategory.CULTURAL: "building.columns",
    ActivityCategory.SHOPPING: "bag",
    ActivityCategory.ENTERTAINMENT: "ticket",
    ActivityCategory.TRANSPORTATION: "car",
    ActivityCategory.ACCOMMODATION: "house",
    ActivityCategory.OTHER: "ellipsis.circle",
}


class Activity(RecordModel):
    id: str
    trip_id: str
    creator_id: str
    name: str
    location: str
    start_date_time: UtcDatetime
    duration: timedelta
    category: ActivityCategory = ActivityCategory.OTHER
    photo_url: str | None = Field(default=None, alias="photoURL")
    link_url: str | None = Field(default=None, alias="linkURL")
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @field_validator("category", mode="before")
    @classmethod
    def unknown_category_is_other(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in {c.value for c in ActivityCategory}:
            return ActivityCategory.OTHER
        return value

    @field_serializer("duration")
    def serialize_duration(self, value: timedelta) -> int:
        """Stored as whole seconds."""
        return int(value.total_seconds())

    @property
    def end_date_time(self) -> datetime:
        return self.start_date_time + self.duration
