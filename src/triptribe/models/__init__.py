"""
Pydantic models for TripTribe.
"""

from triptribe.models.activity import Activity, ActivityCategory
from triptribe.models.base import RecordModel, as_utc, new_id, utcnow
from triptribe.models.status import TimeComponents, TripStatus
from triptribe.models.trip import (
    Invitation,
    InvitationStatus,
    Participant,
    ParticipantRole,
    Trip,
    TripIndexEntry,
    normalize_email,
)
from triptribe.models.user import User

__all__ = [
    "Activity",
    "ActivityCategory",
    "Invitation",
    "InvitationStatus",
    "Participant",
    "ParticipantRole",
    "RecordModel",
    "TimeComponents",
    "Trip",
    "TripIndexEntry",
    "TripStatus",
    "User",
    "as_utc",
    "new_id",
    "normalize_email",
    "utcnow",
]
