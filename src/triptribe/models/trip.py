from enum import Enum

from pydantic import Field, field_validator

from triptribe.models.base import RecordModel, UtcDatetime


class ParticipantRole(str, Enum):
    CREATOR = "creator"
    ADMIN = "admin"
    MEMBER = "member"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    # Defined for stored data compatibility; nothing transitions into it.
    EXPIRED = "expired"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class Participant(RecordModel):
    user_id: str
    role: ParticipantRole
    joined_at: UtcDatetime


class Invitation(RecordModel):
    id: str
    email: str
    status: InvitationStatus = InvitationStatus.PENDING
    message: str | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return normalize_email(value)

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING


class Trip(RecordModel):
    id: str
    creator_id: str
    name: str
    destination: str
    start_date: UtcDatetime
    end_date: UtcDatetime
    description: str | None = None
    participants: list[Participant] = Field(default_factory=list)
    invitations: list[Invitation] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime

    def participant(self, user_id: str) -> Participant | None:
        return next((p for p in self.participants if p.user_id == user_id), None)

    def invitation(self, invitation_id: str) -> Invitation | None:
        return next((i for i in self.invitations if i.id == invitation_id), None)

    def has_pending_invitation_for(self, email: str) -> bool:
        email = normalize_email(email)
        return any(i.email == email and i.is_pending for i in self.invitations)


class TripIndexEntry(RecordModel):
    """Row in ``users/{uid}/trips`` pointing a user at a trip they belong to."""

    trip_id: str
    role: ParticipantRole
    created_at: UtcDatetime
