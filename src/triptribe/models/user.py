from pydantic import Field, field_validator

from triptribe.models.base import RecordModel, UtcDatetime
from triptribe.models.trip import normalize_email


class User(RecordModel):
    uid: str
    display_name: str
    email: str
    photo_url: str | None = Field(default=None, alias="photoURL")
    phone_number: str | None = None
    created_at: UtcDatetime

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        # Stored lowercased so invitation acceptance can match by equality.
        return normalize_email(value)
