"""Form-level checks run by callers before invoking the services.

The services themselves accept whatever they are given; these helpers are
the single place the trip, activity and invite forms are validated. Naive
datetimes are read as UTC, the same as the models do.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

import pydantic
from pydantic import EmailStr, HttpUrl, TypeAdapter

from triptribe.errors import ErrorCode, ValidationError
from triptribe.models import as_utc, normalize_email

MIN_ACTIVITY_DURATION = timedelta(minutes=15)

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(HttpUrl)


def validate_trip_form(name: str, destination: str, start_date: datetime, end_date: datetime) -> None:
    if not name.strip():
        raise ValidationError("Please enter a trip name", code=ErrorCode.MISSING_FIELD)
    if not destination.strip():
        raise ValidationError("Please enter a destination", code=ErrorCode.MISSING_FIELD)
    if as_utc(end_date) <= as_utc(start_date):
        raise ValidationError("End date must be after start date", code=ErrorCode.INVALID_DATE_RANGE)


def validate_activity_form(
    name: str,
    location: str,
    start_date_time: datetime,
    duration: timedelta,
    trip_start: datetime,
    trip_end: datetime,
    link_url: str | None = None,
) -> None:
    start_date_time, trip_start, trip_end = as_utc(start_date_time), as_utc(trip_start), as_utc(trip_end)

    if not name.strip():
        raise ValidationError("Please enter an activity name", code=ErrorCode.MISSING_FIELD)
    if not location.strip():
        raise ValidationError("Please enter a location", code=ErrorCode.MISSING_FIELD)
    if not trip_start <= start_date_time <= trip_end:
        raise ValidationError("Activity date must be within trip dates", code=ErrorCode.ACTIVITY_OUT_OF_RANGE)
    if start_date_time + duration > trip_end:
        raise ValidationError("Activity duration exceeds trip end date", code=ErrorCode.ACTIVITY_OUT_OF_RANGE)
    if duration < MIN_ACTIVITY_DURATION:
        raise ValidationError("Duration must be at least 15 minutes", code=ErrorCode.DURATION_TOO_SHORT)
    if link_url:
        try:
            _url_adapter.validate_python(link_url)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid URL: {link_url}", code=ErrorCode.INVALID_URL) from e


def validate_invite_emails(emails: Iterable[str]) -> list[str]:
    """Normalized, de-duplicated addresses in input order; blanks are dropped."""
    if isinstance(emails, str):
        emails = [emails]
    normalized = list(dict.fromkeys(normalize_email(e) for e in emails if e.strip()))
    for email in normalized:
        try:
            _email_adapter.validate_python(email)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid email: {email}", code=ErrorCode.INVALID_EMAIL) from e
    return normalized
