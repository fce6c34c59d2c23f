from datetime import datetime, timedelta

import pytest
from conftest import T0

from triptribe.errors import ErrorCode, ValidationError
from triptribe.services.validation import (
    MIN_ACTIVITY_DURATION,
    validate_activity_form,
    validate_invite_emails,
    validate_trip_form,
)

TRIP_END = T0 + timedelta(days=3)


def _activity(**overrides):
    args = dict(
        name="Museum",
        location="Downtown",
        start_date_time=T0 + timedelta(hours=1),
        duration=timedelta(hours=1),
        trip_start=T0,
        trip_end=TRIP_END,
        link_url=None,
    )
    args.update(overrides)
    validate_activity_form(**args)


def _code(fn, *args, **kwargs):
    with pytest.raises(ValidationError) as exc:
        fn(*args, **kwargs)
    return exc.value.code


# --- Trip form ---


def test_valid_trip_form():
    validate_trip_form("Lisbon", "Portugal", T0, TRIP_END)


def test_trip_form_blank_fields():
    assert _code(validate_trip_form, "  ", "Portugal", T0, TRIP_END) == ErrorCode.MISSING_FIELD
    assert _code(validate_trip_form, "Lisbon", "", T0, TRIP_END) == ErrorCode.MISSING_FIELD


def test_trip_form_end_must_be_after_start():
    assert _code(validate_trip_form, "Lisbon", "Portugal", T0, T0) == ErrorCode.INVALID_DATE_RANGE
    assert _code(validate_trip_form, "Lisbon", "Portugal", TRIP_END, T0) == ErrorCode.INVALID_DATE_RANGE


# --- Activity form ---


def test_valid_activity_form():
    _activity(link_url="https://example.com/tickets")


def test_activity_may_fill_trip_exactly():
    _activity(start_date_time=T0, duration=TRIP_END - T0)


def test_activity_blank_fields():
    assert _code(_activity, name="") == ErrorCode.MISSING_FIELD
    assert _code(_activity, location=" ") == ErrorCode.MISSING_FIELD


def test_activity_outside_trip():
    assert _code(_activity, start_date_time=T0 - timedelta(minutes=1)) == ErrorCode.ACTIVITY_OUT_OF_RANGE
    assert _code(_activity, start_date_time=TRIP_END - timedelta(minutes=30)) == ErrorCode.ACTIVITY_OUT_OF_RANGE


def test_activity_minimum_duration():
    _activity(duration=MIN_ACTIVITY_DURATION)
    assert _code(_activity, duration=timedelta(minutes=14)) == ErrorCode.DURATION_TOO_SHORT


@pytest.mark.parametrize("url", ["example.com", "ftp://example.com/x", "https://"])
def test_activity_invalid_link(url):
    assert _code(_activity, link_url=url) == ErrorCode.INVALID_URL


# --- Invite emails ---


def test_invite_emails_normalized_and_deduplicated():
    emails = validate_invite_emails([" Bob@Example.com", "bob@example.com", "", "carol@example.org"])
    assert emails == ["bob@example.com", "carol@example.org"]


def test_invite_emails_rejects_bad_address():
    assert _code(validate_invite_emails, ["bob@example.com", "not-an-email"]) == ErrorCode.INVALID_EMAIL


@pytest.mark.parametrize("email", ["a@b..com", "a@-x.com", 'a"b@x.com', ".a@x.com", "bob@", "@example.com"])
def test_invite_emails_rejects_malformed_addresses(email):
    assert _code(validate_invite_emails, [email]) == ErrorCode.INVALID_EMAIL


def test_invite_emails_accepts_single_string():
    assert validate_invite_emails("Dana@Example.com") == ["dana@example.com"]


# --- Naive and aware datetimes ---


def test_trip_form_mixes_naive_and_aware_dates():
    naive_end = datetime(2026, 6, 4, 9, 0)
    validate_trip_form("Lisbon", "Portugal", T0, naive_end)
    assert _code(validate_trip_form, "Lisbon", "Portugal", T0, datetime(2026, 6, 1, 9, 0)) == ErrorCode.INVALID_DATE_RANGE


def test_activity_form_naive_start_against_aware_trip():
    _activity(start_date_time=datetime(2026, 6, 2, 10, 0))
    assert _code(_activity, start_date_time=datetime(2026, 5, 31, 10, 0)) == ErrorCode.ACTIVITY_OUT_OF_RANGE
