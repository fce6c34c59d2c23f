"""Shared test fixtures for TripTribe."""

from __future__ import annotations

import copy
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing (DynamoDB Local doesn't need it)
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from triptribe.auth.interface import AuthProvider, AuthUser  # noqa: E402
from triptribe.db.interface import RecordStore  # noqa: E402
from triptribe.errors import AuthenticationError, BackendError, ErrorCode, NotFoundError  # noqa: E402
from triptribe.services import AccountService, ActivityService, TripService  # noqa: E402
from triptribe.storage.interface import BlobStore  # noqa: E402

T0 = datetime(2026, 6, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryRecordStore(RecordStore):
    """Dict-backed record store that records every call and can inject faults.

    ``fail_on[(operation, collection, doc_id)] = exc`` raises ``exc`` when that
    exact call is made.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.operations: list[tuple[str, str, str]] = []
        self.fail_on: dict[tuple[str, str, str], Exception] = {}

    def _log(self, operation: str, collection: str, doc_id: str = "") -> None:
        self.operations.append((operation, collection, doc_id))
        exc = self.fail_on.get((operation, collection, doc_id))
        if exc is not None:
            raise exc

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        self._log("get", collection, doc_id)
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc)

    async def set(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self._log("set", collection, doc_id)
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(fields)

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self._log("update", collection, doc_id)
        docs = self.collections.get(collection, {})
        if doc_id not in docs:
            raise NotFoundError(f"{collection}/{doc_id} not found")
        docs[doc_id].update(copy.deepcopy(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        self._log("delete", collection, doc_id)
        self.collections.get(collection, {}).pop(doc_id, None)

    async def list(self, collection: str) -> list[dict[str, Any]]:
        self._log("list", collection)
        return [copy.deepcopy(d) for d in self.collections.get(collection, {}).values()]

    async def query(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        self._log("query", collection)
        return [copy.deepcopy(d) for d in self.collections.get(collection, {}).values() if d.get(field) == value]


class FakeBlobStore(BlobStore):
    base_url = "https://media.test"

    def __init__(self) -> None:
        self.blobs: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.fail_delete = False

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        self.blobs[key] = (data, content_type)
        return f"{self.base_url}/{key}"

    async def delete(self, key: str) -> None:
        if self.fail_delete:
            raise BackendError(f"cannot delete {key}", code=ErrorCode.STORAGE_ERROR)
        self.deleted.append(key)
        self.blobs.pop(key, None)

    def owns(self, url: str) -> bool:
        return url.startswith(self.base_url + "/")


class FakeAuthProvider(AuthProvider):
    def __init__(self) -> None:
        super().__init__()
        self.accounts: dict[str, AuthUser] = {}
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.reset_tickets: dict[str, str] = {}

    def add_account(self, user_id: str, email: str, password: str = "secret", display_name: str = "Test User") -> None:
        self.accounts[user_id] = AuthUser(user_id=user_id, email=email, display_name=display_name)
        self.passwords[user_id] = password

    async def authenticate(self, email: str, password: str) -> str:
        for user in self.accounts.values():
            if user.email == email.lower():
                if self.passwords[user.user_id] != password:
                    raise AuthenticationError("bad password", code=ErrorCode.INVALID_CREDENTIALS)
                return user.user_id
        raise AuthenticationError("no such user", code=ErrorCode.USER_NOT_FOUND)

    async def create_user(self, email: str, password: str, display_name: str) -> str:
        if any(u.email == email.lower() for u in self.accounts.values()):
            raise AuthenticationError("taken", code=ErrorCode.EMAIL_IN_USE)
        user_id = f"user_{len(self.accounts) + 1}"
        self.add_account(user_id, email.lower(), password, display_name)
        return user_id

    async def get_user(self, user_id: str) -> AuthUser:
        if user_id not in self.accounts:
            raise AuthenticationError("no such user", code=ErrorCode.USER_NOT_FOUND)
        return self.accounts[user_id]

    async def delete_user(self, user_id: str) -> None:
        self.accounts.pop(user_id, None)

    async def verify_token(self, token: str) -> AuthUser:
        if token not in self.tokens:
            raise AuthenticationError("bad token", code=ErrorCode.INVALID_TOKEN)
        return self.accounts[self.tokens[token]]

    async def create_password_reset_ticket(self, email: str) -> str:
        for user in self.accounts.values():
            if user.email == email.lower():
                ticket = f"reset_{user.user_id}"
                self.reset_tickets[ticket] = user.user_id
                return ticket
        raise AuthenticationError("no such user", code=ErrorCode.USER_NOT_FOUND)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def blobs():
    return FakeBlobStore()


@pytest.fixture
def auth():
    return FakeAuthProvider()


@pytest.fixture
def trip_service(store, clock):
    return TripService(store, clock=clock)


@pytest.fixture
def activity_service(store, blobs, clock):
    return ActivityService(store, blobs, clock=clock)


@pytest.fixture
def account_service(auth, store, blobs, clock):
    return AccountService(auth, store, blobs, clock=clock)


# DynamoDB fixtures
@pytest.fixture
def dynamodb_client():
    """Provide a DynamoDB client for integration tests."""
    import boto3

    from triptribe.config import get_config

    config = get_config()

    return boto3.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint or "http://localhost:8000",
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )


@pytest.fixture
def records_table(dynamodb_client):
    """Provide the TripTribeRecords table name, emptied after each test."""
    table_name = "TripTribeRecords"
    yield table_name

    # Cleanup: scan and delete all items created during test
    response = dynamodb_client.scan(TableName=table_name)
    for item in response.get("Items", []):
        dynamodb_client.delete_item(
            TableName=table_name,
            Key={"collection": item["collection"], "docId": item["docId"]},
        )
