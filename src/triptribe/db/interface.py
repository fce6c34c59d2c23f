from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

TRIPS = "trips"
USERS = "users"


def user_trips(user_id: str) -> str:
    """Per-user trip index sub-collection."""
    return f"{USERS}/{user_id}/trips"


def trip_activities(trip_id: str) -> str:
    return f"{TRIPS}/{trip_id}/activities"


class RecordStore(ABC):
    """Document store addressed by collection path and document id.

    Sub-collections are ordinary collections whose path embeds the parent
    document, e.g. ``users/{uid}/trips``.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    @abstractmethod
    async def set(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        """Create or fully replace a document."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        """Overwrite the given fields of an existing document; NotFoundError if it is absent."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""

    @abstractmethod
    async def list(self, collection: str) -> list[dict[str, Any]]: ...

    @abstractmethod
    async def query(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        """Documents in ``collection`` whose ``field`` equals ``value``."""
