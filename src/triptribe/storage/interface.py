from abc import ABC, abstractmethod


def activity_photo_key(trip_id: str, activity_id: str) -> str:
    return f"trip_activities/{trip_id}/{activity_id}.jpg"


def user_photo_key(user_id: str) -> str:
    return f"user_photos/{user_id}/profile.jpg"


class BlobStore(ABC):
    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return its download URL."""

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    def owns(self, url: str) -> bool:
        """Whether ``url`` points into this store (external links are never deleted)."""
