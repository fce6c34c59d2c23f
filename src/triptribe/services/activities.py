"""Activity service: scheduled sub-events stored under ``trips/{tripId}/activities``."""

import base64
import binascii
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

import pydantic

from triptribe.db.interface import RecordStore, trip_activities
from triptribe.errors import ErrorCode, NotFoundError, TripTribeError
from triptribe.models import Activity, ActivityCategory, new_id, utcnow
from triptribe.storage.interface import BlobStore, activity_photo_key

logger = logging.getLogger(__name__)

PHOTO_CONTENT_TYPE = "image/jpeg"


def decode_data_url(data_url: str) -> bytes | None:
    """Payload of a ``data:image/jpeg;base64,...`` URL, or None if it can't be decoded."""
    _, sep, payload = data_url.partition(",")
    if not sep or not payload:
        return None
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None


class ActivityService:
    def __init__(self, store: RecordStore, blobs: BlobStore, clock: Callable[[], datetime] = utcnow) -> None:
        self._store = store
        self._blobs = blobs
        self._clock = clock

    async def create_activity(
        self,
        trip_id: str,
        name: str,
        location: str,
        start_date_time: datetime,
        duration: timedelta,
        category: ActivityCategory,
        creator_id: str,
        photo_data: bytes | None = None,
        link_url: str | None = None,
    ) -> Activity:
        activity_id = new_id()

        photo_url = None
        if photo_data is not None:
            photo_url = await self._blobs.upload(
                activity_photo_key(trip_id, activity_id), photo_data, PHOTO_CONTENT_TYPE
            )

        now = self._clock()
        activity = Activity(
            id=activity_id,
            trip_id=trip_id,
            creator_id=creator_id,
            name=name,
            location=location,
            start_date_time=start_date_time,
            duration=duration,
            category=category,
            photo_url=photo_url,
            link_url=link_url,
            created_at=now,
            updated_at=now,
        )

        await self._store.set(trip_activities(trip_id), activity_id, activity.to_record())
        logger.info("Created activity %s on trip %s", activity_id, trip_id)
        return activity

    async def get_activities(self, trip_id: str) -> list[Activity]:
        activities: list[Activity] = []
        for record in await self._store.list(trip_activities(trip_id)):
            try:
                activities.append(Activity.from_record(record))
            except pydantic.ValidationError:
                logger.warning("Skipping unreadable activity %s on trip %s", record.get("id"), trip_id)
        return sorted(activities, key=lambda a: a.start_date_time)

    async def get_activity(self, activity_id: str, trip_id: str) -> Activity:
        record = await self._store.get(trip_activities(trip_id), activity_id)
        if record is None:
            raise NotFoundError(f"Activity {activity_id} not found", code=ErrorCode.ACTIVITY_NOT_FOUND)
        try:
            return Activity.from_record(record)
        except pydantic.ValidationError as e:
            raise NotFoundError(f"Activity {activity_id} is unreadable", code=ErrorCode.ACTIVITY_NOT_FOUND) from e

    async def update_activity(self, activity: Activity) -> Activity:
        """Persist edits. A ``data:`` photo URL is uploaded and replaced by the stored URL."""
        photo_url = activity.photo_url
        if photo_url is not None and photo_url.startswith("data:"):
            photo_data = decode_data_url(photo_url)
            if photo_data is None:
                logger.warning("Dropping undecodable photo data for activity %s", activity.id)
                photo_url = None
            else:
                photo_url = await self._blobs.upload(
                    activity_photo_key(activity.trip_id, activity.id), photo_data, PHOTO_CONTENT_TYPE
                )

        updated = activity.model_copy(update={"photo_url": photo_url, "updated_at": self._clock()})
        await self._store.update(trip_activities(updated.trip_id), updated.id, updated.to_record())
        return updated

    async def delete_activity(self, activity_id: str, trip_id: str) -> None:
        try:
            activity = await self.get_activity(activity_id, trip_id)
        except NotFoundError:
            logger.warning("Activity %s missing before delete; removing record only", activity_id)
        else:
            if activity.photo_url and self._blobs.owns(activity.photo_url):
                try:
                    await self._blobs.delete(activity_photo_key(trip_id, activity_id))
                except TripTribeError as e:
                    logger.warning("Could not delete photo for activity %s: %s", activity_id, e.message)

        await self._store.delete(trip_activities(trip_id), activity_id)
