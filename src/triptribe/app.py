"""Explicit wiring of services to their collaborators.

Built once at startup and passed to whatever needs it; nothing reaches into
shared module state for a repository.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from triptribe.auth.interface import AuthProvider, get_auth_provider
from triptribe.clients import get_dynamo_client, get_s3_client
from triptribe.config import Config, get_config
from triptribe.db.dynamo import DynamoRecordStore
from triptribe.db.interface import RecordStore
from triptribe.models import Trip
from triptribe.services.accounts import AccountService
from triptribe.services.activities import ActivityService
from triptribe.services.status import CountdownSnapshot, CountdownTicker
from triptribe.services.trips import TripService
from triptribe.storage.interface import BlobStore
from triptribe.storage.s3 import S3BlobStore


@dataclass(frozen=True)
class Services:
    config: Config
    accounts: AccountService
    trips: TripService
    activities: ActivityService

    def countdown_for(self, trip: Trip, on_tick: Callable[[CountdownSnapshot], None]) -> CountdownTicker:
        return CountdownTicker.for_trip(trip, on_tick, interval=self.config.countdown_interval_seconds)


def build_services(
    config: Config | None = None,
    *,
    store: RecordStore | None = None,
    blobs: BlobStore | None = None,
    auth: AuthProvider | None = None,
) -> Services:
    """Construct every service. Collaborators not passed in are built from ``config``."""
    config = config or get_config()
    logging.getLogger("triptribe").setLevel(config.log_level.upper())

    store = store or DynamoRecordStore(get_dynamo_client(), config.records_table)
    blobs = blobs or S3BlobStore(get_s3_client(), config.media_bucket, config.media_base_url)
    auth = auth or get_auth_provider()

    return Services(
        config=config,
        accounts=AccountService(auth, store, blobs),
        trips=TripService(store),
        activities=ActivityService(store, blobs),
    )
