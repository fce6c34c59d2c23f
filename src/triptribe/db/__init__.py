"""
Record store abstraction and its DynamoDB implementation.
"""

from triptribe.db.dynamo import DynamoRecordStore
from triptribe.db.interface import TRIPS, USERS, RecordStore, trip_activities, user_trips

__all__ = ["DynamoRecordStore", "RecordStore", "TRIPS", "USERS", "trip_activities", "user_trips"]
