"""Blob storage abstraction and its S3 implementation."""

from triptribe.storage.interface import BlobStore, activity_photo_key, user_photo_key
from triptribe.storage.s3 import S3BlobStore

__all__ = ["BlobStore", "S3BlobStore", "activity_photo_key", "user_photo_key"]
