from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from triptribe.errors import BackendError, ErrorCode
from triptribe.storage import S3BlobStore, activity_photo_key, user_photo_key


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def s3_store(client):
    return S3BlobStore(client, "triptribe-media", "https://triptribe-media.s3.us-east-1.amazonaws.com/")


def test_photo_keys():
    assert activity_photo_key("t1", "a1") == "trip_activities/t1/a1.jpg"
    assert user_photo_key("u1") == "user_photos/u1/profile.jpg"


def test_owns_only_urls_under_base(s3_store):
    assert s3_store.owns("https://triptribe-media.s3.us-east-1.amazonaws.com/trip_activities/t1/a1.jpg")
    assert not s3_store.owns("https://cdn.other.com/pic.jpg")
    assert not s3_store.owns("https://triptribe-media.s3.us-east-1.amazonaws.com.evil.com/x.jpg")


@pytest.mark.asyncio
async def test_upload_returns_public_url(s3_store, client):
    url = await s3_store.upload("user_photos/u1/profile.jpg", b"jpeg", "image/jpeg")

    assert url == "https://triptribe-media.s3.us-east-1.amazonaws.com/user_photos/u1/profile.jpg"
    client.put_object.assert_called_once_with(
        Bucket="triptribe-media",
        Key="user_photos/u1/profile.jpg",
        Body=b"jpeg",
        ContentType="image/jpeg",
    )


@pytest.mark.asyncio
async def test_upload_failure_is_storage_error(s3_store, client):
    client.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")

    with pytest.raises(BackendError) as exc:
        await s3_store.upload("k.jpg", b"x", "image/jpeg")
    assert exc.value.code == ErrorCode.STORAGE_ERROR


@pytest.mark.asyncio
async def test_delete(s3_store, client):
    await s3_store.delete("trip_activities/t1/a1.jpg")
    client.delete_object.assert_called_once_with(Bucket="triptribe-media", Key="trip_activities/t1/a1.jpg")


@pytest.mark.asyncio
async def test_delete_failure_is_storage_error(s3_store, client):
    client.delete_object.side_effect = ClientError({"Error": {"Code": "NoSuchBucket"}}, "DeleteObject")

    with pytest.raises(BackendError) as exc:
        await s3_store.delete("k.jpg")
    assert exc.value.code == ErrorCode.STORAGE_ERROR
