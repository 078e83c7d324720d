import io

import boto3
import pytest
from botocore.stub import Stubber
from fastapi import status
from fastapi.testclient import TestClient

from media_repo.adapters.storage import S3StorageBackend
from media_repo.errors import StorageError
from media_repo.schemas import Category
from tests.consts import (
    TEST_BUCKET_NAME,
    TEST_MP3_CONTENT,
    TEST_MP3_CONTENT_TYPE,
    TEST_MP3_NAME,
    TEST_MP4_CONTENT,
    TEST_MP4_NAME,
    TEST_REGION,
)


@pytest.fixture
def storage(s3_client):
    return S3StorageBackend(TEST_BUCKET_NAME, s3_client, max_results=100)


def test_store_puts_object_under_category_prefix(storage, s3_client):
    stored = storage.store(Category.MUSIC, TEST_MP3_NAME, io.BytesIO(TEST_MP3_CONTENT), TEST_MP3_CONTENT_TYPE)

    assert stored.stored_name.endswith("-my_song.mp3")
    obj = s3_client.get_object(Bucket=TEST_BUCKET_NAME, Key=f"music/{stored.stored_name}")
    assert obj["Body"].read() == TEST_MP3_CONTENT
    assert obj["ContentType"] == TEST_MP3_CONTENT_TYPE
    assert f"music/{stored.stored_name}" in stored.url


def test_video_prefix_is_videos(storage, s3_client):
    stored = storage.store(Category.VIDEO, TEST_MP4_NAME, io.BytesIO(TEST_MP4_CONTENT))

    keys = [obj["Key"] for obj in s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)["Contents"]]
    assert keys == [f"videos/{stored.stored_name}"]


def test_list_returns_names_without_prefix(storage):
    stored = storage.store(Category.VIDEO, TEST_MP4_NAME, io.BytesIO(TEST_MP4_CONTENT))

    [entry] = storage.list(Category.VIDEO)
    assert entry.name == stored.stored_name
    assert storage.list(Category.MUSIC) == []


def test_list_is_truncated_at_max_results(s3_client):
    storage = S3StorageBackend(TEST_BUCKET_NAME, s3_client, max_results=3)
    for i in range(5):
        storage.store(Category.MUSIC, f"track {i}.mp3", io.BytesIO(b"x"))

    # results beyond the bound are silently left out
    assert len(storage.list(Category.MUSIC)) == 3


def test_public_base_url_is_used_when_configured(s3_client):
    storage = S3StorageBackend(
        TEST_BUCKET_NAME,
        s3_client,
        filename_strategy="original",
        public_base_url="https://cdn.example.com/media/",
    )
    stored = storage.store(Category.MUSIC, "my song.mp3", io.BytesIO(b"x"))

    assert stored.url == "https://cdn.example.com/media/music/my_song.mp3"
    [entry] = storage.list(Category.MUSIC)
    assert entry.url == stored.url


def test_missing_bucket_raises_storage_error(s3_client):
    storage = S3StorageBackend("no-such-bucket", s3_client)

    with pytest.raises(StorageError):
        storage.list(Category.MUSIC)
    with pytest.raises(StorageError):
        storage.store(Category.MUSIC, "a.mp3", io.BytesIO(b"x"))


def test_client_error_on_list_is_wrapped():
    s3_client = boto3.client(
        "s3",
        region_name=TEST_REGION,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    storage = S3StorageBackend(TEST_BUCKET_NAME, s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("list_objects_v2", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(StorageError, match="Failed to list music files"):
            storage.list(Category.MUSIC)


def test_upload_and_list_through_api(s3_client_app: TestClient, auth_headers):
    response = s3_client_app.post(
        "/upload/music",
        headers=auth_headers,
        files={"music": (TEST_MP3_NAME, TEST_MP3_CONTENT, TEST_MP3_CONTENT_TYPE)},
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["url"].startswith("https://")

    response = s3_client_app.get("/api/files", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    listing = response.json()
    assert [entry["name"] for entry in listing["music"]] == [body["name"]]
    assert listing["videos"] == []


def test_s3_app_does_not_serve_local_uploads(s3_client_app: TestClient):
    response = s3_client_app.get("/uploads/music/anything.mp3")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_health_reports_s3(s3_client_app: TestClient):
    body = s3_client_app.get("/health").json()
    assert body["storage"] == {
        "backend": "s3",
        "bucket": TEST_BUCKET_NAME,
        "max_results": 50,
        "filename_strategy": "timestamp",
    }
