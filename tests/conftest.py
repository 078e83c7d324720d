import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from media_repo.config.settings import Settings
from media_repo.main import create_app
from tests.consts import TEST_API_KEY, TEST_BUCKET_NAME, TEST_REGION


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for a local-disk app rooted in a per-test temp directory."""
    return Settings(
        api_key=TEST_API_KEY,
        storage_backend="local",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def client(settings) -> TestClient:
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def auth_headers() -> dict:
    return {"x-api-key": TEST_API_KEY}


@pytest.fixture
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing can reach real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def mocked_aws(aws_credentials):
    """Run the test inside moto with the test bucket created."""
    with mock_aws():
        boto3.client("s3", region_name=TEST_REGION).create_bucket(Bucket=TEST_BUCKET_NAME)
        yield


@pytest.fixture
def s3_client(mocked_aws):
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def s3_settings(mocked_aws) -> Settings:
    return Settings(
        api_key=TEST_API_KEY,
        storage_backend="s3",
        s3_bucket_name=TEST_BUCKET_NAME,
        aws_region=TEST_REGION,
        list_max_results=50,
    )


@pytest.fixture
def s3_client_app(s3_settings) -> TestClient:
    with TestClient(create_app(s3_settings)) as client:
        yield client


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep `.env` files and default upload dirs from leaking between tests."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "API_KEY",
        "HOST",
        "PORT",
        "STORAGE_BACKEND",
        "UPLOAD_DIR",
        "UPLOADS_URL_PATH",
        "FILENAME_STRATEGY",
        "LIST_MAX_RESULTS",
        "S3_PUBLIC_BASE_URL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
