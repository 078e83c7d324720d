"""
Storage backends for uploaded media.

Two implementations share one interface: a local directory tree served by the
app itself, and an S3 bucket. Handlers only ever see `StorageBackend`.
"""

import logging
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, List, Optional
from urllib.parse import quote

from botocore.exceptions import BotoCoreError, ClientError

from media_repo.config.settings import Settings
from media_repo.errors import ConfigurationError, StorageError
from media_repo.s3.client import create_s3_client
from media_repo.s3.read_objects import fetch_s3_objects_metadata, generate_presigned_get_url
from media_repo.s3.write_objects import upload_s3_object
from media_repo.sanitize import make_stored_name
from media_repo.schemas import Category, FileEntry, StoredFile
from media_repo.utils.decorators import log_execution_time

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Where uploaded bytes live. Append-only: there is no delete or update."""

    filename_strategy: str = "timestamp"

    @abstractmethod
    def store(
        self,
        category: Category,
        original_name: Optional[str],
        stream: BinaryIO,
        content_type: Optional[str] = None,
    ) -> StoredFile:
        """Persist `stream` under `category`; raise `StorageError` on failure."""

    @abstractmethod
    def list(self, category: Category) -> List[FileEntry]:
        """Return the files stored under `category`; raise `StorageError` on failure."""

    @abstractmethod
    def describe(self) -> Dict[str, Any]:
        """Non-secret summary of the backend, for health checks and the CLI."""

    def _stored_name(self, original_name: Optional[str]) -> str:
        return make_stored_name(original_name, strategy=self.filename_strategy)


class LocalStorageBackend(StorageBackend):
    """Files on local disk, one flat directory per category."""

    def __init__(
        self,
        root: str | Path,
        uploads_url_path: str = "/uploads",
        filename_strategy: str = "timestamp",
    ):
        self.root = Path(root)
        self.uploads_url_path = "/" + uploads_url_path.strip("/")
        self.filename_strategy = filename_strategy
        for category in Category:
            self._directory(category).mkdir(parents=True, exist_ok=True)
        self.staging_dir = self.root / ".incoming"
        self.staging_dir.mkdir(exist_ok=True)
        logger.info(f"Local storage initialized at {self.root.resolve()}")

    def _directory(self, category: Category) -> Path:
        return self.root / category.folder

    def _url(self, category: Category, stored_name: str) -> str:
        return f"{self.uploads_url_path}/{category.folder}/{quote(stored_name)}"

    @log_execution_time
    def store(self, category, original_name, stream, content_type=None):
        stored_name = self._stored_name(original_name)
        dest_path = self._directory(category) / stored_name
        # Stage then rename, so a same-named file is only ever replaced whole
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(dir=self.staging_dir, delete=False) as tmp:
                tmp_name = tmp.name
                shutil.copyfileobj(stream, tmp)
            os.replace(tmp_name, dest_path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Error writing {dest_path}: {str(e)}")
            raise StorageError(f"Failed to store {category.value} file") from e

        logger.info(f"Stored {original_name!r} as {dest_path}")
        return StoredFile(
            category=category,
            original_name=original_name or "",
            stored_name=stored_name,
            url=self._url(category, stored_name),
        )

    @log_execution_time
    def list(self, category):
        directory = self._directory(category)
        try:
            # Directory iteration order; not sorted
            names = [entry.name for entry in directory.iterdir() if entry.is_file()]
        except OSError as e:
            logger.error(f"Error listing {directory}: {str(e)}")
            raise StorageError(f"Failed to list {category.value} files") from e
        return [FileEntry(name=name, url=self._url(category, name)) for name in names]

    def describe(self):
        return {
            "backend": "local",
            "root": str(self.root),
            "uploads_url_path": self.uploads_url_path,
            "filename_strategy": self.filename_strategy,
        }


class S3StorageBackend(StorageBackend):
    """Objects in one S3 bucket, one key prefix per category."""

    def __init__(
        self,
        bucket_name: str,
        s3_client: "S3Client",
        filename_strategy: str = "timestamp",
        max_results: int = 100,
        public_base_url: Optional[str] = None,
        presign_expiry_seconds: int = 3600,
    ):
        self.bucket_name = bucket_name
        self.s3_client = s3_client
        self.filename_strategy = filename_strategy
        self.max_results = max_results
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.presign_expiry_seconds = presign_expiry_seconds
        logger.info(f"Using S3 bucket: {self.bucket_name}")

    @staticmethod
    def _key(category: Category, stored_name: str) -> str:
        return f"{category.folder}/{stored_name}"

    def _url(self, object_key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{quote(object_key)}"
        return generate_presigned_get_url(
            self.bucket_name,
            object_key,
            expires_in=self.presign_expiry_seconds,
            s3_client=self.s3_client,
        )

    @log_execution_time
    def store(self, category, original_name, stream, content_type=None):
        stored_name = self._stored_name(original_name)
        object_key = self._key(category, stored_name)
        try:
            upload_s3_object(
                bucket_name=self.bucket_name,
                object_key=object_key,
                file_content=stream,
                content_type=content_type,
                s3_client=self.s3_client,
            )
            url = self._url(object_key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading to S3: {str(e)}")
            raise StorageError(f"Failed to store {category.value} file") from e

        logger.info(f"Uploaded {original_name!r} to s3://{self.bucket_name}/{object_key}")
        return StoredFile(
            category=category,
            original_name=original_name or "",
            stored_name=stored_name,
            url=url,
        )

    @log_execution_time
    def list(self, category):
        prefix = f"{category.folder}/"
        try:
            objects = fetch_s3_objects_metadata(
                bucket_name=self.bucket_name,
                prefix=prefix,
                max_keys=self.max_results,
                s3_client=self.s3_client,
            )
            entries = [
                FileEntry(name=item["Key"][len(prefix):], url=self._url(item["Key"]))
                for item in objects
                if item["Key"] != prefix
            ]
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error listing s3://{self.bucket_name}/{prefix}: {str(e)}")
            raise StorageError(f"Failed to list {category.value} files") from e
        return entries

    def describe(self):
        return {
            "backend": "s3",
            "bucket": self.bucket_name,
            "max_results": self.max_results,
            "filename_strategy": self.filename_strategy,
        }


def create_storage_backend(settings: Settings) -> StorageBackend:
    """Build the backend selected by `settings.storage_backend`."""
    if settings.storage_backend == "local":
        return LocalStorageBackend(
            root=settings.upload_dir,
            uploads_url_path=settings.uploads_url_path,
            filename_strategy=settings.filename_strategy,
        )
    if settings.storage_backend == "s3":
        return S3StorageBackend(
            bucket_name=settings.s3_bucket_name,
            s3_client=create_s3_client(settings),
            filename_strategy=settings.filename_strategy,
            max_results=settings.list_max_results,
            public_base_url=settings.s3_public_base_url,
            presign_expiry_seconds=settings.s3_presign_expiry_seconds,
        )
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")
