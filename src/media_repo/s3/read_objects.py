"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import TYPE_CHECKING, List, Optional

import boto3

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import ObjectTypeDef

DEFAULT_MAX_KEYS = 1_000


def fetch_s3_objects_metadata(
    bucket_name: str,
    prefix: Optional[str] = None,
    max_keys: Optional[int] = DEFAULT_MAX_KEYS,
    s3_client: Optional["S3Client"] = None,
) -> List["ObjectTypeDef"]:
    """
    Fetch metadata of objects in an S3 bucket, as returned by a single `ListObjectsV2` call.

    Objects beyond `max_keys` are not returned; the continuation token is discarded.

    :param bucket_name: The name of the S3 bucket.
    :param prefix: Only objects whose key starts with this prefix are returned.
    :param max_keys: Maximum number of objects to return.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: The `Contents` entries (Key, LastModified, Size, ...) of the listing.
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.list_objects_v2(
        Bucket=bucket_name,
        Prefix=prefix or "",
        MaxKeys=max_keys,
    )
    return response.get("Contents", [])


def generate_presigned_get_url(
    bucket_name: str,
    object_key: str,
    expires_in: int = 3600,
    s3_client: Optional["S3Client"] = None,
) -> str:
    """
    Generate a time-limited URL for downloading an object.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param expires_in: Lifetime of the URL in seconds.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.generate_presigned_url(
        ClientMethod="get_object",
        Params={"Bucket": bucket_name, "Key": object_key},
        ExpiresIn=expires_in,
    )
