"""S3 client construction from application settings."""
import logging
from typing import TYPE_CHECKING

import boto3

from media_repo.config.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> "S3Client":
    """Create an S3 client from explicit settings, falling back to the boto3 credential chain."""
    client_kwargs = {
        'region_name': settings.aws_region
    }

    if settings.aws_access_key_id:
        client_kwargs['aws_access_key_id'] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs['aws_secret_access_key'] = settings.aws_secret_access_key

    # S3-compatible stores (MinIO, moto server) need an explicit endpoint
    if settings.aws_endpoint_url:
        client_kwargs['endpoint_url'] = settings.aws_endpoint_url

    logger.info(f"Creating S3 client for region {settings.aws_region}")
    logger.info(f"  Endpoint: {settings.aws_endpoint_url or 'default'}")
    return boto3.client('s3', **client_kwargs)
