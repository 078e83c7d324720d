"""Error taxonomy and the handlers that turn it into plain-text HTTP responses."""
import logging

from fastapi import Request, status
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class MediaRepoError(Exception):
    """Base class for errors the API reports to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(MediaRepoError):
    """Missing or incorrect API key."""

    status_code = status.HTTP_401_UNAUTHORIZED


class UploadValidationError(MediaRepoError):
    """The expected multipart file field was absent."""

    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(MediaRepoError):
    """The storage backend failed to store or list files."""


class ConfigurationError(MediaRepoError):
    """A storage backend or filename strategy that the service does not know."""


async def handle_media_repo_error(request: Request, exc: MediaRepoError) -> PlainTextResponse:
    if exc.status_code >= 500:
        # The backend has already logged the cause at error level
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of a route as a plain 500."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return PlainTextResponse(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
