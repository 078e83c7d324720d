"""Shared API-key guard for the protected routes."""
from typing import Optional

from fastapi import Request

from media_repo.config.settings import Settings
from media_repo.errors import AuthError

API_KEY_HEADER = "x-api-key"
API_KEY_QUERY_PARAM = "apikey"


def is_valid_api_key(settings: Settings, header_key: Optional[str], query_key: Optional[str]) -> bool:
    return header_key == settings.api_key or query_key == settings.api_key


async def require_api_key(request: Request) -> None:
    """
    Reject the request unless the `x-api-key` header or the `apikey` query
    parameter equals the configured key.

    Attach with `dependencies=[Depends(require_api_key)]`; raising here stops
    the route from running at all.
    """
    settings: Settings = request.app.state.settings
    header_key = request.headers.get(API_KEY_HEADER)
    query_key = request.query_params.get(API_KEY_QUERY_PARAM)
    if not is_valid_api_key(settings, header_key, query_key):
        raise AuthError("Unauthorized: Invalid API key")
