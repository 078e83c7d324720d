import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from media_repo.adapters.storage import StorageBackend
from media_repo.auth import require_api_key
from media_repo.errors import StorageError, UploadValidationError
from media_repo.schemas import Category, ListFilesResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])

PLAIN_TEXT_ERROR = {"content": {"text/plain": {"schema": {"type": "string"}}}}


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def _multipart_body(field_name: str, description: str) -> dict:
    """OpenAPI request body for a form carrying one file under `field_name`."""
    return {
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            field_name: {"type": "string", "format": "binary", "description": description},
                        },
                    }
                }
            }
        }
    }


async def _store_upload(category: Category, request: Request, storage: StorageBackend) -> UploadResponse:
    """
    Hand the file sent under the category's form field to the storage backend.

    The form is read here rather than through a typed parameter so that a
    missing field, a plain text value or an empty file input all produce the
    same 400.
    """
    async with request.form() as form:
        upload = form.get(category.field_name)
        if not isinstance(upload, UploadFile) or not upload.filename:
            raise UploadValidationError(f"No {category.value} file uploaded")

        stored = await run_in_threadpool(
            storage.store,
            category,
            upload.filename,
            upload.file,
            content_type=upload.content_type,
        )
    return UploadResponse(
        message=f"{category.label} uploaded successfully",
        name=stored.stored_name,
        url=stored.url,
    )


def _add_upload_route(category: Category) -> None:
    async def upload(request: Request, storage: StorageBackend = Depends(get_storage)) -> UploadResponse:
        return await _store_upload(category, request, storage)

    router.add_api_route(
        f"/upload/{category.value}",
        upload,
        methods=["POST"],
        name=f"upload_{category.value}",
        summary=f"Upload a {category.value} file",
        response_model=UploadResponse,
        responses={
            status.HTTP_400_BAD_REQUEST: {
                "description": f"No `{category.field_name}` file in the form.",
                **PLAIN_TEXT_ERROR,
            },
            status.HTTP_401_UNAUTHORIZED: {"description": "Missing or invalid API key.", **PLAIN_TEXT_ERROR},
        },
        openapi_extra=_multipart_body(category.field_name, f"The {category.value} file to store"),
    )


for _category in Category:
    _add_upload_route(_category)


@router.get(
    "/api/files",
    response_model=ListFilesResponse,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Missing or invalid API key.", **PLAIN_TEXT_ERROR},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Listing either category failed.", **PLAIN_TEXT_ERROR},
    },
)
def list_files(storage: StorageBackend = Depends(get_storage)) -> ListFilesResponse:
    """
    List stored files for both categories.

    Both listings must succeed; if either fails the whole call fails and no
    partial result is returned.
    """
    try:
        music = storage.list(Category.MUSIC)
        videos = storage.list(Category.VIDEO)
    except StorageError as e:
        raise StorageError("Failed to list files") from e

    logger.info(f"Listed {len(music)} music and {len(videos)} video files")
    return ListFilesResponse(music=music, videos=videos)
