from textwrap import dedent
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from media_repo import __version__
from media_repo.adapters.storage import LocalStorageBackend, StorageBackend, create_storage_backend
from media_repo.config.settings import Settings
from media_repo.errors import MediaRepoError, handle_broad_exceptions, handle_media_repo_error
from media_repo.routers.files import router as files_router
from media_repo.routers.health import router as health_router
from media_repo.routers.pages import router as pages_router

# Set up logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level.upper(), logging.INFO))


def create_app(settings: Settings | None = None, storage: Optional[StorageBackend] = None) -> FastAPI:
    """
    Create a FastAPI application.

    :param settings: Explicit settings; read from the environment when omitted.
    :param storage: Explicit storage backend; built from `settings` when omitted.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Media Repo",
        summary="Store and list music and video files",
        version=__version__,
        description=dedent(
            """\
        Upload audio and video files and list what has been stored.

        | Endpoint | Auth |
        | --- | --- |
        | `POST /upload/music`, `POST /upload/video` | `x-api-key` header or `apikey` query param |
        | `GET /api/files` | `x-api-key` header or `apikey` query param |
        | `GET /` | none |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings

    logger.info(f"creating {settings.storage_backend} storage backend")
    storage = storage or create_storage_backend(settings)
    app.state.storage = storage

    app.include_router(pages_router, tags=["pages"])
    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    # Raw downloads are only served by the app when files live on local disk
    if isinstance(storage, LocalStorageBackend):
        app.mount(
            storage.uploads_url_path,
            StaticFiles(directory=storage.root),
            name="uploads",
        )

    app.add_exception_handler(
        exc_class_or_status_code=MediaRepoError,
        handler=handle_media_repo_error,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
