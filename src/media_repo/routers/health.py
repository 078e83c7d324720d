from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint for monitoring API status.

    Reports which storage backend the app is running against. Secrets are never included.
    """
    return {
        "status": "ok",
        "storage": request.app.state.storage.describe(),
    }
