from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..core.config import Settings
from ..core.dependencies import get_settings

router = APIRouter()

SERVICE_NAME = "Bringo Edu Backend"
FEATURES = ["openai-plans", "google-drive-export"]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/test")
async def test_endpoint(settings: Settings = Depends(get_settings)):
    return {
        "message": "✅ Backend funcionando correctamente",
        "environment": settings.environment,
        "timestamp": utc_timestamp(),
        "features": FEATURES,
    }


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Configuration health; reports secrets as booleans only."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": utc_timestamp(),
        "environment": settings.environment,
        "openai_configured": settings.openai_configured,
        "google_drive_configured": settings.drive_credentials_mode is not None,
        "features": ["planes_trimestrales", "planes_por_tema", "google_drive_export"],
    }
