from fastapi import Depends, Request

from .config import Settings
from ..services.google_drive_service import GoogleDriveService


def get_settings(request: Request) -> Settings:
    """Settings built once at startup and stored on the app."""
    return request.app.state.settings


def get_drive_service(settings: Settings = Depends(get_settings)) -> GoogleDriveService:
    """Get a Drive service for the current request."""
    return GoogleDriveService(settings)
