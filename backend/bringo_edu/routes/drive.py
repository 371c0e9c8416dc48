import json
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from ..core.config import Settings
from ..core.dependencies import get_drive_service, get_settings
from ..core.errors import NotConfigured, ValidationError
from ..models.drive import UploadResponse, UploadToDriveRequest
from ..services.google_drive_service import GoogleDriveService

router = APIRouter()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB


async def _read_upload(upload) -> bytes:
    content = await upload.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationError("El archivo supera el límite de 10MB")
    return content


def _ensure_configured(drive: GoogleDriveService) -> None:
    if not drive.is_configured:
        print("[API] ⚠️ Drive upload requested but Google Drive is not configured")
        raise NotConfigured()


@router.post("/export-to-drive")
async def export_to_drive(
    file: Optional[UploadFile] = File(None),
    filename: Optional[str] = Form(None),
    mimeType: Optional[str] = Form(None),
    format: Optional[str] = Form(None),
    drive: GoogleDriveService = Depends(get_drive_service),
):
    """Upload an exported plan file (multipart field 'file') to Google Drive."""
    print(f"[API] 📨 Drive export received: filename={filename}, mimeType={mimeType}, "
          f"format={format}, has_file={file is not None}")

    if file is None:
        raise ValidationError("Se requiere un archivo para subir a Google Drive")

    content = await _read_upload(file)
    _ensure_configured(drive)

    final_name = filename or file.filename or f"archivo_{int(time.time() * 1000)}"
    final_mime_type = mimeType or file.content_type or "application/octet-stream"

    result = await run_in_threadpool(
        drive.upload_file,
        content,
        final_name,
        final_mime_type,
        f"Exportado desde Bringo Edu - {format or 'archivo'}",
    )
    return UploadResponse(**result.model_dump(), format=format).model_dump()


def _form_text(form, key: str) -> Optional[str]:
    value = form.get(key)
    return value if isinstance(value, str) else None


def _has_data(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() != ""
    return value is not None


def _parse_form_data(raw: Optional[str]) -> Any:
    if raw is None or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@router.post("/upload-to-drive")
async def upload_to_drive(
    request: Request,
    drive: GoogleDriveService = Depends(get_drive_service),
):
    """
    Legacy upload endpoint.

    Accepts multipart ('archivo' file, or 'datos' + 'nombreArchivo' fields)
    or a JSON body {tipo, nombreArchivo, datos}.
    """
    content_type = request.headers.get("content-type", "")
    upload = None
    payload = UploadToDriveRequest()

    if content_type.startswith("multipart/") or content_type.startswith("application/x-www-form-urlencoded"):
        form = await request.form()
        archivo = form.get("archivo")
        if isinstance(archivo, StarletteUploadFile):
            upload = archivo
        payload = UploadToDriveRequest(
            tipo=_form_text(form, "tipo"),
            nombreArchivo=_form_text(form, "nombreArchivo"),
            datos=_parse_form_data(_form_text(form, "datos")),
        )
    else:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            try:
                payload = UploadToDriveRequest(**body)
            except PydanticValidationError:
                raise ValidationError("Datos de entrada inválidos")

    print(f"[API] 📨 Drive upload received (legacy endpoint): tipo={payload.tipo}, "
          f"has_file={upload is not None}, has_data={_has_data(payload.datos)}")

    if upload is None and not _has_data(payload.datos):
        raise ValidationError("Se requieren datos o un archivo para subir")

    if upload is not None:
        content = await _read_upload(upload)
        _ensure_configured(drive)
        result = await run_in_threadpool(
            drive.upload_file,
            content,
            upload.filename or payload.nombreArchivo or f"archivo_{int(time.time() * 1000)}",
            upload.content_type or "application/octet-stream",
        )
    else:
        _ensure_configured(drive)
        result = await run_in_threadpool(drive.upload_json, payload.datos, payload.nombreArchivo)

    return UploadResponse(**result.model_dump()).model_dump(exclude={"format"})


@router.get("/drive-status")
async def drive_status(settings: Settings = Depends(get_settings)):
    """Report which Drive credentials are configured, without contacting Google."""
    return {
        "drive_configured": settings.drive_credentials_mode is not None,
        "credentials_mode": settings.drive_credentials_mode,
        "service_account": bool(settings.google_service_account_email),
        "folder_id": settings.google_drive_folder_id,
        "features": ["upload", "export"],
    }
