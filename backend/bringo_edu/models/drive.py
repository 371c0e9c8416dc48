from pydantic import BaseModel
from typing import Any, Optional


class UploadToDriveRequest(BaseModel):
    """JSON body accepted by /api/upload-to-drive."""
    tipo: Optional[str] = None
    nombreArchivo: Optional[str] = None
    datos: Optional[Any] = None


class UploadResult(BaseModel):
    fileId: str
    fileName: str
    fileUrl: Optional[str] = None
    downloadUrl: Optional[str] = None


class UploadResponse(UploadResult):
    success: bool = True
    message: str = "Archivo subido exitosamente a Google Drive"
    format: Optional[str] = None
