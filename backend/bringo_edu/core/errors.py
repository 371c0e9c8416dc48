"""
Error taxonomy for the plan and Drive endpoints.

Each error knows the HTTP status and the machine-readable code the frontend
expects; main.py renders them as {"error", "tipo", "codigo", "success"}.
"""
from typing import Any, Dict, Optional


class PlanServiceError(Exception):
    status_code = 500
    tipo = "server_error"
    codigo = "UNKNOWN_ERROR"
    default_message = "Error inesperado al generar el plan. Por favor intenta nuevamente."

    def __init__(self, message: Optional[str] = None, codigo: Optional[str] = None):
        self.message = message or self.default_message
        if codigo:
            self.codigo = codigo
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "tipo": self.tipo,
            "codigo": self.codigo,
            "success": False,
        }


class ValidationError(PlanServiceError):
    status_code = 400
    tipo = "validation_error"
    codigo = "VALIDATION_ERROR"
    default_message = "Solicitud inválida"


class ConfigurationError(PlanServiceError):
    status_code = 500
    tipo = "config_error"
    codigo = "MISSING_API_KEY"
    default_message = "Configuración del servidor incompleta - falta API Key"


class UpstreamRateLimit(PlanServiceError):
    status_code = 429
    tipo = "rate_limit"
    codigo = "RATE_LIMIT_EXCEEDED"
    default_message = (
        "Hemos alcanzado el límite temporal de solicitudes a nuestro servicio de IA. "
        "Por favor intenta de nuevo en 1-2 minutos."
    )


# Alias used by the HTTP contract docs
RateLimited = UpstreamRateLimit


class UpstreamAuthError(PlanServiceError):
    # A rejected API key is our misconfiguration, not the client's fault
    status_code = 500
    tipo = "auth_error"
    codigo = "INVALID_API_KEY"
    default_message = "Error de configuración del servicio. Por favor contacta al administrador."


class UpstreamError(PlanServiceError):
    status_code = 500
    tipo = "openai_error"
    codigo = "OPENAI_ERROR"
    default_message = "Error temporal del servicio de IA. Por favor intenta nuevamente en unos minutos."

    def __init__(self, upstream_status: Optional[int] = None, message: Optional[str] = None):
        self.upstream_status = upstream_status
        codigo = f"OPENAI_{upstream_status}" if upstream_status else None
        super().__init__(message, codigo)


class UpstreamConnectionError(PlanServiceError):
    status_code = 503
    tipo = "network_error"
    codigo = "NETWORK_ERROR"
    default_message = (
        "Error de conexión con el servicio. Por favor verifica tu internet e intenta nuevamente."
    )


class ParseError(PlanServiceError):
    """Model output was not a JSON object. Recovered inside the normalizer."""

    tipo = "parse_error"
    codigo = "PARSE_ERROR"
    default_message = "No se pudo interpretar la respuesta del modelo"


class NotConfigured(PlanServiceError):
    status_code = 503
    tipo = "drive_error"
    codigo = "DRIVE_NOT_CONFIGURED"
    default_message = "Google Drive no está configurado en el servidor"


class UploadError(PlanServiceError):
    status_code = 500
    tipo = "drive_error"
    codigo = "DRIVE_UPLOAD_ERROR"
    default_message = "Error al subir archivo a Google Drive"

    def __init__(self, upstream_message: str):
        self.upstream_message = upstream_message
        super().__init__(f"Error al subir archivo a Google Drive: {upstream_message}")
