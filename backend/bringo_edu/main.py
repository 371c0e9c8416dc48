import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import Settings
from .core.errors import PlanServiceError, ValidationError
from .routes import drive, lessonplan, status
from .routes.status import FEATURES, utc_timestamp

AVAILABLE_ENDPOINTS = [
    "GET /",
    "GET /api/test",
    "GET /api/health",
    "GET /api/drive-status",
    "POST /api/generate-plan",
    "POST /api/upload-to-drive",
    "POST /api/export-to-drive",
]

app = FastAPI(title="Bringo Edu Backend", version=__version__)

# Configuration is read once here; handlers get it through get_settings
app.state.settings = Settings.from_env()

# CORS configuration (allow all origins, the frontend is hosted separately)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(lessonplan.router, prefix="/api", tags=["Lesson Plan"])
app.include_router(drive.router, prefix="/api", tags=["Google Drive"])
app.include_router(status.router, prefix="/api", tags=["Status"])


@app.exception_handler(PlanServiceError)
async def plan_service_error_handler(request: Request, exc: PlanServiceError):
    print(f"[API] ❌ {request.method} {request.url.path} -> {exc.status_code} {exc.codigo}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed JSON or wrongly typed fields get the same 400 body as other bad input
    print(f"[API] ❌ {request.method} {request.url.path} -> invalid request body: {exc.errors()}")
    error = ValidationError("Datos de entrada inválidos")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "Endpoint no encontrado", "availableEndpoints": AVAILABLE_ENDPOINTS},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    print(f"[API] 💥 Unhandled error on {request.method} {request.url.path}: {exc}")
    traceback.print_exc()
    return JSONResponse(
        status_code=500,
        content={
            "error": "Error interno del servidor",
            "message": str(exc),
            "codigo": "INTERNAL_SERVER_ERROR",
        },
    )


@app.get("/")
async def root():
    return {
        "message": "🚀 Bringo Edu Backend funcionando!",
        "version": __version__,
        "timestamp": utc_timestamp(),
        "features": FEATURES,
    }
