"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

# Add backend/ to sys.path so the package imports without installation
BACKEND_ROOT = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(BACKEND_ROOT))

from bringo_edu.core.config import Settings  # noqa: E402
from bringo_edu.main import app  # noqa: E402

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


SAMPLE_MODEL_PLAN = {
    "plan_trimestral": {
        "informacion_general": {
            "grado": "5°",
            "asignatura": "Matemáticas",
            "trimestre": "Primer Trimestre",
            "docente": "Ana Pérez",
            "institucion": "Escuela República de Chile",
            "contenidos_conceptuales": ["Fracciones", "Decimales"],
            "competencias": ["Resuelve problemas con fracciones"],
            "indicadores_de_logro": ["Compara fracciones", "Ordena decimales"],
        },
        "estructura_pedagogica": {
            "estrategias_metodologicas": ["Aprendizaje basado en problemas", "Trabajo cooperativo"],
            "recursos_materiales": ["Regletas", "Fichas"],
            "instrumentos_evaluacion": {
                "formativa": ["Lista de cotejo", "Rúbrica"],
                "sumativa": ["Prueba escrita"],
            },
            "adaptaciones_curriculares": ["Material concreto adicional"],
        },
        "desarrollo_clases": {
            "Fracciones": {
                "duracion": "3 sesiones de 45 minutos",
                "objetivos_aprendizaje": ["Identificar fracciones propias"],
                "materiales_recursos": ["Regletas de colores"],
                "sesiones_detalladas": [
                    {
                        "titulo": "SESIÓN 1 - Exploración",
                        "actividades": [
                            {"tiempo": "0-10 min", "descripcion": "Lluvia de ideas"},
                            {"tiempo": "10-45 min", "descripcion": "Trabajo con regletas"},
                        ],
                    },
                    {"actividades": []},
                ],
            },
            "Decimales": {
                "objetivos": ["Leer números decimales"],
            },
        },
        "observaciones": "Usar ejemplos del mercado local",
    }
}


@pytest.fixture
def sample_model_plan():
    return json.loads(json.dumps(SAMPLE_MODEL_PLAN))


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        google_client_id="client-id.apps.googleusercontent.com",
        google_client_secret="client-secret",
        google_refresh_token="refresh-token",
        google_drive_folder_id="folder-123",
        environment="test",
    )


@pytest.fixture
def client(settings):
    original_settings = app.state.settings
    app.state.settings = settings
    with TestClient(app) as test_client:
        yield test_client
    app.state.settings = original_settings
    app.dependency_overrides.clear()


@pytest.fixture
def valid_plan_request():
    return {
        "nombreProfesor": "Ana Pérez",
        "institucion": "Escuela República de Chile",
        "gradoPlan": "5°",
        "materia": "Matemáticas",
        "trimestre": "Primer Trimestre",
    }


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def make_openai_client():
    """Factory for a fake AsyncOpenAI client returning content or raising error."""

    def factory(content=None, error=None):
        openai_client = MagicMock()
        openai_client.chat.completions.create = AsyncMock(
            return_value=_completion(content),
            side_effect=error,
        )
        openai_client.__aenter__ = AsyncMock(return_value=openai_client)
        openai_client.__aexit__ = AsyncMock(return_value=False)
        return openai_client

    return factory


@pytest.fixture
def openai_status_error():
    """Factory for openai.APIStatusError subclasses carrying an HTTP status."""

    def factory(error_cls, status_code):
        request = httpx.Request("POST", OPENAI_URL)
        response = httpx.Response(status_code, request=request)
        return error_cls(f"upstream {status_code}", response=response, body=None)

    return factory
