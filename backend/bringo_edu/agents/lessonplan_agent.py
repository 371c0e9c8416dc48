from datetime import datetime, timezone
from typing import Any, Dict

import openai

from ..core.config import Settings
from ..core.errors import (
    ConfigurationError,
    UpstreamAuthError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamRateLimit,
    ValidationError,
)
from ..core.openai_client import get_default_gpt_model, get_openai_client
from ..models.lessonplan import DEFAULT_CLASS_DURATION, VALID_TRIMESTERS, LessonPlanRequest, is_filled
from .plan_normalizer import normalize_plan
from .prompts import SYSTEM_PROMPT, build_topic_prompt, build_trimester_prompt

BASE_REQUIRED_FIELDS = ("nombreProfesor", "institucion", "gradoPlan", "materia")


def validate_request(request: LessonPlanRequest) -> None:
    """Raise ValidationError unless the request can be turned into a prompt."""
    base_values = (request.teacher_name, request.institution, request.grade, request.subject)
    has_period = is_filled(request.trimester) or is_filled(request.topic)
    if not all(is_filled(v) for v in base_values) or not has_period:
        raise ValidationError(
            "Todos los campos son requeridos: "
            + ", ".join(BASE_REQUIRED_FIELDS)
            + ", trimestre (o tema)"
        )

    if is_filled(request.trimester) and request.trimester not in VALID_TRIMESTERS:
        raise ValidationError(
            "Trimestre debe ser: " + ", ".join(VALID_TRIMESTERS[:-1]) + f" o {VALID_TRIMESTERS[-1]}"
        )


def build_prompt(request: LessonPlanRequest) -> str:
    if request.is_topic_plan:
        return build_topic_prompt(request, request.class_duration or DEFAULT_CLASS_DURATION)
    return build_trimester_prompt(request)


async def request_completion(settings: Settings, prompt: str) -> str:
    """
    Send one chat completion request and map upstream failures.

    Raises:
        UpstreamRateLimit: OpenAI answered 429
        UpstreamAuthError: OpenAI answered 401
        UpstreamError: any other non-2xx answer
        UpstreamConnectionError: OpenAI could not be reached
    """
    model_name = get_default_gpt_model(settings)

    print(f"[LessonPlanAgent] 🔄 Sending request to OpenAI ({model_name})...")
    try:
        async with get_openai_client(settings) as openai_client:
            response = await openai_client.chat.completions.create(
                model=model_name,
                messages=[{"role": "system", "content": SYSTEM_PROMPT},
                          {"role": "user", "content": prompt}],
                max_tokens=settings.openai_max_tokens,
                temperature=settings.openai_temperature,
            )
    except openai.RateLimitError as e:
        print(f"[LessonPlanAgent] ❌ OpenAI rate limit: {e}")
        raise UpstreamRateLimit()
    except openai.AuthenticationError as e:
        print(f"[LessonPlanAgent] ❌ OpenAI rejected the API key: {e}")
        raise UpstreamAuthError()
    except openai.APIStatusError as e:
        print(f"[LessonPlanAgent] ❌ OpenAI error {e.status_code}: {e}")
        raise UpstreamError(e.status_code)
    except openai.APIConnectionError as e:
        print(f"[LessonPlanAgent] ❌ Could not reach OpenAI: {e}")
        raise UpstreamConnectionError()

    print("[LessonPlanAgent] ✅ Response received from OpenAI")
    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


async def generate_lesson_plan(request: LessonPlanRequest, settings: Settings) -> Dict[str, Any]:
    """
    Generate a trimester or single-topic plan with OpenAI and normalize it.
    """
    validate_request(request)
    if not settings.openai_api_key:
        print("[LessonPlanAgent] ❌ OPENAI_API_KEY not configured")
        raise ConfigurationError()

    kind = "topic" if request.is_topic_plan else "trimester"
    print(f"[LessonPlanAgent] 📨 Generating {kind} plan: {request.subject} / {request.grade}")

    content = await request_completion(settings, build_prompt(request))
    plan = normalize_plan(content, context=request.general_info())

    print("[LessonPlanAgent] 📦 Plan generated successfully")
    return {
        **plan,
        "generadoPorIA": True,
        "fechaGeneracion": datetime.now(timezone.utc).isoformat(),
    }
