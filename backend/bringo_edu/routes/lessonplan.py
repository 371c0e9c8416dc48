from typing import Optional

from fastapi import APIRouter, Depends

from ..agents.lessonplan_agent import generate_lesson_plan
from ..core.config import Settings
from ..core.dependencies import get_settings
from ..models.lessonplan import LessonPlanRequest

router = APIRouter()


@router.post("/generate-plan")
async def create_lesson_plan(
    request: Optional[LessonPlanRequest] = None,
    settings: Settings = Depends(get_settings),
):
    """
    Generate a trimester plan (or a single-topic class plan) with OpenAI.

    Validation, configuration and upstream failures are raised as
    PlanServiceError and rendered by the app-level handler.
    """
    request = request or LessonPlanRequest()
    print(f"[API] 📨 Plan request received: {request.subject} / {request.grade} / "
          f"{request.trimester or request.topic}")
    return await generate_lesson_plan(request, settings)
