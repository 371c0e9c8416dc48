from .lessonplan import (
    ClassDevelopment,
    LessonPlanRequest,
    SessionPhase,
    TimedActivity,
    VALID_TRIMESTERS,
)
from .drive import UploadResponse, UploadResult, UploadToDriveRequest

__all__ = [
    "ClassDevelopment",
    "LessonPlanRequest",
    "SessionPhase",
    "TimedActivity",
    "VALID_TRIMESTERS",
    "UploadResponse",
    "UploadResult",
    "UploadToDriveRequest",
]
