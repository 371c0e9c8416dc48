from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

VALID_TRIMESTERS = ("Primer Trimestre", "Segundo Trimestre", "Tercer Trimestre")
DEFAULT_CLASS_DURATION = "45 minutos"


class LessonPlanRequest(BaseModel):
    # Every field is optional here so that missing input reaches the agent
    # and is reported as a 400, not as FastAPI's 422.
    teacher_name: Optional[str] = Field(None, alias="nombreProfesor")
    institution: Optional[str] = Field(None, alias="institucion")
    grade: Optional[str] = Field(None, alias="gradoPlan")
    subject: Optional[str] = Field(None, alias="materia")
    trimester: Optional[str] = Field(None, alias="trimestre")
    topic: Optional[str] = Field(None, alias="tema")
    class_duration: Optional[str] = Field(None, alias="duracionClase")

    class Config:
        populate_by_name = True

    @property
    def is_topic_plan(self) -> bool:
        return not is_filled(self.trimester) and is_filled(self.topic)

    def general_info(self) -> Dict[str, Any]:
        """Identity fields echoed in fallback plans."""
        info = {
            "grado": self.grade,
            "asignatura": self.subject,
            "docente": self.teacher_name,
            "institucion": self.institution,
        }
        if self.is_topic_plan:
            info["tema"] = self.topic
            info["duracionClase"] = self.class_duration or DEFAULT_CLASS_DURATION
        else:
            info["trimestre"] = self.trimester
        return info


def is_filled(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.strip() != ""


class TimedActivity(BaseModel):
    tiempo: str
    descripcion: str


class SessionPhase(BaseModel):
    titulo: str
    actividades: List[TimedActivity]


class ClassDevelopment(BaseModel):
    """One content unit broken into sessions."""
    duracion: str
    objetivos: List[str]
    materiales: List[str]
    fases: List[SessionPhase]
