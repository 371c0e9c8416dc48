"""
Plan normalizer

Turns whatever the completion API returned into the shape the frontend
renders. The model's output schema drifted across prompt versions, so every
reshaping step is optional and a document that cannot be parsed at all is
replaced by a complete fallback plan. Normalization never fails.
"""
import json
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.errors import ParseError
from ..models.lessonplan import ClassDevelopment, SessionPhase, TimedActivity

PlanDict = Dict[str, Any]
ClassDevelopmentMap = Dict[str, Dict[str, Any]]

JSON_FENCE = "```json"
FENCE = "```"

# Wrapper keys used by the different prompt versions, checked in order
PLAN_WRAPPER_KEYS = ("plan_trimestral", "plan_clase", "plan")

DEFAULT_DURATION = "3 sesiones de 45 minutos"
DEFAULT_METHODOLOGY = "Estrategias metodológicas variadas"
DEFAULT_EVALUATION = ("Evaluación formativa continua",)
GENERIC_CONTENT_TITLE = "Contenido general"
CONTENT_TITLE_LIMIT = 50

GENERAL_INFO_FIELDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("contenidos", ("contenidos_conceptuales", "contenidos")),
    ("competencias", ("competencias",)),
    ("indicadoresLogro", ("indicadores_de_logro", "indicadores_logro", "indicadoresLogro")),
)

# Copied up from informacion_general only when the top level lacks them
IDENTITY_FIELDS = (
    "grado", "asignatura", "trimestre", "tema", "docente",
    "institucion", "anioEscolar", "duracionSemanas", "duracionClase",
)


# ---------------------------------------------------------------------------
# Default builders
# ---------------------------------------------------------------------------

def default_objectives() -> List[str]:
    return [
        "Comprender conceptos fundamentales",
        "Aplicar conocimientos en situaciones prácticas",
    ]


def default_materials() -> List[str]:
    return ["Material didáctico impreso", "Recursos multimedia"]


def default_activities() -> List[Dict[str, str]]:
    return [TimedActivity(tiempo="45 min", descripcion="Desarrollo de la sesión").model_dump()]


def build_phase(titulo: str, activities: Iterable[Tuple[str, str]]) -> SessionPhase:
    return SessionPhase(
        titulo=titulo,
        actividades=[TimedActivity(tiempo=t, descripcion=d) for t, d in activities],
    )


def build_class_development(
    objetivos: List[str],
    materiales: List[str],
    fases: List[SessionPhase],
    duracion: str = DEFAULT_DURATION,
) -> Dict[str, Any]:
    return ClassDevelopment(
        duracion=duracion,
        objetivos=objetivos,
        materiales=materiales,
        fases=fases,
    ).model_dump()


def build_content_class_development(content: str) -> Dict[str, Any]:
    """Three-session template used when the model listed contents only."""
    return build_class_development(
        objetivos=[
            f"Comprender los conceptos de: {content[:30]}",
            "Aplicar conocimientos en situaciones prácticas",
            "Desarrollar habilidades de análisis y creatividad",
        ],
        materiales=[
            "Material didáctico impreso",
            "Recursos multimedia",
            "Instrumentos de evaluación formativa",
        ],
        fases=[
            build_phase("SESIÓN 1 - Introducción y exploración", [
                ("10 min", "Presentación del tema y activación de conocimientos previos"),
                ("20 min", "Explicación teórica con ejemplos prácticos"),
                ("15 min", "Ejercicio guiado de aplicación inicial"),
            ]),
            build_phase("SESIÓN 2 - Desarrollo y práctica", [
                ("15 min", "Repaso de conceptos clave"),
                ("25 min", "Actividad práctica en equipos colaborativos"),
                ("5 min", "Socialización de resultados"),
            ]),
            build_phase("SESIÓN 3 - Profundización y evaluación", [
                ("20 min", "Ejercicios de mayor complejidad"),
                ("15 min", "Aplicación de instrumento de evaluación"),
                ("10 min", "Retroalimentación y conclusiones"),
            ]),
        ],
    )


def build_generic_class_development() -> ClassDevelopmentMap:
    return {
        GENERIC_CONTENT_TITLE: build_class_development(
            objetivos=["Desarrollar competencias específicas", "Aplicar conocimientos prácticos"],
            materiales=["Material básico del aula"],
            fases=[build_phase("Sesión introductoria", [("45 min", "Desarrollo completo de la sesión")])],
        )
    }


def build_fallback_plan(context: Optional[Dict[str, Any]] = None) -> PlanDict:
    """Complete plan returned when the model output cannot be parsed."""
    context = context or {}
    plan: PlanDict = {key: value for key, value in context.items() if value is not None}
    plan.update({
        "anioEscolar": str(datetime.now().year),
        "duracionSemanas": 11,
        "contenidos": [
            "Contenido 1 según MEDUCA",
            "Contenido 2 según MEDUCA",
            "Contenido 3 según MEDUCA",
        ],
        "competencias": ["Competencia 1 MEDUCA", "Competencia 2 MEDUCA"],
        "indicadoresLogro": ["Indicador 1 observable", "Indicador 2 medible"],
        "metodologia": "Estrategias metodológicas alineadas con MEDUCA",
        "recursos": ["Recursos educativos estándar"],
        "evaluacion": ["Instrumentos de evaluación formativa y sumativa"],
        "adaptaciones": ["Adaptaciones para atención a la diversidad"],
        "observaciones": "Plan generado automáticamente basado en currículo MEDUCA",
    })
    plan["desarrolloClases"] = {
        "Contenido 1: Contenido 1 según MEDUCA...": build_class_development(
            objetivos=[
                "Comprender los conceptos fundamentales",
                "Aplicar los conocimientos en situaciones prácticas",
                "Desarrollar habilidades de análisis",
            ],
            materiales=["Material didáctico impreso", "Recursos multimedia", "Instrumentos de evaluación"],
            fases=[
                build_phase("SESIÓN 1 - Introducción y contextualización", [
                    ("10 min", "Presentación del tema y objetivos"),
                    ("15 min", "Activación de conocimientos previos"),
                    ("20 min", "Exposición teórica interactiva"),
                ]),
                build_phase("SESIÓN 2 - Desarrollo y práctica", [
                    ("25 min", "Ejercicios prácticos guiados"),
                    ("15 min", "Trabajo en equipos colaborativos"),
                    ("5 min", "Puesta en común de resultados"),
                ]),
                build_phase("SESIÓN 3 - Evaluación y cierre", [
                    ("10 min", "Aplicación de instrumento de evaluación"),
                    ("5 min", "Retroalimentación y conclusiones"),
                ]),
            ],
        ),
        "Contenido 2: Contenido 2 según MEDUCA...": build_class_development(
            duracion="2 sesiones de 45 minutos",
            objetivos=[
                "Analizar conceptos intermedios",
                "Resolver problemas prácticos",
                "Desarrollar pensamiento crítico",
            ],
            materiales=["Material de apoyo", "Recursos visuales", "Guías de trabajo"],
            fases=[
                build_phase("SESIÓN 1 - Fundamentos y aplicación", [
                    ("15 min", "Introducción teórica"),
                    ("25 min", "Ejercicios prácticos"),
                    ("5 min", "Cierre y preparación"),
                ]),
                build_phase("SESIÓN 2 - Profundización práctica", [
                    ("30 min", "Actividad integradora"),
                    ("10 min", "Evaluación formativa"),
                    ("5 min", "Reflexión final"),
                ]),
            ],
        ),
    }
    return plan


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def extract_json_block(raw_text: Optional[str]) -> str:
    """Return the contents of the first fenced code block, or the text itself."""
    if not raw_text:
        return ""
    if JSON_FENCE in raw_text:
        return raw_text.split(JSON_FENCE, 1)[1].split(FENCE, 1)[0].strip()
    if FENCE in raw_text:
        return raw_text.split(FENCE)[1].strip()
    return raw_text.strip()


def parse_plan_json(text: str) -> PlanDict:
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ParseError(f"JSON inválido: {e}")
    if not isinstance(document, dict):
        raise ParseError(f"Se esperaba un objeto JSON, se recibió {type(document).__name__}")
    return document


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        return False
    return True


def _first_present(source: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = source.get(key)
        if _is_present(value):
            return value
    return None


def _as_text_list(value: Any) -> Optional[List[Any]]:
    if isinstance(value, list) and value:
        return value
    if isinstance(value, str) and value.strip():
        return [value]
    return None


def _content_text(item: Any) -> str:
    if isinstance(item, dict):
        return str(_first_present(item, ("titulo", "nombre", "contenido", "tema")) or json.dumps(item, ensure_ascii=False))
    return str(item)


def _truncate_title(text: str) -> str:
    if len(text) > CONTENT_TITLE_LIMIT:
        return text[:CONTENT_TITLE_LIMIT - 3] + "..."
    return text


def _unique_key(key: str, existing: Dict[str, Any]) -> str:
    if key not in existing:
        return key
    suffix = 2
    while f"{key} ({suffix})" in existing:
        suffix += 1
    return f"{key} ({suffix})"


def _normalize_activity(activity: Any) -> Dict[str, Any]:
    if isinstance(activity, dict):
        return {
            "tiempo": activity.get("tiempo") or "",
            "descripcion": activity.get("descripcion") or activity.get("actividad") or "",
        }
    return {"tiempo": "", "descripcion": str(activity)}


def _normalize_phase(phase: Any, index: int) -> Dict[str, Any]:
    phase = phase if isinstance(phase, dict) else {}
    activities = phase.get("actividades")
    if isinstance(activities, list) and activities:
        actividades = [_normalize_activity(a) for a in activities]
    else:
        actividades = default_activities()
    return {
        "titulo": phase.get("titulo") or f"Sesión {index + 1}",
        "actividades": actividades,
    }


def normalize_class_development_entry(entry: Any) -> Dict[str, Any]:
    """Rename and default one content unit; accepts old and new key names."""
    entry = entry if isinstance(entry, dict) else {}
    sessions = _first_present(entry, ("sesiones_detalladas", "fases", "sesiones"))
    if not isinstance(sessions, list) or not sessions:
        sessions = [{}]
    duration = entry.get("duracion")
    return {
        "duracion": str(duration) if _is_present(duration) else DEFAULT_DURATION,
        "objetivos": _as_text_list(_first_present(entry, ("objetivos_aprendizaje", "objetivos"))) or default_objectives(),
        "materiales": _as_text_list(_first_present(entry, ("materiales_recursos", "materiales"))) or default_materials(),
        "fases": [_normalize_phase(session, index) for index, session in enumerate(sessions)],
    }


def _normalize_class_development_collection(collection: Any) -> Optional[ClassDevelopmentMap]:
    if isinstance(collection, dict) and collection:
        return {str(key): normalize_class_development_entry(entry) for key, entry in collection.items()}
    if isinstance(collection, list) and collection:
        # Some responses list the units instead of keying them by title
        normalized: ClassDevelopmentMap = {}
        for index, entry in enumerate(collection):
            title = None
            if isinstance(entry, dict):
                title = _first_present(entry, ("titulo", "contenido", "nombre", "tema"))
            key = _unique_key(str(title) if title else f"Contenido {index + 1}", normalized)
            normalized[key] = normalize_class_development_entry(entry)
        return normalized
    return None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def unwrap_plan(document: PlanDict) -> PlanDict:
    for key in PLAN_WRAPPER_KEYS:
        if isinstance(document.get(key), dict):
            return document[key]
    return document


def copy_general_info(plan: PlanDict) -> Optional[PlanDict]:
    info = plan.get("informacion_general")
    if not isinstance(info, dict):
        return None
    updates: PlanDict = {}
    for target, sources in GENERAL_INFO_FIELDS:
        value = _first_present(info, sources)
        if value is not None:
            updates[target] = value
    for field in IDENTITY_FIELDS:
        if field not in plan and _is_present(info.get(field)):
            updates[field] = info[field]
    return updates


def _join_strategies(strategies: Any) -> str:
    if isinstance(strategies, list):
        joined = ", ".join(str(s) for s in strategies if _is_present(s))
        return joined or DEFAULT_METHODOLOGY
    if isinstance(strategies, str) and strategies.strip():
        return strategies
    return DEFAULT_METHODOLOGY


def copy_pedagogical_structure(plan: PlanDict) -> Optional[PlanDict]:
    structure = plan.get("estructura_pedagogica")
    if not isinstance(structure, dict):
        return None
    updates: PlanDict = {
        "metodologia": _join_strategies(structure.get("estrategias_metodologicas")),
    }
    if _is_present(structure.get("recursos_materiales")):
        updates["recursos"] = structure["recursos_materiales"]
    if _is_present(structure.get("adaptaciones_curriculares")):
        updates["adaptaciones"] = structure["adaptaciones_curriculares"]

    instruments = structure.get("instrumentos_evaluacion")
    evaluation = None
    if isinstance(instruments, dict):
        evaluation = _as_text_list(instruments.get("formativa"))
    elif isinstance(instruments, list):
        evaluation = _as_text_list(instruments)
    updates["evaluacion"] = evaluation or list(DEFAULT_EVALUATION)
    return updates


def class_development_from_source(plan: PlanDict) -> Optional[ClassDevelopmentMap]:
    return _normalize_class_development_collection(plan.get("desarrollo_clases"))


def class_development_from_normalized(plan: PlanDict) -> Optional[ClassDevelopmentMap]:
    return _normalize_class_development_collection(plan.get("desarrolloClases"))


def class_development_from_contents(plan: PlanDict) -> Optional[ClassDevelopmentMap]:
    contents = plan.get("contenidos")
    if not isinstance(contents, list) or not contents:
        return None
    print("[PlanNormalizer] ⚠️ No desarrollo_clases found, generating one per content")
    generated: ClassDevelopmentMap = {}
    for item in contents:
        text = _content_text(item)
        key = _unique_key(_truncate_title(text), generated)
        generated[key] = build_content_class_development(text)
    return generated


def generic_class_development(plan: PlanDict) -> ClassDevelopmentMap:
    print("[PlanNormalizer] ⚠️ No class development data, using generic entry")
    return build_generic_class_development()


FieldRule = Callable[[PlanDict], Optional[PlanDict]]
ClassDevelopmentRule = Callable[[PlanDict], Optional[ClassDevelopmentMap]]

FIELD_RULES: Tuple[FieldRule, ...] = (
    copy_general_info,
    copy_pedagogical_structure,
)

# First rule returning a map wins; the last one always applies
CLASS_DEVELOPMENT_RULES: Tuple[ClassDevelopmentRule, ...] = (
    class_development_from_source,
    class_development_from_normalized,
    class_development_from_contents,
    generic_class_development,
)


def normalize_document(document: PlanDict) -> PlanDict:
    """Apply the reshaping rules to an already-parsed document."""
    plan = dict(unwrap_plan(document))

    for rule in FIELD_RULES:
        updates = rule(plan)
        if updates:
            plan.update(updates)

    for rule in CLASS_DEVELOPMENT_RULES:
        class_development = rule(plan)
        if class_development:
            plan["desarrolloClases"] = class_development
            break

    return plan


def normalize_plan(raw_text: Optional[str], context: Optional[Dict[str, Any]] = None) -> PlanDict:
    """
    Normalize raw model output into the frontend plan shape.

    Args:
        raw_text: Text returned by the completion API, possibly fenced
        context: Request identity fields used to fill the fallback plan

    Returns:
        A plan dict that always has a non-empty desarrolloClases map
    """
    try:
        document = parse_plan_json(extract_json_block(raw_text))
    except ParseError as e:
        print(f"[PlanNormalizer] ❌ Could not parse model output, using fallback plan: {e.message}")
        return build_fallback_plan(context)

    plan = normalize_document(document)
    print(f"[PlanNormalizer] ✅ Plan normalized with {len(plan['desarrolloClases'])} class developments")
    return plan
