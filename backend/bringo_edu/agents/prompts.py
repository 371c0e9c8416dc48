"""Prompt templates for plan generation (Panamanian MEDUCA curriculum)."""
from datetime import datetime

SYSTEM_PROMPT = (
    "Eres un experto pedagogo especializado en el currículo del MEDUCA de Panamá. "
    "Generas planes trimestrales detallados, profesionales y alineados con el marco "
    "curricular panameño. Responde SOLO con JSON válido, sin texto adicional."
)

_SESSION_EXAMPLE = """
        "sesiones_detalladas": [
          {
            "titulo": "SESIÓN 1 - Introducción y exploración inicial",
            "actividades": [
              {"tiempo": "0-10 min", "descripcion": "ACTIVIDAD CONCRETA: Presentación interactiva usando ejemplos reales del contexto panameño"},
              {"tiempo": "10-25 min", "descripcion": "ACTIVIDAD CONCRETA: Lluvia de ideas grupal sobre conceptos previos con participación activa"},
              {"tiempo": "25-40 min", "descripcion": "ACTIVIDAD CONCRETA: Ejercicio práctico guiado usando material concreto disponible en aulas"},
              {"tiempo": "40-45 min", "descripcion": "ACTIVIDAD CONCRETA: Síntesis de aprendizajes y anticipación de la próxima sesión"}
            ]
          },
          {
            "titulo": "SESIÓN 2 - Desarrollo y aplicación práctica",
            "actividades": [
              {"tiempo": "0-15 min", "descripcion": "ACTIVIDAD CONCRETA: Repaso interactivo de la sesión anterior con preguntas dirigidas"},
              {"tiempo": "15-35 min", "descripcion": "ACTIVIDAD CONCRETA: Trabajo en equipos resolviendo problemas del contexto local panameño"},
              {"tiempo": "35-45 min", "descripcion": "ACTIVIDAD CONCRETA: Presentación de soluciones y coevaluación entre compañeros"}
            ]
          }
        ]"""

_ACTIVITY_EXAMPLES = """**EJEMPLOS DE ACTIVIDADES CONCRETAS:**
- "Los estudiantes identificarán patrones usando fichas de colores en equipos de 4"
- "Trabajo en equipos resolviendo problemas matemáticos del contexto local panameño"
- "Elaboración de mapa conceptual colaborativo sobre temas de ciencias sociales"
- "Simulación de situaciones reales aplicando conceptos de lengua y literatura"

**IMPORTANTE: Responde ÚNICAMENTE con el JSON válido, sin texto adicional, sin comentarios, sin markdown.**"""


def build_trimester_prompt(request) -> str:
    year = datetime.now().year
    return f"""Eres un especialista en el Currículo Nacional de Panamá (MEDUCA). Genera un plan de estudios COMPLETO y DETALLADO para el TRIMESTRE específico:

**CONTEXTO:**
- GRADO: {request.grade}
- ASIGNATURA: {request.subject}
- TRIMESTRE: {request.trimester}
- DOCENTE: {request.teacher_name}
- CENTRO EDUCATIVO: {request.institution}

**INSTRUCCIONES CRÍTICAS - GENERA SOLO JSON VÁLIDO:**

**1. ESTRUCTURA OBLIGATORIA - DEBE INCLUIR desarrollo_clases para CADA contenido:**

{{
  "plan_trimestral": {{
    "informacion_general": {{
      "grado": "{request.grade}",
      "asignatura": "{request.subject}",
      "trimestre": "{request.trimester}",
      "docente": "{request.teacher_name}",
      "institucion": "{request.institution}",
      "anioEscolar": "{year}",
      "duracionSemanas": "10-12",
      "contenidos_conceptuales": ["array de 3-5 contenidos REALES del currículo MEDUCA"],
      "competencias": ["array de 3-5 competencias específicas MEDUCA"],
      "indicadores_de_logro": ["array de 4-6 indicadores observables y medibles"]
    }},
    "estructura_pedagogica": {{
      "estrategias_metodologicas": ["array de 3-4 estrategias aplicables"],
      "recursos_materiales": ["array de recursos CONCRETOS y disponibles"],
      "instrumentos_evaluacion": {{
        "formativa": ["array de 3-4 instrumentos formativos"],
        "sumativa": ["array de 2-3 instrumentos sumativos"]
      }},
      "adaptaciones_curriculares": ["array de 2-3 adaptaciones para diversidad"]
    }},
    "desarrollo_clases": {{
      "CONTENIDO_1_TITULO_REAL": {{
        "duracion": "3-4 sesiones de 45 minutos",
        "objetivos_aprendizaje": ["3-4 objetivos medibles y específicos"],
        "materiales_recursos": ["materiales CONCRETOS para este contenido"],{_SESSION_EXAMPLE}
      }}
    }},
    "observaciones": "Texto con recomendaciones prácticas para implementación en el aula panameña"
  }}
}}

**2. REQUISITOS ESPECÍFICOS:**

- Los CONTENIDOS deben ser REALES del currículo MEDUCA para {request.grade} {request.subject}
- Cada contenido en "desarrollo_clases" debe tener entre 2-4 sesiones REALISTAS
- Las ACTIVIDADES deben ser CONCRETAS, PRÁCTICAS y APLICABLES en aula panameña
- Los MATERIALES deben ser ESPECÍFICOS y disponibles en escuelas panameñas
- Las DURACIONES deben ser REALISTAS (45 minutos por sesión)
- Los OBJETIVOS deben ser MEDIBLES y ESPECÍFICOS
- DEBEN generarse DESARROLLOS DE CLASES para TODOS los contenidos listados

{_ACTIVITY_EXAMPLES}"""


def build_topic_prompt(request, class_duration: str) -> str:
    year = datetime.now().year
    return f"""Eres un especialista en el Currículo Nacional de Panamá (MEDUCA). Genera un plan de clase COMPLETO y DETALLADO para un TEMA específico:

**CONTEXTO:**
- GRADO: {request.grade}
- ASIGNATURA: {request.subject}
- TEMA: {request.topic}
- DURACIÓN DE LA CLASE: {class_duration}
- DOCENTE: {request.teacher_name}
- CENTRO EDUCATIVO: {request.institution}

**INSTRUCCIONES CRÍTICAS - GENERA SOLO JSON VÁLIDO:**

{{
  "plan_clase": {{
    "informacion_general": {{
      "grado": "{request.grade}",
      "asignatura": "{request.subject}",
      "tema": "{request.topic}",
      "duracionClase": "{class_duration}",
      "docente": "{request.teacher_name}",
      "institucion": "{request.institution}",
      "anioEscolar": "{year}",
      "contenidos_conceptuales": ["array de 2-4 subtemas REALES del tema según MEDUCA"],
      "competencias": ["array de 2-4 competencias específicas MEDUCA"],
      "indicadores_de_logro": ["array de 3-5 indicadores observables y medibles"]
    }},
    "estructura_pedagogica": {{
      "estrategias_metodologicas": ["array de 2-4 estrategias aplicables"],
      "recursos_materiales": ["array de recursos CONCRETOS y disponibles"],
      "instrumentos_evaluacion": {{
        "formativa": ["array de 2-3 instrumentos formativos"],
        "sumativa": ["array de 1-2 instrumentos sumativos"]
      }},
      "adaptaciones_curriculares": ["array de 2-3 adaptaciones para diversidad"]
    }},
    "desarrollo_clases": {{
      "{request.topic}": {{
        "duracion": "{class_duration}",
        "objetivos_aprendizaje": ["3-4 objetivos medibles y específicos"],
        "materiales_recursos": ["materiales CONCRETOS para este tema"],{_SESSION_EXAMPLE}
      }}
    }},
    "observaciones": "Texto con recomendaciones prácticas para implementación en el aula panameña"
  }}
}}

**REQUISITOS ESPECÍFICOS:**

- Las fases de cada sesión deben sumar exactamente {class_duration}
- Las ACTIVIDADES deben ser CONCRETAS, PRÁCTICAS y APLICABLES en aula panameña
- Los OBJETIVOS deben ser MEDIBLES y ESPECÍFICOS

{_ACTIVITY_EXAMPLES}"""
