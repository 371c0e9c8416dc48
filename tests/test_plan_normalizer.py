"""
tests/test_plan_normalizer.py

Unit tests for the plan normalizer.

Verifies:
✔ fenced code blocks are stripped before parsing
✔ unparseable output degrades to the fallback plan
✔ wrapper keys, general info and pedagogical structure are reshaped
✔ desarrollo_clases entries are renamed and defaulted in order
✔ contents-only and empty documents still get class developments
✔ normalizing an already-normalized plan is a no-op
"""

import json

import pytest

from bringo_edu.agents.plan_normalizer import (
    CLASS_DEVELOPMENT_RULES,
    DEFAULT_DURATION,
    DEFAULT_METHODOLOGY,
    GENERIC_CONTENT_TITLE,
    build_fallback_plan,
    class_development_from_contents,
    copy_pedagogical_structure,
    extract_json_block,
    normalize_class_development_entry,
    normalize_document,
    normalize_plan,
    parse_plan_json,
    unwrap_plan,
)
from bringo_edu.core.errors import ParseError


class TestExtractJsonBlock:
    def test_plain_text_is_returned_stripped(self):
        assert extract_json_block('  {"a": 1}\n') == '{"a": 1}'

    def test_json_fence_is_removed(self):
        text = 'Aquí está el plan:\n```json\n{"a": 1}\n```\nSaludos'
        assert extract_json_block(text) == '{"a": 1}'

    def test_bare_fence_is_removed(self):
        text = '```\n{"a": 2}\n```'
        assert extract_json_block(text) == '{"a": 2}'

    def test_first_block_wins(self):
        text = '```json\n{"a": 1}\n```\n```json\n{"b": 2}\n```'
        assert extract_json_block(text) == '{"a": 1}'

    def test_empty_input(self):
        assert extract_json_block(None) == ""
        assert extract_json_block("") == ""


class TestParsePlanJson:
    def test_object_is_parsed(self):
        assert parse_plan_json('{"contenidos": []}') == {"contenidos": []}

    def test_invalid_json_raises_parse_error(self):
        with pytest.raises(ParseError):
            parse_plan_json("Lo siento, no puedo generar el plan.")

    def test_non_object_raises_parse_error(self):
        with pytest.raises(ParseError):
            parse_plan_json("[1, 2, 3]")


class TestFallback:
    def test_unparseable_output_returns_fallback_plan(self):
        context = {"grado": "5°", "asignatura": "Ciencias", "trimestre": "Segundo Trimestre"}
        plan = normalize_plan("esto no es json", context=context)

        assert plan["grado"] == "5°"
        assert plan["asignatura"] == "Ciencias"
        assert plan["trimestre"] == "Segundo Trimestre"
        assert len(plan["desarrolloClases"]) == 2
        assert plan["contenidos"]

    def test_fallback_without_context(self):
        plan = build_fallback_plan()
        assert "grado" not in plan
        assert plan["desarrolloClases"]

    def test_fallback_entries_have_phases_with_activities(self):
        plan = build_fallback_plan({"grado": "3°"})
        for entry in plan["desarrolloClases"].values():
            assert entry["objetivos"]
            assert entry["materiales"]
            assert entry["fases"]
            for phase in entry["fases"]:
                assert phase["titulo"]
                assert all({"tiempo", "descripcion"} <= set(a) for a in phase["actividades"])

    def test_array_output_uses_fallback(self):
        plan = normalize_plan('```json\n["a", "b"]\n```')
        assert plan["desarrolloClases"]
        assert plan["metodologia"] == "Estrategias metodológicas alineadas con MEDUCA"


class TestReshapingRules:
    def test_unwrap_known_wrappers(self):
        assert unwrap_plan({"plan_trimestral": {"a": 1}}) == {"a": 1}
        assert unwrap_plan({"plan_clase": {"b": 2}}) == {"b": 2}
        assert unwrap_plan({"plan": {"c": 3}}) == {"c": 3}

    def test_unwrap_ignores_non_object_wrapper(self):
        document = {"plan": "texto", "contenidos": ["x"]}
        assert unwrap_plan(document) is document

    def test_general_info_is_copied_to_top_level(self, sample_model_plan):
        plan = normalize_document(sample_model_plan)

        assert plan["contenidos"] == ["Fracciones", "Decimales"]
        assert plan["competencias"] == ["Resuelve problemas con fracciones"]
        assert plan["indicadoresLogro"] == ["Compara fracciones", "Ordena decimales"]
        assert plan["grado"] == "5°"
        assert plan["docente"] == "Ana Pérez"

    def test_identity_fields_do_not_override_top_level(self):
        plan = normalize_document({"grado": "6°", "informacion_general": {"grado": "5°"}})
        assert plan["grado"] == "6°"

    def test_pedagogical_structure_is_copied(self, sample_model_plan):
        plan = normalize_document(sample_model_plan)

        assert plan["metodologia"] == "Aprendizaje basado en problemas, Trabajo cooperativo"
        assert plan["recursos"] == ["Regletas", "Fichas"]
        assert plan["adaptaciones"] == ["Material concreto adicional"]
        assert plan["evaluacion"] == ["Lista de cotejo", "Rúbrica"]
        assert plan["observaciones"] == "Usar ejemplos del mercado local"

    def test_pedagogical_structure_defaults(self):
        updates = copy_pedagogical_structure({"estructura_pedagogica": {}})
        assert updates == {
            "metodologia": DEFAULT_METHODOLOGY,
            "evaluacion": ["Evaluación formativa continua"],
        }

    def test_pedagogical_structure_accepts_string_and_list_shapes(self):
        updates = copy_pedagogical_structure({
            "estructura_pedagogica": {
                "estrategias_metodologicas": "Clase invertida",
                "instrumentos_evaluacion": ["Portafolio"],
            }
        })
        assert updates["metodologia"] == "Clase invertida"
        assert updates["evaluacion"] == ["Portafolio"]

    def test_missing_sections_skip_their_rules(self):
        plan = normalize_document({"contenidos": ["Suma"]})
        assert "metodologia" not in plan
        assert "competencias" not in plan


class TestClassDevelopment:
    def test_source_entries_are_renamed_in_order(self, sample_model_plan):
        plan = normalize_document(sample_model_plan)
        development = plan["desarrolloClases"]

        assert list(development) == ["Fracciones", "Decimales"]
        fractions = development["Fracciones"]
        assert fractions["objetivos"] == ["Identificar fracciones propias"]
        assert fractions["materiales"] == ["Regletas de colores"]
        assert [p["titulo"] for p in fractions["fases"]] == ["SESIÓN 1 - Exploración", "Sesión 2"]
        assert fractions["fases"][0]["actividades"][1] == {
            "tiempo": "10-45 min",
            "descripcion": "Trabajo con regletas",
        }
        assert fractions["fases"][1]["actividades"] == [
            {"tiempo": "45 min", "descripcion": "Desarrollo de la sesión"}
        ]

    def test_missing_entry_fields_get_defaults(self):
        entry = normalize_class_development_entry({"objetivos": ["Leer números decimales"]})

        assert entry["duracion"] == DEFAULT_DURATION
        assert entry["objetivos"] == ["Leer números decimales"]
        assert entry["materiales"] == ["Material didáctico impreso", "Recursos multimedia"]
        assert len(entry["fases"]) == 1
        assert entry["fases"][0]["titulo"] == "Sesión 1"

    def test_non_object_entry_is_fully_defaulted(self):
        entry = normalize_class_development_entry("texto libre")
        assert entry["objetivos"] == [
            "Comprender conceptos fundamentales",
            "Aplicar conocimientos en situaciones prácticas",
        ]
        assert entry["fases"]

    def test_list_shaped_class_development(self):
        plan = normalize_document({
            "desarrollo_clases": [
                {"titulo": "Ecosistemas", "fases": [{"titulo": "Inicio"}]},
                {"duracion": "1 sesión"},
            ]
        })
        assert list(plan["desarrolloClases"]) == ["Ecosistemas", "Contenido 2"]
        assert plan["desarrolloClases"]["Contenido 2"]["duracion"] == "1 sesión"

    def test_contents_only_generates_one_entry_per_content(self):
        long_content = "Análisis de textos narrativos y descriptivos del contexto panameño actual"
        plan = normalize_document({"contenidos": ["Suma", long_content]})
        development = plan["desarrolloClases"]

        assert len(development) == 2
        titles = list(development)
        assert titles[0] == "Suma"
        assert titles[1] == long_content[:47] + "..."
        assert len(titles[1]) == 50
        assert len(development["Suma"]["fases"]) == 3
        assert development["Suma"]["objetivos"][0] == "Comprender los conceptos de: Suma"

    def test_duplicate_contents_keep_one_entry_each(self):
        generated = class_development_from_contents({"contenidos": ["Suma", "Suma"]})
        assert list(generated) == ["Suma", "Suma (2)"]

    def test_contents_from_general_info_feed_generation(self):
        plan = normalize_document({"informacion_general": {"contenidos_conceptuales": ["Resta"]}})
        assert list(plan["desarrolloClases"]) == ["Resta"]

    def test_empty_document_gets_generic_entry(self):
        plan = normalize_document({})
        assert list(plan["desarrolloClases"]) == [GENERIC_CONTENT_TITLE]

    def test_empty_class_development_falls_through(self):
        plan = normalize_document({"desarrollo_clases": {}, "contenidos": []})
        assert list(plan["desarrolloClases"]) == [GENERIC_CONTENT_TITLE]

    def test_last_rule_always_applies(self):
        assert CLASS_DEVELOPMENT_RULES[-1]({})


class TestIdempotency:
    def test_renormalizing_model_plan_is_stable(self, sample_model_plan):
        once = normalize_document(sample_model_plan)
        twice = normalize_document(once)
        assert twice == once

    def test_renormalizing_fallback_is_stable(self):
        fallback = build_fallback_plan({"grado": "4°"})
        assert normalize_document(fallback) == fallback

    def test_renormalizing_generated_contents_is_stable(self):
        once = normalize_document({"contenidos": ["Suma", "Resta"]})
        assert normalize_document(once) == once

    def test_normalize_plan_accepts_its_own_output(self, sample_model_plan):
        once = normalize_plan(json.dumps(sample_model_plan))
        assert normalize_plan(json.dumps(once, ensure_ascii=False)) == once

    def test_input_document_is_not_mutated(self, sample_model_plan):
        snapshot = json.loads(json.dumps(sample_model_plan))
        normalize_document(sample_model_plan)
        assert sample_model_plan == snapshot
