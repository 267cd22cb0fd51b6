from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from listingforms.exceptions import TemplateError
from listingforms.typing.enums import MatchPolicy
from listingforms.typing.models import (
    ExtractionResult,
    FieldSchema,
    ImportTemplate,
    MappingRules,
    ParsingRules,
    PatternRule,
    Template,
    TemplateSchema,
)


def _fields() -> list[dict[str, Any]]:
    return [
        {"name": "title", "kind": "text", "label": "Title"},
        {"name": "type", "kind": "select", "label": "Type", "options": [{"value": "house", "label": "House"}]},
        {"name": "contact.email", "kind": "email", "label": "Email"},
    ]


@pytest.mark.parametrize(
    ("schema", "message"),
    [
        ({"fields": [*_fields(), {"name": "title", "kind": "text", "label": "Again"}]}, "Duplicate field name"),
        ({"fields": [{"name": "contact..email", "kind": "email", "label": "E"}]}, "empty path segment"),
        ({"fields": [{"name": "pick", "kind": "radio", "label": "Pick"}]}, "declares no options"),
        (
            {"fields": _fields(), "sections": [{"id": "other", "title": "Other", "fields": []}]},
            "is reserved",
        ),
        (
            {
                "fields": _fields(),
                "sections": [{"id": "a", "title": "A"}, {"id": "a", "title": "A again"}],
            },
            "Duplicate section id",
        ),
        (
            {"fields": _fields(), "sections": [{"id": "a", "title": "A", "fields": ["ghost"]}]},
            "unknown field 'ghost'",
        ),
        (
            {
                "fields": _fields(),
                "sections": [
                    {"id": "a", "title": "A", "fields": ["title"]},
                    {"id": "b", "title": "B", "fields": ["title"]},
                ],
            },
            "belongs to sections",
        ),
        (
            {"fields": [{"name": "title", "kind": "text", "label": "Title", "section": "nowhere"}]},
            "unknown section 'nowhere'",
        ),
        (
            {
                "fields": [
                    {"name": "title", "kind": "text", "label": "Title", "section": "b"},
                ],
                "sections": [{"id": "a", "title": "A", "fields": ["title"]}, {"id": "b", "title": "B"}],
            },
            "but is listed by section 'a'",
        ),
        (
            {"fields": _fields(), "validation_rules": [{"field": "ghost", "rule": "min", "value": 1, "message": "m"}]},
            "references unknown field 'ghost'",
        ),
        (
            {
                "fields": _fields(),
                "validation_rules": [{"field": "title", "rule": "max", "value": "ten", "message": "m"}],
            },
            "needs a numeric bound",
        ),
        (
            {
                "fields": _fields(),
                "validation_rules": [{"field": "title", "rule": "pattern", "value": 3, "message": "m"}],
            },
            "needs a string pattern",
        ),
        (
            {
                "fields": _fields(),
                "validation_rules": [{"field": "title", "rule": "pattern", "value": "([", "message": "m"}],
            },
            "not a valid regex",
        ),
    ],
)
def test_schema_integrity_errors(schema: dict[str, Any], message: str) -> None:
    with pytest.raises(TemplateError, match=message):
        TemplateSchema.model_validate(schema)


def test_template_attaches_its_id_to_integrity_errors() -> None:
    payload = {"id": "t1", "name": "T", "form_schema": {"fields": [{"name": "p", "kind": "select", "label": "P"}]}}

    with pytest.raises(TemplateError) as exc_info:
        Template.model_validate(payload)

    assert exc_info.value.template_id == "t1"
    assert str(exc_info.value).startswith("Invalid template 't1':")


def test_schema_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        TemplateSchema.model_validate({"fields": [], "unexpected": True})


def test_resolved_sections_collects_section_attributes_and_leftovers() -> None:
    schema = TemplateSchema.model_validate(
        {
            "fields": [
                {"name": "title", "kind": "text", "label": "Title"},
                {"name": "price", "kind": "number", "label": "Price", "section": "main"},
                {"name": "notes", "kind": "textarea", "label": "Notes"},
            ],
            "sections": [{"id": "main", "title": "Main", "fields": ["title"]}],
        },
    )

    sections = schema.resolved_sections()

    assert [(section.id, section.fields) for section in sections] == [
        ("main", ["title", "price"]),
        ("other", ["notes"]),
    ]
    assert schema.sections[0].fields == ["title"]


def test_option_for_matches_exact_then_string_form() -> None:
    field_schema = FieldSchema.model_validate(
        {
            "name": "bedrooms",
            "kind": "select",
            "label": "Bedrooms",
            "options": [{"value": 1, "label": "One"}, {"value": True, "label": "Yes"}],
        },
    )

    assert field_schema.path == ["bedrooms"]
    assert field_schema.option_for(1).label == "One"
    assert field_schema.option_for(True).label == "Yes"
    assert field_schema.option_for("1").label == "One"
    assert field_schema.option_for("TRUE").label == "Yes"
    assert field_schema.option_for("2") is None


def test_pattern_rule_compiles_case_insensitively() -> None:
    rule = PatternRule(patterns=[r"php\s*(\d+)"])

    assert rule.compiled[0].search("PHP 100").group(1) == "100"
    assert rule.policy == MatchPolicy.FIRST


def test_pattern_rule_rejects_invalid_regex() -> None:
    with pytest.raises(TemplateError, match="Invalid pattern"):
        PatternRule(patterns=["(unclosed"])


def _parsing_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        name: {"patterns": [r"(\d+)"]}
        for name in ("price", "location", "bedrooms", "bathrooms", "area", "contacts", "type")
    }
    payload["amenities"] = {"patterns": ["pool"], "policy": "all"}
    payload.update(overrides)
    return payload


def test_parsing_rules_require_aggregating_amenities() -> None:
    with pytest.raises(TemplateError, match="requires policy 'all'"):
        ParsingRules.model_validate(_parsing_payload(amenities={"patterns": ["pool"]}))


def test_parsing_rules_reject_aggregating_scalar_fields() -> None:
    with pytest.raises(TemplateError, match="Field 'price' does not support"):
        ParsingRules.model_validate(_parsing_payload(price={"patterns": ["x"], "policy": "all"}))


def test_parsing_rules_reject_unknown_type_codes() -> None:
    with pytest.raises(TemplateError, match="unknown type"):
        ParsingRules.model_validate(_parsing_payload(type_keywords=[{"keyword": "castle", "code": "castle"}]))


def test_with_contact_policy_returns_updated_copy() -> None:
    rules = ParsingRules.model_validate(_parsing_payload())

    updated = rules.with_contact_policy(MatchPolicy.LAST)

    assert updated.contacts.policy == MatchPolicy.LAST
    assert rules.contacts.policy == MatchPolicy.FIRST
    assert rules.with_contact_policy(MatchPolicy.FIRST) is rules
    assert updated.contacts.compiled


def test_mapping_rules_validate_aliases_and_patterns() -> None:
    with pytest.raises(TemplateError, match="must be lowercase"):
        MappingRules(region_aliases={"Makati": "manila"})
    with pytest.raises(TemplateError, match="Invalid whatsapp contact pattern"):
        MappingRules.model_validate({"contact_patterns": {"whatsapp": "(["}})


def test_import_template_attaches_its_id_to_rule_errors() -> None:
    payload = {
        "id": "import_v2",
        "name": "Import",
        "parsing_rules": _parsing_payload(bedrooms={"patterns": ["(bad"]}),
    }

    with pytest.raises(TemplateError) as exc_info:
        ImportTemplate.model_validate(payload)
    assert exc_info.value.template_id == "import_v2"


@pytest.mark.parametrize(
    "values",
    [{"bedrooms": 0}, {"bedrooms": 11}, {"bathrooms": 12}, {"area": 0}, {"area": 10_001}, {"price": 0}],
)
def test_extraction_result_rejects_out_of_domain_values(values: dict[str, Any]) -> None:
    with pytest.raises(ValidationError):
        ExtractionResult(**values)


def test_extraction_result_missing_fields() -> None:
    result = ExtractionResult(price=1000, amenities={"wifi"})

    assert result.missing_fields() == ["location", "bedrooms", "bathrooms", "area", "contacts"]
