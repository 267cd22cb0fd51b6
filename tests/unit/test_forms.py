from __future__ import annotations

import pytest

from listingforms.exceptions import TemplateError
from listingforms.forms import AFFORDANCES, FormEngine, affordance_for
from listingforms.settings import Settings
from listingforms.typing.enums import FieldKind, InputAffordance
from listingforms.typing.models import Template, TemplateSchema


def _schema(**overrides: object) -> TemplateSchema:
    payload: dict[str, object] = {
        "fields": [
            {"name": "title", "kind": "text", "label": "Title", "required": True},
            {"name": "price", "kind": "number", "label": "Price"},
            {"name": "contact.telegram", "kind": "text", "label": "Telegram"},
        ],
        "validation_rules": [
            {"field": "price", "rule": "min", "value": 5000, "message": "Price too low"},
            {"field": "price", "rule": "max", "value": 100, "message": "Price too high"},
            {"field": "contact.telegram", "rule": "pattern", "value": r"^@\w+$", "message": "Bad handle"},
        ],
    }
    payload.update(overrides)
    return TemplateSchema.model_validate(payload)


def _engine(data: dict[str, object] | None = None, **overrides: object) -> FormEngine:
    return FormEngine(_schema(**overrides), data, required_message="{label} is required.")


def test_affordance_table_covers_every_field_kind() -> None:
    assert set(AFFORDANCES) == set(FieldKind)
    assert affordance_for(FieldKind.PHONE) == InputAffordance.TEXT_INPUT
    assert affordance_for(FieldKind.CHECKBOX) == InputAffordance.CHECKBOX_GROUP
    assert affordance_for(FieldKind.FILE) == InputAffordance.FILE_PICKER


def test_get_value_returns_none_for_missing_paths() -> None:
    engine = _engine({"contact": {"email": "a@b.ph"}})

    assert engine.get_value("contact.email") == "a@b.ph"
    assert engine.get_value("contact.telegram") is None
    assert engine.get_value("missing.deeply.nested") is None
    assert engine.get_value("contact..email") is None


@pytest.mark.parametrize("name", ["a.b.c", "contact.whatsapp", "single"])
@pytest.mark.parametrize("value", ["x", 0, ["p"], {"k": 1}])
def test_set_value_then_get_value_round_trip(name: str, value: object) -> None:
    engine = _engine({"a": "scalar"})

    engine.set_value(name, value)

    assert engine.get_value(name) == value


def test_initial_dotted_keys_are_expanded() -> None:
    engine = _engine({"contact.telegram": "@juan"})

    assert engine.data == {"contact": {"telegram": "@juan"}}


def test_validate_reports_required_fields() -> None:
    engine = _engine()

    assert engine.validate() is False
    assert engine.errors == {"title": "Title is required."}


@pytest.mark.parametrize(
    ("value", "has_error"),
    [
        (None, True),
        ("", True),
        (0, True),
        ([], True),
        ({}, True),
        ("x", False),
        (1, False),
        (["a"], False),
    ],
)
def test_required_error_iff_value_is_blank(value: object, has_error: bool) -> None:
    engine = _engine({"title": value})

    engine.validate()

    assert ("title" in engine.errors) is has_error


def test_later_rule_message_overwrites_earlier_one() -> None:
    engine = _engine({"title": "t", "price": 150})

    assert engine.validate() is False
    assert engine.errors == {"price": "Price too high"}


def test_rules_skip_blank_values() -> None:
    engine = _engine({"title": "t", "price": 0})

    assert engine.validate() is True
    assert engine.errors == {}


def test_rules_compare_numeric_strings() -> None:
    engine = _engine({"title": "t", "price": "50"})

    engine.validate()

    assert engine.errors == {"price": "Price too low"}


def test_pattern_rule_on_dotted_field() -> None:
    engine = _engine({"title": "t", "contact": {"telegram": "juan"}})

    engine.validate()
    assert engine.errors == {"contact.telegram": "Bad handle"}

    engine.set_value("contact.telegram", "@juan")
    assert engine.validate() is True


def test_set_value_clears_existing_error() -> None:
    engine = _engine()
    engine.validate()

    engine.set_value("title", "")

    assert "title" not in engine.errors


def test_errors_and_data_are_copies() -> None:
    engine = _engine({"title": "t", "contact": {"telegram": "@a"}})
    engine.validate()

    engine.errors["title"] = "tampered"
    engine.data["contact"]["telegram"] = "@b"

    assert engine.errors == {}
    assert engine.get_value("contact.telegram") == "@a"


def test_required_message_comes_from_settings(house_template: Template) -> None:
    engine = FormEngine.from_template(house_template, settings=Settings(required_message="Please fill {label}"))

    engine.validate()

    assert engine.errors["title"] == "Please fill Listing title"


def test_from_template_merges_defaults_with_initial_data(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(
        house_template,
        {"furnished": True, "contact.email": "a@b.ph"},
        settings=settings,
    )

    assert engine.get_value("type") == "house"
    assert engine.get_value("furnished") is True
    assert engine.get_value("contact.email") == "a@b.ph"
    assert engine.get_value("amenities") == ["parking", "security", "water_supply", "electricity"]


def test_toggle_option_adds_and_removes_membership(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(house_template, settings=settings)

    engine.toggle_option("amenities", "wifi", checked=True)
    engine.toggle_option("amenities", "wifi", checked=True)
    selection = engine.toggle_option("amenities", "parking", checked=False)

    assert selection == ["security", "water_supply", "electricity", "wifi"]
    assert engine.get_value("amenities") == selection


def test_toggle_option_starts_from_empty_selection(condo_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(condo_template, {"amenities": None}, settings=settings)

    assert engine.toggle_option("amenities", "gym") == ["gym"]


def test_select_option_stores_option_value(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(house_template, settings=settings)

    assert engine.select_option("bedrooms", "2") is True
    assert engine.get_value("bedrooms") == 2
    assert engine.select_option("bedrooms", "9") is False
    assert engine.get_value("bedrooms") == 2
    assert engine.select_option("furnished", True) is True
    assert engine.get_value("furnished") is True


def test_attach_files_stores_handles(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(house_template, settings=settings)

    stored = engine.attach_files("images", (handle for handle in ["img-1", "img-2"]))

    assert stored == ["img-1", "img-2"]
    assert engine.get_value("images") == ["img-1", "img-2"]


def test_attach_files_keeps_one_handle_on_single_file_field() -> None:
    engine = _engine(fields=[{"name": "doc", "kind": "file", "label": "Document"}], validation_rules=[])

    assert engine.attach_files("doc", ["a", "b"]) == ["a"]


@pytest.mark.parametrize(
    ("method", "args"),
    [
        ("toggle_option", ("title", "x")),
        ("select_option", ("amenities", "wifi")),
        ("attach_files", ("price", ["h"])),
        ("select_option", ("unknown", "x")),
    ],
)
def test_kind_specific_operations_reject_other_fields(
    house_template: Template,
    settings: Settings,
    method: str,
    args: tuple[object, ...],
) -> None:
    engine = FormEngine.from_template(house_template, settings=settings)

    with pytest.raises(TemplateError) as exc_info:
        getattr(engine, method)(*args)
    assert exc_info.value.template_id == "house_template_v1"


def test_render_field_selects_affordance_and_options(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(house_template, {"bedrooms": 3}, settings=settings)

    amenities = engine.render_field("amenities")
    bedrooms = engine.render_field("bedrooms")
    title = engine.render_field("title")

    assert amenities.affordance == InputAffordance.CHECKBOX_GROUP
    assert {option.value for option in amenities.options if option.selected} == {
        "parking",
        "security",
        "water_supply",
        "electricity",
    }
    assert bedrooms.affordance == InputAffordance.DROPDOWN
    assert [option.value for option in bedrooms.options if option.selected] == [3]
    assert title.affordance == InputAffordance.TEXT_INPUT
    assert title.options == []
    assert title.max_length == 100


def test_render_field_marks_false_radio_option(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(house_template, settings=settings)

    furnished = engine.render_field("furnished")

    assert furnished.affordance == InputAffordance.RADIO_GROUP
    assert [option.label for option in furnished.options if option.selected] == ["Unfurnished"]


def test_render_field_exposes_error() -> None:
    engine = _engine()
    engine.validate()

    assert engine.render_field("title").error == "Title is required."


def test_render_orders_sections_and_appends_other() -> None:
    engine = _engine(
        sections=[{"id": "main", "title": "Main", "fields": ["title"]}],
    )

    sections = engine.render()

    assert [section.id for section in sections] == ["main", "other"]
    assert [view.name for view in sections[1].fields] == ["price", "contact.telegram"]


def test_render_house_template_has_no_other_section(house_template: Template, settings: Settings) -> None:
    engine = FormEngine.from_template(house_template, settings=settings)

    assert [section.id for section in engine.render()] == [
        "basic_info",
        "details",
        "location",
        "amenities",
        "media",
        "contact",
    ]


def test_render_section_returns_known_section_and_rejects_unknown() -> None:
    engine = _engine()

    assert engine.render_section("other").title == "Other information"
    with pytest.raises(TemplateError, match="Unknown section"):
        engine.render_section("nope")


def test_submit_calls_handler_only_when_valid(mocker) -> None:
    handler = mocker.Mock()
    engine = _engine({"price": 50_000})

    assert engine.submit(handler) is False
    handler.assert_not_called()

    engine.set_value("title", "Condo")
    engine.set_value("price", 100)
    assert engine.submit(handler) is False

    engine.set_value("price", None)
    assert engine.submit(handler) is True
    handler.assert_called_once_with({"title": "Condo", "price": None})


def test_submit_hands_over_a_copy() -> None:
    received: list[dict[str, object]] = []
    engine = _engine({"title": "Condo", "contact": {"telegram": "@a"}})

    engine.submit(received.append)
    received[0]["contact"]["telegram"] = "@b"

    assert engine.get_value("contact.telegram") == "@a"
