"""Template schema domain models."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from listingforms.exceptions import TemplateError
from listingforms.typing.enums import FieldKind, LayoutType, PropertyType, RuleKind, TemplateType

OTHER_SECTION_ID = "other"
OTHER_SECTION_TITLE = "Other information"

_CHOICE_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO, FieldKind.CHECKBOX})

OptionValue = str | int | float | bool


class SelectOption(BaseModel):
    """Value/label pair offered by choice fields."""

    model_config = ConfigDict(extra="forbid")

    value: OptionValue
    label: str
    disabled: bool = False


class FieldSchema(BaseModel):
    """Single form field definition."""

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: FieldKind
    label: str
    required: bool = False
    placeholder: str | None = None
    help_text: str | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    max_length: int | None = None
    min_length: int | None = None
    multiple: bool = False
    accept: str | None = None
    options: list[SelectOption] = Field(default_factory=list)
    section: str | None = None

    @property
    def path(self) -> list[str]:
        """Return the dotted field name split into path segments."""
        return self.name.split(".")

    def option_for(self, value: object) -> SelectOption | None:
        """Return the option whose value matches ``value``.

        Values coming from HTML-like inputs arrive as strings, so the string
        form of the option value is accepted as well.
        """
        for option in self.options:
            if option.value == value and type(option.value) is type(value):
                return option
        for option in self.options:
            if str(option.value).lower() == str(value).lower():
                return option
        return None


class ValidationRule(BaseModel):
    """Cross-field validation rule evaluated by the form engine."""

    model_config = ConfigDict(extra="forbid")

    field: str
    rule: RuleKind
    value: float | str
    message: str


class LayoutConfig(BaseModel):
    """Layout hint for a template or a section."""

    model_config = ConfigDict(extra="forbid")

    type: LayoutType = LayoutType.STACK
    columns: int | None = None
    spacing: str | None = None
    responsive: bool = False


class FormSection(BaseModel):
    """Named group of fields rendered together."""

    model_config = ConfigDict(extra="forbid")

    id: str
    title: str
    description: str | None = None
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    fields: list[str] = Field(default_factory=list)
    collapsible: bool = False
    default_expanded: bool = True


class TemplateSchema(BaseModel):
    """Fields, sections, rules and defaults of a form template."""

    model_config = ConfigDict(extra="forbid")

    fields: list[FieldSchema] = Field(default_factory=list)
    validation_rules: list[ValidationRule] = Field(default_factory=list)
    default_values: dict[str, Any] = Field(default_factory=dict)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    sections: list[FormSection] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_integrity(self) -> TemplateSchema:
        check_schema_integrity(self)
        return self

    def get_field(self, name: str) -> FieldSchema | None:
        """Return the field named ``name`` if the schema declares it."""
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    def resolved_sections(self) -> list[FormSection]:
        """Return declared sections plus the implicit "other" section.

        Fields listed by a section stay in that section. Fields that only
        carry a ``section`` attribute are appended to it, and anything left
        over lands in the trailing "other" section.

        Returns:
            list[FormSection]: Sections in render order.
        """
        assigned: set[str] = set()
        resolved: list[FormSection] = []
        for section in self.sections:
            names = list(section.fields)
            names.extend(
                schema_field.name
                for schema_field in self.fields
                if schema_field.section == section.id and schema_field.name not in names
            )
            assigned.update(names)
            resolved.append(section.model_copy(update={"fields": names}))

        leftovers = [schema_field.name for schema_field in self.fields if schema_field.name not in assigned]
        if leftovers:
            resolved.append(FormSection(id=OTHER_SECTION_ID, title=OTHER_SECTION_TITLE, fields=leftovers))
        return resolved


class TemplateMetadata(BaseModel):
    """Free-form descriptive metadata."""

    model_config = ConfigDict(extra="forbid")

    description: str | None = None
    author: str | None = None
    tags: list[str] = Field(default_factory=list)
    property_type: PropertyType | None = None


class Template(BaseModel):
    """Versioned form template for one property type."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    type: TemplateType = TemplateType.PROPERTY
    version: str = "1.0.0"
    is_default: bool = False
    is_active: bool = True
    metadata: TemplateMetadata = Field(default_factory=TemplateMetadata)
    form_schema: TemplateSchema = Field(default_factory=TemplateSchema)

    @model_validator(mode="wrap")
    @classmethod
    def _attach_template_id(cls, data: Any, handler: Any) -> Template:
        try:
            return handler(data)
        except TemplateError as exc:
            if exc.template_id is not None:
                raise
            template_id = data.get("id") if isinstance(data, dict) else getattr(data, "id", None)
            raise TemplateError(message=exc.message, template_id=template_id) from exc


def check_schema_integrity(schema: TemplateSchema) -> None:
    """Reject schemas that reference unknown fields or sections.

    Args:
        schema (TemplateSchema): Schema to check.

    Raises:
        TemplateError: If the schema is malformed.
    """
    field_names: set[str] = set()
    for schema_field in schema.fields:
        if schema_field.name in field_names:
            raise TemplateError(message=f"Duplicate field name '{schema_field.name}'")
        if not all(schema_field.path):
            raise TemplateError(message=f"Field name '{schema_field.name}' has an empty path segment")
        if schema_field.kind in _CHOICE_KINDS and not schema_field.options:
            raise TemplateError(
                message=f"Field '{schema_field.name}' of kind '{schema_field.kind}' declares no options",
            )
        field_names.add(schema_field.name)

    section_ids: set[str] = set()
    owner_by_field: dict[str, str] = {}
    for section in schema.sections:
        if section.id == OTHER_SECTION_ID:
            raise TemplateError(message=f"Section id '{OTHER_SECTION_ID}' is reserved")
        if section.id in section_ids:
            raise TemplateError(message=f"Duplicate section id '{section.id}'")
        section_ids.add(section.id)
        for name in section.fields:
            if name not in field_names:
                raise TemplateError(message=f"Section '{section.id}' references unknown field '{name}'")
            if name in owner_by_field:
                raise TemplateError(
                    message=f"Field '{name}' belongs to sections '{owner_by_field[name]}' and '{section.id}'",
                )
            owner_by_field[name] = section.id

    for schema_field in schema.fields:
        if schema_field.section is None:
            continue
        if schema_field.section not in section_ids:
            raise TemplateError(
                message=f"Field '{schema_field.name}' references unknown section '{schema_field.section}'",
            )
        owner = owner_by_field.get(schema_field.name)
        if owner is not None and owner != schema_field.section:
            raise TemplateError(
                message=(
                    f"Field '{schema_field.name}' declares section '{schema_field.section}' "
                    f"but is listed by section '{owner}'"
                ),
            )

    for rule in schema.validation_rules:
        _check_rule(rule, field_names)


def _check_rule(rule: ValidationRule, field_names: set[str]) -> None:
    """Validate one rule against the declared field names.

    Args:
        rule (ValidationRule): Rule to check.
        field_names (set[str]): Declared field names.

    Raises:
        TemplateError: If the rule targets an unknown field or carries a bad comparison value.
    """
    if rule.field not in field_names:
        raise TemplateError(message=f"Validation rule '{rule.rule}' references unknown field '{rule.field}'")

    if rule.rule in {RuleKind.MIN, RuleKind.MAX}:
        if not isinstance(rule.value, int | float):
            raise TemplateError(
                message=f"Rule '{rule.rule}' on '{rule.field}' needs a numeric bound, got {rule.value!r}",
            )
        return

    if not isinstance(rule.value, str):
        raise TemplateError(message=f"Pattern rule on '{rule.field}' needs a string pattern")
    try:
        re.compile(rule.value)
    except re.error as exc:
        raise TemplateError(message=f"Pattern rule on '{rule.field}' is not a valid regex: {exc}") from exc
