"""Built-in template registry and filesystem template store."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, cast
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from listingforms import logger
from listingforms.exceptions import TemplateStoreError
from listingforms.templates import (
    build_condo_template,
    build_facebook_import_template,
    build_house_template,
    build_village_template,
)
from listingforms.typing.enums import PropertyType, TemplateType
from listingforms.typing.models import ImportTemplate, Template

_TEMPLATE_FILE_VERSION = 1
_TEMPLATE_SUFFIX = ".template.json"

_PROPERTY_BUILDERS = {
    PropertyType.HOUSE: build_house_template,
    PropertyType.CONDO: build_condo_template,
    PropertyType.VILLAGE: build_village_template,
}

# Keys used by templates exported before the envelope format existed.
_LEGACY_TEMPLATE_KEYS = {"isDefault": "is_default", "isActive": "is_active", "schema": "form_schema"}
_LEGACY_METADATA_KEYS = {"propertyType": "property_type"}
_LEGACY_SCHEMA_KEYS = {
    "validationRules": "validation_rules",
    "defaultValues": "default_values",
    "formSections": "sections",
}
_LEGACY_FIELD_KEYS = {"type": "kind", "helpText": "help_text", "maxLength": "max_length", "minLength": "min_length"}
_LEGACY_SECTION_KEYS = {"sectionId": "id", "defaultExpanded": "default_expanded"}
_LEGACY_DROPPED_KEYS = frozenset({"createdAt", "updatedAt", "gridColumn", "conditional"})

AnyTemplate = Template | ImportTemplate


def get_property_template(property_type: PropertyType | str) -> Template:
    """Return a fresh copy of the built-in template for ``property_type``.

    Args:
        property_type (PropertyType | str): Property type code.

    Returns:
        Template: Built-in template.
    """
    return _PROPERTY_BUILDERS[PropertyType.from_str(str(property_type))]()


def get_import_template() -> ImportTemplate:
    """Return the built-in social-media import template."""
    return build_facebook_import_template()


def list_builtin_templates() -> list[AnyTemplate]:
    """Return every built-in template, property templates first.

    Returns:
        list[AnyTemplate]: Built-in templates.
    """
    templates: list[AnyTemplate] = [builder() for builder in _PROPERTY_BUILDERS.values()]
    templates.append(get_import_template())
    return templates


class TemplateStore(BaseModel):
    """Filesystem-based store for user-defined templates."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Template directory root.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the template directory exists after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)

    def template_path(self, template: AnyTemplate) -> Path:
        """Build the file path of ``template``.

        Args:
            template (AnyTemplate): Template to locate.

        Returns:
            Path: Template file path.
        """
        safe_name = re.sub(r"[^a-z0-9._-]+", "-", template.name.lower()).strip("-") or "template"
        safe_id = re.sub(r"[^A-Za-z0-9._-]+", "-", template.id)
        return self.root / f"{safe_name}-{safe_id}{_TEMPLATE_SUFFIX}"

    @staticmethod
    def load(path: Path) -> AnyTemplate:
        """Load a template file, migrating legacy payloads.

        Args:
            path (Path): Template file path.

        Raises:
            TemplateStoreError: If the file cannot be read or does not describe a template.

        Returns:
            AnyTemplate: Loaded template. Schema integrity problems raise ``TemplateError``.
        """
        _validate_template_file_path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise TemplateStoreError(message=f"Template file is not valid JSON: {path}") from exc

        migrated = _migrate_template_payload(payload)
        model: type[AnyTemplate] = Template
        if migrated.get("type") == TemplateType.FACEBOOK_IMPORT.value:
            model = ImportTemplate
        try:
            template = model.model_validate(migrated)
        except ValidationError as exc:
            raise TemplateStoreError(message=f"Template file does not match the template model: {path}\n{exc}") from exc

        logger.info("Template loaded", extra={"template_id": template.id, "template_path": str(path)})
        return template

    def save(self, template: AnyTemplate) -> Path:
        """Persist a template inside a versioned envelope.

        Args:
            template (AnyTemplate): Template payload.

        Returns:
            Path: Written file path.
        """
        path = self.template_path(template)
        envelope = {
            "template_file_version": _TEMPLATE_FILE_VERSION,
            "template": template.model_dump(mode="json"),
        }
        path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("Template saved", extra={"template_path": str(path)})
        return path

    def list_templates(self) -> list[Path]:
        """List stored template files.

        Returns:
            list[Path]: Template files.
        """
        return sorted(self.root.glob(f"*{_TEMPLATE_SUFFIX}"))

    def find(self, template_id: str) -> AnyTemplate | None:
        """Return the stored template with ``template_id``, if any.

        Args:
            template_id (str): Template identifier.

        Returns:
            AnyTemplate | None: Matching template.
        """
        for path in self.list_templates():
            template = self.load(path)
            if template.id == template_id:
                return template
        return None


def duplicate_template(template: AnyTemplate, name: str) -> AnyTemplate:
    """Copy ``template`` under a new id and name.

    The copy is never the default template of its type.

    Args:
        template (AnyTemplate): Source template.
        name (str): Name of the copy.

    Returns:
        AnyTemplate: Independent deep copy.
    """
    return template.model_copy(
        update={"id": f"{template.id}_copy_{uuid4().hex[:8]}", "name": name, "is_default": False},
        deep=True,
    )


def _migrate_template_payload(payload: object) -> dict[str, Any]:
    """Migrate a template payload from file format versions to the current model format.

    Args:
        payload (object): Raw JSON payload.

    Raises:
        TemplateStoreError: If the payload is not a JSON object or its file version is unknown.

    Returns:
        dict[str, Any]: Migrated template object payload.
    """
    if not isinstance(payload, dict):
        raise TemplateStoreError(message="Template payload must be a JSON object")

    payload_obj = cast("dict[str, Any]", payload)
    if "template_file_version" in payload_obj:
        version = payload_obj["template_file_version"]
        if version != _TEMPLATE_FILE_VERSION:
            raise TemplateStoreError(message=f"Unsupported template file version: {version!r}")
        embedded = payload_obj.get("template")
        if not isinstance(embedded, dict):
            raise TemplateStoreError(message="Template envelope has no 'template' object")
        return dict(embedded)

    # Bare template object without envelope.
    return _migrate_legacy_template(payload_obj)


def _migrate_legacy_template(payload: dict[str, Any]) -> dict[str, Any]:
    migrated = _rename_keys(payload, _LEGACY_TEMPLATE_KEYS)
    if isinstance(migrated.get("metadata"), dict):
        migrated["metadata"] = _rename_keys(migrated["metadata"], _LEGACY_METADATA_KEYS)
    migrated.setdefault("version", "1.0.0")

    schema = migrated.get("form_schema")
    if not isinstance(schema, dict):
        return migrated

    schema = _rename_keys(schema, _LEGACY_SCHEMA_KEYS)
    default_values = dict(schema.get("default_values") or {})
    rules = [rule for rule in schema.get("validation_rules") or [] if isinstance(rule, dict)]
    fields: list[Any] = []
    for raw_field in schema.get("fields") or []:
        if not isinstance(raw_field, dict):
            fields.append(raw_field)
            continue
        field_obj = _rename_keys(raw_field, _LEGACY_FIELD_KEYS)
        if "defaultValue" in field_obj:
            default_values.setdefault(field_obj.get("name"), field_obj.pop("defaultValue"))
        validation = field_obj.pop("validation", None)
        if isinstance(validation, dict) and validation.get("pattern"):
            rules.append(
                {
                    "field": field_obj.get("name"),
                    "rule": "pattern",
                    "value": validation["pattern"],
                    "message": validation.get("message") or "Invalid format.",
                },
            )
        fields.append(field_obj)

    schema["fields"] = fields
    schema["default_values"] = default_values
    schema["validation_rules"] = _migrate_legacy_rules(rules, fields)
    if isinstance(schema.get("sections"), list):
        schema["sections"] = [
            _rename_keys(section, _LEGACY_SECTION_KEYS) if isinstance(section, dict) else section
            for section in schema["sections"]
        ]
    migrated["form_schema"] = schema
    return migrated


def _migrate_legacy_rules(rules: list[dict[str, Any]], fields: list[Any]) -> list[dict[str, Any]]:
    """Fold legacy ``required`` rules into field flags and drop unsupported rule kinds.

    Args:
        rules (list[dict[str, Any]]): Legacy rule payloads.
        fields (list[Any]): Migrated field payloads, updated in place.

    Returns:
        list[dict[str, Any]]: Rules supported by the current model.
    """
    fields_by_name = {field_obj.get("name"): field_obj for field_obj in fields if isinstance(field_obj, dict)}
    kept: list[dict[str, Any]] = []
    for rule in rules:
        kind = rule.get("rule")
        if kind == "required":
            if rule.get("field") in fields_by_name:
                fields_by_name[rule["field"]]["required"] = True
            continue
        if kind == "custom":
            logger.warning("Dropping custom validation rule", extra={"field": rule.get("field")})
            continue
        kept.append(rule)
    return kept


def _rename_keys(payload: dict[str, Any], renames: dict[str, str]) -> dict[str, Any]:
    return {renames.get(key, key): value for key, value in payload.items() if key not in _LEGACY_DROPPED_KEYS}


def _validate_template_file_path(path: Path) -> None:
    """Validate template file path before loading.

    Args:
        path (Path): Template file path.

    Raises:
        TemplateStoreError: If path is not a `pathlib.Path` or not a readable template JSON file.
    """
    if not isinstance(path, Path):
        raise TemplateStoreError(message=f"Template path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise TemplateStoreError(message=f"Template path is not a file: {path}")
    if not path.name.endswith(_TEMPLATE_SUFFIX):
        raise TemplateStoreError(message=f"Template path must end with '{_TEMPLATE_SUFFIX}': {path}")
