"""Schema-driven form engine."""

from __future__ import annotations

import copy
import re
from typing import TYPE_CHECKING, Any

from listingforms.exceptions import TemplateError
from listingforms.processing.paths import MISSING, assign_path, deep_merge, expand_dotted_keys, resolve_path, split_path
from listingforms.settings import get_settings
from listingforms.typing.enums import FieldKind, InputAffordance, RuleKind
from listingforms.typing.models import FieldView, OptionView, SectionView

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from listingforms.settings import Settings
    from listingforms.typing.models import FieldSchema, FormSection, Template, TemplateSchema, ValidationRule

AFFORDANCES: dict[FieldKind, InputAffordance] = {
    FieldKind.TEXT: InputAffordance.TEXT_INPUT,
    FieldKind.URL: InputAffordance.TEXT_INPUT,
    FieldKind.EMAIL: InputAffordance.TEXT_INPUT,
    FieldKind.PHONE: InputAffordance.TEXT_INPUT,
    FieldKind.TEXTAREA: InputAffordance.TEXTAREA,
    FieldKind.NUMBER: InputAffordance.NUMBER_INPUT,
    FieldKind.SELECT: InputAffordance.DROPDOWN,
    FieldKind.CHECKBOX: InputAffordance.CHECKBOX_GROUP,
    FieldKind.RADIO: InputAffordance.RADIO_GROUP,
    FieldKind.DATE: InputAffordance.DATE_PICKER,
    FieldKind.FILE: InputAffordance.FILE_PICKER,
}

_unmapped_kinds = set(FieldKind) - AFFORDANCES.keys()
if _unmapped_kinds:
    raise TemplateError(message=f"No input affordance for field kinds: {sorted(_unmapped_kinds)}")

_SINGLE_CHOICE_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO})


def affordance_for(kind: FieldKind) -> InputAffordance:
    """Return the input affordance used to render ``kind``."""
    return AFFORDANCES[kind]


def _is_blank(value: Any) -> bool:
    """Return whether ``value`` counts as not filled in.

    Falsy values (None, empty string, 0, False) and empty collections are blank.
    """
    return not value


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


class FormEngine:
    """Holds the data bag and error map of one form editing session.

    Instances are not thread-safe; create one engine per editor.
    """

    def __init__(
        self,
        schema: TemplateSchema,
        data: Mapping[str, Any] | None = None,
        *,
        template_id: str | None = None,
        required_message: str | None = None,
    ) -> None:
        """Create an engine over ``schema``.

        Args:
            schema (TemplateSchema): Validated template schema.
            data (Mapping[str, Any] | None): Initial data bag; dotted keys are expanded.
            template_id (str | None): Template identifier used in error messages.
            required_message (str | None): Format string receiving ``{label}``; defaults to settings.
        """
        self.schema = schema
        self.template_id = template_id
        self.required_message = required_message or get_settings().required_message
        self._data: dict[str, Any] = expand_dotted_keys(copy.deepcopy(dict(data or {})))
        self._errors: dict[str, str] = {}
        self._patterns: dict[str, re.Pattern[str]] = {
            str(rule.value): re.compile(str(rule.value))
            for rule in schema.validation_rules
            if rule.rule == RuleKind.PATTERN
        }

    @classmethod
    def from_template(
        cls,
        template: Template,
        initial_data: Mapping[str, Any] | None = None,
        *,
        settings: Settings | None = None,
    ) -> FormEngine:
        """Create an engine seeded with template defaults and caller data.

        Args:
            template (Template): Property template.
            initial_data (Mapping[str, Any] | None): Values overriding the defaults.
            settings (Settings | None): Runtime settings.

        Returns:
            FormEngine: New engine.
        """
        config = settings or get_settings()
        data = deep_merge(template.form_schema.default_values, initial_data or {})
        return cls(
            template.form_schema,
            data,
            template_id=template.id,
            required_message=config.required_message,
        )

    @property
    def data(self) -> dict[str, Any]:
        """Return a deep copy of the data bag."""
        return copy.deepcopy(self._data)

    @property
    def errors(self) -> dict[str, str]:
        """Return a copy of the field to error message map."""
        return dict(self._errors)

    def get_value(self, name: str) -> Any:
        """Resolve a possibly dotted field name.

        Args:
            name (str): Field name such as ``contact.whatsapp``.

        Returns:
            Any: Stored value, or None when any segment is absent.
        """
        try:
            value = resolve_path(self._data, split_path(name))
        except ValueError:
            return None
        return None if value is MISSING else value

    def set_value(self, name: str, value: Any) -> None:
        """Store ``value`` under a possibly dotted field name and clear its error.

        Args:
            name (str): Field name.
            value (Any): New value.
        """
        assign_path(self._data, split_path(name), value)
        self._errors.pop(name, None)

    def toggle_option(self, name: str, value: Any, checked: bool = True) -> list[Any]:
        """Add or remove ``value`` from a checkbox field.

        Args:
            name (str): Checkbox field name.
            value (Any): Option value.
            checked (bool): Whether the option is being checked.

        Returns:
            list[Any]: Stored selection after the toggle.
        """
        field_schema = self._field(name, FieldKind.CHECKBOX)
        option = field_schema.option_for(value)
        stored = option.value if option is not None else value
        current = self.get_value(name)
        selection = list(current) if isinstance(current, list | tuple) else []
        if checked:
            if stored not in selection:
                selection.append(stored)
        else:
            selection = [item for item in selection if item != stored]
        self.set_value(name, selection)
        return selection

    def select_option(self, name: str, value: Any) -> bool:
        """Store the option of a radio or select field matching ``value``.

        Args:
            name (str): Radio or select field name.
            value (Any): Option value, possibly in string form.

        Returns:
            bool: False when no enabled option matches; nothing is stored then.
        """
        field_schema = self._field(name, *_SINGLE_CHOICE_KINDS)
        option = field_schema.option_for(value)
        if option is None or option.disabled:
            return False
        self.set_value(name, option.value)
        return True

    def attach_files(self, name: str, handles: Iterable[Any]) -> list[Any]:
        """Store opaque file handles on a file field.

        Single-file fields keep only the first handle.

        Args:
            name (str): File field name.
            handles (Iterable[Any]): File handles.

        Returns:
            list[Any]: Stored handles.
        """
        field_schema = self._field(name, FieldKind.FILE)
        stored = list(handles)
        if not field_schema.multiple:
            stored = stored[:1]
        self.set_value(name, stored)
        return stored

    def validate(self) -> bool:
        """Validate the data bag and refresh the error map.

        Required fields are checked first, then validation rules run in
        declared order. Rules only apply to fields holding a value, and a
        later failing rule replaces any earlier message for the same field.

        Returns:
            bool: True when no field has an error.
        """
        errors: dict[str, str] = {}
        for field_schema in self.schema.fields:
            if field_schema.required and _is_blank(self.get_value(field_schema.name)):
                errors[field_schema.name] = self.required_message.format(label=field_schema.label)

        for rule in self.schema.validation_rules:
            value = self.get_value(rule.field)
            if _is_blank(value):
                continue
            if self._violates(rule, value):
                errors[rule.field] = rule.message

        self._errors = errors
        return not errors

    def _violates(self, rule: ValidationRule, value: Any) -> bool:
        if rule.rule == RuleKind.PATTERN:
            return self._patterns[str(rule.value)].search(str(value)) is None

        number = _as_number(value)
        bound = _as_number(rule.value)
        if number is None or bound is None:
            return False
        if rule.rule == RuleKind.MIN:
            return number < bound
        return number > bound

    def submit(self, handler: Callable[[dict[str, Any]], Any]) -> bool:
        """Validate and hand a copy of the data bag to ``handler``.

        Args:
            handler (Callable[[dict[str, Any]], Any]): Persistence collaborator.

        Returns:
            bool: Whether the handler was called.
        """
        if not self.validate():
            return False
        handler(self.data)
        return True

    def render_field(self, name: str) -> FieldView:
        """Build the render view of one field.

        Args:
            name (str): Field name.

        Returns:
            FieldView: Field view with value, options and error.
        """
        field_schema = self._field(name)
        value = self.get_value(name)
        return FieldView(
            name=field_schema.name,
            label=field_schema.label,
            kind=field_schema.kind,
            affordance=affordance_for(field_schema.kind),
            value=value,
            options=self._option_views(field_schema, value),
            required=field_schema.required,
            error=self._errors.get(name),
            placeholder=field_schema.placeholder,
            help_text=field_schema.help_text,
            min=field_schema.min,
            max=field_schema.max,
            step=field_schema.step,
            max_length=field_schema.max_length,
            multiple=field_schema.multiple,
            accept=field_schema.accept,
        )

    def render_section(self, section_id: str) -> SectionView:
        """Build the render view of one section, including the implicit ``other`` section.

        Args:
            section_id (str): Section identifier.

        Raises:
            TemplateError: If no section has this id.

        Returns:
            SectionView: Section view.
        """
        for section in self.schema.resolved_sections():
            if section.id == section_id:
                return self._section_view(section)
        raise TemplateError(message=f"Unknown section '{section_id}'", template_id=self.template_id)

    def render(self) -> list[SectionView]:
        """Build the views of every section in render order."""
        return [self._section_view(section) for section in self.schema.resolved_sections()]

    def _section_view(self, section: FormSection) -> SectionView:
        return SectionView(
            id=section.id,
            title=section.title,
            description=section.description,
            layout=section.layout,
            fields=[self.render_field(name) for name in section.fields],
        )

    @staticmethod
    def _option_views(field_schema: FieldSchema, value: Any) -> list[OptionView]:
        affordance = affordance_for(field_schema.kind)
        if affordance == InputAffordance.CHECKBOX_GROUP:
            selection = value if isinstance(value, list | tuple) else []

            def is_selected(option_value: Any) -> bool:
                return any(item == option_value and type(item) is type(option_value) for item in selection)

        elif affordance in {InputAffordance.DROPDOWN, InputAffordance.RADIO_GROUP}:
            chosen = field_schema.option_for(value) if value is not None else None

            def is_selected(option_value: Any) -> bool:
                return chosen is not None and chosen.value == option_value and type(chosen.value) is type(option_value)

        else:
            return []

        return [
            OptionView(
                value=option.value,
                label=option.label,
                selected=is_selected(option.value),
                disabled=option.disabled,
            )
            for option in field_schema.options
        ]

    def _field(self, name: str, *kinds: FieldKind) -> FieldSchema:
        """Return the schema of ``name``, optionally restricted to ``kinds``.

        Args:
            name (str): Field name.
            *kinds (FieldKind): Accepted kinds; any kind when empty.

        Raises:
            TemplateError: If the field is unknown or of another kind.

        Returns:
            FieldSchema: Field schema.
        """
        field_schema = self.schema.get_field(name)
        if field_schema is None:
            raise TemplateError(message=f"Unknown field '{name}'", template_id=self.template_id)
        if kinds and field_schema.kind not in kinds:
            expected = ", ".join(kind.value for kind in kinds)
            raise TemplateError(
                message=f"Field '{name}' is a {field_schema.kind.value} field, expected: {expected}",
                template_id=self.template_id,
            )
        return field_schema
