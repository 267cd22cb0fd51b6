"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldKind(_EnumMixin):
    """Supported schema field kinds."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    FILE = "file"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"


class InputAffordance(_EnumMixin):
    """Input widget family a field kind is rendered with."""

    TEXT_INPUT = "text_input"
    TEXTAREA = "textarea"
    NUMBER_INPUT = "number_input"
    DROPDOWN = "dropdown"
    CHECKBOX_GROUP = "checkbox_group"
    RADIO_GROUP = "radio_group"
    DATE_PICKER = "date_picker"
    FILE_PICKER = "file_picker"


class RuleKind(_EnumMixin):
    """Cross-field validation rule kinds."""

    MIN = "min"
    MAX = "max"
    PATTERN = "pattern"


class MatchPolicy(_EnumMixin):
    """How the matches of a pattern rule are combined."""

    FIRST = "first"
    ALL = "all"
    LAST = "last"


class PropertyType(_EnumMixin):
    """Listing property types with a dedicated template."""

    HOUSE = "house"
    CONDO = "condo"
    VILLAGE = "village"


class TemplateType(_EnumMixin):
    """Template families."""

    PROPERTY = "property"
    FACEBOOK_IMPORT = "facebook_import"


class LayoutType(_EnumMixin):
    """Layout hints for templates and sections."""

    GRID = "grid"
    STACK = "stack"
    TABS = "tabs"
    WIZARD = "wizard"
    COMPACT = "compact"


class ContactKind(_EnumMixin):
    """Contact channels recognized in free text."""

    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    EMAIL = "email"
