"""Typing-centric domain modules."""

from listingforms.typing.enums import (
    ContactKind,
    FieldKind,
    InputAffordance,
    LayoutType,
    MatchPolicy,
    PropertyType,
    RuleKind,
    TemplateType,
)
from listingforms.typing.models import (
    Contacts,
    ExtractionResult,
    FieldSchema,
    FieldView,
    FormSection,
    ImportTemplate,
    ParsingRules,
    PatternRule,
    SectionView,
    Template,
    TemplateSchema,
    ValidationRule,
)

__all__ = [
    "ContactKind",
    "Contacts",
    "ExtractionResult",
    "FieldKind",
    "FieldSchema",
    "FieldView",
    "FormSection",
    "ImportTemplate",
    "InputAffordance",
    "LayoutType",
    "MatchPolicy",
    "ParsingRules",
    "PatternRule",
    "PropertyType",
    "RuleKind",
    "SectionView",
    "Template",
    "TemplateSchema",
    "TemplateType",
    "ValidationRule",
]
