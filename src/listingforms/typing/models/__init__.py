"""Core domain model exports."""

from listingforms.typing.models.extraction import Contacts, ExtractionResult
from listingforms.typing.models.form import FieldView, OptionView, SectionView
from listingforms.typing.models.parsing import (
    ImportTemplate,
    KeywordRule,
    MappingRules,
    ParsingRules,
    PatternRule,
)
from listingforms.typing.models.schema import (
    FieldSchema,
    FormSection,
    LayoutConfig,
    SelectOption,
    Template,
    TemplateMetadata,
    TemplateSchema,
    ValidationRule,
)

__all__ = [
    "Contacts",
    "ExtractionResult",
    "FieldSchema",
    "FieldView",
    "FormSection",
    "ImportTemplate",
    "KeywordRule",
    "LayoutConfig",
    "MappingRules",
    "OptionView",
    "ParsingRules",
    "PatternRule",
    "SectionView",
    "SelectOption",
    "Template",
    "TemplateMetadata",
    "TemplateSchema",
    "ValidationRule",
]
