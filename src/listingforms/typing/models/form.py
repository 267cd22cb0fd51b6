"""Render-ready views produced by the form engine."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from listingforms.typing.enums import FieldKind, InputAffordance
from listingforms.typing.models.schema import LayoutConfig, OptionValue


class OptionView(BaseModel):
    """Option of a choice field with its selection state."""

    model_config = ConfigDict(extra="forbid")

    value: OptionValue
    label: str
    selected: bool = False
    disabled: bool = False


class FieldView(BaseModel):
    """Everything a presentation layer needs to draw one field."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    name: str
    label: str
    kind: FieldKind
    affordance: InputAffordance
    value: Any = None
    options: list[OptionView] = Field(default_factory=list)
    required: bool = False
    error: str | None = None
    placeholder: str | None = None
    help_text: str | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    max_length: int | None = None
    multiple: bool = False
    accept: str | None = None


class SectionView(BaseModel):
    """Rendered section with its fields in declared order."""

    model_config = ConfigDict(extra="forbid")

    id: str
    title: str
    description: str | None = None
    layout: LayoutConfig
    fields: list[FieldView] = Field(default_factory=list)
