"""Pattern rule table and import template models."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from listingforms.exceptions import TemplateError
from listingforms.typing.enums import ContactKind, MatchPolicy, PropertyType, TemplateType
from listingforms.typing.models.schema import TemplateMetadata

_SCALAR_POLICIES = frozenset({MatchPolicy.FIRST, MatchPolicy.LAST})


class PatternRule(BaseModel):
    """Ordered, case-insensitive patterns for one extractable field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    patterns: list[str]
    policy: MatchPolicy = MatchPolicy.FIRST
    _compiled: tuple[re.Pattern[str], ...] = PrivateAttr(default=())

    def model_post_init(self, __context: object, /) -> None:
        """Compile patterns once so bad expressions fail at load time.

        Args:
            __context (object): Pydantic model context.

        Raises:
            TemplateError: If a pattern is not a valid regular expression.
        """
        compiled: list[re.Pattern[str]] = []
        for pattern in self.patterns:
            try:
                compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as exc:
                raise TemplateError(message=f"Invalid pattern {pattern!r}: {exc}") from exc
        self._compiled = tuple(compiled)

    @property
    def compiled(self) -> tuple[re.Pattern[str], ...]:
        """Return compiled patterns in priority order."""
        return self._compiled


class KeywordRule(BaseModel):
    """Maps a keyword found inside a match to a canonical code."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    code: str


class ParsingRules(BaseModel):
    """Pattern rule table of the import template."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    price: PatternRule
    location: PatternRule
    bedrooms: PatternRule
    bathrooms: PatternRule
    area: PatternRule
    contacts: PatternRule
    type: PatternRule
    amenities: PatternRule
    type_keywords: list[KeywordRule] = Field(default_factory=list)
    amenity_keywords: list[KeywordRule] = Field(default_factory=list)
    hashtag_pattern: str = r"#\w+"

    @model_validator(mode="after")
    def _check_policies(self) -> ParsingRules:
        for name in ("price", "location", "bedrooms", "bathrooms", "area", "type", "contacts"):
            rule: PatternRule = getattr(self, name)
            if rule.policy not in _SCALAR_POLICIES:
                raise TemplateError(message=f"Field '{name}' does not support match policy '{rule.policy}'")
        if self.amenities.policy != MatchPolicy.ALL:
            raise TemplateError(message="Field 'amenities' aggregates matches and requires policy 'all'")

        for keyword_rule in self.type_keywords:
            if keyword_rule.code not in set(PropertyType):
                raise TemplateError(message=f"Type keyword '{keyword_rule.keyword}' maps to unknown type")

        try:
            re.compile(self.hashtag_pattern)
        except re.error as exc:
            raise TemplateError(message=f"Invalid hashtag pattern: {exc}") from exc
        return self

    def with_contact_policy(self, policy: MatchPolicy) -> ParsingRules:
        """Return a copy whose contact rule uses ``policy``.

        Args:
            policy (MatchPolicy): Contact overwrite policy.

        Returns:
            ParsingRules: Updated rule table.
        """
        if policy == self.contacts.policy:
            return self
        contacts = PatternRule(patterns=list(self.contacts.patterns), policy=policy)
        return self.model_copy(update={"contacts": contacts})


class MappingRules(BaseModel):
    """Rules used to canonicalize and map extracted values into a data bag."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    region_aliases: dict[str, str] = Field(default_factory=dict)
    canonical_regions: list[str] = Field(default_factory=list)
    title_max_length: int = 100
    description_max_length: int = 1000
    price_min: int | None = None
    price_max: int | None = None
    contact_patterns: dict[ContactKind, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_mapping(self) -> MappingRules:
        for alias in self.region_aliases:
            if alias != alias.strip().lower():
                raise TemplateError(message=f"Region alias '{alias}' must be lowercase and trimmed")
        for kind, pattern in self.contact_patterns.items():
            try:
                re.compile(pattern)
            except re.error as exc:
                raise TemplateError(message=f"Invalid {kind} contact pattern: {exc}") from exc
        return self


class ImportTemplate(BaseModel):
    """Template carrying a pattern rule table instead of a field schema."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    type: TemplateType = TemplateType.FACEBOOK_IMPORT
    version: str = "1.0.0"
    is_default: bool = False
    is_active: bool = True
    metadata: TemplateMetadata = Field(default_factory=TemplateMetadata)
    parsing_rules: ParsingRules
    mapping_rules: MappingRules = Field(default_factory=MappingRules)
    workflow_steps: list[str] = Field(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def _attach_template_id(cls, data: Any, handler: Any) -> ImportTemplate:
        try:
            return handler(data)
        except TemplateError as exc:
            if exc.template_id is not None:
                raise
            template_id = data.get("id") if isinstance(data, dict) else getattr(data, "id", None)
            raise TemplateError(message=exc.message, template_id=template_id) from exc
