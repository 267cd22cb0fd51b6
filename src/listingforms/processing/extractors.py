"""Pattern-driven field extractors.

Every extractor is a pure function of the raw text and the rule table it is
handed. A field that cannot be detected yields ``None`` (or an empty
collection); out-of-range numbers are treated exactly like a missed match and
the next pattern is tried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from listingforms.processing.normalization import compact_phone, parse_amount, parse_count, parse_decimal
from listingforms.typing.enums import ContactKind, MatchPolicy, PropertyType
from listingforms.typing.models.extraction import AREA_MAX, BEDROOM_BOUNDS, Contacts

if TYPE_CHECKING:
    import re
    from collections.abc import Callable, Mapping

    from listingforms.typing.models import KeywordRule, MappingRules, ParsingRules, PatternRule

T = TypeVar("T")

_PHONE_PREFIXES = ("+63", "0063", "09")
_HOUSE_BEDROOM_THRESHOLD = 3


def _captured(match: re.Match[str], *, whole_match_fallback: bool = False) -> str | None:
    """Return the first capture group of ``match``.

    Args:
        match (re.Match[str]): Successful match.
        whole_match_fallback (bool): Use the whole match when the pattern captures nothing.

    Returns:
        str | None: Captured text.
    """
    if match.re.groups and match.group(1) is not None:
        return match.group(1)
    return match.group(0) if whole_match_fallback else None


def _scan(raw_text: str, rule: PatternRule, convert: Callable[[re.Match[str]], T | None]) -> T | None:
    """Try each pattern in priority order and keep the value the policy selects.

    Only the first match of each pattern is considered. With ``first`` the
    first converted, in-bound value is returned; with ``last`` every pattern
    is tried and the last valid value wins.

    Args:
        raw_text (str): Text to scan.
        rule (PatternRule): Patterns and policy.
        convert (Callable[[re.Match[str]], T | None]): Match to value conversion; None rejects the match.

    Returns:
        T | None: Selected value.
    """
    selected: T | None = None
    for pattern in rule.compiled:
        match = pattern.search(raw_text)
        if match is None:
            continue
        value = convert(match)
        if value is None:
            continue
        if rule.policy == MatchPolicy.FIRST:
            return value
        selected = value
    return selected


def canonicalize(text: str, keywords: list[KeywordRule]) -> str | None:
    """Map matched text to the code of the first keyword it contains.

    Args:
        text (str): Matched text.
        keywords (list[KeywordRule]): Ordered keyword table.

    Returns:
        str | None: Canonical code.
    """
    lowered = " ".join(text.lower().split())
    for keyword_rule in keywords:
        if keyword_rule.keyword in lowered:
            return keyword_rule.code
    return None


def extract_price(raw_text: str, rule: PatternRule) -> int | None:
    """Extract the monthly price, honouring ``k`` shorthand and digit grouping."""

    def _convert(match: re.Match[str]) -> int | None:
        token = _captured(match, whole_match_fallback=True)
        return parse_amount(token) if token else None

    return _scan(raw_text, rule, _convert)


def extract_location(
    raw_text: str,
    rule: PatternRule,
    aliases: Mapping[str, str],
    canonical_regions: list[str],
) -> str | None:
    """Extract a canonical region code.

    A match is looked up in the alias map first, then checked for a
    canonical region name it contains. Anything else is rejected so that a
    free-text fragment never leaks out as a location.

    Args:
        raw_text (str): Post content.
        rule (PatternRule): Location patterns.
        aliases (Mapping[str, str]): Lowercase token to region code.
        canonical_regions (list[str]): Controlled vocabulary of region codes.

    Returns:
        str | None: Region code.
    """

    def _convert(match: re.Match[str]) -> str | None:
        token = _captured(match, whole_match_fallback=True)
        if not token:
            return None
        location = " ".join(token.lower().split())
        if location in aliases:
            return aliases[location]
        for region in canonical_regions:
            if region in location:
                return region
        return None

    return _scan(raw_text, rule, _convert)


def _bounded_count(match: re.Match[str]) -> int | None:
    token = _captured(match)
    count = parse_count(token) if token else None
    if count is None or not BEDROOM_BOUNDS[0] <= count <= BEDROOM_BOUNDS[1]:
        return None
    return count


def extract_bedrooms(raw_text: str, rule: PatternRule) -> int | None:
    """Extract a bedroom count in the 1-10 range."""
    return _scan(raw_text, rule, _bounded_count)


def extract_bathrooms(raw_text: str, rule: PatternRule) -> int | None:
    """Extract a bathroom count in the 1-10 range."""
    return _scan(raw_text, rule, _bounded_count)


def extract_area(raw_text: str, rule: PatternRule) -> float | None:
    """Extract the floor area in square meters, bounded to (0, 10000]."""

    def _convert(match: re.Match[str]) -> float | None:
        token = _captured(match)
        area = parse_decimal(token) if token else None
        if area is None or not 0 < area <= AREA_MAX:
            return None
        return area

    return _scan(raw_text, rule, _convert)


def classify_contact(token: str) -> ContactKind | None:
    """Classify a contact match by its shape.

    Args:
        token (str): Matched contact text.

    Returns:
        ContactKind | None: Channel, or None when the shape is not recognized.
    """
    if token.startswith(_PHONE_PREFIXES):
        return ContactKind.WHATSAPP
    if token.startswith("@"):
        return ContactKind.TELEGRAM
    if "@" in token and "." in token:
        return ContactKind.EMAIL
    return None


def extract_contacts(raw_text: str, rule: PatternRule) -> Contacts:
    """Extract one handle per contact channel.

    All contact patterns are scanned together in text order; overlapping
    matches keep the one that starts first (the longest on ties). With the
    ``last`` policy a later occurrence of a channel replaces an earlier one,
    with ``first`` the earliest occurrence is kept.

    Args:
        raw_text (str): Post content.
        rule (PatternRule): Contact patterns and overwrite policy.

    Returns:
        Contacts: Detected handles.
    """
    spans = sorted(
        (match.start(), -len(match.group(0)), match.group(0))
        for pattern in rule.compiled
        for match in pattern.finditer(raw_text)
        if match.group(0)
    )

    found: dict[ContactKind, str] = {}
    covered_until = -1
    for start, negative_length, token in spans:
        if start < covered_until:
            continue
        covered_until = start - negative_length
        kind = classify_contact(token)
        if kind is None:
            continue
        if rule.policy == MatchPolicy.FIRST and kind in found:
            continue
        found[kind] = compact_phone(token) if kind == ContactKind.WHATSAPP else token

    return Contacts(
        whatsapp=found.get(ContactKind.WHATSAPP),
        telegram=found.get(ContactKind.TELEGRAM),
        email=found.get(ContactKind.EMAIL),
    )


def extract_property_type(
    raw_text: str,
    rule: PatternRule,
    keywords: list[KeywordRule],
    bedrooms: int | None,
) -> PropertyType:
    """Extract the property type, falling back to a bedroom heuristic.

    Args:
        raw_text (str): Post content.
        rule (PatternRule): Type keyword patterns.
        keywords (list[KeywordRule]): Keyword to type code table.
        bedrooms (int | None): Extracted bedroom count used when no keyword matches.

    Returns:
        PropertyType: ``house`` or ``condo`` for the default table.
    """

    def _convert(match: re.Match[str]) -> str | None:
        return canonicalize(match.group(0), keywords)

    code = _scan(raw_text, rule, _convert)
    if code is not None:
        return PropertyType(code)
    if bedrooms is not None and bedrooms >= _HOUSE_BEDROOM_THRESHOLD:
        return PropertyType.HOUSE
    return PropertyType.CONDO


def extract_amenities(raw_text: str, rule: PatternRule, keywords: list[KeywordRule]) -> set[str]:
    """Aggregate amenity tags across every match of every pattern.

    Args:
        raw_text (str): Post content.
        rule (PatternRule): Amenity patterns.
        keywords (list[KeywordRule]): Keyword to amenity tag table.

    Returns:
        set[str]: Canonical amenity tags.
    """
    tags: set[str] = set()
    for pattern in rule.compiled:
        for match in pattern.finditer(raw_text):
            tag = canonicalize(match.group(0), keywords)
            if tag is not None:
                tags.add(tag)
    return tags


def extract(field_name: str, raw_text: str, rules: ParsingRules, mapping: MappingRules) -> Any:
    """Run the extractor registered for ``field_name``.

    ``type`` runs the bedroom extractor first because its fallback depends on
    the bedroom count.

    Args:
        field_name (str): One of the rule table fields.
        raw_text (str): Post content.
        rules (ParsingRules): Pattern rule table.
        mapping (MappingRules): Alias map and canonical regions.

    Raises:
        KeyError: If no extractor is registered for ``field_name``.

    Returns:
        Any: Extracted value, None or an empty collection when nothing was detected.
    """
    extractors: dict[str, Callable[[], Any]] = {
        "price": lambda: extract_price(raw_text, rules.price),
        "location": lambda: extract_location(
            raw_text,
            rules.location,
            mapping.region_aliases,
            mapping.canonical_regions,
        ),
        "bedrooms": lambda: extract_bedrooms(raw_text, rules.bedrooms),
        "bathrooms": lambda: extract_bathrooms(raw_text, rules.bathrooms),
        "area": lambda: extract_area(raw_text, rules.area),
        "contacts": lambda: extract_contacts(raw_text, rules.contacts),
        "type": lambda: extract_property_type(
            raw_text,
            rules.type,
            rules.type_keywords,
            extract_bedrooms(raw_text, rules.bedrooms),
        ),
        "amenities": lambda: extract_amenities(raw_text, rules.amenities, rules.amenity_keywords),
    }
    if field_name not in extractors:
        raise KeyError(f"No extractor registered for field '{field_name}'")
    return extractors[field_name]()
