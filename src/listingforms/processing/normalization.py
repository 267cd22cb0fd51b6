"""Value normalization and post content cleanup."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from listingforms.typing.models import ParsingRules

_THOUSANDS_SUFFIX = "k"


def parse_amount(token: str) -> int | None:
    """Parse a price token such as ``45,000`` or ``15k``.

    Args:
        token (str): Raw captured token.

    Returns:
        int | None: Positive whole amount, or None when the token is not a usable price.
    """
    compact = token.strip().replace(",", "").lower()
    multiplier = 1
    if compact.endswith(_THOUSANDS_SUFFIX):
        compact = compact.removesuffix(_THOUSANDS_SUFFIX)
        multiplier = 1000
    number = _to_decimal(compact)
    if number is None:
        return None
    amount = int(number * multiplier)
    return amount if amount > 0 else None


def parse_count(token: str) -> int | None:
    """Parse an integer count token.

    Args:
        token (str): Raw captured token.

    Returns:
        int | None: Parsed integer, or None when the token is not numeric.
    """
    compact = token.strip()
    if not compact.isdigit():
        return None
    return int(compact)


def parse_decimal(token: str) -> float | None:
    """Parse a comma-grouped decimal token such as ``1,250.5``.

    Args:
        token (str): Raw captured token.

    Returns:
        float | None: Parsed value, or None when the token is not numeric.
    """
    number = _to_decimal(token.strip().replace(",", ""))
    return float(number) if number is not None else None


def _to_decimal(value: str) -> Decimal | None:
    if not value:
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def compact_phone(value: str) -> str:
    """Drop everything but digits and a leading plus sign."""
    compact = "".join(ch for ch in value if ch.isdigit() or ch == "+")
    return "+" + compact.replace("+", "") if compact.startswith("+") else compact


def to_international_phone(value: str) -> str:
    """Rewrite a Philippine mobile number into ``+63XXXXXXXXXX`` form.

    Local ``09...`` numbers and ``0063...`` numbers are rewritten; anything
    else is returned compacted but otherwise unchanged.

    Args:
        value (str): Phone number as found in the text.

    Returns:
        str: International form when recognizable.
    """
    compact = compact_phone(value)
    if compact.startswith("00"):
        return "+" + compact[2:]
    if compact.startswith("09") and len(compact) == 11:
        return "+63" + compact[1:]
    return compact


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters without trailing whitespace."""
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip()


class ContentCleaner:
    """Strip hashtags, contacts and prices from post content.

    The cleaner is built from a pattern rule table so that the same contact
    and price patterns drive both extraction and removal.
    """

    def __init__(self, rules: ParsingRules) -> None:
        """Compile removal patterns.

        Args:
            rules (ParsingRules): Pattern rule table.
        """
        self._hashtag = re.compile(rules.hashtag_pattern)
        self._contacts = _alternation(rules.contacts.patterns)
        self._prices = _alternation(rules.price.patterns)

    def clean(self, raw_text: str) -> str:
        """Return a cleaned description of ``raw_text``.

        Removal can expose new matches (for instance a hashtag glued to a
        handle), so cleanup repeats until the text stops changing. This makes
        ``clean(clean(x)) == clean(x)`` hold for any input.

        Args:
            raw_text (str): Pasted post content.

        Returns:
            str: Single-spaced, trimmed description.
        """
        text = raw_text
        while True:
            cleaned = self._clean_once(text)
            if cleaned == text:
                return cleaned
            text = cleaned

    def _clean_once(self, text: str) -> str:
        text = self._hashtag.sub(" ", text)
        if self._contacts is not None:
            text = self._contacts.sub(" ", text)
        if self._prices is not None:
            text = self._prices.sub(" ", text)
        return " ".join(text.split())


def _alternation(patterns: list[str]) -> re.Pattern[str] | None:
    if not patterns:
        return None
    return re.compile("|".join(f"(?:{pattern})" for pattern in patterns), re.IGNORECASE)


def generate_title(
    bedrooms: int | None,
    bathrooms: int | None,
    location: str | None,
    property_type: str | None,
) -> str:
    """Build a listing title from extracted fields.

    Args:
        bedrooms (int | None): Bedroom count.
        bathrooms (int | None): Bathroom count.
        location (str | None): Canonical region code.
        property_type (str | None): Property type code.

    Returns:
        str: Title such as ``"Condo 2BR/1Bath in Manila"`` or ``"Condo for Rent"``.
    """
    prefix = property_type.capitalize() if property_type else None
    if not (bedrooms or bathrooms or location):
        return f"{prefix} for Rent" if prefix else "Property for Rent"

    rooms = ""
    if bedrooms:
        rooms = f"{bedrooms}BR"
        if bathrooms:
            rooms += f"/{bathrooms}Bath"
    elif bathrooms:
        rooms = f"{bathrooms}Bath"

    parts = [part for part in (prefix, rooms) if part]
    if location:
        parts.append(f"in {location.capitalize()}")
    return " ".join(parts)
