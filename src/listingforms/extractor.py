"""Extraction orchestration."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from listingforms import logger
from listingforms.processing.extractors import (
    extract_amenities,
    extract_area,
    extract_bathrooms,
    extract_bedrooms,
    extract_contacts,
    extract_location,
    extract_price,
    extract_property_type,
)
from listingforms.processing.normalization import ContentCleaner, generate_title, to_international_phone, truncate
from listingforms.processing.paths import assign_path
from listingforms.template_store import get_import_template
from listingforms.typing.enums import ContactKind
from listingforms.typing.models import ExtractionResult, ImportTemplate

if TYPE_CHECKING:
    from pathlib import Path

    from listingforms.settings import Settings


class ListingExtractor:
    """Runs every field extractor of an import template over pasted posts.

    The extractor holds only immutable rule tables, so one instance can be
    shared between threads.
    """

    def __init__(self, template: ImportTemplate | None = None, *, settings: Settings | None = None) -> None:
        """Bind the extractor to a rule table.

        Args:
            template (ImportTemplate | None): Import template, the built-in one when omitted.
            settings (Settings | None): Runtime settings; the contact policy is taken from them.
        """
        self.template = template or get_import_template()
        rules = self.template.parsing_rules
        if settings is not None:
            rules = rules.with_contact_policy(settings.contact_policy)
        self.rules = rules
        self.mapping = self.template.mapping_rules
        self._cleaner = ContentCleaner(rules)

    def parse(self, raw_text: str) -> ExtractionResult:
        """Extract a draft record from ``raw_text``.

        Args:
            raw_text (str): Pasted post content.

        Returns:
            ExtractionResult: Draft record; undetected fields are None or empty.
        """
        rules = self.rules
        bedrooms = extract_bedrooms(raw_text, rules.bedrooms)
        bathrooms = extract_bathrooms(raw_text, rules.bathrooms)
        location = extract_location(
            raw_text,
            rules.location,
            self.mapping.region_aliases,
            self.mapping.canonical_regions,
        )
        property_type = extract_property_type(raw_text, rules.type, rules.type_keywords, bedrooms)

        result = ExtractionResult(
            price=extract_price(raw_text, rules.price),
            location=location,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            area=extract_area(raw_text, rules.area),
            contacts=extract_contacts(raw_text, rules.contacts),
            type=property_type,
            amenities=extract_amenities(raw_text, rules.amenities, rules.amenity_keywords),
            title=generate_title(bedrooms, bathrooms, location, property_type.value),
            description=self._cleaner.clean(raw_text),
            raw=raw_text,
        )

        missing = result.missing_fields()
        for field_name in missing:
            logger.debug("Field not detected", extra={"field": field_name})
        logger.info(
            "Post parsed",
            extra={"template_id": self.template.id, "missing_fields": missing, "raw_text": raw_text},
        )
        return result


def parse_all(
    raw_text: str,
    template: ImportTemplate | None = None,
    *,
    settings: Settings | None = None,
) -> ExtractionResult:
    """Extract a draft record from a pasted post.

    Args:
        raw_text (str): Pasted post content.
        template (ImportTemplate | None): Import template, the built-in one when omitted.
        settings (Settings | None): Runtime settings.

    Returns:
        ExtractionResult: Draft record.
    """
    return ListingExtractor(template, settings=settings).parse(raw_text)


def build_draft_bag(result: ExtractionResult, template: ImportTemplate | None = None) -> dict[str, Any]:
    """Map a draft record onto a nested form data bag.

    Undetected fields are left out so that template defaults survive a
    later merge. Contacts that do not look valid are still carried over for
    the reviewer to fix.

    Args:
        result (ExtractionResult): Draft record.
        template (ImportTemplate | None): Import template providing the mapping rules.

    Returns:
        dict[str, Any]: Data bag.
    """
    mapping = (template or get_import_template()).mapping_rules
    bag: dict[str, Any] = {}

    if result.title:
        bag["title"] = truncate(result.title, mapping.title_max_length)
    if result.description:
        bag["description"] = truncate(result.description, mapping.description_max_length)
    if result.price is not None:
        if _within_bounds(result.price, mapping.price_min, mapping.price_max):
            bag["price"] = result.price
        else:
            logger.warning("Price outside accepted range", extra={"price": result.price})

    bag["type"] = result.type.value
    optional_values = {
        "region": result.location,
        "bedrooms": result.bedrooms,
        "bathrooms": result.bathrooms,
        "area": result.area,
    }
    bag.update({key: value for key, value in optional_values.items() if value is not None})
    if result.amenities:
        bag["amenities"] = sorted(result.amenities)

    contacts = {
        ContactKind.WHATSAPP: to_international_phone(result.contacts.whatsapp) if result.contacts.whatsapp else None,
        ContactKind.TELEGRAM: result.contacts.telegram,
        ContactKind.EMAIL: result.contacts.email,
    }
    for kind, value in contacts.items():
        if value is None:
            continue
        pattern = mapping.contact_patterns.get(kind)
        if pattern is not None and re.fullmatch(pattern, value) is None:
            logger.warning("Contact does not match the expected format", extra={"contact_kind": kind.value})
        assign_path(bag, ["contact", kind.value], value)
    return bag


def _within_bounds(value: float, lower: float | None, upper: float | None) -> bool:
    if lower is not None and value < lower:
        return False
    return not (upper is not None and value > upper)


def persist_result(result: ExtractionResult, path: Path) -> None:
    """Persist a draft record as JSON.

    Args:
        result (ExtractionResult): Draft record.
        path (Path): Output path.
    """
    write_json(result_to_json_dict(result), path)


def write_json(payload: dict[str, Any], path: Path) -> None:
    """Write ``payload`` as indented JSON, creating parent directories.

    Args:
        payload (dict[str, Any]): JSON-serializable payload.
        path (Path): Output path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def result_to_json_dict(result: ExtractionResult) -> dict[str, Any]:
    """Return the draft record as a JSON-serializable dictionary.

    Amenities are sorted so that the output is stable.

    Args:
        result (ExtractionResult): Draft record.

    Returns:
        dict[str, Any]: JSON-serializable dictionary.
    """
    payload = json.loads(result.model_dump_json())
    payload["amenities"] = sorted(result.amenities)
    return payload
