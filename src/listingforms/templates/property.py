"""Built-in form templates for house, condo and village listings."""

from __future__ import annotations

from typing import Any

from listingforms.typing.enums import FieldKind, LayoutType, PropertyType
from listingforms.typing.models import Template

REGION_OPTIONS = [
    {"value": "manila", "label": "Manila"},
    {"value": "cebu", "label": "Cebu"},
    {"value": "davao", "label": "Davao"},
    {"value": "boracay", "label": "Boracay"},
    {"value": "baguio", "label": "Baguio"},
]

COMMON_FIELDS: dict[str, dict[str, Any]] = {
    "title": {
        "name": "title",
        "kind": FieldKind.TEXT,
        "label": "Listing title",
        "placeholder": "e.g. 2-Bedroom House in Makati",
        "required": True,
        "max_length": 100,
        "section": "basic_info",
    },
    "region": {
        "name": "region",
        "kind": FieldKind.SELECT,
        "label": "Region",
        "required": True,
        "options": REGION_OPTIONS,
        "section": "basic_info",
    },
    "price": {
        "name": "price",
        "kind": FieldKind.NUMBER,
        "label": "Monthly rent (PHP)",
        "required": True,
        "min": 5000,
        "max": 200000,
        "step": 1000,
        "placeholder": "Monthly rent in PHP",
        "section": "basic_info",
    },
    "deposit": {
        "name": "deposit",
        "kind": FieldKind.NUMBER,
        "label": "Security deposit (PHP)",
        "required": True,
        "min": 0,
        "max": 500000,
        "step": 1000,
        "placeholder": "Security deposit in PHP",
        "section": "basic_info",
    },
    "bedrooms": {
        "name": "bedrooms",
        "kind": FieldKind.SELECT,
        "label": "Bedrooms",
        "required": True,
        "options": [
            {"value": 1, "label": "1 Bedroom"},
            {"value": 2, "label": "2 Bedrooms"},
            {"value": 3, "label": "3 Bedrooms"},
            {"value": 4, "label": "4 Bedrooms"},
            {"value": 5, "label": "5+ Bedrooms"},
        ],
        "section": "details",
    },
    "bathrooms": {
        "name": "bathrooms",
        "kind": FieldKind.SELECT,
        "label": "Bathrooms",
        "required": True,
        "options": [
            {"value": 1, "label": "1 Bathroom"},
            {"value": 2, "label": "2 Bathrooms"},
            {"value": 3, "label": "3 Bathrooms"},
            {"value": 4, "label": "4+ Bathrooms"},
        ],
        "section": "details",
    },
    "area": {
        "name": "area",
        "kind": FieldKind.NUMBER,
        "label": "Floor area (sqm)",
        "required": True,
        "min": 20,
        "max": 1000,
        "step": 5,
        "placeholder": "Area in square meters",
        "section": "details",
    },
    "furnished": {
        "name": "furnished",
        "kind": FieldKind.RADIO,
        "label": "Furnishing",
        "options": [
            {"value": True, "label": "Fully Furnished"},
            {"value": False, "label": "Unfurnished"},
        ],
        "section": "details",
    },
    "description": {
        "name": "description",
        "kind": FieldKind.TEXTAREA,
        "label": "Description",
        "required": True,
        "max_length": 1000,
        "placeholder": "Describe the property in detail...",
        "section": "basic_info",
    },
    "address": {
        "name": "address",
        "kind": FieldKind.TEXT,
        "label": "Street address",
        "required": True,
        "max_length": 200,
        "placeholder": "123 Ayala Avenue, Makati City",
        "section": "location",
    },
    "images": {
        "name": "images",
        "kind": FieldKind.FILE,
        "label": "Photos",
        "multiple": True,
        "accept": "image/*",
        "help_text": "Up to 10 photos",
        "section": "media",
    },
}

CONTACT_FIELDS: list[dict[str, Any]] = [
    {
        "name": "contact.whatsapp",
        "kind": FieldKind.PHONE,
        "label": "WhatsApp number",
        "placeholder": "+63 912 345 6789",
        "section": "contact",
    },
    {
        "name": "contact.telegram",
        "kind": FieldKind.TEXT,
        "label": "Telegram ID",
        "placeholder": "@username",
        "section": "contact",
    },
    {
        "name": "contact.email",
        "kind": FieldKind.EMAIL,
        "label": "Email",
        "placeholder": "contact@example.com",
        "section": "contact",
    },
    {
        "name": "contact.phone",
        "kind": FieldKind.PHONE,
        "label": "Phone number",
        "placeholder": "+63 912 345 6789",
        "section": "contact",
    },
]

CONTACT_RULES: list[dict[str, Any]] = [
    {
        "field": "contact.whatsapp",
        "rule": "pattern",
        "value": r"^\+63[0-9]{10}$",
        "message": "WhatsApp number must look like +63XXXXXXXXXX",
    },
    {
        "field": "contact.telegram",
        "rule": "pattern",
        "value": r"^@[A-Za-z0-9_]+$",
        "message": "Telegram ID must start with @",
    },
]


def _amenities_field(options: list[tuple[str, str]]) -> dict[str, Any]:
    return {
        "name": "amenities",
        "kind": FieldKind.CHECKBOX,
        "label": "Amenities",
        "options": [{"value": value, "label": label} for value, label in options],
        "section": "amenities",
    }


def _sections(basic_info: list[str], details: list[str]) -> list[dict[str, Any]]:
    return [
        {
            "id": "basic_info",
            "title": "Basic information",
            "layout": {"type": LayoutType.GRID, "columns": 2},
            "fields": basic_info,
        },
        {
            "id": "details",
            "title": "Property details",
            "layout": {"type": LayoutType.GRID, "columns": 3},
            "fields": details,
        },
        {
            "id": "location",
            "title": "Location",
            "layout": {"type": LayoutType.STACK},
            "fields": ["address"],
        },
        {
            "id": "amenities",
            "title": "Amenities",
            "layout": {"type": LayoutType.GRID, "columns": 3},
            "fields": ["amenities"],
        },
        {
            "id": "media",
            "title": "Photos",
            "layout": {"type": LayoutType.STACK},
            "fields": ["images"],
        },
        {
            "id": "contact",
            "title": "Contact information",
            "layout": {"type": LayoutType.GRID, "columns": 2},
            "fields": [contact["name"] for contact in CONTACT_FIELDS],
        },
    ]


def _template(
    *,
    template_id: str,
    name: str,
    property_type: PropertyType,
    description: str,
    tags: list[str],
    fields: list[dict[str, Any]],
    rules: list[dict[str, Any]],
    defaults: dict[str, Any],
    sections: list[dict[str, Any]],
) -> Template:
    return Template.model_validate(
        {
            "id": template_id,
            "name": name,
            "version": "1.0.0",
            "is_default": True,
            "metadata": {"description": description, "property_type": property_type, "tags": tags},
            "form_schema": {
                "fields": [*fields, *CONTACT_FIELDS],
                "validation_rules": [*rules, *CONTACT_RULES],
                "default_values": defaults,
                "layout": {"type": LayoutType.GRID, "columns": 2, "spacing": "normal", "responsive": True},
                "sections": sections,
            },
        },
    )


def build_house_template() -> Template:
    """Build the single-house template."""
    fields = [
        COMMON_FIELDS["title"],
        COMMON_FIELDS["region"],
        COMMON_FIELDS["price"],
        COMMON_FIELDS["deposit"],
        COMMON_FIELDS["bedrooms"],
        COMMON_FIELDS["bathrooms"],
        COMMON_FIELDS["area"],
        COMMON_FIELDS["furnished"],
        COMMON_FIELDS["description"],
        COMMON_FIELDS["address"],
        _amenities_field(
            [
                ("parking", "Parking"),
                ("security", "24/7 Security"),
                ("water_supply", "Water Supply"),
                ("electricity", "Electricity"),
                ("wifi", "Internet Ready"),
                ("aircon", "Air Conditioning"),
                ("garden", "Garden"),
                ("balcony", "Balcony"),
                ("garage", "Garage"),
            ],
        ),
        COMMON_FIELDS["images"],
    ]
    return _template(
        template_id="house_template_v1",
        name="Single House Template",
        property_type=PropertyType.HOUSE,
        description="Template for single house properties",
        tags=["residential", "house", "single-family"],
        fields=fields,
        rules=[
            {"field": "price", "rule": "min", "value": 5000, "message": "Price should be at least PHP 5,000"},
            {
                "field": "price",
                "rule": "max",
                "value": 200000,
                "message": "Price should not exceed PHP 200,000",
            },
            {
                "field": "area",
                "rule": "min",
                "value": 20,
                "message": "Area should be at least 20 square meters",
            },
        ],
        defaults={
            "type": "house",
            "currency": "PHP",
            "furnished": False,
            "amenities": ["parking", "security", "water_supply", "electricity"],
        },
        sections=_sections(
            ["title", "region", "price", "deposit", "description"],
            ["bedrooms", "bathrooms", "area", "furnished"],
        ),
    )


def build_condo_template() -> Template:
    """Build the condominium template."""
    fields = [
        COMMON_FIELDS["title"],
        {
            "name": "buildingName",
            "kind": FieldKind.TEXT,
            "label": "Building name",
            "required": True,
            "max_length": 100,
            "placeholder": "Condominium building name",
            "section": "basic_info",
        },
        COMMON_FIELDS["region"],
        COMMON_FIELDS["price"],
        COMMON_FIELDS["deposit"],
        COMMON_FIELDS["bedrooms"],
        COMMON_FIELDS["bathrooms"],
        COMMON_FIELDS["area"],
        {
            "name": "floor",
            "kind": FieldKind.NUMBER,
            "label": "Floor",
            "required": True,
            "min": 1,
            "max": 100,
            "placeholder": "Floor number",
            "section": "details",
        },
        COMMON_FIELDS["furnished"],
        COMMON_FIELDS["description"],
        COMMON_FIELDS["address"],
        _amenities_field(
            [
                ("elevator", "Elevator"),
                ("security", "24/7 Security"),
                ("gym", "Gymnasium"),
                ("swimming_pool", "Swimming Pool"),
                ("parking", "Parking Slot"),
                ("playground", "Playground"),
                ("function_room", "Function Room"),
                ("business_center", "Business Center"),
                ("laundry", "Laundry Area"),
                ("balcony", "Balcony"),
                ("aircon", "Air Conditioning"),
            ],
        ),
        COMMON_FIELDS["images"],
    ]
    return _template(
        template_id="condo_template_v1",
        name="Condominium Template",
        property_type=PropertyType.CONDO,
        description="Template for condominium units",
        tags=["residential", "condo", "high-rise"],
        fields=fields,
        rules=[
            {
                "field": "price",
                "rule": "min",
                "value": 10000,
                "message": "Condo price should be at least PHP 10,000",
            },
            {"field": "floor", "rule": "min", "value": 1, "message": "Floor number should be at least 1"},
        ],
        defaults={
            "type": "condo",
            "currency": "PHP",
            "furnished": True,
            "amenities": ["elevator", "security", "gym", "swimming_pool", "parking"],
        },
        sections=_sections(
            ["title", "buildingName", "region", "price", "deposit", "description"],
            ["bedrooms", "bathrooms", "area", "floor", "furnished"],
        ),
    )


def build_village_template() -> Template:
    """Build the village/subdivision house template."""
    fields = [
        COMMON_FIELDS["title"],
        {
            "name": "villageName",
            "kind": FieldKind.TEXT,
            "label": "Village / subdivision name",
            "required": True,
            "max_length": 100,
            "placeholder": "Subdivision/Village name",
            "section": "basic_info",
        },
        {
            "name": "houseModel",
            "kind": FieldKind.TEXT,
            "label": "House model",
            "max_length": 50,
            "placeholder": "House model (e.g., Bungalow, Two-story)",
            "section": "basic_info",
        },
        COMMON_FIELDS["region"],
        COMMON_FIELDS["price"],
        COMMON_FIELDS["deposit"],
        COMMON_FIELDS["bedrooms"],
        COMMON_FIELDS["bathrooms"],
        COMMON_FIELDS["area"],
        {
            "name": "lotArea",
            "kind": FieldKind.NUMBER,
            "label": "Lot area (sqm)",
            "required": True,
            "min": 50,
            "max": 2000,
            "placeholder": "Lot area in square meters",
            "section": "details",
        },
        COMMON_FIELDS["furnished"],
        COMMON_FIELDS["description"],
        COMMON_FIELDS["address"],
        _amenities_field(
            [
                ("security", "24/7 Security"),
                ("clubhouse", "Clubhouse"),
                ("playground", "Playground"),
                ("basketball_court", "Basketball Court"),
                ("swimming_pool", "Swimming Pool"),
                ("tennis_court", "Tennis Court"),
                ("jogging_path", "Jogging Path"),
                ("chapel", "Chapel"),
                ("commercial_area", "Commercial Area"),
                ("parking", "Parking"),
                ("garden", "Garden"),
            ],
        ),
        COMMON_FIELDS["images"],
    ]
    return _template(
        template_id="village_template_v1",
        name="Village House Template",
        property_type=PropertyType.VILLAGE,
        description="Template for village/subdivision houses",
        tags=["residential", "village", "subdivision"],
        fields=fields,
        rules=[
            {
                "field": "price",
                "rule": "min",
                "value": 15000,
                "message": "Village house price should be at least PHP 15,000",
            },
            {
                "field": "lotArea",
                "rule": "min",
                "value": 50,
                "message": "Lot area should be at least 50 square meters",
            },
        ],
        defaults={
            "type": "village",
            "currency": "PHP",
            "furnished": False,
            "amenities": ["security", "clubhouse", "playground", "basketball_court"],
        },
        sections=_sections(
            ["title", "villageName", "houseModel", "region", "price", "deposit", "description"],
            ["bedrooms", "bathrooms", "area", "lotArea", "furnished"],
        ),
    )
