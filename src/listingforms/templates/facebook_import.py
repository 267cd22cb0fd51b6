"""Default pattern rule table for importing pasted social-media posts."""

from __future__ import annotations

from listingforms.typing.enums import ContactKind, MatchPolicy
from listingforms.typing.models import ImportTemplate, TemplateMetadata

# Amount token: comma-grouped digits, optional decimals, optional "k" shorthand.
_AMOUNT = r"([0-9][0-9,]*(?:\.[0-9]+)?(?:k\b)?)"
_DECIMAL = r"([0-9][0-9,]*(?:\.[0-9]+)?)"
_AREA_UNIT = r"(?:sqm|sq\.?\s*m\b|square\s*met(?:er|re)s?|m²|m2\b)"
# A prefixed amount must not be a lease term such as "php 1 month deposit".
_NOT_A_TERM = r"(?![\w,]|\.[0-9]|\s*(?:-\s*)?(?:months?|mos?)\b)"

PRICE_PATTERNS = [
    rf"PHP\s*{_AMOUNT}{_NOT_A_TERM}",
    rf"₱\s*{_AMOUNT}{_NOT_A_TERM}",
    rf"pesos\s*{_AMOUNT}{_NOT_A_TERM}",
    rf"\bP\s*{_AMOUNT}{_NOT_A_TERM}",
    rf"{_AMOUNT}\s*(?:php|pesos)\b",
    rf"{_AMOUNT}\s*(?:per|/|a)\s*month",
    r"\b([0-9][0-9,]*(?:\.[0-9]+)?k)\b",
    rf"\b(?:price|rent|monthly)\s*(?:is\s*)?[:\s]*{_AMOUNT}",
]

LOCATION_PATTERNS = [
    r"\b(?:in|at|located\s+(?:in|at))\s+([A-Za-z\s,.-]+?)(?:\s|$|,|\.|!|\?)",
    r"([A-Za-z\s,.-]+?)\s+(?:area|city|district)\b",
    r"\b(BGC|Bonifacio\s+Global\s+City)\b",
    r"\b(Makati(?:\s+(?:City|CBD|Business\s+District))?)\b",
    r"\b(Taguig(?:\s+City)?)\b",
    r"\b(Ortigas(?:\s+(?:Center|CBD|Business\s+District))?)\b",
    r"\b(Quezon\s+City|QC)\b",
    r"\b(Manila(?:\s+(?:City|Bay))?)\b",
    r"\b(Cebu(?:\s+(?:City|IT\s+Park))?)\b",
    r"\b(Davao(?:\s+City)?)\b",
    r"\b(Boracay(?:\s+Island)?)\b",
    r"\b(Baguio(?:\s+City)?)\b",
    r"\b(Alabang|Muntinlupa)\b",
    r"\b(Pasig(?:\s+City)?)\b",
    r"\b(Mandaluyong(?:\s+City)?)\b",
    r"\b(Pasay(?:\s+City)?)\b",
    r"\b(Para[nñ]aque(?:\s+City)?)\b",
    r"\b(Las\s+Pi[nñ]as(?:\s+City)?)\b",
    r"\b(Antipolo(?:\s+City)?)\b",
    r"\b(Lahug)\b",
]

BEDROOM_PATTERNS = [
    r"\b([0-9]+)\s*(?:-|–)?\s*(?:brs?|bedrooms?|beds?|bdrms?)\b",
    r"\b(?:bedrooms?|beds?|br)\s*:?\s*([0-9]+)\b",
]

BATHROOM_PATTERNS = [
    r"\b([0-9]+)\s*(?:-|–)?\s*(?:bathrooms?|baths?|toilets?|t&b|cr|washrooms?)\b",
    r"\b(?:bathrooms?|baths?|toilets?|t&b|cr)\s*:?\s*([0-9]+)\b",
    r"\b([0-9]+)\s*toilet\s*(?:and|&)\s*bath",
]

AREA_PATTERNS = [
    rf"{_DECIMAL}\s*(?:-|–)?\s*{_AREA_UNIT}",
    rf"\b(?:floor\s+area|area|size)\s*:?\s*{_DECIMAL}\s*{_AREA_UNIT}",
]

CONTACT_PATTERNS = [
    r"(?:\+63|0063)\s*[0-9]{3}\s*[0-9]{3}\s*[0-9]{4}\b",
    r"\b09[0-9]{2}\s*[0-9]{3}\s*[0-9]{4}\b",
    r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}",
    r"(?<![\w.@])@[A-Za-z0-9_]+",
]

TYPE_PATTERNS = [
    r"\bstudio(?:\s+(?:type|unit|apartment|condo))?\b",
    r"\bcondo(?:minium)?(?:\s+unit)?\b",
    r"\bapartment(?:\s+unit)?\b",
    r"\bhouse(?:\s+and\s+lot)?\b",
    r"\btownhouse\b",
    r"\bvilla\b",
    r"\broom(?:\s+(?:for\s+rent|rental))?\b",
    r"\bbed\s*space\b",
    r"\bdormitory\b",
    r"\bboarding\s+house\b",
]

TYPE_KEYWORDS = [
    ("studio", "condo"),
    ("condo", "condo"),
    ("apartment", "condo"),
    ("house", "house"),
    ("villa", "house"),
    ("room", "house"),
    ("bed", "house"),
    ("dormitory", "house"),
    ("boarding", "house"),
]

AMENITY_PATTERNS = [
    r"(?<!semi )(?<!semi-)\b(?:fully?\s*)?furnished",
    r"\bsemi[\s-]*furnished",
    r"\bunfurnished",
    r"\bair\s*con(?:ditioned|ditioning)?",
    r"\ba/c\b",
    r"\bparking(?:\s+(?:slot|space))?",
    r"\bgarage",
    r"\belevators?\b",
    r"\bsecurity",
    r"\bguards?\b",
    r"\bcctv\b",
    r"\bswimming\s*pool|\bpool\b",
    r"\bgym(?:nasium)?\b",
    r"\bfitness\s*(?:center|gym)",
    r"\bbalcony",
    r"\bterrace",
    r"\bgarden",
    r"\bwi-?fi\b",
    r"\binternet",
    r"\bkitchen",
    r"\blaundry",
    r"\bwashing\s*machine",
]

# Checked in order against the lowercased match; the first keyword found wins.
AMENITY_KEYWORDS = [
    ("semi", "semi_furnished"),
    ("unfurnished", "unfurnished"),
    ("furnished", "furnished"),
    ("air", "aircon"),
    ("a/c", "aircon"),
    ("parking", "parking"),
    ("garage", "parking"),
    ("elevator", "elevator"),
    ("security", "security"),
    ("guard", "security"),
    ("cctv", "security"),
    ("pool", "swimming_pool"),
    ("gym", "gym"),
    ("fitness", "gym"),
    ("balcony", "balcony"),
    ("terrace", "balcony"),
    ("garden", "garden"),
    ("wifi", "wifi"),
    ("wi-fi", "wifi"),
    ("internet", "wifi"),
    ("kitchen", "kitchen"),
    ("laundry", "laundry"),
    ("washing", "laundry"),
]

REGION_ALIASES = {
    "makati": "manila",
    "makati city": "manila",
    "makati cbd": "manila",
    "makati business district": "manila",
    "bgc": "manila",
    "bonifacio global city": "manila",
    "taguig": "manila",
    "taguig city": "manila",
    "ortigas": "manila",
    "ortigas center": "manila",
    "ortigas cbd": "manila",
    "ortigas business district": "manila",
    "quezon city": "manila",
    "qc": "manila",
    "manila": "manila",
    "manila city": "manila",
    "manila bay": "manila",
    "pasig": "manila",
    "pasig city": "manila",
    "mandaluyong": "manila",
    "mandaluyong city": "manila",
    "pasay": "manila",
    "pasay city": "manila",
    "paranaque": "manila",
    "paranaque city": "manila",
    "parañaque": "manila",
    "parañaque city": "manila",
    "muntinlupa": "manila",
    "alabang": "manila",
    "las pinas": "manila",
    "las pinas city": "manila",
    "las piñas": "manila",
    "las piñas city": "manila",
    "antipolo": "manila",
    "antipolo city": "manila",
    "cebu": "cebu",
    "cebu city": "cebu",
    "cebu it park": "cebu",
    "lahug": "cebu",
    "davao": "davao",
    "davao city": "davao",
    "boracay": "boracay",
    "boracay island": "boracay",
    "aklan": "boracay",
    "baguio": "baguio",
    "baguio city": "baguio",
}

CANONICAL_REGIONS = ["manila", "cebu", "davao", "boracay", "baguio"]

WORKFLOW_STEPS = [
    "paste_content",
    "auto_parse_content",
    "review_and_edit",
    "upload_images",
    "set_location",
    "add_translations",
    "preview_and_save",
]


def _keyword_rules(pairs: list[tuple[str, str]]) -> list[dict[str, str]]:
    return [{"keyword": keyword, "code": code} for keyword, code in pairs]


def build_facebook_import_template() -> ImportTemplate:
    """Build the default import template.

    Returns:
        ImportTemplate: Validated template with compiled patterns.
    """
    return ImportTemplate.model_validate(
        {
            "id": "facebook_import_v1",
            "name": "Facebook Post Import",
            "version": "1.0.0",
            "is_default": True,
            "metadata": TemplateMetadata(
                description="Semi-automatic extraction of listings from social-media group posts",
                tags=["facebook", "import", "automation", "parsing"],
            ),
            "parsing_rules": {
                "price": {"patterns": PRICE_PATTERNS},
                "location": {"patterns": LOCATION_PATTERNS},
                "bedrooms": {"patterns": BEDROOM_PATTERNS},
                "bathrooms": {"patterns": BATHROOM_PATTERNS},
                "area": {"patterns": AREA_PATTERNS},
                "contacts": {"patterns": CONTACT_PATTERNS, "policy": MatchPolicy.LAST},
                "type": {"patterns": TYPE_PATTERNS},
                "amenities": {"patterns": AMENITY_PATTERNS, "policy": MatchPolicy.ALL},
                "type_keywords": _keyword_rules(TYPE_KEYWORDS),
                "amenity_keywords": _keyword_rules(AMENITY_KEYWORDS),
            },
            "mapping_rules": {
                "region_aliases": REGION_ALIASES,
                "canonical_regions": CANONICAL_REGIONS,
                "title_max_length": 100,
                "description_max_length": 1000,
                "price_min": 1000,
                "price_max": 1_000_000,
                "contact_patterns": {
                    ContactKind.WHATSAPP: r"^\+63[0-9]{10}$",
                    ContactKind.TELEGRAM: r"^@[A-Za-z0-9_]+$",
                },
            },
            "workflow_steps": WORKFLOW_STEPS,
        },
    )
