"""Built-in templates shipped with the package."""

from listingforms.templates.facebook_import import build_facebook_import_template
from listingforms.templates.property import (
    build_condo_template,
    build_house_template,
    build_village_template,
)

__all__ = [
    "build_condo_template",
    "build_facebook_import_template",
    "build_house_template",
    "build_village_template",
]
