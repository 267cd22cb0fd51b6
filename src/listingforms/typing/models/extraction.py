"""Extraction result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from listingforms.typing.enums import PropertyType

BEDROOM_BOUNDS = (1, 10)
AREA_MAX = 10_000.0


class Contacts(BaseModel):
    """Contact handles found in a post."""

    model_config = ConfigDict(extra="forbid")

    whatsapp: str | None = None
    telegram: str | None = None
    email: str | None = None

    def is_empty(self) -> bool:
        """Return whether no contact channel was detected."""
        return self.whatsapp is None and self.telegram is None and self.email is None


class ExtractionResult(BaseModel):
    """Draft record extracted from a pasted post."""

    model_config = ConfigDict(extra="forbid")

    price: int | None = Field(default=None, gt=0)
    location: str | None = None
    bedrooms: int | None = Field(default=None, ge=BEDROOM_BOUNDS[0], le=BEDROOM_BOUNDS[1])
    bathrooms: int | None = Field(default=None, ge=BEDROOM_BOUNDS[0], le=BEDROOM_BOUNDS[1])
    area: float | None = Field(default=None, gt=0, le=AREA_MAX)
    contacts: Contacts = Field(default_factory=Contacts)
    type: PropertyType = PropertyType.CONDO
    amenities: set[str] = Field(default_factory=set)
    title: str = ""
    description: str = ""
    raw: str = ""

    def missing_fields(self) -> list[str]:
        """Return the names of fields that were not detected.

        Returns:
            list[str]: Field names the reviewer has to fill manually.
        """
        missing = [
            name
            for name in ("price", "location", "bedrooms", "bathrooms", "area")
            if getattr(self, name) is None
        ]
        if self.contacts.is_empty():
            missing.append("contacts")
        if not self.amenities:
            missing.append("amenities")
        return missing
