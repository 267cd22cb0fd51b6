"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class TemplateError(PackageError):
    """Raised when a template violates its configuration integrity rules."""

    message: str
    template_id: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.template_id:
            return f"Invalid template '{self.template_id}': {self.message}"
        return self.message


@dataclass
class TemplateStoreError(PackageError):
    """Raised when template loading/saving constraints are violated."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
