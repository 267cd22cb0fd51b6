"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from listingforms.exceptions import SettingsError
from listingforms.typing.enums import MatchPolicy

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "listingforms"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    results_dir: str = Field(
        default="results",
        validation_alias="RESULTS_DIR",
        description="Directory to store extraction drafts.",
    )
    template_dir: str = Field(
        default="results/templates",
        validation_alias="TEMPLATE_DIR",
        description="Directory holding user-defined template files.",
    )
    required_message: str = Field(
        default="{label} is required.",
        validation_alias="REQUIRED_MESSAGE",
        description="Format string for required-field errors, receives `{label}`.",
    )
    contact_policy: MatchPolicy = Field(
        default=MatchPolicy.LAST,
        validation_alias="CONTACT_POLICY",
        description="Which duplicate contact wins: 'last' or 'first'.",
    )

    @field_validator("contact_policy")
    @classmethod
    def _validate_contact_policy(cls, value: MatchPolicy) -> MatchPolicy:
        """Restrict the contact policy to overwrite-style policies.

        Args:
            value (MatchPolicy): Parsed policy.

        Raises:
            ValueError: If the policy aggregates instead of picking one value.

        Returns:
            MatchPolicy: Validated policy.
        """
        if value == MatchPolicy.ALL:
            raise ValueError("CONTACT_POLICY must be 'first' or 'last'")  # noqa: TRY003
        return value

    @field_validator("required_message")
    @classmethod
    def _validate_required_message(cls, value: str) -> str:
        """Ensure the required message formats with a label only.

        Args:
            value (str): Raw format string.

        Raises:
            ValueError: If the format string references other placeholders.

        Returns:
            str: Validated format string.
        """
        try:
            value.format(label="")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"REQUIRED_MESSAGE is not a valid format string: {exc}") from exc  # noqa: TRY003
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            try:
                ensure_env_file_exists()
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
