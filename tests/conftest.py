"""Pytest marker auto-assignment by folder and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from listingforms import logger
from listingforms.settings import Settings, get_settings
from listingforms.template_store import get_import_template, get_property_template
from listingforms.typing.enums import PropertyType
from listingforms.typing.models import ImportTemplate, Template

if TYPE_CHECKING:
    from collections.abc import Iterator


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except OSError:
            logger.warning(
                "Could not resolve test path; skipping marker assignment",
                extra={"test": item.name, "marker": marker},
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user environment variables and cached settings out of tests."""
    for name in ("REQUIRED_MESSAGE", "CONTACT_POLICY", "TEMPLATE_DIR", "RESULTS_DIR"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(required_message="{label} is required.")


@pytest.fixture
def import_template() -> ImportTemplate:
    return get_import_template()


@pytest.fixture
def house_template() -> Template:
    return get_property_template(PropertyType.HOUSE)


@pytest.fixture
def condo_template() -> Template:
    return get_property_template(PropertyType.CONDO)
