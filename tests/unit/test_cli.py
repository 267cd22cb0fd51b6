from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from listingforms import cli
from listingforms.exceptions import TemplateStoreError
from listingforms.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path

POST = "2BR condo in Makati, 45 sqm. PHP 25,000/month. Contact 0917 123 4567."


@pytest.fixture
def cli_settings(mocker, tmp_path: Path) -> Settings:
    settings = Settings(
        results_dir=str(tmp_path / "results"),
        template_dir=str(tmp_path / "templates"),
        log_json=False,
    )
    mocker.patch("listingforms.cli.get_settings", return_value=settings)
    mocker.patch("listingforms.cli.configure_logging")
    return settings


def test_build_parser_supports_version_flag(capsys) -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["--version"])
    assert exc_info.value.code == 0

    captured = capsys.readouterr()
    assert "0.1.0" in captured.out


def test_validate_requires_a_template_source() -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["validate", "--data", "bag.json"])


def test_main_without_command_prints_help(cli_settings: Settings, capsys) -> None:
    _ = cli_settings
    assert cli.main([]) == cli.EXIT_OK
    assert "usage" in capsys.readouterr().out.lower()


def test_main_parse_writes_draft(cli_settings: Settings, tmp_path: Path) -> None:
    input_path = tmp_path / "post.txt"
    input_path.write_text(POST, encoding="utf-8")

    assert cli.main(["parse", "--input", str(input_path)]) == cli.EXIT_OK

    draft = json.loads((tmp_path / "results" / "draft.json").read_text(encoding="utf-8"))
    assert draft["price"] == 25000
    assert draft["bedrooms"] == 2
    assert draft["contacts"]["whatsapp"] == "09171234567"
    assert cli_settings.results_dir.endswith("results")


def test_main_parse_writes_draft_bag(cli_settings: Settings, tmp_path: Path) -> None:
    _ = cli_settings
    input_path = tmp_path / "post.txt"
    input_path.write_text(POST, encoding="utf-8")
    output_path = tmp_path / "bag.json"

    assert cli.main(["parse", "--input", str(input_path), "--output", str(output_path), "--bag"]) == cli.EXIT_OK

    bag = json.loads(output_path.read_text(encoding="utf-8"))
    assert bag["type"] == "condo"
    assert bag["region"] == "manila"
    assert bag["contact"] == {"whatsapp": "+639171234567"}


def test_main_validate_reports_errors(cli_settings: Settings, tmp_path: Path, capsys) -> None:
    _ = cli_settings
    data_path = tmp_path / "bag.json"
    data_path.write_text(json.dumps({"title": "2BR House", "price": 1000}), encoding="utf-8")

    assert cli.main(["validate", "--template", "house", "--data", str(data_path)]) == cli.EXIT_INVALID

    errors = json.loads(capsys.readouterr().out)
    assert errors["price"] == "Price should be at least PHP 5,000"
    assert errors["region"] == "Region is required."
    assert "title" not in errors


def test_main_validate_accepts_complete_bag(cli_settings: Settings, tmp_path: Path, capsys) -> None:
    _ = cli_settings
    data_path = tmp_path / "bag.json"
    bag = {
        "title": "3BR House in Cebu",
        "region": "cebu",
        "price": 30000,
        "deposit": 60000,
        "bedrooms": 3,
        "bathrooms": 2,
        "area": 120,
        "description": "Quiet street.",
        "address": "1 Mango Avenue",
    }
    data_path.write_text(json.dumps(bag), encoding="utf-8")

    assert cli.main(["validate", "--template", "house", "--data", str(data_path)]) == cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == {}


def test_main_validate_rejects_non_object_bag(cli_settings: Settings, tmp_path: Path) -> None:
    _ = cli_settings
    data_path = tmp_path / "bag.json"
    data_path.write_text("[1, 2]", encoding="utf-8")

    assert cli.main(["validate", "--template", "condo", "--data", str(data_path)]) == cli.EXIT_ERROR


def test_main_templates_lists_builtins(cli_settings: Settings, capsys) -> None:
    _ = cli_settings
    assert cli.main(["templates"]) == cli.EXIT_OK

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "house_template_v1\thouse\tSingle House Template"
    assert "condo_template_v1\tcondo\tCondominium Template" in lines
    assert any(line.startswith("facebook_import_v1\tfacebook_import") for line in lines)


def test_main_returns_error_code_on_package_error(cli_settings: Settings, mocker, tmp_path: Path) -> None:
    _ = cli_settings
    mocker.patch("listingforms.cli.TemplateStore.load", side_effect=TemplateStoreError(message="broken"))
    mock_logger = mocker.patch("listingforms.cli.logger")
    data_path = tmp_path / "bag.json"
    data_path.write_text("{}", encoding="utf-8")

    result = cli.main(
        ["validate", "--template-path", str(tmp_path / "x.template.json"), "--data", str(data_path)],
    )

    assert result == cli.EXIT_ERROR
    mock_logger.exception.assert_called_once()
