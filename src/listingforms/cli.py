"""CLI entry point for ListingForms."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from listingforms import __version__, logger
from listingforms.exceptions import PackageError, TemplateStoreError
from listingforms.extractor import build_draft_bag, parse_all, persist_result, write_json
from listingforms.forms import FormEngine
from listingforms.logging import configure_logging
from listingforms.settings import Settings, get_settings
from listingforms.template_store import TemplateStore, get_property_template, list_builtin_templates
from listingforms.typing.enums import PropertyType
from listingforms.typing.models import Template

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="listingforms")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    parse_parser = subparsers.add_parser("parse", help="Extract a draft listing from a pasted post")
    parse_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    parse_parser.add_argument("--output", type=Path, default=None, dest="output_path")
    parse_parser.add_argument("--bag", action="store_true", help="Write the draft form data bag instead")

    validate_parser = subparsers.add_parser("validate", help="Validate a form data bag against a template")
    template_group = validate_parser.add_mutually_exclusive_group(required=True)
    template_group.add_argument(
        "--template",
        choices=[property_type.value for property_type in PropertyType],
        dest="property_type",
    )
    template_group.add_argument("--template-path", type=Path, default=None, dest="template_path")
    validate_parser.add_argument("--data", required=True, type=Path, dest="data_path")

    subparsers.add_parser("templates", help="List available templates")

    return parser


def _run_parse(args: argparse.Namespace, settings: Settings) -> int:
    """Run the ``parse`` command.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    raw_text = args.input_path.read_text(encoding="utf-8")
    result = parse_all(raw_text, settings=settings)

    output_path = args.output_path or Path(settings.results_dir) / ("draft_bag.json" if args.bag else "draft.json")
    if args.bag:
        write_json(build_draft_bag(result), output_path)
    else:
        persist_result(result, output_path)
    logger.info("Parse completed", extra={"output_path": str(output_path), "missing": result.missing_fields()})
    return EXIT_OK


def _load_template(args: argparse.Namespace) -> Template:
    """Load the property template selected on the command line.

    Args:
        args (argparse.Namespace): Parsed CLI args.

    Raises:
        TemplateStoreError: If the template file does not hold a property template.

    Returns:
        Template: Property template.
    """
    if args.template_path is None:
        return get_property_template(args.property_type)
    template = TemplateStore.load(args.template_path)
    if not isinstance(template, Template):
        raise TemplateStoreError(message=f"Template file is not a property template: {args.template_path}")
    return template


def _run_validate(args: argparse.Namespace, settings: Settings) -> int:
    """Run the ``validate`` command.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: ``0`` when the bag is valid, ``2`` otherwise.
    """
    template = _load_template(args)
    data = json.loads(args.data_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise PackageError(f"Data bag must be a JSON object: {args.data_path}")

    engine = FormEngine.from_template(template, data, settings=settings)
    valid = engine.validate()
    sys.stdout.write(json.dumps(engine.errors, indent=2, ensure_ascii=False) + "\n")
    logger.info("Validation completed", extra={"template_id": template.id, "errors": len(engine.errors)})
    return EXIT_OK if valid else EXIT_INVALID


def _run_templates(settings: Settings) -> int:
    """Run the ``templates`` command.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    lines = [
        f"{template.id}\t{(template.metadata.property_type or template.type).value}\t{template.name}"
        for template in list_builtin_templates()
    ]
    template_dir = Path(settings.template_dir)
    if template_dir.is_dir():
        lines.extend(str(path) for path in TemplateStore(root=template_dir).list_templates())
    sys.stdout.write("\n".join(lines) + "\n")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (list[str] | None): Arguments, ``sys.argv[1:]`` when omitted.

    Returns:
        int: Exit code (0 for success, 1 for error, 2 for an invalid data bag).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        if args.command == "parse":
            return _run_parse(args, settings)
        if args.command == "validate":
            return _run_validate(args, settings)
        return _run_templates(settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
