"""CLI entry point for DocAutofill."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from docautofill import __version__, logger
from docautofill.dependencies import ensure_cli_dependencies_for_analyze
from docautofill.exceptions import PackageError
from docautofill.extraction_client import ExtractionServiceClient
from docautofill.extraction_store import ExtractionStore
from docautofill.logging import configure_logging
from docautofill.processing.display_names import category_display_name, sub_category_display_name
from docautofill.processing.field_mapping import resolve_form_type
from docautofill.processing.processed_fields import build_processed_fields
from docautofill.settings import get_settings
from docautofill.storage import JsonFileSessionStorage

if TYPE_CHECKING:
    from docautofill.settings import Settings
    from docautofill.typing.models import ExtractionResult


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="docautofill")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser("analyze", help="Send a document to the extraction service and store it")
    analyze_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    analyze_parser.add_argument("--no-auto-fill", action="store_true", dest="no_auto_fill")

    show_parser = subparsers.add_parser("show", help="Print the stored extraction result")
    show_parser.add_argument("--form-type", default=None, dest="form_type")

    subparsers.add_parser("clear", help="Clear the stored extraction result")

    return parser


def _open_store(settings: Settings) -> ExtractionStore:
    """Open the extraction store backed by the session file.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ExtractionStore: Rehydrated store.
    """
    storage = JsonFileSessionStorage(path=Path(settings.session_store_path))
    return ExtractionStore(
        storage,
        namespace=settings.storage_namespace,
        persist_analysis=settings.persist_analysis,
    )


def _describe(result: ExtractionResult | None, settings: Settings, form_type: str | None = None) -> dict[str, Any]:
    """Build the printable summary of a stored result.

    Args:
        result (ExtractionResult | None): Stored result.
        settings (Settings): Runtime settings.
        form_type (str | None): Explicit form type, resolved from the classification when omitted.

    Returns:
        dict[str, Any]: JSON-serializable summary.
    """
    if result is None:
        return {"has_data": False}

    effective_form_type = form_type or resolve_form_type(result.category, result.sub_category)
    return {
        "has_data": True,
        "category": result.category,
        "category_display": category_display_name(result.category),
        "sub_category": result.sub_category,
        "sub_category_display": sub_category_display_name(result.sub_category),
        "form_type": effective_form_type,
        "auto_fill": result.auto_fill,
        "file_name": result.file.name if result.file is not None else None,
        "raw_fields": result.data_fields,
        "processed_fields": build_processed_fields(
            result.data_fields,
            form_type=effective_form_type,
            min_year=settings.date_min_year,
            max_year=settings.date_max_year,
        ),
    }


def _run_analyze(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    ensure_cli_dependencies_for_analyze()
    store = _open_store(settings)
    with ExtractionServiceClient(settings) as client:
        result = client.analyze(args.input_path, auto_fill=not args.no_auto_fill)
    store.set(result)
    return _describe(result, settings)


def _print_json(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))  # noqa: T201


def main() -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error, 130 when interrupted).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args()

    if args.command not in {"analyze", "show", "clear"}:
        parser.print_help()
        return 0

    try:
        if args.command == "analyze":
            _print_json(_run_analyze(args, settings))
        elif args.command == "show":
            _print_json(_describe(_open_store(settings).get(), settings, args.form_type))
        else:
            _open_store(settings).clear()
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return 130

    logger.info("Command completed", extra={"command": args.command})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
