"""
The Whistle CLI — Validate form records from the command line.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

import yaml

from whistle import __version__
from whistle.core.logging import LogChannel, configure_logging, get_logger
from whistle.forms.loader import get_form, list_forms
from whistle.validation.engine import RuleValidator
from whistle.validation.errors import ConfigurationError

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="whistle",
        description="The Whistle form validation",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"whistle {__version__}",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or WHISTLE_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (validation,config,cli,system). Default: all",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a record against a form"
    )
    validate_parser.add_argument("form", type=str, help="Form id (see: whistle forms)")
    validate_parser.add_argument(
        "record",
        type=str,
        help="Path to a JSON or YAML record (use - for stdin)",
    )
    validate_parser.add_argument(
        "--page",
        type=str,
        default=None,
        help="Page of a multi-step form, or * for every page (default: whole form)",
    )
    validate_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    subparsers.add_parser("forms", help="List available forms")

    check_parser = subparsers.add_parser(
        "check", help="Check form specifications for rule errors"
    )
    check_parser.add_argument(
        "forms",
        nargs="*",
        help="Form ids to check (default: all)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]
    configure_logging(level=args.log_level, channels=channels, force=True)

    if args.command is None:
        parser.print_help()
        return EXIT_VALID

    if args.command == "validate":
        return run_validate(args)
    if args.command == "forms":
        return run_forms(args)
    if args.command == "check":
        return run_check(args)

    return EXIT_VALID


def read_record(source: str) -> dict:
    """
    Read a record from a JSON/YAML file or stdin.

    YAML is read with the base loader so every scalar stays text, as a
    submitted form would send it: unquoted 12:30 or 0x10 are not turned
    into numbers.
    """
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.load(text, Loader=yaml.BaseLoader)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Record must be a mapping of field name to value")
    return {
        str(k): (None if v is None else str(v))
        for k, v in data.items()
    }


def run_validate(args: argparse.Namespace) -> int:
    """Run the validate command."""
    log = get_logger(LogChannel.CLI).bind(form=args.form)

    try:
        form = get_form(args.form)
        rules = form.rules_for(args.page)
        record = read_record(args.record)
    except (FileNotFoundError, ConfigurationError, KeyError, ValueError, yaml.YAMLError) as e:
        log.error("validate_failed", error=str(e), error_type=type(e).__name__)
        return EXIT_ERROR

    errors = RuleValidator(rules).validate(record)
    log.info("record_validated", page=args.page or "*", errors=len(errors))

    if args.format == "json":
        print(json.dumps(
            {"form": form.id, "page": args.page or "*", "valid": not errors, "errors": errors},
            ensure_ascii=False,
            indent=2,
        ))
    elif errors:
        for error in errors:
            print(error)
    else:
        print("OK")

    return EXIT_INVALID if errors else EXIT_VALID


def run_forms(args: argparse.Namespace) -> int:
    """Run the forms command."""
    log = get_logger(LogChannel.CLI)
    status = EXIT_VALID
    for form_id in list_forms():
        try:
            form = get_form(form_id)
        except ConfigurationError as e:
            log.warning("form_invalid", form=form_id, error=str(e))
            status = EXIT_ERROR
            continue
        pages = f" ({len(form.pages)} pages)" if form.pages else ""
        print(f"{form.id}\t{form.name or form.id}{pages}")
    return status


def run_check(args: argparse.Namespace) -> int:
    """Run the check command."""
    log = get_logger(LogChannel.CLI)
    form_ids = args.forms or list_forms()

    failed = 0
    for form_id in form_ids:
        try:
            form = get_form(form_id, use_cache=False)
            # whole-form rules can only be built once every page parses
            form.rules_for(None)
        except (FileNotFoundError, ConfigurationError) as e:
            failed += 1
            log.warning("form_check_failed", form=form_id, error_type=type(e).__name__)
            print(f"FAIL {form_id}: {e}")
            continue
        print(f"ok   {form_id}")

    log.info("forms_checked", checked=len(form_ids), failed=failed)
    return EXIT_ERROR if failed else EXIT_VALID


if __name__ == "__main__":
    sys.exit(main())
