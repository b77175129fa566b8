#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from twiliform.app import build_provider_context, import_resource, lookup, search_available_numbers
from twiliform.config import ConfigurationError, configure_logging
from twiliform.domain.errors import ValidationError
from twiliform.domain.model import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from twiliform.domain.model import ResourceRecord

KIND_ARGUMENTS: dict[str, ResourceKind] = {
    "phone-number": ResourceKind.PHONE_NUMBER,
    "messaging-service": ResourceKind.MESSAGING_SERVICE,
    "subaccount": ResourceKind.SUBACCOUNT,
    "api-key": ResourceKind.API_KEY,
}
LOOKUP_KINDS = ("phone-number", "messaging-service", "subaccount")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="twiliform",
        description="Inspect Twilio resources the way reconciliation sees them",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    lookup_parser = commands.add_parser("lookup", help="Resolve a resource from criteria")
    lookup_parser.add_argument("kind", choices=LOOKUP_KINDS)
    lookup_parser.add_argument("--number", help="Exact E.164 phone number")
    lookup_parser.add_argument("--friendly-name", help="Exact friendly name")
    lookup_parser.add_argument("--search", help="Digits the phone number contains")
    lookup_parser.add_argument("--status", help="Exact subaccount status")

    import_parser = commands.add_parser("import", help="Read a resource by identifier")
    import_parser.add_argument("kind", choices=tuple(KIND_ARGUMENTS))
    import_parser.add_argument("sid", help="Remote identifier (SID)")

    available_parser = commands.add_parser("available", help="List purchasable numbers")
    available_parser.add_argument("--country-code", required=True, help="ISO country code")
    available_parser.add_argument("--area-code", default="", help="Area code to search in")
    available_parser.add_argument("--contains", default="", help="Digits the number contains")

    return parser.parse_args(list(argv))


def _lookup_query(args: argparse.Namespace) -> dict[str, str]:
    query: dict[str, str] = {}
    for name in ("number", "friendly_name", "search", "status"):
        value = getattr(args, name)
        if value is not None:
            query[name] = value
    return query


def _record_output(record: ResourceRecord) -> dict[str, object]:
    return {"kind": str(record.kind), **record.snapshot(redact=True)}


def _execute(args: argparse.Namespace) -> object:
    ctx = build_provider_context()
    if args.command == "lookup":
        kind = KIND_ARGUMENTS[args.kind]
        return _record_output(lookup(kind, _lookup_query(args), ctx=ctx))
    if args.command == "import":
        kind = KIND_ARGUMENTS[args.kind]
        return _record_output(import_resource(kind, args.sid, ctx=ctx))
    numbers = search_available_numbers(
        args.country_code,
        area_code=args.area_code,
        contains=args.contains,
        ctx=ctx,
    )
    return [number.model_dump(mode="json") for number in numbers]


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        output = _execute(args)
    except (ValidationError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(output, indent=2, sort_keys=True))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
