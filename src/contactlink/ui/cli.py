# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from http import HTTPStatus
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from contactlink.app import check_health, handle_identify
from contactlink.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile customer contact records")
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify = subparsers.add_parser(
        "identify",
        help="Link an email and/or phone number to its contact cluster",
    )
    identify.add_argument("--email", type=str, help="Customer email address")
    identify.add_argument("--phone-number", type=str, help="Customer phone number")
    identify.add_argument(
        "--payload",
        type=str,
        help='Raw JSON request body, e.g. \'{"email": "a@x.com", "phoneNumber": 123}\'',
    )

    subparsers.add_parser("health", help="Check that the contact store is reachable")

    return parser.parse_args(list(argv))


def _build_payload(args: argparse.Namespace) -> Any:  # noqa: ANN401
    if args.payload is not None:
        if args.email is not None or args.phone_number is not None:
            raise ValueError("--payload cannot be combined with --email/--phone-number")
        try:
            return json.loads(args.payload)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON payload: {exc.msg}") from exc
    payload: dict[str, str] = {}
    if args.email is not None:
        payload["email"] = args.email
    if args.phone_number is not None:
        payload["phoneNumber"] = args.phone_number
    return payload


def _exit_code(status: HTTPStatus) -> int:
    if status is HTTPStatus.OK:
        return EXIT_OK
    if status is HTTPStatus.BAD_REQUEST:
        return EXIT_INVALID_INPUT
    return EXIT_FAILURE


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        payload = _build_payload(parsed_args) if parsed_args.command == "identify" else None
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_INVALID_INPUT)

    if parsed_args.command == "health":
        try:
            print(json.dumps(check_health()))
        except Exception:
            log.exception("Health check failed")
            sys.exit(EXIT_FAILURE)
        return

    status, body = handle_identify(payload)
    print(json.dumps(body))
    code = _exit_code(status)
    if code != EXIT_OK:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
