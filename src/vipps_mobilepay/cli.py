"""
Command-line interface for exercising the Vipps MobilePay client.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from email.utils import formatdate
from pathlib import Path
from typing import Iterable, Sequence, Tuple

from .api import create_client
from .core.client import VippsClient
from .core.config import load_client_config
from .core.environment import build_environment
from .core.errors import ConfigError, VippsError
from .webhooks.signature import SigningScheme, signed_headers


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vipps-mobilepay",
        description="Talk to the Vipps MobilePay ePayment and Webhooks APIs",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing VIPPS_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("token", help="Fetch an access token and report its validity")

    payment = commands.add_parser("payment", help="Show a payment by reference")
    payment.add_argument("reference")
    payment.add_argument(
        "--events",
        action="store_true",
        help="Show the payment's event log instead of its current state",
    )

    webhooks = commands.add_parser("webhooks", help="Manage webhook registrations")
    webhook_commands = webhooks.add_subparsers(dest="webhook_command", required=True)
    webhook_commands.add_parser("list", help="List registered webhooks")
    register = webhook_commands.add_parser("register", help="Register a webhook")
    register.add_argument("url")
    register.add_argument("events", nargs="+", metavar="EVENT")
    delete = webhook_commands.add_parser("delete", help="Delete a webhook")
    delete.add_argument("webhook_id")

    sign = commands.add_parser(
        "sign",
        help="Print the headers for a signed test delivery of a JSON body",
    )
    sign.add_argument("body_file", type=Path)
    sign.add_argument("--path", default="/webhooks/vipps")
    sign.add_argument("--host", default="localhost:8000")
    sign.add_argument(
        "--scheme",
        choices=[scheme.value for scheme in SigningScheme],
        default=None,
        help="Signing scheme (default: VIPPS_WEBHOOK_SIGNING_SCHEME or canonical)",
    )
    return parser


def _run_token(client: VippsClient) -> int:
    client.tokens.ensure_valid()
    logging.info("Access token obtained; valid: %s", client.tokens.is_valid())
    return 0


def _run_payment(client: VippsClient, args: argparse.Namespace) -> int:
    if args.events:
        _print_json([event.raw for event in client.payments.events(args.reference)])
    else:
        _print_json(client.payments.get(args.reference).raw)
    return 0


def _run_webhooks(client: VippsClient, args: argparse.Namespace) -> int:
    if args.webhook_command == "list":
        _print_json([registration.raw for registration in client.webhooks.list()])
    elif args.webhook_command == "register":
        registration = client.webhooks.register(args.url, args.events)
        logging.info("Registered webhook %s for %s", registration.id, args.url)
        _print_json(registration.raw)
    else:
        client.webhooks.delete(args.webhook_id)
        logging.info("Deleted webhook %s", args.webhook_id)
    return 0


def _run_sign(args: argparse.Namespace, secret: str, scheme: str) -> int:
    body = args.body_file.read_bytes()
    headers = signed_headers(
        secret,
        body,
        path=args.path,
        host=args.host,
        date=formatdate(usegmt=True),
        scheme=args.scheme or scheme,
    )
    _print_json(headers)
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    if args.command == "sign":
        # Signing only needs the webhook settings, not API credentials.
        environment = build_environment(
            env_file=args.env_file, overrides=overrides, search_parents=True
        )
        secret = environment.get("VIPPS_WEBHOOK_SECRET")
        if not secret:
            logging.error("VIPPS_WEBHOOK_SECRET is required to sign a delivery")
            return 1
        scheme = environment.get("VIPPS_WEBHOOK_SIGNING_SCHEME") or "canonical"
        try:
            return _run_sign(args, secret, scheme.lower())
        except ValueError as exc:
            logging.error("Invalid configuration: %s", exc)
            return 1

    try:
        config = load_client_config(env_file=args.env_file, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)
    try:
        if args.command == "token":
            return _run_token(client)
        if args.command == "payment":
            return _run_payment(client, args)
        return _run_webhooks(client, args)
    except VippsError as exc:
        logging.error("Request failed: %s", exc)
        return 1


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
