"""
Minimal script that uses the public API to create, inspect and cancel a payment.
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid

from vipps_mobilepay import (
    Amount,
    ConfigError,
    CreatePaymentRequest,
    VippsError,
    create_client,
    load_client_config,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a test payment using the SDK API")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing VIPPS_* settings",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument("--amount", type=int, default=1000, help="Amount in minor units")
    parser.add_argument("--currency", default="NOK")
    parser.add_argument("--phone-number", help="Customer phone number, e.g. 4712345678")
    parser.add_argument(
        "--return-url",
        default="https://example.com/return",
        help="Where the customer lands after the payment",
    )
    parser.add_argument(
        "--force-approve",
        action="store_true",
        help="Approve the payment on behalf of the customer (test environment only)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_client_config(env_file=args.env_file)
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_client(config=config)
    reference = f"order-{uuid.uuid4().hex[:12]}"

    try:
        created = client.payments.create(
            CreatePaymentRequest(
                amount=Amount(currency=args.currency, value=args.amount),
                reference=reference,
                return_url=args.return_url,
                phone_number=args.phone_number,
                payment_description="Example payment",
            )
        )
        logging.info("Created payment %s; redirect to %s", created.reference, created.redirect_url)

        if args.force_approve and args.phone_number:
            client.payments.force_approve(reference, args.phone_number)
            logging.info("Force-approved payment %s", reference)

        payment = client.payments.get(reference)
        logging.info("Payment %s is %s", payment.reference, payment.state)

        if payment.state == "CREATED":
            client.payments.cancel(reference)
            logging.info("Cancelled payment %s", reference)
    except VippsError as exc:
        logging.error("Payment flow failed: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
