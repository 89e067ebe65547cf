"""
Webhook receiver built on the FastAPI adapter.

Run it with any ASGI server, for example::

    uvicorn examples.webhook_server:app --port 8000
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from vipps_mobilepay import (
    EventRouter,
    PaymentEventName,
    WebhookEvent,
    create_webhook_endpoint,
    load_client_config,
)
from vipps_mobilepay.webhooks.server import build_webhook_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

router = EventRouter()


@router.on(PaymentEventName.AUTHORIZED)
def payment_authorized(event: WebhookEvent) -> None:
    logging.info(
        "Payment %s authorized for %d %s",
        event.reference,
        event.amount.value,
        event.amount.currency,
    )


@router.on(PaymentEventName.CAPTURED)
def payment_captured(event: WebhookEvent) -> None:
    logging.info("Payment %s captured", event.reference)


def unhandled(event: WebhookEvent) -> None:
    logging.info("Ignoring %s event for %s", event.name, event.reference)


router.register_fallback(unhandled)

endpoint = create_webhook_endpoint(
    config=load_client_config(),
    router=router,
)

app = FastAPI()
app.include_router(build_webhook_router(endpoint, path="/webhooks/vipps"))
