"""
HTTP-facing webhook entry point.

A delivery goes through ``received -> signature-checked -> body-decoded ->
dispatched -> acknowledged`` and stops at the first failing step:

* wrong method             -> 405
* failed signature check   -> 400
* undecodable body         -> 400
* routing/handler failure  -> 500, so the provider retries the delivery
* success                  -> 200
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from ..core.errors import DecodeError, RouteError, SignatureError
from ..core.models import WebhookEvent
from .request import InboundRequest, WebhookResponse
from .router import EventRouter
from .signature import SignatureVerifier

__all__ = ["WebhookEndpoint", "decode_event"]


def decode_event(body: bytes) -> WebhookEvent:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"failed to parse event: {exc}") from exc
    return WebhookEvent.from_payload(payload)


class WebhookEndpoint:
    def __init__(
        self,
        router: EventRouter,
        verifier: Optional[SignatureVerifier] = None,
    ) -> None:
        self.router = router
        self.verifier = verifier
        if verifier is None:
            logging.warning(
                "No webhook secret configured; signatures will NOT be verified"
            )

    def parse_event(self, request: InboundRequest) -> WebhookEvent:
        """Verify ``request`` (when a secret is configured) and decode its event."""
        if self.verifier is not None:
            self.verifier.verify(request)
        return decode_event(request.body)

    def handle(self, request: InboundRequest) -> WebhookResponse:
        logging.info("Received webhook request: %s %s", request.method, request.path)

        if request.method != "POST":
            return WebhookResponse(405, "Method not allowed", {"Allow": "POST"})

        try:
            event = self.parse_event(request)
        except SignatureError as exc:
            logging.warning("Rejected webhook on %s: %s", request.path, exc)
            return WebhookResponse(400, f"Failed to parse event: signature validation failed: {exc}")
        except DecodeError as exc:
            logging.warning("Undecodable webhook on %s: %s", request.path, exc)
            return WebhookResponse(400, f"Failed to parse event: {exc}")

        try:
            self.router.dispatch(event)
        except RouteError as exc:
            logging.error("Unrouted webhook event %s: %s", event.reference, exc)
            return WebhookResponse(500, f"Failed to process event: {exc}")
        except Exception as exc:  # noqa: BLE001
            logging.exception("Handler failed for webhook event %s", event.reference)
            return WebhookResponse(500, f"Failed to process event: {exc}")

        return WebhookResponse(200)
