"""
Inbound webhook verification and dispatch.

The FastAPI adapter lives in :mod:`vipps_mobilepay.webhooks.server` and is
not imported here, so the core works without the ``server`` extra.
"""

from .endpoint import WebhookEndpoint, decode_event
from .request import InboundRequest, WebhookResponse
from .router import EventHandler, EventRouter
from .signature import (
    SignatureVerifier,
    SigningScheme,
    canonical_string,
    content_hash,
    sign_body,
    sign_canonical,
    signed_headers,
)

__all__ = [
    "EventHandler",
    "EventRouter",
    "InboundRequest",
    "SignatureVerifier",
    "SigningScheme",
    "WebhookEndpoint",
    "WebhookResponse",
    "canonical_string",
    "content_hash",
    "decode_event",
    "sign_body",
    "sign_canonical",
    "signed_headers",
]
