"""
Public facade for the Vipps MobilePay client package.

The most useful pieces are re-exported here so integrators can
``from vipps_mobilepay import ...`` without navigating the package.
"""

from ._version import __version__
from .api import create_client, create_webhook_endpoint
from .core import (
    AdjustmentResponse,
    Amount,
    ApiError,
    AuthError,
    ClientConfig,
    ClientParameters,
    ConfigError,
    CreatePaymentRequest,
    CreatePaymentResponse,
    Credentials,
    DecodeError,
    Payment,
    PaymentEvent,
    PaymentEventName,
    RawResponse,
    RequestExecutor,
    RouteError,
    SignatureError,
    TokenManager,
    TransportError,
    VippsClient,
    VippsError,
    WebhookEvent,
    WebhookEventType,
    WebhookRegistration,
    load_client_config,
    new_idempotency_key,
)
from .webhooks import (
    EventRouter,
    InboundRequest,
    SignatureVerifier,
    SigningScheme,
    WebhookEndpoint,
    WebhookResponse,
    signed_headers,
)

__all__ = (
    "AdjustmentResponse",
    "Amount",
    "ApiError",
    "AuthError",
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "CreatePaymentRequest",
    "CreatePaymentResponse",
    "Credentials",
    "DecodeError",
    "EventRouter",
    "InboundRequest",
    "Payment",
    "PaymentEvent",
    "PaymentEventName",
    "RawResponse",
    "RequestExecutor",
    "RouteError",
    "SignatureError",
    "SignatureVerifier",
    "SigningScheme",
    "TokenManager",
    "TransportError",
    "VippsClient",
    "VippsError",
    "WebhookEndpoint",
    "WebhookEvent",
    "WebhookEventType",
    "WebhookRegistration",
    "WebhookResponse",
    "__version__",
    "create_client",
    "create_webhook_endpoint",
    "load_client_config",
    "new_idempotency_key",
    "signed_headers",
)
