"""
Core primitives for talking to the Vipps MobilePay API.
"""

from .client import RawResponse, RequestExecutor, VippsClient
from .config import (
    PRODUCTION_BASE_URL,
    TEST_BASE_URL,
    ClientConfig,
    ClientParameters,
    Credentials,
    load_client_config,
)
from .environment import ClientEnvironment, build_environment, find_env_file
from .errors import (
    ApiError,
    AuthError,
    ConfigError,
    DecodeError,
    RouteError,
    SignatureError,
    TransportError,
    VippsError,
)
from .models import (
    AdjustmentResponse,
    Amount,
    CreatePaymentRequest,
    CreatePaymentResponse,
    Payment,
    PaymentEvent,
    PaymentEventName,
    WebhookEvent,
    WebhookEventType,
    WebhookRegistration,
)
from .payments import Payments, new_idempotency_key
from .tokens import TokenManager
from .webhooks import Webhooks, decode_registrations

__all__ = [
    "AdjustmentResponse",
    "Amount",
    "ApiError",
    "AuthError",
    "ClientConfig",
    "ClientEnvironment",
    "ClientParameters",
    "ConfigError",
    "CreatePaymentRequest",
    "CreatePaymentResponse",
    "Credentials",
    "DecodeError",
    "PRODUCTION_BASE_URL",
    "Payment",
    "PaymentEvent",
    "PaymentEventName",
    "Payments",
    "RawResponse",
    "RequestExecutor",
    "RouteError",
    "SignatureError",
    "TEST_BASE_URL",
    "TokenManager",
    "TransportError",
    "VippsClient",
    "VippsError",
    "WebhookEvent",
    "WebhookEventType",
    "WebhookRegistration",
    "Webhooks",
    "build_environment",
    "decode_registrations",
    "find_env_file",
    "load_client_config",
    "new_idempotency_key",
]
