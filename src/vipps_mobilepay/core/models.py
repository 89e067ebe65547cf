"""
Data transfer objects exchanged with the Vipps MobilePay API.

Only the fields the client and webhook layer rely on are modelled; every
``from_response`` constructor keeps the decoded payload in ``raw`` so callers
can reach anything else the provider sends.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import DecodeError

__all__ = [
    "AdjustmentResponse",
    "Amount",
    "CreatePaymentRequest",
    "CreatePaymentResponse",
    "Payment",
    "PaymentEvent",
    "PaymentEventName",
    "WebhookEvent",
    "WebhookEventType",
    "WebhookRegistration",
    "parse_timestamp",
]


class PaymentEventName(str, Enum):
    CREATED = "CREATED"
    AUTHORIZED = "AUTHORIZED"
    ABORTED = "ABORTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
    CAPTURED = "CAPTURED"
    REFUNDED = "REFUNDED"
    TERMINATED = "TERMINATED"

    @classmethod
    def parse(cls, value: str) -> Union["PaymentEventName", str]:
        """Return the enum member for ``value``, or ``value`` itself if unknown."""
        try:
            return cls(value)
        except ValueError:
            return value


class WebhookEventType(str, Enum):
    """Event types a webhook registration can subscribe to."""

    PAYMENT_CREATED = "epayments.payment.created.v1"
    PAYMENT_ABORTED = "epayments.payment.aborted.v1"
    PAYMENT_EXPIRED = "epayments.payment.expired.v1"
    PAYMENT_CANCELLED = "epayments.payment.cancelled.v1"
    PAYMENT_CAPTURED = "epayments.payment.captured.v1"
    PAYMENT_REFUNDED = "epayments.payment.refunded.v1"
    PAYMENT_AUTHORIZED = "epayments.payment.authorized.v1"
    PAYMENT_TERMINATED = "epayments.payment.terminated.v1"


_FRACTION = re.compile(r"\.([0-9]+)")


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        raise DecodeError(f"Timestamp must be a string, got {raw!r}")
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits.
    text = _FRACTION.sub(lambda match: "." + match.group(1).ljust(6, "0")[:6], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise DecodeError(f"Invalid timestamp: {raw!r}") from exc


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DecodeError(f"{what} must be a JSON object")
    return payload


@dataclass(frozen=True)
class Amount:
    currency: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return {"currency": self.currency, "value": self.value}

    @classmethod
    def from_response(cls, payload: Any) -> "Amount":
        data = _require_mapping(payload, "amount")
        currency = data.get("currency")
        value = data.get("value")
        if not isinstance(currency, str) or not currency:
            raise DecodeError("amount.currency must be a non-empty string")
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError("amount.value must be an integer in minor units")
        return cls(currency=currency, value=value)


@dataclass(frozen=True)
class CreatePaymentRequest:
    amount: Amount
    reference: str
    user_flow: str = "WEB_REDIRECT"
    payment_method_type: str = "WALLET"
    return_url: Optional[str] = None
    phone_number: Optional[str] = None
    payment_description: Optional[str] = None
    customer_interaction: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "amount": self.amount.to_dict(),
            "paymentMethod": {"type": self.payment_method_type},
            "reference": self.reference,
            "userFlow": self.user_flow,
        }
        if self.return_url:
            body["returnUrl"] = self.return_url
        if self.phone_number:
            body["customer"] = {"phoneNumber": self.phone_number}
        if self.payment_description:
            body["paymentDescription"] = self.payment_description
        if self.customer_interaction:
            body["customerInteraction"] = self.customer_interaction
        body.update(self.extra)
        return body


@dataclass(frozen=True)
class CreatePaymentResponse:
    reference: str
    redirect_url: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_response(cls, payload: Any) -> "CreatePaymentResponse":
        data = _require_mapping(payload, "create payment response")
        return cls(
            reference=data.get("reference", ""),
            redirect_url=data.get("redirectUrl"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class Payment:
    reference: str
    state: str
    amount: Optional[Amount]
    psp_reference: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_response(cls, payload: Any) -> "Payment":
        data = _require_mapping(payload, "payment")
        amount = data.get("amount")
        return cls(
            reference=data.get("reference", ""),
            state=data.get("state", ""),
            amount=Amount.from_response(amount) if amount is not None else None,
            psp_reference=data.get("pspReference"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class PaymentEvent:
    reference: str
    name: Union[PaymentEventName, str]
    amount: Optional[Amount]
    timestamp: Optional[datetime]
    success: bool
    raw: Dict[str, Any]

    @classmethod
    def from_response(cls, payload: Any) -> "PaymentEvent":
        data = _require_mapping(payload, "payment event")
        amount = data.get("amount")
        return cls(
            reference=data.get("reference", ""),
            name=PaymentEventName.parse(data.get("name", "")),
            amount=Amount.from_response(amount) if amount is not None else None,
            timestamp=parse_timestamp(data.get("timestamp")),
            success=bool(data.get("success")),
            raw=dict(data),
        )


@dataclass(frozen=True)
class AdjustmentResponse:
    reference: str
    state: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_response(cls, payload: Any) -> "AdjustmentResponse":
        data = _require_mapping(payload, "adjustment response")
        return cls(
            reference=data.get("reference", ""),
            state=data.get("state"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class WebhookRegistration:
    id: str
    url: Optional[str]
    events: List[str]
    secret: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_response(cls, payload: Any) -> "WebhookRegistration":
        data = _require_mapping(payload, "webhook registration")
        webhook_id = data.get("id")
        if not isinstance(webhook_id, str) or not webhook_id:
            raise DecodeError("webhook registration is missing id")
        return cls(
            id=webhook_id,
            url=data.get("url"),
            events=list(data.get("events") or []),
            secret=data.get("secret") or data.get("secretKey"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class WebhookEvent:
    """A payment event delivered to a webhook endpoint."""

    msn: str
    reference: str
    psp_reference: str
    name: Union[PaymentEventName, str]
    amount: Amount
    timestamp: Optional[datetime]
    idempotency_key: Optional[str]
    success: bool

    @classmethod
    def from_payload(cls, payload: Any) -> "WebhookEvent":
        data = _require_mapping(payload, "webhook event")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise DecodeError("webhook event is missing name")
        reference = data.get("reference")
        if not isinstance(reference, str) or not reference:
            raise DecodeError("webhook event is missing reference")
        if "amount" not in data:
            raise DecodeError("webhook event is missing amount")
        return cls(
            msn=str(data.get("msn") or ""),
            reference=reference,
            psp_reference=str(data.get("pspReference") or ""),
            name=PaymentEventName.parse(name),
            amount=Amount.from_response(data["amount"]),
            timestamp=parse_timestamp(data.get("timestamp")),
            idempotency_key=data.get("idempotencyKey") or None,
            success=bool(data.get("success", False)),
        )
