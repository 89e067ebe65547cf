"""
ePayment API resource.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, List, Optional
from urllib.parse import quote

from .errors import ApiError, ConfigError, DecodeError
from .models import (
    AdjustmentResponse,
    Amount,
    CreatePaymentRequest,
    CreatePaymentResponse,
    Payment,
    PaymentEvent,
)

if TYPE_CHECKING:
    from .client import RequestExecutor

__all__ = ["Payments", "new_idempotency_key"]

_BASE_PATH = "/epayment/v1/payments"


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


def _payment_path(reference: str, suffix: str = "") -> str:
    return f"{_BASE_PATH}/{quote(reference, safe='')}{suffix}"


class Payments:
    def __init__(self, executor: "RequestExecutor", *, test_mode: bool = False) -> None:
        self._executor = executor
        self._test_mode = test_mode

    def create(
        self,
        request: CreatePaymentRequest,
        *,
        idempotency_key: Optional[str] = None,
    ) -> CreatePaymentResponse:
        try:
            response = self._executor.execute(
                "POST",
                _BASE_PATH,
                request,
                idempotency_key or new_idempotency_key(),
            )
        except ApiError as exc:
            logging.error(
                "Error creating payment, status code: %d, response: %s",
                exc.status_code,
                exc.body.decode("utf-8", errors="replace"),
            )
            raise
        return CreatePaymentResponse.from_response(response.json())

    def get(self, reference: str) -> Payment:
        response = self._executor.execute("GET", _payment_path(reference))
        return Payment.from_response(response.json())

    def events(self, reference: str) -> List[PaymentEvent]:
        response = self._executor.execute("GET", _payment_path(reference, "/events"))
        payload = response.json()
        if not isinstance(payload, list):
            raise DecodeError("Payment event log must be a JSON array")
        return [PaymentEvent.from_response(item) for item in payload]

    def capture(
        self,
        reference: str,
        amount: Amount,
        *,
        idempotency_key: Optional[str] = None,
    ) -> AdjustmentResponse:
        return self._adjust(reference, "/capture", amount, idempotency_key)

    def refund(
        self,
        reference: str,
        amount: Amount,
        *,
        idempotency_key: Optional[str] = None,
    ) -> AdjustmentResponse:
        return self._adjust(reference, "/refund", amount, idempotency_key)

    def cancel(
        self,
        reference: str,
        *,
        cancel_transactions_only: bool = False,
    ) -> AdjustmentResponse:
        body = {"cancelTransactionOnly": True} if cancel_transactions_only else None
        response = self._executor.execute("POST", _payment_path(reference, "/cancel"), body)
        return AdjustmentResponse.from_response(response.json())

    def force_approve(self, reference: str, phone_number: str) -> None:
        """
        Approve a payment as if the customer did it. Test environment only.
        """
        if not self._test_mode:
            raise ConfigError("force approve is only available in test environment")
        path = f"/epayment/v1/test/payments/{quote(reference, safe='')}/approve"
        body = {"customer": {"phoneNumber": phone_number}}
        self._executor.execute("POST", path, body, new_idempotency_key())

    def _adjust(
        self,
        reference: str,
        suffix: str,
        amount: Amount,
        idempotency_key: Optional[str],
    ) -> AdjustmentResponse:
        response = self._executor.execute(
            "POST",
            _payment_path(reference, suffix),
            {"modificationAmount": amount.to_dict()},
            idempotency_key or new_idempotency_key(),
        )
        return AdjustmentResponse.from_response(response.json())
