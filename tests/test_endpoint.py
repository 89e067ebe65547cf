"""WebhookEndpoint: the full inbound flow from raw request to handler."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from dataclasses import replace
from unittest.mock import MagicMock

import pytest

from vipps_mobilepay import (
    DecodeError,
    EventRouter,
    InboundRequest,
    PaymentEventName,
    SignatureVerifier,
    SigningScheme,
    WebhookEndpoint,
    create_webhook_endpoint,
)
from vipps_mobilepay.webhooks.endpoint import decode_event
from vipps_mobilepay.webhooks.signature import signed_headers

SECRET = "whsec-endpoint"
PATH = "/webhooks/vipps"
EVENT = {
    "msn": "123456",
    "reference": "order-1",
    "pspReference": "psp-1",
    "name": "CAPTURED",
    "amount": {"currency": "NOK", "value": 1000},
    "timestamp": "2024-01-15T10:00:00.000Z",
    "idempotencyKey": "idem-1",
    "success": True,
}


def _body(**changes) -> bytes:
    return json.dumps({**EVENT, **changes}).encode("utf-8")


def _sign(body: bytes) -> str:
    return base64.b64encode(hmac.new(SECRET.encode(), body, hashlib.sha256).digest()).decode()


@pytest.fixture()
def recorded() -> list:
    return []


@pytest.fixture()
def router(recorded) -> EventRouter:
    router = EventRouter()
    router.register(PaymentEventName.CAPTURED, lambda event: recorded.append(event.reference))
    return router


@pytest.fixture()
def endpoint(router) -> WebhookEndpoint:
    return WebhookEndpoint(router, SignatureVerifier(SECRET, SigningScheme.BODY))


def _post(body: bytes, signature: str | None = None, method: str = "POST") -> InboundRequest:
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["X-Vipps-Signature"] = signature
    return InboundRequest.build(method, PATH, headers, body)


class TestEndToEnd:
    def test_signed_capture_is_acknowledged_and_dispatched(self, endpoint, recorded):
        body = _body()

        response = endpoint.handle(_post(body, _sign(body)))

        assert response.status_code == 200
        assert response.ok
        assert recorded == ["order-1"]

    def test_signature_over_mutated_body_is_rejected(self, endpoint, recorded):
        body = _body()
        mutated = _body(amount={"currency": "NOK", "value": 1})

        response = endpoint.handle(_post(body, _sign(mutated)))

        assert response.status_code == 400
        assert recorded == []

    def test_missing_signature_is_rejected(self, endpoint, recorded):
        response = endpoint.handle(_post(_body()))

        assert response.status_code == 400
        assert recorded == []

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_non_post_is_method_not_allowed(self, endpoint, recorded, method):
        body = _body()

        response = endpoint.handle(_post(body, _sign(body), method=method))

        assert response.status_code == 405
        assert response.headers["Allow"] == "POST"
        assert recorded == []

    def test_malformed_json_is_bad_request(self, endpoint):
        body = b'{"name": "CAPTURED",'
        assert endpoint.handle(_post(body, _sign(body))).status_code == 400

    def test_missing_reference_is_bad_request(self, endpoint):
        body = json.dumps({"name": "CAPTURED", "amount": {"currency": "NOK", "value": 1}}).encode()
        assert endpoint.handle(_post(body, _sign(body))).status_code == 400

    def test_unrouted_event_is_server_error(self, endpoint, recorded):
        body = _body(name="AUTHORIZED")

        response = endpoint.handle(_post(body, _sign(body)))

        assert response.status_code == 500
        assert "no handler for event type: AUTHORIZED" in response.body
        assert recorded == []

    def test_handler_failure_is_server_error(self, router):
        router.register(PaymentEventName.CAPTURED, MagicMock(side_effect=RuntimeError("db down")))
        endpoint = WebhookEndpoint(router, SignatureVerifier(SECRET, SigningScheme.BODY))
        body = _body()

        response = endpoint.handle(_post(body, _sign(body)))

        assert response.status_code == 500

    def test_fallback_receives_unknown_event_names(self, router):
        fallback = MagicMock()
        router.register_fallback(fallback)
        endpoint = WebhookEndpoint(router, SignatureVerifier(SECRET, SigningScheme.BODY))
        body = _body(name="PARTIALLY_CAPTURED")

        response = endpoint.handle(_post(body, _sign(body)))

        assert response.status_code == 200
        event = fallback.call_args.args[0]
        assert event.name == "PARTIALLY_CAPTURED"

    def test_canonical_scheme_end_to_end(self, router, recorded):
        endpoint = WebhookEndpoint(router, SignatureVerifier(SECRET, SigningScheme.CANONICAL))
        body = _body()
        headers = signed_headers(
            SECRET, body, path=PATH, host="shop.example.com", date="Mon, 15 Jan 2024 10:00:00 GMT"
        )

        response = endpoint.handle(InboundRequest.build("POST", PATH, headers, body))

        assert response.status_code == 200
        assert recorded == ["order-1"]

    def test_without_secret_signatures_are_not_checked(self, router, recorded):
        endpoint = WebhookEndpoint(router)

        response = endpoint.handle(_post(_body()))

        assert response.status_code == 200
        assert recorded == ["order-1"]


class TestDecodeEvent:
    def test_decodes_all_fields(self):
        event = decode_event(_body())

        assert event.msn == "123456"
        assert event.reference == "order-1"
        assert event.psp_reference == "psp-1"
        assert event.name is PaymentEventName.CAPTURED
        assert event.amount.currency == "NOK"
        assert event.amount.value == 1000
        assert event.timestamp.isoformat() == "2024-01-15T10:00:00+00:00"
        assert event.idempotency_key == "idem-1"
        assert event.success is True

    @pytest.mark.parametrize(
        "timestamp, microsecond",
        [
            ("2024-01-15T10:00:00.1Z", 100000),
            ("2024-01-15T10:00:00.12Z", 120000),
            ("2024-01-15T10:00:00.1234567Z", 123456),
            ("2024-01-15T10:00:00.123456789+01:00", 123456),
        ],
    )
    def test_any_fraction_length_is_accepted(self, timestamp, microsecond):
        event = decode_event(_body(timestamp=timestamp))

        assert event.timestamp.microsecond == microsecond
        assert event.timestamp.second == 0
        assert event.timestamp.utcoffset() is not None

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"[]",
            json.dumps({**EVENT, "amount": {"currency": "NOK", "value": "1000"}}).encode(),
            json.dumps({**EVENT, "timestamp": "yesterday"}).encode(),
            json.dumps({k: v for k, v in EVENT.items() if k != "name"}).encode(),
            json.dumps({k: v for k, v in EVENT.items() if k != "amount"}).encode(),
            json.dumps({k: v for k, v in EVENT.items() if k != "reference"}).encode(),
        ],
    )
    def test_rejects_malformed_payloads(self, body):
        with pytest.raises(DecodeError):
            decode_event(body)

    def test_event_is_immutable(self):
        event = decode_event(_body())
        with pytest.raises(AttributeError):
            event.reference = "other"


class TestCreateWebhookEndpoint:
    def test_uses_config_secret_and_scheme(self, config):
        config = replace(config, webhook_secret=SECRET, signing_scheme="body")
        endpoint = create_webhook_endpoint(config=config)

        assert endpoint.verifier is not None
        assert endpoint.verifier.scheme is SigningScheme.BODY

    def test_explicit_scheme_overrides_config(self, config):
        config = replace(config, webhook_secret=SECRET, signing_scheme="body")
        endpoint = create_webhook_endpoint(config=config, scheme=SigningScheme.CANONICAL)

        assert endpoint.verifier.scheme is SigningScheme.CANONICAL

    def test_without_secret_no_verifier(self):
        assert create_webhook_endpoint().verifier is None

    def test_reuses_given_router(self, router):
        assert create_webhook_endpoint(secret=SECRET, router=router).router is router
