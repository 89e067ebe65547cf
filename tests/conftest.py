"""Shared fixtures for the vipps_mobilepay test suite."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional
from unittest.mock import MagicMock

import pytest
import requests

from vipps_mobilepay import ClientConfig

BASE_URL = "https://api.example.test"


class FakeClock:
    """Deterministic replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def config() -> ClientConfig:
    return ClientConfig(
        client_id="client-id",
        client_secret="client-secret",
        subscription_key="sub-key",
        merchant_serial_number="123456",
        base_url=BASE_URL,
        test_mode=True,
        timeout_seconds=5.0,
        system_name="acme-shop",
        system_version="2.1.0",
    )


@pytest.fixture()
def make_response() -> Callable[..., MagicMock]:
    """Build a stand-in for :class:`requests.Response`."""

    def factory(
        status_code: int = 200,
        payload: Any = None,
        content: Optional[bytes] = None,
    ) -> MagicMock:
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        if content is None:
            content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        response.content = content
        response.text = content.decode("utf-8", errors="replace")
        if payload is not None:
            response.json.return_value = payload
        else:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        return response

    return factory


@pytest.fixture()
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def token_payload() -> dict:
    return {"access_token": "token-abc", "expires_in": "3600", "token_type": "Bearer"}
