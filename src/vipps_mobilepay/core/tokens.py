"""
Access-token lifecycle for the Vipps MobilePay API.
"""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from .config import Credentials
from .errors import AuthError

__all__ = ["TOKEN_ENDPOINT", "TokenManager"]

TOKEN_ENDPOINT = "/accesstoken/get"

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class _TokenState:
    access_token: str
    expires_at: float


def _parse_expires_in(raw: Any) -> int:
    # The provider sends expires_in as a string, e.g. "3599".
    if isinstance(raw, bool):
        raise AuthError(f"Invalid expires_in in token response: {raw!r}")
    if isinstance(raw, int):
        seconds = raw
    elif isinstance(raw, str) and _DIGITS.fullmatch(raw.strip()):
        seconds = int(raw.strip())
    else:
        raise AuthError(f"Invalid expires_in in token response: {raw!r}")
    if seconds <= 0:
        raise AuthError(f"Token response is already expired: expires_in={raw!r}")
    return seconds


class TokenManager:
    """
    Owns the access token and refreshes it when it is missing or expired.

    The check and the refresh happen under a single lock, so concurrent
    callers never observe a token without its matching expiry and at most one
    of them performs the refresh.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credentials = credentials
        self._token_url = base_url.rstrip("/") + TOKEN_ENDPOINT
        self._session = session or requests.Session()
        self._timeout = timeout
        self._clock = clock
        self._lock = threading.Lock()
        self._state: Optional[_TokenState] = None

    def is_valid(self) -> bool:
        with self._lock:
            return self._is_current(self._state)

    def ensure_valid(self) -> str:
        """
        Return an access token that is valid right now, refreshing if needed.
        """
        with self._lock:
            if not self._is_current(self._state):
                self._state = self._fetch()
            return self._state.access_token

    def invalidate(self) -> None:
        with self._lock:
            self._state = None

    def _is_current(self, state: Optional[_TokenState]) -> bool:
        return (
            state is not None
            and bool(state.access_token)
            and self._clock() < state.expires_at
        )

    def _fetch(self) -> _TokenState:
        headers = {
            "Content-Type": "application/json",
            "client_id": self._credentials.client_id,
            "client_secret": self._credentials.client_secret,
            "Ocp-Apim-Subscription-Key": self._credentials.subscription_key,
            "Merchant-Serial-Number": self._credentials.merchant_serial_number,
        }
        logging.info("Requesting access token from %s", self._token_url)
        try:
            response = self._session.post(
                self._token_url, headers=headers, timeout=self._timeout
            )
        except requests.RequestException as exc:
            raise AuthError(f"Failed to request access token: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise AuthError(
                f"Failed to get access token: status {response.status_code}, "
                f"body: {response.text}"
            )

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise AuthError(
                f"Failed to decode access token response: {response.text}"
            ) from exc
        if not isinstance(payload, dict):
            raise AuthError("Access token response is not a JSON object")

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise AuthError("Access token response did not contain access_token")
        expires_in = _parse_expires_in(payload.get("expires_in"))

        # Both fields are computed before the state is replaced as one value.
        state = _TokenState(
            access_token=access_token,
            expires_at=self._clock() + expires_in,
        )
        logging.info(
            "Obtained %s token valid for %d seconds",
            payload.get("token_type", "access"),
            expires_in,
        )
        return state
