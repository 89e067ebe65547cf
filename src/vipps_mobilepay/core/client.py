"""
HTTP client helpers for the Vipps MobilePay API.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .config import ClientConfig
from .errors import ApiError, DecodeError, TransportError
from .payments import Payments
from .tokens import TokenManager
from .webhooks import Webhooks

__all__ = [
    "RawResponse",
    "RequestExecutor",
    "VippsClient",
]


@dataclass(frozen=True)
class RawResponse:
    content: bytes
    status_code: int

    def json(self) -> Any:
        try:
            return json.loads(self.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(
                f"Failed to parse JSON response: {self.content[:200]!r}"
            ) from exc


def _error_from_response(status_code: int, body: bytes) -> ApiError:
    try:
        problem = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        problem = None

    if isinstance(problem, dict) and ("title" in problem or "detail" in problem):
        status = problem.get("status")
        return ApiError(
            status_code,
            body,
            title=problem.get("title"),
            detail=problem.get("detail"),
            code=problem.get("code"),
            status=status if isinstance(status, int) else None,
        )
    return ApiError(status_code, body)


def _serialize(body: Any) -> str:
    if hasattr(body, "to_dict"):
        body = body.to_dict()
    return json.dumps(body)


class RequestExecutor:
    """
    Sends authenticated requests on behalf of every API resource.

    A valid token is ensured right before each request; errors come back as
    :class:`TransportError` or :class:`ApiError`.
    """

    def __init__(
        self,
        config: ClientConfig,
        tokens: TokenManager,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.tokens = tokens
        self.session = session or requests.Session()

    def _headers(self, access_token: str, idempotency_key: Optional[str]) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
            "Ocp-Apim-Subscription-Key": self.config.subscription_key,
            "Merchant-Serial-Number": self.config.merchant_serial_number,
        }
        headers.update(self.config.system_headers())
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key
        return headers

    def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        idempotency_key: Optional[str] = None,
    ) -> RawResponse:
        access_token = self.tokens.ensure_valid()

        url = self.config.base_url + path
        data = _serialize(body) if body is not None else None
        headers = self._headers(access_token, idempotency_key)

        logging.info("%s %s", method.upper(), url)
        try:
            response = self.session.request(
                method.upper(),
                url,
                headers=headers,
                data=data,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Failed to send request to {url}: {exc}") from exc

        content = response.content
        if response.status_code >= 400:
            raise _error_from_response(response.status_code, content)
        return RawResponse(content=content, status_code=response.status_code)


class VippsClient:
    """
    Entry point bundling the token manager, executor and API resources.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.tokens = TokenManager(
            config.credentials,
            config.base_url,
            session=self.session,
            timeout=config.timeout_seconds,
        )
        self.executor = RequestExecutor(config, self.tokens, session=self.session)
        self.payments = Payments(self.executor, test_mode=config.test_mode)
        self.webhooks = Webhooks(self.executor)

    def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        idempotency_key: Optional[str] = None,
    ) -> RawResponse:
        return self.executor.execute(method, path, body, idempotency_key)
