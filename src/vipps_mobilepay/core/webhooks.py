"""
Webhooks API resource: manage the callback registrations on the provider side.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Union
from urllib.parse import quote

from .errors import DecodeError
from .models import WebhookEventType, WebhookRegistration

if TYPE_CHECKING:
    from .client import RequestExecutor

__all__ = ["Webhooks", "decode_registrations"]

_BASE_PATH = "/webhooks/v1/webhooks"


def decode_registrations(payload: Any) -> List[WebhookRegistration]:
    """
    Decode a "list webhooks" response.

    The documented shape is ``{"webhooks": [...]}``; some environments answer
    with a bare array instead. Anything else is rejected.
    """
    if isinstance(payload, dict) and isinstance(payload.get("webhooks"), list):
        items = payload["webhooks"]
    elif isinstance(payload, list):
        items = payload
    else:
        raise DecodeError("Unexpected shape for webhook list response")
    return [WebhookRegistration.from_response(item) for item in items]


class Webhooks:
    def __init__(self, executor: "RequestExecutor") -> None:
        self._executor = executor

    def register(
        self,
        url: str,
        events: Iterable[Union[WebhookEventType, str]],
    ) -> WebhookRegistration:
        body = {
            "url": url,
            "events": [
                event.value if isinstance(event, WebhookEventType) else event
                for event in events
            ],
        }
        response = self._executor.execute("POST", _BASE_PATH, body)
        return WebhookRegistration.from_response(response.json())

    def list(self) -> List[WebhookRegistration]:
        response = self._executor.execute("GET", _BASE_PATH)
        return decode_registrations(response.json())

    def get(self, webhook_id: str) -> WebhookRegistration:
        response = self._executor.execute("GET", f"{_BASE_PATH}/{quote(webhook_id, safe='')}")
        return WebhookRegistration.from_response(response.json())

    def delete(self, webhook_id: str) -> None:
        self._executor.execute("DELETE", f"{_BASE_PATH}/{quote(webhook_id, safe='')}")
