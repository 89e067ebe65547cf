"""
Framework-neutral view of an inbound webhook delivery and its reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urlsplit

from requests.structures import CaseInsensitiveDict

__all__ = ["InboundRequest", "WebhookResponse"]


@dataclass(frozen=True)
class InboundRequest:
    method: str
    path: str
    headers: CaseInsensitiveDict
    body: bytes = b""

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
    ) -> "InboundRequest":
        # Only the path component takes part in signing; drop any query string.
        return cls(
            method=method.upper(),
            path=urlsplit(path).path or "/",
            headers=CaseInsensitiveDict(headers or {}),
            body=bytes(body),
        )

    def header(self, name: str) -> Optional[str]:
        value = self.headers.get(name)
        if value is None or value == "":
            return None
        return value


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
