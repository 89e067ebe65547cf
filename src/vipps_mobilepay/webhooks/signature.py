"""
Webhook signature verification.

Two signing schemes exist:

``SigningScheme.CANONICAL``
    The current scheme. The provider signs a canonical string made of the
    request method, path, ``X-Ms-Date``, host and the base64 SHA-256 of the
    body, and sends the result in ``Authorization`` (or
    ``X-Vipps-Authorization``) as
    ``HMAC-SHA256 SignedHeaders=x-ms-date;host;x-ms-content-sha256&Signature=...``.

``SigningScheme.BODY``
    The older scheme: ``X-Vipps-Signature`` holds base64 HMAC-SHA256 of the
    raw body.

Every comparison goes through :func:`hmac.compare_digest`.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
from enum import Enum
from typing import Dict, Optional, Union

from ..core.errors import SignatureError
from .request import InboundRequest

__all__ = [
    "AUTHORIZATION_PREFIX",
    "SignatureVerifier",
    "SigningScheme",
    "canonical_string",
    "content_hash",
    "sign_body",
    "sign_canonical",
    "signed_headers",
]

SIGNATURE_HEADER = "X-Vipps-Signature"
CONTENT_HASH_HEADER = "X-Ms-Content-Sha256"
DATE_HEADER = "X-Ms-Date"
AUTHORIZATION_HEADERS = ("Authorization", "X-Vipps-Authorization")
HOST_HEADERS = ("X-Forwarded-Host", "Host")

AUTHORIZATION_PREFIX = (
    "HMAC-SHA256 SignedHeaders=x-ms-date;host;x-ms-content-sha256&Signature="
)


class SigningScheme(str, Enum):
    CANONICAL = "canonical"
    BODY = "body"


def _hmac_sha256(secret: str, message: bytes) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def content_hash(body: bytes) -> str:
    return base64.b64encode(hashlib.sha256(body).digest()).decode("ascii")


def canonical_string(method: str, path: str, date: str, host: str, body_hash: str) -> str:
    return f"{method.upper()}\n{path}\n{date};{host};{body_hash}"


def sign_canonical(
    secret: str,
    method: str,
    path: str,
    date: str,
    host: str,
    body_hash: str,
) -> str:
    """Return the authorization header value for a canonical-scheme delivery."""
    message = canonical_string(method, path, date, host, body_hash).encode("utf-8")
    signature = base64.b64encode(_hmac_sha256(secret, message)).decode("ascii")
    return AUTHORIZATION_PREFIX + signature


def sign_body(secret: str, body: bytes) -> str:
    """Return the ``X-Vipps-Signature`` value for a body-scheme delivery."""
    return base64.b64encode(_hmac_sha256(secret, body)).decode("ascii")


def signed_headers(
    secret: str,
    body: bytes,
    *,
    method: str = "POST",
    path: str,
    host: str,
    date: str,
    scheme: Union[SigningScheme, str] = SigningScheme.CANONICAL,
) -> Dict[str, str]:
    """
    Build the headers the provider would send along with ``body``.

    Handy for exercising a webhook endpoint locally.
    """
    scheme = SigningScheme(scheme)
    if scheme is SigningScheme.BODY:
        return {SIGNATURE_HEADER: sign_body(secret, body)}
    body_hash = content_hash(body)
    return {
        "Host": host,
        DATE_HEADER: date,
        CONTENT_HASH_HEADER: body_hash,
        "Authorization": sign_canonical(secret, method, path, date, host, body_hash),
    }


def _first_header(request: InboundRequest, names) -> Optional[str]:
    for name in names:
        value = request.header(name)
        if value is not None:
            return value
    return None


class SignatureVerifier:
    """
    Proves an inbound request came from the provider and was not altered.

    A verifier holds one secret; rotate it by building a new verifier.
    """

    def __init__(
        self,
        secret: str,
        scheme: Union[SigningScheme, str] = SigningScheme.CANONICAL,
    ) -> None:
        if not secret:
            raise ValueError("A webhook signing secret is required")
        self._secret = secret
        self.scheme = SigningScheme(scheme)
        logging.info("Webhook signature verification using %s scheme", self.scheme.value)

    def verify(self, request: InboundRequest) -> None:
        if self.scheme is SigningScheme.BODY:
            self._verify_body(request)
        else:
            self._verify_canonical(request)

    def _verify_body(self, request: InboundRequest) -> None:
        header = request.header(SIGNATURE_HEADER)
        if header is None:
            raise SignatureError("missing signature header")
        try:
            provided = base64.b64decode(header, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SignatureError("malformed signature") from exc

        expected = _hmac_sha256(self._secret, request.body)
        if not hmac.compare_digest(provided, expected):
            raise SignatureError("invalid signature")

    def _verify_canonical(self, request: InboundRequest) -> None:
        declared_hash = request.header(CONTENT_HASH_HEADER)
        if declared_hash is None:
            raise SignatureError("missing content hash header")
        if not hmac.compare_digest(
            declared_hash.encode("utf-8"), content_hash(request.body).encode("ascii")
        ):
            raise SignatureError("content hash mismatch")

        authorization = _first_header(request, AUTHORIZATION_HEADERS)
        if authorization is None:
            raise SignatureError("missing authorization header")

        date = request.header(DATE_HEADER)
        if date is None:
            raise SignatureError("missing date header")
        host = _first_header(request, HOST_HEADERS)
        if host is None:
            raise SignatureError("missing host header")
        expected = sign_canonical(
            self._secret, request.method, request.path, date, host, declared_hash
        )
        if not hmac.compare_digest(
            authorization.encode("utf-8"), expected.encode("ascii")
        ):
            raise SignatureError("signature validation failed")
