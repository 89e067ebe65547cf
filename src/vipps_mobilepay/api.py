"""
Public, high-level helpers for the Vipps MobilePay client and webhook layer.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import requests

from .core.client import VippsClient
from .core.config import ClientConfig, ClientParameters, load_client_config
from .webhooks.endpoint import WebhookEndpoint
from .webhooks.router import EventRouter
from .webhooks.signature import SignatureVerifier, SigningScheme

__all__ = [
    "create_client",
    "create_webhook_endpoint",
]


def create_client(
    *,
    config: Optional[ClientConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    **explicit: Any,
) -> VippsClient:
    """
    Construct a :class:`VippsClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from environment data and keyword arguments accepted
    by :func:`load_client_config`.
    """
    if config is not None:
        extras = (overrides, base, parameters, *explicit.values())
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            **explicit,
        )
    return VippsClient(cfg, session=session)


def create_webhook_endpoint(
    *,
    secret: Optional[str] = None,
    scheme: Optional[Union[SigningScheme, str]] = None,
    router: Optional[EventRouter] = None,
    config: Optional[ClientConfig] = None,
) -> WebhookEndpoint:
    """
    Build a :class:`WebhookEndpoint`.

    ``secret`` and ``scheme`` default to the webhook settings in ``config``
    when one is given. Without a secret the endpoint accepts unsigned
    deliveries.
    """
    if config is not None:
        secret = secret or config.webhook_secret
        scheme = scheme or config.signing_scheme
    verifier = (
        SignatureVerifier(secret, scheme or SigningScheme.CANONICAL) if secret else None
    )
    return WebhookEndpoint(router or EventRouter(), verifier)
