"""
Configuration objects and helpers for the Vipps MobilePay client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .._version import __version__
from .environment import build_environment
from .errors import ConfigError

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "Credentials",
    "PRODUCTION_BASE_URL",
    "TEST_BASE_URL",
    "load_client_config",
]

TEST_BASE_URL = "https://apitest.vipps.no"
PRODUCTION_BASE_URL = "https://api.vipps.no"

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_SYSTEM_NAME = "vipps-mobilepay-python"

_PARAMETER_TO_ENV_KEY = {
    "client_id": "VIPPS_CLIENT_ID",
    "client_secret": "VIPPS_CLIENT_SECRET",
    "subscription_key": "VIPPS_SUBSCRIPTION_KEY",
    "merchant_serial_number": "VIPPS_MSN",
    "test_mode": "VIPPS_TEST_MODE",
    "base_url": "VIPPS_BASE_URL",
    "timeout_seconds": "VIPPS_TIMEOUT",
    "system_name": "VIPPS_SYSTEM_NAME",
    "system_version": "VIPPS_SYSTEM_VERSION",
    "plugin_name": "VIPPS_SYSTEM_PLUGIN_NAME",
    "plugin_version": "VIPPS_SYSTEM_PLUGIN_VERSION",
    "webhook_secret": "VIPPS_WEBHOOK_SECRET",
    "signing_scheme": "VIPPS_WEBHOOK_SIGNING_SCHEME",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Credentials:
    """Merchant credentials issued by the Vipps MobilePay portal."""

    client_id: str
    client_secret: str
    subscription_key: str
    merchant_serial_number: str

    def __repr__(self) -> str:
        return (
            f"Credentials(client_id={self.client_id!r}, client_secret='***', "
            f"subscription_key='***', merchant_serial_number={self.merchant_serial_number!r})"
        )


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_config`.
    """

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    subscription_key: Optional[str] = None
    merchant_serial_number: Optional[str] = None
    test_mode: Optional[bool | str] = None
    base_url: Optional[str] = None
    timeout_seconds: Optional[float | int | str] = None
    system_name: Optional[str] = None
    system_version: Optional[str] = None
    plugin_name: Optional[str] = None
    plugin_version: Optional[str] = None
    webhook_secret: Optional[str] = None
    signing_scheme: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _require(values: Mapping[str, str], key: str) -> str:
    value = (values.get(key) or "").strip()
    if not value:
        raise ConfigError(f"{key} must be provided")
    return value


def _parse_bool(raw: str, key: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got '{raw}'")


def _parse_timeout(raw: str) -> float:
    text = raw.strip().lower()
    if text.endswith("s"):
        text = text[:-1]
    try:
        timeout = float(text)
    except ValueError as exc:
        raise ConfigError(
            f"VIPPS_TIMEOUT must be a number of seconds, got '{raw}'"
        ) from exc
    if timeout <= 0:
        raise ConfigError("VIPPS_TIMEOUT must be greater than zero")
    return timeout


def _optional(values: Mapping[str, str], key: str) -> Optional[str]:
    value = values.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class ClientConfig:
    client_id: str
    client_secret: str
    subscription_key: str
    merchant_serial_number: str
    base_url: str
    test_mode: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    system_name: str = DEFAULT_SYSTEM_NAME
    system_version: str = __version__
    plugin_name: Optional[str] = None
    plugin_version: Optional[str] = None
    webhook_secret: Optional[str] = None
    signing_scheme: str = "canonical"

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            subscription_key=self.subscription_key,
            merchant_serial_number=self.merchant_serial_number,
        )

    def system_headers(self) -> Dict[str, str]:
        headers = {
            "Vipps-System-Name": self.system_name,
            "Vipps-System-Version": self.system_version,
        }
        if self.plugin_name:
            headers["Vipps-System-Plugin-Name"] = self.plugin_name
        if self.plugin_version:
            headers["Vipps-System-Plugin-Version"] = self.plugin_version
        return headers

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        client_id = _require(values, "VIPPS_CLIENT_ID")
        client_secret = _require(values, "VIPPS_CLIENT_SECRET")
        subscription_key = _require(values, "VIPPS_SUBSCRIPTION_KEY")
        merchant_serial_number = _require(values, "VIPPS_MSN")

        test_mode = _parse_bool(values.get("VIPPS_TEST_MODE", "true"), "VIPPS_TEST_MODE")
        default_url = TEST_BASE_URL if test_mode else PRODUCTION_BASE_URL
        base_url = (_optional(values, "VIPPS_BASE_URL") or default_url).rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise ConfigError("VIPPS_BASE_URL must be an http(s) URL")

        timeout_raw = _optional(values, "VIPPS_TIMEOUT")
        timeout_seconds = (
            _parse_timeout(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
        )

        signing_scheme = (
            _optional(values, "VIPPS_WEBHOOK_SIGNING_SCHEME") or "canonical"
        ).lower()
        if signing_scheme not in ("canonical", "body"):
            raise ConfigError(
                "VIPPS_WEBHOOK_SIGNING_SCHEME must be 'canonical' or 'body', "
                f"got '{signing_scheme}'"
            )

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            subscription_key=subscription_key,
            merchant_serial_number=merchant_serial_number,
            base_url=base_url,
            test_mode=test_mode,
            timeout_seconds=timeout_seconds,
            system_name=_optional(values, "VIPPS_SYSTEM_NAME") or DEFAULT_SYSTEM_NAME,
            system_version=_optional(values, "VIPPS_SYSTEM_VERSION") or __version__,
            plugin_name=_optional(values, "VIPPS_SYSTEM_PLUGIN_NAME"),
            plugin_version=_optional(values, "VIPPS_SYSTEM_PLUGIN_VERSION"),
            webhook_secret=_optional(values, "VIPPS_WEBHOOK_SECRET"),
            signing_scheme=signing_scheme,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        **explicit: Any,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(parameters, explicit)
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
            search_parents=True,
        )
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    subscription_key: Optional[str] = None,
    merchant_serial_number: Optional[str] = None,
    test_mode: Optional[bool | str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float | int | str] = None,
    system_name: Optional[str] = None,
    system_version: Optional[str] = None,
    plugin_name: Optional[str] = None,
    plugin_version: Optional[str] = None,
    webhook_secret: Optional[str] = None,
    signing_scheme: Optional[str] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        client_id=client_id,
        client_secret=client_secret,
        subscription_key=subscription_key,
        merchant_serial_number=merchant_serial_number,
        test_mode=test_mode,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        system_name=system_name,
        system_version=system_version,
        plugin_name=plugin_name,
        plugin_version=plugin_version,
        webhook_secret=webhook_secret,
        signing_scheme=signing_scheme,
    )
