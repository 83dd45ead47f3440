"""
Configuration for talking to the OCPay gateway.

There is no module-level default client: every operation receives an
:class:`OCPayConfig` explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

from .environment import build_environment
from .errors import OCPayError

__all__ = [
    "ConfigError",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "OCPayConfig",
    "load_ocpay_config",
]

DEFAULT_BASE_URL = "https://api.oneclickdz.com"
DEFAULT_TIMEOUT_SECONDS = 30.0

ACCESS_TOKEN_HEADER = "X-Access-Token"

ACCESS_TOKEN_KEY = "ONECLICK_API_KEY"
BASE_URL_KEY = "OCPAY_BASE_URL"
TIMEOUT_KEY = "OCPAY_TIMEOUT_SECONDS"

_PARAMETER_TO_ENV_KEY = {
    "access_token": ACCESS_TOKEN_KEY,
    "base_url": BASE_URL_KEY,
    "timeout_seconds": TIMEOUT_KEY,
}


class ConfigError(OCPayError):
    """Raised when the supplied configuration is invalid."""


def _normalize_token(raw_token: Optional[str]) -> str:
    token = (raw_token or "").strip()
    if not token:
        raise ConfigError(f"{ACCESS_TOKEN_KEY} must be provided")
    return token


def _normalize_base_url(raw_url: str) -> str:
    url = raw_url.strip().rstrip("/")
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"{BASE_URL_KEY} must be an http(s) URL, got '{raw_url}'")
    return url


def _parse_timeout(raw_timeout: Union[str, float, int]) -> float:
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"{TIMEOUT_KEY} must be a number of seconds, got '{raw_timeout}'"
        ) from exc
    if not timeout > 0:
        raise ConfigError(f"{TIMEOUT_KEY} must be greater than zero")
    return timeout


@dataclass(frozen=True)
class OCPayConfig:
    access_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        object.__setattr__(self, "access_token", _normalize_token(self.access_token))
        object.__setattr__(self, "base_url", _normalize_base_url(self.base_url))
        object.__setattr__(self, "timeout_seconds", _parse_timeout(self.timeout_seconds))

    def __repr__(self) -> str:
        return (
            f"OCPayConfig(access_token='***', base_url={self.base_url!r}, "
            f"timeout_seconds={self.timeout_seconds!r})"
        )

    def headers(self) -> Dict[str, str]:
        return {
            ACCESS_TOKEN_HEADER: self.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "OCPayConfig":
        return cls(
            access_token=values.get(ACCESS_TOKEN_KEY, ""),
            base_url=values.get(BASE_URL_KEY) or DEFAULT_BASE_URL,
            timeout_seconds=values.get(TIMEOUT_KEY) or DEFAULT_TIMEOUT_SECONDS,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[Union[float, int, str]] = None,
    ) -> "OCPayConfig":
        explicit: Dict[str, Any] = {
            "access_token": access_token,
            "base_url": base_url,
            "timeout_seconds": timeout_seconds,
        }
        merged_overrides = dict(overrides or {})
        for name, value in explicit.items():
            if value is not None:
                merged_overrides[_PARAMETER_TO_ENV_KEY[name]] = str(value)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_ocpay_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    access_token: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[Union[float, int, str]] = None,
) -> OCPayConfig:
    """
    Convenience wrapper that mirrors :meth:`OCPayConfig.from_env`.

    Settings can come from environment variables, a ``.env`` file, direct
    keyword arguments, or any combination of the three. Keyword arguments
    take precedence over ``overrides``.
    """
    return OCPayConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        access_token=access_token,
        base_url=base_url,
        timeout_seconds=timeout_seconds,
    )
