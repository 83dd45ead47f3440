"""
Public, high-level helpers for creating and polling OCPay payment links.
"""

from __future__ import annotations

from typing import Mapping, Optional, Union

import requests

from .core.client import OCPayClient, check_payment, create_link
from .core.config import ConfigError, OCPayConfig, load_ocpay_config

__all__ = [
    "ConfigError",
    "OCPayClient",
    "OCPayConfig",
    "check_payment",
    "create_link",
    "create_ocpay_client",
    "load_ocpay_config",
]


def create_ocpay_client(
    *,
    config: Optional[OCPayConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    access_token: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_seconds: Optional[Union[float, int, str]] = None,
) -> OCPayClient:
    """
    Construct an :class:`OCPayClient`.

    Callers can either supply a ready-made :class:`OCPayConfig` or let the
    helper assemble one from environment data and keyword arguments.
    """
    if config is not None:
        extras = (overrides, base, access_token, base_url, timeout_seconds)
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built OCPayConfig or individual settings, not both."
            )
        cfg = config
    else:
        cfg = load_ocpay_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            access_token=access_token,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
        )
    return OCPayClient(cfg, session=session)
