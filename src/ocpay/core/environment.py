"""
Layered lookup of the settings used to configure the OCPay client.

Values come from ``os.environ`` (or an explicit ``base`` mapping), then an
optional ``.env`` file, then explicit overrides. The result is a plain
mapping handed to :meth:`ocpay.core.config.OCPayConfig.from_mapping`.
"""

from __future__ import annotations

import logging
import os
from collections import ChainMap
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

__all__ = ["OCPayEnvironment", "build_environment", "read_env_file"]

logger = logging.getLogger(__name__)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    # Inline comments only apply to unquoted values.
    if " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return value


def read_env_file(path: str) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` lines from ``path``.

    Blank lines and ``#`` comments are skipped, an ``export`` prefix is
    tolerated and matching single or double quotes are stripped. A missing
    file yields an empty mapping.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No env file at %s", path)
        return {}

    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, raw_value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        values[key] = _unquote(raw_value.strip())
    return values


@dataclass(frozen=True)
class OCPayEnvironment:
    """Resolved settings plus the env file they were read from, if any."""

    variables: Mapping[str, str]
    env_file: Optional[str] = None


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> OCPayEnvironment:
    """
    Merge the configuration sources into one :class:`OCPayEnvironment`.

    Lookup order is ``overrides``, then ``base`` (default :data:`os.environ`),
    then the env file. Pass ``env_file=None`` to skip the file.
    """
    file_values = read_env_file(env_file) if env_file is not None else {}
    layers = ChainMap(
        dict(overrides or {}),
        dict(os.environ if base is None else base),
        file_values,
    )
    return OCPayEnvironment(
        variables=dict(layers),
        env_file=env_file if file_values else None,
    )
