"""
Caller-side estimate of payment-link expiry.

The gateway fails a link that has not been paid within twenty minutes of
its creation. These helpers let a caller skip a status request for a link
that is clearly past that window. They are a hint only: the status
returned by the gateway is always authoritative, and nothing in the
client consults them.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

__all__ = [
    "LINK_LIFETIME",
    "expires_at",
    "is_presumably_expired",
    "link_age",
    "parse_timestamp",
]

LINK_LIFETIME = timedelta(minutes=20)

Timestamp = Union[str, datetime]


def parse_timestamp(value: Timestamp) -> datetime:
    """
    Return ``value`` as an aware :class:`datetime`.

    Strings are read as ISO-8601; a trailing ``Z`` is accepted. Naive values
    are assumed to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return parse_timestamp(now)


def link_age(created_at: Timestamp, *, now: Optional[datetime] = None) -> timedelta:
    return _now(now) - parse_timestamp(created_at)


def expires_at(created_at: Timestamp) -> datetime:
    return parse_timestamp(created_at) + LINK_LIFETIME


def is_presumably_expired(
    created_at: Timestamp,
    *,
    now: Optional[datetime] = None,
) -> bool:
    """
    ``True`` once more than :data:`LINK_LIFETIME` has elapsed since creation.

    A ``True`` result means the gateway will almost certainly report
    ``FAILED``; a ``False`` result says nothing about the payment itself.
    """
    return link_age(created_at, now=now) > LINK_LIFETIME
