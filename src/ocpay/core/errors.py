"""
Error taxonomy shared by the validation, transport and lifecycle layers.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Type

__all__ = [
    "ApiError",
    "LinkExpired",
    "NotFound",
    "OCPayError",
    "STATUS_ERRORS",
    "Unauthorized",
    "ValidationError",
    "ValidationFailed",
    "error_for_status",
    "extract_error_details",
]


class OCPayError(Exception):
    """Base class for every error raised by the package."""


class ValidationError(OCPayError, ValueError):
    """Raised locally when a request field violates a constraint."""


class ApiError(OCPayError):
    """
    Raised when the gateway rejects a call or cannot be reached.

    ``status_code`` is ``0`` when no HTTP response was received at all.
    ``error_data`` holds the decoded error body, when there was one.
    """

    def __init__(
        self,
        message: str,
        *,
        request_id: Optional[str] = None,
        status_code: Optional[int] = None,
        error_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.request_id = request_id
        self.status_code = status_code
        self.error_data = error_data

    @property
    def retryable(self) -> bool:
        """
        Hint for callers deciding whether another attempt could succeed.

        Only network failures, throttling and server errors qualify. The
        package itself never retries.
        """
        if self.status_code is None:
            return False
        return self.status_code == 0 or self.status_code == 429 or self.status_code >= 500

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r}, request_id={self.request_id!r})"
        )


class ValidationFailed(ApiError):
    """The gateway rejected the request body (HTTP 400)."""


class Unauthorized(ApiError):
    """The access token was missing or refused (HTTP 403)."""


class NotFound(ApiError):
    """The payment reference does not exist (HTTP 404)."""


class LinkExpired(ApiError):
    """The payment link is no longer payable (HTTP 410)."""


STATUS_ERRORS: Mapping[int, Type[ApiError]] = {
    400: ValidationFailed,
    403: Unauthorized,
    404: NotFound,
    410: LinkExpired,
}


def extract_error_details(payload: Any) -> Tuple[Optional[str], Optional[str]]:
    """
    Pull ``message`` and ``meta.requestId`` out of a decoded error body.
    """
    if not isinstance(payload, dict):
        return None, None

    message = payload.get("message")
    meta = payload.get("meta")
    request_id = meta.get("requestId") if isinstance(meta, dict) else None
    return (
        str(message) if message is not None else None,
        str(request_id) if request_id is not None else None,
    )


def error_for_status(
    status_code: int,
    message: str,
    *,
    request_id: Optional[str] = None,
    error_data: Optional[Dict[str, Any]] = None,
) -> ApiError:
    error_cls = STATUS_ERRORS.get(status_code, ApiError)
    return error_cls(
        message,
        request_id=request_id,
        status_code=status_code,
        error_data=error_data,
    )
