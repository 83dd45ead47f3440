"""
HTTP transport for the OCPay gateway.

Every call is a single request/response exchange on a caller-supplied
``requests.Session``. Failures are translated into the error types of
:mod:`ocpay.core.errors`; nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import OCPayConfig
from .errors import ApiError, error_for_status, extract_error_details

__all__ = ["get_json", "post_json", "request_json"]

logger = logging.getLogger(__name__)


def _decode_error_body(response: requests.Response) -> Optional[Dict[str, Any]]:
    try:
        payload = response.json()
    except ValueError:
        logger.debug("Error body from %s is not JSON: %r", response.url, response.text[:200])
        return None
    return payload if isinstance(payload, dict) else None


def _error_from_http_failure(response: requests.Response, exc: requests.HTTPError) -> ApiError:
    payload = _decode_error_body(response)
    message, request_id = extract_error_details(payload)
    error = error_for_status(
        response.status_code,
        message or str(exc),
        request_id=request_id,
        error_data=payload,
    )
    logger.warning(
        "Gateway returned %s (%s) request_id=%s: %s",
        response.status_code,
        type(error).__name__,
        error.request_id,
        error.message,
    )
    return error


def _unwrap_success(response: requests.Response) -> Any:
    status_code = response.status_code
    try:
        payload = response.json()
    except ValueError as exc:
        raise ApiError(f"Invalid JSON response: {exc}", status_code=status_code) from exc

    if not isinstance(payload, dict):
        raise ApiError(
            "Invalid API response: expected a JSON object",
            status_code=status_code,
        )

    if payload.get("success") is False:
        message, request_id = extract_error_details(payload)
        raise ApiError(
            message or "API request failed",
            request_id=request_id,
            status_code=status_code,
            error_data=payload,
        )

    if "data" not in payload or payload["data"] is None:
        raise ApiError(
            "Invalid API response: missing data field",
            status_code=status_code,
            error_data=payload,
        )
    return payload["data"]


def request_json(
    session: requests.Session,
    config: OCPayConfig,
    method: str,
    path: str,
    *,
    body: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> Any:
    """
    Send one request and return the ``data`` member of the reply.

    ``timeout`` overrides :attr:`OCPayConfig.timeout_seconds` for this call.
    """
    url = config.url(path)
    logger.info("%s %s", method, url)
    try:
        response = session.request(
            method,
            url,
            json=body,
            headers=config.headers(),
            timeout=config.timeout_seconds if timeout is None else timeout,
        )
    except requests.RequestException as exc:
        logger.warning("%s %s failed before a response arrived: %s", method, url, exc)
        raise ApiError(f"HTTP request failed: {exc}", status_code=0) from exc

    try:
        response.raise_for_status()
    except requests.HTTPError as exc:
        raise _error_from_http_failure(response, exc) from exc

    return _unwrap_success(response)


def post_json(
    session: requests.Session,
    config: OCPayConfig,
    path: str,
    body: Dict[str, Any],
    *,
    timeout: Optional[float] = None,
) -> Any:
    return request_json(session, config, "POST", path, body=body, timeout=timeout)


def get_json(
    session: requests.Session,
    config: OCPayConfig,
    path: str,
    *,
    timeout: Optional[float] = None,
) -> Any:
    return request_json(session, config, "GET", path, timeout=timeout)
