"""
Payment-link operations against the OCPay gateway.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import quote

import requests

from .config import OCPayConfig
from .errors import ApiError, ValidationError
from .expiry import Timestamp, is_presumably_expired
from .models import CheckPaymentResponse, CreateLinkResponse, LinkCreationRequest
from .transport import get_json, post_json

__all__ = [
    "CHECK_PAYMENT_PATH",
    "CREATE_LINK_PATH",
    "OCPayClient",
    "check_payment",
    "create_link",
]

logger = logging.getLogger(__name__)

CREATE_LINK_PATH = "/v3/ocpay/createLink"
CHECK_PAYMENT_PATH = "/v3/ocpay/checkPayment/{ref}"

T = TypeVar("T")


def _parse(data: Any, parser: Callable[[Any], T]) -> T:
    if not isinstance(data, dict):
        raise ApiError("Invalid API response: data field is not an object", error_data={"data": data})
    try:
        return parser(data)
    except (TypeError, ValueError) as exc:
        raise ApiError(f"Invalid API response: {exc}", error_data={"data": data}) from exc


def create_link(
    session: requests.Session,
    config: OCPayConfig,
    request: LinkCreationRequest,
    *,
    timeout: Optional[float] = None,
) -> CreateLinkResponse:
    """
    Create a single-use payment link.

    The link stays payable for twenty minutes. Persist the returned
    ``payment_ref`` to poll :func:`check_payment` later.
    """
    if not isinstance(request, LinkCreationRequest):
        raise ValidationError(
            f"request must be a LinkCreationRequest, got {type(request).__name__}"
        )
    data = post_json(session, config, CREATE_LINK_PATH, request.to_payload(), timeout=timeout)
    result = _parse(data, CreateLinkResponse.from_payload)
    logger.info("Created payment link %s", result.payment_ref)
    return result


def check_payment(
    session: requests.Session,
    config: OCPayConfig,
    payment_ref: str,
    *,
    timeout: Optional[float] = None,
) -> CheckPaymentResponse:
    """
    Fetch the current status of a payment link.

    The call has no side effects on the gateway and can be repeated as
    often as the caller's polling policy allows.
    """
    if not isinstance(payment_ref, str) or not payment_ref.strip():
        raise ValidationError(f"payment_ref must be a non-empty string, got {payment_ref!r}")
    path = CHECK_PAYMENT_PATH.format(ref=quote(payment_ref, safe=""))
    data = get_json(session, config, path, timeout=timeout)
    result = _parse(data, CheckPaymentResponse.from_payload)
    logger.info("Payment %s is %s", payment_ref, result.status.value)
    return result


class OCPayClient:
    """
    Thin convenience wrapper binding a configuration to an HTTP session.
    """

    def __init__(
        self,
        config: OCPayConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def create_link(
        self,
        request: LinkCreationRequest,
        *,
        timeout: Optional[float] = None,
    ) -> CreateLinkResponse:
        return create_link(self.session, self.config, request, timeout=timeout)

    def check_payment(
        self,
        payment_ref: str,
        *,
        timeout: Optional[float] = None,
    ) -> CheckPaymentResponse:
        return check_payment(self.session, self.config, payment_ref, timeout=timeout)

    @staticmethod
    def link_expired(created_at: Timestamp) -> bool:
        """
        Whether a link created at ``created_at`` is past its payable window.

        Advisory only; see :mod:`ocpay.core.expiry`.
        """
        return is_presumably_expired(created_at)
