"""
Value objects exchanged with the OCPay gateway.

Request objects validate themselves on construction so that an invalid
request never reaches the network. Response objects are built from the
``data`` member of a successful gateway reply.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

from .errors import ValidationError
from .expiry import expires_at, parse_timestamp

__all__ = [
    "CheckPaymentResponse",
    "CreateLinkResponse",
    "FeeMode",
    "LinkCreationRequest",
    "PaymentLink",
    "PaymentStatus",
    "ProductInfo",
    "TransactionDetails",
]

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
SUCCESS_MESSAGE_MAX_LENGTH = 500
MIN_AMOUNT = 500
MAX_AMOUNT = 500_000

Number = Union[int, float, Decimal]


class FeeMode(str, Enum):
    """Which party absorbs the withdrawal fee."""

    NO_FEE = "NO_FEE"
    SPLIT_FEE = "SPLIT_FEE"
    CUSTOMER_FEE = "CUSTOMER_FEE"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


def _preview(value: str, limit: int = 40) -> str:
    if len(value) <= limit:
        return repr(value)
    return repr(value[:limit] + "...")


def _check_text(value: Any, field_name: str, max_length: int, *, required: bool) -> None:
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string, got {type(value).__name__}")
    if required and not value:
        raise ValidationError(f"{field_name} must not be empty")
    if len(value) > max_length:
        raise ValidationError(
            f"{field_name} must not exceed {max_length} characters "
            f"(got {len(value)}: {_preview(value)})"
        )


def _normalize_amount(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError(f"amount must be a number, got {value!r}")
    if isinstance(value, int):
        amount = value
    else:
        decimal_value = Decimal(str(value))
        if not decimal_value.is_finite():
            raise ValidationError(f"amount must be a finite number, got {value!r}")
        if decimal_value != decimal_value.to_integral_value():
            raise ValidationError(f"amount must be a whole number (no decimals), got {value!r}")
        amount = int(decimal_value)

    if amount < MIN_AMOUNT:
        raise ValidationError(
            f"amount {amount} is too small: the minimum is {MIN_AMOUNT} DZD"
        )
    if amount > MAX_AMOUNT:
        raise ValidationError(
            f"amount {amount} is too large: the maximum is {MAX_AMOUNT} DZD"
        )
    return amount


def _wire_object(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{key} must be an object, got {type(value).__name__}")
    return value


def _wire_whole_number(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    decimal_value = Decimal(str(value))
    if not decimal_value.is_finite() or decimal_value != decimal_value.to_integral_value():
        raise ValueError(f"{key} must be a whole number, got {value!r}")
    return int(decimal_value)


def _check_redirect_url(value: Optional[str]) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        raise ValidationError(f"redirect_url must be a string, got {type(value).__name__}")
    try:
        parts = urlsplit(value)
        host = parts.hostname
    except ValueError as exc:
        raise ValidationError(f"redirect_url is not a valid URL: {value!r}") from exc
    if parts.scheme.lower() not in ("http", "https") or not host:
        raise ValidationError(
            f"redirect_url must be an absolute http(s) URL, got {value!r}"
        )


def _coerce_fee_mode(value: Any) -> FeeMode:
    if isinstance(value, FeeMode):
        return value
    try:
        return FeeMode(value)
    except ValueError as exc:
        allowed = ", ".join(mode.value for mode in FeeMode)
        raise ValidationError(
            f"fee_mode must be one of: {allowed} (got {value!r})"
        ) from exc


@dataclass(frozen=True)
class ProductInfo:
    """
    What the customer is paying for.

    ``amount`` is expressed in whole Algerian dinars and must lie within
    ``[500, 500000]``.
    """

    title: str
    amount: int
    description: Optional[str] = None

    def __post_init__(self) -> None:
        _check_text(self.title, "title", TITLE_MAX_LENGTH, required=True)
        _check_text(self.description, "description", DESCRIPTION_MAX_LENGTH, required=False)
        object.__setattr__(self, "amount", _normalize_amount(self.amount))

    @classmethod
    def from_decimal(
        cls,
        title: str,
        amount: Union[Number, str],
        description: Optional[str] = None,
    ) -> "ProductInfo":
        """
        Build a :class:`ProductInfo` from a fractional amount.

        The amount is rounded half away from zero before validation, so
        ``499.5`` becomes ``500`` and ``500000.5`` becomes ``500001``.
        """
        if isinstance(amount, bool):
            raise ValidationError(f"amount must be a number, got {amount!r}")
        try:
            decimal_amount = Decimal(str(amount).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"amount must be a number, got {amount!r}") from exc
        if not decimal_amount.is_finite():
            raise ValidationError(f"amount must be a finite number, got {amount!r}")
        # Anything this far out cannot round into range, and may not fit the
        # decimal context precision once quantized.
        if decimal_amount < MIN_AMOUNT - 1:
            raise ValidationError(
                f"amount {amount} is too small: the minimum is {MIN_AMOUNT} DZD"
            )
        if decimal_amount > MAX_AMOUNT + 1:
            raise ValidationError(
                f"amount {amount} is too large: the maximum is {MAX_AMOUNT} DZD"
            )
        rounded = decimal_amount.quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return cls(title=title, amount=int(rounded), description=description)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"title": self.title, "amount": self.amount}
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass(frozen=True)
class LinkCreationRequest:
    product_info: ProductInfo
    fee_mode: FeeMode = FeeMode.NO_FEE
    success_message: Optional[str] = None
    redirect_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.product_info, ProductInfo):
            raise ValidationError(
                f"product_info must be a ProductInfo, got {type(self.product_info).__name__}"
            )
        object.__setattr__(self, "fee_mode", _coerce_fee_mode(self.fee_mode))
        _check_text(
            self.success_message,
            "success_message",
            SUCCESS_MESSAGE_MAX_LENGTH,
            required=False,
        )
        _check_redirect_url(self.redirect_url)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "productInfo": self.product_info.to_payload(),
            "feeMode": self.fee_mode.value,
        }
        if self.success_message is not None:
            payload["successMessage"] = self.success_message
        if self.redirect_url is not None:
            payload["redirectUrl"] = self.redirect_url
        return payload


@dataclass(frozen=True)
class PaymentLink:
    """
    A link as recorded by the gateway.

    ``ref`` has the form ``OCPL-XXXXXX-YYYY`` and is what callers persist in
    order to poll the payment status later.
    """

    uid: str
    ref: str
    is_sandbox: bool
    product_info: ProductInfo
    fee_mode: str
    success_message: Optional[str]
    redirect_url: Optional[str]
    time: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PaymentLink":
        product = _wire_object(payload, "productInfo")
        return cls(
            uid=str(payload.get("uid", "")),
            ref=str(payload.get("ref", "")),
            is_sandbox=bool(payload.get("isSandbox", False)),
            product_info=ProductInfo(
                title=product.get("title", ""),
                amount=_wire_whole_number(product.get("amount"), "productInfo.amount"),
                description=product.get("description"),
            ),
            fee_mode=str(payload.get("feeMode", "")),
            success_message=payload.get("successMessage"),
            redirect_url=payload.get("redirectUrl"),
            time=str(payload.get("time", "")),
        )

    @property
    def created_at(self) -> datetime:
        return parse_timestamp(self.time)

    @property
    def expires_at(self) -> datetime:
        """When the gateway stops accepting payment if none was initiated."""
        return expires_at(self.time)


@dataclass(frozen=True)
class CreateLinkResponse:
    payment_link: PaymentLink
    payment_url: str
    payment_ref: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CreateLinkResponse":
        return cls(
            payment_link=PaymentLink.from_payload(_wire_object(payload, "paymentLink")),
            payment_url=str(payload.get("paymentUrl", "")),
            payment_ref=str(payload.get("paymentRef", "")),
        )


@dataclass(frozen=True)
class TransactionDetails:
    amount: int
    currency: str
    is_sandbox: bool
    created_date: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TransactionDetails":
        return cls(
            amount=_wire_whole_number(payload.get("amount"), "transactionDetails.amount"),
            currency=str(payload.get("currency") or "DZD"),
            is_sandbox=bool(payload.get("isSandbox", False)),
            created_date=str(payload.get("createdDate", "")),
        )


@dataclass(frozen=True)
class CheckPaymentResponse:
    status: PaymentStatus
    message: str
    payment_ref: str
    transaction_details: Optional[TransactionDetails] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CheckPaymentResponse":
        # A missing status means the gateway has nothing to report yet.
        raw_status = payload.get("status") or PaymentStatus.PENDING.value
        try:
            status = PaymentStatus(raw_status)
        except ValueError as exc:
            raise ValueError(f"unknown payment status {raw_status!r}") from exc

        details = _wire_object(payload, "transactionDetails")
        return cls(
            status=status,
            message=str(payload.get("message") or ""),
            payment_ref=str(payload.get("paymentRef") or ""),
            transaction_details=(
                TransactionDetails.from_payload(details) if details else None
            ),
        )

    def is_confirmed(self) -> bool:
        return self.status is PaymentStatus.CONFIRMED

    def is_pending(self) -> bool:
        return self.status is PaymentStatus.PENDING

    def is_failed(self) -> bool:
        return self.status is PaymentStatus.FAILED

    def is_terminal(self) -> bool:
        return self.status.is_terminal
