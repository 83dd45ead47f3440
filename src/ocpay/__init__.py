"""
Client for OCPay single-use payment links.

The package re-exports the pieces integrators need so they can
``from ocpay import ...`` without navigating the subpackages.
"""

from .api import create_ocpay_client
from .core import (
    LINK_LIFETIME,
    ApiError,
    CheckPaymentResponse,
    ConfigError,
    CreateLinkResponse,
    FeeMode,
    LinkCreationRequest,
    LinkExpired,
    NotFound,
    OCPayClient,
    OCPayConfig,
    OCPayError,
    PaymentLink,
    PaymentStatus,
    ProductInfo,
    TransactionDetails,
    Unauthorized,
    ValidationError,
    ValidationFailed,
    check_payment,
    create_link,
    is_presumably_expired,
    load_ocpay_config,
)

__version__ = "0.1.0"

__all__ = (
    "ApiError",
    "CheckPaymentResponse",
    "ConfigError",
    "CreateLinkResponse",
    "FeeMode",
    "LINK_LIFETIME",
    "LinkCreationRequest",
    "LinkExpired",
    "NotFound",
    "OCPayClient",
    "OCPayConfig",
    "OCPayError",
    "PaymentLink",
    "PaymentStatus",
    "ProductInfo",
    "TransactionDetails",
    "Unauthorized",
    "ValidationError",
    "ValidationFailed",
    "check_payment",
    "create_link",
    "create_ocpay_client",
    "is_presumably_expired",
    "load_ocpay_config",
)
