"""
Core primitives that implement the OCPay payment-link lifecycle.
"""

from .client import OCPayClient, check_payment, create_link
from .config import ConfigError, OCPayConfig, load_ocpay_config
from .environment import OCPayEnvironment, build_environment, read_env_file
from .errors import (
    ApiError,
    LinkExpired,
    NotFound,
    OCPayError,
    Unauthorized,
    ValidationError,
    ValidationFailed,
)
from .expiry import LINK_LIFETIME, expires_at, is_presumably_expired, link_age
from .models import (
    CheckPaymentResponse,
    CreateLinkResponse,
    FeeMode,
    LinkCreationRequest,
    PaymentLink,
    PaymentStatus,
    ProductInfo,
    TransactionDetails,
)

__all__ = [
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
    "OCPayEnvironment",
    "OCPayError",
    "PaymentLink",
    "PaymentStatus",
    "ProductInfo",
    "TransactionDetails",
    "Unauthorized",
    "ValidationError",
    "ValidationFailed",
    "build_environment",
    "check_payment",
    "create_link",
    "expires_at",
    "is_presumably_expired",
    "link_age",
    "load_ocpay_config",
    "read_env_file",
]
