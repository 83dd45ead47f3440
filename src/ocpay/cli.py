"""
Command-line interface for creating and polling OCPay payment links.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from typing import Callable, Optional, Sequence, Tuple

import requests

from .api import ConfigError, create_ocpay_client, load_ocpay_config
from .core.client import OCPayClient
from .core.errors import ApiError, ValidationError
from .core.expiry import is_presumably_expired, parse_timestamp
from .core.models import (
    CheckPaymentResponse,
    FeeMode,
    LinkCreationRequest,
    ProductInfo,
)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PAYMENT_FAILED = 2
EXIT_LINK_EXPIRED = 3


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _configure_logging(level: str) -> None:
    # Library modules log under "ocpay.*"; the CLI itself logs on the root logger.
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def _env_override(value: str) -> Tuple[str, str]:
    key, sep, val = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(
            f"Expected KEY=VALUE with a non-empty KEY, got '{value}'"
        )
    return key.strip(), val


def _timestamp(value: str) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected a number, got '{value}'") from exc
    if not number > 0:
        raise argparse.ArgumentTypeError("Value must be greater than zero")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ocpay",
        description="Create OCPay payment links and check their status",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing ONECLICK_API_KEY (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Per-request timeout in seconds (default: OCPAY_TIMEOUT_SECONDS or 30)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create-link", help="Create a single-use payment link")
    create.add_argument("--title", required=True, help="Product or service name")
    create.add_argument(
        "--amount",
        required=True,
        help="Amount in DZD; decimals are rounded to the nearest dinar",
    )
    create.add_argument("--description", help="Optional product description")
    create.add_argument(
        "--fee-mode",
        default=FeeMode.NO_FEE.value,
        choices=[mode.value for mode in FeeMode],
        help="Who pays the withdrawal fee (default: NO_FEE)",
    )
    create.add_argument("--success-message", help="Message shown after payment")
    create.add_argument("--redirect-url", help="Where to send the customer after payment")

    check = commands.add_parser("check-payment", help="Show the status of a payment link")
    check.add_argument("payment_ref", help="Payment reference, e.g. OCPL-A1B2C3-D4E5")
    check.add_argument(
        "--watch",
        action="store_true",
        help="Keep polling until the payment is confirmed or failed",
    )
    check.add_argument(
        "--interval",
        type=_positive_float,
        default=10.0,
        help="Seconds between polls with --watch (default: 10)",
    )
    check.add_argument(
        "--created-at",
        type=_timestamp,
        default=None,
        help="Link creation time (ISO-8601); --watch stops once the link has expired",
    )
    return parser


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = dict(args.set or ())

    try:
        config = load_ocpay_config(
            env_file=args.env_file,
            overrides=overrides,
            timeout_seconds=args.timeout,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return EXIT_ERROR

    client = create_ocpay_client(config=config, session=session or requests.Session())

    try:
        if args.command == "create-link":
            return _create_link(client, args)
        return _check_payment(client, args, sleep)
    except ValidationError as exc:
        logging.error("Invalid request: %s", exc)
        return EXIT_ERROR
    except ApiError as exc:
        logging.error(
            "Gateway request failed (status %s, request id %s): %s",
            exc.status_code,
            exc.request_id,
            exc.message,
        )
        return EXIT_ERROR


def _create_link(client: OCPayClient, args: argparse.Namespace) -> int:
    product = ProductInfo.from_decimal(args.title, args.amount, args.description)
    request = LinkCreationRequest(
        product_info=product,
        fee_mode=args.fee_mode,
        success_message=args.success_message,
        redirect_url=args.redirect_url,
    )
    response = client.create_link(request)
    link = response.payment_link

    logging.info("Payment URL: %s", response.payment_url)
    logging.info("Payment reference: %s", response.payment_ref)
    logging.info(
        "Amount: %s DZD%s",
        link.product_info.amount,
        " (sandbox)" if link.is_sandbox else "",
    )
    if link.time:
        try:
            logging.info("Link expires at %s", link.expires_at.isoformat())
        except ValueError:
            logging.debug("Gateway returned an unparseable creation time: %s", link.time)
    return EXIT_OK


def _report(result: CheckPaymentResponse) -> None:
    logging.info("Payment %s: %s %s", result.payment_ref, result.status.value, result.message)
    details = result.transaction_details
    if details is not None:
        logging.info(
            "Transaction: %s %s created %s%s",
            details.amount,
            details.currency,
            details.created_date,
            " (sandbox)" if details.is_sandbox else "",
        )


def _check_payment(
    client: OCPayClient,
    args: argparse.Namespace,
    sleep: Callable[[float], None],
) -> int:
    while True:
        result = client.check_payment(args.payment_ref)
        _report(result)

        if result.is_confirmed():
            return EXIT_OK
        if result.is_failed():
            return EXIT_PAYMENT_FAILED
        if not args.watch:
            return EXIT_OK

        if args.created_at is not None and is_presumably_expired(args.created_at):
            logging.warning(
                "Payment link %s is older than its payable window; giving up",
                args.payment_ref,
            )
            return EXIT_LINK_EXPIRED
        sleep(args.interval)


def main() -> None:
    sys.exit(run_cli())
