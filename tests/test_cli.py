from datetime import datetime, timedelta, timezone

import pytest

from ocpay.cli import EXIT_ERROR, EXIT_LINK_EXPIRED, EXIT_OK, EXIT_PAYMENT_FAILED, run_cli


@pytest.fixture
def base_args(tmp_path):
    return ["--env-file", str(tmp_path / "missing.env"), "--set", "ONECLICK_API_KEY=cli-token"]


def _status(status, message=""):
    return (200, {"data": {"status": status, "message": message, "paymentRef": "OCPL-1"}})


def test_create_link_rounds_amount_and_posts(base_args, session_for, link_data):
    session = session_for((200, {"data": link_data}))

    code = run_cli(
        base_args
        + ["create-link", "--title", "Premium Subscription", "--amount", "4999.6", "--fee-mode", "SPLIT_FEE"],
        session=session,
    )

    assert code == EXIT_OK
    payload = session.calls[0]["json"]
    assert payload["productInfo"] == {"title": "Premium Subscription", "amount": 5000}
    assert payload["feeMode"] == "SPLIT_FEE"
    assert session.calls[0]["headers"]["X-Access-Token"] == "cli-token"


def test_create_link_rejects_out_of_range_amount_locally(base_args, session_for):
    session = session_for((200, {"data": {}}))
    code = run_cli(base_args + ["create-link", "--title", "Pen", "--amount", "100"], session=session)
    assert code == EXIT_ERROR
    assert session.calls == []


def test_missing_token_fails_before_any_request(tmp_path, session_for):
    session = session_for(_status("CONFIRMED"))
    code = run_cli(
        ["--env-file", str(tmp_path / "missing.env"), "--set", "ONECLICK_API_KEY=", "check-payment", "OCPL-1"],
        session=session,
    )
    assert code == EXIT_ERROR
    assert session.calls == []


def test_timeout_option_reaches_the_transport(base_args, session_for):
    session = session_for(_status("CONFIRMED"))
    run_cli(["--timeout", "4"] + base_args + ["check-payment", "OCPL-1"], session=session)
    assert session.calls[0]["timeout"] == 4.0


@pytest.mark.parametrize(
    "status, expected",
    [("CONFIRMED", EXIT_OK), ("FAILED", EXIT_PAYMENT_FAILED), ("PENDING", EXIT_OK)],
)
def test_single_check_exit_codes(base_args, session_for, status, expected):
    session = session_for(_status(status))
    assert run_cli(base_args + ["check-payment", "OCPL-1"], session=session) == expected
    assert len(session.calls) == 1


def test_api_errors_exit_with_error(base_args, session_for):
    session = session_for((403, {"success": False, "message": "Invalid access token"}))
    assert run_cli(base_args + ["check-payment", "OCPL-1"], session=session) == EXIT_ERROR


def test_watch_polls_until_terminal(base_args, session_for):
    session = session_for(_status("PENDING"), _status("PENDING"), _status("CONFIRMED", "paid"))
    sleeps = []

    code = run_cli(
        base_args + ["check-payment", "OCPL-1", "--watch", "--interval", "2.5"],
        session=session,
        sleep=sleeps.append,
    )

    assert code == EXIT_OK
    assert len(session.calls) == 3
    assert sleeps == [2.5, 2.5]


def test_watch_gives_up_on_a_presumably_expired_link(base_args, session_for):
    session = session_for(_status("PENDING"))
    created_at = (datetime.now(timezone.utc) - timedelta(minutes=30)).isoformat()
    sleeps = []

    code = run_cli(
        base_args + ["check-payment", "OCPL-1", "--watch", "--created-at", created_at],
        session=session,
        sleep=sleeps.append,
    )

    assert code == EXIT_LINK_EXPIRED
    assert len(session.calls) == 1
    assert sleeps == []


def test_watch_reports_server_failure_even_for_a_fresh_link(base_args, session_for):
    session = session_for(_status("PENDING"), _status("FAILED", "declined"))
    created_at = datetime.now(timezone.utc).isoformat()

    code = run_cli(
        base_args + ["check-payment", "OCPL-1", "--watch", "--created-at", created_at],
        session=session,
        sleep=lambda seconds: None,
    )

    assert code == EXIT_PAYMENT_FAILED


def test_huge_amount_is_a_validation_error_not_a_crash(base_args, session_for):
    session = session_for((200, {"data": {}}))
    code = run_cli(base_args + ["create-link", "--title", "Pen", "--amount", "1e30"], session=session)
    assert code == EXIT_ERROR
    assert session.calls == []


@pytest.mark.parametrize("override", ["NO_EQUALS", "=value"])
def test_malformed_override_is_rejected_by_the_parser(override):
    with pytest.raises(SystemExit):
        run_cli(["--set", override, "check-payment", "OCPL-1"])


def test_log_level_is_case_insensitive(base_args, session_for):
    session = session_for(_status("CONFIRMED"))
    assert run_cli(["--log-level", "debug"] + base_args + ["check-payment", "OCPL-1"], session=session) == EXIT_OK
