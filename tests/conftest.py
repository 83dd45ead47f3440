import pytest

from ocpay import OCPayConfig

from tests.helpers.http import FakeSession, make_response

CREATED_AT = "2025-03-01T10:00:00.000Z"


@pytest.fixture
def config():
    return OCPayConfig(access_token="test-token")


@pytest.fixture
def link_data():
    """The `data` member of a successful createLink reply."""
    return {
        "paymentLink": {
            "uid": "merchant-42",
            "ref": "OCPL-A1B2C3-D4E5",
            "isSandbox": True,
            "productInfo": {
                "title": "Premium Subscription",
                "amount": 5000,
                "description": "Monthly access",
            },
            "feeMode": "NO_FEE",
            "successMessage": "Thanks!",
            "redirectUrl": "https://shop.example.com/done",
            "time": CREATED_AT,
        },
        "paymentUrl": "https://pay.oneclickdz.com/OCPL-A1B2C3-D4E5",
        "paymentRef": "OCPL-A1B2C3-D4E5",
    }


@pytest.fixture
def session_for():
    """Factory: a FakeSession replaying one JSON reply per argument pair."""

    def _build(*replies):
        built = []
        for reply in replies:
            if isinstance(reply, Exception):
                built.append(reply)
            else:
                status_code, body = reply
                built.append(make_response(status_code, body))
        return FakeSession(*built)

    return _build
