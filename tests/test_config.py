import pytest

from ocpay import ConfigError, OCPayClient, OCPayConfig, create_ocpay_client, load_ocpay_config
from ocpay.core.environment import build_environment, read_env_file

from tests.helpers.http import FakeSession


def test_defaults(tmp_path):
    config = load_ocpay_config(env_file=None, base={"ONECLICK_API_KEY": "tok"})
    assert config.access_token == "tok"
    assert config.base_url == "https://api.oneclickdz.com"
    assert config.timeout_seconds == 30.0


def test_missing_token_is_a_config_error():
    with pytest.raises(ConfigError, match="ONECLICK_API_KEY"):
        load_ocpay_config(env_file=None, base={})


def test_blank_token_is_a_config_error():
    with pytest.raises(ConfigError):
        OCPayConfig(access_token="   ")


@pytest.mark.parametrize("timeout", ["abc", "0", "-3"])
def test_invalid_timeout_is_a_config_error(timeout):
    with pytest.raises(ConfigError, match="OCPAY_TIMEOUT_SECONDS"):
        load_ocpay_config(env_file=None, base={"ONECLICK_API_KEY": "tok", "OCPAY_TIMEOUT_SECONDS": timeout})


def test_base_url_is_normalised():
    config = OCPayConfig(access_token="tok", base_url="https://sandbox.example.com/")
    assert config.base_url == "https://sandbox.example.com"
    assert config.url("/v3/ocpay/createLink") == "https://sandbox.example.com/v3/ocpay/createLink"


def test_non_http_base_url_is_rejected():
    with pytest.raises(ConfigError, match="OCPAY_BASE_URL"):
        OCPayConfig(access_token="tok", base_url="ftp://example.com")


def test_repr_hides_the_token():
    assert "secret" not in repr(OCPayConfig(access_token="secret"))


def test_env_file_parsing(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# OCPay settings\n"
        "\n"
        "export ONECLICK_API_KEY='from-file'\n"
        'OCPAY_BASE_URL="https://sandbox.example.com"\n'
        "OCPAY_TIMEOUT_SECONDS=12 # seconds\n"
        "NOT_A_PAIR\n",
        encoding="utf-8",
    )
    assert read_env_file(str(env_file)) == {
        "ONECLICK_API_KEY": "from-file",
        "OCPAY_BASE_URL": "https://sandbox.example.com",
        "OCPAY_TIMEOUT_SECONDS": "12",
    }


def test_missing_env_file_is_empty(tmp_path):
    assert read_env_file(str(tmp_path / "absent.env")) == {}


def test_precedence_base_over_file_and_overrides_over_all(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ONECLICK_API_KEY=file\nOCPAY_TIMEOUT_SECONDS=12\n", encoding="utf-8")

    environment = build_environment(
        env_file=str(env_file),
        base={"ONECLICK_API_KEY": "base"},
        overrides={"OCPAY_TIMEOUT_SECONDS": "5"},
    )

    assert environment.variables["ONECLICK_API_KEY"] == "base"
    assert environment.variables["OCPAY_TIMEOUT_SECONDS"] == "5"
    assert environment.env_file == str(env_file)


def test_absent_env_file_is_not_recorded(tmp_path):
    environment = build_environment(env_file=str(tmp_path / "absent.env"), base={})
    assert environment.env_file is None
    assert environment.variables == {}


def test_keyword_arguments_beat_overrides(tmp_path):
    config = load_ocpay_config(
        env_file=None,
        base={},
        overrides={"ONECLICK_API_KEY": "override"},
        access_token="explicit",
        timeout_seconds=7,
    )
    assert config.access_token == "explicit"
    assert config.timeout_seconds == 7.0


def test_create_client_from_settings():
    session = FakeSession()
    client = create_ocpay_client(env_file=None, base={}, access_token="tok", session=session)
    assert isinstance(client, OCPayClient)
    assert client.config.access_token == "tok"
    assert client.session is session


def test_create_client_rejects_config_plus_settings():
    with pytest.raises(ValueError, match="not both"):
        create_ocpay_client(config=OCPayConfig(access_token="tok"), access_token="other")
