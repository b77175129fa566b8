from __future__ import annotations

import pytest

from tests.helpers.provider import FakeProviderClient
from twiliform.config import (
    ConfigurationError,
    MissingConfigurationError,
    ReconcileConfig,
    get_reconcile_config,
    get_twilio_config,
    require_env_vars,
)
from twiliform.domain.model import SelectionPolicy
from twiliform.reconciliation import ProviderContext


@pytest.fixture
def twilio_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC123")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "secret-token")
    monkeypatch.delenv("TWILIO_API_URL", raising=False)
    monkeypatch.delenv("TWILIO_MESSAGING_URL", raising=False)


@pytest.mark.usefixtures("twilio_env")
def test_twilio_config_reads_credentials() -> None:
    config = get_twilio_config()

    assert config.account_sid == "AC123"
    assert config.auth_token == "secret-token"
    assert config.api_base_url == "https://api.twilio.com"
    assert config.messaging_base_url == "https://messaging.twilio.com"
    assert "secret-token" not in repr(config)


@pytest.mark.usefixtures("twilio_env")
def test_twilio_config_url_overrides_drop_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TWILIO_API_URL", "http://localhost:8080/ ")
    monkeypatch.setenv("TWILIO_MESSAGING_URL", "http://localhost:8081/")

    config = get_twilio_config()

    assert config.api_base_url == "http://localhost:8080"
    assert config.messaging_base_url == "http://localhost:8081"


def test_twilio_config_requires_both_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "  ")

    with pytest.raises(MissingConfigurationError) as exc:
        get_twilio_config()

    assert "TWILIO_ACCOUNT_SID" in str(exc.value)
    assert "TWILIO_AUTH_TOKEN" in str(exc.value)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_reconcile_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TWILIFORM_SELECTION_POLICY", raising=False)
    monkeypatch.delenv("TWILIFORM_LOOKUP_PAGE_SIZE", raising=False)

    config = get_reconcile_config()

    assert config.selection_policy is SelectionPolicy.TAKE_FIRST
    assert config.lookup_page_size == 50


def test_reconcile_config_reads_policy_case_insensitively(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("TWILIFORM_SELECTION_POLICY", "FAIL_ON_MULTIPLE")
    monkeypatch.setenv("TWILIFORM_LOOKUP_PAGE_SIZE", "20")

    config = get_reconcile_config()

    assert config.selection_policy is SelectionPolicy.FAIL_ON_MULTIPLE
    assert config.lookup_page_size == 20


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TWILIFORM_SELECTION_POLICY", "random"),
        ("TWILIFORM_LOOKUP_PAGE_SIZE", "many"),
        ("TWILIFORM_LOOKUP_PAGE_SIZE", "0"),
        ("TWILIFORM_LOOKUP_PAGE_SIZE", "1001"),
    ],
)
def test_reconcile_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.delenv("TWILIFORM_SELECTION_POLICY", raising=False)
    monkeypatch.delenv("TWILIFORM_LOOKUP_PAGE_SIZE", raising=False)
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_reconcile_config()


def test_context_and_config_share_default_page_size() -> None:
    context = ProviderContext(client=FakeProviderClient(), account_sid="AC123")

    assert context.lookup_page_size == ReconcileConfig().lookup_page_size == 50
