from __future__ import annotations

import json

import pytest

from tests.helpers.provider import (
    FakeProviderClient,
    account,
    available_number,
    incoming_number,
    seed,
)
from twiliform import main as main_module
from twiliform.domain.errors import LookupValidationError
from twiliform.reconciliation import ProviderContext, ProviderErrorKind


@pytest.fixture
def cli_client(monkeypatch: pytest.MonkeyPatch) -> FakeProviderClient:
    client = FakeProviderClient()
    ctx = ProviderContext(client=client, account_sid="AC123")
    monkeypatch.setattr(main_module, "build_provider_context", lambda: ctx)
    return client


def _run(argv: list[str], capsys: pytest.CaptureFixture[str]) -> object:
    main_module.main(argv)
    return json.loads(capsys.readouterr().out)


def test_lookup_prints_resolved_record(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    seed(cli_client, [incoming_number("PN1", "+14155550100", friendly_name="Support")])

    output = _run(["lookup", "phone-number", "--number", "+14155550100"], capsys)

    assert isinstance(output, dict)
    assert output["kind"] == "phone_number"
    assert output["id"] == "PN1"
    assert output["friendly_name"] == "Support"
    assert cli_client.calls[0] == (
        "list_incoming_numbers",
        ({"PhoneNumber": "+14155550100", "PageSize": "50"},),
    )


def test_lookup_redacts_subaccount_auth_token(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_client.listings["accounts"] = [account("AC9", "Team", auth_token="plain-token")]

    main_module.main(["lookup", "subaccount", "--friendly-name", "Team"])
    raw = capsys.readouterr().out

    assert "plain-token" not in raw
    assert json.loads(raw)["auth_token"] == "(sensitive)"


def test_import_reads_by_identifier(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_client.accounts["AC9"] = account("AC9", "Team")

    output = _run(["import", "subaccount", "AC9"], capsys)

    assert isinstance(output, dict)
    assert output["id"] == "AC9"
    assert output["status"] == "active"
    assert cli_client.method_names() == ["get_account"]


def test_available_lists_candidates(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_client.available = [available_number("+14155550100"), available_number("+14155550101")]

    output = _run(["available", "--country-code", "US", "--area-code", "415"], capsys)

    assert isinstance(output, list)
    assert [item["phone_number"] for item in output] == ["+14155550100", "+14155550101"]
    assert cli_client.calls == [("search_available_numbers", ("US", {"AreaCode": "415"}))]


def test_lookup_without_criteria_exits_with_usage_error(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "phone-number"])

    assert excinfo.value.code == 2
    assert "'number' and/or 'friendly_name' must be specified" in capsys.readouterr().err
    assert cli_client.calls == []


def test_remote_failure_exits_with_error(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_client.fail_with("get_key", ProviderErrorKind.TRANSIENT, "service unavailable")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["import", "api-key", "SK1"])

    assert excinfo.value.code == 1
    assert "service unavailable" in capsys.readouterr().err


def test_available_requires_country_code(
    cli_client: FakeProviderClient, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["available", "--country-code", ""])

    assert excinfo.value.code == 2
    assert "country code" in capsys.readouterr().err
    assert cli_client.calls == []


def test_search_available_numbers_rejects_blank_country_code() -> None:
    with pytest.raises(LookupValidationError) as excinfo:
        main_module.search_available_numbers("")

    assert excinfo.value.field == "country_code"
