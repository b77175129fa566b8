from __future__ import annotations

import pytest

from tests.helpers.provider import (
    ACCOUNT_SID,
    FakeProviderClient,
    account,
    incoming_number,
    messaging_service,
)
from twiliform.domain.errors import (
    AmbiguousLookupError,
    LookupNotFoundError,
    LookupValidationError,
    RemoteObjectMissingError,
)
from twiliform.domain.model import ResourceKind, SelectionPolicy
from twiliform.reconciliation import ProviderContext, ProviderErrorKind, import_resource, resolve


def _three_numbers(client: FakeProviderClient) -> None:
    client.listings["incoming_numbers"] = [
        incoming_number("PN1", "+14155550101", friendly_name="Support"),
        incoming_number("PN2", "+14155550102", friendly_name="Sales"),
        incoming_number("PN3", "+14155550103", friendly_name="Support"),
    ]


def test_number_only_query_returns_matching_candidate(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    _three_numbers(fake_client)

    record = resolve(ResourceKind.PHONE_NUMBER, {"number": "+14155550102"}, ctx)

    assert record.id == "PN2"
    assert record.get("friendly_name") == "Sales"
    assert fake_client.calls == [
        ("list_incoming_numbers", ({"PhoneNumber": "+14155550102", "PageSize": "50"},)),
    ]


def test_number_only_miss_mentions_number_not_friendly_name(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    _three_numbers(fake_client)

    with pytest.raises(LookupNotFoundError) as excinfo:
        resolve(ResourceKind.PHONE_NUMBER, {"number": "+19995550000"}, ctx)

    message = str(excinfo.value)
    assert "number" in message
    assert "friendly_name" not in message
    assert "friendly name" not in message


def test_name_only_miss_mentions_friendly_name(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    _three_numbers(fake_client)

    with pytest.raises(LookupNotFoundError, match="friendly name: Marketing"):
        resolve(ResourceKind.PHONE_NUMBER, {"friendly_name": "Marketing"}, ctx)


def test_both_criteria_must_match(fake_client: FakeProviderClient, ctx: ProviderContext) -> None:
    _three_numbers(fake_client)

    with pytest.raises(LookupNotFoundError, match="number: .* and friendly name: Sales"):
        resolve(
            ResourceKind.PHONE_NUMBER,
            {"number": "+14155550101", "friendly_name": "Sales"},
            ctx,
        )


@pytest.mark.parametrize(
    "query",
    [{}, {"search": "555"}, {"number": "", "friendly_name": ""}],
)
def test_missing_required_criteria_fails_before_remote_call(
    fake_client: FakeProviderClient, ctx: ProviderContext, query: dict[str, str]
) -> None:
    with pytest.raises(LookupValidationError, match="'number' and/or 'friendly_name'"):
        resolve(ResourceKind.PHONE_NUMBER, query, ctx)

    assert fake_client.calls == []


def test_number_and_search_are_exclusive(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    with pytest.raises(LookupValidationError):
        resolve(ResourceKind.PHONE_NUMBER, {"number": "+1", "search": "555"}, ctx)

    assert fake_client.calls == []


def test_unknown_criterion_is_rejected(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    with pytest.raises(LookupValidationError) as excinfo:
        resolve(ResourceKind.MESSAGING_SERVICE, {"name": "Alerts"}, ctx)

    assert excinfo.value.field == "name"
    assert fake_client.calls == []


def test_take_first_selects_first_match_in_server_order(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    _three_numbers(fake_client)

    record = resolve(ResourceKind.PHONE_NUMBER, {"friendly_name": "Support"}, ctx)

    assert record.id == "PN1"


def test_fail_on_multiple_reports_ambiguity(fake_client: FakeProviderClient) -> None:
    _three_numbers(fake_client)
    strict = ProviderContext(
        client=fake_client,
        account_sid=ACCOUNT_SID,
        selection_policy=SelectionPolicy.FAIL_ON_MULTIPLE,
    )

    with pytest.raises(AmbiguousLookupError) as excinfo:
        resolve(ResourceKind.PHONE_NUMBER, {"friendly_name": "Support"}, strict)

    assert excinfo.value.candidates == ("PN1", "PN3")


def test_search_criterion_is_trusted_to_the_server(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    _three_numbers(fake_client)

    record = resolve(
        ResourceKind.PHONE_NUMBER, {"friendly_name": "Sales", "search": "0102"}, ctx
    )

    assert record.id == "PN2"
    _, (filters,) = fake_client.calls[0]
    assert filters == {"FriendlyName": "Sales", "PhoneNumber": "0102", "PageSize": "50"}


def test_messaging_service_is_matched_client_side(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    fake_client.listings["messaging_services"] = [
        messaging_service("MG1", "alerts"),
        messaging_service("MG2", "Alerts"),
    ]

    record = resolve(ResourceKind.MESSAGING_SERVICE, {"friendly_name": "Alerts"}, ctx)

    assert record.id == "MG2"
    assert fake_client.calls == [("list_messaging_services", ({"PageSize": "50"},))]


def test_subaccount_lookup_filters_on_status(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    fake_client.listings["accounts"] = [
        account("AC1", "Team", status="closed"),
        account("AC2", "Team", status="active"),
    ]

    record = resolve(ResourceKind.SUBACCOUNT, {"friendly_name": "Team", "status": "active"}, ctx)

    assert record.id == "AC2"
    assert record.get("parent_account_sid") == ACCOUNT_SID


def test_provider_failure_becomes_not_found(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    fake_client.fail_with("list_accounts", ProviderErrorKind.TRANSIENT, "upstream timeout")

    with pytest.raises(LookupNotFoundError, match="upstream timeout"):
        resolve(ResourceKind.SUBACCOUNT, {"friendly_name": "Team"}, ctx)


def test_api_keys_cannot_be_looked_up(ctx: ProviderContext) -> None:
    with pytest.raises(LookupValidationError):
        resolve(ResourceKind.API_KEY, {"friendly_name": "deploy"}, ctx)


def test_import_reads_by_identifier(
    fake_client: FakeProviderClient, ctx: ProviderContext
) -> None:
    fake_client.services["MG7"] = messaging_service("MG7", "Alerts", sticky_sender=True)

    record = import_resource(ResourceKind.MESSAGING_SERVICE, "MG7", ctx)

    assert record.id == "MG7"
    assert record.get("sticky_sender") is True
    assert not record.has_change("friendly_name")


def test_import_of_missing_object_raises(ctx: ProviderContext) -> None:
    with pytest.raises(RemoteObjectMissingError) as excinfo:
        import_resource(ResourceKind.API_KEY, "SK404", ctx)

    assert excinfo.value.identifier == "SK404"
