from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from urllib.parse import parse_qs

import httpx
import pytest

from twiliform.adapters.http_resilience import ResilientClient
from twiliform.adapters.twilio.client import TwilioClient, classify_error
from twiliform.adapters.twilio.schema import ErrorResponse
from twiliform.config import ResilienceConfig, TwilioConfig
from twiliform.reconciliation import ProviderError, ProviderErrorKind

ACCOUNT_SID = "AC123"
CONFIG = TwilioConfig(account_sid=ACCOUNT_SID, auth_token="token")


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(
            resilience,
            auth=httpx.BasicAuth(ACCOUNT_SID, "token"),
            transport=httpx.MockTransport(async_handler),
        )

    return factory


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> TwilioClient:
    return TwilioClient(config=CONFIG, client_factory=_make_client_factory(handler))


def _form(request: httpx.Request) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


def test_create_incoming_number_posts_form() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            201,
            json={
                "sid": "PN1",
                "phone_number": "+14155550100",
                "friendly_name": "Support",
                "date_created": "Mon, 16 Aug 2010 23:00:23 +0000",
                "capabilities": {"voice": True, "SMS": True, "MMS": False, "fax": False},
                "voice_caller_id_lookup": False,
                "sms_application_sid": "",
            },
        )

    number = _client(handler).create_incoming_number(
        {"PhoneNumber": "+14155550100", "FriendlyName": "Support"}
    )

    assert number.sid == "PN1"
    assert number.capabilities.sms is True
    assert number.sms_application_sid is None
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == (
        f"https://api.twilio.com/2010-04-01/Accounts/{ACCOUNT_SID}/IncomingPhoneNumbers.json"
    )
    assert _form(request) == {"PhoneNumber": "+14155550100", "FriendlyName": "Support"}
    assert request.headers["Authorization"].startswith("Basic ")


def test_list_incoming_numbers_sends_filters_as_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "incoming_phone_numbers": [{"sid": "PN1", "phone_number": "+14155550100"}],
                "page": 0,
                "page_size": 50,
                "next_page_uri": None,
            },
        )

    numbers = _client(handler).list_incoming_numbers(
        {"PhoneNumber": "+14155550100", "PageSize": "50"}
    )

    assert [number.sid for number in numbers] == ["PN1"]
    assert seen[0].url.params["PhoneNumber"] == "+14155550100"
    assert seen[0].url.params["PageSize"] == "50"


def test_search_available_numbers_uses_local_endpoint() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == (
            f"/2010-04-01/Accounts/{ACCOUNT_SID}/AvailablePhoneNumbers/US/Local.json"
        )
        assert request.url.params["AreaCode"] == "415"
        return httpx.Response(
            200,
            json={"available_phone_numbers": [{"phone_number": "+14155550100"}]},
        )

    numbers = _client(handler).search_available_numbers("US", {"AreaCode": "415"})

    assert [number.phone_number for number in numbers] == ["+14155550100"]


def test_messaging_endpoints_use_messaging_host() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(
            201,
            json={"sid": "PN1", "service_sid": "MG1", "phone_number": "+14155550100"},
        )

    client = _client(handler)
    client.add_service_phone_number("MG1", "PN1")
    client.remove_service_phone_number("MG1", "PN1")

    assert [str(request.url) for request in seen] == [
        "https://messaging.twilio.com/v1/Services/MG1/PhoneNumbers",
        "https://messaging.twilio.com/v1/Services/MG1/PhoneNumbers/PN1",
    ]
    assert _form(seen[0]) == {"PhoneNumberSid": "PN1"}


def test_subaccount_close_posts_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/2010-04-01/Accounts/AC999.json"
        assert _form(request) == {"Status": "closed"}
        return httpx.Response(200, json={"sid": "AC999", "status": "closed"})

    assert _client(handler).update_account("AC999", {"Status": "closed"}).status == "closed"


@pytest.mark.parametrize(
    ("status", "body", "association", "expected"),
    [
        (404, {"code": 20404, "message": "not found"}, False, ProviderErrorKind.NOT_FOUND),
        (404, {"code": 20404, "message": "not found"}, True, ProviderErrorKind.NOT_ASSOCIATED),
        (
            409,
            {"code": 21710, "message": "Phone Number is already in the Messaging Service"},
            False,
            ProviderErrorKind.ALREADY_ASSOCIATED,
        ),
        (
            400,
            {"message": "Phone Number or Short Code is already in the Messaging Service."},
            False,
            ProviderErrorKind.ALREADY_ASSOCIATED,
        ),
        (429, {"code": 20429, "message": "Too Many Requests"}, False, ProviderErrorKind.TRANSIENT),
        (503, {"message": "unavailable"}, False, ProviderErrorKind.TRANSIENT),
        (400, {"code": 21452, "message": "No numbers"}, False, ProviderErrorKind.REJECTED),
    ],
)
def test_classify_error(
    status: int,
    body: dict[str, object],
    association: bool,
    expected: ProviderErrorKind,
) -> None:
    payload = ErrorResponse.model_validate(body)

    assert classify_error(status, payload, association=association) is expected


def test_api_error_is_raised_with_kind_and_code() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404,
            json={"code": 20404, "message": "The requested resource was not found", "status": 404},
        )

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).get_incoming_number("PN404")

    assert excinfo.value.kind is ProviderErrorKind.NOT_FOUND
    assert excinfo.value.code == 20404
    assert excinfo.value.status == 404
    assert "not found" in excinfo.value.message


def test_remove_missing_pool_member_is_not_associated() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"code": 20404, "message": "not found"})

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).remove_service_phone_number("MG1", "PN1")

    assert excinfo.value.kind is ProviderErrorKind.NOT_ASSOCIATED


def test_non_json_error_body_is_rejected() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="bad request")

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).delete_key("SK1")

    assert excinfo.value.kind is ProviderErrorKind.REJECTED
    assert excinfo.value.message == "bad request"


def test_transport_failure_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).get_key("SK1")

    assert excinfo.value.kind is ProviderErrorKind.TRANSIENT


def test_malformed_payload_is_reported() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"friendly_name": "missing sid"})

    with pytest.raises(ProviderError) as excinfo:
        _client(handler).get_messaging_service("MG1")

    assert excinfo.value.kind is ProviderErrorKind.MALFORMED_RESPONSE
