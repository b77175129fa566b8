"""Twilio REST API client.

Implements the ``ProviderClient`` port against the 2010-04-01 core API
(accounts, incoming and available phone numbers, keys) and the Messaging v1
API (services and their phone-number pool). Requests are form-encoded and
authenticated with HTTP basic auth using the parent account credentials.

Every failure is raised as ``ProviderError`` with a ``ProviderErrorKind`` so
callers never have to inspect message text.
"""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from twiliform.adapters.http_resilience import ResilientClient
from twiliform.config.twilio import TWILIO_API_VERSION
from twiliform.reconciliation.ports import ProviderError, ProviderErrorKind

from .schema import (
    Account,
    AccountsPage,
    ApiKey,
    AvailablePhoneNumber,
    AvailablePhoneNumbersPage,
    ErrorResponse,
    IncomingPhoneNumber,
    IncomingPhoneNumbersPage,
    MessagingService,
    MessagingServicesPage,
    ServicePhoneNumber,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from twiliform.config.http_resilience import ResilienceConfig
    from twiliform.config.twilio import TwilioConfig
    from twiliform.reconciliation.ports import RequestParams

log = getLogger(__name__)

ERROR_CODE_NOT_FOUND = 20404
ERROR_CODE_ALREADY_IN_SERVICE = 21710
ALREADY_IN_SERVICE_MESSAGE = "already in the messaging service"

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]


def classify_error(
    status: int,
    payload: ErrorResponse,
    *,
    association: bool = False,
) -> ProviderErrorKind:
    """Map an HTTP status and Twilio error body to a ``ProviderErrorKind``.

    ``association`` marks requests addressing a service's phone-number pool, where
    a missing object means the number is not in the pool.
    """

    if payload.code == ERROR_CODE_ALREADY_IN_SERVICE:
        return ProviderErrorKind.ALREADY_ASSOCIATED
    if ALREADY_IN_SERVICE_MESSAGE in payload.message.lower():
        return ProviderErrorKind.ALREADY_ASSOCIATED
    if status == httpx.codes.NOT_FOUND or payload.code == ERROR_CODE_NOT_FOUND:
        return ProviderErrorKind.NOT_ASSOCIATED if association else ProviderErrorKind.NOT_FOUND
    if status == httpx.codes.TOO_MANY_REQUESTS or status >= httpx.codes.INTERNAL_SERVER_ERROR:
        return ProviderErrorKind.TRANSIENT
    return ProviderErrorKind.REJECTED


def error_from_response(response: httpx.Response, *, association: bool = False) -> ProviderError:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except (json.JSONDecodeError, ValidationError):
        payload = ErrorResponse(message=response.text.strip())
    message = payload.message or response.reason_phrase or f"HTTP {response.status_code}"
    kind = classify_error(response.status_code, payload, association=association)
    return ProviderError(message, kind=kind, status=response.status_code, code=payload.code)


class TwilioClient:
    """Synchronous facade over the async Twilio API calls."""

    def __init__(
        self,
        *,
        config: TwilioConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or self._default_client_factory
        self._api_root = (
            f"{config.api_base_url}/{TWILIO_API_VERSION}/Accounts/{config.account_sid}"
        )
        self._messaging_root = f"{config.messaging_base_url}/v1/Services"

    @classmethod
    def from_config(cls, config: TwilioConfig) -> TwilioClient:
        return cls(config=config)

    def _default_client_factory(self, resilience: ResilienceConfig) -> ResilientClient:
        auth = httpx.BasicAuth(self._config.account_sid, self._config.auth_token)
        return ResilientClient(resilience, auth=auth)

    # phone numbers

    def search_available_numbers(
        self, country_code: str, filters: RequestParams
    ) -> list[AvailablePhoneNumber]:
        url = f"{self._api_root}/AvailablePhoneNumbers/{country_code}/Local.json"
        page = self._call("GET", url, AvailablePhoneNumbersPage, params=filters)
        return page.available_phone_numbers

    def create_incoming_number(self, params: RequestParams) -> IncomingPhoneNumber:
        url = f"{self._api_root}/IncomingPhoneNumbers.json"
        return self._call("POST", url, IncomingPhoneNumber, data=params)

    def get_incoming_number(self, sid: str) -> IncomingPhoneNumber:
        url = f"{self._api_root}/IncomingPhoneNumbers/{sid}.json"
        return self._call("GET", url, IncomingPhoneNumber)

    def update_incoming_number(self, sid: str, params: RequestParams) -> IncomingPhoneNumber:
        url = f"{self._api_root}/IncomingPhoneNumbers/{sid}.json"
        return self._call("POST", url, IncomingPhoneNumber, data=params)

    def release_incoming_number(self, sid: str) -> None:
        self._call_no_content("DELETE", f"{self._api_root}/IncomingPhoneNumbers/{sid}.json")

    def list_incoming_numbers(self, filters: RequestParams) -> list[IncomingPhoneNumber]:
        url = f"{self._api_root}/IncomingPhoneNumbers.json"
        page = self._call("GET", url, IncomingPhoneNumbersPage, params=filters)
        return page.incoming_phone_numbers

    # messaging services

    def create_messaging_service(self, params: RequestParams) -> MessagingService:
        return self._call("POST", self._messaging_root, MessagingService, data=params)

    def get_messaging_service(self, sid: str) -> MessagingService:
        return self._call("GET", f"{self._messaging_root}/{sid}", MessagingService)

    def update_messaging_service(self, sid: str, params: RequestParams) -> MessagingService:
        url = f"{self._messaging_root}/{sid}"
        return self._call("POST", url, MessagingService, data=params)

    def delete_messaging_service(self, sid: str) -> None:
        self._call_no_content("DELETE", f"{self._messaging_root}/{sid}")

    def list_messaging_services(self, filters: RequestParams) -> list[MessagingService]:
        page = self._call("GET", self._messaging_root, MessagingServicesPage, params=filters)
        return page.services

    def add_service_phone_number(
        self, service_sid: str, phone_number_sid: str
    ) -> ServicePhoneNumber:
        url = f"{self._messaging_root}/{service_sid}/PhoneNumbers"
        return self._call(
            "POST",
            url,
            ServicePhoneNumber,
            data={"PhoneNumberSid": phone_number_sid},
        )

    def remove_service_phone_number(self, service_sid: str, phone_number_sid: str) -> None:
        url = f"{self._messaging_root}/{service_sid}/PhoneNumbers/{phone_number_sid}"
        self._call_no_content("DELETE", url, association=True)

    def get_service_phone_number(
        self, service_sid: str, phone_number_sid: str
    ) -> ServicePhoneNumber:
        url = f"{self._messaging_root}/{service_sid}/PhoneNumbers/{phone_number_sid}"
        return self._call("GET", url, ServicePhoneNumber, association=True)

    # subaccounts

    def create_account(self, params: RequestParams) -> Account:
        url = f"{self._config.api_base_url}/{TWILIO_API_VERSION}/Accounts.json"
        return self._call("POST", url, Account, data=params)

    def get_account(self, sid: str) -> Account:
        url = f"{self._config.api_base_url}/{TWILIO_API_VERSION}/Accounts/{sid}.json"
        return self._call("GET", url, Account)

    def update_account(self, sid: str, params: RequestParams) -> Account:
        url = f"{self._config.api_base_url}/{TWILIO_API_VERSION}/Accounts/{sid}.json"
        return self._call("POST", url, Account, data=params)

    def list_accounts(self, filters: RequestParams) -> list[Account]:
        url = f"{self._config.api_base_url}/{TWILIO_API_VERSION}/Accounts.json"
        page = self._call("GET", url, AccountsPage, params=filters)
        return page.accounts

    # api keys

    def create_key(self, params: RequestParams) -> ApiKey:
        return self._call("POST", f"{self._api_root}/Keys.json", ApiKey, data=params)

    def get_key(self, sid: str) -> ApiKey:
        return self._call("GET", f"{self._api_root}/Keys/{sid}.json", ApiKey)

    def delete_key(self, sid: str) -> None:
        self._call_no_content("DELETE", f"{self._api_root}/Keys/{sid}.json")

    # plumbing

    def _call[M: BaseModel](
        self,
        method: str,
        url: str,
        model: type[M],
        *,
        params: RequestParams | None = None,
        data: RequestParams | None = None,
        association: bool = False,
    ) -> M:
        response = asyncio.run(
            self._request_async(method, url, params=params, data=data, association=association)
        )
        try:
            return model.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as exc:
            log.error("Malformed %s response from %s %s: %s", model.__name__, method, url, exc)
            raise ProviderError(
                f"Malformed {model.__name__} response: {exc}",
                kind=ProviderErrorKind.MALFORMED_RESPONSE,
                status=response.status_code,
            ) from exc

    def _call_no_content(self, method: str, url: str, *, association: bool = False) -> None:
        asyncio.run(self._request_async(method, url, association=association))

    async def _request_async(
        self,
        method: str,
        url: str,
        *,
        params: RequestParams | None = None,
        data: RequestParams | None = None,
        association: bool = False,
    ) -> httpx.Response:
        log.debug("Twilio %s %s (account %s)", method, url, self._config.account_sid)
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.request(
                    method,
                    url,
                    params=dict(params) if params else None,
                    data=dict(data) if data is not None else None,
                )
            except httpx.TransportError as exc:
                log.error("Twilio %s %s failed: %s", method, url, exc)
                raise ProviderError(
                    f"{method} {url} failed: {exc}",
                    kind=ProviderErrorKind.TRANSIENT,
                ) from exc

        if response.is_error:
            error = error_from_response(response, association=association)
            log.error(
                "Twilio %s %s returned %s (code %s, %s): %s",
                method,
                url,
                response.status_code,
                error.code,
                error.kind,
                error.message,
            )
            raise error
        return response
