"""Ports consumed by the reconciliation core.

Two collaborators sit outside the core: the configuration store holding the
declared record, and the provider API client. Both are described structurally
so the host engine and the tests can supply their own implementations.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from twiliform.adapters.twilio.schema import (
        Account,
        ApiKey,
        AvailablePhoneNumber,
        IncomingPhoneNumber,
        MessagingService,
        ServicePhoneNumber,
    )

type RequestParams = Mapping[str, str]


class ProviderErrorKind(StrEnum):
    """Structured classification of a provider failure."""

    NOT_FOUND = "not_found"
    ALREADY_ASSOCIATED = "already_associated"
    NOT_ASSOCIATED = "not_associated"
    TRANSIENT = "transient"
    MALFORMED_RESPONSE = "malformed_response"
    REJECTED = "rejected"


class ProviderError(RuntimeError):
    """Raised by provider clients for every transport or API-level failure."""

    def __init__(
        self,
        message: str,
        *,
        kind: ProviderErrorKind = ProviderErrorKind.REJECTED,
        status: int | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status = status
        self.code = code


@runtime_checkable
class ConfigurationStore(Protocol):
    """Typed access to one declared record, as offered by the host engine."""

    @property
    def id(self) -> str: ...

    def set_id(self, sid: str) -> None: ...

    def get(self, name: str) -> object: ...

    def get_ok(self, name: str) -> tuple[object, bool]: ...

    def set(self, name: str, value: object) -> None: ...

    def get_change(self, name: str) -> tuple[object, object]: ...

    def has_change(self, name: str) -> bool: ...


@runtime_checkable
class ProviderClient(Protocol):
    """Typed request/response operations of the communications platform."""

    # phone numbers

    def search_available_numbers(
        self, country_code: str, filters: RequestParams
    ) -> list[AvailablePhoneNumber]: ...

    def create_incoming_number(self, params: RequestParams) -> IncomingPhoneNumber: ...

    def get_incoming_number(self, sid: str) -> IncomingPhoneNumber: ...

    def update_incoming_number(self, sid: str, params: RequestParams) -> IncomingPhoneNumber: ...

    def release_incoming_number(self, sid: str) -> None: ...

    def list_incoming_numbers(self, filters: RequestParams) -> list[IncomingPhoneNumber]: ...

    # messaging services

    def create_messaging_service(self, params: RequestParams) -> MessagingService: ...

    def get_messaging_service(self, sid: str) -> MessagingService: ...

    def update_messaging_service(self, sid: str, params: RequestParams) -> MessagingService: ...

    def delete_messaging_service(self, sid: str) -> None: ...

    def list_messaging_services(self, filters: RequestParams) -> list[MessagingService]: ...

    def add_service_phone_number(
        self, service_sid: str, phone_number_sid: str
    ) -> ServicePhoneNumber: ...

    def remove_service_phone_number(self, service_sid: str, phone_number_sid: str) -> None: ...

    def get_service_phone_number(
        self, service_sid: str, phone_number_sid: str
    ) -> ServicePhoneNumber: ...

    # subaccounts

    def create_account(self, params: RequestParams) -> Account: ...

    def get_account(self, sid: str) -> Account: ...

    def update_account(self, sid: str, params: RequestParams) -> Account: ...

    def list_accounts(self, filters: RequestParams) -> list[Account]: ...

    # api keys

    def create_key(self, params: RequestParams) -> ApiKey: ...

    def get_key(self, sid: str) -> ApiKey: ...

    def delete_key(self, sid: str) -> None: ...
