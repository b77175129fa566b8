"""Pydantic models describing the Twilio REST API payloads.

Timestamps are kept as the raw strings the API returns: the 2010-04-01 API
uses RFC 2822 dates, the Messaging v1 API uses ISO 8601. Normalising them is
the codec's job, and an unparsable date must not fail payload validation.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class TwilioBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PhoneNumberCapabilities(TwilioBaseModel):
    voice: bool = False
    sms: bool = Field(default=False, validation_alias=AliasChoices("sms", "SMS"))
    mms: bool = Field(default=False, validation_alias=AliasChoices("mms", "MMS"))
    fax: bool = False


class IncomingPhoneNumber(TwilioBaseModel):
    sid: str
    account_sid: str | None = None
    phone_number: str
    friendly_name: str | None = None
    date_created: str | None = None
    date_updated: str | None = None
    address_requirements: str | None = None
    beta: bool = False
    capabilities: PhoneNumberCapabilities = Field(default_factory=PhoneNumberCapabilities)

    voice_application_sid: str | None = None
    voice_url: str | None = None
    voice_method: str | None = None
    voice_fallback_url: str | None = None
    voice_fallback_method: str | None = None
    voice_caller_id_lookup: bool | None = None
    voice_receive_mode: str | None = None

    sms_application_sid: str | None = None
    sms_url: str | None = None
    sms_method: str | None = None
    sms_fallback_url: str | None = None
    sms_fallback_method: str | None = None

    status_callback: str | None = None
    status_callback_method: str | None = None

    trunk_sid: str | None = None
    identity_sid: str | None = None
    address_sid: str | None = None
    emergency_status: str | None = None
    emergency_address_sid: str | None = None

    _normalize_sids = field_validator(
        "voice_application_sid",
        "sms_application_sid",
        "trunk_sid",
        "identity_sid",
        "address_sid",
        "emergency_address_sid",
        mode="before",
    )(_blank_to_none)


class AvailablePhoneNumber(TwilioBaseModel):
    phone_number: str
    friendly_name: str | None = None
    locality: str | None = None
    region: str | None = None
    postal_code: str | None = None
    iso_country: str | None = None
    address_requirements: str | None = None
    beta: bool = False
    capabilities: PhoneNumberCapabilities = Field(default_factory=PhoneNumberCapabilities)


class AvailablePhoneNumbersPage(TwilioBaseModel):
    available_phone_numbers: list[AvailablePhoneNumber] = Field(default_factory=list)


class IncomingPhoneNumbersPage(TwilioBaseModel):
    incoming_phone_numbers: list[IncomingPhoneNumber] = Field(default_factory=list)
    page: int = 0
    page_size: int | None = None
    next_page_uri: str | None = None


class MessagingService(TwilioBaseModel):
    sid: str
    account_sid: str | None = None
    friendly_name: str | None = None
    date_created: str | None = None
    date_updated: str | None = None
    inbound_request_url: str | None = None
    inbound_method: str | None = None
    fallback_url: str | None = None
    fallback_method: str | None = None
    status_callback: str | None = None
    sticky_sender: bool | None = None
    mms_converter: bool | None = None
    smart_encoding: bool | None = None
    fallback_to_long_code: bool | None = None
    area_code_geomatch: bool | None = None
    synchronous_validation: bool | None = None
    validity_period: int | None = None


class PageMeta(TwilioBaseModel):
    page: int = 0
    page_size: int | None = None
    next_page_url: str | None = None
    key: str | None = None


class MessagingServicesPage(TwilioBaseModel):
    services: list[MessagingService] = Field(default_factory=list)
    meta: PageMeta | None = None


class ServicePhoneNumber(TwilioBaseModel):
    sid: str
    service_sid: str
    account_sid: str | None = None
    phone_number: str | None = None
    country_code: str | None = None
    capabilities: list[str] = Field(default_factory=list)
    date_created: str | None = None
    date_updated: str | None = None


class Account(TwilioBaseModel):
    sid: str
    owner_account_sid: str | None = None
    friendly_name: str | None = None
    status: str | None = None
    auth_token: str | None = None
    type: str | None = None
    date_created: str | None = None
    date_updated: str | None = None


class AccountsPage(TwilioBaseModel):
    accounts: list[Account] = Field(default_factory=list)
    page: int = 0
    next_page_uri: str | None = None


class ApiKey(TwilioBaseModel):
    sid: str
    friendly_name: str | None = None
    date_created: str | None = None
    date_updated: str | None = None
    # Only present in the response to a create.
    secret: str | None = None


class ErrorResponse(TwilioBaseModel):
    code: int | None = None
    message: str = ""
    more_info: str | None = None
    status: int | None = None
