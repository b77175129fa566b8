"""Attribute codec: declared records to request parameters and back.

``encode`` is sparse: only attributes that are *present* on the record are
sent, so an explicit ``""``, ``False`` or ``0`` reaches the API (clearing or
disabling the remote value) while an undeclared attribute is left alone.

``decode`` is total: every attribute of the kind's schema either has a decode
rule or is listed in ``LOCAL_ONLY`` (operator input the API never echoes).
Composite attributes always decode to exactly one complete mapping because the
remote representation has no notion of an absent sub-object.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from twiliform.adapters.twilio.schema import (
    Account,
    ApiKey,
    IncomingPhoneNumber,
    MessagingService,
)
from twiliform.domain.errors import FieldTypeError, MappingError
from twiliform.domain.model import (
    API_KEY_SCHEMA,
    MESSAGING_SERVICE_SCHEMA,
    PHONE_NUMBER_SCHEMA,
    SUBACCOUNT_SCHEMA,
    FieldSpec,
    ResourceKind,
)

from .timestamps import normalize_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from twiliform.domain.model import ResourceSchema

    from .ports import ConfigurationStore

log = getLogger(__name__)

type Mutation = tuple[str, object]
type RemoteObject = IncomingPhoneNumber | MessagingService | Account | ApiKey


SCALAR_PARAMS: dict[ResourceKind, dict[str, str]] = {
    ResourceKind.PHONE_NUMBER: {
        "friendly_name": "FriendlyName",
        "address_sid": "AddressSid",
        "trunk_sid": "TrunkSid",
        "identity_sid": "IdentitySid",
    },
    ResourceKind.MESSAGING_SERVICE: {
        "friendly_name": "FriendlyName",
        "inbound_request_url": "InboundRequestUrl",
        "inbound_method": "InboundMethod",
        "fallback_url": "FallbackUrl",
        "fallback_method": "FallbackMethod",
        "status_callback": "StatusCallback",
        "sticky_sender": "StickySender",
        "mms_converter": "MmsConverter",
        "smart_encoding": "SmartEncoding",
        "fallback_to_long_code": "FallbackToLongCode",
        "area_code_geomatch": "AreaCodeGeomatch",
        "validity_period": "ValidityPeriod",
        "synchronous_validation": "SynchronousValidation",
    },
    # Status is driven by the subaccount controller, never by a create.
    ResourceKind.SUBACCOUNT: {"friendly_name": "FriendlyName"},
    ResourceKind.API_KEY: {"friendly_name": "FriendlyName"},
}

COMPOSITE_PARAMS: dict[ResourceKind, dict[str, dict[str, str]]] = {
    ResourceKind.PHONE_NUMBER: {
        "sms": {
            "application_sid": "SmsApplicationSid",
            "fallback_url": "SmsFallbackUrl",
            "fallback_http_method": "SmsFallbackMethod",
            "primary_http_method": "SmsMethod",
            "primary_url": "SmsUrl",
        },
        "voice": {
            "application_sid": "VoiceApplicationSid",
            "fallback_url": "VoiceFallbackUrl",
            "fallback_http_method": "VoiceFallbackMethod",
            "primary_http_method": "VoiceMethod",
            "primary_url": "VoiceUrl",
            "caller_id_enabled": "VoiceCallerIdLookup",
            "receive_mode": "VoiceReceiveMode",
        },
        "status_callback": {
            "http_method": "StatusCallbackMethod",
            "url": "StatusCallback",
        },
        "emergency": {
            "status": "EmergencyStatus",
            "address_sid": "EmergencyAddressSid",
        },
    },
}

LOCAL_ONLY: dict[ResourceKind, frozenset[str]] = {
    ResourceKind.PHONE_NUMBER: frozenset({"search", "area_code", "country_code", "service_sid"}),
    ResourceKind.MESSAGING_SERVICE: frozenset(),
    ResourceKind.SUBACCOUNT: frozenset(),
    ResourceKind.API_KEY: frozenset(),
}


def to_wire(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode(record: ConfigurationStore, kind: ResourceKind) -> dict[str, str]:
    """Return request parameters for every present, declarable attribute."""

    params: dict[str, str] = {}
    for name, param in SCALAR_PARAMS[kind].items():
        value, present = record.get_ok(name)
        if present:
            params[param] = to_wire(value)

    for name, table in COMPOSITE_PARAMS.get(kind, {}).items():
        value, present = record.get_ok(name)
        if not present:
            continue
        composite: Mapping[str, object] = value  # type: ignore[assignment]
        for sub_name, param in table.items():
            if sub_name in composite:
                params[param] = to_wire(composite[sub_name])

    if "EmergencyStatus" in params:
        # Accepted case-insensitively from operators; the API wants Active/Inactive.
        params["EmergencyStatus"] = params["EmergencyStatus"].capitalize()
    return params


def decode(kind: ResourceKind, remote: RemoteObject) -> list[Mutation]:
    """Return the record assignments implied by ``remote``, in schema order."""

    decoder = _DECODERS[kind]
    return decoder(remote)


def apply_decoded(record: ConfigurationStore, kind: ResourceKind, remote: RemoteObject) -> None:
    """Decode ``remote`` into ``record``.

    Every mutation is checked before any is assigned; the first one that does not
    fit raises ``MappingError`` and leaves the record untouched.
    """

    mutations = decode(kind, remote)
    checker: Callable[[str, object], None] | None = getattr(record, "check", None)
    if checker is not None:
        for name, value in mutations:
            try:
                checker(name, value)
            except FieldTypeError as exc:
                log.error("Failed to map %s %s: %s", kind, remote.sid, exc)
                raise MappingError(
                    f"Cannot map remote value: {exc}",
                    kind=kind,
                    identifier=remote.sid,
                    field=exc.field,
                ) from exc
    for name, value in mutations:
        try:
            record.set(name, value)
        except FieldTypeError as exc:
            raise MappingError(
                f"Cannot map remote value: {exc}",
                kind=kind,
                identifier=remote.sid,
                field=exc.field,
            ) from exc


def _scalar(schema: ResourceSchema, name: str, value: object | None) -> Mutation:
    return name, value if value is not None else schema.scalar(name).fallback


def _composite(schema: ResourceSchema, name: str, values: Mapping[str, object | None]) -> Mutation:
    spec = schema.composite(name)
    merged: dict[str, object] = {}
    for sub in spec.fields:
        value = values.get(sub.name)
        merged[sub.name] = value if value is not None else sub.fallback
    return name, merged


def _timestamps(schema: ResourceSchema, remote: RemoteObject) -> list[Mutation]:
    mutations: list[Mutation] = []
    for spec in schema:
        if not isinstance(spec, FieldSpec) or not spec.timestamp:
            continue
        name = spec.name
        raw: str | None = getattr(remote, name, None)
        normalized = normalize_timestamp(raw)
        if normalized is None:
            if raw:
                log.debug("Ignoring unparsable %s value %r", name, raw)
            continue
        mutations.append((name, normalized))
    return mutations


def _expect[M: RemoteObject](payload: RemoteObject, model: type[M]) -> M:
    if not isinstance(payload, model):
        raise MappingError(
            f"Expected {model.__name__} payload, got {type(payload).__name__}",
            identifier=payload.sid,
        )
    return payload


def _decode_phone_number(payload: RemoteObject) -> list[Mutation]:
    remote = _expect(payload, IncomingPhoneNumber)
    schema = PHONE_NUMBER_SCHEMA
    capabilities = remote.capabilities
    return [
        ("sid", remote.sid),
        ("number", remote.phone_number),
        _scalar(schema, "friendly_name", remote.friendly_name),
        *_timestamps(schema, remote),
        _scalar(schema, "address_requirements", remote.address_requirements),
        ("is_beta", remote.beta),
        ("is_mms_capable", capabilities.mms),
        ("is_sms_capable", capabilities.sms),
        ("is_voice_capable", capabilities.voice),
        ("is_fax_capable", capabilities.fax),
        _scalar(schema, "address_sid", remote.address_sid),
        _scalar(schema, "trunk_sid", remote.trunk_sid),
        _scalar(schema, "identity_sid", remote.identity_sid),
        _composite(
            schema,
            "sms",
            {
                "application_sid": remote.sms_application_sid,
                "primary_http_method": remote.sms_method,
                "primary_url": remote.sms_url,
                "fallback_http_method": remote.sms_fallback_method,
                "fallback_url": remote.sms_fallback_url,
            },
        ),
        _composite(
            schema,
            "voice",
            {
                "application_sid": remote.voice_application_sid,
                "primary_http_method": remote.voice_method,
                "primary_url": remote.voice_url,
                "fallback_http_method": remote.voice_fallback_method,
                "fallback_url": remote.voice_fallback_url,
                "caller_id_enabled": remote.voice_caller_id_lookup,
                "receive_mode": remote.voice_receive_mode,
            },
        ),
        _composite(
            schema,
            "status_callback",
            {"url": remote.status_callback, "http_method": remote.status_callback_method},
        ),
        _composite(
            schema,
            "emergency",
            {"status": remote.emergency_status, "address_sid": remote.emergency_address_sid},
        ),
    ]


def _decode_messaging_service(payload: RemoteObject) -> list[Mutation]:
    remote = _expect(payload, MessagingService)
    schema = MESSAGING_SERVICE_SCHEMA
    return [
        ("sid", remote.sid),
        _scalar(schema, "account_sid", remote.account_sid),
        _scalar(schema, "friendly_name", remote.friendly_name),
        *_timestamps(schema, remote),
        _scalar(schema, "inbound_request_url", remote.inbound_request_url),
        _scalar(schema, "inbound_method", remote.inbound_method),
        _scalar(schema, "fallback_url", remote.fallback_url),
        _scalar(schema, "fallback_method", remote.fallback_method),
        _scalar(schema, "status_callback", remote.status_callback),
        _scalar(schema, "sticky_sender", remote.sticky_sender),
        _scalar(schema, "mms_converter", remote.mms_converter),
        _scalar(schema, "smart_encoding", remote.smart_encoding),
        _scalar(schema, "fallback_to_long_code", remote.fallback_to_long_code),
        _scalar(schema, "area_code_geomatch", remote.area_code_geomatch),
        _scalar(schema, "synchronous_validation", remote.synchronous_validation),
        _scalar(schema, "validity_period", remote.validity_period),
    ]


def _decode_subaccount(payload: RemoteObject) -> list[Mutation]:
    remote = _expect(payload, Account)
    schema = SUBACCOUNT_SCHEMA
    mutations: list[Mutation] = [
        ("sid", remote.sid),
        _scalar(schema, "parent_account_sid", remote.owner_account_sid),
        _scalar(schema, "friendly_name", remote.friendly_name),
        _scalar(schema, "status", remote.status),
        *_timestamps(schema, remote),
    ]
    if remote.auth_token is not None:
        mutations.append(("auth_token", remote.auth_token))
    return mutations


def _decode_api_key(payload: RemoteObject) -> list[Mutation]:
    remote = _expect(payload, ApiKey)
    schema = API_KEY_SCHEMA
    mutations: list[Mutation] = [
        ("sid", remote.sid),
        # Twilio generates a name when none was given.
        _scalar(schema, "friendly_name", remote.friendly_name),
        *_timestamps(schema, remote),
    ]
    # The secret is only ever returned by the create call.
    if remote.secret is not None:
        mutations.append(("secret", remote.secret))
    return mutations


_DECODERS: dict[ResourceKind, Callable[[RemoteObject], list[Mutation]]] = {
    ResourceKind.PHONE_NUMBER: _decode_phone_number,
    ResourceKind.MESSAGING_SERVICE: _decode_messaging_service,
    ResourceKind.SUBACCOUNT: _decode_subaccount,
    ResourceKind.API_KEY: _decode_api_key,
}
