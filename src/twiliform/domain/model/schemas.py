"""Attribute schemas for every supported resource kind."""

from __future__ import annotations

from .enums import FieldType, ResourceKind
from .fields import CompositeSpec, FieldSpec, ResourceSchema

HTTP_METHODS = ("GET", "POST")


def _computed(
    name: str,
    type_: FieldType = FieldType.STRING,
    *,
    sensitive: bool = False,
    description: str = "",
) -> FieldSpec:
    return FieldSpec(
        name=name,
        type=type_,
        computed=True,
        sensitive=sensitive,
        description=description,
    )


def _timestamp(name: str, description: str) -> FieldSpec:
    return FieldSpec(name=name, computed=True, timestamp=True, description=description)


def _method(name: str, description: str) -> FieldSpec:
    return FieldSpec(name=name, default="POST", choices=HTTP_METHODS, description=description)


PHONE_NUMBER_SCHEMA = ResourceSchema(
    kind=ResourceKind.PHONE_NUMBER,
    fields=(
        _computed("sid", description="The unique identifier for this phone number."),
        FieldSpec("search", description="Look for this number sequence anywhere in the number."),
        FieldSpec("area_code", description="Look for a number within this area code."),
        FieldSpec(
            "country_code",
            description="Two letter ISO country code in which to search for a number.",
        ),
        _computed("number", description="The full phone number in E.164 format."),
        FieldSpec("friendly_name", description="A human-readable name for this number."),
        _timestamp("date_created", "When the phone number was purchased."),
        _timestamp("date_updated", "When the phone number was last updated."),
        FieldSpec("service_sid", description="SID of the messaging service using this number."),
        _computed("address_requirements", description="Address requirements, if any."),
        _computed("is_beta", FieldType.BOOL),
        _computed("is_mms_capable", FieldType.BOOL),
        _computed("is_sms_capable", FieldType.BOOL),
        _computed("is_voice_capable", FieldType.BOOL),
        _computed("is_fax_capable", FieldType.BOOL),
        FieldSpec("address_sid", description="SID of the address associated with the number."),
        FieldSpec("trunk_sid", description="SID of the voice trunk handling calls to the number."),
        FieldSpec("identity_sid", description="SID of the identity associated with the number."),
    ),
    composites=(
        CompositeSpec(
            "sms",
            fields=(
                FieldSpec("application_sid"),
                _method("primary_http_method", "HTTP method for the primary SMS URL."),
                FieldSpec("primary_url"),
                _method("fallback_http_method", "HTTP method for the fallback SMS URL."),
                FieldSpec("fallback_url"),
            ),
            description="Inbound SMS handling.",
        ),
        CompositeSpec(
            "voice",
            fields=(
                FieldSpec("application_sid"),
                _method("primary_http_method", "HTTP method for the primary voice URL."),
                FieldSpec("primary_url"),
                _method("fallback_http_method", "HTTP method for the fallback voice URL."),
                FieldSpec("fallback_url"),
                FieldSpec("caller_id_enabled", type=FieldType.BOOL),
                FieldSpec("receive_mode", default="voice", choices=("voice", "fax")),
            ),
            description="Inbound call handling.",
        ),
        CompositeSpec(
            "status_callback",
            fields=(
                FieldSpec("url"),
                _method("http_method", "HTTP method for the status callback URL."),
            ),
        ),
        CompositeSpec(
            "emergency",
            fields=(
                FieldSpec(
                    "status",
                    default="Active",
                    choices=("Active", "Inactive"),
                    case_sensitive_choices=False,
                ),
                FieldSpec("address_sid"),
            ),
            description="Emergency calling configuration.",
        ),
    ),
)

MESSAGING_SERVICE_SCHEMA = ResourceSchema(
    kind=ResourceKind.MESSAGING_SERVICE,
    fields=(
        _computed("sid"),
        _computed("account_sid"),
        FieldSpec("friendly_name"),
        _timestamp("date_created", "When the messaging service was created."),
        _timestamp("date_updated", "When the messaging service was last updated."),
        FieldSpec("inbound_request_url"),
        _method("inbound_method", "HTTP method used to call inbound_request_url."),
        FieldSpec("fallback_url"),
        _method("fallback_method", "HTTP method used to call fallback_url."),
        FieldSpec("status_callback"),
        FieldSpec("sticky_sender", type=FieldType.BOOL),
        FieldSpec("mms_converter", type=FieldType.BOOL),
        FieldSpec("smart_encoding", type=FieldType.BOOL),
        FieldSpec("fallback_to_long_code", type=FieldType.BOOL),
        FieldSpec("area_code_geomatch", type=FieldType.BOOL),
        FieldSpec("synchronous_validation", type=FieldType.BOOL),
        FieldSpec(
            "validity_period",
            type=FieldType.INT,
            default=14400,
            min_value=1,
            max_value=14400,
            description="Seconds a queued message stays valid.",
        ),
    ),
)

SUBACCOUNT_SCHEMA = ResourceSchema(
    kind=ResourceKind.SUBACCOUNT,
    fields=(
        _computed("sid"),
        _computed("parent_account_sid"),
        FieldSpec("friendly_name"),
        FieldSpec("status", default="active", choices=("active", "suspended", "closed")),
        _computed("auth_token", sensitive=True),
        _timestamp("date_created", "When the subaccount was created."),
        _timestamp("date_updated", "When the subaccount was last updated."),
    ),
)

API_KEY_SCHEMA = ResourceSchema(
    kind=ResourceKind.API_KEY,
    fields=(
        _computed("sid"),
        FieldSpec("friendly_name"),
        _computed("secret", sensitive=True),
        _timestamp("date_created", "When the key was created."),
        _timestamp("date_updated", "When the key was last updated."),
    ),
)

SCHEMAS: dict[ResourceKind, ResourceSchema] = {
    schema.kind: schema
    for schema in (
        PHONE_NUMBER_SCHEMA,
        MESSAGING_SERVICE_SCHEMA,
        SUBACCOUNT_SCHEMA,
        API_KEY_SCHEMA,
    )
}


def schema_for(kind: ResourceKind) -> ResourceSchema:
    return SCHEMAS[kind]
