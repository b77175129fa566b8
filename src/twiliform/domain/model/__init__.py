"""Declared-resource model: records, attribute schemas and enums."""

from __future__ import annotations

from .enums import (
    DeletionOutcome,
    FieldType,
    LifecycleState,
    ResourceKind,
    SelectionPolicy,
)
from .fields import AttributeSpec, CompositeSpec, FieldSpec, ResourceSchema
from .record import REDACTED, ResourceRecord
from .schemas import (
    API_KEY_SCHEMA,
    MESSAGING_SERVICE_SCHEMA,
    PHONE_NUMBER_SCHEMA,
    SUBACCOUNT_SCHEMA,
    schema_for,
)

__all__ = [
    "API_KEY_SCHEMA",
    "MESSAGING_SERVICE_SCHEMA",
    "PHONE_NUMBER_SCHEMA",
    "REDACTED",
    "SUBACCOUNT_SCHEMA",
    "AttributeSpec",
    "CompositeSpec",
    "DeletionOutcome",
    "FieldSpec",
    "FieldType",
    "LifecycleState",
    "ResourceKind",
    "ResourceRecord",
    "ResourceSchema",
    "SelectionPolicy",
    "schema_for",
]
