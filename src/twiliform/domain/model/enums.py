"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    PHONE_NUMBER = "phone_number"
    MESSAGING_SERVICE = "messaging_service"
    SUBACCOUNT = "subaccount"
    API_KEY = "api_key"


class LifecycleState(StrEnum):
    """Where a declared record sits in its create/read/update/delete lifecycle."""

    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"
    UPDATING = "updating"
    DELETING = "deleting"
    # Terminal for kinds whose delete is a status transition: the remote object
    # still exists and stays readable.
    CLOSED = "closed"


class DeletionOutcome(StrEnum):
    REMOVED = "removed"
    CLOSED = "closed"


class SelectionPolicy(StrEnum):
    """How a single candidate is chosen when several satisfy a query."""

    TAKE_FIRST = "take_first"
    FAIL_ON_MULTIPLE = "fail_on_multiple"


class FieldType(StrEnum):
    STRING = "string"
    BOOL = "bool"
    INT = "int"
