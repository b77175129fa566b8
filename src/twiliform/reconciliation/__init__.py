"""Reconciliation core: codec, lookups, lifecycle controllers and associations."""

from __future__ import annotations

from .association import AssociationManager, AssociationOutcome
from .codec import apply_decoded, decode, encode
from .context import ProviderContext
from .ports import ConfigurationStore, ProviderClient, ProviderError, ProviderErrorKind
from .resolver import LookupQuery, import_resource, resolve
from .resources import (
    ApiKeyController,
    MessagingServiceController,
    PhoneNumberController,
    ResourceController,
    SubaccountController,
    controller_for,
)

__all__ = [
    "ApiKeyController",
    "AssociationManager",
    "AssociationOutcome",
    "ConfigurationStore",
    "LookupQuery",
    "MessagingServiceController",
    "PhoneNumberController",
    "ProviderClient",
    "ProviderContext",
    "ProviderError",
    "ProviderErrorKind",
    "ResourceController",
    "SubaccountController",
    "apply_decoded",
    "controller_for",
    "decode",
    "encode",
    "import_resource",
    "resolve",
]
