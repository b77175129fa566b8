"""Lifecycle controllers, one per resource kind."""

from __future__ import annotations

from typing import TYPE_CHECKING

from twiliform.domain.model import ResourceKind

from .api_key import ApiKeyController
from .base import ResourceController
from .messaging_service import MessagingServiceController
from .phone_number import PhoneNumberController
from .subaccount import SubaccountController

if TYPE_CHECKING:
    from ..context import ProviderContext

CONTROLLERS: dict[ResourceKind, type[ResourceController]] = {
    ResourceKind.PHONE_NUMBER: PhoneNumberController,
    ResourceKind.MESSAGING_SERVICE: MessagingServiceController,
    ResourceKind.SUBACCOUNT: SubaccountController,
    ResourceKind.API_KEY: ApiKeyController,
}


def controller_for(kind: ResourceKind, ctx: ProviderContext) -> ResourceController:
    return CONTROLLERS[kind](ctx)


__all__ = [
    "CONTROLLERS",
    "ApiKeyController",
    "MessagingServiceController",
    "PhoneNumberController",
    "ResourceController",
    "SubaccountController",
    "controller_for",
]
