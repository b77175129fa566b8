"""Application entry points wiring configuration, the Twilio client and the core."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from twiliform.adapters.twilio.client import TwilioClient
from twiliform.config import get_reconcile_config, get_twilio_config
from twiliform.domain.errors import LookupValidationError, RemoteCallError
from twiliform.domain.model import ResourceKind
from twiliform.reconciliation import ProviderContext, ProviderError
from twiliform.reconciliation import import_resource as import_remote
from twiliform.reconciliation import resolve
from twiliform.reconciliation.resources.phone_number import availability_filters

if TYPE_CHECKING:
    from twiliform.adapters.twilio.schema import AvailablePhoneNumber
    from twiliform.config import ReconcileConfig, TwilioConfig
    from twiliform.domain.model import ResourceRecord
    from twiliform.reconciliation import LookupQuery

log = getLogger(__name__)


def build_provider_context(
    *,
    twilio_config: TwilioConfig | None = None,
    reconcile_config: ReconcileConfig | None = None,
) -> ProviderContext:
    twilio = twilio_config or get_twilio_config()
    reconcile = reconcile_config or get_reconcile_config()
    return ProviderContext(
        client=TwilioClient.from_config(twilio),
        account_sid=twilio.account_sid,
        selection_policy=reconcile.selection_policy,
        lookup_page_size=reconcile.lookup_page_size,
    )


def lookup(
    kind: ResourceKind,
    query: LookupQuery,
    *,
    ctx: ProviderContext | None = None,
) -> ResourceRecord:
    """Resolve an existing remote object from lookup criteria."""

    context = ctx or build_provider_context()
    log.info("Looking up %s", kind)
    return resolve(kind, query, context)


def import_resource(
    kind: ResourceKind,
    sid: str,
    *,
    ctx: ProviderContext | None = None,
) -> ResourceRecord:
    """Read an existing remote object by identifier."""

    context = ctx or build_provider_context()
    log.info("Importing %s %s", kind, sid)
    return import_remote(kind, sid, context)


def search_available_numbers(
    country_code: str,
    *,
    area_code: str = "",
    contains: str = "",
    ctx: ProviderContext | None = None,
) -> list[AvailablePhoneNumber]:
    """List purchasable local numbers without buying any."""

    if not country_code:
        raise LookupValidationError(
            "A country code is required", kind=ResourceKind.PHONE_NUMBER, field="country_code"
        )
    context = ctx or build_provider_context()
    filters = availability_filters(area_code, contains)
    log.info("Searching available numbers in %s with %s", country_code, filters)
    try:
        return context.client.search_available_numbers(country_code, filters)
    except ProviderError as exc:
        raise RemoteCallError(
            f"Availability search failed: {exc.message}", kind=ResourceKind.PHONE_NUMBER
        ) from exc
