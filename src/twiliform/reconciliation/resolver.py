"""Lookup resolver: find one existing remote object from named criteria.

Resolution is read-only. Required criteria are checked before the provider
is contacted; a single listing page is requested with every criterion the
server can filter on, and candidates are then matched client-side (exact,
case-sensitive) on every exact criterion. Substring criteria are trusted to
the server.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from twiliform.domain.errors import (
    AmbiguousLookupError,
    LookupNotFoundError,
    LookupValidationError,
    RemoteCallError,
    RemoteObjectMissingError,
)
from twiliform.domain.model import ResourceKind, ResourceRecord, SelectionPolicy

from .codec import apply_decoded
from .ports import ProviderError, ProviderErrorKind

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from .codec import RemoteObject
    from .context import ProviderContext
    from .ports import ProviderClient, RequestParams

log = getLogger(__name__)

type LookupQuery = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class Criterion:
    """One named lookup filter.

    ``param`` is the listing filter sent to the server (``None`` when the server
    cannot filter on it). ``attribute`` names the candidate attribute compared
    client-side; ``None`` means the server result is trusted as-is.
    """

    name: str
    param: str | None
    attribute: str | None
    label: str


@dataclass(frozen=True, slots=True)
class LookupSpec:
    kind: ResourceKind
    noun: str
    criteria: tuple[Criterion, ...]
    required_any: tuple[str, ...]
    exclusive: tuple[tuple[str, str], ...]
    list_page: Callable[[ProviderClient, RequestParams], Sequence[RemoteObject]]

    def criterion(self, name: str) -> Criterion | None:
        for criterion in self.criteria:
            if criterion.name == name:
                return criterion
        return None


LOOKUPS: dict[ResourceKind, LookupSpec] = {
    ResourceKind.PHONE_NUMBER: LookupSpec(
        kind=ResourceKind.PHONE_NUMBER,
        noun="phone number",
        criteria=(
            Criterion("number", "PhoneNumber", "phone_number", "number"),
            Criterion("friendly_name", "FriendlyName", "friendly_name", "friendly name"),
            Criterion("search", "PhoneNumber", None, "search"),
        ),
        required_any=("number", "friendly_name"),
        exclusive=(("number", "search"),),
        list_page=lambda client, filters: client.list_incoming_numbers(filters),
    ),
    ResourceKind.MESSAGING_SERVICE: LookupSpec(
        kind=ResourceKind.MESSAGING_SERVICE,
        noun="messaging service",
        # The services listing has no name filter; matching is client-side only.
        criteria=(Criterion("friendly_name", None, "friendly_name", "friendly name"),),
        required_any=("friendly_name",),
        exclusive=(),
        list_page=lambda client, filters: client.list_messaging_services(filters),
    ),
    ResourceKind.SUBACCOUNT: LookupSpec(
        kind=ResourceKind.SUBACCOUNT,
        noun="subaccount",
        criteria=(
            Criterion("friendly_name", "FriendlyName", "friendly_name", "friendly name"),
            Criterion("status", "Status", "status", "status"),
        ),
        required_any=("friendly_name",),
        exclusive=(),
        list_page=lambda client, filters: client.list_accounts(filters),
    ),
}


def lookup_spec(kind: ResourceKind) -> LookupSpec:
    try:
        return LOOKUPS[kind]
    except KeyError:
        raise LookupValidationError("Lookup is not supported", kind=kind) from None


def validate_query(spec: LookupSpec, query: LookupQuery) -> dict[str, str]:
    """Return the present (non-blank) criteria or raise ``LookupValidationError``."""

    present: dict[str, str] = {}
    for name, value in query.items():
        if spec.criterion(name) is None:
            raise LookupValidationError("Unknown lookup criterion", kind=spec.kind, field=name)
        if value:
            present[name] = value

    if not any(name in present for name in spec.required_any):
        names = " and/or ".join(f"'{name}'" for name in spec.required_any)
        raise LookupValidationError(f"{names} must be specified", kind=spec.kind)

    for first, second in spec.exclusive:
        if first in present and second in present:
            raise LookupValidationError(
                f"'{first}' and '{second}' cannot be combined",
                kind=spec.kind,
                field=second,
            )
    return present


def build_filters(spec: LookupSpec, criteria: Mapping[str, str], page_size: int) -> dict[str, str]:
    filters: dict[str, str] = {}
    for name, value in criteria.items():
        criterion = spec.criterion(name)
        if criterion is not None and criterion.param is not None:
            filters[criterion.param] = value
    filters["PageSize"] = str(page_size)
    return filters


def matches(spec: LookupSpec, criteria: Mapping[str, str], candidate: RemoteObject) -> bool:
    for name, value in criteria.items():
        criterion = spec.criterion(name)
        if criterion is None or criterion.attribute is None:
            continue
        if getattr(candidate, criterion.attribute, None) != value:
            return False
    return True


def describe_criteria(spec: LookupSpec, criteria: Mapping[str, str]) -> str:
    parts = [
        f"{criterion.label}: {criteria[criterion.name]}"
        for criterion in spec.criteria
        if criterion.name in criteria
    ]
    return " and ".join(parts)


def select_candidate[T](
    candidates: Sequence[T],
    policy: SelectionPolicy,
    *,
    identify: Callable[[T], str],
    kind: ResourceKind,
    description: str,
) -> T:
    """Pick one of several equally valid candidates according to ``policy``.

    ``candidates`` must be non-empty and in server order.
    """

    if len(candidates) > 1:
        ids = tuple(identify(candidate) for candidate in candidates)
        if policy is SelectionPolicy.FAIL_ON_MULTIPLE:
            log.error("%d candidates match %s: %s", len(ids), description, ", ".join(ids))
            raise AmbiguousLookupError(
                f"{len(ids)} candidates match {description}",
                candidates=ids,
                kind=kind,
            )
        log.debug("%d candidates match %s; taking %s", len(ids), description, ids[0])
    return candidates[0]


def resolve(kind: ResourceKind, query: LookupQuery, ctx: ProviderContext) -> ResourceRecord:
    """Resolve ``query`` to a new record holding the matching remote object."""

    spec = lookup_spec(kind)
    criteria = validate_query(spec, query)
    description = describe_criteria(spec, criteria)
    filters = build_filters(spec, criteria, ctx.lookup_page_size)

    log.debug("Looking up %s with %s (account %s)", spec.noun, description, ctx.account_sid)
    try:
        candidates = spec.list_page(ctx.client, filters)
    except ProviderError as exc:
        log.error("Listing %s candidates failed: %s", spec.noun, exc.message)
        raise LookupNotFoundError(
            f"Unable to find {spec.noun} with {description}: {exc.message}",
            kind=kind,
        ) from exc

    matching = [candidate for candidate in candidates if matches(spec, criteria, candidate)]
    if not matching:
        raise LookupNotFoundError(f"Unable to find {spec.noun} with {description}", kind=kind)

    chosen = select_candidate(
        matching,
        ctx.selection_policy,
        identify=lambda candidate: candidate.sid,
        kind=kind,
        description=description,
    )
    record = ResourceRecord(kind, sid=chosen.sid)
    apply_decoded(record, kind, chosen)
    record.checkpoint()
    log.debug("Resolved %s %s", spec.noun, chosen.sid)
    return record


_FETCHERS: dict[ResourceKind, Callable[[ProviderClient, str], RemoteObject]] = {
    ResourceKind.PHONE_NUMBER: lambda client, sid: client.get_incoming_number(sid),
    ResourceKind.MESSAGING_SERVICE: lambda client, sid: client.get_messaging_service(sid),
    ResourceKind.SUBACCOUNT: lambda client, sid: client.get_account(sid),
    ResourceKind.API_KEY: lambda client, sid: client.get_key(sid),
}


def fetch_remote(kind: ResourceKind, sid: str, ctx: ProviderContext) -> RemoteObject:
    """Fetch one remote object by identifier, adding kind and id to failures."""

    log.debug("Fetching %s %s (account %s)", kind, sid, ctx.account_sid)
    try:
        return _FETCHERS[kind](ctx.client, sid)
    except ProviderError as exc:
        log.error("Fetching %s %s failed: %s", kind, sid, exc.message)
        if exc.kind is ProviderErrorKind.NOT_FOUND:
            raise RemoteObjectMissingError(
                f"Remote object no longer exists: {exc.message}",
                kind=kind,
                identifier=sid,
            ) from exc
        raise RemoteCallError(exc.message, kind=kind, identifier=sid) from exc


def import_resource(kind: ResourceKind, sid: str, ctx: ProviderContext) -> ResourceRecord:
    """Build a record for an existing remote object identified by ``sid``."""

    if not sid:
        raise LookupValidationError("An identifier is required to import", kind=kind)
    remote = fetch_remote(kind, sid, ctx)
    record = ResourceRecord(kind, sid=remote.sid)
    apply_decoded(record, kind, remote)
    record.checkpoint()
    return record
