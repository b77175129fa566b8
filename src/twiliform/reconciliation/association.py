"""Phone number <-> messaging service association.

The association lives only on the remote side (the service's phone-number
pool); this module keeps no state of its own and every call is one request.
"""

from __future__ import annotations

from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from twiliform.domain.errors import AssociationError
from twiliform.domain.model import ResourceKind

from .ports import ProviderError, ProviderErrorKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from .context import ProviderContext

log = getLogger(__name__)

_NO_BENIGN: frozenset[ProviderErrorKind] = frozenset()
_BENIGN_ATTACH = frozenset({ProviderErrorKind.ALREADY_ASSOCIATED})
_BENIGN_DETACH = frozenset({ProviderErrorKind.NOT_ASSOCIATED, ProviderErrorKind.NOT_FOUND})


class AssociationOutcome(StrEnum):
    ATTACHED = "attached"
    ALREADY_ATTACHED = "already_attached"
    DETACHED = "detached"
    ALREADY_DETACHED = "already_detached"


class AssociationManager:
    def __init__(self, ctx: ProviderContext) -> None:
        self._ctx = ctx
        self._client = ctx.client

    def attach(self, service_sid: str, phone_number_sid: str) -> None:
        """Add the number to the service's pool; every provider failure is raised."""

        self._request(
            "attach", self._client.add_service_phone_number, service_sid, phone_number_sid
        )

    def detach(self, service_sid: str, phone_number_sid: str) -> None:
        """Remove the number from the service's pool; every provider failure is raised."""

        self._request(
            "detach", self._client.remove_service_phone_number, service_sid, phone_number_sid
        )

    def is_attached(self, service_sid: str, phone_number_sid: str) -> bool:
        benign = self._request(
            "inspect",
            self._client.get_service_phone_number,
            service_sid,
            phone_number_sid,
            benign=_BENIGN_DETACH,
        )
        return benign is None

    def ensure_attached(self, service_sid: str, phone_number_sid: str) -> AssociationOutcome:
        """Attach, treating "already in the pool" as success."""

        benign = self._request(
            "attach",
            self._client.add_service_phone_number,
            service_sid,
            phone_number_sid,
            benign=_BENIGN_ATTACH,
        )
        if benign is not None:
            return AssociationOutcome.ALREADY_ATTACHED
        return AssociationOutcome.ATTACHED

    def ensure_detached(self, service_sid: str, phone_number_sid: str) -> AssociationOutcome:
        """Detach, treating a missing association or service as success."""

        benign = self._request(
            "detach",
            self._client.remove_service_phone_number,
            service_sid,
            phone_number_sid,
            benign=_BENIGN_DETACH,
        )
        if benign is not None:
            return AssociationOutcome.ALREADY_DETACHED
        return AssociationOutcome.DETACHED

    def _request(
        self,
        verb: str,
        call: Callable[[str, str], object],
        service_sid: str,
        phone_number_sid: str,
        *,
        benign: frozenset[ProviderErrorKind] = _NO_BENIGN,
    ) -> ProviderErrorKind | None:
        """Run one association call; return the downgraded error kind, if any."""

        log.debug(
            "%s %s / messaging service %s (account %s)",
            verb.capitalize(),
            phone_number_sid,
            service_sid,
            self._ctx.account_sid,
        )
        try:
            call(service_sid, phone_number_sid)
        except ProviderError as exc:
            if exc.kind in benign:
                log.debug("Ignoring %s during %s: %s", exc.kind, verb, exc.message)
                return exc.kind
            log.error(
                "Failed to %s %s / messaging service %s: %s",
                verb,
                phone_number_sid,
                service_sid,
                exc.message,
            )
            raise AssociationError(
                f"Failed to {verb} messaging service {service_sid}: {exc.message}",
                kind=ResourceKind.PHONE_NUMBER,
                identifier=phone_number_sid,
                field="service_sid",
            ) from exc
        return None
