"""Phone number lifecycle: search, purchase, configure, release.

Creating a number is two remote calls (availability search, then purchase of
the selected candidate). The number's messaging-service membership is tracked
by the ``service_sid`` attribute and maintained through the association
manager after every create, update and delete.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from twiliform.domain.errors import AssociationError, DeclarationError, NoAvailableNumberError
from twiliform.domain.model import DeletionOutcome, ResourceKind

from ..association import AssociationManager
from ..codec import apply_decoded, encode
from ..resolver import select_candidate
from .base import ResourceController

if TYPE_CHECKING:
    from twiliform.adapters.twilio.schema import AvailablePhoneNumber, IncomingPhoneNumber
    from twiliform.domain.model import ResourceRecord

    from ..context import ProviderContext
    from ..ports import RequestParams

log = getLogger(__name__)


def availability_filters(area_code: str, contains: str) -> dict[str, str]:
    filters: dict[str, str] = {}
    if area_code:
        filters["AreaCode"] = area_code
    if contains:
        filters["Contains"] = contains
    return filters


class PhoneNumberController(ResourceController):
    kind = ResourceKind.PHONE_NUMBER
    noun = "phone number"

    def __init__(self, ctx: ProviderContext) -> None:
        super().__init__(ctx)
        self._associations = AssociationManager(ctx)

    def search_available(self, record: ResourceRecord) -> list[AvailablePhoneNumber]:
        """Return purchasable numbers matching the record's search attributes."""

        country_code = record.get_str("country_code")
        if not country_code:
            raise DeclarationError(
                "A country code is required to search for a phone number",
                kind=self.kind,
                field="country_code",
            )
        filters = availability_filters(record.get_str("area_code"), record.get_str("search"))
        return self._remote(
            record, "search", self._client.search_available_numbers, country_code, filters
        )

    def _create(self, record: ResourceRecord) -> None:
        available = self.search_available(record)
        description = _describe_search(record)
        if not available:
            log.error("No available phone number matches %s", description)
            raise NoAvailableNumberError(
                f"No available phone number matches {description}",
                kind=self.kind,
            )
        chosen = select_candidate(
            available,
            self._ctx.selection_policy,
            identify=lambda candidate: candidate.phone_number,
            kind=self.kind,
            description=description,
        )

        params = encode(record, self.kind)
        params["PhoneNumber"] = chosen.phone_number
        remote = self._remote(record, "purchase", self._client.create_incoming_number, params)
        record.set_id(remote.sid)
        apply_decoded(record, self.kind, remote)

        service_sid = record.get_str("service_sid")
        if not service_sid:
            return
        try:
            self._associations.ensure_attached(service_sid, remote.sid)
        except AssociationError:
            # The number exists and is not in the pool; the next update re-attaches it.
            record.set("service_sid", "")
            record.checkpoint()
            raise

    def _read(self, record: ResourceRecord) -> None:
        super()._read(record)
        service_sid = record.get_str("service_sid")
        if service_sid and not self._associations.is_attached(service_sid, record.id):
            log.info(
                "Phone number %s is no longer in messaging service %s",
                record.id,
                service_sid,
            )
            record.set("service_sid", "")

    def _update(self, record: ResourceRecord) -> None:
        super()._update(record)
        if not record.has_change("service_sid"):
            return
        before, after = record.get_change("service_sid")
        if before:
            self._associations.ensure_detached(str(before), record.id)
        if after:
            self._associations.ensure_attached(str(after), record.id)

    def _delete(self, record: ResourceRecord) -> DeletionOutcome:
        service_sid = record.get_str("service_sid")
        if service_sid:
            self._associations.ensure_detached(service_sid, record.id)
        return super()._delete(record)

    def _update_remote(self, sid: str, params: RequestParams) -> IncomingPhoneNumber:
        return self._client.update_incoming_number(sid, params)

    def _delete_remote(self, sid: str) -> None:
        self._client.release_incoming_number(sid)


def _describe_search(record: ResourceRecord) -> str:
    parts = [f"country code: {record.get_str('country_code')}"]
    area_code = record.get_str("area_code")
    if area_code:
        parts.append(f"area code: {area_code}")
    search = record.get_str("search")
    if search:
        parts.append(f"search: {search}")
    return " and ".join(parts)
