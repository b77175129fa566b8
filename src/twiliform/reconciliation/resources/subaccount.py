"""Subaccount lifecycle.

Twilio never removes an account: deleting a subaccount closes it, and the
closed account stays readable. The only supported update is moving the status
between ``active`` and ``suspended``.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from twiliform.domain.errors import DeclarationError, UnsupportedOperationError
from twiliform.domain.model import DeletionOutcome, LifecycleState, ResourceKind

from ..codec import apply_decoded
from .base import ResourceController

if TYPE_CHECKING:
    from twiliform.adapters.twilio.schema import Account
    from twiliform.domain.model import ResourceRecord

    from ..ports import RequestParams

log = getLogger(__name__)

STATUS_CLOSED = "closed"
_UPDATABLE_STATUSES = frozenset({"active", "suspended"})


class SubaccountController(ResourceController):
    kind = ResourceKind.SUBACCOUNT
    noun = "subaccount"

    def _create(self, record: ResourceRecord) -> None:
        status, declared = record.get_ok("status")
        if declared and status == STATUS_CLOSED:
            raise DeclarationError(
                "A subaccount cannot be created closed",
                kind=self.kind,
                field="status",
            )
        super()._create(record)
        if declared and status != record.get("status"):
            self._set_status(record, str(status))

    def _update(self, record: ResourceRecord) -> None:
        for spec in record.schema:
            if spec.computed or spec.name == "status":
                continue
            if record.has_change(spec.name):
                raise UnsupportedOperationError(
                    "Only the status of a subaccount can be updated",
                    kind=self.kind,
                    identifier=record.id,
                    field=spec.name,
                )
        if not record.has_change("status"):
            return
        status = record.get_str("status")
        if status not in _UPDATABLE_STATUSES:
            raise UnsupportedOperationError(
                "Closing a subaccount is done by deleting it",
                kind=self.kind,
                identifier=record.id,
                field="status",
            )
        self._set_status(record, status)

    def _delete(self, record: ResourceRecord) -> DeletionOutcome:
        self._set_status(record, STATUS_CLOSED)
        return DeletionOutcome.CLOSED

    def _settled_state(self, record: ResourceRecord) -> LifecycleState:
        if record.get("status") == STATUS_CLOSED:
            return LifecycleState.CLOSED
        return LifecycleState.PRESENT

    def _set_status(self, record: ResourceRecord, status: str) -> None:
        log.debug("Setting subaccount %s status to %s", record.id, status)
        remote = self._remote(
            record, "update", self._client.update_account, record.id, {"Status": status}
        )
        apply_decoded(record, self.kind, remote)

    def _create_remote(self, params: RequestParams) -> Account:
        return self._client.create_account(params)
