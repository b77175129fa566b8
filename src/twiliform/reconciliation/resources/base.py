"""Shared lifecycle state machine for every resource controller.

Each verb moves ``record.state`` through a transient state (CREATING,
UPDATING, DELETING) and settles on PRESENT, ABSENT or CLOSED. A failed verb
puts the record back to PRESENT when it holds an id and ABSENT otherwise. A
successful verb checkpoints the record.
"""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from twiliform.domain.errors import RecordStateError, RemoteCallError
from twiliform.domain.model import DeletionOutcome, LifecycleState

from ..codec import apply_decoded, encode
from ..ports import ProviderError
from ..resolver import fetch_remote

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from twiliform.domain.model import ResourceKind, ResourceRecord

    from ..codec import RemoteObject
    from ..context import ProviderContext
    from ..ports import RequestParams

log = getLogger(__name__)


class ResourceController:
    kind: ClassVar[ResourceKind]
    noun: ClassVar[str]

    def __init__(self, ctx: ProviderContext) -> None:
        self._ctx = ctx
        self._client = ctx.client

    # verbs

    def create(self, record: ResourceRecord) -> None:
        self._require_kind(record)
        if record.id:
            raise RecordStateError(
                "Record already refers to a remote object; refusing to create another",
                kind=self.kind,
                identifier=record.id,
            )
        with self._transition(record, LifecycleState.CREATING):
            self._create(record)
        record.state = self._settled_state(record)
        record.checkpoint()
        log.debug("Created %s %s", self.noun, record.id)

    def read(self, record: ResourceRecord) -> None:
        self._require_id(record, "read")
        with self._transition(record, record.state):
            self._read(record)
        record.state = self._settled_state(record)
        record.checkpoint()

    def update(self, record: ResourceRecord) -> None:
        self._require_id(record, "update")
        with self._transition(record, LifecycleState.UPDATING):
            self._update(record)
        record.state = self._settled_state(record)
        record.checkpoint()
        log.debug("Updated %s %s", self.noun, record.id)

    def delete(self, record: ResourceRecord) -> DeletionOutcome:
        self._require_id(record, "delete")
        sid = record.id
        with self._transition(record, LifecycleState.DELETING):
            outcome = self._delete(record)
        if outcome is DeletionOutcome.REMOVED:
            record.clear_id()
            record.state = LifecycleState.ABSENT
        else:
            record.state = LifecycleState.CLOSED
        record.checkpoint()
        log.debug("Deleted %s %s (%s)", self.noun, sid, outcome)
        return outcome

    # per-kind behaviour

    def _create(self, record: ResourceRecord) -> None:
        params = encode(record, self.kind)
        remote = self._remote(record, "create", self._create_remote, params)
        record.set_id(remote.sid)
        apply_decoded(record, self.kind, remote)

    def _read(self, record: ResourceRecord) -> None:
        remote = fetch_remote(self.kind, record.id, self._ctx)
        apply_decoded(record, self.kind, remote)

    def _update(self, record: ResourceRecord) -> None:
        params = encode(record, self.kind)
        remote = self._remote(record, "update", self._update_remote, record.id, params)
        apply_decoded(record, self.kind, remote)

    def _delete(self, record: ResourceRecord) -> DeletionOutcome:
        self._remote(record, "delete", self._delete_remote, record.id)
        return DeletionOutcome.REMOVED

    def _settled_state(self, record: ResourceRecord) -> LifecycleState:  # noqa: ARG002
        return LifecycleState.PRESENT

    def _create_remote(self, params: RequestParams) -> RemoteObject:
        raise NotImplementedError

    def _update_remote(self, sid: str, params: RequestParams) -> RemoteObject:
        raise NotImplementedError

    def _delete_remote(self, sid: str) -> None:
        raise NotImplementedError

    # helpers

    def _remote[**P, T](
        self,
        record: ResourceRecord,
        action: str,
        call: Callable[P, T],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> T:
        """Run one provider call, re-raising failures with kind and id context."""

        log.debug(
            "Calling %s for %s %s (account %s)",
            action,
            self.noun,
            record.id or "(new)",
            self._ctx.account_sid,
        )
        try:
            return call(*args, **kwargs)
        except ProviderError as exc:
            log.error("Failed to %s %s %s: %s", action, self.noun, record.id, exc.message)
            raise RemoteCallError(
                f"Failed to {action} {self.noun}: {exc.message}",
                kind=self.kind,
                identifier=record.id or None,
            ) from exc

    @contextmanager
    def _transition(self, record: ResourceRecord, during: LifecycleState) -> Iterator[None]:
        previous = record.state
        record.state = during
        try:
            yield
        except Exception:
            if previous is LifecycleState.CLOSED and record.id:
                record.state = previous
            else:
                record.state = LifecycleState.PRESENT if record.id else LifecycleState.ABSENT
            raise

    def _require_kind(self, record: ResourceRecord) -> None:
        if record.kind is not self.kind:
            raise RecordStateError(
                f"{type(self).__name__} cannot manage {record.kind} records",
                kind=record.kind,
                identifier=record.id or None,
            )

    def _require_id(self, record: ResourceRecord, verb: str) -> None:
        self._require_kind(record)
        if not record.id:
            raise RecordStateError(
                f"Cannot {verb} a record without an identifier",
                kind=self.kind,
            )
