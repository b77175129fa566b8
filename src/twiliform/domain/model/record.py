"""Declared resource record: operator configuration merged with remote state.

The record is the in-process configuration store. It tracks, per attribute,
whether a value is *present* (declared by the operator or assigned by a
decode) so that callers never have to infer intent from zero values.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING

from twiliform.domain.errors import DeclarationError, FieldTypeError, RecordStateError

from .enums import LifecycleState
from .fields import CompositeSpec, FieldSpec
from .schemas import schema_for

if TYPE_CHECKING:
    from .enums import ResourceKind
    from .fields import ResourceSchema

REDACTED = "(sensitive)"


class ResourceRecord:
    def __init__(
        self,
        kind: ResourceKind,
        *,
        sid: str = "",
        state: LifecycleState | None = None,
    ) -> None:
        self.kind = kind
        self.schema: ResourceSchema = schema_for(kind)
        self._id = sid
        self._values: dict[str, object] = {}
        self._checkpoint: dict[str, object] = {}
        self.state = state or (LifecycleState.PRESENT if sid else LifecycleState.ABSENT)

    def __repr__(self) -> str:
        return f"ResourceRecord(kind={self.kind!s}, id={self._id!r}, state={self.state!s})"

    @classmethod
    def declared(cls, kind: ResourceKind, config: Mapping[str, object]) -> ResourceRecord:
        """Build a fresh record (no id) from operator input."""

        record = cls(kind)
        record.declare(config)
        return record

    @classmethod
    def from_state(
        cls,
        kind: ResourceKind,
        sid: str,
        values: Mapping[str, object],
        *,
        state: LifecycleState = LifecycleState.PRESENT,
    ) -> ResourceRecord:
        """Restore a record from previously persisted state and checkpoint it."""

        record = cls(kind, sid=sid, state=state)
        for name, value in values.items():
            record.set(name, value)
        record.checkpoint()
        return record

    # identifier

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, sid: str) -> None:
        if self._id and sid and sid != self._id:
            raise RecordStateError(
                f"Identifier is immutable once assigned; refusing to replace it with {sid}",
                kind=self.kind,
                identifier=self._id,
            )
        self._id = sid

    def clear_id(self) -> None:
        self._id = ""

    # attribute access

    def get(self, name: str) -> object:
        value, _present = self.get_ok(name)
        return value

    def get_ok(self, name: str) -> tuple[object, bool]:
        """Return ``(value, present)``; absent attributes yield their zero value."""

        spec = self.schema.spec(name)
        if name not in self._values:
            return spec.zero, False
        value = self._values[name]
        if isinstance(spec, CompositeSpec):
            return dict(value), True  # type: ignore[call-overload]
        return value, True

    def get_str(self, name: str) -> str:
        value = self.get(name)
        if not isinstance(value, str):
            raise FieldTypeError(name, f"expected a string, found {type(value).__name__}")
        return value

    def set(self, name: str, value: object) -> None:
        self.check(name, value)
        spec = self.schema.spec(name)
        if isinstance(spec, CompositeSpec):
            value = dict(value)  # type: ignore[call-overload]
        self._values[name] = value

    def check(self, name: str, value: object) -> None:
        """Raise ``FieldTypeError`` unless ``value`` may be assigned to ``name``."""

        spec = self.schema.spec(name)
        if isinstance(spec, FieldSpec):
            _check_scalar(spec, value, label=name)
            return
        if not isinstance(value, Mapping):
            raise FieldTypeError(name, f"expected a mapping, found {type(value).__name__}")
        for key, sub_value in value.items():
            label = f"{name}.{key}"
            if not isinstance(key, str) or not spec.has_subfield(key):
                raise FieldTypeError(label, "unknown attribute")
            _check_scalar(spec.subfield(key), sub_value, label=label)

    # change detection

    def has_change(self, name: str) -> bool:
        before, after = self.get_change(name)
        return before != after

    def get_change(self, name: str) -> tuple[object, object]:
        spec = self.schema.spec(name)
        before = copy.deepcopy(self._checkpoint.get(name, spec.zero))
        return before, self.get(name)

    def checkpoint(self) -> None:
        """Record the current values as the last persisted state."""

        self._checkpoint = copy.deepcopy(self._values)

    # operator input

    def declare(self, config: Mapping[str, object]) -> None:
        """Apply operator configuration, validating all of it before assigning any."""

        for name, value in config.items():
            self._validate_declared(name, value)
        for name, value in config.items():
            self.set(name, value)

    def _validate_declared(self, name: str, value: object) -> None:
        if name not in self.schema:
            raise DeclarationError("Unknown attribute", kind=self.kind, field=name)
        spec = self.schema.spec(name)
        if spec.computed:
            raise DeclarationError(
                "Attribute is computed from the remote API and cannot be declared",
                kind=self.kind,
                field=name,
            )
        try:
            self.check(name, value)
        except FieldTypeError as exc:
            raise DeclarationError(str(exc), kind=self.kind, field=exc.field) from exc

        if isinstance(spec, FieldSpec):
            violations = [(name, spec.constraint_violation(value))]
        else:
            sub_values = dict(value)  # type: ignore[call-overload]
            violations = [
                (f"{name}.{key}", spec.subfield(key).constraint_violation(sub_value))
                for key, sub_value in sub_values.items()
            ]
        for label, reason in violations:
            if reason is not None:
                raise DeclarationError(reason, kind=self.kind, field=label)

    # presentation

    def snapshot(self, *, redact: bool = True) -> dict[str, object]:
        """Return every present attribute plus the id, redacting sensitive values."""

        data: dict[str, object] = {"id": self._id}
        for spec in self.schema:
            value, present = self.get_ok(spec.name)
            if not present:
                continue
            if redact and isinstance(spec, FieldSpec) and spec.sensitive and value:
                value = REDACTED
            data[spec.name] = value
        return data


def _check_scalar(spec: FieldSpec, value: object, *, label: str) -> None:
    if not spec.accepts(value):
        raise FieldTypeError(
            label,
            f"expected {spec.type}, found {type(value).__name__}",
        )
