"""Error taxonomy for reconciliation.

Every error carries enough context to localise the fault for the host engine:
the resource kind, the remote identifier when one is known, and the offending
field when a single field is to blame.

- validation: bad or missing input detected before any remote call
- remote call: provider failures, passed through with added context
- resolution: lookups and availability searches that found nothing usable
- mapping: a remote payload could not be assigned to the record
- unsupported: the verb is not implemented for the resource kind
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model.enums import ResourceKind


class ReconcileError(RuntimeError):
    """Base class for every error surfaced to the host engine."""

    def __init__(
        self,
        message: str,
        *,
        kind: ResourceKind | None = None,
        identifier: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.identifier = identifier
        self.field = field

    def __str__(self) -> str:
        context = [
            f"{label}={value}"
            for label, value in (
                ("kind", self.kind),
                ("id", self.identifier),
                ("field", self.field),
            )
            if value
        ]
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ValidationError(ReconcileError):
    """Input rejected before any remote call was made."""


class LookupValidationError(ValidationError):
    """Lookup query is missing required criteria or combines exclusive ones."""


class DeclarationError(ValidationError):
    """Operator-supplied configuration does not fit the resource schema."""


class RecordStateError(ValidationError):
    """Verb invoked on a record in a state that does not allow it."""


class RemoteCallError(ReconcileError):
    """Provider API call failed; the original ``ProviderError`` is chained."""


class RemoteObjectMissingError(RemoteCallError):
    """A known identifier no longer resolves to a remote object."""


class AssociationError(RemoteCallError):
    """Attaching or detaching a phone number to or from a messaging service failed."""


class ResolutionError(ReconcileError):
    """A lookup or search did not produce exactly one usable candidate."""


class LookupNotFoundError(ResolutionError):
    pass


class AmbiguousLookupError(ResolutionError):
    def __init__(
        self,
        message: str,
        *,
        candidates: tuple[str, ...],
        kind: ResourceKind | None = None,
    ) -> None:
        super().__init__(message, kind=kind)
        self.candidates = candidates


class NoAvailableNumberError(ResolutionError):
    """The availability search returned no purchasable number."""


class MappingError(ReconcileError):
    """A remote value could not be assigned to the record; record state is unknown."""


class UnsupportedOperationError(ReconcileError):
    pass


class FieldTypeError(TypeError):
    """Raised by the record when a value does not match the field's declared type."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
