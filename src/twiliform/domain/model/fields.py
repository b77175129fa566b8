"""Field schemas describing the attributes of each declared resource kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import FieldType

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .enums import ResourceKind

_ZERO_VALUES: dict[FieldType, object] = {
    FieldType.STRING: "",
    FieldType.BOOL: False,
    FieldType.INT: 0,
}


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One scalar attribute.

    ``computed`` fields are only ever assigned from remote responses; operators
    cannot declare them. ``default`` is what a composite decode falls back to when
    the remote side returns null for the attribute.
    """

    name: str
    type: FieldType = FieldType.STRING
    computed: bool = False
    default: object | None = None
    choices: tuple[str, ...] | None = None
    case_sensitive_choices: bool = True
    min_value: int | None = None
    max_value: int | None = None
    sensitive: bool = False
    timestamp: bool = False
    description: str = ""

    @property
    def zero(self) -> object:
        return _ZERO_VALUES[self.type]

    @property
    def fallback(self) -> object:
        return self.default if self.default is not None else self.zero

    def accepts(self, value: object) -> bool:
        match self.type:
            case FieldType.STRING:
                return isinstance(value, str)
            case FieldType.BOOL:
                return isinstance(value, bool)
            case FieldType.INT:
                return isinstance(value, int) and not isinstance(value, bool)

    def constraint_violation(self, value: object) -> str | None:
        """Return a human-readable reason when ``value`` breaks a declared constraint."""

        if self.choices is not None and isinstance(value, str):
            allowed = self.choices
            candidate = value
            if not self.case_sensitive_choices:
                allowed = tuple(choice.lower() for choice in allowed)
                candidate = value.lower()
            if candidate not in allowed:
                return f"must be one of {', '.join(self.choices)}, got {value!r}"
        if isinstance(value, int) and not isinstance(value, bool):
            if self.min_value is not None and value < self.min_value:
                return f"must be >= {self.min_value}, got {value}"
            if self.max_value is not None and value > self.max_value:
                return f"must be <= {self.max_value}, got {value}"
        return None


@dataclass(frozen=True, slots=True)
class CompositeSpec:
    """A zero-or-one nested record made of scalar sub-fields."""

    name: str
    fields: tuple[FieldSpec, ...]
    description: str = ""
    _index: dict[str, FieldSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {spec.name: spec for spec in self.fields})

    @property
    def computed(self) -> bool:
        return False

    @property
    def zero(self) -> dict[str, object]:
        return {}

    def subfield(self, name: str) -> FieldSpec:
        return self._index[name]

    def has_subfield(self, name: str) -> bool:
        return name in self._index

    def defaults(self) -> dict[str, object]:
        return {spec.name: spec.fallback for spec in self.fields}


type AttributeSpec = FieldSpec | CompositeSpec


@dataclass(frozen=True, slots=True)
class ResourceSchema:
    kind: ResourceKind
    fields: tuple[FieldSpec, ...]
    composites: tuple[CompositeSpec, ...] = ()
    _index: dict[str, AttributeSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index: dict[str, AttributeSpec] = {}
        for spec in (*self.fields, *self.composites):
            if spec.name in index:
                raise ValueError(f"Duplicate attribute {spec.name!r} in {self.kind} schema")
            index[spec.name] = spec
        object.__setattr__(self, "_index", index)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[AttributeSpec]:
        return iter(self._index.values())

    def spec(self, name: str) -> AttributeSpec:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"{self.kind} has no attribute {name!r}") from None

    def scalar(self, name: str) -> FieldSpec:
        spec = self.spec(name)
        if not isinstance(spec, FieldSpec):
            raise KeyError(f"{self.kind} attribute {name!r} is a composite")
        return spec

    def composite(self, name: str) -> CompositeSpec:
        spec = self.spec(name)
        if not isinstance(spec, CompositeSpec):
            raise KeyError(f"{self.kind} attribute {name!r} is not a composite")
        return spec
