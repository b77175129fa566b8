"""Reconciliation behaviour settings."""

from __future__ import annotations

from dataclasses import dataclass

from twiliform.domain.model.enums import SelectionPolicy

from .env import optional_env_var, optional_int_env_var
from .errors import ConfigurationError

DEFAULT_LOOKUP_PAGE_SIZE = 50
MAX_LOOKUP_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    selection_policy: SelectionPolicy = SelectionPolicy.TAKE_FIRST
    lookup_page_size: int = DEFAULT_LOOKUP_PAGE_SIZE


def get_reconcile_config() -> ReconcileConfig:
    raw_policy = optional_env_var("TWILIFORM_SELECTION_POLICY", SelectionPolicy.TAKE_FIRST.value)
    try:
        policy = SelectionPolicy(raw_policy.lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in SelectionPolicy)
        raise ConfigurationError(
            f"TWILIFORM_SELECTION_POLICY must be one of {allowed}, got {raw_policy!r}"
        ) from exc

    page_size = optional_int_env_var("TWILIFORM_LOOKUP_PAGE_SIZE", DEFAULT_LOOKUP_PAGE_SIZE)
    if not 1 <= page_size <= MAX_LOOKUP_PAGE_SIZE:
        raise ConfigurationError(
            f"TWILIFORM_LOOKUP_PAGE_SIZE must be between 1 and {MAX_LOOKUP_PAGE_SIZE}, "
            f"got {page_size}"
        )
    return ReconcileConfig(selection_policy=policy, lookup_page_size=page_size)
