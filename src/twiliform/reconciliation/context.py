"""Explicit, read-only context handed to every reconciliation verb."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from twiliform.config.reconcile import DEFAULT_LOOKUP_PAGE_SIZE
from twiliform.domain.model import SelectionPolicy

if TYPE_CHECKING:
    from .ports import ProviderClient


@dataclass(frozen=True, slots=True)
class ProviderContext:
    """Provider client plus the account it acts for and the selection rules.

    Shared by concurrent verbs; nothing in it is mutated after construction.
    """

    client: ProviderClient
    account_sid: str
    selection_policy: SelectionPolicy = SelectionPolicy.TAKE_FIRST
    lookup_page_size: int = DEFAULT_LOOKUP_PAGE_SIZE
