from __future__ import annotations

import pytest

from tests.helpers.provider import FakeProviderClient
from twiliform.domain.errors import AssociationError
from twiliform.reconciliation import (
    AssociationManager,
    AssociationOutcome,
    ProviderContext,
    ProviderErrorKind,
)


def test_attach_then_detach(fake_client: FakeProviderClient, ctx: ProviderContext) -> None:
    manager = AssociationManager(ctx)

    manager.attach("MG1", "PN1")
    assert manager.is_attached("MG1", "PN1")

    manager.detach("MG1", "PN1")
    assert not manager.is_attached("MG1", "PN1")
    assert fake_client.method_names() == [
        "add_service_phone_number",
        "get_service_phone_number",
        "remove_service_phone_number",
        "get_service_phone_number",
    ]


def test_strict_attach_raises_on_already_associated(ctx: ProviderContext) -> None:
    manager = AssociationManager(ctx)
    manager.attach("MG1", "PN1")

    with pytest.raises(AssociationError) as excinfo:
        manager.attach("MG1", "PN1")

    assert excinfo.value.field == "service_sid"
    assert excinfo.value.identifier == "PN1"


def test_ensure_attached_downgrades_already_associated(ctx: ProviderContext) -> None:
    manager = AssociationManager(ctx)

    assert manager.ensure_attached("MG1", "PN1") is AssociationOutcome.ATTACHED
    assert manager.ensure_attached("MG1", "PN1") is AssociationOutcome.ALREADY_ATTACHED


@pytest.mark.parametrize("kind", [ProviderErrorKind.NOT_FOUND, ProviderErrorKind.NOT_ASSOCIATED])
def test_ensure_detached_downgrades_missing_association(
    fake_client: FakeProviderClient, ctx: ProviderContext, kind: ProviderErrorKind
) -> None:
    fake_client.fail_with("remove_service_phone_number", kind)

    outcome = AssociationManager(ctx).ensure_detached("MG1", "PN1")

    assert outcome is AssociationOutcome.ALREADY_DETACHED


@pytest.mark.parametrize("kind", [ProviderErrorKind.REJECTED, ProviderErrorKind.TRANSIENT])
def test_other_failures_are_fatal(
    fake_client: FakeProviderClient, ctx: ProviderContext, kind: ProviderErrorKind
) -> None:
    fake_client.fail_with("add_service_phone_number", kind, "nope")
    fake_client.fail_with("remove_service_phone_number", kind, "nope")
    manager = AssociationManager(ctx)

    with pytest.raises(AssociationError, match="nope"):
        manager.ensure_attached("MG1", "PN1")
    with pytest.raises(AssociationError, match="nope"):
        manager.ensure_detached("MG1", "PN1")
