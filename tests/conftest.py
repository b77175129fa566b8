from __future__ import annotations

import pytest

from tests.helpers.provider import ACCOUNT_SID, FakeProviderClient
from twiliform.reconciliation import ProviderContext


@pytest.fixture
def fake_client() -> FakeProviderClient:
    return FakeProviderClient()


@pytest.fixture
def ctx(fake_client: FakeProviderClient) -> ProviderContext:
    return ProviderContext(client=fake_client, account_sid=ACCOUNT_SID)
