from __future__ import annotations

import pytest

from twiliform.reconciliation.timestamps import normalize_timestamp


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Mon, 16 Aug 2010 23:00:23 +0000", "2010-08-16T23:00:23+00:00"),
        ("Tue, 02 Jan 2024 08:15:00 -0500", "2024-01-02T08:15:00-05:00"),
        ("2024-01-07T12:00:00Z", "2024-01-07T12:00:00+00:00"),
        ("2024-01-07T12:00:00.123456+02:00", "2024-01-07T12:00:00+02:00"),
        ("2024-01-07T12:00:00", "2024-01-07T12:00:00+00:00"),
    ],
)
def test_normalize_timestamp(raw: str, expected: str) -> None:
    assert normalize_timestamp(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "yesterday", "Mon, 99 Foo 2010"])
def test_unusable_timestamps_normalize_to_none(raw: str | None) -> None:
    assert normalize_timestamp(raw) is None
