"""Normalisation of remote timestamps to ``YYYY-MM-DDThh:mm:ss+hh:mm``."""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime


def normalize_timestamp(raw: str | None) -> str | None:
    """Return the normalised form of ``raw``, or ``None`` when it is absent or unparsable.

    Accepts ISO 8601 (Messaging v1) and RFC 2822 (2010-04-01 API) inputs. Naive
    values are taken as UTC; fractional seconds are dropped.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    parsed = _parse(text)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.replace(microsecond=0).isoformat()


def _parse(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
