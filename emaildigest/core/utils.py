from __future__ import annotations

from datetime import date, datetime, timezone


def to_hex(data: bytes) -> str:
    return data.hex()


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def utc_today() -> date:
    return datetime.now(timezone.utc).date()
