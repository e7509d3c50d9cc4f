from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for `col IN (...)`; callers must not pass an empty sequence."""
    return ", ".join(["%s"] * len(values))


def requested_ids(person_ids: Sequence[str]) -> Dict[str, str]:
    """Map stored IDs back to the caller's spelling (the default collation compares case-insensitively)."""
    return {pid.strip().lower(): pid for pid in person_ids}


def result_key(requested: Dict[str, str], stored_id: str) -> str:
    return requested.get(stored_id.strip().lower(), stored_id)


def normalize_decimal(value: Any) -> Decimal:
    """DECIMAL columns come back as Decimal, but float/str show up from other drivers."""

    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def normalize_bool(value: Any) -> bool:
    """TINYINT(1) may be returned as int, bool or bytes depending on the connector."""

    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "present", "p", "yes"}
    return bool(value)
