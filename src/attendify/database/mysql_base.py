from __future__ import annotations

import json
from contextlib import contextmanager
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


def dump_vector(vector: Sequence[float]) -> str:
    """Face descriptors are stored as a JSON array in a TEXT column."""
    return json.dumps([float(x) for x in vector])


def load_vector(value: Any) -> List[float]:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    return [float(x) for x in json.loads(value)]


def optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)
