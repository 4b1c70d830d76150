from __future__ import annotations

import uuid
from enum import Enum
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import mysql.connector

from ..core.constants import DOCUMENT_ID_LENGTH
from ..core.exceptions import CollaboratorUnavailable
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) for one unit of work, committing on success.

    Driver errors surface as CollaboratorUnavailable so services never see
    mysql.connector types.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise CollaboratorUnavailable("Persistence store is unreachable") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        raise CollaboratorUnavailable(f"Persistence store call failed: {exc}") from exc
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


def new_document_id() -> str:
    """Generated document id (20 hex chars), assigned before insert."""
    return uuid.uuid4().hex[:DOCUMENT_ID_LENGTH]


def build_update(fields: Mapping[str, Any], allowed: Iterable[str]) -> Tuple[str, list]:
    """Build the SET clause of a partial-merge UPDATE.

    Only whitelisted column names are accepted; values are always bound.
    """

    allowed = set(allowed)
    unknown = [k for k in fields if k not in allowed]
    if unknown:
        raise ValueError(f"Unsupported update fields: {', '.join(sorted(unknown))}")

    columns = [f"{k}=%s" for k in fields]
    values = [v.value if isinstance(v, Enum) else v for v in fields.values()]
    return ", ".join(columns), values
