# Overview: Storage adapter over a SQLAlchemy session; the only seam services use to reach the database.
"""
Adapter contract

- select(query, params) -> list of row dicts
- execute(query, params) -> ExecuteResult(last_insert_id, rows_affected)
- Placeholders are positional: $1, $2, ... A placeholder may appear more
  than once; each occurrence binds the same value.
- Outside transaction() every execute commits on its own.
"""
from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterator, Sequence

from flask import g
from sqlalchemy import text

from .extensions import db
from .time_utils import to_db_timestamp

_PLACEHOLDER = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class ExecuteResult:
    last_insert_id: int | None
    rows_affected: int


def _bind(query: str, params: Sequence[Any] | None):
    params = list(params or ())

    def _named(match: re.Match) -> str:
        index = int(match.group(1))
        if index < 1 or index > len(params):
            raise IndexError(f"Placeholder ${index} has no matching parameter")
        return f":p{index}"

    sql = _PLACEHOLDER.sub(_named, query)
    values = {f"p{i}": value for i, value in enumerate(params, start=1)}
    return text(sql), values


def _plain(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_db_timestamp(value)
    if isinstance(value, Decimal):
        return float(value)
    return value


class StorageAdapter:
    """Positional-parameter query interface over one SQLAlchemy session."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session
        self._depth = 0

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def select(self, query: str, params: Sequence[Any] | None = None) -> list[dict]:
        statement, values = _bind(query, params)
        result = self.session.execute(statement, values)
        return [{k: _plain(v) for k, v in row._mapping.items()} for row in result]

    def select_one(self, query: str, params: Sequence[Any] | None = None) -> dict | None:
        rows = self.select(query, params)
        return rows[0] if rows else None

    def execute(self, query: str, params: Sequence[Any] | None = None) -> ExecuteResult:
        statement, values = _bind(query, params)
        try:
            result = self.session.execute(statement, values)
        except Exception:
            # Leave the session usable for the caller; transaction() handles its own rollback
            if not self.in_transaction:
                self.session.rollback()
            raise

        last_insert_id = None
        if query.lstrip().upper().startswith("INSERT"):
            last_insert_id = result.lastrowid

        rows_affected = result.rowcount if result.rowcount is not None else 0

        if not self.in_transaction:
            self.session.commit()

        return ExecuteResult(last_insert_id=last_insert_id, rows_affected=rows_affected)

    @contextmanager
    def transaction(self) -> Iterator["StorageAdapter"]:
        """
        Group several statements into one commit.

        Nested blocks join the outermost one; only the outermost commits or
        rolls back.
        """
        self._depth += 1
        try:
            yield self
        except Exception:
            if self._depth == 1:
                self.session.rollback()
            raise
        else:
            if self._depth == 1:
                self.session.commit()
        finally:
            self._depth -= 1


def get_adapter() -> StorageAdapter:
    """Request-scoped adapter bound to the Flask-SQLAlchemy session."""
    if "storage" not in g:
        g.storage = StorageAdapter(db.session)
    return g.storage
