"""Test fixtures: an identity-quoting compiler and a sample schema."""

from __future__ import annotations

import sqlite3
from typing import Any

from clauseql.compile.base import SQLCompiler


class PlainCompiler(SQLCompiler):
    """Compiler that leaves identifiers unquoted.

    Keeps expected SQL in tests short (``status=:qp0`` rather than
    ``"status"=:qp0``).  Supports none of the capability hooks.
    """

    @property
    def dialect_name(self) -> str:
        return "plain"

    def param_placeholder(self, name: str) -> str:
        return f":{name}"

    def quote_identifier(self, name: str) -> str:
        return name


#: Abstract column definitions for the sample schema.
TABLES: dict[str, dict[str, str]] = {
    "users": {
        "id": "pk",
        "name": "string(64) NOT NULL",
        "email": "string",
        "status": "integer NOT NULL",
        "deleted_at": "datetime",
    },
    "orders": {
        "id": "pk",
        "user_id": "integer NOT NULL",
        "total": "money",
        "state": "string(16)",
        "created_at": "timestamp",
    },
}

USER_COLUMNS = ["name", "email", "status", "deleted_at"]
USER_ROWS: list[tuple[Any, ...]] = [
    ("alice", "alice@example.com", 1, None),
    ("bob", "bob@example.com", 1, "2024-02-01 10:00:00"),
    ("carol", None, 0, None),
    ("dave", "dave@example.org", 1, None),
]

ORDER_COLUMNS = ["user_id", "total", "state"]
ORDER_ROWS: list[tuple[Any, ...]] = [
    (1, 10.5, "paid"),
    (1, 99.0, "paid"),
    (1, 5.0, "refunded"),
    (2, 42.0, "paid"),
    (4, 7.25, "pending"),
]


def make_sqlite_conn() -> sqlite3.Connection:
    """Return an in-memory connection with ``sqlite3.Row`` rows."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    return conn
