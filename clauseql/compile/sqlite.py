"""SQLite dialect compiler."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from clauseql.compile.base import SQLCompiler


class SQLiteCompiler(SQLCompiler):
    """Compiles statements to SQLite-flavoured parameterized SQL.

    Parameter style: ``:name`` – compatible with Python's built-in
    ``sqlite3`` named-parameter execution (``cursor.execute(sql, dict)``).
    """

    type_map = {
        "pk": "integer PRIMARY KEY AUTOINCREMENT NOT NULL",
        "bigpk": "integer PRIMARY KEY AUTOINCREMENT NOT NULL",
        "string": "varchar(255)",
        "text": "text",
        "smallint": "smallint",
        "integer": "integer",
        "bigint": "bigint",
        "boolean": "boolean",
        "float": "float",
        "decimal": "decimal(10,0)",
        "datetime": "datetime",
        "timestamp": "timestamp",
        "time": "time",
        "date": "date",
        "binary": "blob",
        "money": "decimal(19,4)",
    }

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def param_placeholder(self, name: str) -> str:
        return f":{name}"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def build_batch_insert(
        self,
        table_sql: str,
        columns_sql: list[str],
        rows: Sequence[Sequence[Any]],
        bind: Callable[[Any], str],
    ) -> str:
        # Multi-row VALUES lists are available from SQLite 3.7.11 onwards.
        values = self._values_rows(rows, len(columns_sql), bind)
        return f"INSERT INTO {table_sql} ({', '.join(columns_sql)}) VALUES {values}"

    def build_check_integrity(self, check: bool, schema: str, table: str) -> str:
        return f"PRAGMA foreign_keys={int(bool(check))}"
