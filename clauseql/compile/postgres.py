"""PostgreSQL dialect compiler."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from clauseql.compile.base import SQLCompiler


class PostgresCompiler(SQLCompiler):
    """Compiles statements to PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``%(name)s`` – compatible with ``psycopg2`` and
    ``psycopg`` named-parameter execution.

    Sequence resets and integrity toggling depend on catalog lookups
    (sequence names, trigger ownership) that a statement compiler cannot
    perform, so both remain unsupported.
    """

    type_map = {
        "pk": "serial NOT NULL PRIMARY KEY",
        "bigpk": "bigserial NOT NULL PRIMARY KEY",
        "string": "varchar(255)",
        "text": "text",
        "smallint": "smallint",
        "integer": "integer",
        "bigint": "bigint",
        "boolean": "boolean",
        "float": "double precision",
        "decimal": "numeric(10,0)",
        "datetime": "timestamp",
        "timestamp": "timestamp",
        "time": "time",
        "date": "date",
        "binary": "bytea",
        "money": "numeric(19,4)",
    }

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self, name: str) -> str:
        return f"%({name})s"

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
        values = self._values_rows(rows, len(columns_sql), bind)
        return f"INSERT INTO {table_sql} ({', '.join(columns_sql)}) VALUES {values}"
