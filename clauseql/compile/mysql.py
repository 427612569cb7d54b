"""MySQL dialect compiler."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from clauseql.compile.base import SQLCompiler


class MySQLCompiler(SQLCompiler):
    """Compiles statements to MySQL-flavoured parameterized SQL.

    Parameter style: ``%(name)s`` – compatible with ``PyMySQL`` and
    ``mysql-connector-python`` named-parameter execution.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    type_map = {
        "pk": "int(11) NOT NULL AUTO_INCREMENT PRIMARY KEY",
        "bigpk": "bigint(20) NOT NULL AUTO_INCREMENT PRIMARY KEY",
        "string": "varchar(255)",
        "text": "text",
        "smallint": "smallint(6)",
        "integer": "int(11)",
        "bigint": "bigint(20)",
        "boolean": "tinyint(1)",
        "float": "float",
        "decimal": "decimal",
        "datetime": "datetime",
        "timestamp": "timestamp",
        "time": "time",
        "date": "date",
        "binary": "blob",
        "money": "decimal(19,4)",
    }

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def param_placeholder(self, name: str) -> str:
        return f"%({name})s"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def build_batch_insert(
        self,
        table_sql: str,
        columns_sql: list[str],
        rows: Sequence[Sequence[Any]],
        bind: Callable[[Any], str],
    ) -> str:
        values = self._values_rows(rows, len(columns_sql), bind)
        return f"INSERT INTO {table_sql} ({', '.join(columns_sql)}) VALUES {values}"

    def build_reset_sequence(self, table_sql: str, value: int | None) -> str:
        """Reset ``AUTO_INCREMENT`` so the next row gets ``value`` (default 1).

        The value is coerced to ``int``; MySQL does not accept a bound
        parameter in this position.
        """
        next_value = 1 if value is None else int(value)
        return f"ALTER TABLE {table_sql} AUTO_INCREMENT={next_value}"

    def build_check_integrity(self, check: bool, schema: str, table: str) -> str:
        return f"SET FOREIGN_KEY_CHECKS = {int(bool(check))}"
