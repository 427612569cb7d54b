"""Compiler abstractions: CompiledSQL and the SQLCompiler ABC.

The Template Method pattern (GoF) is used:
- ``SQLCompiler`` owns name quoting (schema/table/column splitting, raw
  expression pass-through) and the capability hooks.
- ``SQLiteCompiler``, ``PostgresCompiler`` and ``MySQLCompiler`` override the
  dialect-specific steps: identifier quoting, placeholder style, the
  abstract type map, and whichever capability hooks they support.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from clauseql.errors import CompilationError, UnsupportedByDialectError


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with named placeholders.
        params: Placeholder name → bound value, in generation order.
        dialect: The target dialect (e.g. ``'sqlite'``).
    """

    sql: str
    params: dict[str, Any]
    dialect: str

    def __str__(self) -> str:
        return self.sql


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL compilers.

    Subclasses implement the dialect-specific methods; ``QueryBuilder`` and
    ``SchemaBuilder`` use this interface via the Strategy / Template Method
    patterns.
    """

    #: Abstract column type → physical type template.
    type_map: ClassVar[dict[str, str]] = {}

    @abstractmethod
    def param_placeholder(self, name: str) -> str:
        """Return the SQL placeholder string for a named parameter.

        Args:
            name: Parameter name (e.g. ``'qp0'``).

        Returns:
            Dialect-specific placeholder string.
        """

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a single, properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier without any ``.`` qualification.

        Returns:
            Quoted identifier.
        """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'sqlite'``)."""

    # ------------------------------------------------------------------
    # Name quoting
    # ------------------------------------------------------------------

    def quote_table_name(self, name: str) -> str:
        """Quote a table name, splitting an optional ``schema.`` prefix.

        Names containing ``(`` are treated as raw expressions and returned
        unchanged.
        """
        if "(" in name:
            return name
        return ".".join(self.quote_identifier(part) for part in name.split("."))

    def quote_column_name(self, name: str) -> str:
        """Quote a column name, splitting an optional ``table.`` prefix.

        Names containing ``(`` are returned unchanged and ``*`` is never
        quoted.
        """
        if "(" in name:
            return name
        prefix = ""
        if "." in name:
            table, name = name.rsplit(".", 1)
            prefix = f"{self.quote_table_name(table)}."
        if name == "*":
            return f"{prefix}{name}"
        return f"{prefix}{self.quote_identifier(name)}"

    # ------------------------------------------------------------------
    # Capability hooks (unsupported unless a dialect overrides them)
    # ------------------------------------------------------------------

    def build_batch_insert(
        self,
        table_sql: str,
        columns_sql: list[str],
        rows: Sequence[Sequence[Any]],
        bind: Callable[[Any], str],
    ) -> str:
        """Return a multi-row INSERT statement.

        Args:
            table_sql: Already-quoted table name.
            columns_sql: Already-quoted column names.
            rows: Row value sequences, aligned with ``columns_sql``.
            bind: Renders one value as SQL (placeholder or inlined
                ``Expression`` text).

        Raises:
            UnsupportedByDialectError: Unless the dialect overrides this hook.
        """
        raise UnsupportedByDialectError(self.dialect_name, "batch insert")

    def build_reset_sequence(self, table_sql: str, value: int | None) -> str:
        """Return a statement resetting the table's primary-key sequence.

        Raises:
            UnsupportedByDialectError: Unless the dialect overrides this hook.
        """
        raise UnsupportedByDialectError(self.dialect_name, "resetting sequence")

    def build_check_integrity(self, check: bool, schema: str, table: str) -> str:
        """Return a statement enabling or disabling integrity checks.

        Raises:
            UnsupportedByDialectError: Unless the dialect overrides this hook.
        """
        raise UnsupportedByDialectError(
            self.dialect_name, "enabling/disabling integrity check"
        )

    @staticmethod
    def _values_rows(
        rows: Sequence[Sequence[Any]],
        width: int,
        bind: Callable[[Any], str],
    ) -> str:
        """Render ``(v, v), (v, v)`` for multi-row VALUES lists."""
        rendered: list[str] = []
        for row in rows:
            if len(row) != width:
                raise CompilationError(
                    f"Batch insert row has {len(row)} values, expected {width}.",
                    clause="VALUES",
                )
            rendered.append(f"({', '.join(bind(value) for value in row)})")
        return ", ".join(rendered)
