"""DDL statement builder.

``SchemaBuilder`` assembles CREATE / ALTER / DROP statements from fixed
templates.  Names are always quoted through the injected ``SQLCompiler``;
column types go through :class:`~clauseql.compile.type_mapper.TypeMapper`,
so abstract types such as ``pk`` or ``string(32) NOT NULL`` become the
dialect's physical types.  DDL carries no bound parameters, so every
method returns a plain SQL string.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from clauseql.compile.base import SQLCompiler
from clauseql.compile.clause_builders import build_columns
from clauseql.compile.context import CompilationContext
from clauseql.compile.type_mapper import TypeMapper
from clauseql.errors import CompilationError
from clauseql.schema.dialect import DialectOptions

logger = logging.getLogger(__name__)

#: Column definitions: ``{name: type}`` or a sequence of ``(name, type)``
#: pairs and verbatim strings such as ``'PRIMARY KEY (a, b)'``.
ColumnDefinitions = Mapping[str, str] | Sequence[tuple[str, str] | str]


class SchemaBuilder:
    """Builds DDL statements for one dialect.

    Args:
        compiler: Dialect-specific compiler (quoting and default type map).
        options: ``options.type_map`` entries override the dialect defaults.
    """

    def __init__(
        self,
        compiler: SQLCompiler,
        options: DialectOptions | None = None,
    ) -> None:
        self._ctx = CompilationContext(compiler=compiler, options=options or DialectOptions())
        self._types = TypeMapper({**compiler.type_map, **self._ctx.options.type_map})

    @property
    def compiler(self) -> SQLCompiler:
        return self._ctx.compiler

    @property
    def type_mapper(self) -> TypeMapper:
        return self._types

    def get_column_type(self, column_type: str) -> str:
        """Convert an abstract column type into a physical one."""
        return self._types.resolve(column_type)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table(
        self,
        table: str,
        columns: ColumnDefinitions,
        options: str | None = None,
    ) -> str:
        """Build a CREATE TABLE statement.

        Example::

            schema.create_table("users", {"id": "pk", "name": "string NOT NULL"})

        Args:
            table: Table name.
            columns: Named column definitions; verbatim strings (e.g. table
                constraints) are inserted as-is.
            options: Extra SQL appended after the closing parenthesis.
        """
        items = columns.items() if isinstance(columns, Mapping) else columns
        lines: list[str] = []
        for item in items:
            if isinstance(item, str):
                lines.append(f"\t{item}")
                continue
            name, column_type = item
            lines.append(f"\t{self._quote_col(name)} {self.get_column_type(column_type)}")
        if not lines:
            raise CompilationError(f"Table '{table}' needs at least one column.", clause="CREATE TABLE")
        sql = f"CREATE TABLE {self._quote_table(table)} (\n" + ",\n".join(lines) + "\n)"
        return self._done(sql if options is None else f"{sql} {options}")

    def rename_table(self, old_name: str, new_name: str) -> str:
        return self._done(
            f"RENAME TABLE {self._quote_table(old_name)} TO {self._quote_table(new_name)}"
        )

    def drop_table(self, table: str) -> str:
        return self._done(f"DROP TABLE {self._quote_table(table)}")

    def truncate_table(self, table: str) -> str:
        return self._done(f"TRUNCATE TABLE {self._quote_table(table)}")

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def add_column(self, table: str, column: str, column_type: str) -> str:
        """Build ``ALTER TABLE … ADD <column> <type>``.

        ``'string NOT NULL'`` becomes ``'varchar(255) NOT NULL'`` on MySQL;
        unrecognised types are kept verbatim.
        """
        return self._done(
            f"ALTER TABLE {self._quote_table(table)} ADD {self._quote_col(column)} "
            f"{self.get_column_type(column_type)}"
        )

    def drop_column(self, table: str, column: str) -> str:
        return self._done(
            f"ALTER TABLE {self._quote_table(table)} DROP COLUMN {self._quote_col(column)}"
        )

    def rename_column(self, table: str, old_name: str, new_name: str) -> str:
        return self._done(
            f"ALTER TABLE {self._quote_table(table)} RENAME COLUMN "
            f"{self._quote_col(old_name)} TO {self._quote_col(new_name)}"
        )

    def alter_column(self, table: str, column: str, column_type: str) -> str:
        """Build ``ALTER TABLE … CHANGE <column> <column> <type>``."""
        quoted = self._quote_col(column)
        return self._done(
            f"ALTER TABLE {self._quote_table(table)} CHANGE {quoted} {quoted} "
            f"{self.get_column_type(column_type)}"
        )

    # ------------------------------------------------------------------
    # Keys and indexes
    # ------------------------------------------------------------------

    def add_primary_key(self, name: str, table: str, columns: str | Sequence[str]) -> str:
        """Build ``ALTER TABLE … ADD CONSTRAINT <name> PRIMARY KEY (…)``.

        Args:
            columns: Comma-separated string or list of column names.
        """
        return self._done(
            f"ALTER TABLE {self._quote_table(table)} ADD CONSTRAINT {self._quote_col(name)} "
            f"PRIMARY KEY ({self._columns(columns)})"
        )

    def drop_primary_key(self, name: str, table: str) -> str:
        return self._drop_constraint(name, table)

    def add_foreign_key(
        self,
        name: str,
        table: str,
        columns: str | Sequence[str],
        ref_table: str,
        ref_columns: str | Sequence[str],
        delete: str | None = None,
        update: str | None = None,
    ) -> str:
        """Build ``ALTER TABLE … ADD CONSTRAINT … FOREIGN KEY … REFERENCES …``.

        Args:
            delete: ``ON DELETE`` action (``RESTRICT``, ``CASCADE``,
                ``NO ACTION``, ``SET DEFAULT``, ``SET NULL``).
            update: ``ON UPDATE`` action, same choices.
        """
        sql = (
            f"ALTER TABLE {self._quote_table(table)} ADD CONSTRAINT {self._quote_col(name)} "
            f"FOREIGN KEY ({self._columns(columns)}) "
            f"REFERENCES {self._quote_table(ref_table)} ({self._columns(ref_columns)})"
        )
        if delete is not None:
            sql += f" ON DELETE {delete}"
        if update is not None:
            sql += f" ON UPDATE {update}"
        return self._done(sql)

    def drop_foreign_key(self, name: str, table: str) -> str:
        return self._drop_constraint(name, table)

    def create_index(
        self,
        name: str,
        table: str,
        columns: str | Sequence[str],
        unique: bool = False,
    ) -> str:
        """Build ``CREATE [UNIQUE] INDEX <name> ON <table> (…)``.

        Column names containing ``(`` are kept verbatim.
        """
        keyword = "CREATE UNIQUE INDEX" if unique else "CREATE INDEX"
        return self._done(
            f"{keyword} {self._quote_table(name)} ON {self._quote_table(table)} "
            f"({self._columns(columns)})"
        )

    def drop_index(self, name: str, table: str) -> str:
        return self._done(f"DROP INDEX {self._quote_table(name)} ON {self._quote_table(table)}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _drop_constraint(self, name: str, table: str) -> str:
        return self._done(
            f"ALTER TABLE {self._quote_table(table)} DROP CONSTRAINT {self._quote_col(name)}"
        )

    def _columns(self, columns: str | Sequence[str]) -> str:
        return build_columns(self._ctx, columns)

    def _quote_table(self, name: str) -> str:
        return self._ctx.compiler.quote_table_name(name)

    def _quote_col(self, name: str) -> str:
        return self._ctx.compiler.quote_column_name(name)

    def _done(self, sql: str) -> str:
        logger.debug("compiled DDL for %s: %s", self._ctx.compiler.dialect_name, sql)
        return sql
