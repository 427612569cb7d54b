"""Core QuerySpec → SQL compilation logic.

``QueryBuilder`` is the top-level orchestrator for SELECT and data
modification statements.  It wires together focused clause-level
sub-builders and the condition compiler, then assembles the clauses in a
fixed order.  All dialect-specific behaviour (quoting, placeholders,
capability hooks) is delegated to the injected ``SQLCompiler``.

Sub-builder hierarchy
---------------------
QueryBuilder
  ├── ConditionBuilder      (condition_builder.py)
  ├── SelectClauseBuilder   (clause_builders.py)
  ├── FromClauseBuilder     (clause_builders.py)
  ├── JoinClauseBuilder     (clause_builders.py)
  ├── FilterClauseBuilder   (clause_builders.py, WHERE and HAVING)
  ├── GroupByClauseBuilder  (clause_builders.py)
  ├── UnionBuilder          (clause_builders.py)
  ├── OrderByClauseBuilder  (clause_builders.py)
  └── LimitClauseBuilder    (clause_builders.py)

Runtime context sharing
-----------------------
A single :class:`~clauseql.compile.condition_builder.RuntimeContext` is
created per public call and threaded through every sub-builder and every
UNION member, so placeholder names are unique across the whole statement.
Two statements must never share one runtime context.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from clauseql.compile.base import CompiledSQL, SQLCompiler
from clauseql.compile.clause_builders import (
    FilterClauseBuilder,
    FromClauseBuilder,
    GroupByClauseBuilder,
    JoinClauseBuilder,
    LimitClauseBuilder,
    OrderByClauseBuilder,
    SelectClauseBuilder,
    UnionBuilder,
)
from clauseql.compile.condition_builder import (
    ConditionBuilder,
    RuntimeContext,
    render_value,
)
from clauseql.compile.context import CompilationContext
from clauseql.errors import CompilationError
from clauseql.schema.dialect import DialectOptions
from clauseql.schema.query_spec import QuerySpec

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Compiles QuerySpecs and DML intents to parameterized SQL.

    Args:
        compiler: Dialect-specific compiler instance.
        options: Separator and placeholder prefix; defaults to
            ``DialectOptions()``.
    """

    def __init__(
        self,
        compiler: SQLCompiler,
        options: DialectOptions | None = None,
    ) -> None:
        self._ctx = CompilationContext(compiler=compiler, options=options or DialectOptions())

    @property
    def compiler(self) -> SQLCompiler:
        return self._ctx.compiler

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def build(self, query: QuerySpec) -> CompiledSQL:
        """Compile ``query`` to parameterized SQL.

        ``query.params`` is the parameter collection for the whole build:
        generated bindings are appended to it in place, and the returned
        ``params`` is that same dict.  Build a fresh QuerySpec per statement.

        Returns:
            :class:`~clauseql.compile.base.CompiledSQL` with ``sql`` string
            and bound ``params``.

        Raises:
            CompilationError: (or subclass) for malformed conditions or joins.
        """
        runtime = self._runtime(query.params)
        sub_builders = self._make_sub_builders(runtime)
        sql = self._build_query(query, sub_builders)
        return self._compiled(sql, runtime, "SELECT")

    def _build_query(self, query: QuerySpec, sub_builders: dict) -> str:
        clauses = [
            sub_builders["select"].build(query.SELECT, query.DISTINCT, query.SELECT_OPTION),
            sub_builders["from"].build(query.FROM),
            sub_builders["join"].build(query.JOIN),
            sub_builders["where"].build(query.WHERE),
            sub_builders["group_by"].build(query.GROUP_BY),
            sub_builders["having"].build(query.HAVING),
            sub_builders["union"].build(query.UNION),
            sub_builders["order_by"].build(query.ORDER_BY),
            sub_builders["limit"].build(query.LIMIT, query.OFFSET),
        ]
        return self._ctx.separator.join(clause for clause in clauses if clause)

    def _make_sub_builders(self, runtime: RuntimeContext) -> dict:
        """Construct and wire the sub-builder graph for one compilation run.

        UNION members are compiled through ``build_fn``, which reuses this
        graph and therefore ``runtime``.
        """
        cond = ConditionBuilder(self._ctx, runtime)
        sub_builders: dict = {
            "cond": cond,
            "select": SelectClauseBuilder(self._ctx, runtime),
            "from": FromClauseBuilder(self._ctx, runtime),
            "join": JoinClauseBuilder(self._ctx, runtime, cond),
            "where": FilterClauseBuilder("WHERE", cond),
            "group_by": GroupByClauseBuilder(self._ctx, runtime),
            "having": FilterClauseBuilder("HAVING", cond),
            "order_by": OrderByClauseBuilder(self._ctx, runtime),
            "limit": LimitClauseBuilder(),
        }

        def build_fn(query: QuerySpec) -> str:
            return self._build_query(query, sub_builders)

        sub_builders["union"] = UnionBuilder(runtime, build_fn)
        return sub_builders

    # ------------------------------------------------------------------
    # INSERT / UPDATE / DELETE
    # ------------------------------------------------------------------

    def insert(
        self,
        table: str,
        columns: Mapping[str, Any],
        params: dict[str, Any] | None = None,
    ) -> CompiledSQL:
        """Build ``INSERT INTO <table> (<cols>) VALUES (<values>)``.

        Example::

            builder.insert("users", {"name": "Sam", "age": 30})

        Args:
            table: Target table; quoted by the compiler.
            columns: Column name → value; :class:`Expression` values are
                inlined, everything else is bound.
            params: Optional caller-owned parameter dict, appended to in
                place.
        """
        runtime = self._runtime(params)
        quote = self._ctx.compiler.quote_column_name
        names = [quote(name) for name in columns]
        values = [render_value(self._ctx, runtime, value) for value in columns.values()]
        sql = (
            f"INSERT INTO {self._ctx.compiler.quote_table_name(table)} "
            f"({', '.join(names)}) VALUES ({', '.join(values)})"
        )
        return self._compiled(sql, runtime, "INSERT")

    def batch_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        params: dict[str, Any] | None = None,
    ) -> CompiledSQL:
        """Build a multi-row INSERT.

        Raises:
            UnsupportedByDialectError: If the dialect has no batch insert.
            CompilationError: If ``rows`` is empty or a row has the wrong
                number of values.
        """
        if not rows:
            raise CompilationError("Batch insert requires at least one row.", clause="VALUES")
        runtime = self._runtime(params)
        compiler = self._ctx.compiler
        sql = compiler.build_batch_insert(
            compiler.quote_table_name(table),
            [compiler.quote_column_name(c) for c in columns],
            rows,
            lambda value: render_value(self._ctx, runtime, value),
        )
        return self._compiled(sql, runtime, "INSERT")

    def update(
        self,
        table: str,
        columns: Mapping[str, Any],
        condition: Any = None,
        params: dict[str, Any] | None = None,
    ) -> CompiledSQL:
        """Build ``UPDATE <table> SET <col>=<value>, ... [WHERE ...]``.

        Example::

            builder.update("users", {"status": 1}, "age > 30")
        """
        runtime = self._runtime(params)
        quote = self._ctx.compiler.quote_column_name
        lines = [
            f"{quote(name)}={render_value(self._ctx, runtime, value)}"
            for name, value in columns.items()
        ]
        sql = f"UPDATE {self._ctx.compiler.quote_table_name(table)} SET {', '.join(lines)}"
        sql = self._append_where(sql, condition, runtime)
        return self._compiled(sql, runtime, "UPDATE")

    def delete(
        self,
        table: str,
        condition: Any = None,
        params: dict[str, Any] | None = None,
    ) -> CompiledSQL:
        """Build ``DELETE FROM <table> [WHERE ...]``."""
        runtime = self._runtime(params)
        sql = f"DELETE FROM {self._ctx.compiler.quote_table_name(table)}"
        sql = self._append_where(sql, condition, runtime)
        return self._compiled(sql, runtime, "DELETE")

    # ------------------------------------------------------------------
    # Dialect capability statements
    # ------------------------------------------------------------------

    def reset_sequence(self, table: str, value: int | None = None) -> str:
        """Return SQL resetting ``table``'s primary-key sequence.

        Raises:
            UnsupportedByDialectError: If the dialect cannot reset sequences.
        """
        compiler = self._ctx.compiler
        return compiler.build_reset_sequence(compiler.quote_table_name(table), value)

    def check_integrity(self, check: bool = True, schema: str = "", table: str = "") -> str:
        """Return SQL turning integrity (foreign key) checks on or off.

        Raises:
            UnsupportedByDialectError: If the dialect cannot toggle checks.
        """
        return self._ctx.compiler.build_check_integrity(check, schema, table)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _runtime(self, params: dict[str, Any] | None) -> RuntimeContext:
        return RuntimeContext(
            params=params if params is not None else {},
            prefix=self._ctx.options.param_prefix,
        )

    def _append_where(self, sql: str, condition: Any, runtime: RuntimeContext) -> str:
        where = FilterClauseBuilder("WHERE", ConditionBuilder(self._ctx, runtime)).build(condition)
        return sql if where == "" else f"{sql} {where}"

    def _compiled(self, sql: str, runtime: RuntimeContext, kind: str) -> CompiledSQL:
        logger.debug(
            "compiled %s for %s with %d params: %s",
            kind,
            self._ctx.compiler.dialect_name,
            len(runtime.params),
            sql,
        )
        return CompiledSQL(
            sql=sql,
            params=runtime.params,
            dialect=self._ctx.compiler.dialect_name,
        )
