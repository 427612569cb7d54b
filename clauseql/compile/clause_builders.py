"""Clause-level SQL builders.

Each class handles exactly one SQL clause and returns ``""`` when the clause
does not apply, so ``QueryBuilder`` can drop empty clauses before joining.
``UnionBuilder`` receives a *shared build function*
(``Callable[[QuerySpec], str]``) rather than a builder factory, so every
union member is compiled with the **same** :class:`RuntimeContext` as the
outer query and placeholder names never collide.

Classes
-------
SelectClauseBuilder    ``SELECT [DISTINCT] [option] <columns>``
FromClauseBuilder      ``FROM <table [alias]>, ...``
JoinClauseBuilder      ``<type> <table> [ON <condition>]``
FilterClauseBuilder    ``WHERE …`` / ``HAVING …``
GroupByClauseBuilder   ``GROUP BY <columns>``
OrderByClauseBuilder   ``ORDER BY <column> [DESC], ...``
LimitClauseBuilder     ``LIMIT n OFFSET m``
UnionBuilder           ``UNION (\\n<query>\\n) ...``
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from pydantic import ValidationError

from clauseql.compile.condition_builder import ConditionBuilder, RuntimeContext
from clauseql.compile.context import CompilationContext
from clauseql.errors import MalformedJoinError
from clauseql.schema.expressions import Expression, SortDirection
from clauseql.schema.query_spec import JoinClause, QuerySpec, split_names

# "expr AS alias" or "expr alias"; aliases are word-like.
_COLUMN_ALIAS = re.compile(r"^(.*?)(?i:\s+as\s+|\s+)([\w\-.]+)$")
# "table AS alias" or "table alias".
_TABLE_ALIAS = re.compile(r"^(.*?)(?i:\s+as\s+|\s+)(.*)$")


def build_columns(
    ctx: CompilationContext,
    columns: str | Sequence[str | Expression],
    runtime: RuntimeContext | None = None,
) -> str:
    """Quote and comma-join a column list.

    ``columns`` may be a comma-separated string or a sequence.  A string
    containing ``(`` is returned as-is; sequence items containing ``(`` are
    kept verbatim and :class:`Expression` items are inlined (their params
    merged into ``runtime`` when given).
    """
    if isinstance(columns, str):
        if "(" in columns:
            return columns
        columns = split_names(columns)
    rendered: list[str] = []
    for column in columns:
        if isinstance(column, Expression):
            if runtime is not None:
                runtime.merge(column.params)
            rendered.append(column.text)
        elif "(" in column:
            rendered.append(column)
        else:
            rendered.append(ctx.compiler.quote_column_name(column))
    return ", ".join(rendered)


def quote_aliased_table(ctx: CompilationContext, table: str) -> str:
    """Quote ``'table alias'`` / ``'table AS alias'`` as ``"table" "alias"``."""
    if "(" in table:
        return table
    quote = ctx.compiler.quote_table_name
    match = _TABLE_ALIAS.match(table)
    if match:
        return f"{quote(match.group(1))} {quote(match.group(2))}"
    return quote(table)


class SelectClauseBuilder:
    """Builds the ``SELECT [DISTINCT] …`` clause."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(
        self,
        columns: Sequence[str | Expression],
        distinct: bool = False,
        select_option: str | None = None,
    ) -> str:
        prefix = "SELECT DISTINCT" if distinct else "SELECT"
        if select_option is not None:
            prefix = f"{prefix} {select_option}"
        if not columns:
            return f"{prefix} *"
        return f"{prefix} {', '.join(self._build_item(c) for c in columns)}"

    def _build_item(self, column: str | Expression) -> str:
        if isinstance(column, Expression):
            self._runtime.merge(column.params)
            return column.text
        if "(" in column:
            return column
        quote = self._ctx.compiler.quote_column_name
        match = _COLUMN_ALIAS.match(column)
        if match:
            return f"{quote(match.group(1))} AS {quote(match.group(2))}"
        return quote(column)


class FromClauseBuilder:
    """Builds the ``FROM …`` clause."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, tables: Sequence[str | Expression]) -> str:
        if not tables:
            return ""
        parts: list[str] = []
        for table in tables:
            if isinstance(table, Expression):
                self._runtime.merge(table.params)
                parts.append(table.text)
            else:
                parts.append(quote_aliased_table(self._ctx, table))
        return f"FROM {', '.join(parts)}"


class JoinClauseBuilder:
    """Builds the JOIN fragments, joined with the configured separator.

    Accepted entries: :class:`JoinClause`, a mapping with the same keys, a
    ``[type, table, on?]`` sequence, or an :class:`Expression` emitted
    verbatim.
    """

    def __init__(
        self,
        ctx: CompilationContext,
        runtime: RuntimeContext,
        condition_builder: ConditionBuilder,
    ) -> None:
        self._ctx = ctx
        self._runtime = runtime
        self._cond = condition_builder

    def build(self, joins: Sequence[Any]) -> str:
        if not joins:
            return ""
        return self._ctx.separator.join(self._build_entry(join) for join in joins)

    def _build_entry(self, join: Any) -> str:
        if isinstance(join, Expression):
            self._runtime.merge(join.params)
            return join.text
        clause = _to_join_clause(join)
        sql = f"{clause.type} {quote_aliased_table(self._ctx, clause.table)}"
        if clause.on is not None:
            on_sql = self._cond.build(clause.on)
            if on_sql != "":
                sql = f"{sql} ON {on_sql}"
        return sql


def _to_join_clause(join: Any) -> JoinClause:
    if isinstance(join, JoinClause):
        return join
    if isinstance(join, Mapping):
        try:
            return JoinClause.model_validate(join)
        except ValidationError as exc:
            raise MalformedJoinError(join) from exc
    if (
        isinstance(join, (list, tuple))
        and len(join) >= 2
        and isinstance(join[0], str)
        and isinstance(join[1], str)
    ):
        return JoinClause(type=join[0], table=join[1], on=join[2] if len(join) > 2 else None)
    raise MalformedJoinError(join)


class FilterClauseBuilder:
    """Builds ``WHERE …`` or ``HAVING …`` from a condition specification."""

    def __init__(self, keyword: str, condition_builder: ConditionBuilder) -> None:
        self._keyword = keyword
        self._cond = condition_builder

    def build(self, condition: Any) -> str:
        sql = self._cond.build(condition)
        return "" if sql == "" else f"{self._keyword} {sql}"


class GroupByClauseBuilder:
    """Builds the ``GROUP BY …`` clause."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, columns: Sequence[str | Expression]) -> str:
        if not columns:
            return ""
        return f"GROUP BY {build_columns(self._ctx, columns, self._runtime)}"


class OrderByClauseBuilder:
    """Builds the ``ORDER BY …`` clause.  Ascending order gets no suffix."""

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, columns: Mapping[str, SortDirection | Expression]) -> str:
        if not columns:
            return ""
        orders: list[str] = []
        for name, direction in columns.items():
            if isinstance(direction, Expression):
                self._runtime.merge(direction.params)
                orders.append(direction.text)
                continue
            suffix = " DESC" if direction == SortDirection.DESC else ""
            orders.append(f"{self._ctx.compiler.quote_column_name(name)}{suffix}")
        return f"ORDER BY {', '.join(orders)}"


class LimitClauseBuilder:
    """Builds ``LIMIT n`` / ``OFFSET m``.

    LIMIT is emitted for any non-negative limit, OFFSET only when positive.
    """

    def build(self, limit: int | None, offset: int | None) -> str:
        sql = ""
        if limit is not None and limit >= 0:
            sql = f"LIMIT {int(limit)}"
        if offset is not None and offset > 0:
            sql += f" OFFSET {int(offset)}"
        return sql.lstrip()


class UnionBuilder:
    """Builds ``UNION (\\n<query>\\n) UNION (\\n<query>\\n)``.

    Sub-query parameters are merged into the shared runtime before the
    member is compiled with ``build_fn``, so generated names continue the
    outer numbering.  Afterwards the member's own ``params`` holds every
    binding of the statement so far.
    """

    def __init__(
        self,
        runtime: RuntimeContext,
        build_fn: Callable[[QuerySpec], str],
    ) -> None:
        self._runtime = runtime
        self._build_fn = build_fn

    def build(self, unions: Sequence[QuerySpec | str]) -> str:
        if not unions:
            return ""
        parts: list[str] = []
        for union in unions:
            if isinstance(union, QuerySpec):
                self._runtime.merge(union.params)
                parts.append(self._build_fn(union))
                union.params.update(self._runtime.params)
            else:
                parts.append(union)
        return "UNION (\n" + "\n) UNION (\n".join(parts) + "\n)"
