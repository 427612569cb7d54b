"""Condition compiler for WHERE / HAVING / JOIN ON specifications.

``RuntimeContext`` is the per-statement parameter accumulator and
``ConditionBuilder`` turns a condition specification into a boolean SQL
expression, binding every literal through the runtime context.

Both classes receive a :class:`~clauseql.compile.context.CompilationContext`
(static config) and a :class:`RuntimeContext` (per-statement parameter
state).
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from clauseql.compile.context import CompilationContext
from clauseql.errors import CompilationError, OperandCountError
from clauseql.schema.conditions import (
    Condition,
    HashCondition,
    OperatorCondition,
    RawSql,
    to_condition,
)
from clauseql.schema.expressions import ConditionOp, Expression

#: Always-false predicate for IN / LIKE over an empty value set.
FALSE_PREDICATE = "0=1"


# ---------------------------------------------------------------------------
# Runtime parameter accumulator (shared across all sub-builders in one run)
# ---------------------------------------------------------------------------


@dataclass
class RuntimeContext:
    """Accumulates named parameters during a single compilation run.

    A single instance is threaded through every sub-builder and every
    nested sub-query so that placeholder names are unique for the entire
    statement.  Names are ``prefix`` followed by the collection size at
    generation time, so they increase strictly in generation order.

    ``params`` may be a caller-owned dict; it is appended to in place.
    """

    params: dict[str, Any] = field(default_factory=dict)
    prefix: str = "qp"

    def add_value(self, value: Any) -> str:
        """Store a literal value and return its placeholder name."""
        name = f"{self.prefix}{len(self.params)}"
        self.params[name] = value
        return name

    def merge(self, params: Mapping[str, Any]) -> None:
        """Insert externally named parameters unchanged."""
        self.params.update(params)


def render_value(ctx: CompilationContext, runtime: RuntimeContext, value: Any) -> str:
    """Return the SQL for one value: inlined Expression text or a placeholder."""
    if isinstance(value, Expression):
        runtime.merge(value.params)
        return value.text
    return ctx.compiler.param_placeholder(runtime.add_value(value))


def quote_column(ctx: CompilationContext, column: str) -> str:
    """Quote ``column`` unless it is a raw expression (contains ``(``)."""
    if "(" in column:
        return column
    return ctx.compiler.quote_column_name(column)


# ---------------------------------------------------------------------------
# Condition builder
# ---------------------------------------------------------------------------


class ConditionBuilder:
    """Compiles condition specifications to SQL.

    An empty result means "no condition"; callers omit the ``WHERE`` /
    ``HAVING`` / ``ON`` keyword when they receive one.

    Args:
        ctx: Static compilation context.
        runtime: Shared parameter accumulator.
    """

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, spec: Any) -> str:
        """Compile a condition specification to a SQL fragment.

        Raises:
            UnknownOperatorError: For an unrecognised operator token.
            OperandCountError: For wrong BETWEEN / IN / LIKE arity.
        """
        if isinstance(spec, Expression):
            self._runtime.merge(spec.params)
            return spec.text
        condition = to_condition(spec)
        if condition is None:
            return ""
        return self._build_condition(condition)

    def _build_condition(self, condition: Condition) -> str:
        if isinstance(condition, RawSql):
            return condition.sql
        if isinstance(condition, HashCondition):
            return self._build_hash(condition.pairs)
        if isinstance(condition, OperatorCondition):
            handler = self._HANDLERS[condition.op]
            return handler(self, condition.op, condition.operands)
        raise CompilationError(f"Unknown condition type: {type(condition).__name__}")

    # ------------------------------------------------------------------
    # Hash format: {column: value, ...}
    # ------------------------------------------------------------------

    def _build_hash(self, pairs: Mapping[str, Any]) -> str:
        parts: list[str] = []
        for column, value in pairs.items():
            if _is_value_list(value):
                parts.append(self._build_in(ConditionOp.IN, [column, value]))
                continue
            column_sql = quote_column(self._ctx, column)
            if value is None:
                parts.append(f"{column_sql} IS NULL")
            else:
                parts.append(f"{column_sql}={render_value(self._ctx, self._runtime, value)}")
        return parts[0] if len(parts) == 1 else "(" + ") AND (".join(parts) + ")"

    # ------------------------------------------------------------------
    # Operator format: [op, operand, ...]
    # ------------------------------------------------------------------

    def _build_and_or(self, op: ConditionOp, operands: list[Any]) -> str:
        parts: list[str] = []
        for operand in operands:
            sql = operand if isinstance(operand, str) else self.build(operand)
            if sql != "":
                parts.append(sql)
        if not parts:
            return ""
        if len(parts) == 1:
            return parts[0]
        return "(" + f") {op.value} (".join(parts) + ")"

    def _build_between(self, op: ConditionOp, operands: list[Any]) -> str:
        _require_operands(op, operands, 3)
        column, low, high = operands
        column_sql = quote_column(self._ctx, column)
        low_sql = render_value(self._ctx, self._runtime, low)
        high_sql = render_value(self._ctx, self._runtime, high)
        return f"{column_sql} {op.value} {low_sql} AND {high_sql}"

    def _build_in(self, op: ConditionOp, operands: list[Any]) -> str:
        _require_operands(op, operands, 2)
        column, values = operands
        values = _as_list(values)

        if not values or (isinstance(column, (list, tuple)) and not column):
            return FALSE_PREDICATE if op is ConditionOp.IN else ""

        if isinstance(column, (list, tuple)):
            if len(column) > 1:
                return self._build_composite_in(op, list(column), values)
            column = column[0]

        rendered: list[str] = []
        for value in values:
            if isinstance(value, Mapping):
                value = value.get(column)
            if value is None:
                rendered.append("NULL")
            else:
                rendered.append(render_value(self._ctx, self._runtime, value))

        column_sql = quote_column(self._ctx, column)
        if len(rendered) > 1:
            return f"{column_sql} {op.value} ({', '.join(rendered)})"
        equality = "=" if op is ConditionOp.IN else "<>"
        return f"{column_sql}{equality}{rendered[0]}"

    def _build_composite_in(
        self, op: ConditionOp, columns: list[str], rows: list[Any]
    ) -> str:
        tuples: list[str] = []
        for row in rows:
            if not isinstance(row, Mapping):
                raise CompilationError(
                    f"Composite '{op.value}' expects mapping rows, got {row!r}."
                )
            rendered: list[str] = []
            for column in columns:
                value = row.get(column)
                if value is None:
                    rendered.append("NULL")
                else:
                    rendered.append(render_value(self._ctx, self._runtime, value))
            tuples.append(f"({', '.join(rendered)})")
        columns_sql = ", ".join(quote_column(self._ctx, c) for c in columns)
        return f"({columns_sql}) {op.value} ({', '.join(tuples)})"

    # op token → (joining keyword, effective comparison operator)
    _LIKE_FORMS: dict[ConditionOp, tuple[str, str]] = {
        ConditionOp.LIKE: ("AND", "LIKE"),
        ConditionOp.NOT_LIKE: ("AND", "NOT LIKE"),
        ConditionOp.OR_LIKE: ("OR", "LIKE"),
        ConditionOp.OR_NOT_LIKE: ("OR", "NOT LIKE"),
    }

    def _build_like(self, op: ConditionOp, operands: list[Any]) -> str:
        _require_operands(op, operands, 2)
        column, values = operands
        values = _as_list(values)

        if not values:
            return FALSE_PREDICATE if op in (ConditionOp.LIKE, ConditionOp.OR_LIKE) else ""

        joiner, like_op = self._LIKE_FORMS[op]
        column_sql = quote_column(self._ctx, column)
        parts = [
            f"{column_sql} {like_op} {render_value(self._ctx, self._runtime, value)}"
            for value in values
        ]
        return f" {joiner} ".join(parts)

    def _build_comparison(self, op: ConditionOp, operands: list[Any]) -> str:
        _require_operands(op, operands, 2)
        column, value = operands
        column_sql = quote_column(self._ctx, column)
        return f"{column_sql}{op.value}{render_value(self._ctx, self._runtime, value)}"

    _HANDLERS: dict[ConditionOp, Callable[[ConditionBuilder, ConditionOp, list[Any]], str]] = {
        ConditionOp.AND: _build_and_or,
        ConditionOp.OR: _build_and_or,
        ConditionOp.BETWEEN: _build_between,
        ConditionOp.NOT_BETWEEN: _build_between,
        ConditionOp.IN: _build_in,
        ConditionOp.NOT_IN: _build_in,
        ConditionOp.LIKE: _build_like,
        ConditionOp.NOT_LIKE: _build_like,
        ConditionOp.OR_LIKE: _build_like,
        ConditionOp.OR_NOT_LIKE: _build_like,
        ConditionOp.EQ: _build_comparison,
        ConditionOp.NE: _build_comparison,
        ConditionOp.NE_ALT: _build_comparison,
        ConditionOp.GT: _build_comparison,
        ConditionOp.GTE: _build_comparison,
        ConditionOp.LT: _build_comparison,
        ConditionOp.LTE: _build_comparison,
    }


def _require_operands(op: ConditionOp, operands: list[Any], expected: int) -> None:
    if len(operands) != expected:
        raise OperandCountError(op.value, expected, len(operands))


def _is_value_list(value: Any) -> bool:
    """Any iterable except strings, mappings and Expression counts as a value list."""
    return isinstance(value, Iterable) and not isinstance(
        value, (str, bytes, bytearray, Mapping, Expression)
    )


def _as_list(values: Any) -> list[Any]:
    return list(values) if _is_value_list(values) else [values]
