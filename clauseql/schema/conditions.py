"""Typed condition variants for WHERE / HAVING / JOIN ON specifications.

Callers may write conditions in the compact native shapes::

    "status = 1"                          # raw SQL, passed through verbatim
    {"status": 1, "deleted": None}        # hash form, pairs AND-ed
    ["between", "age", 18, 65]            # operator form

:func:`to_condition` resolves any of these into one of three explicit
variants (:class:`RawSql`, :class:`HashCondition` and
:class:`OperatorCondition`), so the compiler dispatches on a closed set of
types.  The variants may also be constructed directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from clauseql.errors import CompilationError
from clauseql.schema.expressions import ConditionOp

_FORBID = ConfigDict(extra="forbid")


class RawSql(BaseModel):
    """A verbatim SQL condition.  No escaping is applied."""

    model_config = _FORBID

    sql: str


class HashCondition(BaseModel):
    """Column → value pairs, implicitly AND-ed.

    A list value becomes an ``IN`` test, ``None`` becomes ``IS NULL``.
    """

    model_config = _FORBID

    pairs: dict[str, Any]


class OperatorCondition(BaseModel):
    """An operator applied to its operands, e.g. ``IN(column, values)``."""

    model_config = _FORBID

    op: ConditionOp
    operands: list[Any]


Condition = Union[RawSql, HashCondition, OperatorCondition]

CONDITION_TYPES = (RawSql, HashCondition, OperatorCondition)


def to_condition(spec: Any) -> Condition | None:
    """Resolve a native condition specification into a typed variant.

    Args:
        spec: A string, mapping, operator sequence, or an existing variant.

    Returns:
        The typed variant, or ``None`` for an empty specification (meaning
        "no condition").

    Raises:
        UnknownOperatorError: If a sequence starts with an unknown operator.
        CompilationError: If ``spec`` has none of the supported shapes, or a
            hash condition has a key that is not a column name.
    """
    if spec is None:
        return None
    if isinstance(spec, CONDITION_TYPES):
        return spec
    if isinstance(spec, str):
        return RawSql(sql=spec)
    if isinstance(spec, Mapping):
        if not spec:
            return None
        try:
            return HashCondition(pairs=dict(spec))
        except ValidationError as exc:
            raise CompilationError(
                f"Hash condition keys must be column names, got {list(spec)!r}"
            ) from exc
    if isinstance(spec, (list, tuple)):
        if not spec:
            return None
        return OperatorCondition(op=ConditionOp.parse(spec[0]), operands=list(spec[1:]))
    raise CompilationError(f"Unsupported condition shape: {type(spec).__name__}")
