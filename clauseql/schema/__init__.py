"""clauseQL schema models: QuerySpec, conditions, expressions, options."""
from clauseql.schema.conditions import (
    Condition,
    HashCondition,
    OperatorCondition,
    RawSql,
    to_condition,
)
from clauseql.schema.dialect import DialectOptions
from clauseql.schema.expressions import ConditionOp, Expression, SortDirection
from clauseql.schema.query_spec import JoinClause, QuerySpec

__all__ = [
    "Condition",
    "ConditionOp",
    "DialectOptions",
    "Expression",
    "HashCondition",
    "JoinClause",
    "OperatorCondition",
    "QuerySpec",
    "RawSql",
    "SortDirection",
    "to_condition",
]
