"""clauseQL – database-agnostic SQL statement compiler.

Describe the statement, get back SQL plus bound parameters.

Public API
----------
``compile_query``
    Parse (if needed) and compile a QuerySpec to parameterized SQL for a
    registered dialect target.

``QueryBuilder`` / ``SchemaBuilder``
    Per-dialect builders for SELECT / INSERT / UPDATE / DELETE and DDL.

Re-exported types
-----------------
``QuerySpec``, ``JoinClause``, ``Expression``, the condition variants,
``DialectOptions``, ``CompiledSQL``, the dialect compilers, and all error
classes.

Extensibility
-------------
New dialect compilers can be registered via::

    from clauseql.compile.registry import CompilerFactory

    @CompilerFactory.register("duckdb", "duck")
    class DuckDBCompiler(SQLCompiler):
        ...

After registration, ``compile_query(..., target="duck")`` picks it up, and
``CompilerFactory.builders("duckdb")`` returns its query and schema builders.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from clauseql.compile.base import CompiledSQL, SQLCompiler
from clauseql.compile.builder import QueryBuilder
from clauseql.compile.condition_builder import ConditionBuilder, RuntimeContext
from clauseql.compile.mysql import MySQLCompiler
from clauseql.compile.postgres import PostgresCompiler
from clauseql.compile.registry import CompilerFactory, DialectBuilders
from clauseql.compile.schema_builder import SchemaBuilder
from clauseql.compile.sqlite import SQLiteCompiler
from clauseql.compile.type_mapper import TypeMapper
from clauseql.errors import (
    ClauseQLError,
    CompilationError,
    MalformedJoinError,
    OperandCountError,
    ParseError,
    UnknownOperatorError,
    UnsupportedByDialectError,
)
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

# ---------------------------------------------------------------------------
# Register built-in compilers with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class("sqlite", SQLiteCompiler, ("sqlite3",))
CompilerFactory.register_class("postgres", PostgresCompiler, ("postgresql", "pgsql"))
CompilerFactory.register_class("mysql", MySQLCompiler, ("mariadb",))

__all__ = [
    # Core pipeline
    "compile_query",
    # Input models
    "QuerySpec",
    "JoinClause",
    "Expression",
    "SortDirection",
    "ConditionOp",
    "Condition",
    "RawSql",
    "HashCondition",
    "OperatorCondition",
    "to_condition",
    # Configuration
    "DialectOptions",
    # Compilation
    "CompiledSQL",
    "CompilerFactory",
    "DialectBuilders",
    "ConditionBuilder",
    "RuntimeContext",
    "QueryBuilder",
    "SchemaBuilder",
    "TypeMapper",
    "SQLCompiler",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
    # Errors
    "ClauseQLError",
    "ParseError",
    "CompilationError",
    "UnknownOperatorError",
    "OperandCountError",
    "MalformedJoinError",
    "UnsupportedByDialectError",
]


def compile_query(
    query: QuerySpec | dict[str, Any] | str,
    target: str = "sqlite",
    options: DialectOptions | None = None,
) -> CompiledSQL:
    """Parse and compile a QuerySpec for a registered dialect target.

    Example::

        compiled = clauseql.compile_query(
            {"FROM": ["users"], "WHERE": {"status": 1}, "LIMIT": 10},
            target="postgres",
        )
        cursor.execute(compiled.sql, compiled.params)

    Args:
        query: A ``QuerySpec``, its dict form, or a JSON string.
        target: Dialect target name or alias registered with
            ``CompilerFactory``, matched case-insensitively.
        options: Optional builder configuration.

    Returns:
        ``CompiledSQL`` with ``sql`` string, bound ``params``, and ``dialect``.

    Raises:
        ParseError: If ``query`` is not valid JSON or not a valid QuerySpec.
        CompilationError: (or subclass) if compilation fails.
    """
    raw: Any = query
    if isinstance(query, str):
        try:
            raw = json.loads(query)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc}", raw=query) from exc

    if not isinstance(raw, QuerySpec):
        try:
            raw = QuerySpec.model_validate(raw)
        except PydanticValidationError as exc:
            raise ParseError(
                f"QuerySpec structure is invalid: {exc}",
                raw=query if isinstance(query, str) else None,
            ) from exc

    return CompilerFactory.builders(target, options).query.build(raw)
