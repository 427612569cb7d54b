"""clauseQL compilation layer: specs → parameterized SQL."""
from clauseql.compile.base import CompiledSQL, SQLCompiler
from clauseql.compile.builder import QueryBuilder
from clauseql.compile.condition_builder import ConditionBuilder, RuntimeContext
from clauseql.compile.mysql import MySQLCompiler
from clauseql.compile.postgres import PostgresCompiler
from clauseql.compile.schema_builder import SchemaBuilder
from clauseql.compile.sqlite import SQLiteCompiler
from clauseql.compile.type_mapper import TypeMapper

__all__ = [
    "CompiledSQL",
    "SQLCompiler",
    "ConditionBuilder",
    "RuntimeContext",
    "QueryBuilder",
    "SchemaBuilder",
    "TypeMapper",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
]
