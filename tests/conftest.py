"""Shared pytest fixtures for clauseQL unit and integration tests."""
from __future__ import annotations

import pytest

from clauseql.compile.builder import QueryBuilder
from clauseql.compile.mysql import MySQLCompiler
from clauseql.compile.postgres import PostgresCompiler
from clauseql.compile.schema_builder import SchemaBuilder
from clauseql.compile.sqlite import SQLiteCompiler
from tests.fixtures import PlainCompiler


@pytest.fixture(scope="session")
def plain_builder() -> QueryBuilder:
    return QueryBuilder(PlainCompiler())


@pytest.fixture(scope="session")
def sqlite_builder() -> QueryBuilder:
    return QueryBuilder(SQLiteCompiler())


@pytest.fixture(scope="session")
def pg_builder() -> QueryBuilder:
    return QueryBuilder(PostgresCompiler())


@pytest.fixture(scope="session")
def mysql_builder() -> QueryBuilder:
    return QueryBuilder(MySQLCompiler())


@pytest.fixture(scope="session")
def mysql_schema() -> SchemaBuilder:
    return SchemaBuilder(MySQLCompiler())


@pytest.fixture(scope="session")
def sqlite_schema() -> SchemaBuilder:
    return SchemaBuilder(SQLiteCompiler())
