"""Integration tests: compile → execute against a real SQLite in-memory DB.

Tables are created with SchemaBuilder and seeded with batch_insert, so the
DDL and DML builders are exercised against the engine as well as SELECT.
"""
from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from typing import Any

import pytest

import clauseql
from clauseql import CompiledSQL, Expression, QueryBuilder, SchemaBuilder, SQLiteCompiler
from tests.fixtures import (
    ORDER_COLUMNS,
    ORDER_ROWS,
    TABLES,
    USER_COLUMNS,
    USER_ROWS,
    make_sqlite_conn,
)

BUILDER = QueryBuilder(SQLiteCompiler())
SCHEMA = SchemaBuilder(SQLiteCompiler())


@pytest.fixture()
def db() -> Iterator[sqlite3.Connection]:
    conn = make_sqlite_conn()
    for table, columns in TABLES.items():
        conn.execute(SCHEMA.create_table(table, columns))
    _execute(conn, BUILDER.batch_insert("users", USER_COLUMNS, USER_ROWS))
    _execute(conn, BUILDER.batch_insert("orders", ORDER_COLUMNS, ORDER_ROWS))
    conn.commit()
    yield conn
    conn.close()


def _execute(conn: sqlite3.Connection, compiled: CompiledSQL) -> sqlite3.Cursor:
    return conn.execute(compiled.sql, compiled.params)


def _select(conn: sqlite3.Connection, query: dict[str, Any]) -> list[sqlite3.Row]:
    return _execute(conn, clauseql.compile_query(query)).fetchall()


def _names(rows: list[sqlite3.Row]) -> list[str]:
    return [row["name"] for row in rows]


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def test_hash_filter_with_null(db):
    rows = _select(
        db,
        {
            "SELECT": ["name"],
            "FROM": ["users"],
            "WHERE": {"status": 1, "deleted_at": None},
            "ORDER_BY": "name",
        },
    )
    assert _names(rows) == ["alice", "dave"]


def test_in_list(db):
    rows = _select(db, {"FROM": ["users"], "WHERE": ["in", "id", [1, 3]], "ORDER_BY": "id"})
    assert _names(rows) == ["alice", "carol"]


def test_single_value_not_in(db):
    rows = _select(db, {"FROM": ["users"], "WHERE": ["not in", "id", [2]], "ORDER_BY": "id"})
    assert _names(rows) == ["alice", "carol", "dave"]


def test_empty_in_matches_nothing(db):
    assert _select(db, {"FROM": ["users"], "WHERE": ["in", "id", []]}) == []


def test_empty_not_in_matches_everything(db):
    assert len(_select(db, {"FROM": ["users"], "WHERE": ["not in", "id", []]})) == 4


def test_hash_list_value(db):
    rows = _select(db, {"FROM": ["users"], "WHERE": {"name": ["bob", "dave"]}, "ORDER_BY": "id"})
    assert _names(rows) == ["bob", "dave"]


def test_or_like(db):
    rows = _select(
        db,
        {"FROM": ["users"], "WHERE": ["or like", "email", ["%example.org", "%nobody%"]]},
    )
    assert _names(rows) == ["dave"]


def test_not_like_skips_nulls(db):
    rows = _select(
        db,
        {"FROM": ["users"], "WHERE": ["not like", "email", ["%example.com"]]},
    )
    assert _names(rows) == ["dave"]


def test_between(db):
    rows = _select(
        db,
        {"SELECT": ["total"], "FROM": ["orders"], "WHERE": ["between", "total", 5, 11], "ORDER_BY": "total"},
    )
    assert [row["total"] for row in rows] == [5.0, 7.25, 10.5]


def test_nested_and_or(db):
    rows = _select(
        db,
        {
            "FROM": ["users"],
            "WHERE": ["and", {"status": 1}, ["or", ["like", "name", "a%"], [">", "id", 3]]],
            "ORDER_BY": "id",
        },
    )
    assert _names(rows) == ["alice", "dave"]


def test_expression_value(db):
    rows = _select(
        db,
        {"FROM": ["users"], "WHERE": {"status": Expression("1 - :delta", {"delta": 1})}},
    )
    assert _names(rows) == ["carol"]


# ---------------------------------------------------------------------------
# Joins, aggregation and paging
# ---------------------------------------------------------------------------


def test_join_group_having_order_limit(db):
    rows = _select(
        db,
        {
            "SELECT": ["u.name", "COUNT(o.id) AS n", "SUM(o.total) AS spent"],
            "FROM": ["users u"],
            "JOIN": [["INNER JOIN", "orders o", "o.user_id = u.id"]],
            "WHERE": {"o.state": "paid"},
            "GROUP_BY": ["u.name"],
            "HAVING": [">=", "COUNT(o.id)", 1],
            "ORDER_BY": {"spent": "DESC"},
            "LIMIT": 2,
        },
    )
    assert [(row["name"], row["n"], row["spent"]) for row in rows] == [
        ("alice", 2, 109.5),
        ("bob", 1, 42.0),
    ]


def test_left_join_with_compound_on(db):
    rows = _select(
        db,
        {
            "SELECT": ["u.name", "o.total"],
            "FROM": ["users u"],
            "JOIN": [
                {
                    "type": "LEFT JOIN",
                    "table": "orders o",
                    "on": ["and", "o.user_id = u.id", {"o.state": "pending"}],
                }
            ],
            "ORDER_BY": "u.id",
        },
    )
    assert [(row["name"], row["total"]) for row in rows] == [
        ("alice", None),
        ("bob", None),
        ("carol", None),
        ("dave", 7.25),
    ]


def test_limit_offset(db):
    rows = _select(db, {"FROM": ["users"], "ORDER_BY": "id", "LIMIT": 2, "OFFSET": 1})
    assert _names(rows) == ["bob", "carol"]


def test_distinct(db):
    rows = _select(
        db, {"SELECT": ["state"], "DISTINCT": True, "FROM": ["orders"], "ORDER_BY": "state"}
    )
    assert [row["state"] for row in rows] == ["paid", "pending", "refunded"]


# ---------------------------------------------------------------------------
# Data modification
# ---------------------------------------------------------------------------


def test_insert_with_expressions(db):
    compiled = BUILDER.insert(
        "orders",
        {
            "user_id": 3,
            "total": Expression(":base * 2", {"base": 4.5}),
            "state": "paid",
            "created_at": Expression("CURRENT_TIMESTAMP"),
        },
    )
    cursor = _execute(db, compiled)
    row = db.execute("SELECT * FROM orders WHERE id = ?", (cursor.lastrowid,)).fetchone()
    assert row["total"] == 9.0
    assert row["state"] == "paid"
    assert row["created_at"] is not None


def test_update(db):
    cursor = _execute(db, BUILDER.update("users", {"status": 2}, ["in", "id", [1, 2]]))
    assert cursor.rowcount == 2
    rows = _select(db, {"FROM": ["users"], "WHERE": {"status": 2}, "ORDER_BY": "id"})
    assert _names(rows) == ["alice", "bob"]


def test_delete(db):
    cursor = _execute(db, BUILDER.delete("orders", {"state": "refunded"}))
    assert cursor.rowcount == 1
    assert len(_select(db, {"FROM": ["orders"]})) == 4


def test_delete_with_always_false_condition(db):
    cursor = _execute(db, BUILDER.delete("orders", ["in", "id", []]))
    assert cursor.rowcount == 0


def test_batch_insert_appends_rows(db):
    _execute(db, BUILDER.batch_insert("orders", ["user_id", "total"], [(3, 1.0), (3, 2.0)]))
    rows = _select(db, {"SELECT": ["total"], "FROM": ["orders"], "WHERE": {"user_id": 3}})
    assert sorted(row["total"] for row in rows) == [1.0, 2.0]


# ---------------------------------------------------------------------------
# Schema statements
# ---------------------------------------------------------------------------


def test_check_integrity_toggles_foreign_keys(db):
    db.execute(BUILDER.check_integrity(True))
    assert db.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    db.execute(BUILDER.check_integrity(False))
    assert db.execute("PRAGMA foreign_keys").fetchone()[0] == 0


def test_add_and_rename_column(db):
    db.execute(SCHEMA.add_column("users", "nickname", "string(20)"))
    db.execute(SCHEMA.rename_column("users", "nickname", "handle"))
    _execute(db, BUILDER.update("users", {"handle": "al"}, {"name": "alice"}))
    rows = _select(db, {"SELECT": ["name"], "FROM": ["users"], "WHERE": ["=", "handle", "al"]})
    assert _names(rows) == ["alice"]


def test_create_index_and_drop_table(db):
    db.execute(SCHEMA.create_index("idx_users_email", "users", "email", unique=True))
    with pytest.raises(sqlite3.IntegrityError):
        _execute(db, BUILDER.insert("users", {"name": "eve", "email": "dave@example.org", "status": 1}))
    db.execute(SCHEMA.drop_table("orders"))
    tables = [row[0] for row in db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")]
    assert "orders" not in tables
