from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from easyorm.builder import Statement
from easyorm.core import (
    Core,
    Result,
    Session,
    StatementContext,
    StatementResult,
    StatementType,
    execute,
    find_many,
    find_one,
)
from easyorm.errors import InvalidColumnError, InvalidFieldError, NoEligibleRowError
from easyorm.resolver import AttributeResolver


@dataclass
class CoreTestModel:
    id: int = 0
    name: str = ""


class SqliteSession(Session):
    def __init__(self, connection, core=None):
        self.connection = connection
        self.core = core or Core()

    def query(self, sql, args):
        return self.connection.execute(sql, list(args))

    def execute(self, sql, args):
        return self.connection.execute(sql, list(args))


class StaticBuilder:
    def __init__(self, sql, args=()):
        self._statement = Statement(sql, list(args))

    def build(self):
        return self._statement


class FailingBuilder:
    def __init__(self, error):
        self.error = error

    def build(self):
        raise self.error


SELECT_ALL = "SELECT id, name FROM core_test_model ORDER BY id"


@pytest.fixture
def session():
    connection = sqlite3.connect(":memory:")
    connection.execute("CREATE TABLE core_test_model (id INTEGER PRIMARY KEY, name TEXT)")
    connection.executemany(
        "INSERT INTO core_test_model (id, name) VALUES (?, ?)", [(1, "foo"), (2, "bar")]
    )
    yield SqliteSession(connection)
    connection.close()


def select(sql=SELECT_ALL, args=()):
    return StatementContext(StatementType.SELECT, StaticBuilder(sql, args))


def test_middleware_sees_statement_type(session):
    seen = []

    def recorder(next_handler):
        def handle(ctx):
            seen.append(ctx.typ.value)
            return next_handler(ctx)

        return handle

    session.core.middlewares.append(recorder)
    result = find_one(select(), session, CoreTestModel)
    assert result == CoreTestModel(1, "foo")
    assert seen == ["SELECT"]


def test_find_one(session):
    assert find_one(select(), session, CoreTestModel) == CoreTestModel(1, "foo")


def test_find_one_with_args(session):
    ctx = select("SELECT id, name FROM core_test_model WHERE name = ?", ["bar"])
    assert find_one(ctx, session, CoreTestModel) == CoreTestModel(2, "bar")


def test_find_one_without_rows(session):
    ctx = select("SELECT id, name FROM core_test_model WHERE id = ?", [99])
    with pytest.raises(NoEligibleRowError):
        find_one(ctx, session, CoreTestModel)


def test_find_many(session):
    assert find_many(select(), session, CoreTestModel) == [
        CoreTestModel(1, "foo"),
        CoreTestModel(2, "bar"),
    ]


def test_find_many_empty(session):
    ctx = select("SELECT id, name FROM core_test_model WHERE id > ?", [99])
    assert find_many(ctx, session, CoreTestModel) == []


def test_find_many_with_attribute_resolver(session):
    session.core.resolver_factory = AttributeResolver
    result = find_many(select(), session, CoreTestModel)
    assert [entity.name for entity in result] == ["foo", "bar"]


def test_unknown_column(session):
    ctx = select("SELECT id, name AS other FROM core_test_model")
    with pytest.raises(InvalidColumnError) as info:
        find_one(ctx, session, CoreTestModel)
    assert info.value == InvalidColumnError("other")


def test_builder_error_propagates(session):
    ctx = StatementContext(StatementType.SELECT, FailingBuilder(InvalidFieldError("missing")))
    with pytest.raises(InvalidFieldError) as info:
        find_many(ctx, session, CoreTestModel)
    assert info.value == InvalidFieldError("missing")


def test_database_error_propagates(session):
    with pytest.raises(sqlite3.OperationalError):
        find_one(select("SELECT * FROM missing_table"), session, CoreTestModel)


def test_execute(session):
    ctx = StatementContext(
        StatementType.INSERT,
        StaticBuilder("INSERT INTO core_test_model (id, name) VALUES (?, ?)", [3, "baz"]),
    )
    result = execute(ctx, session)
    assert result == Result(rows_affected=1, last_insert_id=3)
    assert find_one(select("SELECT id, name FROM core_test_model WHERE id = ?", [3]),
                    session, CoreTestModel) == CoreTestModel(3, "baz")


def test_execute_counts_rows(session):
    ctx = StatementContext(StatementType.DELETE, StaticBuilder("DELETE FROM core_test_model"))
    assert execute(ctx, session).rows_affected == 2
    assert find_many(select(), session, CoreTestModel) == []


def test_result_from_cursor():
    cursor = SimpleNamespace(rowcount=2, lastrowid=None)
    assert Result.from_cursor(cursor) == Result(2, None)


def test_chain_without_middleware_is_identity():
    def handler(ctx):
        return StatementResult()

    assert Core().chain(handler) is handler


def test_middleware_order(session):
    calls = []

    def tracing(name):
        def middleware(next_handler):
            def handle(ctx):
                calls.append(name)
                return next_handler(ctx)

            return handle

        return middleware

    session.core.middlewares.extend([tracing("outer"), tracing("inner")])
    result = find_many(select(), session, CoreTestModel)
    assert result == [CoreTestModel(1, "foo"), CoreTestModel(2, "bar")]
    assert calls == ["outer", "inner"]


def test_middleware_can_short_circuit(session):
    sentinel = CoreTestModel(7, "cached")

    def cache(next_handler):
        return lambda ctx: StatementResult(result=sentinel)

    session.core.middlewares.append(cache)
    ctx = StatementContext(StatementType.SELECT, FailingBuilder(RuntimeError("unused")))
    assert find_one(ctx, session, CoreTestModel) is sentinel


def test_middleware_sees_errors(session):
    seen = []

    def observer(next_handler):
        def handle(ctx):
            outcome = next_handler(ctx)
            seen.append(outcome.error)
            return outcome

        return handle

    session.core.middlewares.append(observer)
    ctx = select("SELECT id, name FROM core_test_model WHERE id = ?", [99])
    with pytest.raises(NoEligibleRowError):
        find_one(ctx, session, CoreTestModel)
    assert seen == [NoEligibleRowError()]