"""Running statements through sessions and middleware."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from .builder import Statement, StatementBuilder
from .dialect import Dialect, StandardSQL
from .errors import NoEligibleRowError
from .model import Registry
from .resolver import DictResolver, ResolverFactory

T = TypeVar("T")


class StatementType(str, enum.Enum):
    RAW = "RAW"
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass
class StatementContext:
    """What a handler is asked to run."""

    typ: StatementType
    builder: StatementBuilder


@dataclass
class StatementResult:
    """What a handler produced: a result or an error."""

    result: Any = None
    error: BaseException | None = None


Handler = Callable[[StatementContext], StatementResult]
Middleware = Callable[[Handler], Handler]


@dataclass(frozen=True)
class Result:
    """Outcome of an executed statement."""

    rows_affected: int
    last_insert_id: int | None = None

    @classmethod
    def from_cursor(cls, cursor: Any) -> Result:
        return cls(
            rows_affected=getattr(cursor, "rowcount", -1),
            last_insert_id=getattr(cursor, "lastrowid", None),
        )


@dataclass
class Core:
    """Settings shared by a database and its transactions."""

    dialect: Dialect = field(default_factory=StandardSQL)
    registry: Registry = field(default_factory=Registry)
    resolver_factory: ResolverFactory = DictResolver
    middlewares: list[Middleware] = field(default_factory=list)

    def chain(self, handler: Handler) -> Handler:
        """Wrap ``handler`` so that the first middleware runs outermost."""
        for middleware in reversed(self.middlewares):
            handler = middleware(handler)
        return handler


class Session(ABC):
    """Something statements run against: a database or a transaction.

    ``query`` and ``execute`` return DB-API cursors.
    """

    core: Core

    @abstractmethod
    def query(self, sql: str, args: Sequence[Any]) -> Any:
        """Run a query and return a cursor over its rows."""

    @abstractmethod
    def execute(self, sql: str, args: Sequence[Any]) -> Any:
        """Run a statement that returns no rows and return its cursor."""


def _new_entity(entity_type: type[T]) -> T:
    try:
        return entity_type()
    except TypeError:
        return entity_type.__new__(entity_type)


def _column_names(cursor: Any) -> list[str]:
    return [description[0] for description in cursor.description or ()]


def _close(cursor: Any) -> None:
    close = getattr(cursor, "close", None)
    if close is not None:
        close()


def _run(handler: Callable[[StatementContext], Any]) -> Handler:
    def handle(ctx: StatementContext) -> StatementResult:
        try:
            return StatementResult(result=handler(ctx))
        except Exception as exc:  # handed on to middleware, re-raised later
            return StatementResult(error=exc)

    return handle


def _dispatch(session: Session, handler: Handler, ctx: StatementContext) -> Any:
    outcome = session.core.chain(handler)(ctx)
    if outcome.error is not None:
        raise outcome.error
    return outcome.result


def _query(session: Session, ctx: StatementContext) -> tuple[list[str], Any]:
    statement: Statement = ctx.builder.build()
    cursor = session.query(statement.sql, statement.args)
    return _column_names(cursor), cursor


def find_one(statement_ctx: StatementContext, session: Session, entity_type: type[T]) -> T:
    """Run a query and return its first row as an entity."""

    def handle(ctx: StatementContext) -> T:
        columns, cursor = _query(session, ctx)
        try:
            row = cursor.fetchone()
        finally:
            _close(cursor)
        if row is None:
            raise NoEligibleRowError()
        entity = _new_entity(entity_type)
        model = session.core.registry.get_model(entity_type)
        session.core.resolver_factory(model, entity).write_columns(columns, row)
        return entity

    return _dispatch(session, _run(handle), statement_ctx)


def find_many(
    statement_ctx: StatementContext, session: Session, entity_type: type[T]
) -> list[T]:
    """Run a query and return every row as an entity."""

    def handle(ctx: StatementContext) -> list[T]:
        columns, cursor = _query(session, ctx)
        try:
            rows = cursor.fetchall()
        finally:
            _close(cursor)
        model = session.core.registry.get_model(entity_type)
        entities = []
        for row in rows:
            entity = _new_entity(entity_type)
            session.core.resolver_factory(model, entity).write_columns(columns, row)
            entities.append(entity)
        return entities

    return _dispatch(session, _run(handle), statement_ctx)


def execute(statement_ctx: StatementContext, session: Session) -> Result:
    """Run a statement that returns no rows."""

    def handle(ctx: StatementContext) -> Result:
        statement: Statement = ctx.builder.build()
        cursor = session.execute(statement.sql, statement.args)
        try:
            return Result.from_cursor(cursor)
        finally:
            _close(cursor)

    return _dispatch(session, _run(handle), statement_ctx)