"""Database handle and transactions over a DB-API connection."""

from __future__ import annotations

import contextlib
import sqlite3
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

from .core import Core, Middleware, Session
from .dialect import Dialect
from .errors import RollbackError
from .model import Registry
from .resolver import ResolverFactory

R = TypeVar("R")

DBOption = Callable[["DB"], None]


def _run_cursor(connection: Any, sql: str, args: Sequence[Any]) -> Any:
    cursor = connection.cursor()
    try:
        cursor.execute(sql, tuple(args))
    except BaseException:
        cursor.close()
        raise
    return cursor


class Tx(Session):
    """A transaction on a connection, sharing the settings of its database."""

    def __init__(
        self,
        connection: Any,
        core: Core,
        *,
        on_done: Callable[[Tx], None] | None = None,
    ) -> None:
        self.connection = connection
        self.core = core
        self._on_done = on_done
        self._done = False

    @property
    def done(self) -> bool:
        """True once the transaction has been committed or rolled back."""
        return self._done

    def _check(self) -> None:
        if self._done:
            raise RuntimeError("transaction has already been committed or rolled back")

    def _finish(self) -> None:
        self._done = True
        if self._on_done is not None:
            self._on_done(self)

    def query(self, sql: str, args: Sequence[Any] = ()) -> Any:
        self._check()
        return _run_cursor(self.connection, sql, args)

    def execute(self, sql: str, args: Sequence[Any] = ()) -> Any:
        self._check()
        return _run_cursor(self.connection, sql, args)

    def commit(self) -> None:
        """Make the changes of the transaction permanent."""
        self._check()
        try:
            self.connection.commit()
        finally:
            self._finish()

    def rollback(self) -> None:
        """Discard the changes of the transaction."""
        self._check()
        try:
            self.connection.rollback()
        finally:
            self._finish()


class DB(Session):
    """A database connection together with the ORM settings used on it.

    Statements run outside a transaction are committed right away.
    """

    def __init__(self, connection: Any, core: Core | None = None) -> None:
        self.connection = connection
        self.core = core if core is not None else Core()
        self._tx: Tx | None = None

    def __enter__(self) -> DB:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def query(self, sql: str, args: Sequence[Any] = ()) -> Any:
        return _run_cursor(self.connection, sql, args)

    def execute(self, sql: str, args: Sequence[Any] = ()) -> Any:
        cursor = _run_cursor(self.connection, sql, args)
        if self._tx is None:
            self.connection.commit()
        return cursor

    def _release(self, tx: Tx) -> None:
        if self._tx is tx:
            self._tx = None

    def begin(self) -> Tx:
        """Start a transaction; only one may be open at a time."""
        if self._tx is not None:
            raise RuntimeError("a transaction is already in progress")
        self._tx = Tx(self.connection, self.core, on_done=self._release)
        return self._tx

    @contextlib.contextmanager
    def transaction(self) -> Iterator[Tx]:
        """Open a transaction, committed on success and rolled back on error."""
        tx = self.begin()
        try:
            yield tx
        except BaseException:
            if not tx.done:
                tx.rollback()
            raise
        if not tx.done:
            tx.commit()

    def do_tx(self, func: Callable[[Tx], R]) -> R:
        """Run ``func`` in a transaction and commit, or roll back on failure.

        A failure in ``func`` is raised as :class:`RollbackError`.
        """
        tx = self.begin()
        try:
            result = func(tx)
        except Exception as exc:
            try:
                tx.rollback()
            except Exception as rollback_exc:
                raise RollbackError(exc, rollback_exc, False) from exc
            raise RollbackError(exc, None, False) from exc
        except BaseException:
            with contextlib.suppress(Exception):
                tx.rollback()
            raise
        tx.commit()
        return result

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()


def with_dialect(dialect: Dialect) -> DBOption:
    def apply(db: DB) -> None:
        db.core.dialect = dialect

    return apply


def with_registry(registry: Registry) -> DBOption:
    def apply(db: DB) -> None:
        db.core.registry = registry

    return apply


def with_resolver(resolver_factory: ResolverFactory) -> DBOption:
    def apply(db: DB) -> None:
        db.core.resolver_factory = resolver_factory

    return apply


def with_middleware(*middlewares: Middleware) -> DBOption:
    def apply(db: DB) -> None:
        db.core.middlewares.extend(middlewares)

    return apply


def open_db(connection: Any, *options: DBOption) -> DB:
    """Wrap an open DB-API connection and apply the options."""
    db = DB(connection, Core())
    for option in options:
        option(db)
    return db


def connect(database: str, *options: DBOption) -> DB:
    """Open an SQLite database and wrap it."""
    return open_db(sqlite3.connect(database), *options)