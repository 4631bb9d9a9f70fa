"""Statements written as raw SQL."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from .builder import Statement
from .core import (
    Result,
    Session,
    StatementContext,
    StatementType,
    execute,
    find_many,
    find_one,
)

T = TypeVar("T")


class Raw(Generic[T]):
    """Raw SQL with its arguments, whose rows map to ``entity_type``."""

    def __init__(self, session: Session, entity_type: type[T], sql: str, *args: Any) -> None:
        self.session = session
        self.entity_type = entity_type
        self.sql = sql
        self.args = list(args)

    def build(self) -> Statement:
        return Statement(sql=self.sql, args=list(self.args))

    def _context(self) -> StatementContext:
        return StatementContext(StatementType.RAW, self)

    def find_one(self) -> T:
        """Run the query and return the first row as an entity."""
        return find_one(self._context(), self.session, self.entity_type)

    def find_many(self) -> list[T]:
        """Run the query and return every row as an entity."""
        return find_many(self._context(), self.session, self.entity_type)

    def exec(self) -> Result:
        """Run the statement and report its outcome."""
        return execute(self._context(), self.session)