"""SELECT statements built from expressions."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from .builder import Builder, Statement
from .core import Session, StatementContext, StatementType, find_many, find_one
from .expression import Condition, ConditionType, Predicate, new_condition

T = TypeVar("T")


class Selector(Generic[T]):
    """Builds and runs a ``SELECT`` over the table of ``entity_type``."""

    def __init__(self, session: Session, entity_type: type[T]) -> None:
        self.session = session
        self.entity_type = entity_type
        self._limit = 0
        self._offset = -1
        self._selectables: list[Any] = []
        self._where: list[Condition] = []

    def select(self, *selectables: Any) -> Selector[T]:
        """Set the selected columns, aggregates or raw expressions."""
        self._selectables = list(selectables)
        return self

    def where(self, *predicates: Predicate) -> Selector[T]:
        """Add a ``WHERE`` condition joining the predicates with ``AND``."""
        if predicates:
            self._where.append(new_condition(ConditionType.WHERE, predicates))
        return self

    def limit(self, limit: int) -> Selector[T]:
        self._limit = limit
        return self

    def offset(self, offset: int) -> Selector[T]:
        self._offset = offset
        return self

    def build(self) -> Statement:
        """Return the SQL and arguments of the query."""
        model = self.session.core.registry.get_model(self.entity_type)
        builder = Builder(self.session.core.dialect, model)
        builder.write("SELECT ")
        if self._selectables:
            for index, selectable in enumerate(self._selectables):
                if index:
                    builder.write(", ")
                builder.build_selectable(selectable)
        else:
            builder.write("*")
        builder.write(" FROM ")
        builder.write_table()
        for condition in self._where:
            builder.write(str(condition.typ))
            builder.build_expression(condition.expr)
        builder.write(";")
        return builder.statement()

    def find_one(self) -> T:
        """Run the query and return the first row as an entity."""
        self._limit = 1
        return find_one(
            StatementContext(StatementType.SELECT, self), self.session, self.entity_type
        )

    def find_many(self) -> list[T]:
        """Run the query and return every row as an entity."""
        return find_many(
            StatementContext(StatementType.SELECT, self), self.session, self.entity_type
        )