"""Expression tree: columns, values, predicates, aggregates and raw SQL."""

from __future__ import annotations

import enum
import functools
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


class Expression:
    """Marker base for anything that may appear after ``WHERE``."""

    __slots__ = ()


class Selectable:
    """Marker base for anything that may appear in a ``SELECT`` list."""

    __slots__ = ()


class Op(str, enum.Enum):
    """Operators used in predicates."""

    EQ = "="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    NE = "!="
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    def __str__(self) -> str:
        return self.value


class ConditionType(str, enum.Enum):
    """The clause a condition belongs to."""

    WHERE = "WHERE"
    HAVING = "HAVING"

    def __str__(self) -> str:
        return f" {self.value} "


@dataclass(frozen=True)
class ColumnValue(Expression):
    """A literal value bound as a statement argument."""

    value: Any


def value_of(value: Any) -> Expression:
    """Return ``value`` if it is already an expression, else wrap it."""
    if isinstance(value, Expression):
        return value
    return ColumnValue(value)


@dataclass(frozen=True)
class Predicate(Expression):
    """A binary or unary operation; ``op`` is None for a bare operand."""

    left: Expression | None = None
    op: Op | None = None
    right: Expression | None = None

    def and_(self, right: Predicate) -> Predicate:
        return Predicate(self, Op.AND, right)

    def or_(self, right: Predicate) -> Predicate:
        return Predicate(self, Op.OR, right)

    def not_(self) -> Predicate:
        return Predicate(None, Op.NOT, self)


@dataclass(frozen=True)
class Column(Expression, Selectable):
    """A model field, referred to by its attribute name."""

    field_name: str
    alias: str = ""

    def as_(self, alias: str) -> Column:
        return Column(self.field_name, alias)

    def _compare(self, op: Op, value: Any) -> Predicate:
        return Predicate(self, op, value_of(value))

    def eq(self, value: Any) -> Predicate:
        return self._compare(Op.EQ, value)

    def ne(self, value: Any) -> Predicate:
        return self._compare(Op.NE, value)

    def gt(self, value: Any) -> Predicate:
        return self._compare(Op.GT, value)

    def ge(self, value: Any) -> Predicate:
        return self._compare(Op.GE, value)

    def lt(self, value: Any) -> Predicate:
        return self._compare(Op.LT, value)

    def le(self, value: Any) -> Predicate:
        return self._compare(Op.LE, value)


def col(field_name: str) -> Column:
    """Create a column expression for the model field ``field_name``."""
    return Column(field_name)


@dataclass(frozen=True)
class Condition:
    """A clause type together with the expression it holds."""

    typ: ConditionType
    expr: Expression


def new_condition(typ: ConditionType, predicates: Iterable[Predicate]) -> Condition:
    """Join the predicates with ``AND`` into one condition."""
    items = list(predicates)
    if not items:
        raise ValueError("a condition needs at least one predicate")
    return Condition(typ, functools.reduce(Predicate.and_, items))


@dataclass(frozen=True)
class Aggregate(Selectable):
    """An aggregate function applied to a model field."""

    func_name: str
    field_name: str
    alias: str = ""

    def as_(self, alias: str) -> Aggregate:
        return Aggregate(self.func_name, self.field_name, alias)


def count(field_name: str) -> Aggregate:
    return Aggregate("COUNT", field_name)


def sum_(field_name: str) -> Aggregate:
    return Aggregate("SUM", field_name)


def max_(field_name: str) -> Aggregate:
    return Aggregate("MAX", field_name)


def min_(field_name: str) -> Aggregate:
    return Aggregate("MIN", field_name)


def avg(field_name: str) -> Aggregate:
    return Aggregate("AVG", field_name)


@dataclass(frozen=True)
class Assignment:
    """A field set to a value, as in ``UPDATE ... SET``."""

    field_name: str
    value: Any


def assign(field_name: str, value: Any) -> Assignment:
    return Assignment(field_name, value)


@dataclass(frozen=True)
class RawExpression(Expression, Selectable):
    """SQL text written as is, with its own arguments."""

    raw: str
    args: tuple[Any, ...] = ()


def raw_expr(raw: str, *args: Any) -> Predicate:
    """Wrap raw SQL in a predicate so it can be used in conditions."""
    return Predicate(left=RawExpression(raw, args))