"""Assembling SQL text and arguments from expressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from .dialect import Dialect
from .errors import InvalidFieldError, UnsupportedExpressionError
from .expression import Aggregate, Column, ColumnValue, Predicate, RawExpression
from .model import Model


@dataclass
class Statement:
    """SQL text and the arguments bound to its placeholders."""

    sql: str
    args: list[Any] = field(default_factory=list)


class StatementBuilder(Protocol):
    """Anything that can produce a statement."""

    def build(self) -> Statement: ...


class Builder:
    """Accumulates SQL for one model in one dialect."""

    def __init__(self, dialect: Dialect, model: Model | None = None) -> None:
        self.dialect = dialect
        self.model = model
        self.args: list[Any] = []
        self._parts: list[str] = []

    @property
    def quote(self) -> str:
        return self.dialect.quote

    def write(self, text: str) -> None:
        """Append SQL text as is."""
        self._parts.append(text)

    def write_quoted(self, name: str) -> None:
        self._parts.append(f"{self.quote}{name}{self.quote}")

    def _require_model(self) -> Model:
        if self.model is None:
            raise ValueError("the builder has no model")
        return self.model

    def write_table(self) -> None:
        """Write the table name, quoting ``schema.table`` part by part."""
        schema, _, table = self._require_model().table_name.partition(".")
        self.write_quoted(schema)
        if table:
            self.write(".")
            self.write_quoted(table)

    def write_field(self, name: str) -> None:
        """Write the quoted column of the model field ``name``."""
        field_ = self._require_model().fields.get(name)
        if field_ is None:
            raise InvalidFieldError(name)
        self.write_quoted(field_.column_name)

    def _build_operand(self, expr: Any) -> None:
        if isinstance(expr, Predicate):
            self.write("(")
            self.build_expression(expr)
            self.write(")")
        else:
            self.build_expression(expr)

    def build_expression(self, expr: Any) -> None:
        match expr:
            case None:
                return
            case Predicate(left=left, op=op, right=right):
                self._build_operand(left)
                if op is not None:
                    if left is not None:
                        self.write(" ")
                    self.write(op.value)
                    if right is not None:
                        self.write(" ")
                    self._build_operand(right)
            case Column():
                self.build_column(expr)
            case ColumnValue(value=value):
                self.add_args(value)
                self.write(self.dialect.bind_arg(len(self.args)))
            case RawExpression(raw=raw, args=args):
                self.write(raw)
                self.add_args(*args)
            case _:
                raise UnsupportedExpressionError(expr)

    def build_selectable(self, selectable: Any) -> None:
        match selectable:
            case Column():
                self.build_column(selectable)
            case Aggregate():
                self.build_aggregate(selectable)
            case RawExpression(raw=raw, args=args):
                self.write(raw)
                self.add_args(*args)
            case _:
                raise UnsupportedExpressionError(selectable)

    def _write_alias(self, alias: str) -> None:
        if alias:
            self.write(" AS ")
            self.write_quoted(alias)

    def build_column(self, column: Column) -> None:
        self.write_field(column.field_name)
        self._write_alias(column.alias)

    def build_aggregate(self, aggregate: Aggregate) -> None:
        field_ = self._require_model().fields.get(aggregate.field_name)
        if field_ is None:
            raise InvalidFieldError(aggregate.field_name)
        self.write(f"{aggregate.func_name}(")
        self.write_quoted(field_.column_name)
        self.write(")")
        self._write_alias(aggregate.alias)

    def add_args(self, *args: Any) -> None:
        self.args.extend(args)

    def statement(self) -> Statement:
        """Return what has been written so far as a statement."""
        return Statement(sql="".join(self._parts), args=list(self.args))