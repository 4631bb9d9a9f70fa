"""Moving values between result rows and entity objects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from .errors import InvalidColumnError, InvalidFieldError
from .model import Field, Model


class ValueResolver(ABC):
    """Reads fields of an entity and writes result columns into it."""

    def __init__(self, model: Model, entity: Any) -> None:
        self.model = model
        self.entity = entity

    @abstractmethod
    def read_column(self, field_name: str) -> Any:
        """Return the current value of a field of the entity."""

    @abstractmethod
    def write_columns(self, columns: Sequence[str], row: Sequence[Any]) -> None:
        """Store one row, whose values follow ``columns``, into the entity."""

    def _field(self, field_name: str) -> Field:
        field = self.model.fields.get(field_name)
        if field is None:
            raise InvalidFieldError(field_name)
        return field

    def _pairs(self, columns: Sequence[str], row: Sequence[Any]) -> list[tuple[Field, Any]]:
        columns = list(columns)
        values = list(row)
        if len(columns) != len(values):
            raise ValueError(
                f"expected {len(columns)} values for the columns, got {len(values)}"
            )
        fields = []
        for column in columns:
            field = self.model.columns.get(column)
            if field is None:
                raise InvalidColumnError(column)
            fields.append(field)
        return list(zip(fields, values))


class AttributeResolver(ValueResolver):
    """Resolver that goes through ``getattr`` and ``setattr``."""

    def read_column(self, field_name: str) -> Any:
        return getattr(self.entity, self._field(field_name).field_name)

    def write_columns(self, columns: Sequence[str], row: Sequence[Any]) -> None:
        for field, value in self._pairs(columns, row):
            setattr(self.entity, field.field_name, value)


class DictResolver(ValueResolver):
    """Resolver that works on the instance ``__dict__`` directly.

    Faster than attribute access; it bypasses properties and descriptors.
    """

    def __init__(self, model: Model, entity: Any) -> None:
        super().__init__(model, entity)
        self._values: dict[str, Any] = vars(entity)

    def read_column(self, field_name: str) -> Any:
        name = self._field(field_name).field_name
        if name in self._values:
            return self._values[name]
        return getattr(self.entity, name)

    def write_columns(self, columns: Sequence[str], row: Sequence[Any]) -> None:
        self._values.update(
            (field.field_name, value) for field, value in self._pairs(columns, row)
        )


ResolverFactory = Callable[[Model, Any], ValueResolver]