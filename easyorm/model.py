"""Model metadata: mapping entity classes to tables and columns."""

from __future__ import annotations

import dataclasses
import re
import threading
import typing
from collections.abc import Callable
from typing import Any

from .errors import (
    InvalidColumnError,
    InvalidFieldError,
    InvalidModelTypeError,
    InvalidTableError,
    InvalidTagError,
)

TAG_NAME = "orm"
TAG_COLUMN = "column"

_UNDERSCORES = re.compile(r"_+")
_SEPARATORS = frozenset("-. ")
_CLASS_VAR_NAMES = frozenset({"ClassVar", "typing.ClassVar"})


@dataclasses.dataclass
class Field:
    """One attribute of an entity and the column it maps to."""

    typ: Any
    field_name: str
    column_name: str


@dataclasses.dataclass
class Model:
    """Table name plus fields indexed by attribute name and by column name."""

    table_name: str
    fields: dict[str, Field]
    columns: dict[str, Field]


ModelOption = Callable[[Model], None]


def with_table(table_name: str) -> ModelOption:
    """Option that sets the table name; at most one dot (``schema.table``)."""

    def apply(model: Model) -> None:
        if not table_name or len(table_name.split(".")) > 2:
            raise InvalidTableError(table_name)
        model.table_name = table_name

    return apply


def with_column(field_name: str, column_name: str) -> ModelOption:
    """Option that maps a field to another column name."""

    def apply(model: Model) -> None:
        if not column_name:
            raise InvalidColumnError(column_name)
        field = model.fields.get(field_name)
        if field is None:
            raise InvalidFieldError(field_name)
        model.columns.pop(field.column_name, None)
        model.columns[column_name] = field
        field.column_name = column_name

    return apply


def parse_tag(tag: str | None) -> dict[str, str]:
    """Parse an ``orm`` tag such as ``"column=user_name"`` into a dict."""
    if tag is None:
        return {}
    result: dict[str, str] = {}
    for pair in tag.split(","):
        parts = pair.split("=")
        if len(parts) != 2:
            raise InvalidTagError(pair)
        key, value = (part.strip(" ") for part in parts)
        if not key or not value:
            raise InvalidTagError(pair)
        result[key] = value
    return result


def _is_ascii_lower(ch: str) -> bool:
    return "a" <= ch <= "z"


def camel_to_underline(s: str) -> str:
    """Convert ``CamelCase`` (including acronyms) to ``snake_case``."""
    out: list[str] = []
    for i, ch in enumerate(s):
        if i > 0 and "A" <= ch <= "Z":
            prev = s[i - 1]
            nxt = s[i + 1] if i + 1 < len(s) else ""
            if _is_ascii_lower(prev) or (nxt and _is_ascii_lower(nxt)):
                out.append("_")
        out.append("_" if ch in _SEPARATORS else ch)
    text = "".join(out).lower().strip("_")
    return _UNDERSCORES.sub("_", text)


def _entity_class(entity: Any) -> type:
    cls = entity if isinstance(entity, type) else type(entity)
    if cls.__module__ == "builtins":
        raise InvalidModelTypeError()
    return cls


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.split("[", 1)[0].strip() in _CLASS_VAR_NAMES
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _declared_fields(cls: type) -> list[tuple[str, Any, str | None]]:
    if dataclasses.is_dataclass(cls):
        return [
            (f.name, f.type, f.metadata.get(TAG_NAME))
            for f in dataclasses.fields(cls)
        ]

    annotations = cls.__dict__.get("__annotations__", {})
    if not annotations:
        raise InvalidModelTypeError()
    tags = getattr(cls, "__orm_tags__", {})
    return [
        (name, annotation, tags.get(name))
        for name, annotation in annotations.items()
        if not _is_class_var(annotation)
    ]


def _parse_model(cls: type) -> Model:
    fields: dict[str, Field] = {}
    columns: dict[str, Field] = {}
    for name, typ, tag in _declared_fields(cls):
        column_name = parse_tag(tag).get(TAG_COLUMN) or camel_to_underline(name)
        field = Field(typ=typ, field_name=name, column_name=column_name)
        fields[name] = field
        columns[column_name] = field
    return Model(
        table_name=camel_to_underline(cls.__name__),
        fields=fields,
        columns=columns,
    )


class Registry:
    """Thread-safe cache of models, keyed by entity class.

    An entity may be given either as a class or as an instance of it.
    Dataclass fields take their tag from ``metadata["orm"]``; plain classes
    may declare tags in a ``__orm_tags__`` mapping of attribute to tag.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._models: dict[type, Model] = {}

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, entity: Any) -> bool:
        try:
            return _entity_class(entity) in self._models
        except InvalidModelTypeError:
            return False

    def get_model(self, entity: Any) -> Model:
        """Return the model of an entity, parsing and caching it on first use."""
        cls = _entity_class(entity)
        model = self._models.get(cls)
        if model is not None:
            return model
        with self._lock:
            model = self._models.get(cls)
            if model is None:
                model = _parse_model(cls)
                self._models[cls] = model
            return model

    def register_model(self, entity: Any, *options: ModelOption) -> Model:
        """Parse an entity, apply the options and store the resulting model."""
        cls = _entity_class(entity)
        model = _parse_model(cls)
        for option in options:
            option(model)
        with self._lock:
            self._models[cls] = model
        return model