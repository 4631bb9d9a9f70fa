"""Exceptions raised by the ORM."""

from typing import Any

_PREFIX = "[easy-orm]"


class OrmError(Exception):
    """Base class for every error raised by the ORM.

    Two errors compare equal when they have the same type and message.
    """

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class InvalidModelTypeError(OrmError):
    """The entity is not a class with declared fields, nor an instance of one."""

    def __init__(self) -> None:
        super().__init__(
            f"{_PREFIX} invalid model entity type, "
            "only support a class with declared fields or an instance of one"
        )


class NoEligibleRowError(OrmError):
    """A query expected one row but returned none."""

    def __init__(self) -> None:
        super().__init__(f"{_PREFIX} eligible row not found")


class UnsupportedExpressionError(OrmError):
    """An expression of an unknown kind was handed to the SQL builder."""

    def __init__(self, expression: Any) -> None:
        super().__init__(f"{_PREFIX} unsupported expression: {expression!r}")
        self.expression = expression


class InvalidFieldError(OrmError):
    """A field name does not belong to the model."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"{_PREFIX} invalid field: {field_name}")
        self.field_name = field_name


class InvalidTableError(OrmError):
    """A table name is empty or has more than two dotted segments."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{_PREFIX} invalid table: {name}")
        self.name = name


class InvalidColumnError(OrmError):
    """A column name is empty or does not belong to the model."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{_PREFIX} invalid column: {name}")
        self.name = name


class InvalidTagError(OrmError):
    """A tag pair is not of the form ``key=value``."""

    def __init__(self, tag_pair: str) -> None:
        super().__init__(f"{_PREFIX} invalid tag: {tag_pair}")
        self.tag_pair = tag_pair


class RollbackError(OrmError):
    """A transaction was rolled back after a failure in the business code."""

    def __init__(
        self,
        business_error: BaseException | None,
        rollback_error: BaseException | None,
        panicked: bool,
    ) -> None:
        super().__init__(
            f"{_PREFIX} failed to rollback for biz error: {business_error}, "
            f"rollback error: {rollback_error}, business panicked: {panicked}"
        )
        self.business_error = business_error
        self.rollback_error = rollback_error
        self.panicked = panicked