"""SQL dialects: identifier quoting and argument placeholders."""


def _check_position(position: int) -> int:
    if position < 1:
        raise ValueError(f"argument position must be 1 or more, got {position}")
    return position


class Dialect:
    """Base dialect: double-quoted identifiers and ``?`` placeholders."""

    quote = '"'
    placeholder = "?"

    def bind_arg(self, position: int) -> str:
        """Return the placeholder for the argument at 1-based ``position``."""
        _check_position(position)
        return self.placeholder

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StandardSQL(Dialect):
    """Standard SQL."""


class Postgres(StandardSQL):
    """PostgreSQL: numbered ``$n`` placeholders."""

    def bind_arg(self, position: int) -> str:
        return f"${_check_position(position)}"


class MySQL(StandardSQL):
    """MySQL: back-quoted identifiers."""

    quote = "`"


STANDARD_SQL = StandardSQL()
POSTGRES_DIALECT = Postgres()
MYSQL_DIALECT = MySQL()