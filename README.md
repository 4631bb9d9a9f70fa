# easyorm

A small object-relational mapper. It maps Python classes to tables, builds
parameterised `SELECT` statements from column expressions, runs them over a
DB-API connection and maps the result rows back onto new objects.

The package has no runtime dependencies.

```
pip install .
pip install ".[test]"   # adds pytest
pytest
```

## A first example

```python
from dataclasses import dataclass, field

from easyorm.db import connect
from easyorm.expression import col
from easyorm.selector import Selector


@dataclass
class Account:
    Id: int = 0
    Name: str = field(default="", metadata={"orm": "column=user_name"})
    Age: int = 0


with connect(":memory:") as db:
    db.execute("CREATE TABLE account (id INTEGER, user_name TEXT, age INTEGER)")
    db.execute("INSERT INTO account VALUES (?, ?, ?)", [1, "foo", 18])

    adult = Selector(db, Account).where(col("Age").ge(18)).find_one()
    # Account(Id=1, Name='foo', Age=18)
```

## Models (`easyorm.model`)

A model class is either a dataclass or a plain class with annotated
attributes (`ClassVar` annotations are skipped). Anything else, such as a
built-in type, raises `InvalidModelTypeError`.

`Registry` turns a class into a `Model`: a `table_name`, and `Field`
objects indexed by attribute name (`fields`) and by column name
(`columns`). Camel-case names become snake case with
`camel_to_underline`: the class `UserAccount` maps to the table
`user_account`, the field `IDCardNo` to the column `id_card_no`.

A column name can be given with a tag of the form `column=<name>`, parsed
by `parse_tag`. Dataclass fields take the tag from `metadata["orm"]`; a
plain class may hold a `__orm_tags__` mapping of attribute name to tag:

```python
class Account:
    Id: int
    Name: str
    __orm_tags__ = {"Name": "column=user_name"}
```

A malformed tag (`"column="`, `"=user_name"`, `"column-user_name"`) raises
`InvalidTagError`.

`Registry.get_model(entity)` accepts a class or an instance, parses the
model the first time and caches it. `Registry.register_model(entity,
*options)` parses the model afresh, applies the options and stores it:

```python
from easyorm.model import Registry, with_column, with_table

registry = Registry()
registry.register_model(Account, with_table("t_account"), with_column("Name", "nick"))
```

`with_table` rejects an empty name or one with more than one dot
(`InvalidTableError`); `with_column` rejects an empty column name
(`InvalidColumnError`) or an unknown field (`InvalidFieldError`).

## Expressions (`easyorm.expression`)

Columns are named by the model's field names:

```python
from easyorm.expression import col, count, max_, raw_expr

col("Id").eq(1)
col("Age").ge(18).or_(col("Age").lt(12))
col("Id").eq(1).not_()
col("Name").as_("user_name")
max_("Age").as_("max_age")
col("Id").eq(raw_expr("`id` + ?", 1))
```

The comparisons are `eq`, `ne`, `gt`, `ge`, `lt` and `le`; predicates
combine with `and_`, `or_` and `not_`. The aggregates are `count`, `sum_`,
`max_`, `min_` and `avg`. `raw_expr(sql, *args)` wraps raw SQL and its
arguments; it can be a whole predicate or the right-hand side of a
comparison. Values that are not expressions are bound as arguments.

## Building SELECT statements (`easyorm.selector`)

`Selector(session, entity_type)` builds a query over the model's table.
`select(*selectables)` sets the column list (columns, aggregates or raw
expressions; `*` when empty), and each call to `where(*predicates)` adds a
`WHERE` clause joining its predicates with `AND`. `build()` returns a
`Statement` with `sql` and `args`. With the MySQL dialect:

```python
Selector(db, SelectTestModel).where(col("Id").eq(1), col("Name").eq("jrmarcco")).build()
# Statement(sql="SELECT * FROM `select_test_model` WHERE (`id` = ?) AND (`name` = ?);",
#           args=[1, "jrmarcco"])
```

A field the model does not have raises `InvalidFieldError`.

`find_one()` returns the first row as a new object, or raises
`NoEligibleRowError` when there is none; `find_many()` returns a list.
`limit()` and `offset()` record values on the selector but `build()` does
not write `LIMIT` or `OFFSET` into the SQL.

The lower-level `easyorm.builder.Builder` writes quoted names, tables,
expressions and aggregates for one model and dialect, and returns the
result with `statement()`.

## Raw SQL (`easyorm.raw`)

```python
from easyorm.raw import Raw

Raw(db, Account, "SELECT * FROM account WHERE id = ?", 1).find_one()
Raw(db, Account, "DELETE FROM account WHERE age < ?", 12).exec()
```

`find_one` and `find_many` map rows as above. `exec` returns a
`easyorm.core.Result` with `rows_affected` and `last_insert_id` taken
from the cursor.

Result columns must all belong to the model, otherwise
`InvalidColumnError` is raised.

## Dialects (`easyorm.dialect`)

| Dialect       | Quoting | Placeholders     |
|---------------|---------|------------------|
| `StandardSQL` | `"`     | `?`              |
| `MySQL`       | `` ` `` | `?`              |
| `Postgres`    | `"`     | `$1`, `$2`, …    |

Ready-made instances are `STANDARD_SQL`, `MYSQL_DIALECT` and
`POSTGRES_DIALECT`. A database uses `StandardSQL` unless told otherwise.
The dialect only shapes the SQL text; the connection must accept that
placeholder style.

## Databases and transactions (`easyorm.db`)

`connect(path, *options)` opens an SQLite database; `open_db(connection,
*options)` wraps any DB-API connection you already have. The options are
`with_dialect`, `with_registry`, `with_resolver` and `with_middleware`.
A `DB` is a context manager that closes the connection on exit.

`DB.query` and `DB.execute` run SQL and return the cursor; `execute`
commits straight away unless a transaction is open.

`DB.begin()` starts a `Tx` (one at a time); `Tx.commit()` and
`Tx.rollback()` end it. A `Tx` can be handed to `Selector` and `Raw` like a
`DB`. Two wrappers are offered:

```python
with db.transaction() as tx:        # commits, or rolls back and re-raises
    Raw(tx, Account, "UPDATE account SET age = ?", 19).exec()

db.do_tx(lambda tx: Raw(tx, Account, "DELETE FROM account").exec())
```

`do_tx` commits and returns the function's result; when the function
raises, the transaction is rolled back and `RollbackError` is raised,
carrying the original failure and any error from the rollback.

## Row mapping (`easyorm.resolver`)

Rows are written into objects by a resolver. `DictResolver` (the default)
writes the instance `__dict__` directly; `AttributeResolver` uses
`setattr`, so properties and descriptors take effect. Choose one with
`with_resolver(AttributeResolver)`. New objects are created by calling the
class with no arguments, or without `__init__` when that fails.

## Middleware (`easyorm.core`)

A middleware takes the next handler and returns a new one. A handler is
called with a `StatementContext` (`typ`, a `StatementType`, and `builder`)
and returns a `StatementResult` with `result` or `error`. The first
middleware given runs outermost; an error left in the final result is
raised to the caller.

```python
def log_sql(next_handler):
    def handle(ctx):
        print(ctx.typ, ctx.builder.build().sql)
        return next_handler(ctx)
    return handle

db = connect(":memory:", with_middleware(log_sql))
```

## Errors (`easyorm.errors`)

Every error derives from `OrmError`; two errors of the same type and
message compare equal. The others are `InvalidModelTypeError`,
`NoEligibleRowError`, `UnsupportedExpressionError`, `InvalidFieldError`,
`InvalidTableError`, `InvalidColumnError`, `InvalidTagError` and
`RollbackError`.

## What it does not do

- Only `SELECT` statements are built. There are no builders for `INSERT`,
  `UPDATE` or `DELETE` (`assign` and `Assignment` describe a field and a
  value but nothing turns them into SQL); write those with `Raw`.
- No joins, `GROUP BY`, `HAVING`, `ORDER BY`, `LIMIT` or `OFFSET` in built
  SQL.
- No table creation or schema migration.
- No command-line tool.