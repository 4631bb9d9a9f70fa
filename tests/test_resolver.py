import dataclasses
from typing import Optional

import pytest

from easyorm.errors import InvalidColumnError, InvalidFieldError
from easyorm.model import Registry
from easyorm.resolver import AttributeResolver, DictResolver


@dataclasses.dataclass
class VrTestModel:
    Id: int = 0
    Age: int = 0
    Name: str = ""
    NickName: Optional[str] = None


RESOLVERS = [AttributeResolver, DictResolver]


@pytest.mark.parametrize("resolver_factory", RESOLVERS)
@pytest.mark.parametrize(
    "columns, row, expected",
    [
        (
            ["id", "age", "name", "nick_name"],
            (1, 18, "foo", "bar"),
            VrTestModel(Id=1, Age=18, Name="foo", NickName="bar"),
        ),
        (
            ["id", "nick_name"],
            (1, "bar"),
            VrTestModel(Id=1, NickName="bar"),
        ),
        (
            ["nick_name", "id", "name", "age"],
            ("bar", 1, "foo", 18),
            VrTestModel(Id=1, Name="foo", Age=18, NickName="bar"),
        ),
    ],
    ids=["basic", "partial field", "out-of-order field"],
)
def test_write_columns(resolver_factory, columns, row, expected):
    entity = VrTestModel()
    model = Registry().get_model(entity)
    resolver_factory(model, entity).write_columns(columns, row)
    assert entity == expected


@pytest.mark.parametrize("resolver_factory", RESOLVERS)
def test_read_column(resolver_factory):
    entity = VrTestModel(Id=7, Name="foo")
    resolver = resolver_factory(Registry().get_model(entity), entity)
    assert resolver.read_column("Id") == 7
    assert resolver.read_column("Name") == "foo"
    assert resolver.read_column("NickName") is None


@pytest.mark.parametrize("resolver_factory", RESOLVERS)
def test_read_unknown_field(resolver_factory):
    entity = VrTestModel()
    resolver = resolver_factory(Registry().get_model(entity), entity)
    with pytest.raises(InvalidFieldError) as info:
        resolver.read_column("Unknown")
    assert info.value == InvalidFieldError("Unknown")


@pytest.mark.parametrize("resolver_factory", RESOLVERS)
def test_unknown_column_leaves_entity_untouched(resolver_factory):
    entity = VrTestModel()
    resolver = resolver_factory(Registry().get_model(entity), entity)
    with pytest.raises(InvalidColumnError) as info:
        resolver.write_columns(["id", "missing"], (1, 2))
    assert info.value == InvalidColumnError("missing")
    assert entity == VrTestModel()


@pytest.mark.parametrize("resolver_factory", RESOLVERS)
def test_row_length_mismatch(resolver_factory):
    entity = VrTestModel()
    resolver = resolver_factory(Registry().get_model(entity), entity)
    with pytest.raises(ValueError):
        resolver.write_columns(["id", "age"], (1,))
    assert entity == VrTestModel()


@pytest.mark.parametrize("resolver_factory", RESOLVERS)
def test_write_then_read_round_trip(resolver_factory):
    entity = VrTestModel()
    resolver = resolver_factory(Registry().get_model(entity), entity)
    resolver.write_columns(["age", "name"], (30, "baz"))
    assert resolver.read_column("Age") == 30
    assert resolver.read_column("Name") == "baz"