"""Unit tests for service definition data classes."""

from __future__ import annotations

import pytest

from row_wiring.core.enums import DefinitionKind
from row_wiring.core.exceptions import ConfigurationError, UnfulfilledArgumentError
from row_wiring.di.definitions import Deferred, Reference, ServiceDefinition, Setup
from row_wiring.orm.mapper import TableNameAwareMapper
from sample_app.mapper import UserMapper


class TestServiceDefinition:
    def test_defaults(self) -> None:
        definition = ServiceDefinition()
        assert definition.autowired is True
        assert definition.kind is DefinitionKind.SPECIFIC
        assert definition.arguments == {}
        assert definition.setups == []

    def test_fluent_setters(self) -> None:
        definition = (
            ServiceDefinition()
            .set_type(UserMapper)
            .set_autowired(False)
            .set_kind(DefinitionKind.GENERIC)
            .add_tag("entityClass", "app.UserEntity")
        )
        assert definition.type is UserMapper
        assert definition.autowired is False
        assert definition.kind is DefinitionKind.GENERIC
        assert definition.tags == {"entityClass": "app.UserEntity"}

    def test_arguments_merge(self) -> None:
        definition = ServiceDefinition().set_arguments({"a": 1})
        definition.set_arguments({"b": Reference("orm.cache")})
        assert definition.arguments == {"a": 1, "b": Reference("orm.cache")}

    def test_factory_falls_back_to_type(self) -> None:
        assert ServiceDefinition().set_type(UserMapper).get_factory() is UserMapper

    def test_identical_setup_added_once(self) -> None:
        definition = ServiceDefinition()
        definition.add_setup("set_table_name", ("user",), TableNameAwareMapper)
        definition.add_setup("set_table_name", ["user"], TableNameAwareMapper)
        assert definition.setups == [Setup("set_table_name", ("user",), TableNameAwareMapper)]

    def test_setups_keep_order(self) -> None:
        definition = ServiceDefinition().add_setup("b").add_setup("a")
        assert [setup.method for setup in definition.setups] == ["b", "a"]


class TestReference:
    def test_str(self) -> None:
        assert str(Reference("orm.model")) == "@orm.model"


class TestDeferred:
    def test_pending(self) -> None:
        cell = Deferred("orm.model.configuration")
        assert not cell.is_fulfilled
        with pytest.raises(UnfulfilledArgumentError, match="orm.model.configuration"):
            _ = cell.value

    def test_fulfill(self) -> None:
        cell = Deferred("x")
        cell.fulfill({"a": "b"})
        assert cell.is_fulfilled
        assert cell.value == {"a": "b"}

    def test_fulfill_again_with_equal_value(self) -> None:
        cell = Deferred("x")
        cell.fulfill({"a": "b"})
        cell.fulfill({"a": "b"})
        assert cell.value == {"a": "b"}

    def test_fulfill_again_with_other_value(self) -> None:
        cell = Deferred("x")
        cell.fulfill({"a": "b"})
        with pytest.raises(ConfigurationError, match="already fulfilled"):
            cell.fulfill({"a": "c"})

    def test_none_is_a_value(self) -> None:
        cell = Deferred("x")
        cell.fulfill(None)
        assert cell.is_fulfilled
        assert cell.value is None
