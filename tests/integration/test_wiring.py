"""Integration tests: discover the sample application and use the compiled container."""

from __future__ import annotations

from typing import Any

import pytest

from row_wiring import build_container
from row_wiring.core.enums import DefinitionKind
from row_wiring.core.exceptions import (
    ConfigurationError,
    EntityInterfaceError,
    IdentityMapError,
)
from row_wiring.core.registry import EntityClassRegistry
from row_wiring.di.builder import ContainerBuilder
from row_wiring.di.definitions import Reference, Statement
from row_wiring.extension import OrmExtension
from row_wiring.orm.mapper import AutoMapper, MapperProtocol
from row_wiring.orm.repository import AutoRepository, RepositoryProtocol
from sample_app.entity import OrderEntity, UserEntity
from sample_app.mapper import OrderItemMapper, UserMapper
from sample_app.model import AppModel
from sample_app.repository import (
    AdminRepository,
    ArchiveRepository,
    MemberRepository,
    OrderRepository,
)

USER = "sample_app.entity.UserEntity"
ORDER = "sample_app.entity.OrderEntity"


@pytest.fixture
def app_files(write_entity) -> None:
    for name in ["User", "Order", "OrderItem", "Archive", "Abstract"]:
        write_entity(f"{name}.py")
    write_entity("README.md")


@pytest.fixture
def compiled(orm_config: dict[str, Any], app_files):
    orm_config["mapper"]["tableNameConventions"] = "underscore"
    builder = ContainerBuilder()
    extension = OrmExtension(orm_config)
    builder.add_extension(extension)
    container = builder.compile()
    return builder, container


class TestUserScenario:
    """Entities User and Order; no UserRepository class, a UserMapper class."""

    @pytest.fixture
    def scenario(self, orm_config: dict[str, Any], write_entity):
        write_entity("User.py")
        write_entity("Order.py")
        builder = ContainerBuilder()
        extension = OrmExtension(orm_config)
        builder.add_extension(extension)
        container = builder.compile()
        return builder, extension, container

    def test_user_repository_is_generic(self, scenario) -> None:
        builder, _, _ = scenario
        definition = builder.get_definition("orm.repository.user")
        assert definition.kind is DefinitionKind.GENERIC
        assert definition.type is RepositoryProtocol
        assert definition.factory is AutoRepository
        assert definition.autowired is False

    def test_user_mapper_is_specific_with_cache(self, scenario) -> None:
        builder, _, _ = scenario
        definition = builder.get_definition("orm.mapper.user")
        assert definition.kind is DefinitionKind.SPECIFIC
        assert definition.type is UserMapper
        assert definition.arguments["cache"] == Statement(
            Reference("orm.cache"), "derive", ("mapper",)
        )

    def test_repository_references_mapper(self, scenario) -> None:
        builder, _, _ = scenario
        definition = builder.get_definition("orm.repository.user")
        assert definition.arguments["mapper"] == Reference("orm.mapper.user")

    def test_aggregate_configuration(self, scenario) -> None:
        _, _, container = scenario
        model = container.get_service("orm.model")
        configuration = model.configuration
        assert configuration.entity_classes[USER] == "sample_app.repository.UserRepository"
        assert configuration.repository_names == {
            "order": "sample_app.repository.OrderRepository",
            "user": "sample_app.repository.UserRepository",
        }
        names = model.repository_loader.repository_names_map
        assert names["sample_app.repository.UserRepository"] == "orm.repository.user"


class TestCompiledContainer:
    def test_services_registered(self, compiled) -> None:
        _, container = compiled
        for name in [
            "orm.cache",
            "orm.model",
            "orm.metadataStorage",
            "orm.entityClassRegistry",
            "orm.repositoryLoader",
            "orm.repository.user",
            "orm.repository.order",
            "orm.repository.orderItem",
            "orm.repository.archive",
            "orm.mapper.user",
            "orm.mapper.order",
            "orm.mapper.orderItem",
        ]:
            assert container.has_service(name), name
        assert not container.has_service("orm.repository.abstract")
        assert not container.has_service("orm.mapper.archive")

    def test_model(self, compiled) -> None:
        _, container = compiled
        model = container.get_service("orm.model")
        assert isinstance(model, AppModel)
        assert model.entity_class_registry is container.get_service("orm.entityClassRegistry")

    def test_generic_repository(self, compiled) -> None:
        _, container = compiled
        model = container.get_service("orm.model")
        users = model.get_repository_by_name("user")
        assert type(users) is AutoRepository
        assert users.get_model() is model
        assert users.entity_class_name == USER
        assert users.mapper is container.get_service("orm.mapper.user")

    def test_specific_mapper_receives_derived_cache(self, compiled) -> None:
        _, container = compiled
        mapper = container.get_service("orm.mapper.user")
        assert type(mapper) is UserMapper
        assert mapper.cache.namespace == "orm.mapper"
        # UserMapper has no set_table_name; the default name stays
        assert mapper.get_table_name() == "user"

    def test_specific_repository_with_generic_mapper(self, compiled) -> None:
        _, container = compiled
        model = container.get_service("orm.model")
        orders = model.get_repository(OrderRepository)
        assert type(orders) is OrderRepository
        assert isinstance(orders.mapper, AutoMapper)
        assert isinstance(orders.mapper, MapperProtocol)
        assert orders.mapper.get_table_name() == "order"
        assert orders.entity_class_name == ORDER

    def test_underscore_table_name_on_capable_mapper(self, compiled) -> None:
        _, container = compiled
        mapper = container.get_service("orm.mapper.orderItem")
        assert type(mapper) is OrderItemMapper
        assert mapper.get_table_name() == "order_item"

    def test_repository_outside_base_lineage(self, compiled) -> None:
        _, container = compiled
        model = container.get_service("orm.model")
        archive = model.get_repository_for_entity("sample_app.entity.ArchiveEntity")
        assert type(archive) is ArchiveRepository
        assert archive.model is model

    def test_entity_class_registry_loaded(self, compiled) -> None:
        _, container = compiled
        registry = container.get_service("orm.entityClassRegistry")
        assert isinstance(registry, EntityClassRegistry)
        assert registry.repository_for(USER) == "sample_app.repository.UserRepository"
        assert registry.repository_for(ORDER) == "sample_app.repository.OrderRepository"
        assert len(registry) == 4

    def test_process_wide_entity_class_names(self, compiled) -> None:
        assert set(AutoRepository.get_entity_class_names()) == {
            "sample_app.entity.ArchiveEntity",
            ORDER,
            "sample_app.entity.OrderItemEntity",
            USER,
        }

    def test_hydrate_through_identity_map(self, compiled) -> None:
        _, container = compiled
        users = container.get_service("orm.model").user
        user = users.hydrate({"id": 3, "name": "Carol", "email": "c@example.com"})
        assert user == UserEntity(id=3, name="Carol", email="c@example.com")
        assert users.identity_map.get(3) is user
        with pytest.raises(IdentityMapError):
            users.identity_map.check(object())

    def test_specific_repository_query(self, compiled) -> None:
        _, container = compiled
        orders = container.get_service("orm.repository.order")
        assert orders.total([{"id": 1, "total": 10.0}, {"id": 2, "total": 5.5}]) == 15.5
        assert isinstance(orders.identity_map.get(1), OrderEntity)

    def test_metadata_storage(self, compiled) -> None:
        _, container = compiled
        storage = container.get_service("orm.model").metadata_storage
        assert storage.get(USER).repository_class == "sample_app.repository.UserRepository"

    def test_repository_loader(self, compiled) -> None:
        _, container = compiled
        loader = container.get_service("orm.repositoryLoader")
        assert not loader.is_created("sample_app.repository.OrderItemRepository")
        container.get_service("orm.model").get_repository_by_name("orderItem")
        assert loader.is_created("sample_app.repository.OrderItemRepository")

    def test_autowired_by_specific_type(self, compiled) -> None:
        _, container = compiled
        assert container.get_by_type(OrderRepository) is container.get_service(
            "orm.repository.order"
        )


class TestPreRegisteredServices:
    def test_user_defined_mapper_is_reused(self, orm_config, write_entity) -> None:
        write_entity("User.py")
        builder = ContainerBuilder()
        builder.add_definition("app.userMapper").set_type(UserMapper).set_arguments(
            {"table_name": "people"}
        )
        container = build_container(orm_config, builder)
        users = container.get_service("orm.repository.user")
        assert users.mapper is container.get_service("app.userMapper")
        assert users.mapper.get_table_name() == "people"
        assert not container.has_service("orm.mapper.user")


class TestRepositorySubclasses:
    def test_parent_and_subclass_keep_their_entities(self, orm_config, write_entity) -> None:
        write_entity("Admin.py")
        write_entity("Member.py")
        container = build_container(orm_config)
        model = container.get_service("orm.model")

        assert type(model.admin) is AdminRepository
        assert type(model.member) is MemberRepository
        assert model.member.entity_class_name == "sample_app.entity.MemberEntity"

        registry = container.get_service("orm.entityClassRegistry")
        assert registry.repository_for("sample_app.entity.AdminEntity") == (
            "sample_app.repository.AdminRepository"
        )
        assert set(AutoRepository.get_entity_class_names()) == set(
            model.configuration.entity_classes
        )


class TestConfigurationErrors:
    def test_non_entity_class(self, orm_config, write_entity) -> None:
        write_entity("Broken.py")
        with pytest.raises(EntityInterfaceError):
            build_container(orm_config)

    def test_missing_model_class(self, orm_config) -> None:
        orm_config["model"] = "sample_app.model.MissingModel"
        with pytest.raises(ConfigurationError, match="MissingModel"):
            build_container(orm_config)

    def test_model_not_extending_model(self, orm_config) -> None:
        orm_config["model"] = "sample_app.model.NotAModel"
        with pytest.raises(ConfigurationError, match="must extend Model"):
            build_container(orm_config)

    def test_invalid_configuration(self, orm_config) -> None:
        orm_config["mapper"]["tableNameConventions"] = "camel"
        with pytest.raises(ConfigurationError):
            build_container(orm_config)

    def test_custom_prefix(self, orm_config, write_entity) -> None:
        write_entity("User.py")
        container = build_container(orm_config, name="db")
        assert container.has_service("db.repository.user")
        assert container.get_service("db.mapper.user").cache.namespace == "db.mapper"
