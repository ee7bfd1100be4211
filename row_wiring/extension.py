"""ORM container extension.

Registers the base ORM services, then lets the RepositoryFinder discover
entities and wire their repositories and mappers.

Example:

    builder = ContainerBuilder()
    builder.add_extension(OrmExtension({
        "model": "app.model.Model",
        "entity": {"dirs": "app/entity", "classMapping": "app.entity.*.*Entity"},
    }))
    container = builder.compile()
    users = container.get_service("orm.model").get_repository_by_name("user")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from row_wiring.core.classes import import_class
from row_wiring.core.config import OrmConfig
from row_wiring.core.exceptions import ConfigurationError
from row_wiring.core.registry import EntityClassRegistry
from row_wiring.di.builder import ContainerBuilder
from row_wiring.di.container import Container
from row_wiring.di.definitions import Deferred, Reference
from row_wiring.finder import RepositoryFinder
from row_wiring.orm.cache import Cache
from row_wiring.orm.metadata import MetadataStorage
from row_wiring.orm.model import Model
from row_wiring.orm.repository import AutoRepository

logger = logging.getLogger(__name__)


class OrmExtension:
    """Container extension for the ORM.

    Args:
        config: OrmConfig or a raw mapping validated into one.
        name: Prefix of every service this extension registers.
    """

    def __init__(self, config: OrmConfig | Mapping[str, Any], name: str = "orm") -> None:
        self.config = config if isinstance(config, OrmConfig) else OrmConfig.from_mapping(config)
        self.name = name
        self._builder: ContainerBuilder | None = None
        self.repository_finder: RepositoryFinder | None = None

    def prefix(self, id_: str) -> str:
        """Prefix a service name: ``cache`` -> ``orm.cache``."""
        return f"{self.name}.{id_}"

    @property
    def builder(self) -> ContainerBuilder:
        if self._builder is None:
            raise ConfigurationError("OrmExtension.load_configuration() has not been called")
        return self._builder

    def load_configuration(self, builder: ContainerBuilder) -> None:
        """Register cache, metadata storage, entity class registry and model."""
        self._builder = builder
        self.repository_finder = RepositoryFinder(self.config, builder, self)

        builder.add_definition(self.prefix("cache")).set_type(Cache).set_arguments(
            {"namespace": self.name}
        )
        self._setup_metadata_storage()
        builder.add_definition(self.prefix("entityClassRegistry")).set_type(EntityClassRegistry)
        self._setup_model()

    def _setup_metadata_storage(self) -> None:
        self.builder.add_definition(self.prefix("metadataStorage")).set_type(
            MetadataStorage
        ).set_arguments(
            {
                "entity_classes_map": Deferred(self.prefix("metadataStorage.entity_classes_map")),
                "cache": Reference(self.prefix("cache")),
            }
        )

    def _setup_model(self) -> None:
        model_class = import_class(self.config.model)
        if model_class is None:
            raise ConfigurationError(f"Model class '{self.config.model}' does not exist")
        if not issubclass(model_class, Model):
            raise ConfigurationError(f"Model class '{self.config.model}' must extend Model")

        self.builder.add_definition(self.prefix("model")).set_type(model_class).set_arguments(
            {
                "configuration": Deferred(self.prefix("model.configuration")),
                "repository_loader": Reference(self.prefix("repositoryLoader")),
                "metadata_storage": Reference(self.prefix("metadataStorage")),
                "entity_class_registry": Reference(self.prefix("entityClassRegistry")),
            }
        )

    def before_compile(self) -> None:
        """Wire repositories and schedule loading of the entity class table."""
        if self.repository_finder is None:
            raise ConfigurationError("OrmExtension.load_configuration() has not been called")
        self.repository_finder.setup_repositories()
        self.builder.add_initializer(self._load_entity_class_names)

    def _load_entity_class_names(self, container: Container) -> None:
        # entityClass tags, keyed by repository service name
        entity_classes = container.find_by_tag("entityClass")
        repository_classes = container.find_by_tag("repositoryClass")
        table = {
            entity_class: repository_classes[service]
            for service, entity_class in entity_classes.items()
        }

        container.get_service(self.prefix("entityClassRegistry")).load(table)
        AutoRepository.set_entity_class_names(entity_classes.values())
        logger.debug("Loaded %d entity class names", len(table))


def build_container(
    config: OrmConfig | Mapping[str, Any],
    builder: ContainerBuilder | None = None,
    name: str = "orm",
) -> Container:
    """Compile a container with the ORM extension registered."""
    builder = builder if builder is not None else ContainerBuilder()
    builder.add_extension(OrmExtension(config, name))
    return builder.compile()
