"""Repository finder.

Iterates over directories with entity files, maps every file name through
the configured class mappings to an entity, repository and mapper class,
and registers repository and mapper services for them:

    entity dir/User.py
        entity      app.entity.*Entity         -> app.entity.UserEntity
        repository  app.repository.*Repository -> app.repository.UserRepository
        mapper      app.mapper.*Mapper         -> app.mapper.UserMapper

A repository or mapper class that does not exist is backed by the
configured generic factory instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from row_wiring.core.classes import (
    class_lineage,
    import_class,
    is_instantiable,
    qualified_name,
    replace_wildcard,
)
from row_wiring.core.config import OrmConfig
from row_wiring.core.enums import DefinitionKind, DuplicateEntityPolicy, TableNameConvention
from row_wiring.core.exceptions import (
    ConfigurationError,
    DuplicateEntityError,
    EntityInterfaceError,
)
from row_wiring.core.naming import lcfirst, underscore
from row_wiring.di.builder import CONTAINER_SERVICE, ContainerBuilder
from row_wiring.di.definitions import Deferred, Reference, ServiceDefinition, Statement
from row_wiring.orm.entity import Entity
from row_wiring.orm.loader import RepositoryLoader
from row_wiring.orm.mapper import Mapper, MapperProtocol, TableNameAwareMapper
from row_wiring.orm.model import AggregateConfiguration
from row_wiring.orm.repository import EntityClassAwareRepository, Repository, RepositoryProtocol

if TYPE_CHECKING:
    from row_wiring.extension import OrmExtension

logger = logging.getLogger(__name__)

ENTITY_FILE_SUFFIX = ".py"


def _is_entity_name(name: str) -> bool:
    # __init__.py and friends would re-import the package under another name
    return name.isidentifier() and not (name.startswith("__") and name.endswith("__"))


@dataclass(frozen=True)
class EntityDescriptor:
    """Classes derived for one discovered entity file."""

    name: str
    lower_name: str
    entity_class: str
    repository_class: str
    mapper_class: str


class RepositoryFinder:
    """Discovers entities and plans their repository and mapper services.

    Subclasses may override ``plan_mapper`` and ``plan_repository`` to
    change how definitions are built.

    Args:
        config: Validated extension configuration.
        builder: Builder receiving the definitions.
        extension: Owning extension, used for service name prefixes.
    """

    def __init__(self, config: OrmConfig, builder: ContainerBuilder, extension: OrmExtension) -> None:
        self.config = config
        self.builder = builder
        self.extension = extension

    # --- Convention resolution ---

    @staticmethod
    def resolve_service_class(pattern: str, entity_name: str) -> str:
        """Substitute the entity name into a class mapping pattern."""
        return replace_wildcard(pattern, entity_name)

    def discover_entities(
        self, dirs: list[Path] | None = None, entity_pattern: str | None = None
    ) -> dict[str, EntityDescriptor]:
        """Map every entity file in ``dirs`` to its EntityDescriptor.

        Missing, abstract and protocol classes are skipped, as are file names
        that are not identifiers or are dunder names such as ``__init__``.
        Directories are visited in configuration order, files in name order.

        Raises:
            ConfigurationError: If a directory does not exist.
            EntityInterfaceError: If a concrete class does not subclass Entity.
            DuplicateEntityError: On a repeated name under the strict policy.
        """
        entity_config = self.config.entity
        dirs = dirs if dirs is not None else entity_config.dirs
        entity_pattern = entity_pattern if entity_pattern is not None else entity_config.class_mapping
        strict = entity_config.duplicates is DuplicateEntityPolicy.STRICT

        entities: dict[str, EntityDescriptor] = {}
        seen: dict[str, Path] = {}
        for entity_dir in dirs:
            entity_dir = Path(entity_dir)
            if not entity_dir.is_dir():
                raise ConfigurationError(f"Entity directory does not exist: {entity_dir}")

            found = 0
            for entity_file in sorted(entity_dir.iterdir()):
                if not entity_file.is_file() or entity_file.suffix != ENTITY_FILE_SUFFIX:
                    continue

                entity_name = entity_file.stem
                if not _is_entity_name(entity_name):
                    logger.debug("Skipping %s: not an entity name", entity_file)
                    continue
                entity_class = self.resolve_service_class(entity_pattern, entity_name)
                cls = import_class(entity_class)
                if cls is None or not is_instantiable(cls):
                    logger.debug("Skipping %s: %s is missing or abstract", entity_file, entity_class)
                    continue
                if not issubclass(cls, Entity):
                    raise EntityInterfaceError(entity_class, qualified_name(Entity))

                if entity_name in entities:
                    if strict:
                        raise DuplicateEntityError(entity_name, str(seen[entity_name]), str(entity_file))
                    logger.debug("Entity %s from %s overrides %s", entity_name, entity_file, seen[entity_name])

                entities[entity_name] = self._describe(entity_name, qualified_name(cls))
                seen[entity_name] = entity_file
                found += 1

            if not found:
                logger.warning(
                    "No entities found in %s for class mapping '%s'", entity_dir, entity_pattern
                )

        logger.debug("Discovered %d entities: %s", len(entities), list(entities))
        return entities

    def _describe(self, entity_name: str, entity_class: str) -> EntityDescriptor:
        return EntityDescriptor(
            name=entity_name,
            lower_name=lcfirst(entity_name),
            entity_class=entity_class,
            repository_class=self.resolve_service_class(
                self.config.repository.class_mapping, entity_name
            ),
            mapper_class=self.resolve_service_class(self.config.mapper.class_mapping, entity_name),
        )

    # --- Service planning ---

    def _generic_factory(self, class_name: str) -> type:
        cls = import_class(class_name)
        if cls is None:
            raise ConfigurationError(f"Generic factory class '{class_name}' does not exist")
        return cls

    def table_name(self, descriptor: EntityDescriptor) -> str:
        if self.config.mapper.table_name_conventions is TableNameConvention.UNDERSCORE:
            return underscore(descriptor.lower_name)
        return descriptor.lower_name

    def plan_mapper(self, descriptor: EntityDescriptor) -> ServiceDefinition:
        """Build the mapper definition for an entity.

        A derived cache handle is passed to mappers extending the base Mapper.
        """
        definition = ServiceDefinition()
        mapper_class = import_class(descriptor.mapper_class)
        if mapper_class is not None:
            definition.set_type(mapper_class).set_autowired(True)
            lineage = class_lineage(mapper_class)
        else:
            factory = self._generic_factory(self.config.mapper.generic_factory)
            definition.set_type(MapperProtocol).set_factory(factory).set_autowired(False)
            definition.set_kind(DefinitionKind.GENERIC)
            lineage = class_lineage(factory)

        if Mapper in lineage:
            cache = Statement(Reference(self.extension.prefix("cache")), "derive", ("mapper",))
            definition.set_arguments({"cache": cache})

        logger.debug("Planned %s mapper for %s", definition.kind.value, descriptor.name)
        return definition

    def _mapper_service(self, descriptor: EntityDescriptor) -> str:
        """Find the registered mapper service for an entity, or register one."""
        service_name = self.builder.get_by_type(descriptor.mapper_class, exact=True)
        if service_name is None:
            default_name = self.extension.prefix(f"mapper.{descriptor.lower_name}")
            if self.builder.has_definition(default_name):
                service_name = default_name
            else:
                self.builder.add_definition(default_name, self.plan_mapper(descriptor))
                return default_name
        logger.debug("Reusing mapper service %s for %s", service_name, descriptor.name)
        return service_name

    def plan_repository(self, descriptor: EntityDescriptor) -> ServiceDefinition:
        """Build the repository definition for an entity.

        Repositories extending the base Repository get a mapper service wired
        in, registering it first when none exists yet.
        """
        definition = ServiceDefinition()
        repository_class = import_class(descriptor.repository_class)
        if repository_class is not None:
            definition.set_type(repository_class).set_autowired(True)
            lineage = class_lineage(repository_class)
        else:
            factory = self._generic_factory(self.config.repository.generic_factory)
            definition.set_type(RepositoryProtocol).set_factory(factory).set_autowired(False)
            definition.set_kind(DefinitionKind.GENERIC)
            lineage = class_lineage(factory)

        if Repository in lineage:
            mapper_service = self._mapper_service(descriptor)
            self.builder.get_definition(mapper_service).add_setup(
                "set_table_name", (self.table_name(descriptor),), TableNameAwareMapper
            )
            definition.set_arguments({"mapper": Reference(mapper_service)})

        logger.debug("Planned %s repository for %s", definition.kind.value, descriptor.name)
        return definition

    def _repository_service(self, descriptor: EntityDescriptor) -> str:
        service_name = self.builder.get_by_type(descriptor.repository_class, exact=True)
        if service_name is None:
            default_name = self.extension.prefix(f"repository.{descriptor.lower_name}")
            if self.builder.has_definition(default_name):
                return default_name
            self.builder.add_definition(default_name, self.plan_repository(descriptor))
            return default_name
        logger.debug("Reusing repository service %s for %s", service_name, descriptor.name)
        return service_name

    def build_all(
        self, entities: dict[str, EntityDescriptor]
    ) -> tuple[dict[str, str], AggregateConfiguration]:
        """Register repository services for all entities.

        Returns:
            ``repository class -> service name`` and the aggregate
            configuration handed to the model and metadata storage.
        """
        model_service = Reference(self.extension.prefix("model"))
        configuration = AggregateConfiguration()
        repository_names_map: dict[str, str] = {}

        for descriptor in entities.values():
            service_name = self._repository_service(descriptor)
            (
                self.builder.get_definition(service_name)
                .add_setup("set_model", (model_service,))
                .add_setup(
                    "set_entity_class_name",
                    (descriptor.entity_class,),
                    EntityClassAwareRepository,
                )
                .add_tag("repositoryClass", descriptor.repository_class)
                .add_tag("entityClass", descriptor.entity_class)
            )

            repository_names_map[descriptor.repository_class] = service_name
            configuration.add(descriptor.lower_name, descriptor.entity_class, descriptor.repository_class)

        self._register_loader(repository_names_map)
        self._fulfill(self.extension.prefix("model"), "configuration", configuration)
        self._fulfill(
            self.extension.prefix("metadataStorage"),
            "entity_classes_map",
            dict(configuration.entity_classes),
        )

        logger.info("Wired %d repositories", len(repository_names_map))
        return repository_names_map, configuration

    def _register_loader(self, repository_names_map: dict[str, str]) -> None:
        loader_name = self.extension.prefix("repositoryLoader")
        if self.builder.has_definition(loader_name):
            definition = self.builder.get_definition(loader_name)
        else:
            definition = self.builder.add_definition(loader_name).set_type(RepositoryLoader)
        definition.set_arguments(
            {
                "container": Reference(CONTAINER_SERVICE),
                "repository_names_map": repository_names_map,
            }
        )

    def _fulfill(self, service_name: str, argument: str, value: object) -> None:
        """Hand ``value`` to a base service's constructor argument."""
        definition = self.builder.get_definition(service_name)
        current = definition.arguments.get(argument)
        if isinstance(current, Deferred):
            current.fulfill(value)
        else:
            definition.set_arguments({argument: value})

    def setup_repositories(self) -> tuple[dict[str, str], AggregateConfiguration]:
        """Discover entities and register their services."""
        return self.build_all(self.discover_entities())
