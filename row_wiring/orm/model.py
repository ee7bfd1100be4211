"""Model: the entry point to all repositories of an application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from row_wiring.core.classes import qualified_name
from row_wiring.core.exceptions import RepositoryNotFoundError
from row_wiring.core.registry import EntityClassRegistry
from row_wiring.orm.loader import RepositoryLoader
from row_wiring.orm.metadata import MetadataStorage


@dataclass
class AggregateConfiguration:
    """The three repository tables the model is configured with.

    Attributes:
        repositories: Set of repository classes (``class -> True``).
        repository_names: ``lowerName -> repository class``.
        entity_classes: ``entity class -> repository class``.
    """

    repositories: dict[str, bool] = field(default_factory=dict)
    repository_names: dict[str, str] = field(default_factory=dict)
    entity_classes: dict[str, str] = field(default_factory=dict)

    def add(self, lower_name: str, entity_class: str, repository_class: str) -> None:
        self.repositories[repository_class] = True
        self.repository_names[lower_name] = repository_class
        self.entity_classes[entity_class] = repository_class


def _class_key(target: type | str) -> str:
    return target if isinstance(target, str) else qualified_name(target)


class Model:
    """Resolves repositories by class, by entity class or by entity name.

    Applications may subclass Model and expose typed repository properties;
    the extension instantiates the class named by the ``model`` option.
    """

    def __init__(
        self,
        configuration: AggregateConfiguration,
        repository_loader: RepositoryLoader,
        metadata_storage: MetadataStorage,
        entity_class_registry: EntityClassRegistry | None = None,
    ) -> None:
        self.configuration = configuration
        self.repository_loader = repository_loader
        self.metadata_storage = metadata_storage
        self.entity_class_registry = entity_class_registry

    def has_repository(self, repository_class: type | str) -> bool:
        key = _class_key(repository_class)
        return key in self.configuration.repositories and self.repository_loader.has_repository(key)

    def get_repository(self, repository_class: type | str) -> Any:
        key = _class_key(repository_class)
        if key not in self.configuration.repositories:
            raise RepositoryNotFoundError(key)
        return self.repository_loader.get_repository(key)

    def get_repository_by_name(self, name: str) -> Any:
        try:
            repository_class = self.configuration.repository_names[name]
        except KeyError:
            raise RepositoryNotFoundError(name) from None
        return self.get_repository(repository_class)

    def get_repository_for_entity(self, entity_class: type | str) -> Any:
        key = _class_key(entity_class)
        try:
            repository_class = self.configuration.entity_classes[key]
        except KeyError:
            raise RepositoryNotFoundError(key) from None
        return self.get_repository(repository_class)

    def __getattr__(self, name: str) -> Any:
        # model.user -> repository registered under lowerName "user"
        configuration = self.__dict__.get("configuration")
        if configuration is None or name not in configuration.repository_names:
            raise AttributeError(name)
        return self.get_repository_by_name(name)
