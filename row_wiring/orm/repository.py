"""Repository protocol and base implementations.

Repositories expose persistence operations for one entity type. The
extension binds generic repository services to RepositoryProtocol, wires a
mapper into every Repository subclass and calls ``set_model`` once the
model exists.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from row_wiring.core.classes import import_class
from row_wiring.core.exceptions import ConfigurationError
from row_wiring.orm.identity_map import IdentityMap
from row_wiring.orm.mapper import MapperProtocol

if TYPE_CHECKING:
    from row_wiring.orm.metadata import EntityMetadata
    from row_wiring.orm.model import Model

T = TypeVar("T")


@runtime_checkable
class RepositoryProtocol(Protocol):
    """Base repository protocol."""

    def set_model(self, model: Model) -> Any: ...

    def get_model(self) -> Model: ...


@runtime_checkable
class EntityClassAwareRepository(Protocol):
    """Repository accepting its entity class name through a setter.

    The entity class name should be considered immutable after the
    repository is built.
    """

    def set_entity_class_name(self, entity_class_name: str) -> Any: ...


class Repository(Generic[T]):
    """Base repository class.

    Subclasses list the entity classes they handle in ``entity_class_names``
    (dotted names) and define concrete data access methods on top of
    ``hydrate``.
    """

    entity_class_names: ClassVar[tuple[str, ...]] = ()

    def __init__(self, mapper: MapperProtocol) -> None:
        self.mapper = mapper
        self._model: Model | None = None
        self.identity_map = IdentityMap(self)

    @classmethod
    def get_entity_class_names(cls) -> tuple[str, ...]:
        return cls.entity_class_names

    def set_model(self, model: Model) -> Repository[T]:
        self._model = model
        self.identity_map.registry = model.entity_class_registry
        return self

    def get_model(self) -> Model:
        if self._model is None:
            raise ConfigurationError(f"Repository {type(self).__name__} is not attached to a model")
        return self._model

    def get_entity_metadata(self, entity_class: str | None = None) -> EntityMetadata:
        if entity_class is None:
            names = self.get_entity_class_names()
            if not names:
                raise ConfigurationError(f"Repository {type(self).__name__} has no entity class")
            entity_class = names[0]
        return self.get_model().metadata_storage.get(entity_class)

    def hydrate(self, row: dict[str, Any]) -> T:
        """Build an entity from a storage row and track it in the identity map."""
        metadata = self.get_entity_metadata()
        entity_class = import_class(metadata.entity_class)
        if entity_class is None:
            raise ConfigurationError(f"Entity class '{metadata.entity_class}' cannot be imported")
        entity: T = self.mapper.hydrate(entity_class, row)
        self.identity_map.add(entity)
        return entity

    def hydrate_many(self, rows: Iterable[dict[str, Any]]) -> list[T]:
        return [self.hydrate(row) for row in rows]


class AutoRepository(Repository[T]):
    """Generic repository used when no specific repository class exists.

    All AutoRepository instances share one process-wide table of entity
    class names, loaded when the container is compiled, because the identity
    map reads it through the class rather than through the container.
    """

    _entity_class_names: ClassVar[tuple[str, ...]] = ()

    def __init__(self, mapper: MapperProtocol) -> None:
        super().__init__(mapper)
        self._entity_class_name: str | None = None

    def set_entity_class_name(self, entity_class_name: str) -> AutoRepository[T]:
        self._entity_class_name = entity_class_name
        return self

    @property
    def entity_class_name(self) -> str | None:
        return self._entity_class_name

    def get_entity_metadata(self, entity_class: str | None = None) -> EntityMetadata:
        if entity_class is None and self._entity_class_name is not None:
            entity_class = self._entity_class_name
        return super().get_entity_metadata(entity_class)

    @classmethod
    def set_entity_class_names(cls, entity_class_names: Iterable[str]) -> None:
        # Stored on AutoRepository itself so subclasses share the table.
        AutoRepository._entity_class_names = tuple(entity_class_names)

    @classmethod
    def get_entity_class_names(cls) -> tuple[str, ...]:
        return AutoRepository._entity_class_names
