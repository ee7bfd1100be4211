"""Identity map guarding which entities a repository may hold."""

from __future__ import annotations

from typing import Any

from row_wiring.core.classes import qualified_name
from row_wiring.core.exceptions import IdentityMapError
from row_wiring.core.registry import EntityClassRegistry


class IdentityMap:
    """Per-repository map of ``id -> entity``.

    The accepted entity classes come from the injected EntityClassRegistry
    when one is given, otherwise from the repository's class-level
    ``get_entity_class_names()``.
    """

    def __init__(self, repository: Any, registry: EntityClassRegistry | None = None) -> None:
        self._repository = repository
        self.registry = registry
        self._entities: dict[Any, Any] = {}

    def _accepted(self) -> list[str]:
        if self.registry is not None and self.registry.is_loaded:
            return self.registry.entity_classes
        return list(type(self._repository).get_entity_class_names())

    def check(self, entity: Any) -> None:
        """Raise IdentityMapError if the repository does not handle this entity."""
        entity_class = qualified_name(type(entity))
        if entity_class not in self._accepted():
            raise IdentityMapError(entity_class, qualified_name(type(self._repository)))

    def add(self, entity: Any) -> None:
        self.check(entity)
        self._entities[getattr(entity, "id", id(entity))] = entity

    def get(self, key: Any) -> Any:
        return self._entities.get(key)

    def has(self, key: Any) -> bool:
        return key in self._entities

    def remove(self, key: Any) -> None:
        self._entities.pop(key, None)

    def __len__(self) -> int:
        return len(self._entities)
