"""Entity metadata storage."""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Mapping
from dataclasses import dataclass

from row_wiring.core.classes import import_class
from row_wiring.core.exceptions import RegistryError
from row_wiring.orm.cache import Cache


def _get_field_names(cls: type) -> list[str]:
    """Extract field names from a class (dataclass, Pydantic, or plain)."""
    # Pydantic model
    if hasattr(cls, "model_fields"):
        return list(cls.model_fields.keys())

    # Dataclass
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
        return [
            name
            for name, param in sig.parameters.items()
            if name != "self" and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
        ]
    except (ValueError, TypeError):
        return []


@dataclass(frozen=True)
class EntityMetadata:
    """Reflected metadata of one entity class."""

    entity_class: str
    repository_class: str
    fields: tuple[str, ...]


class MetadataStorage:
    """Lazily reflects entity classes listed in ``entity_classes_map``.

    Args:
        entity_classes_map: ``entity class -> repository class`` table.
        cache: Optional cache for reflected metadata.
    """

    def __init__(self, entity_classes_map: Mapping[str, str], cache: Cache | None = None) -> None:
        self._entity_classes_map = dict(entity_classes_map)
        self._cache = cache
        self._metadata: dict[str, EntityMetadata] = {}

    def has(self, entity_class: str) -> bool:
        return entity_class in self._entity_classes_map

    def get(self, entity_class: str) -> EntityMetadata:
        """Return metadata for an entity class.

        Raises:
            RegistryError: If the entity class is not part of the model.
        """
        if entity_class not in self._metadata:
            if self._cache is not None:
                self._metadata[entity_class] = self._cache.load(
                    entity_class, lambda: self._reflect(entity_class)
                )
            else:
                self._metadata[entity_class] = self._reflect(entity_class)
        return self._metadata[entity_class]

    def _reflect(self, entity_class: str) -> EntityMetadata:
        if entity_class not in self._entity_classes_map:
            raise RegistryError(f"Entity class not registered: '{entity_class}'")
        cls = import_class(entity_class)
        fields = tuple(_get_field_names(cls)) if cls is not None else ()
        return EntityMetadata(
            entity_class=entity_class,
            repository_class=self._entity_classes_map[entity_class],
            fields=fields,
        )

    @property
    def entity_classes(self) -> list[str]:
        return list(self._entity_classes_map)
