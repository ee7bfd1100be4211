"""Entity class registry.

Maps entity classes to the repository classes handling them. The registry
is immutable after loading: it is filled once when the container is
compiled, then read for the lifetime of the application.
"""

from __future__ import annotations

from collections.abc import Mapping

from row_wiring.core.exceptions import RegistryError, RegistryLockedError


class EntityClassRegistry:
    """Set-once lookup of ``entity class -> repository class``.

    Raises:
        RegistryLockedError: If ``load`` is called on a loaded registry.
    """

    def __init__(self) -> None:
        self._repositories: dict[str, str] = {}
        self._loaded = False

    def load(self, entity_classes: Mapping[str, str]) -> None:
        """Load the ``entity class -> repository class`` table."""
        if self._loaded:
            raise RegistryLockedError()
        self._repositories = dict(entity_classes)
        self._loaded = True

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def entity_classes(self) -> list[str]:
        """Registered entity class names, in registration order."""
        return list(self._repositories)

    def repository_for(self, entity_class: str) -> str:
        """Look up the repository class handling an entity class.

        Raises:
            RegistryError: If the entity class is unknown.
        """
        try:
            return self._repositories[entity_class]
        except KeyError:
            raise RegistryError(f"Entity class not registered: '{entity_class}'") from None

    def entity_classes_for(self, repository_class: str) -> list[str]:
        """All entity classes handled by a repository class."""
        return [
            entity for entity, repository in self._repositories.items()
            if repository == repository_class
        ]

    def has(self, entity_class: str) -> bool:
        return entity_class in self._repositories

    def __len__(self) -> int:
        return len(self._repositories)
