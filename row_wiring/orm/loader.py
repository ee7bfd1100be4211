"""Repository loader resolving repository services from the container."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from row_wiring.core.exceptions import RepositoryNotFoundError

if TYPE_CHECKING:
    from row_wiring.di.container import Container


class RepositoryLoader:
    """Looks repositories up by class name through ``repository_names_map``.

    Args:
        container: Compiled container holding the repository services.
        repository_names_map: ``repository class -> service name`` table.
    """

    def __init__(self, container: Container, repository_names_map: Mapping[str, str]) -> None:
        self._container = container
        self._repository_names_map = dict(repository_names_map)

    def has_repository(self, repository_class: str) -> bool:
        return repository_class in self._repository_names_map

    def get_repository(self, repository_class: str) -> Any:
        """Return the repository instance for a repository class name.

        Raises:
            RepositoryNotFoundError: If the class has no registered service.
        """
        try:
            service_name = self._repository_names_map[repository_class]
        except KeyError:
            raise RepositoryNotFoundError(repository_class) from None
        return self._container.get_service(service_name)

    def is_created(self, repository_class: str) -> bool:
        service_name = self._repository_names_map.get(repository_class)
        return service_name is not None and self._container.is_created(service_name)

    @property
    def repository_names_map(self) -> dict[str, str]:
        return dict(self._repository_names_map)
