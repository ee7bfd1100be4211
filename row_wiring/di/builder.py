"""Container builder.

Collects service definitions, lets extensions contribute and adjust them,
then compiles everything into a Container backed by dependency_injector
providers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Protocol

from row_wiring.core.classes import qualified_name, resolve_type
from row_wiring.core.exceptions import (
    AmbiguousServiceError,
    DuplicateServiceError,
    ServiceNotFoundError,
)
from row_wiring.di.definitions import ServiceDefinition

if TYPE_CHECKING:
    from row_wiring.di.container import Container

logger = logging.getLogger(__name__)

CONTAINER_SERVICE = "container"


class Extension(Protocol):
    """Hooks a compiler extension implements."""

    def load_configuration(self, builder: ContainerBuilder) -> None: ...

    def before_compile(self) -> None: ...


class ContainerBuilder:
    """Mutable registry of service definitions.

    The name ``container`` is reserved: references to it resolve to the
    compiled Container itself.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, ServiceDefinition] = {}
        self._initializers: list[Callable[[Container], None]] = []
        self._extensions: list[Extension] = []

    # --- Definitions ---

    def add_definition(
        self, name: str, definition: ServiceDefinition | None = None
    ) -> ServiceDefinition:
        """Register a definition under ``name`` and return it.

        Raises:
            DuplicateServiceError: If the name is taken or reserved.
        """
        if name in self._definitions or name == CONTAINER_SERVICE:
            raise DuplicateServiceError(name)
        definition = definition if definition is not None else ServiceDefinition()
        self._definitions[name] = definition
        logger.debug("Registered service %s", name)
        return definition

    def get_definition(self, name: str) -> ServiceDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None

    def has_definition(self, name: str) -> bool:
        return name in self._definitions

    @property
    def definitions(self) -> dict[str, ServiceDefinition]:
        return dict(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    # --- Lookup ---

    def find_by_type(self, target: type | str, exact: bool = False) -> list[str]:
        """Names of all autowired services whose bound type matches ``target``.

        Subclasses of ``target`` match unless ``exact`` is set.
        """
        cls = resolve_type(target)
        if cls is None:
            return []
        names = []
        for name, definition in self._definitions.items():
            if not definition.autowired or not isinstance(definition.type, type):
                continue
            if definition.type is cls or (not exact and issubclass(definition.type, cls)):
                names.append(name)
        return names

    def get_by_type(self, target: type | str, exact: bool = False) -> str | None:
        """Name of the single autowired service of ``target`` type, or None.

        Missing classes resolve to None.

        Raises:
            AmbiguousServiceError: If more than one service matches.
        """
        names = self.find_by_type(target, exact)
        if not names:
            return None
        if len(names) > 1:
            type_name = target if isinstance(target, str) else qualified_name(target)
            raise AmbiguousServiceError(type_name, names)
        return names[0]

    def find_by_tag(self, tag: str) -> dict[str, Any]:
        """``service name -> tag value`` for every definition carrying ``tag``."""
        return {
            name: definition.tags[tag]
            for name, definition in self._definitions.items()
            if tag in definition.tags
        }

    # --- Compilation ---

    def add_extension(self, extension: Extension) -> ContainerBuilder:
        self._extensions.append(extension)
        return self

    def add_initializer(self, initializer: Callable[[Container], None]) -> ContainerBuilder:
        """Register a callable run once on the compiled container."""
        self._initializers.append(initializer)
        return self

    @property
    def initializers(self) -> list[Callable[[Container], None]]:
        return list(self._initializers)

    def compile(self) -> Container:
        """Run extension hooks, then build the container."""
        from row_wiring.di.container import Container

        for extension in self._extensions:
            extension.load_configuration(self)
        for extension in self._extensions:
            extension.before_compile()

        container = Container(self)
        logger.info("Compiled container with %d services", len(self._definitions))
        return container
