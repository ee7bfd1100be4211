"""Compiled container.

Turns ServiceDefinitions into dependency_injector providers:

    definition          -> providers.Singleton(factory, **arguments)
    Reference("name")   -> the provider of service "name"
    Statement(...)      -> providers.Callable
    setup calls         -> providers.Callable run once on the instance
    Reference("container") -> providers.Object(container)
"""

from __future__ import annotations

import builtins
import inspect
import logging
import typing
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from dependency_injector import containers, providers

from row_wiring.core.exceptions import (
    CircularReferenceError,
    ContainerError,
    ServiceNotFoundError,
)
from row_wiring.di.builder import CONTAINER_SERVICE
from row_wiring.di.definitions import Deferred, Reference, ServiceDefinition, Statement

if TYPE_CHECKING:
    from row_wiring.di.builder import ContainerBuilder

logger = logging.getLogger(__name__)


def _call_statement(target: Any, method: str | None, *args: Any) -> Any:
    if method is None:
        return target(*args)
    return getattr(target, method)(*args)


def _apply_setup(instance: Any, method: str, capability: type | None, *args: Any) -> None:
    if capability is None or isinstance(instance, capability):
        getattr(instance, method)(*args)


def _type_hints(factory: Callable[..., Any]) -> dict[str, Any]:
    target = factory.__init__ if inspect.isclass(factory) else factory
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        return {}


class Container:
    """Runtime container built from a ContainerBuilder.

    Services are singletons created on first access. ``dynamic`` is the
    underlying ``dependency_injector`` DynamicContainer; its providers can be
    overridden in tests.
    """

    def __init__(self, builder: ContainerBuilder) -> None:
        self._builder = builder
        self._definitions = builder.definitions
        self._providers: dict[str, providers.Provider] = {}
        self._resolving: list[str] = []
        self._created: set[str] = set()
        self.dynamic = containers.DynamicContainer()
        self.tags: dict[str, dict[str, Any]] = {}

        for name, definition in self._definitions.items():
            for tag, value in definition.tags.items():
                self.tags.setdefault(tag, {})[name] = value
            self._provider(name)

        for initializer in builder.initializers:
            initializer(self)

    # --- Public API ---

    def get_service(self, name: str) -> Any:
        """Return the service instance, creating it on first access.

        Raises:
            ServiceNotFoundError: If no service has this name.
        """
        if name == CONTAINER_SERVICE:
            return self
        try:
            provider = self._providers[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None
        return provider()

    def get_by_type(self, target: type | str) -> Any:
        """Return the single autowired service of ``target`` type.

        Raises:
            ServiceNotFoundError: If no autowired service matches.
        """
        name = self._builder.get_by_type(target)
        if name is None:
            raise ServiceNotFoundError(str(target))
        return self.get_service(name)

    def has_service(self, name: str) -> bool:
        return name in self._providers

    def is_created(self, name: str) -> bool:
        return name in self._created

    def find_by_tag(self, tag: str) -> dict[str, Any]:
        return dict(self.tags.get(tag, {}))

    def override(self, name: str, provider: providers.Provider) -> None:
        """Override a service provider, e.g. with ``providers.Object(fake)``."""
        if name not in self._providers:
            raise ServiceNotFoundError(name)
        self._providers[name].override(provider)

    @property
    def service_names(self) -> list[str]:
        return list(self._providers)

    # --- Provider construction ---

    def _provider(self, name: str) -> providers.Provider:
        if name in self._providers:
            return self._providers[name]
        if name == CONTAINER_SERVICE:
            return providers.Object(self)
        if name not in self._definitions:
            raise ServiceNotFoundError(name)
        if name in self._resolving:
            raise CircularReferenceError([*self._resolving, name])

        self._resolving.append(name)
        try:
            provider = self._build_provider(name, self._definitions[name])
        finally:
            self._resolving.pop()

        self._providers[name] = provider
        self.dynamic.set_provider(name, provider)
        return provider

    def _build_provider(self, name: str, definition: ServiceDefinition) -> providers.Provider:
        factory = definition.get_factory()
        if factory is None:
            raise ContainerError(f"Service '{name}' has neither a type nor a factory")

        kwargs = {key: self._resolve(value) for key, value in definition.arguments.items()}
        kwargs.update(self._autowire(name, factory, kwargs))
        instance = providers.Singleton(factory, **kwargs)

        steps = [
            providers.Callable(
                _apply_setup,
                instance,
                setup.method,
                setup.capability,
                *(self._resolve(argument) for argument in setup.arguments),
            )
            for setup in definition.setups
        ]
        logger.debug("Built provider for %s (%d setups)", name, len(steps))
        return providers.Singleton(self._finish, name, instance, *steps)

    def _finish(self, name: str, instance: Any, *_steps: Any) -> Any:
        self._created.add(name)
        return instance

    def _autowire(
        self, name: str, factory: Callable[..., Any], given: dict[str, Any]
    ) -> dict[str, Any]:
        """Resolve missing constructor parameters by their annotated type."""
        try:
            signature = inspect.signature(factory)
        except (ValueError, TypeError):
            return {}

        hints = _type_hints(factory)
        resolved: dict[str, Any] = {}
        for param in signature.parameters.values():
            if param.name in given or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = hints.get(param.name)
            if not inspect.isclass(annotation) or vars(builtins).get(annotation.__name__) is annotation:
                annotation = None
            service = self._builder.get_by_type(annotation) if annotation is not None else None
            if service is not None:
                resolved[param.name] = self._provider(service)
            elif param.default is param.empty:
                raise ContainerError(
                    f"Cannot autowire argument '{param.name}' of service '{name}'"
                )
        return resolved

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, Reference):
            return self._provider(value.service)
        if isinstance(value, Statement):
            target = self._resolve(value.target)
            args = [self._resolve(argument) for argument in value.arguments]
            return providers.Callable(_call_statement, target, value.method, *args)
        if isinstance(value, Deferred):
            return self._resolve(value.value)
        if isinstance(value, dict):
            items = {key: self._resolve(item) for key, item in value.items()}
            if any(isinstance(item, providers.Provider) for item in items.values()):
                return providers.Dict(items)
            return value
        if isinstance(value, (list, tuple)):
            items_list = [self._resolve(item) for item in value]
            if any(isinstance(item, providers.Provider) for item in items_list):
                return providers.List(*items_list)
            return value
        return value
