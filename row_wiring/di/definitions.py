"""Service definition data classes.

A ServiceDefinition is the build-time plan for one container service: the
bound type, the factory producing it, constructor arguments, setup calls
run on the fresh instance, and free-form tags. Definitions stay mutable
until the container is compiled.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from row_wiring.core.enums import DefinitionKind
from row_wiring.core.exceptions import ConfigurationError, UnfulfilledArgumentError


@dataclass(frozen=True)
class Reference:
    """Reference to another service by name."""

    service: str

    def __str__(self) -> str:
        return f"@{self.service}"


@dataclass(frozen=True)
class Statement:
    """Deferred call: ``target.method(*arguments)`` or ``target(*arguments)``."""

    target: Reference | Callable[..., Any]
    method: str | None = None
    arguments: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Setup:
    """Method call on a freshly built service instance.

    When ``capability`` is set the call only happens if the instance is an
    instance of it, so runtime-checkable protocols act as optional
    capabilities.
    """

    method: str
    arguments: tuple[Any, ...] = ()
    capability: type | None = None


class Deferred:
    """Argument value fulfilled later during the same build.

    Args:
        label: Name used in error messages.
    """

    _EMPTY = object()

    def __init__(self, label: str) -> None:
        self.label = label
        self._value: Any = self._EMPTY

    @property
    def is_fulfilled(self) -> bool:
        return self._value is not self._EMPTY

    def fulfill(self, value: Any) -> None:
        """Set the value once; fulfilling again with an equal value is a no-op.

        Raises:
            ConfigurationError: If already fulfilled with a different value.
        """
        if self.is_fulfilled:
            if self._value != value:
                raise ConfigurationError(f"Deferred argument '{self.label}' is already fulfilled")
            return
        self._value = value

    @property
    def value(self) -> Any:
        if not self.is_fulfilled:
            raise UnfulfilledArgumentError(self.label)
        return self._value

    def __repr__(self) -> str:
        state = "fulfilled" if self.is_fulfilled else "pending"
        return f"Deferred({self.label!r}, {state})"


@dataclass
class ServiceDefinition:
    """Build-time plan for one service."""

    type: type | None = None
    factory: Callable[..., Any] | None = None
    arguments: dict[str, Any] = field(default_factory=dict)
    setups: list[Setup] = field(default_factory=list)
    tags: dict[str, Any] = field(default_factory=dict)
    autowired: bool = True
    kind: DefinitionKind = DefinitionKind.SPECIFIC

    def set_type(self, type_: type) -> ServiceDefinition:
        self.type = type_
        return self

    def set_factory(self, factory: Callable[..., Any]) -> ServiceDefinition:
        self.factory = factory
        return self

    def set_arguments(self, arguments: dict[str, Any]) -> ServiceDefinition:
        """Merge constructor arguments by name."""
        self.arguments.update(arguments)
        return self

    def set_autowired(self, autowired: bool = True) -> ServiceDefinition:
        self.autowired = autowired
        return self

    def set_kind(self, kind: DefinitionKind) -> ServiceDefinition:
        self.kind = kind
        return self

    def add_setup(
        self,
        method: str,
        arguments: tuple[Any, ...] | list[Any] = (),
        capability: type | None = None,
    ) -> ServiceDefinition:
        """Append a setup call unless an identical one is already present."""
        setup = Setup(method, tuple(arguments), capability)
        if setup not in self.setups:
            self.setups.append(setup)
        return self

    def add_tag(self, tag: str, value: Any = True) -> ServiceDefinition:
        self.tags[tag] = value
        return self

    def get_factory(self) -> Callable[..., Any] | None:
        """The callable building the service: the factory, else the bound type."""
        return self.factory if self.factory is not None else self.type
