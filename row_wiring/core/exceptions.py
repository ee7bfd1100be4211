"""row-wiring exception hierarchy.

Everything raised while planning or compiling the container derives from
RowWiringError. Configuration errors are fatal and abort the build.
"""

from __future__ import annotations


class RowWiringError(Exception):
    """Base exception for all row-wiring errors."""


# --- Configuration ---


class ConfigurationError(RowWiringError):
    """Raised for invalid configuration detected at build time."""


class EntityInterfaceError(ConfigurationError):
    """Raised when a discovered entity class does not implement Entity."""

    def __init__(self, entity_class: str, interface: str) -> None:
        self.entity_class = entity_class
        self.interface = interface
        super().__init__(f"Found entity class '{entity_class}' must implement '{interface}'")


class DuplicateEntityError(ConfigurationError):
    """Raised in strict mode when two entity files share a name."""

    def __init__(self, entity_name: str, path_a: str, path_b: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Duplicate entity name '{entity_name}': {path_a} and {path_b}")


class InvalidWildcardError(ConfigurationError):
    """Raised when a class mapping pattern has no '*' placeholder."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"Class mapping '{pattern}' must contain a '*' wildcard")


class UnfulfilledArgumentError(ConfigurationError):
    """Raised when a deferred service argument is still empty at compile time."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Deferred argument '{label}' was never fulfilled")


# --- Container ---


class ContainerError(RowWiringError):
    """Base for container builder errors."""


class ServiceNotFoundError(ContainerError):
    """Raised when a service name has no definition."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(f"Service not found: '{service_name}'")


class DuplicateServiceError(ContainerError):
    """Raised when a service name is registered twice."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(f"Service '{service_name}' is already defined")


class AmbiguousServiceError(ContainerError):
    """Raised when several autowired services match one type."""

    def __init__(self, type_name: str, service_names: list[str]) -> None:
        self.type_name = type_name
        self.service_names = service_names
        super().__init__(f"Multiple services of type {type_name} found: {service_names}")


class CircularReferenceError(ContainerError):
    """Raised when service definitions reference each other in a cycle."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        super().__init__(f"Circular reference detected: {' -> '.join(chain)}")


# --- Registry ---


class RegistryError(RowWiringError):
    """Base for entity class registry and repository lookup errors."""


class RegistryLockedError(RegistryError):
    """Raised when an already loaded EntityClassRegistry is loaded again."""

    def __init__(self) -> None:
        super().__init__("Entity class registry is already loaded")


class RepositoryNotFoundError(RegistryError):
    """Raised when no repository is registered for a class or name."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Repository not found: '{key}'")


# --- Identity map ---


class IdentityMapError(RowWiringError):
    """Raised when an entity is not handled by the repository it is attached to."""

    def __init__(self, entity_class: str, repository_class: str) -> None:
        self.entity_class = entity_class
        self.repository_class = repository_class
        super().__init__(
            f"Entity '{entity_class}' is not accepted by repository '{repository_class}'"
        )


# --- Hydration ---


class HydrationError(RowWiringError):
    """Raised when a storage row cannot be mapped onto an entity class."""

    def __init__(self, entity_class: str, errors: list[str]) -> None:
        self.entity_class = entity_class
        self.errors = errors
        super().__init__(f"Cannot hydrate {entity_class}: {errors}")
