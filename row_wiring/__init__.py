"""row-wiring - convention-based repository and mapper wiring for the ORM container."""

from __future__ import annotations

import logging

from row_wiring.core.config import EntityConfig, MapperConfig, OrmConfig, RepositoryConfig
from row_wiring.core.enums import DefinitionKind, DuplicateEntityPolicy, TableNameConvention
from row_wiring.core.exceptions import (
    AmbiguousServiceError,
    CircularReferenceError,
    ConfigurationError,
    ContainerError,
    DuplicateEntityError,
    DuplicateServiceError,
    EntityInterfaceError,
    HydrationError,
    IdentityMapError,
    InvalidWildcardError,
    RegistryError,
    RegistryLockedError,
    RepositoryNotFoundError,
    RowWiringError,
    ServiceNotFoundError,
    UnfulfilledArgumentError,
)
from row_wiring.core.registry import EntityClassRegistry
from row_wiring.di.builder import ContainerBuilder
from row_wiring.di.container import Container
from row_wiring.extension import OrmExtension, build_container
from row_wiring.finder import EntityDescriptor, RepositoryFinder

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Configuration
    "OrmConfig",
    "EntityConfig",
    "MapperConfig",
    "RepositoryConfig",
    # Container
    "ContainerBuilder",
    "Container",
    # Extension
    "OrmExtension",
    "RepositoryFinder",
    "EntityDescriptor",
    "build_container",
    # Registry
    "EntityClassRegistry",
    # Enums
    "DefinitionKind",
    "DuplicateEntityPolicy",
    "TableNameConvention",
    # Exceptions
    "RowWiringError",
    "ConfigurationError",
    "EntityInterfaceError",
    "DuplicateEntityError",
    "InvalidWildcardError",
    "UnfulfilledArgumentError",
    "ContainerError",
    "ServiceNotFoundError",
    "DuplicateServiceError",
    "AmbiguousServiceError",
    "CircularReferenceError",
    "RegistryError",
    "RegistryLockedError",
    "RepositoryNotFoundError",
    "IdentityMapError",
    "HydrationError",
]
