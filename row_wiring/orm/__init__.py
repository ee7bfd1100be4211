"""ORM runtime pieces the extension wires together."""

from __future__ import annotations

from row_wiring.orm.cache import Cache
from row_wiring.orm.entity import Entity
from row_wiring.orm.identity_map import IdentityMap
from row_wiring.orm.loader import RepositoryLoader
from row_wiring.orm.mapper import AutoMapper, Mapper, MapperProtocol, TableNameAwareMapper
from row_wiring.orm.metadata import EntityMetadata, MetadataStorage
from row_wiring.orm.model import AggregateConfiguration, Model
from row_wiring.orm.repository import (
    AutoRepository,
    EntityClassAwareRepository,
    Repository,
    RepositoryProtocol,
)

__all__ = [
    "Entity",
    "Cache",
    "Mapper",
    "AutoMapper",
    "MapperProtocol",
    "TableNameAwareMapper",
    "Repository",
    "AutoRepository",
    "RepositoryProtocol",
    "EntityClassAwareRepository",
    "IdentityMap",
    "RepositoryLoader",
    "Model",
    "AggregateConfiguration",
    "MetadataStorage",
    "EntityMetadata",
]
