"""Extension configuration.

OrmConfig is a Pydantic model validating the ``orm`` configuration section.
Keys are accepted either in snake_case or in their camelCase aliases
(``classMapping``, ``tableNameConventions``, ``genericFactory``).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from row_wiring.core.classes import WILDCARD
from row_wiring.core.enums import DuplicateEntityPolicy, TableNameConvention
from row_wiring.core.exceptions import ConfigurationError


def _check_wildcard(pattern: str) -> str:
    if WILDCARD not in pattern:
        raise ValueError(f"class mapping '{pattern}' must contain a '*' wildcard")
    return pattern


WildcardPattern = Annotated[str, AfterValidator(_check_wildcard)]


class _Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class EntityConfig(_Section):
    """Where entity files live and how their names map to classes."""

    dirs: list[Path]
    class_mapping: WildcardPattern = Field("*Entity", alias="classMapping")
    duplicates: DuplicateEntityPolicy = DuplicateEntityPolicy.OVERRIDE

    @field_validator("dirs", mode="before")
    @classmethod
    def _normalize_dirs(cls, value: Any) -> Any:
        if isinstance(value, (str, Path)):
            return [value]
        return value


class MapperConfig(_Section):
    class_mapping: WildcardPattern = Field("*Mapper", alias="classMapping")
    table_name_conventions: TableNameConvention = Field(
        TableNameConvention.AUTO, alias="tableNameConventions"
    )
    generic_factory: str = Field("row_wiring.orm.mapper.AutoMapper", alias="genericFactory")


class RepositoryConfig(_Section):
    class_mapping: WildcardPattern = Field("*Repository", alias="classMapping")
    generic_factory: str = Field(
        "row_wiring.orm.repository.AutoRepository", alias="genericFactory"
    )


class OrmConfig(_Section):
    """Configuration for the ORM extension."""

    model: str
    entity: EntityConfig
    mapper: MapperConfig = MapperConfig()
    repository: RepositoryConfig = RepositoryConfig()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OrmConfig:
        """Validate a raw configuration mapping.

        Raises:
            ConfigurationError: If the mapping does not match the schema.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid ORM configuration: {e}") from e
