"""Mapper protocol and base implementations.

A mapper translates storage rows into entity instances. The extension binds
generic mapper services to MapperProtocol and, when a mapper derives from
Mapper, hands it a derived cache handle.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from row_wiring.core.classes import qualified_name
from row_wiring.core.exceptions import HydrationError
from row_wiring.core.naming import lcfirst
from row_wiring.orm.cache import Cache

T = TypeVar("T")


@runtime_checkable
class MapperProtocol(Protocol):
    """Base mapper protocol."""

    def get_table_name(self) -> str:
        """Name of the storage table backing this mapper."""
        ...

    def hydrate(self, entity_class: type[T], row: dict[str, Any]) -> T:
        """Build an entity instance from a row dict."""
        ...


@runtime_checkable
class TableNameAwareMapper(Protocol):
    """Mapper accepting its table name through a setter.

    The table name should be considered immutable after the mapper is built.
    """

    def set_table_name(self, table_name: str) -> Any: ...


class Mapper:
    """Base mapper.

    Hydration order:
    1. Pydantic BaseModel -> model_validate(row)
    2. dataclass -> entity_class(**row) restricted to declared fields
    3. Plain class -> entity_class(**row)

    Args:
        cache: Optional cache handle, typically derived from the container cache.
        table_name: Storage table; defaults to the class name without the
            ``Mapper`` suffix, lowercase-first (``OrderItemMapper`` -> ``orderItem``).
    """

    def __init__(self, cache: Cache | None = None, table_name: str | None = None) -> None:
        self.cache = cache
        self._table_name = table_name

    def get_table_name(self) -> str:
        if self._table_name is None:
            name = type(self).__name__.removesuffix("Mapper")
            self._table_name = lcfirst(name)
        return self._table_name

    def hydrate(self, entity_class: type[T], row: dict[str, Any]) -> T:
        """Map a single row to an entity_class instance.

        Raises:
            HydrationError: If the row does not fit the entity class.
        """
        if issubclass(entity_class, BaseModel):
            try:
                return entity_class.model_validate(row)  # type: ignore[attr-defined, no-any-return]
            except ValidationError as e:
                raise HydrationError(qualified_name(entity_class), [str(e)]) from e

        if dataclasses.is_dataclass(entity_class):
            names = {f.name for f in dataclasses.fields(entity_class) if f.init}
            row = {key: value for key, value in row.items() if key in names}

        try:
            return entity_class(**row)
        except TypeError as e:
            raise HydrationError(qualified_name(entity_class), [str(e)]) from e


class AutoMapper(Mapper):
    """Generic mapper used when no specific mapper class exists."""

    def set_table_name(self, table_name: str) -> AutoMapper:
        self._table_name = table_name
        return self
