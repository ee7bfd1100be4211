"""Specific mappers of the sample application."""

from __future__ import annotations

from typing import Any

from row_wiring.orm.mapper import Mapper


class UserMapper(Mapper):
    pass


class OrderItemMapper:
    """Mapper not derived from the base Mapper; receives no cache."""

    def __init__(self) -> None:
        self.table_name = "order_items_legacy"

    def set_table_name(self, table_name: str) -> None:
        self.table_name = table_name

    def get_table_name(self) -> str:
        return self.table_name

    def hydrate(self, entity_class: type, row: dict[str, Any]) -> Any:
        return entity_class(**row)
