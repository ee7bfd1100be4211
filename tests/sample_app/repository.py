"""Specific repositories of the sample application."""

from __future__ import annotations

from row_wiring.orm.repository import AutoRepository


class OrderRepository(AutoRepository):
    def total(self, rows: list[dict]) -> float:
        return sum(order.total for order in self.hydrate_many(rows))


class MemberRepository(AutoRepository):
    pass


class AdminRepository(MemberRepository):
    """Specialised MemberRepository; both are wired as separate services."""


class ArchiveRepository:
    """Repository outside the base Repository lineage; gets no mapper."""

    def __init__(self) -> None:
        self.model = None

    def set_model(self, model: object) -> None:
        self.model = model
