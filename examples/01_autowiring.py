"""
Example 01: Convention-Based Repository Wiring

This example demonstrates how OrmExtension discovers entities in a directory
and registers repository and mapper services for them.
"""

from dataclasses import dataclass
from pathlib import Path
import logging
import tempfile

from row_wiring import ContainerBuilder, OrmExtension
from row_wiring.orm import AutoRepository, Entity, Mapper


@dataclass
class UserEntity(Entity):
    id: int
    name: str


@dataclass
class BookEntity(Entity):
    id: int
    title: str
    author_id: int


class UserMapper(Mapper):
    """Specific mapper; BookEntity falls back to AutoMapper."""


class BookRepository(AutoRepository):
    """Specific repository; UserEntity falls back to AutoRepository."""

    def by_author(self, rows, author_id):
        return [book for book in self.hydrate_many(rows) if book.author_id == author_id]


def main():
    logging.basicConfig(level=logging.INFO)

    # One file per entity; only the file names matter
    entity_dir = Path(tempfile.mkdtemp())
    (entity_dir / "User.py").write_text("")
    (entity_dir / "Book.py").write_text("")

    builder = ContainerBuilder()
    builder.add_extension(
        OrmExtension(
            {
                "model": "row_wiring.orm.model.Model",
                "entity": {"dirs": [str(entity_dir)], "classMapping": "__main__.*Entity"},
                "mapper": {"classMapping": "__main__.*Mapper", "tableNameConventions": "underscore"},
                "repository": {"classMapping": "__main__.*Repository"},
            }
        )
    )
    container = builder.compile()

    print("=== Registered Services ===\n")
    for name in container.service_names:
        print(f"  {name}")
    print()

    model = container.get_service("orm.model")

    print("=== Generic Repository ===\n")
    users = model.user
    print(f"repository: {type(users).__name__}, entity: {users.entity_class_name}")
    print(f"mapper: {type(users.mapper).__name__}, table: {users.mapper.get_table_name()}")
    print(f"hydrated: {users.hydrate({'id': 1, 'name': 'Alice'})}\n")

    print("=== Specific Repository ===\n")
    books = model.get_repository(BookRepository)
    rows = [
        {"id": 1, "title": "Dune", "author_id": 1},
        {"id": 2, "title": "Emma", "author_id": 2},
    ]
    print(f"mapper: {type(books.mapper).__name__}, table: {books.mapper.get_table_name()}")
    print(f"books by author 1: {books.by_author(rows, 1)}")

    # Clean up
    for file in entity_dir.glob("*.py"):
        file.unlink()
    entity_dir.rmdir()


if __name__ == "__main__":
    main()
