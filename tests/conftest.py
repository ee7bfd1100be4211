"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from row_wiring.orm.repository import AutoRepository


@pytest.fixture(autouse=True)
def reset_entity_class_names():
    """The entity class name table is process-wide; isolate each test."""
    yield
    AutoRepository.set_entity_class_names(())


@pytest.fixture
def entity_dir(tmp_path: Path) -> Path:
    """Temporary directory for entity files."""
    path = tmp_path / "entity"
    path.mkdir()
    return path


@pytest.fixture
def write_entity(entity_dir: Path):
    """Helper to create entity files.

    Usage:
        write_entity("User.py")
        write_entity("Order.py", other_dir)
    """

    def _write(file_name: str, directory: Path | None = None) -> Path:
        file_path = (directory or entity_dir) / file_name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text("", encoding="utf-8")
        return file_path

    return _write


@pytest.fixture
def orm_config(entity_dir: Path) -> dict[str, Any]:
    """Raw configuration pointing at the sample application."""
    return {
        "model": "sample_app.model.AppModel",
        "entity": {
            "dirs": str(entity_dir),
            "classMapping": "sample_app.entity.*Entity",
        },
        "mapper": {"classMapping": "sample_app.mapper.*Mapper"},
        "repository": {"classMapping": "sample_app.repository.*Repository"},
    }
