"""Namespaced in-memory cache.

A single Cache service is registered per container; mappers receive a
derived handle (``cache.derive("mapper")``) sharing the same storage under
their own key namespace.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

_SEPARATOR = "."


class Cache:
    """Key-value cache with derivable namespaces."""

    def __init__(self, namespace: str = "", storage: dict[str, Any] | None = None) -> None:
        self._namespace = namespace
        self._storage: dict[str, Any] = storage if storage is not None else {}

    @property
    def namespace(self) -> str:
        return self._namespace

    def derive(self, namespace: str) -> Cache:
        """Return a cache sharing storage under a nested namespace."""
        nested = f"{self._namespace}{_SEPARATOR}{namespace}" if self._namespace else namespace
        return Cache(nested, self._storage)

    def _key(self, key: str) -> str:
        return f"{self._namespace}{_SEPARATOR}{key}" if self._namespace else key

    def load(self, key: str, fallback: Callable[[], Any] | None = None) -> Any:
        """Read a value; compute and store it via ``fallback`` on a miss."""
        full_key = self._key(key)
        if full_key in self._storage:
            return self._storage[full_key]
        if fallback is None:
            return None
        value = fallback()
        self._storage[full_key] = value
        return value

    def save(self, key: str, value: Any) -> None:
        self._storage[self._key(key)] = value

    def remove(self, key: str) -> None:
        self._storage.pop(self._key(key), None)

    def clean(self) -> None:
        """Drop every key in this namespace (and nested ones)."""
        prefix = self._key("")
        for key in [k for k in self._storage if k.startswith(prefix)]:
            del self._storage[key]
