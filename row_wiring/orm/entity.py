"""Entity marker base class."""

from __future__ import annotations

from abc import ABC


class Entity(ABC):
    """Base class every persisted domain object must derive from.

    Entity discovery rejects concrete classes that do not subclass Entity.
    Abstract subclasses are allowed next to concrete entities and are
    skipped during discovery.
    """
