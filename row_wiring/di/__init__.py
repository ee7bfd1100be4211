"""Service definitions, container builder and compiled container."""

from __future__ import annotations

from row_wiring.di.builder import ContainerBuilder
from row_wiring.di.container import Container
from row_wiring.di.definitions import Deferred, Reference, ServiceDefinition, Setup, Statement

__all__ = [
    "ContainerBuilder",
    "Container",
    "ServiceDefinition",
    "Reference",
    "Statement",
    "Setup",
    "Deferred",
]
