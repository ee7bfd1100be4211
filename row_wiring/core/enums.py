"""Configuration and planning enumerations."""

from __future__ import annotations

from enum import Enum


class TableNameConvention(str, Enum):
    """How mapper table names are derived from entity names."""

    AUTO = "auto"
    UNDERSCORE = "underscore"


class DuplicateEntityPolicy(str, Enum):
    """What happens when two entity files resolve to the same name."""

    OVERRIDE = "override"
    STRICT = "strict"


class DefinitionKind(Enum):
    """Whether a service is bound to a discovered class or a generic factory."""

    SPECIFIC = "specific"
    GENERIC = "generic"
