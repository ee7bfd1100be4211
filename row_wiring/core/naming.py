"""Entity naming helpers."""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(\w)([A-Z])")


def lcfirst(name: str) -> str:
    """Lowercase the first character: ``OrderItem`` -> ``orderItem``."""
    return name[:1].lower() + name[1:]


def underscore(name: str) -> str:
    """Snake-case a camelCase name: ``orderItem`` -> ``order_item``."""
    return _CAMEL_BOUNDARY.sub(r"\1_\2", name).lower()
