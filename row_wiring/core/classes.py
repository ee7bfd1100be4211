"""Class loading helpers.

Class names are dotted paths: ``package.module.ClassName``. A name that
cannot be imported is treated as a missing class, never as an error.
"""

from __future__ import annotations

import importlib
import inspect

from row_wiring.core.exceptions import InvalidWildcardError

WILDCARD = "*"


def replace_wildcard(pattern: str, value: str) -> str:
    """Substitute every ``*`` in ``pattern`` with ``value``.

    Raises:
        InvalidWildcardError: If the pattern has no wildcard.
    """
    if WILDCARD not in pattern:
        raise InvalidWildcardError(pattern)
    return pattern.replace(WILDCARD, value)


def qualified_name(cls: type) -> str:
    """Dotted name of a class, as used in class mappings."""
    return f"{cls.__module__}.{cls.__qualname__}"


def import_class(class_name: str) -> type | None:
    """Import a class by dotted name, or return None if it does not exist."""
    module_path, _, attr = class_name.rpartition(".")
    if not module_path or not attr:
        return None

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as e:
        # Only a missing target module means "no such class"; a broken
        # import inside an existing module must surface.
        if e.name is not None and (module_path == e.name or module_path.startswith(e.name + ".")):
            return None
        raise

    cls = getattr(module, attr, None)
    return cls if inspect.isclass(cls) else None


def is_instantiable(cls: type) -> bool:
    """Concrete classes only: no abstract classes, no Protocols."""
    if inspect.isabstract(cls):
        return False
    return not getattr(cls, "_is_protocol", False)


def class_lineage(target: type | str) -> tuple[type, ...]:
    """The class followed by all its ancestors, or () for a missing class."""
    cls = import_class(target) if isinstance(target, str) else target
    if cls is None:
        return ()
    return cls.__mro__


def resolve_type(target: type | str) -> type | None:
    if isinstance(target, str):
        return import_class(target)
    return target
