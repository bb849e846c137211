"""Conversion of model objects into plain documents for a rendering layer."""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any


def _plain_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _plain_factory(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: _plain_value(value) for key, value in items}


def to_plain(obj: Any) -> Any:
    """Convert a model object into nested dicts, lists and scalars.

    Mappings keep their string keys, enums are replaced by their identifier and
    locations become ``{"x": ..., "y": ...}`` objects.

    Parameters
    ----------
    obj : Any
        A model dataclass, or a list/dict of them.

    Returns
    -------
    Any
        JSON compatible representation of `obj`.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj, dict_factory=_plain_factory)
    if isinstance(obj, dict):
        return {str(key): to_plain(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(value) for value in obj]
    return _plain_value(obj)


def to_json(obj: Any, indent: int | None = None) -> str:
    """Serialise a model object to a JSON string."""
    return json.dumps(to_plain(obj), indent=indent)
