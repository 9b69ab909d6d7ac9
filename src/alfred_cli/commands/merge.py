"""Right-wins recursive merge over JSON-like trees."""

import copy
from collections.abc import Mapping
from typing import Any


def deep_merge(*sources: Mapping[str, Any]) -> dict[str, Any]:
    """Merge mappings left to right into a new dict.

    Nested mappings are merged key by key, later sources winning on
    conflicts. Any other value, lists included, replaces the earlier
    value wholesale. Inputs are never mutated.

    Example:
        >>> deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}, "b": [1]})
        {'a': {'x': 1, 'y': 3}, 'b': [1]}
    """
    result: dict[str, Any] = {}
    for source in sources:
        _merge_into(result, source)
    return result


def _merge_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            _merge_into(current, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge(value)
        else:
            target[key] = copy.deepcopy(value)
