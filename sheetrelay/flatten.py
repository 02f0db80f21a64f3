from typing import Any


def _items(node: dict | list):
    if isinstance(node, dict):
        return node.items()
    return enumerate(node)


def flatten(data: dict | list, prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into one level, joining key paths with ``_``.

    Lists are treated as mappings keyed by position. Key order follows the
    input so the result can be written as aligned header and value rows.

    >>> flatten({"name": "Ann", "address": {"city": "Oslo", "zip": 150}})
    {'name': 'Ann', 'address_city': 'Oslo', 'address_zip': 150}
    """
    flattened: dict[str, Any] = {}
    for key, value in _items(data):
        if isinstance(value, (dict, list)):
            flattened.update(flatten(value, f"{prefix}{key}_"))
        else:
            flattened[f"{prefix}{key}"] = value
    return flattened
