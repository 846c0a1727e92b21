"""Depth-first field lookup over parsed document trees.

Electronic invoices move the same field around depending on issuer and schema
version, so lookups are by name at any depth rather than by path. A tree node
is a ``str`` (scalar), a ``dict`` (element) or a ``list`` (repeated elements).
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def find_first(tree: Any, name: str) -> Any | None:
    """Return the value of the first *name* field found, or None.

    A mapping's own keys are checked before any of its children are searched;
    children are visited in mapping order and list elements in index order.
    A present empty value (``""``) is returned as-is and is not "not found".
    """
    if isinstance(tree, dict):
        if name in tree:
            return tree[name]
        children: Iterable[Any] = tree.values()
    elif isinstance(tree, list):
        children = tree
    else:
        return None

    for child in children:
        if isinstance(child, (dict, list)):
            found = find_first(child, name)
            if found is not None:
                return found
    return None


def find_all(tree: Any, name: str) -> list[Any]:
    """Collect every *name* field in the tree.

    List-valued matches are flattened into the result. Matches nested inside
    a matched value are collected too.
    """
    results: list[Any] = []
    _collect(tree, name, results)
    return results


def _collect(node: Any, name: str, results: list[Any]) -> None:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == name:
                if isinstance(value, list):
                    results.extend(value)
                else:
                    results.append(value)
            if isinstance(value, (dict, list)):
                _collect(value, name, results)
    elif isinstance(node, list):
        for item in node:
            _collect(item, name, results)


def pick_first_available(mapping: Any, names: Iterable[str]) -> Any | None:
    """Value of the first of *names* present as a direct key of *mapping*."""
    if not isinstance(mapping, dict):
        return None
    for name in names:
        if name in mapping:
            return mapping[name]
    return None


def as_list(value: Any) -> list[Any]:
    """Normalise a possibly-repeated element to a list."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    return [value]
