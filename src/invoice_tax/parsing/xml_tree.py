"""Convert electronic-invoice XML into a plain document tree.

The tree is built from ``dict``, ``list`` and ``str`` only:

- attributes share the namespace of child elements,
- namespace URIs and prefixes are dropped from tag and attribute names,
- repeated sibling elements become a list in document order,
- every scalar stays a string (empty elements are ``""``); numeric coercion
  happens later, when amounts and rates are read.
"""
from __future__ import annotations
import xml.etree.ElementTree as ET
from pathlib import Path

from ..errors import DocumentParseError

Node = str | dict | list
DocumentTree = dict[str, Node]

TEXT_KEY = "#text"


def parse_document(data: bytes | str) -> DocumentTree:
    """Parse XML bytes into ``{root_tag: subtree}``.

    Raises DocumentParseError for malformed or empty input.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data or not data.strip():
        raise DocumentParseError("Empty document")
    try:
        root = ET.fromstring(data)
    except (ET.ParseError, ValueError) as e:
        raise DocumentParseError(f"Malformed XML: {e}") from e
    return {_local_name(root.tag): _element_to_node(root)}


def read_document(path: str | Path) -> DocumentTree:
    """Read and parse the XML document at *path*."""
    with open(path, "rb") as f:
        data = f.read()
    try:
        return parse_document(data)
    except DocumentParseError as e:
        raise DocumentParseError(f"{Path(path).name}: {e}") from e


def document_root(tree: DocumentTree) -> Node:
    """Return the subtree under the single top-level element."""
    if not tree:
        raise DocumentParseError("Document has no root element")
    return next(iter(tree.values()))


def _local_name(tag: str) -> str:
    """Strip ``{uri}`` and ``prefix:`` from a tag or attribute name."""
    if "}" in tag:
        tag = tag.split("}", 1)[1]
    if ":" in tag:
        tag = tag.split(":", 1)[1]
    return tag


def _element_to_node(elem: ET.Element) -> Node:
    children = list(elem)
    text = (elem.text or "").strip()

    if not children and not elem.attrib:
        return text

    node: dict[str, Node] = {}
    for name, value in elem.attrib.items():
        node[_local_name(name)] = value.strip()

    for child in children:
        name = _local_name(child.tag)
        value = _element_to_node(child)
        if name not in node:
            node[name] = value
        elif isinstance(node[name], list):
            node[name].append(value)
        else:
            node[name] = [node[name], value]

    if text:
        node[TEXT_KEY] = text
    return node

