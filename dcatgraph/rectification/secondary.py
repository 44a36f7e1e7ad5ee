"""Recovery of values carrying a second, nested encoding.

The upstream publisher sometimes serializes a structured value (a
multilingual label, a URI holder, a list of those) into a plain string,
using Python-dict-like syntax:

    "{'fr': 'Licence Ouverte', 'en': ''}"
    "[{'label': {'fr': '', 'en': ''}, 'type': [], 'uri': 'https://spdx.org/licenses/etalab-2.0'}]"

Those strings are valid YAML flow collections, so they are decoded with
PyYAML and mapped back onto literals and references. Decoding never raises:
a string that cannot be understood is replaced by a diagnostic literal.
"""

from typing import Any

import yaml

from dcatgraph.value import Literal, PropertyValue, Reference

EMPTY_PLACEHOLDERS = frozenset(
    {
        "{'fr': [], 'en': []}",
        "{'fr': '', 'en': ''}",
    }
)

DIAGNOSTIC_PREFIX = "secondary encoding not decoded: "


def looks_encoded(value: PropertyValue) -> bool:
    """Return True for a plain string literal starting like a flow mapping or a list of them."""
    return (
        isinstance(value, Literal)
        and value.is_plain
        and isinstance(value.value, str)
        and (value.value.startswith("{") or value.value.startswith("[{"))
    )


def diagnostic(text: str) -> Literal:
    return Literal(value=DIAGNOSTIC_PREFIX + text)


def _parse(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        # backslash-escaped quotes are not valid inside YAML single-quoted scalars
        return yaml.safe_load(text.replace("\\'", "''"))


def _label_literals(label: dict) -> list[PropertyValue] | None:
    literals: list[PropertyValue] = []
    for language, text in label.items():
        if not isinstance(language, str):
            return None
        if isinstance(text, list):
            if not all(isinstance(item, str) for item in text):
                return None
            literals.extend(Literal(value=item, language=language) for item in text if item)
        elif isinstance(text, str):
            if text:
                literals.append(Literal(value=text, language=language))
        elif text is not None:
            return None
    return literals


def _node_values(node: Any) -> list[PropertyValue] | None:
    """Map one decoded node, or return None when its shape is not recognized."""
    if not isinstance(node, dict):
        return None
    uri = node.get("uri")
    if isinstance(uri, str) and uri:
        return [Reference(id=uri)]
    if "label" in node and set(node) <= {"label", "type"} and not node.get("type"):
        label = node["label"]
        return _label_literals(label) if isinstance(label, dict) else None
    if node and all(isinstance(key, str) and len(key) == 2 for key in node):
        return _label_literals(node)
    return None


def decode(text: str) -> list[PropertyValue]:
    """Decode a secondary-encoded string into property values.

    Known empty placeholders decode to an empty list. A string that fails
    to parse, or whose structure is not recognized, decodes to a single
    diagnostic literal.
    """
    if text in EMPTY_PLACEHOLDERS:
        return []
    try:
        decoded = _parse(text)
    except yaml.YAMLError:
        return [diagnostic(text)]
    nodes = decoded if isinstance(decoded, list) else [decoded]
    values: list[PropertyValue] = []
    for node in nodes:
        node_values = _node_values(node)
        if node_values is None:
            return [diagnostic(text)]
        values.extend(value for value in node_values if value not in values)
    return values
