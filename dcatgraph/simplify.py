"""Simplified, label-keyed views of resources for display.

`Simplifier.simplify()` turns a resource into a plain dict keyed by the
short names of its category. Literals become strings:

    "text"                for a plain literal
    "text@fr"             for a language-tagged literal
    "2023-05-21"          for xsd:date and xsd:dateTime
    "100[xsd-uri]"        for any other datatype

A reference to a named resource becomes `"<uri>"` when its property has no
range category, or `{"@id": uri, **simplified target}` otherwise. A
reference to a blank node is always replaced by the simplified target.
Properties missing from the short-name table are kept verbatim under the
`"json-ld"` key.
"""

from typing import Any

from dcatgraph.errors import DereferenceError, SimplificationError
from dcatgraph.logging import setup_logging
from dcatgraph.resource import Resource
from dcatgraph.stats import Stats
from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.value import Literal, Reference
from dcatgraph.vocab import (
    DCAT,
    LOCN,
    TEMPORAL_DATATYPES,
    WKT_LITERAL,
    Category,
    range_of,
    short_names_for,
)

logger = setup_logging()

JSONLD_KEY = "json-ld"
DEREFERENCE_FAILURES = "dereference failures"

_LOCATION_SHAPES: tuple[tuple[str, str], ...] = (
    (LOCN + "geometry", "geometry"),
    (DCAT + "bbox", "bbox"),
)


def simplify_literal(literal: Literal) -> Any:
    if literal.datatype is not None:
        if literal.datatype in TEMPORAL_DATATYPES:
            return literal.value
        return f"{literal.text}[{literal.datatype}]"
    if literal.language is not None:
        return f"{literal.text}@{literal.language}"
    return literal.value


def _location_shape(resource: Resource) -> dict[str, Any] | None:
    for property_uri, key in _LOCATION_SHAPES:
        for value in resource.values(property_uri):
            if isinstance(value, Literal) and value.datatype == WKT_LITERAL:
                return {key: value.value}
    return None


class Simplifier:
    """Simplifies resources of one store.

    Dereference failures on named resources degrade to `"<uri>"`; each
    distinct failure is logged once and every occurrence is counted in
    `stats`.
    """

    def __init__(self, store: GraphStoreInterface) -> None:
        self.store = store
        self.stats = Stats()
        self._reported: set[str] = set()

    def _report(self, error: DereferenceError) -> None:
        self.stats.increment(DEREFERENCE_FAILURES)
        message = str(error)
        if message not in self._reported:
            self._reported.add(message)
            logger.warning(message)

    def simplify(self, resource: Resource, _path: tuple[str, ...] = ()) -> dict[str, Any]:
        """Return the simplified view of `resource` (framed or not)."""
        path = _path + (resource.id,)
        if resource.category is Category.LOCATION:
            shape = _location_shape(resource)
            if shape is not None:
                return shape
        simple: dict[str, Any] = {}
        short_names = short_names_for(resource.category, resource.types)
        for property_uri, short_name in short_names.items():
            values = resource.properties.get(property_uri)
            if not values:
                continue
            simplified = [self.simplify_value(value, short_name, path) for value in values]
            simple[short_name] = simplified[0] if len(simplified) == 1 else simplified
        for property_uri, values in resource.properties.items():
            if property_uri in short_names:
                continue
            simple.setdefault(JSONLD_KEY, {})[property_uri] = [value.as_jsonld() for value in values]
        return simple

    def simplify_value(self, value: Literal | Reference | Resource, short_name: str, path: tuple[str, ...] = ()) -> Any:
        """Simplify one value of the property called `short_name`.

        Raises:
            SimplificationError: for a blank node reference held by a
                property without a range category.
            DereferenceError: if a blank node reference cannot be resolved.
        """
        if isinstance(value, Literal):
            return simplify_literal(value)
        if isinstance(value, Resource):
            if value.id in path:
                return f"<{value.id}>"
            simple = self.simplify(value, path)
            return simple if value.is_blank else {"@id": value.id, **simple}
        return self.simplify_reference(value, short_name, path)

    def simplify_reference(self, reference: Reference, short_name: str, path: tuple[str, ...] = ()) -> Any:
        category = range_of(short_name)
        if not reference.is_blank:
            if category is None or reference.id in path:
                return f"<{reference.id}>"
            try:
                target = self.store.get(category, reference.id)
            except DereferenceError as e:
                self._report(e)
                return f"<{reference.id}>"
            return {"@id": reference.id, **self.simplify(target, path)}
        if category is None:
            raise SimplificationError(f"blank node {reference.id} held by {short_name}, which has no range category")
        if reference.id in path:
            return f"<{reference.id}>"
        return self.simplify(self.store.get(category, reference.id), path)

    def simplify_category(self, category: Category, include_blank_nodes: bool = False) -> dict[str, dict[str, Any]]:
        """Simplify every resource of `category`, keyed by id.

        Blank nodes are skipped unless `include_blank_nodes` is set; they are
        normally shown embedded in their referrers.
        """
        return {
            resource.id: self.simplify(resource)
            for resource in self.store.resources_of(category)
            if include_blank_nodes or not resource.is_blank
        }


def simplify(store: GraphStoreInterface, resource: Resource) -> dict[str, Any]:
    """Simplify `resource` with a one-off Simplifier."""
    return Simplifier(store).simplify(resource)
