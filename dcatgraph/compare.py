"""Comparison of two graphs loaded from different exports.

`included_in(graph1, graph2)` checks that every named resource of `graph1`
is in `graph2`, in the same category, with the same types and the same
property values in the same order. Blank nodes have no identity of their
own: a reference to a blank node is compared by dereferencing both sides
through the range table and comparing the targets.
"""

from pydantic import BaseModel

from dcatgraph.resource import Resource
from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.value import Literal, Reference
from dcatgraph.vocab import range_of, short_names_for


class Difference(BaseModel):
    """One difference, located by the path followed from a named resource."""

    model_config = {"frozen": True}

    path: tuple[str, ...]
    message: str

    def __str__(self) -> str:
        return f"{' / '.join(self.path)}: {self.message}"


class _Comparison:
    def __init__(self, graph1: GraphStoreInterface, graph2: GraphStoreInterface) -> None:
        self.graph1 = graph1
        self.graph2 = graph2
        self.differences: list[Difference] = []

    def differ(self, path: tuple[str, ...], message: str) -> None:
        self.differences.append(Difference(path=path, message=message))

    def resources(self, res1: Resource, res2: Resource, path: tuple[str, ...], visited: frozenset[tuple[str, str]]) -> None:
        if not res1.is_blank and res1.id != res2.id:
            self.differ(path, f"id {res1.id} != {res2.id}")
        if res1.types != res2.types:
            self.differ(path, f"types {res1.types} != {res2.types}")
        for property_uri, values1 in res1.properties.items():
            values2 = res2.values(property_uri)
            if len(values1) != len(values2):
                self.differ(path + (property_uri,), f"{len(values1)} value(s) != {len(values2)}")
            for i, value1 in enumerate(values1):
                value_path = path + (property_uri, str(i))
                if i >= len(values2):
                    self.differ(value_path, f"missing in {self.graph2.name}")
                    continue
                self.values(res1, property_uri, value1, values2[i], value_path, visited)

    def values(self, owner: Resource, property_uri: str, value1, value2, path: tuple[str, ...], visited) -> None:
        if type(value1) is not type(value2):
            self.differ(path, f"{type(value1).__name__} != {type(value2).__name__}")
            return
        if isinstance(value1, Literal):
            for field in ("value", "language", "datatype"):
                if getattr(value1, field) != getattr(value2, field):
                    self.differ(path, f"{field} {getattr(value1, field)!r} != {getattr(value2, field)!r}")
            return
        if not isinstance(value1, Reference):
            return
        if not value1.is_blank:
            if value1.id != value2.id:
                self.differ(path, f"id {value1.id} != {value2.id}")
            return
        short_name = short_names_for(owner.category, owner.types).get(property_uri)
        category = range_of(short_name) if short_name else None
        if category is None:
            self.differ(path, f"blank node {value1.id} held by a property without range category")
            return
        if (value1.id, value2.id) in visited:
            return
        target1 = self.graph1.try_get(category, value1.id)
        target2 = self.graph2.try_get(category, value2.id)
        if target1 is None or target2 is None:
            self.differ(path, f"blank node {value1.id} or {value2.id} not found in {category.value}")
            return
        self.resources(target1, target2, path + (value1.id,), visited | {(value1.id, value2.id)})


def included_in(graph1: GraphStoreInterface, graph2: GraphStoreInterface) -> list[Difference]:
    """Return the differences found checking that `graph1` is included in `graph2`.

    An empty list means every named resource of `graph1` has an equal
    counterpart in `graph2`.
    """
    comparison = _Comparison(graph1, graph2)
    for category in graph1.categories():
        for resource in graph1.resources_of(category):
            if resource.is_blank:
                continue
            path = (category.value, resource.id)
            counterpart = graph2.try_get(category, resource.id)
            if counterpart is None:
                comparison.differ(path, f"missing in {graph2.name}")
                continue
            comparison.resources(resource, counterpart, path, frozenset())
    return comparison.differences
