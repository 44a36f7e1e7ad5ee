"""Stable, caller-ordered rendering of a compacted JSON-LD graph.

Compaction itself is done by PyLD. Its output is wrapped into a small tree
of elements (resource, reference, literal, list) which is serialized back
with a caller-given property order:

    order = ["title", "description", {"publisher": ["name", "mbox"]}, "theme"]

Named properties come first, in the given order; a `{name: nested_order}`
entry orders the properties of the resources nested under `name`. The
remaining properties follow in the order PyLD produced them. An order can
also be given per type, as a mapping from the compacted `@type` to an order.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Union

from pyld import jsonld as pyld_jsonld

from dcatgraph.errors import CompactionError
from dcatgraph.logging import setup_logging

logger = setup_logging()

OrderItem = Union[str, Mapping[str, Any]]
Order = Sequence[OrderItem]
OrderSpec = Union[Order, Mapping[str, Order]]


class CompactElement(ABC):
    """Base class of the elements of a compacted graph."""

    @staticmethod
    def create(value: Any) -> "CompactElement":
        if isinstance(value, list):
            return CompactList(value)
        if isinstance(value, dict):
            if "@value" in value:
                return CompactLiteral(value)
            if "@type" in value:
                return CompactResource(value)
            if "@id" in value:
                return CompactReference(value)
        return CompactLiteral(value)

    @abstractmethod
    def jsonld(self, order: Order = (), by_type: Mapping[str, Order] | None = None) -> Any:
        """Rebuild the JSON-LD of this element, properties ordered by `order`.

        `by_type` gives the order of nested resources by their type when no
        explicit order is passed down.
        """


class CompactReference(CompactElement):
    def __init__(self, value: Mapping[str, Any]) -> None:
        self.id = value["@id"]

    def jsonld(self, order: Order = (), by_type: Mapping[str, Order] | None = None) -> dict[str, Any]:
        return {"@id": self.id}


class CompactLiteral(CompactElement):
    def __init__(self, value: Any) -> None:
        self.value = value

    def jsonld(self, order: Order = (), by_type: Mapping[str, Order] | None = None) -> Any:
        return self.value


class CompactList(CompactElement):
    def __init__(self, values: list[Any]) -> None:
        self.elements = [CompactElement.create(value) for value in values]

    def jsonld(self, order: Order = (), by_type: Mapping[str, Order] | None = None) -> list[Any]:
        return [element.jsonld(order, by_type) for element in self.elements]


def _order_entries(order: Order) -> list[tuple[str, Order]]:
    entries: list[tuple[str, Order]] = []
    for item in order:
        if isinstance(item, str):
            entries.append((item, ()))
        else:
            entries.extend((name, nested) for name, nested in item.items())
    return entries


class CompactResource(CompactElement):
    """A node object of the compacted graph."""

    def __init__(self, value: Mapping[str, Any]) -> None:
        self.id: str | None = value.get("@id")
        self.type: str | list[str] = value["@type"]
        self.properties: dict[str, CompactElement] = {
            key: CompactElement.create(item) for key, item in value.items() if key not in ("@id", "@type")
        }

    @property
    def primary_type(self) -> str:
        return self.type[0] if isinstance(self.type, list) and self.type else str(self.type)

    def jsonld(self, order: Order = (), by_type: Mapping[str, Order] | None = None) -> dict[str, Any]:
        if not order and by_type:
            order = by_type.get(self.primary_type, ())
        record: dict[str, Any] = {}
        if self.id is not None:
            record["@id"] = self.id
        record["@type"] = self.type
        for name, nested in _order_entries(order):
            if name in self.properties and name not in record:
                record[name] = self.properties[name].jsonld(nested, by_type)
        for name, element in self.properties.items():
            if name not in record:
                record[name] = element.jsonld((), by_type)
        return record


class CompactGraph:
    """A compacted graph and the context it was compacted with."""

    def __init__(self, context: Mapping[str, Any], compacted: Mapping[str, Any]) -> None:
        self.context = context
        if "@graph" in compacted:
            nodes = list(compacted["@graph"])
        else:
            nodes = [{key: value for key, value in compacted.items() if key != "@context"}]
        self.elements = [CompactElement.create(node) for node in nodes if node]

    @classmethod
    def compact(cls, expanded: list[dict[str, Any]] | dict[str, Any], context: Mapping[str, Any]) -> "CompactGraph":
        """Compact an expanded JSON-LD document with PyLD.

        Raises:
            CompactionError: if PyLD fails.
        """
        try:
            compacted = pyld_jsonld.compact(expanded, {"@context": dict(context)})
        except pyld_jsonld.JsonLdError as e:
            logger.error("JSON-LD compaction failed: %s", e)
            raise CompactionError(f"JSON-LD compaction failed: {e}") from e
        if not isinstance(compacted, dict):
            raise CompactionError(f"unexpected compaction result of type {type(compacted).__name__}")
        return cls(context, compacted)

    def __len__(self) -> int:
        return len(self.elements)

    def jsonld(self, order: OrderSpec = ()) -> dict[str, Any]:
        """Serialize the graph with its properties ordered by `order`.

        `order` is either one order for every resource, or a mapping from
        compacted type to order.
        """
        if isinstance(order, Mapping):
            flat: Order = ()
            by_type: Mapping[str, Order] | None = order
        else:
            flat, by_type = order, None
        return {
            "@context": dict(self.context),
            "@graph": [element.jsonld(flat, by_type) for element in self.elements],
        }
