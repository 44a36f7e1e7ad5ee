"""RDF resources.

A `Resource` is one RDF entity: an identifier, an ordered list of type URIs,
the category it is stored under, and a multi-valued property map. Property
lists are never empty once stored; `set_values()` drops a property instead
of keeping an empty list.

Inside the store every value is a `Literal` or a `Reference`. A framed copy
(see `dcatgraph.framing`) may hold nested `Resource` objects in place of
references.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, Union

from pydantic import BaseModel, Field

from dcatgraph.errors import MalformedValueError
from dcatgraph.value import Literal, PropertyValue, Reference, parse_value
from dcatgraph.vocab import DCT, FOAF, RDFS_LABEL, Category, is_blank_node

_LABEL_PROPERTIES = (RDFS_LABEL, DCT + "title", FOAF + "name")


class Resource(BaseModel):
    """An RDF entity with its properties."""

    id: str = Field(description="URI or blank node id.")
    types: list[str] = Field(default_factory=list, description="RDF type URIs, in export order.")
    category: Category = Field(description="Handler group the resource is stored under.")
    properties: dict[str, list[Union[Literal, Reference, "Resource"]]] = Field(
        default_factory=dict,
        description="Property URI to its values, in export order.",
    )

    @classmethod
    def from_jsonld(cls, record: Mapping[str, Any], category: Category) -> Resource:
        """Parse an expanded JSON-LD resource record.

        Raises:
            MalformedValueError: if any value record has an unknown shape,
                or a property does not hold a list.
        """
        properties: dict[str, list[Union[Literal, Reference, Resource]]] = {}
        for key, values in record.items():
            if key in ("@id", "@type"):
                continue
            if not isinstance(values, list):
                raise MalformedValueError([key], f"{key} does not hold a list of values: {values!r}")
            parsed = [parse_value(value) for value in values]
            if parsed:
                properties[key] = parsed
        return cls.model_construct(
            id=record["@id"],
            types=list(record.get("@type", [])),
            category=category,
            properties=properties,
        )

    @property
    def is_blank(self) -> bool:
        return is_blank_node(self.id)

    def values(self, property_uri: str) -> list[Union[Literal, Reference, Resource]]:
        return self.properties.get(property_uri, [])

    def set_values(self, property_uri: str, values: Sequence[Union[Literal, Reference, Resource]]) -> None:
        """Replace a property's values; an empty list removes the property."""
        if values:
            self.properties[property_uri] = list(values)
        else:
            self.properties.pop(property_uri, None)

    def add_values(self, property_uri: str, values: Iterable[PropertyValue]) -> int:
        """Append values not already present; return how many were added."""
        current = self.properties.setdefault(property_uri, [])
        added = 0
        for value in values:
            if value not in current:
                current.append(value)
                added += 1
        if not current:
            del self.properties[property_uri]
        return added

    def label(self) -> str:
        """Return a display label: rdfs:label, dct:title or foaf:name, else the types."""
        for property_uri in _LABEL_PROPERTIES:
            for value in self.properties.get(property_uri, []):
                if isinstance(value, Literal):
                    return value.text
        return ", ".join(self.types)

    def as_jsonld(self, level: int = 0) -> dict[str, Any]:
        """Rebuild the expanded JSON-LD record.

        Nested blank nodes (level > 0, i.e. framed values) are emitted without
        their @id.
        """
        record: dict[str, Any] = {}
        if level == 0 or not self.is_blank:
            record["@id"] = self.id
        record["@type"] = list(self.types)
        for property_uri, values in self.properties.items():
            record[property_uri] = [value.as_jsonld(level + 1) for value in values]
        return record

    def copy_shallow(self) -> Resource:
        """Return a copy with its own property lists, sharing the immutable values."""
        return self.model_construct(
            id=self.id,
            types=list(self.types),
            category=self.category,
            properties={uri: list(values) for uri, values in self.properties.items()},
        )


Resource.model_rebuild()
