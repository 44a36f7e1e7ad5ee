"""RDF property values.

In expanded JSON-LD a property value is a small object whose key set tells
what it is:

- ``{"@id"}``: a reference to another resource (URI or blank node id)
- ``{"@value"}``: a plain literal
- ``{"@type", "@value"}``: a typed literal
- ``{"@language", "@value"}``: a language-tagged string

Examples:

    "http://xmlns.com/foaf/0.1/homepage": [{"@id": "http://catalogue.geo-ide.developpement-durable.gouv.fr"}]
    "http://www.w3.org/ns/hydra/core#itemsPerPage": [{"@value": 100}]
    "http://purl.org/dc/terms/title": [{"@language": "fr", "@value": "GéoIDE Catalogue"}]

`parse_value()` maps each shape onto `Literal` or `Reference`; `as_jsonld()`
gives back exactly the key set the value was parsed from.
"""

from typing import Any, Mapping, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from dcatgraph.errors import MalformedValueError
from dcatgraph.vocab import is_blank_node

Scalar = Union[str, int, float, bool]

_REFERENCE_KEYS = frozenset({"@id"})
_PLAIN_KEYS = frozenset({"@value"})
_TYPED_KEYS = frozenset({"@type", "@value"})
_TAGGED_KEYS = frozenset({"@language", "@value"})


class Literal(BaseModel, frozen=True):
    """A literal value, optionally language-tagged or typed (never both)."""

    value: Scalar = Field(description="Lexical value as found in the export.")
    language: str | None = Field(default=None, description="BCP47 language tag.")
    datatype: str | None = Field(default=None, description="Datatype URI.")

    @model_validator(mode="after")
    def tag_or_type(self) -> "Literal":
        if self.language is not None and self.datatype is not None:
            raise ValueError("a literal carries a language or a datatype, not both")
        return self

    @property
    def text(self) -> str:
        return self.value if isinstance(self.value, str) else str(self.value)

    @property
    def is_plain(self) -> bool:
        return self.language is None and self.datatype is None

    def keys(self) -> list[str]:
        if self.language is not None:
            return ["@language", "@value"]
        if self.datatype is not None:
            return ["@type", "@value"]
        return ["@value"]

    def as_jsonld(self, level: int = 0) -> dict[str, Any]:
        if self.language is not None:
            return {"@language": self.language, "@value": self.value}
        if self.datatype is not None:
            return {"@type": self.datatype, "@value": self.value}
        return {"@value": self.value}


class Reference(BaseModel, frozen=True):
    """A pointer to another resource."""

    id: str = Field(description="URI or blank node id of the target.")

    @property
    def is_blank(self) -> bool:
        return is_blank_node(self.id)

    def keys(self) -> list[str]:
        return ["@id"]

    def as_jsonld(self, level: int = 0) -> dict[str, Any]:
        return {"@id": self.id}


PropertyValue = Union[Literal, Reference]


def parse_value(record: Mapping[str, Any]) -> PropertyValue:
    """Build a PropertyValue from an expanded JSON-LD value object.

    Raises:
        MalformedValueError: if the key set is not one of the four shapes.
    """
    if not isinstance(record, Mapping):
        raise MalformedValueError([], f"value record is not an object: {record!r}")
    keys = frozenset(record)
    try:
        if keys == _REFERENCE_KEYS:
            return Reference(id=record["@id"])
        if keys == _PLAIN_KEYS:
            return Literal(value=record["@value"])
        if keys == _TYPED_KEYS:
            return Literal(value=record["@value"], datatype=record["@type"])
        if keys == _TAGGED_KEYS:
            return Literal(value=record["@value"], language=record["@language"])
    except ValidationError as e:
        raise MalformedValueError(sorted(record), f"invalid value record {dict(record)!r}: {e.error_count()} error(s)") from e
    raise MalformedValueError(sorted(record))
