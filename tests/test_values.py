"""Tests for property values and resources.

This module verifies:
- Value records are classified by their key set, in any key order
- Unknown key sets and invalid values raise MalformedValueError
- as_jsonld() gives back the key set a value was parsed from
- Resource parsing, property editing and JSON-LD export
"""

import pytest

from dcatgraph.errors import MalformedValueError
from dcatgraph.resource import Resource
from dcatgraph.value import Literal, Reference, parse_value
from dcatgraph.vocab import DCT, RDFS_LABEL, XSD_DATE, Category
from tests.conftest import lit, make_record, ref


class TestParseValue:
    """Tests for parse_value() classification."""

    def test_reference(self) -> None:
        value = parse_value({"@id": "http://example.org/a"})
        assert value == Reference(id="http://example.org/a")

    def test_plain_literal_keeps_scalar(self) -> None:
        value = parse_value({"@value": 100})
        assert isinstance(value, Literal)
        assert value.value == 100
        assert value.is_plain

    def test_typed_literal_any_key_order(self) -> None:
        value = parse_value({"@value": "2023-05-21", "@type": XSD_DATE})
        assert value == Literal(value="2023-05-21", datatype=XSD_DATE)

    def test_tagged_literal(self) -> None:
        value = parse_value({"@value": "Titre", "@language": "fr"})
        assert value == Literal(value="Titre", language="fr")

    def test_unknown_key_set_raises(self) -> None:
        with pytest.raises(MalformedValueError) as excinfo:
            parse_value({"@id": "x", "@value": "y"})
        assert excinfo.value.keys == ["@id", "@value"]

    def test_invalid_value_raises_malformed(self) -> None:
        with pytest.raises(MalformedValueError):
            parse_value({"@value": {"nested": "object"}})

    @pytest.mark.parametrize("record", [5, "texte", ["@value"], None])
    def test_non_object_value_is_malformed(self, record) -> None:
        with pytest.raises(MalformedValueError):
            parse_value(record)

    def test_literal_cannot_have_language_and_datatype(self) -> None:
        with pytest.raises(ValueError):
            Literal(value="x", language="fr", datatype=XSD_DATE)

    @pytest.mark.parametrize(
        "record",
        [
            {"@id": "_:b0"},
            {"@value": "texte"},
            {"@type": XSD_DATE, "@value": "2023-05-21"},
            {"@language": "en", "@value": "text"},
        ],
    )
    def test_as_jsonld_returns_parsed_key_set(self, record) -> None:
        value = parse_value(record)
        assert value.as_jsonld() == record
        assert sorted(value.keys()) == sorted(record)


class TestResource:
    """Tests for Resource parsing and editing."""

    def test_from_jsonld(self) -> None:
        record = make_record("http://example.org/ds", dct__title=[lit("Titre", "fr")], dct__subject=[])
        resource = Resource.from_jsonld(record, Category.DATASET)
        assert resource.id == "http://example.org/ds"
        assert resource.category is Category.DATASET
        assert resource.values(DCT + "title") == [Literal(value="Titre", language="fr")]
        assert DCT + "subject" not in resource.properties

    @pytest.mark.parametrize("values", [5, "texte", {"@value": "texte"}])
    def test_property_not_holding_a_list_is_malformed(self, values) -> None:
        record = make_record("http://example.org/ds")
        record[DCT + "title"] = values
        with pytest.raises(MalformedValueError):
            Resource.from_jsonld(record, Category.DATASET)

    def test_set_values_empty_removes_property(self) -> None:
        resource = Resource.from_jsonld(make_record("x", dct__title=[lit("a")]), Category.DATASET)
        resource.set_values(DCT + "title", [])
        assert DCT + "title" not in resource.properties

    def test_add_values_skips_present_values(self) -> None:
        resource = Resource.from_jsonld(make_record("x", dct__subject=[ref("a")]), Category.DATASET)
        added = resource.add_values(DCT + "subject", [Reference(id="a"), Reference(id="b")])
        assert added == 1
        assert resource.values(DCT + "subject") == [Reference(id="a"), Reference(id="b")]

    def test_label_prefers_rdfs_label(self) -> None:
        record = make_record("x", dct__title=[lit("Titre")], rdfs__label=[lit("Libellé")])
        assert Resource.from_jsonld(record, Category.GENERIC).label() == "Libellé"

    def test_label_falls_back_to_types(self) -> None:
        resource = Resource.from_jsonld(make_record("x", ["http://a", "http://b"]), Category.GENERIC)
        assert resource.label() == "http://a, http://b"

    def test_as_jsonld_round_trip(self) -> None:
        record = make_record("http://example.org/ds", dct__title=[lit("Titre", "fr")], dct__subject=[ref("_:b1")])
        assert Resource.from_jsonld(record, Category.DATASET).as_jsonld() == record

    def test_nested_blank_node_omits_id(self) -> None:
        resource = Resource(id="_:b1", types=[DCT + "Location"], category=Category.LOCATION)
        assert "@id" not in resource.as_jsonld(level=1)
        assert resource.as_jsonld()["@id"] == "_:b1"

    def test_copy_shallow_has_own_lists(self) -> None:
        resource = Resource.from_jsonld(make_record("x", rdfs__label=[lit("a")]), Category.GENERIC)
        copy = resource.copy_shallow()
        copy.properties[RDFS_LABEL].append(Literal(value="b"))
        assert resource.values(RDFS_LABEL) == [Literal(value="a")]
