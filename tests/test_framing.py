"""Tests for framing.

This module verifies:
- Allow-listed references are replaced by framed copies of their targets
- The store is never modified
- Framing is idempotent
- Missing range categories and cycles are reported
"""

import pytest

from dcatgraph.errors import DereferenceError, FramingCycleError, FramingError
from dcatgraph.framing import frame, frame_all
from dcatgraph.resource import Resource
from dcatgraph.storage.memory import InMemoryGraphStore
from dcatgraph.value import Reference
from dcatgraph.vocab import DCAT, DCT, FOAF, Category
from tests.conftest import CATALOG, DISTRIBUTION, lit, make_record, ref

DS1 = "https://catalogue.example.org/ds/1"
ALLOWLIST = {
    Category.DATASET: [DCT + "publisher", DCAT + "distribution"],
}


class TestFrame:
    """Tests for frame()."""

    def test_references_are_inlined(self, catalog_store: InMemoryGraphStore) -> None:
        dataset = catalog_store.get(Category.DATASET, DS1)
        framed = frame(catalog_store, dataset, ALLOWLIST)
        publisher = framed.values(DCT + "publisher")[0]
        distribution = framed.values(DCAT + "distribution")[0]
        assert isinstance(publisher, Resource)
        assert publisher.id == "https://catalogue.example.org/org/dreal"
        assert isinstance(distribution, Resource)
        assert distribution.category is Category.DISTRIBUTION

    def test_store_is_not_modified(self, catalog_store: InMemoryGraphStore) -> None:
        dataset = catalog_store.get(Category.DATASET, DS1)
        before = dataset.model_dump()
        frame(catalog_store, dataset, ALLOWLIST)
        assert catalog_store.get(Category.DATASET, DS1).model_dump() == before

    def test_other_properties_are_untouched(self, catalog_store: InMemoryGraphStore) -> None:
        dataset = catalog_store.get(Category.DATASET, DS1)
        framed = frame(catalog_store, dataset, {Category.DATASET: [DCT + "publisher"]})
        assert framed.values(DCAT + "distribution") == [Reference(id="_:dist1")]

    def test_idempotent(self, catalog_store: InMemoryGraphStore) -> None:
        dataset = catalog_store.get(Category.DATASET, DS1)
        once = frame(catalog_store, dataset, ALLOWLIST)
        twice = frame(catalog_store, once, ALLOWLIST)
        assert twice.as_jsonld() == once.as_jsonld()

    def test_framed_blank_node_has_no_id_in_jsonld(self, catalog_store: InMemoryGraphStore) -> None:
        framed = frame(catalog_store, catalog_store.get(Category.DATASET, DS1), ALLOWLIST)
        distribution = framed.as_jsonld()[DCAT + "distribution"][0]
        assert "@id" not in distribution
        assert distribution["@type"] == [DISTRIBUTION]

    def test_property_without_range_is_an_error(self, store: InMemoryGraphStore) -> None:
        store.add_resource(make_record("https://example.org/ds", foaf__homepage=[ref("https://example.org")]), Category.DATASET)
        dataset = store.get(Category.DATASET, "https://example.org/ds")
        with pytest.raises(FramingError):
            frame(store, dataset, {Category.DATASET: [FOAF + "homepage"]})

    def test_literal_properties_need_no_range(self, catalog_store: InMemoryGraphStore) -> None:
        dataset = catalog_store.get(Category.DATASET, DS1)
        framed = frame(catalog_store, dataset, {Category.DATASET: [DCAT + "keyword", DCT + "title"]})
        assert framed.as_jsonld() == dataset.as_jsonld()

    def test_missing_target(self, catalog_store: InMemoryGraphStore) -> None:
        dataset = catalog_store.get(Category.DATASET, "https://catalogue.example.org/ds/2")
        with pytest.raises(DereferenceError):
            frame(catalog_store, dataset, ALLOWLIST)
        lenient = frame(catalog_store, dataset, ALLOWLIST, strict=False)
        assert lenient.values(DCT + "publisher") == [Reference(id="https://catalogue.example.org/org/unknown")]

    def test_cycle_is_detected(self, store: InMemoryGraphStore) -> None:
        catalog_id = "https://example.org/catalog"
        store.add_resource(make_record(catalog_id, CATALOG, foaf__isPrimaryTopicOf=[ref("_:r")]), Category.CATALOG)
        store.add_resource(make_record("_:r", DCAT + "CatalogRecord", dcat__inCatalog=[ref(catalog_id)]), Category.CATALOG_RECORD)
        allowlist = {
            Category.CATALOG: [FOAF + "isPrimaryTopicOf"],
            Category.CATALOG_RECORD: [DCAT + "inCatalog"],
        }
        with pytest.raises(FramingCycleError) as excinfo:
            frame(store, store.get(Category.CATALOG, catalog_id), allowlist)
        assert excinfo.value.path == [catalog_id, "_:r", catalog_id]

    def test_shared_target_is_not_a_cycle(self, store: InMemoryGraphStore) -> None:
        store.add_resource(
            make_record("https://example.org/ds", dcat__distribution=[ref("_:d1"), ref("_:d2")]),
            Category.DATASET,
        )
        for distribution_id in ("_:d1", "_:d2"):
            store.add_resource(
                make_record(distribution_id, DISTRIBUTION, dcat__accessService=[ref("_:s")]),
                Category.DISTRIBUTION,
            )
        store.add_resource(make_record("_:s", DCAT + "DataService", dct__title=[lit("WMS")]), Category.DATA_SERVICE)
        allowlist = {
            Category.DATASET: [DCAT + "distribution"],
            Category.DISTRIBUTION: [DCAT + "accessService"],
        }
        framed = frame(store, store.get(Category.DATASET, "https://example.org/ds"), allowlist)
        services = [distribution.values(DCAT + "accessService")[0] for distribution in framed.values(DCAT + "distribution")]
        assert [service.id for service in services] == ["_:s", "_:s"]


class TestFrameAll:
    """Tests for frame_all()."""

    def test_frames_every_resource_of_the_categories(self, catalog_store: InMemoryGraphStore) -> None:
        framed = frame_all(catalog_store, ALLOWLIST, strict=False)
        assert set(framed) == {DS1, "https://catalogue.example.org/ds/2"}
        assert isinstance(framed[DS1].values(DCT + "publisher")[0], Resource)
