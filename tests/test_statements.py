"""Tests for the statement canonicalization pass.

This module verifies:
- Inline French literals become references to synthesized statements
- Datasets sharing a statement text end up referencing the same id
- Existing statement resources are kept as canonical, independently of order
- Translations join the statement of the French literal they sit next to
- A rights and a provenance statement with the same text share one resource
- The pass refuses literals without a French text and a second run
"""

import pytest

from dcatgraph.errors import CanonicalizationError
from dcatgraph.statements import MLString, canonicalize_statements, statement_id
from dcatgraph.storage.memory import InMemoryGraphStore
from dcatgraph.value import Literal, Reference
from dcatgraph.vocab import DCT, RDFS_LABEL, Category, category_for_types
from tests.conftest import RIGHTS_STATEMENT, lit, make_record, ref

ACCESS_RIGHTS = DCT + "accessRights"
TEXT = "Texte en français"


def add_dataset(store: InMemoryGraphStore, dataset_id: str, **properties) -> None:
    store.add_resource(make_record(dataset_id, **properties), Category.DATASET)


def add_statement(store: InMemoryGraphStore, statement_id_: str, text: str) -> None:
    store.add_resource(make_record(statement_id_, RIGHTS_STATEMENT, rdfs__label=[lit(text, "fr")]), Category.GENERIC)


class TestMLString:
    """Tests for MLString."""

    def test_requires_french(self) -> None:
        with pytest.raises(CanonicalizationError):
            MLString.create({"en": "English only", "fr": ""})

    def test_md5_is_computed_on_french(self) -> None:
        one = MLString.create({"fr": TEXT, "en": "a"})
        two = MLString.create({"fr": TEXT})
        assert one.md5() == two.md5()
        assert len(one.md5()) == 32


class TestCanonicalization:
    """Tests for canonicalize_statements()."""

    def test_same_literal_in_two_datasets_shares_one_statement(self, store: InMemoryGraphStore) -> None:
        add_dataset(store, "http://example.org/ds1", dct__accessRights=[lit(TEXT, "fr")])
        add_dataset(store, "http://example.org/ds2", dct__accessRights=[lit(TEXT, "fr")])
        report = canonicalize_statements(store)

        expected = Reference(id=statement_id(MLString.create({"fr": TEXT}).md5()))
        assert store.get(Category.DATASET, "http://example.org/ds1").values(ACCESS_RIGHTS) == [expected]
        assert store.get(Category.DATASET, "http://example.org/ds2").values(ACCESS_RIGHTS) == [expected]
        statement = store.get(Category.GENERIC, expected.id)
        assert statement.types == [RIGHTS_STATEMENT]
        assert statement.values(RDFS_LABEL) == [Literal(value=TEXT, language="fr")]
        assert report.statements_created == 1
        assert report.literals_converted == 2

    def test_plain_literal_is_taken_as_french(self, store: InMemoryGraphStore) -> None:
        add_dataset(store, "http://example.org/ds1", dct__provenance=[lit("Produit par la DREAL")])
        canonicalize_statements(store)
        provenance = store.get(Category.DATASET, "http://example.org/ds1").values(DCT + "provenance")
        statement = store.get(Category.GENERIC, provenance[0].id)
        assert statement.types == [DCT + "ProvenanceStatement"]

    def test_existing_statement_is_kept(self, store: InMemoryGraphStore) -> None:
        add_statement(store, "_:b7", TEXT)
        add_dataset(store, "http://example.org/ds1", dct__accessRights=[lit(TEXT, "fr")])
        add_dataset(store, "http://example.org/ds2", dct__accessRights=[ref("_:b7")])
        canonicalize_statements(store)
        for dataset_id in ("http://example.org/ds1", "http://example.org/ds2"):
            assert store.get(Category.DATASET, dataset_id).values(ACCESS_RIGHTS) == [Reference(id="_:b7")]
        assert store.count(Category.GENERIC) == 1

    @pytest.mark.parametrize("reverse", [False, True])
    def test_canonical_id_does_not_depend_on_order(self, reverse: bool) -> None:
        store = InMemoryGraphStore()
        add_statement(store, "_:b2", TEXT)
        add_statement(store, "_:b1", TEXT)
        datasets = [("http://example.org/ds1", "_:b2"), ("http://example.org/ds2", "_:b1")]
        for dataset_id, statement in reversed(datasets) if reverse else datasets:
            add_dataset(store, dataset_id, dct__accessRights=[ref(statement)])
        report = canonicalize_statements(store)
        for dataset_id, _ in datasets:
            assert store.get(Category.DATASET, dataset_id).values(ACCESS_RIGHTS) == [Reference(id="_:b1")]
        assert report.references_retargeted == 1

    def test_duplicates_in_one_list_are_collapsed(self, store: InMemoryGraphStore) -> None:
        add_statement(store, "_:b1", TEXT)
        add_dataset(
            store,
            "http://example.org/ds1",
            dct__accessRights=[ref("_:b1"), lit(TEXT, "fr"), lit("Autre texte", "fr")],
        )
        report = canonicalize_statements(store)
        values = store.get(Category.DATASET, "http://example.org/ds1").values(ACCESS_RIGHTS)
        assert values[0] == Reference(id="_:b1")
        assert len(values) == 2
        assert report.duplicates_removed == 1

    def test_missing_statement_reference_is_kept(self, store: InMemoryGraphStore) -> None:
        add_dataset(store, "http://example.org/ds1", dct__accessRights=[ref("_:missing")])
        report = canonicalize_statements(store)
        assert store.get(Category.DATASET, "http://example.org/ds1").values(ACCESS_RIGHTS) == [
            Reference(id="_:missing")
        ]
        assert report.unresolved_references == 1
        assert store.rectification_stats["statement reference not resolved"] == 1

    def test_translation_joins_french_statement(self, store: InMemoryGraphStore) -> None:
        add_dataset(
            store,
            "http://example.org/ds1",
            dct__accessRights=[lit("{'fr': 'Libre accès', 'en': 'Free access'}")],
        )
        report = canonicalize_statements(store)
        values = store.get(Category.DATASET, "http://example.org/ds1").values(ACCESS_RIGHTS)
        assert values == [Reference(id=statement_id(MLString.create({"fr": "Libre accès"}).md5()))]
        statement = store.get(Category.GENERIC, values[0].id)
        assert statement.values(RDFS_LABEL) == [
            Literal(value="Libre accès", language="fr"),
            Literal(value="Free access", language="en"),
        ]
        assert report.literals_converted == 1

    def test_translation_before_french_literal(self, store: InMemoryGraphStore) -> None:
        add_dataset(
            store,
            "http://example.org/ds1",
            dct__accessRights=[lit("Free access", "en"), lit("Libre accès", "fr"), lit("Restreint", "fr")],
        )
        canonicalize_statements(store)
        values = store.get(Category.DATASET, "http://example.org/ds1").values(ACCESS_RIGHTS)
        assert len(values) == 2
        first = store.get(Category.GENERIC, values[0].id)
        assert Literal(value="Free access", language="en") in first.values(RDFS_LABEL)
        second = store.get(Category.GENERIC, values[1].id)
        assert second.values(RDFS_LABEL) == [Literal(value="Restreint", language="fr")]

    def test_same_text_for_rights_and_provenance(self, store: InMemoryGraphStore) -> None:
        add_dataset(
            store,
            "http://example.org/ds1",
            dct__accessRights=[lit("Même texte", "fr")],
            dct__provenance=[lit("Même texte", "fr")],
        )
        report = canonicalize_statements(store)
        dataset = store.get(Category.DATASET, "http://example.org/ds1")
        assert dataset.values(ACCESS_RIGHTS) == dataset.values(DCT + "provenance")
        statement = store.get(Category.GENERIC, dataset.values(ACCESS_RIGHTS)[0].id)
        assert statement.types == [DCT + "ProvenanceStatement", RIGHTS_STATEMENT]
        assert category_for_types(statement.types) is Category.GENERIC
        assert report.statements_created == 1

    def test_non_french_literal_is_refused(self, store: InMemoryGraphStore) -> None:
        add_dataset(store, "http://example.org/ds1", dct__accessRights=[lit("Open", "en")])
        with pytest.raises(CanonicalizationError):
            canonicalize_statements(store)

    def test_runs_only_once(self, store: InMemoryGraphStore) -> None:
        add_dataset(store, "http://example.org/ds1", dct__accessRights=[lit(TEXT, "fr")])
        canonicalize_statements(store)
        assert store.statements_canonicalized
        with pytest.raises(CanonicalizationError):
            canonicalize_statements(store)
