"""Test fixtures and record factories.

This module provides:
- Vocabulary shortcuts used to write expanded JSON-LD records tersely
- Factory functions building resource and value records in the shape the
  catalog export uses
- Pytest fixtures for an empty store and for a store loaded with a small
  catalog (one catalog, two datasets, a publisher, a distribution)
"""

from typing import Any

import pytest

from dcatgraph.storage.memory import InMemoryGraphStore
from dcatgraph.vocab import DCAT, DCT, FOAF, HYDRA, RDFS_LABEL, Category

DATASET = DCAT + "Dataset"
CATALOG = DCAT + "Catalog"
DISTRIBUTION = DCAT + "Distribution"
ORGANIZATION = FOAF + "Organization"
RIGHTS_STATEMENT = DCT + "RightsStatement"
PAGED_COLLECTION = HYDRA + "PagedCollection"


def ref(resource_id: str) -> dict[str, str]:
    return {"@id": resource_id}


def lit(value: Any, language: str | None = None, datatype: str | None = None) -> dict[str, Any]:
    record: dict[str, Any] = {"@value": value}
    if language is not None:
        record["@language"] = language
    if datatype is not None:
        record["@type"] = datatype
    return record


def make_record(resource_id: str, types: str | list[str] = DATASET, **properties: list[dict[str, Any]]) -> dict[str, Any]:
    """Create an expanded JSON-LD resource record.

    Property keyword arguments use the `prefix__local` form (`dct__title`,
    `dcat__theme`, `foaf__mbox`) and are expanded to full URIs.
    """
    prefixes = {"dct": DCT, "dcat": DCAT, "foaf": FOAF, "hydra": HYDRA}
    record: dict[str, Any] = {
        "@id": resource_id,
        "@type": [types] if isinstance(types, str) else list(types),
    }
    for key, values in properties.items():
        if key == "rdfs__label":
            record[RDFS_LABEL] = values
            continue
        prefix, local = key.split("__", 1)
        record[prefixes[prefix] + local] = values
    return record


def make_paged_collection(page: int, last: int) -> dict[str, Any]:
    base = "https://catalogue.example.org/api/jsonld"
    return make_record(
        f"{base}?page={page}",
        PAGED_COLLECTION,
        hydra__firstPage=[ref(f"{base}?page=1")],
        hydra__lastPage=[ref(f"{base}?page={last}")],
        hydra__itemsPerPage=[lit(100)],
    )


@pytest.fixture
def store() -> InMemoryGraphStore:
    """Provide a fresh, empty in-memory graph store."""
    return InMemoryGraphStore(name="test")


@pytest.fixture
def catalog_store(store: InMemoryGraphStore) -> InMemoryGraphStore:
    """Provide a store holding a small, already rectified catalog."""
    store.add_resource(
        make_record(
            "https://catalogue.example.org/",
            CATALOG,
            dct__title=[lit("Catalogue", "fr")],
            dcat__dataset=[ref("https://catalogue.example.org/ds/1"), ref("https://catalogue.example.org/ds/2")],
        ),
        Category.CATALOG,
    )
    store.add_resource(
        make_record(
            "https://catalogue.example.org/org/dreal",
            ORGANIZATION,
            foaf__name=[lit("DREAL", "fr")],
            foaf__mbox=[ref("mailto:contact@dreal.example.org")],
        ),
        Category.GENERIC,
    )
    store.add_resource(
        make_record(
            "https://catalogue.example.org/ds/1",
            dct__title=[lit("Zones inondables", "fr")],
            dct__publisher=[ref("https://catalogue.example.org/org/dreal")],
            dcat__distribution=[ref("_:dist1")],
            dcat__keyword=[lit("eau", "fr"), lit("risque", "fr")],
        ),
        Category.DATASET,
    )
    store.add_resource(
        make_record(
            "https://catalogue.example.org/ds/2",
            dct__title=[lit("Routes", "fr")],
            dct__publisher=[ref("https://catalogue.example.org/org/unknown")],
        ),
        Category.DATASET,
    )
    store.add_resource(
        make_record(
            "_:dist1",
            DISTRIBUTION,
            dct__title=[lit("Shapefile", "fr")],
            dcat__downloadURL=[ref("https://catalogue.example.org/files/zi.zip")],
        ),
        Category.DISTRIBUTION,
    )
    return store
