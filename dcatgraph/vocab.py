"""Vocabulary tables for the DCAT catalog graph.

This module is the single, data-driven description of how RDF types and
properties are handled:

- **Categories**: coarse handler groups. Several RDF types collapse into the
  generic category when they need no specialized behavior.

- **Type table**: maps a resource's set of type URIs to its category. Keys
  are frozensets, so multi-typed resources (Dataset + DatasetSeries) match
  whatever order the export lists the types in.

- **Short-name tables**: per category (per type for the generic category),
  the property URIs shown by the simplifier and their display names.

- **Range table**: per property short name, the category in which a
  reference held by that property is dereferenced. The store is partitioned
  by category, so a property missing from this table cannot be followed.
"""

from enum import Enum
from typing import Mapping, Sequence

from pydantic import BaseModel, Field

from dcatgraph.errors import UnhandledTypeError

DCT = "http://purl.org/dc/terms/"
DCAT = "http://www.w3.org/ns/dcat#"
FOAF = "http://xmlns.com/foaf/0.1/"
VCARD = "http://www.w3.org/2006/vcard/ns#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"
XSD = "http://www.w3.org/2001/XMLSchema#"
SKOS = "http://www.w3.org/2004/02/skos/core#"
ADMS = "http://www.w3.org/ns/adms#"
HYDRA = "http://www.w3.org/ns/hydra/core#"
LOCN = "http://www.w3.org/ns/locn#"
GSP = "http://www.opengis.net/ont/geosparql#"

RDFS_LABEL = RDFS + "label"
XSD_DATE = XSD + "date"
XSD_DATETIME = XSD + "dateTime"
WKT_LITERAL = GSP + "wktLiteral"

TEMPORAL_DATATYPES = frozenset({XSD_DATE, XSD_DATETIME})

BLANK_NODE_PREFIX = "_:"


def is_blank_node(resource_id: str) -> bool:
    return resource_id.startswith(BLANK_NODE_PREFIX)


class Category(str, Enum):
    """Handler group a resource belongs to."""

    CATALOG = "catalog"
    DATASET = "dataset"
    DATA_SERVICE = "data_service"
    DISTRIBUTION = "distribution"
    CATALOG_RECORD = "catalog_record"
    LOCATION = "location"
    PAGED_COLLECTION = "paged_collection"
    GENERIC = "generic"


TYPE_TO_CATEGORY: dict[frozenset[str], Category] = {
    frozenset({DCAT + "Catalog"}): Category.CATALOG,
    frozenset({DCAT + "Dataset"}): Category.DATASET,
    frozenset({DCAT + "Dataset", DCAT + "DatasetSeries"}): Category.DATASET,
    frozenset({DCAT + "DataService"}): Category.DATA_SERVICE,
    frozenset({DCAT + "Distribution"}): Category.DISTRIBUTION,
    frozenset({DCAT + "CatalogRecord"}): Category.CATALOG_RECORD,
    frozenset({DCT + "Location"}): Category.LOCATION,
    frozenset({HYDRA + "PagedCollection"}): Category.PAGED_COLLECTION,
    frozenset({SKOS + "Concept"}): Category.GENERIC,
    frozenset({DCT + "Standard"}): Category.GENERIC,
    frozenset({DCT + "LicenseDocument"}): Category.GENERIC,
    frozenset({DCT + "RightsStatement"}): Category.GENERIC,
    frozenset({DCT + "ProvenanceStatement"}): Category.GENERIC,
    frozenset({DCT + "RightsStatement", DCT + "ProvenanceStatement"}): Category.GENERIC,
    frozenset({DCT + "MediaTypeOrExtent"}): Category.GENERIC,
    frozenset({DCT + "MediaType"}): Category.GENERIC,
    frozenset({DCT + "PeriodOfTime"}): Category.GENERIC,
    frozenset({DCT + "Frequency"}): Category.GENERIC,
    frozenset({DCT + "LinguisticSystem"}): Category.GENERIC,
    frozenset({FOAF + "Organization"}): Category.GENERIC,
    frozenset({VCARD + "Kind"}): Category.GENERIC,
}


def category_for_types(types: Sequence[str]) -> Category:
    """Return the category of a resource typed `types`.

    Raises:
        UnhandledTypeError: if the type combination is not in the table.
    """
    category = TYPE_TO_CATEGORY.get(frozenset(types))
    if category is None:
        raise UnhandledTypeError(list(types))
    return category


_LABEL_ONLY = {RDFS_LABEL: "label"}

DATASET_SHORT_NAMES: dict[str, str] = {
    DCT + "title": "title",
    DCT + "description": "description",
    DCT + "issued": "issued",
    DCT + "created": "created",
    DCT + "modified": "modified",
    DCT + "publisher": "publisher",
    DCAT + "publisher": "publisher",
    DCT + "creator": "creator",
    DCAT + "contactPoint": "contactPoint",
    DCT + "identifier": "identifier",
    DCAT + "theme": "theme",
    DCAT + "keyword": "keyword",
    DCT + "language": "language",
    DCT + "spatial": "spatial",
    DCT + "temporal": "temporal",
    DCT + "accessRights": "accessRights",
    DCT + "rightsHolder": "rightsHolder",
    DCT + "rights_holder": "rightsHolder",
    FOAF + "homepage": "homepage",
    DCAT + "landingPage": "landingPage",
    FOAF + "page": "page",
    DCT + "MediaType": "MediaType",
    DCT + "conformsTo": "conformsTo",
    DCT + "provenance": "provenance",
    ADMS + "versionNotes": "versionNotes",
    ADMS + "status": "status",
    DCT + "accrualPeriodicity": "accrualPeriodicity",
    FOAF + "isPrimaryTopicOf": "isPrimaryTopicOf",
    DCAT + "dataset": "dataset",
    DCAT + "inSeries": "inSeries",
    DCAT + "seriesMember": "seriesMember",
    DCAT + "distribution": "distribution",
}

DISTRIBUTION_SHORT_NAMES: dict[str, str] = {
    DCT + "title": "title",
    DCT + "description": "description",
    DCT + "format": "format",
    DCAT + "mediaType": "mediaType",
    DCT + "rights": "rights",
    DCT + "license": "license",
    DCT + "issued": "issued",
    DCT + "created": "created",
    DCT + "modified": "modified",
    DCAT + "accessService": "accessService",
    DCAT + "accessURL": "accessURL",
    DCAT + "downloadURL": "downloadURL",
}

CATALOG_RECORD_SHORT_NAMES: dict[str, str] = {
    DCT + "identifier": "identifier",
    DCT + "language": "language",
    DCT + "modified": "modified",
    DCAT + "contactPoint": "contactPoint",
    DCAT + "inCatalog": "inCatalog",
}

PAGED_COLLECTION_SHORT_NAMES: dict[str, str] = {
    HYDRA + "firstPage": "firstPage",
    HYDRA + "lastPage": "lastPage",
    HYDRA + "nextPage": "nextPage",
    HYDRA + "previousPage": "previousPage",
    HYDRA + "itemsPerPage": "itemsPerPage",
    HYDRA + "totalItems": "totalItems",
}

GENERIC_SHORT_NAMES_BY_TYPE: dict[str, dict[str, str]] = {
    FOAF + "Organization": {
        FOAF + "name": "name",
        FOAF + "mbox": "mbox",
        FOAF + "phone": "phone",
        FOAF + "homepage": "homepage",
        FOAF + "workplaceHomepage": "workplaceHomepage",
    },
    DCT + "Standard": _LABEL_ONLY,
    DCT + "LicenseDocument": _LABEL_ONLY,
    DCT + "RightsStatement": _LABEL_ONLY,
    DCT + "ProvenanceStatement": _LABEL_ONLY,
    DCT + "MediaTypeOrExtent": _LABEL_ONLY,
    DCT + "MediaType": _LABEL_ONLY,
    DCT + "Frequency": _LABEL_ONLY,
    DCT + "LinguisticSystem": _LABEL_ONLY,
    DCT + "PeriodOfTime": {
        DCAT + "startDate": "startDate",
        DCAT + "endDate": "endDate",
    },
    VCARD + "Kind": {
        VCARD + "fn": "fn",
        VCARD + "hasEmail": "hasEmail",
        VCARD + "hasURL": "hasURL",
    },
    SKOS + "Concept": _LABEL_ONLY,
}

MEMBERSHIP_PROPERTIES: tuple[str, ...] = (
    DCAT + "catalog",
    DCAT + "record",
    DCAT + "dataset",
    DCAT + "service",
)

ACCESS_RIGHTS = DCT + "accessRights"
PROVENANCE = DCT + "provenance"


class CategorySpec(BaseModel, frozen=True):
    """Static handling rules of one category."""

    short_names: dict[str, str] = Field(
        default_factory=dict,
        description="Property URI to display name, in display order.",
    )
    union_properties: tuple[str, ...] = Field(
        default=(),
        description="Properties whose values are unioned when a resource is ingested again.",
    )
    statement_properties: dict[str, str] = Field(
        default_factory=dict,
        description="Property URI to the statement type URI its values must reference.",
    )


CATEGORY_SPECS: dict[Category, CategorySpec] = {
    Category.CATALOG: CategorySpec(
        short_names=DATASET_SHORT_NAMES,
        union_properties=MEMBERSHIP_PROPERTIES,
    ),
    Category.DATASET: CategorySpec(
        short_names=DATASET_SHORT_NAMES,
        union_properties=MEMBERSHIP_PROPERTIES,
        statement_properties={
            ACCESS_RIGHTS: DCT + "RightsStatement",
            PROVENANCE: DCT + "ProvenanceStatement",
        },
    ),
    Category.DATA_SERVICE: CategorySpec(
        short_names={DCT + "conformsTo": "conformsTo"},
        union_properties=MEMBERSHIP_PROPERTIES,
    ),
    Category.DISTRIBUTION: CategorySpec(
        short_names=DISTRIBUTION_SHORT_NAMES,
        union_properties=MEMBERSHIP_PROPERTIES,
    ),
    Category.CATALOG_RECORD: CategorySpec(short_names=CATALOG_RECORD_SHORT_NAMES),
    Category.LOCATION: CategorySpec(short_names=_LABEL_ONLY),
    Category.PAGED_COLLECTION: CategorySpec(short_names=PAGED_COLLECTION_SHORT_NAMES),
    Category.GENERIC: CategorySpec(),
}


def short_names_for(category: Category, types: Sequence[str]) -> Mapping[str, str]:
    """Return the short-name table of a resource.

    Generic resources are looked up by their first type; an unknown type
    gives an empty table.
    """
    if category is Category.GENERIC:
        if not types:
            return {}
        return GENERIC_SHORT_NAMES_BY_TYPE.get(types[0], {})
    return CATEGORY_SPECS[category].short_names


PROPERTY_RANGE: dict[str, Category] = {
    "publisher": Category.GENERIC,
    "creator": Category.GENERIC,
    "rightsHolder": Category.GENERIC,
    "spatial": Category.LOCATION,
    "temporal": Category.GENERIC,
    "isPrimaryTopicOf": Category.CATALOG_RECORD,
    "inCatalog": Category.CATALOG,
    "contactPoint": Category.GENERIC,
    "conformsTo": Category.GENERIC,
    "status": Category.GENERIC,
    "theme": Category.GENERIC,
    "accessRights": Category.GENERIC,
    "license": Category.GENERIC,
    "provenance": Category.GENERIC,
    "format": Category.GENERIC,
    "mediaType": Category.GENERIC,
    "language": Category.GENERIC,
    "accrualPeriodicity": Category.GENERIC,
    "accessService": Category.DATA_SERVICE,
    "distribution": Category.DISTRIBUTION,
}


def range_of(short_name: str) -> Category | None:
    return PROPERTY_RANGE.get(short_name)
