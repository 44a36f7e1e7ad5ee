"""In-memory graph store.

All resources of a run live in per-category dictionaries owned by one
`InMemoryGraphStore` instance, so several independent graphs can coexist
(one per test, one per compared export, ...). Nothing is persisted.

Ingestion merges a record into any resource already stored under the same
id in the same category, then runs the rectification pipeline on the
result, so a consumer never sees an unrectified resource.
"""

from typing import Any, Iterator, Mapping

from dcatgraph.config import GraphSettings
from dcatgraph.errors import DereferenceError, MalformedValueError
from dcatgraph.logging import setup_logging
from dcatgraph.rectification import Rectifier
from dcatgraph.resource import Resource
from dcatgraph.stats import Stats
from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.vocab import CATEGORY_SPECS, Category
from dcatgraph.wellknown import SYNTHESIZERS

logger = setup_logging()

RESOURCES_READ = "resources read"


def resources_for(category: Category) -> str:
    return f"resources for {category.value}"


class InMemoryGraphStore(GraphStoreInterface):
    """Category-partitioned resource store backed by dictionaries.

    Example:
        ```python
        store = InMemoryGraphStore()
        store.add_resource(record, Category.DATASET)
        dataset = store.get(Category.DATASET, record["@id"])
        ```
    """

    def __init__(self, name: str = "graph", default_language: str = "fr") -> None:
        self._name = name
        self._buckets: dict[Category, dict[str, Resource]] = {}
        self._synthesized: dict[tuple[Category, str], Resource] = {}
        self._stats = Stats()
        self._rectification_stats = Stats()
        self._rectifier = Rectifier(self._rectification_stats, default_language=default_language)
        self._statements_canonicalized = False

    @classmethod
    def from_settings(cls, settings: GraphSettings, name: str = "graph") -> "InMemoryGraphStore":
        return cls(name=name, default_language=settings.default_language)

    @property
    def name(self) -> str:
        return self._name

    @property
    def stats(self) -> Stats:
        return self._stats

    @property
    def rectification_stats(self) -> Stats:
        return self._rectification_stats

    @property
    def rectifier(self) -> Rectifier:
        return self._rectifier

    def add_resource(self, record: Mapping[str, Any], category: Category) -> Resource:
        """Ingest one expanded JSON-LD resource record.

        A record whose id is new creates a resource. A repeated id merges:
        for categories with union properties (catalog, dataset, data service,
        distribution) their values are appended when not already present;
        everything else in the repeated record is ignored.

        Raises:
            MalformedValueError: if the record has no @id or a value record
                has an unknown shape; no resource is stored or changed.
        """
        resource_id = record.get("@id")
        if not isinstance(resource_id, str):
            raise MalformedValueError(sorted(record), "resource record without a string @id")
        self._stats.increment(RESOURCES_READ)
        bucket = self._buckets.setdefault(category, {})
        existing = bucket.get(resource_id)
        if existing is None:
            resource = self._rectifier(Resource.from_jsonld(record, category))
            bucket[resource_id] = resource
            self._stats.increment(resources_for(category))
            return resource
        union_properties = CATEGORY_SPECS[category].union_properties
        repeated = Resource.from_jsonld(record, category)
        additions = {
            property_uri: repeated.values(property_uri)
            for property_uri in union_properties
            if repeated.values(property_uri)
        }
        for property_uri, values in additions.items():
            existing.add_values(property_uri, values)
        if additions:
            self._rectifier(existing)
        return existing

    def insert(self, resource: Resource) -> Resource:
        """Store an already built resource, e.g. a synthesized statement.

        The resource is rectified like an ingested one. An existing resource
        with the same id in the same category is kept.
        """
        bucket = self._buckets.setdefault(resource.category, {})
        if resource.id in bucket:
            return bucket[resource.id]
        bucket[resource.id] = self._rectifier(resource)
        self._stats.increment(resources_for(resource.category))
        return bucket[resource.id]

    def get(self, category: Category, resource_id: str) -> Resource:
        resource = self.try_get(category, resource_id)
        if resource is None:
            raise DereferenceError(category.value, resource_id)
        return resource

    def try_get(self, category: Category, resource_id: str) -> Resource | None:
        resource = self._buckets.get(category, {}).get(resource_id)
        if resource is not None:
            return resource
        key = (category, resource_id)
        if key in self._synthesized:
            return self._synthesized[key]
        synthesize = SYNTHESIZERS.get(category)
        if synthesize is None:
            return None
        resource = synthesize(resource_id)
        if resource is not None:
            logger.debug("synthesized %s %s", category.value, resource_id)
            self._synthesized[key] = resource
        return resource

    def resources_of(self, category: Category) -> Iterator[Resource]:
        return iter(list(self._buckets.get(category, {}).values()))

    def categories(self) -> list[Category]:
        return [category for category, bucket in self._buckets.items() if bucket]

    def count(self, category: Category | None = None) -> int:
        if category is not None:
            return len(self._buckets.get(category, {}))
        return sum(len(bucket) for bucket in self._buckets.values())

    @property
    def statements_canonicalized(self) -> bool:
        return self._statements_canonicalized

    def mark_statements_canonicalized(self) -> None:
        self._statements_canonicalized = True

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        category, resource_id = key
        return resource_id in self._buckets.get(category, {})

    def __repr__(self) -> str:
        return f"InMemoryGraphStore(name={self._name!r}, resources={self.count()})"
