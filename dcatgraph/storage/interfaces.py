"""Storage interface for the resource graph."""

from abc import ABC, abstractmethod
from typing import Any, Iterator, Mapping

from dcatgraph.resource import Resource
from dcatgraph.stats import Stats
from dcatgraph.vocab import Category


class GraphStoreInterface(ABC):
    """Abstract interface of a category-partitioned resource store.

    Resources are looked up by (category, id): the same identifier may exist
    in several categories, and a reference is only resolvable when the
    category of its target is known.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the graph name, used in log and error messages."""

    @property
    @abstractmethod
    def stats(self) -> Stats:
        """Return the general ingestion counters."""

    @property
    @abstractmethod
    def rectification_stats(self) -> Stats:
        """Return the counters of defects found and healed."""

    @abstractmethod
    def add_resource(self, record: Mapping[str, Any], category: Category) -> Resource:
        """Ingest an expanded JSON-LD record into `category`.

        Merges with an already stored resource of the same id, then
        rectifies it. Returns the stored resource.
        """

    @abstractmethod
    def get(self, category: Category, resource_id: str) -> Resource:
        """Return the resource `resource_id` of `category`.

        Raises:
            DereferenceError: if the resource is neither stored nor synthesizable.
        """

    @abstractmethod
    def try_get(self, category: Category, resource_id: str) -> Resource | None:
        """Return the resource, or None instead of raising."""

    @abstractmethod
    def resources_of(self, category: Category) -> Iterator[Resource]:
        """Iterate over the stored resources of a category."""

    @abstractmethod
    def categories(self) -> list[Category]:
        """Return the categories holding at least one resource, in first-use order."""

    @abstractmethod
    def count(self, category: Category | None = None) -> int:
        """Return the number of stored resources, overall or for one category."""

    @property
    @abstractmethod
    def statements_canonicalized(self) -> bool:
        """Return True once the statement canonicalization pass has run."""

    @abstractmethod
    def mark_statements_canonicalized(self) -> None:
        """Record that the statement canonicalization pass has run."""

    def as_jsonld(self, category: Category | None = None) -> list[dict[str, Any]]:
        """Export stored resources as expanded JSON-LD records."""
        categories = [category] if category is not None else self.categories()
        return [resource.as_jsonld() for cat in categories for resource in self.resources_of(cat)]
