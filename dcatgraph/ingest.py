"""Page-by-page ingestion of a paginated JSON-LD catalog export.

The export is a sequence of pages, each a JSON list of expanded JSON-LD
resource records. One of the records of every page is a
`hydra:PagedCollection` whose `hydra:lastPage` tells how many pages there
are, so the loader can be run without knowing that number in advance.

Pages are read strictly in order into a single store: a catalog is repeated
on every page with only that page's members, and the merge rule completes it
page after page. Once every page is loaded the statement canonicalization
pass runs, exactly once.

Failure policy:

- a page that cannot be retrieved is recorded and skipped
- a record with a malformed value is recorded and skipped, the page goes on
- a record whose types map to no category ends the page, the run goes on

Example usage:
    ```python
    store = InMemoryGraphStore()
    loader = CatalogLoader(store, JsonDirectoryPageSource(Path("json")))
    result = loader.load()
    print(result.page_errors)
    ```
"""

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from dcatgraph.config import GraphSettings
from dcatgraph.errors import MalformedValueError, PageRetrievalError, UnhandledTypeError
from dcatgraph.logging import setup_logging
from dcatgraph.resource import Resource
from dcatgraph.statements import CanonicalizationReport, canonicalize_statements
from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.value import Reference
from dcatgraph.vocab import HYDRA, Category, category_for_types

logger = setup_logging()

LAST_PAGE_PATTERN = re.compile(r"[?&]page=(\d+)$")


def announced_last_page(collection: Resource) -> int | None:
    """Return the page number of a paged collection's `hydra:lastPage`, if any."""
    for value in collection.values(HYDRA + "lastPage"):
        target = value.id if isinstance(value, Reference) else getattr(value, "text", "")
        match = LAST_PAGE_PATTERN.search(target)
        if match:
            return int(match.group(1))
    return None


class PageSourceInterface(ABC):
    """Abstract source of export pages."""

    @abstractmethod
    def fetch(self, page: int) -> list[dict[str, Any]]:
        """Return the resource records of `page`.

        Raises:
            PageRetrievalError: if the page cannot be retrieved or decoded.
        """


class JsonDirectoryPageSource(PageSourceInterface):
    """Reads pages cached as JSON files in a directory (`export{page}.json`)."""

    def __init__(self, directory: Path | str, file_pattern: str = "export{page}.json") -> None:
        self.directory = Path(directory)
        self.file_pattern = file_pattern

    @classmethod
    def from_settings(cls, settings: GraphSettings) -> "JsonDirectoryPageSource":
        return cls(settings.page_directory, settings.page_file_pattern)

    def path_of(self, page: int) -> Path:
        return self.directory / self.file_pattern.format(page=page)

    def fetch(self, page: int) -> list[dict[str, Any]]:
        path = self.path_of(page)
        try:
            with open(path, encoding="utf-8") as f:
                content = json.load(f)
        except FileNotFoundError as e:
            raise PageRetrievalError(page, f"missing file {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise PageRetrievalError(page, f"cannot decode {path}: {e}") from e
        if isinstance(content, dict) and "@graph" in content:
            content = content["@graph"]
        if not isinstance(content, list):
            raise PageRetrievalError(page, f"{path} does not hold a list of resources")
        return content


class PageResult(BaseModel):
    """Result of loading one page."""

    model_config = {"frozen": True}

    page: int
    resources_read: int = 0
    resources_rejected: int = 0
    aborted: bool = False
    errors: tuple[str, ...] = ()


class IngestionResult(BaseModel):
    """Result of a whole load.

    Attributes:
        first_page: First page requested.
        last_page: Last page read, as requested or learned from the export.
        resources_read: Records accepted into the store, over all pages.
        page_errors: Page number to the error that made it fail or end early.
        page_results: Per-page breakdown.
        canonicalization: Report of the statement pass, None if it did not run.
    """

    model_config = {"frozen": True}

    first_page: int
    last_page: int
    resources_read: int = 0
    page_errors: dict[int, str] = Field(default_factory=dict)
    page_results: tuple[PageResult, ...] = ()
    canonicalization: CanonicalizationReport | None = None


class CatalogLoader:
    """Loads export pages into a graph store."""

    def __init__(
        self,
        store: GraphStoreInterface,
        source: PageSourceInterface,
        first_page: int = 1,
        last_page: int = 0,
        max_pages: int = 10000,
    ) -> None:
        self.store = store
        self.source = source
        self.first_page = first_page
        self.last_page = last_page
        self.max_pages = max_pages

    @classmethod
    def from_settings(cls, store: GraphStoreInterface, settings: GraphSettings) -> "CatalogLoader":
        setup_logging("dcatgraph", settings.log_level)
        return cls(
            store,
            JsonDirectoryPageSource.from_settings(settings),
            first_page=settings.first_page,
            last_page=settings.last_page,
            max_pages=settings.max_pages,
        )

    def load_page(self, page: int, records: list[dict[str, Any]]) -> tuple[PageResult, int | None]:
        """Add the records of one page to the store.

        Returns the page result and the last page number announced by the
        page's paged collection, if any.

        A record whose types map to no category ends the page: the records
        before it stay in the store and the result is marked aborted.
        """
        read = rejected = 0
        errors: list[str] = []
        announced: int | None = None
        for record in records:
            types = record.get("@type", []) if isinstance(record, dict) else []
            try:
                category = category_for_types(types)
            except UnhandledTypeError as e:
                logger.error("page %d ended early: %s", page, e)
                errors.append(str(e))
                result = PageResult(
                    page=page, resources_read=read, resources_rejected=rejected, aborted=True, errors=tuple(errors)
                )
                return result, announced
            try:
                resource = self.store.add_resource(record, category)
            except MalformedValueError as e:
                rejected += 1
                errors.append(f"{record.get('@id', '?')}: {e}")
                logger.warning("page %d: resource %s rejected: %s", page, record.get("@id", "?"), e)
                continue
            read += 1
            if category is Category.PAGED_COLLECTION and announced is None:
                announced = announced_last_page(resource)
        return PageResult(page=page, resources_read=read, resources_rejected=rejected, errors=tuple(errors)), announced

    def load(
        self, first_page: int | None = None, last_page: int | None = None, canonicalize: bool = True
    ) -> IngestionResult:
        """Load pages `first_page`..`last_page` and canonicalize statements.

        With `last_page` = 0 the last page is learned from the paged collection of
        the pages read; if no page announces it, only `first_page` is read.
        Pages default to the ones the loader was built with.
        """
        first_page = self.first_page if first_page is None else first_page
        last_page = self.last_page if last_page is None else last_page
        page_errors: dict[int, str] = {}
        page_results: list[PageResult] = []
        page = first_page
        limit = first_page + self.max_pages - 1
        while page <= limit and (last_page == 0 or page <= last_page):
            try:
                records = self.source.fetch(page)
            except PageRetrievalError as e:
                logger.error("page %d not retrieved: %s", page, e.reason)
                page_errors[page] = e.reason
                if last_page == 0:
                    break
                page += 1
                continue
            result, announced = self.load_page(page, records)
            if result.aborted:
                page_errors[page] = result.errors[-1]
            page_results.append(result)
            logger.info("page %d: %d resources read", page, result.resources_read)
            if last_page == 0:
                if announced is None:
                    logger.warning("page %d does not announce the last page, stopping", page)
                    last_page = page
                else:
                    last_page = announced
                    logger.info("last page = %d", last_page)
            page += 1
        canonicalization = canonicalize_statements(self.store) if canonicalize else None
        self.store.stats.increment("pages read", len(page_results))
        logger.counters("rectification statistics", self.store.rectification_stats.contents())
        return IngestionResult(
            first_page=first_page,
            last_page=last_page,
            resources_read=sum(result.resources_read for result in page_results),
            page_errors=page_errors,
            page_results=tuple(page_results),
            canonicalization=canonicalization,
        )
