"""
DCAT Catalog Graph - ingestion, repair and display of a paginated JSON-LD catalog export.

Resources of the export are loaded page by page into an in-memory,
category-partitioned graph store, repaired as they are ingested, then
deduplicated once the whole corpus is known. Framing, simplification and
compaction give derived views of the graph; none of them modifies it.

The compaction module pulls in PyLD and is imported lazily:

    # This does NOT import pyld:
    from dcatgraph import InMemoryGraphStore, Simplifier

    # This DOES import pyld (when the symbol is accessed):
    from dcatgraph import CompactGraph
"""

from typing import TYPE_CHECKING

from dcatgraph.compare import Difference, included_in
from dcatgraph.config import GraphSettings, load_settings
from dcatgraph.errors import (
    CanonicalizationError,
    CompactionError,
    DcatGraphError,
    DereferenceError,
    FramingCycleError,
    FramingError,
    MalformedValueError,
    PageRetrievalError,
    SimplificationError,
    UnhandledTypeError,
)
from dcatgraph.framing import frame, frame_all
from dcatgraph.ingest import CatalogLoader, IngestionResult, JsonDirectoryPageSource, PageResult, PageSourceInterface
from dcatgraph.resource import Resource
from dcatgraph.simplify import Simplifier, simplify
from dcatgraph.statements import CanonicalizationReport, MLString, canonicalize_statements
from dcatgraph.stats import Stats
from dcatgraph.storage import GraphStoreInterface, InMemoryGraphStore
from dcatgraph.value import Literal, PropertyValue, Reference, parse_value
from dcatgraph.vocab import Category, category_for_types

if TYPE_CHECKING:
    from dcatgraph.compaction import CompactGraph

__all__ = [
    "CanonicalizationError",
    "CanonicalizationReport",
    "CatalogLoader",
    "Category",
    "CompactGraph",
    "CompactionError",
    "DcatGraphError",
    "DereferenceError",
    "Difference",
    "FramingCycleError",
    "FramingError",
    "GraphSettings",
    "GraphStoreInterface",
    "InMemoryGraphStore",
    "IngestionResult",
    "JsonDirectoryPageSource",
    "Literal",
    "MLString",
    "MalformedValueError",
    "PageResult",
    "PageRetrievalError",
    "PageSourceInterface",
    "PropertyValue",
    "Reference",
    "Resource",
    "SimplificationError",
    "Simplifier",
    "Stats",
    "UnhandledTypeError",
    "canonicalize_statements",
    "category_for_types",
    "frame",
    "frame_all",
    "included_in",
    "load_settings",
    "parse_value",
    "simplify",
]

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy import of the compaction module, which loads pyld."""
    if name == "CompactGraph":
        from dcatgraph.compaction import CompactGraph
        return CompactGraph
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
