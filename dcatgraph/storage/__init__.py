"""Graph storage."""

from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.storage.memory import InMemoryGraphStore

__all__ = ["GraphStoreInterface", "InMemoryGraphStore"]
