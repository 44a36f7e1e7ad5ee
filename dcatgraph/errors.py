"""Exception hierarchy for the catalog graph engine.

Fatal conditions (a value record with an unknown shape, a resource whose
types map to no category, a broken invariant) raise one of these. Recoverable
conditions are returned as values by the caller-facing APIs instead, e.g.
`GraphStore.try_get()` returns None and secondary decoding returns a
diagnostic literal.
"""


class DcatGraphError(Exception):
    """Base class for all errors raised by dcatgraph."""


class MalformedValueError(DcatGraphError, ValueError):
    """A JSON-LD value record has a key combination that is not recognized."""

    def __init__(self, keys: list[str], message: str | None = None):
        self.keys = keys
        super().__init__(message or f"unrecognized value keys: {','.join(keys)}")


class UnhandledTypeError(DcatGraphError):
    """A resource's type combination maps to no category."""

    def __init__(self, types: list[str]):
        self.types = types
        super().__init__(f"unhandled types: {', '.join(types)}")


class DereferenceError(DcatGraphError, LookupError):
    """A reference could not be resolved in the given category."""

    def __init__(self, category: str, resource_id: str):
        self.category = category
        self.resource_id = resource_id
        super().__init__(f"DEREF_ERROR on {resource_id} in {category}")


class CanonicalizationError(DcatGraphError):
    """The statement canonicalization pass met data it cannot handle."""


class FramingError(DcatGraphError):
    """Framing was asked to follow a property without a range category."""


class FramingCycleError(FramingError):
    """Framing followed allow-listed properties back to a resource on its own path."""

    def __init__(self, path: list[str]):
        self.path = path
        super().__init__("framing cycle: " + " -> ".join(path))


class SimplificationError(DcatGraphError):
    """A blank node reference cannot be simplified."""


class CompactionError(DcatGraphError):
    """The JSON-LD compaction call failed or returned an unusable document."""


class PageRetrievalError(DcatGraphError):
    """A catalog page could not be retrieved or decoded."""

    def __init__(self, page: int, reason: str):
        self.page = page
        self.reason = reason
        super().__init__(f"page {page}: {reason}")
