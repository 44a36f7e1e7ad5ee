"""Framing: inlining referenced resources into their referrers.

`frame()` takes an allow-list of (category, property URI) pairs and returns
a copy of a resource in which every reference held by an allow-listed
property is replaced by a framed copy of its target. Targets are looked up
in the category registered for the property's short name in the range
table. The store itself is never modified.

Framing an already framed resource substitutes nothing, since its
allow-listed values are resources rather than references.
"""

from typing import Iterable, Mapping

from dcatgraph.errors import FramingCycleError, FramingError
from dcatgraph.logging import setup_logging
from dcatgraph.resource import Resource
from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.value import Reference
from dcatgraph.vocab import Category, range_of, short_names_for

logger = setup_logging()

Allowlist = Mapping[Category, Iterable[str]]


def _normalize(allowlist: Allowlist) -> dict[Category, frozenset[str]]:
    return {category: frozenset(property_uris) for category, property_uris in allowlist.items()}


def _range_category(resource: Resource, property_uri: str) -> Category:
    short_name = short_names_for(resource.category, resource.types).get(property_uri)
    if short_name is None:
        raise FramingError(f"{property_uri} has no short name in category {resource.category.value}")
    category = range_of(short_name)
    if category is None:
        raise FramingError(f"{property_uri} ({short_name}) has no range category")
    return category


def _frame(
    store: GraphStoreInterface,
    resource: Resource,
    allowlist: dict[Category, frozenset[str]],
    path: tuple[tuple[Category, str], ...],
    strict: bool,
) -> Resource:
    framed = resource.copy_shallow()
    property_uris = allowlist.get(resource.category, frozenset())
    for property_uri in list(framed.properties):
        if property_uri not in property_uris:
            continue
        values = framed.properties[property_uri]
        if not any(isinstance(value, Reference) for value in values):
            continue
        range_category = _range_category(resource, property_uri)
        for i, value in enumerate(values):
            if not isinstance(value, Reference):
                continue
            key = (range_category, value.id)
            if key in path:
                raise FramingCycleError([resource_id for _, resource_id in path] + [value.id])
            if strict:
                target = store.get(range_category, value.id)
            else:
                target = store.try_get(range_category, value.id)
                if target is None:
                    logger.debug("frame: %s not found in %s, reference kept", value.id, range_category.value)
                    continue
            values[i] = _frame(store, target, allowlist, path + (key,), strict)
    return framed


def frame(
    store: GraphStoreInterface,
    resource: Resource,
    allowlist: Allowlist,
    strict: bool = True,
) -> Resource:
    """Return a framed copy of `resource`.

    Args:
        store: Store the references are resolved in.
        resource: Resource to frame; left untouched.
        allowlist: Category to the property URIs to inline for resources of
            that category, at any depth.
        strict: When False, a reference whose target is missing is kept as a
            reference instead of raising.

    Raises:
        FramingError: if an allow-listed property has no range category.
        FramingCycleError: if inlining would revisit a resource on the current path.
        DereferenceError: in strict mode, if a target does not exist.
    """
    return _frame(store, resource, _normalize(allowlist), ((resource.category, resource.id),), strict)


def frame_all(store: GraphStoreInterface, allowlist: Allowlist, strict: bool = True) -> dict[str, Resource]:
    """Frame every resource of the allow-listed categories, keyed by id."""
    framed: dict[str, Resource] = {}
    normalized = _normalize(allowlist)
    for category in normalized:
        for resource in store.resources_of(category):
            framed[resource.id] = _frame(store, resource, normalized, ((category, resource.id),), strict)
    return framed
