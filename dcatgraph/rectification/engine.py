"""Per-resource rectification pipeline.

The pipeline is an ordered list of rules over one property's value list:

1. property URI repair, over the whole property map
2. dedicated rules (language, mailbox), each owning its properties
3. general rules: the first rule returning a replacement wins, and the
   general rules run again on that replacement until none applies

Every replacement increments the rule's counter in the rectification
statistics. Running the pipeline on a rectified resource changes nothing
and counts nothing.
"""

from typing import Sequence

from dcatgraph.logging import setup_logging
from dcatgraph.rectification.improve import apply_default_language
from dcatgraph.rectification.rules import (
    DEDICATED_RULES,
    GENERAL_RULES,
    PROPERTY_URI_REPAIRS,
    Rule,
)
from dcatgraph.resource import Resource
from dcatgraph.stats import Stats

logger = setup_logging()

PROPERTY_URI_LABEL = "property URI repaired"


class Rectifier:
    """Applies the rectification rules, then the improvements, to resources."""

    def __init__(
        self,
        stats: Stats,
        default_language: str = "fr",
        dedicated_rules: Sequence[Rule] = DEDICATED_RULES,
        general_rules: Sequence[Rule] = GENERAL_RULES,
    ) -> None:
        self.stats = stats
        self.default_language = default_language
        self.dedicated_rules = tuple(dedicated_rules)
        self.general_rules = tuple(general_rules)

    def repair_property_uris(self, resource: Resource) -> None:
        for bad, valid in PROPERTY_URI_REPAIRS.items():
            if bad not in resource.properties:
                continue
            values = resource.properties.pop(bad)
            resource.add_values(valid, values)  # type: ignore[arg-type]
            self.stats.increment(PROPERTY_URI_LABEL)

    def rectify_property(self, resource: Resource, property_uri: str) -> None:
        values = resource.values(property_uri)
        for rule in self.dedicated_rules:
            if rule.applies_to(property_uri):
                self._apply(rule, resource, property_uri, values)
                return
        changed = True
        while changed:
            changed = any(
                self._apply(rule, resource, property_uri, resource.values(property_uri))
                for rule in self.general_rules
                if rule.applies_to(property_uri)
            )

    def _apply(self, rule: Rule, resource: Resource, property_uri: str, values) -> bool:
        replacement = rule.apply(property_uri, values)
        if replacement is None or replacement == list(values):
            return False
        resource.set_values(property_uri, replacement)
        self.stats.increment(rule.label)
        logger.debug("%s on %s of %s", rule.label, property_uri, resource.id)
        return True

    def rectify(self, resource: Resource) -> Resource:
        """Rectify `resource` in place and return it.

        Raises:
            MalformedValueError: if a property cannot be repaired (e.g. a
                mailbox holding several values).
        """
        self.repair_property_uris(resource)
        for property_uri in list(resource.properties):
            self.rectify_property(resource, property_uri)
        return resource

    def improve(self, resource: Resource) -> Resource:
        apply_default_language(resource, self.default_language, self.stats)
        return resource

    def __call__(self, resource: Resource) -> Resource:
        return self.improve(self.rectify(resource))
