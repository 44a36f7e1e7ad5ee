"""Improvements applied after rectification.

Unlike rectification rules these do not fix a defect; they fill in what the
export leaves implicit. Titles, descriptions and names published without a
language tag are in the catalog's default language.
"""

from dcatgraph.resource import Resource
from dcatgraph.stats import Stats
from dcatgraph.value import Literal
from dcatgraph.vocab import DCT, FOAF

DEFAULT_LANGUAGE_PROPERTIES: tuple[str, ...] = (
    DCT + "title",
    DCT + "description",
    FOAF + "name",
)


def default_language_label(property_uri: str, language: str) -> str:
    return f"{property_uri} defaults to {language}"


def apply_default_language(resource: Resource, language: str, stats: Stats) -> int:
    """Tag the plain literals of the label-like properties with `language`.

    Returns the number of literals tagged. An empty `language` disables the pass.
    """
    if not language:
        return 0
    tagged = 0
    for property_uri in DEFAULT_LANGUAGE_PROPERTIES:
        values = resource.properties.get(property_uri)
        if not values:
            continue
        for i, value in enumerate(values):
            if isinstance(value, Literal) and value.is_plain:
                values[i] = Literal(value=value.value, language=language)
                stats.increment(default_language_label(property_uri, language))
                tagged += 1
    return tagged
