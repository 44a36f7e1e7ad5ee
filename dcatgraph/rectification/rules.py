"""Rectification rules.

Each rule looks at the value list of a single property and returns either
None (nothing to repair) or the replacement list. Rules never look at other
properties or other resources.
"""

from dataclasses import dataclass, field
from typing import Callable, Sequence

from dcatgraph.errors import MalformedValueError
from dcatgraph.rectification.secondary import decode, looks_encoded
from dcatgraph.value import Literal, PropertyValue, Reference
from dcatgraph.vocab import DCAT, DCT, FOAF, VCARD, XSD_DATE, XSD_DATETIME

Values = Sequence[PropertyValue]

PROPERTY_URI_REPAIRS: dict[str, str] = {
    DCT + "rights_holder": DCT + "rightsHolder",
    DCAT + "publisher": DCT + "publisher",
}

LANGUAGE_AUTHORITY = "http://publications.europa.eu/resource/authority/language/"

ISO_639_1_TO_AUTHORITY: dict[str, str] = {
    "fr": LANGUAGE_AUTHORITY + "FRA",
    "en": LANGUAGE_AUTHORITY + "ENG",
    "de": LANGUAGE_AUTHORITY + "DEU",
    "es": LANGUAGE_AUTHORITY + "SPA",
    "it": LANGUAGE_AUTHORITY + "ITA",
    "nl": LANGUAGE_AUTHORITY + "NLD",
    "pt": LANGUAGE_AUTHORITY + "POR",
}

MISENCODED_LANGUAGES: dict[str, str] = {
    "{'uri': '" + LANGUAGE_AUTHORITY + "FRA'}": LANGUAGE_AUTHORITY + "FRA",
}

MAILTO = "mailto:"

MISCODED_THEMES: dict[str, str] = {
    "Énergie": "http://registre.data.developpement-durable.gouv.fr/themes-hors-ecospheres/energie",
}


@dataclass(frozen=True)
class Rule:
    """A named repair applied to the value list of a property.

    `properties` restricts the rule to those property URIs; an empty set
    means every property.
    """

    label: str
    apply: Callable[[str, Values], list[PropertyValue] | None]
    properties: frozenset[str] = field(default_factory=frozenset)

    def applies_to(self, property_uri: str) -> bool:
        return not self.properties or property_uri in self.properties


def _is_plain(value: PropertyValue) -> bool:
    return isinstance(value, Literal) and value.is_plain


def repair_language(property_uri: str, values: Values) -> list[PropertyValue] | None:
    """Reduce a language property to its authority reference.

    - a reference duplicated by a plain string keeps only the reference
    - a known misencoded string becomes the reference it encodes
    - a bare ISO 639-1 code used as an id becomes the authority URI
    """
    repaired: list[PropertyValue] | None = None
    if len(values) == 2:
        first, second = values
        if isinstance(first, Reference) and _is_plain(second):
            repaired = [first]
        elif _is_plain(first) and isinstance(second, Reference):
            repaired = [second]
    elif len(values) == 1 and _is_plain(values[0]):
        authority = MISENCODED_LANGUAGES.get(values[0].text)  # type: ignore[union-attr]
        if authority is not None:
            repaired = [Reference(id=authority)]
    current = repaired if repaired is not None else list(values)
    if len(current) == 1 and isinstance(current[0], Reference):
        authority = ISO_639_1_TO_AUTHORITY.get(current[0].id)
        if authority is not None:
            repaired = [Reference(id=authority)]
    return repaired


def repair_mailbox(property_uri: str, values: Values) -> list[PropertyValue] | None:
    """Make a mailbox a single `mailto:` reference.

    Raises:
        MalformedValueError: if the property does not hold exactly one value.
    """
    if len(values) != 1:
        raise MalformedValueError(
            [property_uri], f"{property_uri} must hold exactly one value, found {len(values)}"
        )
    value = values[0]
    if isinstance(value, Reference):
        if value.id.startswith(MAILTO):
            return None
        return [Reference(id=MAILTO + value.id)]
    if value.is_plain:
        return [Reference(id=MAILTO + value.text)]
    return None


def collapse_tagged_duplicate(property_uri: str, values: Values) -> list[PropertyValue] | None:
    """Keep the tagged literal when a string is given both with and without a language."""
    if len(values) != 2 or not all(isinstance(value, Literal) for value in values):
        return None
    first, second = values
    if first.value != second.value:  # type: ignore[union-attr]
        return None
    if first.language and not second.language:  # type: ignore[union-attr]
        return [first]
    if second.language and not first.language:  # type: ignore[union-attr]
        return [second]
    return None


def collapse_date_duplicate(property_uri: str, values: Values) -> list[PropertyValue] | None:
    """Keep the xsd:date literal when a date is given both as date and dateTime."""
    if len(values) != 2 or not all(isinstance(value, Literal) for value in values):
        return None
    datatypes = [value.datatype for value in values]  # type: ignore[union-attr]
    if datatypes == [XSD_DATE, XSD_DATETIME]:
        return [values[0]]
    if datatypes == [XSD_DATETIME, XSD_DATE]:
        return [values[1]]
    return None


def decode_secondary_encoding(property_uri: str, values: Values) -> list[PropertyValue] | None:
    """Replace secondary-encoded strings by the values they encode.

    The result may be empty, in which case the property is removed.
    """
    if not any(looks_encoded(value) for value in values):
        return None
    decoded: list[PropertyValue] = []
    for value in values:
        if looks_encoded(value):
            decoded.extend(decode(value.text))  # type: ignore[union-attr]
        else:
            decoded.append(value)
    return decoded


def repair_miscoded_theme(property_uri: str, values: Values) -> list[PropertyValue] | None:
    if not any(isinstance(value, Reference) and value.id in MISCODED_THEMES for value in values):
        return None
    return [
        Reference(id=MISCODED_THEMES[value.id])
        if isinstance(value, Reference) and value.id in MISCODED_THEMES
        else value
        for value in values
    ]


# Rules owning a property: once one matches the property, no other rule runs on it.
DEDICATED_RULES: tuple[Rule, ...] = (
    Rule("language property repaired", repair_language, frozenset({DCT + "language"})),
    Rule("mailbox repaired", repair_mailbox, frozenset({FOAF + "mbox", VCARD + "hasEmail"})),
)

# The first rule returning a replacement wins; the engine repeats until none does.
GENERAL_RULES: tuple[Rule, ...] = (
    Rule("literal duplicated with and without language", collapse_tagged_duplicate),
    Rule("date duplicated as date and dateTime", collapse_date_duplicate),
    Rule("property holding a secondary encoded string", decode_secondary_encoding),
    Rule("miscoded theme replaced by a URI", repair_miscoded_theme, frozenset({DCAT + "theme"})),
)
