"""Resources synthesized from the structure of well-known URIs.

Some references point at resources the export never describes but whose
identifier carries enough to build a minimal description, e.g. INSEE
administrative areas (``http://id.insee.fr/geo/region/84``).
"""

import re
from typing import Callable

from dcatgraph.resource import Resource
from dcatgraph.value import Literal
from dcatgraph.vocab import DCT, RDFS_LABEL, Category

INSEE_GEO_PATTERN = re.compile(r"^http://id\.insee\.fr/geo/(region|departement|commune)/(.*)$")

INSEE_AREA_LABELS = {
    "region": "Région",
    "departement": "Département",
    "commune": "Commune",
}


def synthesize_location(resource_id: str) -> Resource | None:
    """Build a Location for an INSEE area URI, or None if the URI is not one."""
    match = INSEE_GEO_PATTERN.match(resource_id)
    if match is None:
        return None
    area_label = INSEE_AREA_LABELS.get(match.group(1), "type inconnu")
    return Resource(
        id=resource_id,
        types=[DCT + "Location"],
        category=Category.LOCATION,
        properties={RDFS_LABEL: [Literal(value=f"{area_label} {match.group(2)}", language="fr")]},
    )


SYNTHESIZERS: dict[Category, Callable[[str], Resource | None]] = {
    Category.LOCATION: synthesize_location,
}
