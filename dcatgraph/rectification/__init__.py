"""Rectification of defects introduced by the catalog publisher."""

from dcatgraph.rectification.engine import Rectifier
from dcatgraph.rectification.improve import apply_default_language
from dcatgraph.rectification.rules import DEDICATED_RULES, GENERAL_RULES, PROPERTY_URI_REPAIRS, Rule
from dcatgraph.rectification.secondary import decode as decode_secondary

__all__ = [
    "Rectifier",
    "Rule",
    "DEDICATED_RULES",
    "GENERAL_RULES",
    "PROPERTY_URI_REPAIRS",
    "apply_default_language",
    "decode_secondary",
]
