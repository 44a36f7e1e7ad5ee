"""Canonicalization of rights and provenance statements.

Datasets state their access rights and provenance either as inline literals
or as references to statement resources, and the same text is frequently
published under many different blank node ids. This module identifies every
statement by the MD5 of its French text and rewrites each dataset to hold one
reference per distinct statement.

The pass needs the whole corpus: it runs once, after every page is
ingested. Resolution is done for the whole corpus before any dataset is
rewritten, so the canonical id of a statement does not depend on the order
datasets were ingested in:

- if some dataset already references a statement resource with that text,
  the smallest such id is kept
- otherwise a statement resource `_:md5-<hash>` is created

Literals in other languages are translations of the French literal they
sit next to and become part of its statement label. A rights statement and
a provenance statement with the same French text share one `_:md5-<hash>`
resource carrying both types.
"""

import hashlib
from typing import NamedTuple

from pydantic import BaseModel, Field

from dcatgraph.errors import CanonicalizationError
from dcatgraph.logging import setup_logging
from dcatgraph.resource import Resource
from dcatgraph.storage.interfaces import GraphStoreInterface
from dcatgraph.value import Literal, PropertyValue, Reference
from dcatgraph.vocab import BLANK_NODE_PREFIX, CATEGORY_SPECS, RDFS_LABEL, Category

logger = setup_logging()

STATEMENT_LANGUAGE = "fr"
LITERAL_STATEMENT_LABEL = "literal where a statement reference is required"
UNRESOLVED_STATEMENT_LABEL = "statement reference not resolved"


class MLString(BaseModel, frozen=True):
    """A multilingual string holding at least a French text."""

    texts: dict[str, str] = Field(description="Language tag to text, empty texts excluded.")

    @classmethod
    def create(cls, texts: dict[str, str]) -> "MLString":
        """Build from a language → text mapping, dropping empty texts.

        Raises:
            CanonicalizationError: if no French text remains.
        """
        kept = {language: text for language, text in texts.items() if text}
        if STATEMENT_LANGUAGE not in kept:
            raise CanonicalizationError(f"statement without a French text: {texts!r}")
        return cls(texts=kept)

    @classmethod
    def from_statement_label(cls, resource: Resource) -> "MLString":
        """Read the rdfs:label of a statement resource.

        Plain literals are taken as French.

        Raises:
            CanonicalizationError: if a label value is not a string literal,
                or no French text is present.
        """
        texts: dict[str, str] = {}
        for value in resource.values(RDFS_LABEL):
            if not isinstance(value, Literal) or value.datatype is not None:
                raise CanonicalizationError(f"unexpected label value {value!r} on statement {resource.id}")
            texts.setdefault(value.language or STATEMENT_LANGUAGE, value.text)
        try:
            return cls.create(texts)
        except CanonicalizationError as e:
            raise CanonicalizationError(f"statement {resource.id} has no French label") from e

    @property
    def french(self) -> str:
        return self.texts[STATEMENT_LANGUAGE]

    def md5(self) -> str:
        return hashlib.md5(self.french.encode("utf-8")).hexdigest()

    def to_literals(self) -> list[Literal]:
        return [Literal(value=text, language=language) for language, text in self.texts.items()]


def _is_french(value: Literal) -> bool:
    return value.datatype is None and value.language in (None, STATEMENT_LANGUAGE)


def statement_id(digest: str) -> str:
    return f"{BLANK_NODE_PREFIX}md5-{digest}"


class CanonicalizationReport(BaseModel, frozen=True):
    """Counts of one canonicalization run."""

    datasets: int = Field(default=0, description="Datasets holding at least one statement property.")
    literals_converted: int = Field(default=0, description="Inline literals replaced by a reference.")
    statements_created: int = Field(default=0, description="Statement resources synthesized.")
    references_retargeted: int = Field(default=0, description="References moved to a canonical statement.")
    duplicates_removed: int = Field(default=0, description="Values dropped as repeats of an earlier statement.")
    unresolved_references: int = Field(default=0, description="References kept as-is because their target is missing.")


class _Candidate(NamedTuple):
    key: tuple[str, str]
    original: PropertyValue


class StatementCanonicalizer:
    """Runs the statement canonicalization pass over one store."""

    def __init__(self, store: GraphStoreInterface) -> None:
        self.store = store
        self._texts: dict[tuple[str, str], MLString] = {}
        self._referenced: dict[tuple[str, str], set[str]] = {}
        self._counts: dict[str, int] = {}

    def _count(self, name: str, amount: int = 1) -> None:
        self._counts[name] = self._counts.get(name, 0) + amount

    def _literal_candidate(self, property_uri: str, mlstring: MLString, value: Literal) -> _Candidate:
        key = (property_uri, mlstring.md5())
        self._texts.setdefault(key, mlstring)
        self.store.rectification_stats.increment(LITERAL_STATEMENT_LABEL)
        return _Candidate(key=key, original=value)

    def _reference_candidate(self, property_uri: str, value: Reference) -> _Candidate:
        statement = self.store.try_get(Category.GENERIC, value.id)
        if statement is None:
            logger.warning("%s: statement %s not found, reference kept", property_uri, value.id)
            self.store.rectification_stats.increment(UNRESOLVED_STATEMENT_LABEL)
            return _Candidate(key=(property_uri, "unresolved:" + value.id), original=value)
        mlstring = MLString.from_statement_label(statement)
        key = (property_uri, mlstring.md5())
        self._texts.setdefault(key, mlstring)
        self._referenced.setdefault(key, set()).add(value.id)
        return _Candidate(key=key, original=value)

    def _candidates(self, property_uri: str, values: list[PropertyValue]) -> list[_Candidate]:
        """Return one candidate per reference and per French literal.

        A literal in another language is a translation: it joins the French
        literal before it, or the first French literal when none precedes.

        Raises:
            CanonicalizationError: for a typed literal, or a translation with
                no French literal in the list.
        """
        french = [i for i, value in enumerate(values) if isinstance(value, Literal) and _is_french(value)]
        texts: dict[int, dict[str, str]] = {i: {STATEMENT_LANGUAGE: values[i].text} for i in french}  # type: ignore[union-attr]
        for i, value in enumerate(values):
            if not isinstance(value, Literal) or i in texts:
                continue
            if value.datatype is not None or not french:
                raise CanonicalizationError(
                    f"{property_uri} holds a literal that is not French: {value.as_jsonld()!r}"
                )
            owner = max((j for j in french if j < i), default=french[0])
            texts[owner].setdefault(value.language, value.text)  # type: ignore[arg-type]
        return [
            self._literal_candidate(property_uri, MLString.create(texts[i]), value)
            if isinstance(value, Literal)
            else self._reference_candidate(property_uri, value)
            for i, value in enumerate(values)
            if isinstance(value, Reference) or i in texts
        ]

    def _collect(self) -> dict[tuple[str, str], list[_Candidate]]:
        collected: dict[tuple[str, str], list[_Candidate]] = {}
        for dataset in self.store.resources_of(Category.DATASET):
            for property_uri in CATEGORY_SPECS[Category.DATASET].statement_properties:
                values = dataset.values(property_uri)
                if values:
                    collected[(dataset.id, property_uri)] = self._candidates(property_uri, values)  # type: ignore[arg-type]
        return collected

    def _resolve(self, key: tuple[str, str], original: PropertyValue) -> str:
        property_uri, digest = key
        if digest.startswith("unresolved:"):
            return original.id  # type: ignore[union-attr]
        referenced = self._referenced.get(key)
        if referenced:
            return min(referenced)
        canonical = statement_id(digest)
        statement_type = CATEGORY_SPECS[Category.DATASET].statement_properties[property_uri]
        statement = self.store.try_get(Category.GENERIC, canonical)
        if statement is None:
            self.store.insert(
                Resource(
                    id=canonical,
                    types=[statement_type],
                    category=Category.GENERIC,
                    properties={RDFS_LABEL: self._texts[key].to_literals()},
                )
            )
            self._count("statements_created")
        elif statement_type not in statement.types:
            # same text under both statement properties: one resource, both types
            statement.types[:] = sorted({*statement.types, statement_type})
            logger.debug("statement %s also typed %s", canonical, statement_type)
        # a created statement is referenced by every later dataset sharing its text
        self._referenced[key] = {canonical}
        return canonical

    def run(self) -> CanonicalizationReport:
        """Canonicalize every dataset's statement properties.

        Raises:
            CanonicalizationError: if the pass already ran on this store, or
                a statement has no French text.
        """
        if self.store.statements_canonicalized:
            raise CanonicalizationError(f"statements of {self.store.name} are already canonicalized")
        collected = self._collect()
        datasets = {dataset_id for dataset_id, _ in collected}
        for (dataset_id, property_uri), candidates in collected.items():
            dataset = self.store.get(Category.DATASET, dataset_id)
            rewritten: list[PropertyValue] = []
            for candidate in candidates:
                canonical = self._resolve(candidate.key, candidate.original)
                reference = Reference(id=canonical)
                if reference in rewritten:
                    self._count("duplicates_removed")
                    continue
                if isinstance(candidate.original, Literal):
                    self._count("literals_converted")
                elif candidate.key[1].startswith("unresolved:"):
                    self._count("unresolved_references")
                elif candidate.original.id != canonical:
                    self._count("references_retargeted")
                rewritten.append(reference)
            dataset.set_values(property_uri, rewritten)
        self.store.mark_statements_canonicalized()
        report = CanonicalizationReport(datasets=len(datasets), **self._counts)
        logger.info("statement canonicalization of %s", self.store.name)
        logger.info(report)
        return report


def canonicalize_statements(store: GraphStoreInterface) -> CanonicalizationReport:
    """Run the statement canonicalization pass on `store`, exactly once."""
    return StatementCanonicalizer(store).run()
