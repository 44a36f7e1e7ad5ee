"""Named occurrence counters.

A graph keeps two of these: general ingestion statistics and rectification
statistics. The latter is the record of every defect class met and healed
during a run.
"""

from typing import Iterator


class Stats:
    """Counts occurrences keyed by a human-readable label."""

    def __init__(self, contents: dict[str, int] | None = None) -> None:
        self._contents: dict[str, int] = dict(contents or {})

    def increment(self, label: str, amount: int = 1) -> None:
        self._contents[label] = self._contents.get(label, 0) + amount

    def get(self, label: str) -> int:
        return self._contents.get(label, 0)

    def contents(self) -> dict[str, int]:
        """Return a copy of the counters in first-increment order."""
        return dict(self._contents)

    def total(self) -> int:
        return sum(self._contents.values())

    def __getitem__(self, label: str) -> int:
        return self._contents.get(label, 0)

    def __contains__(self, label: object) -> bool:
        return label in self._contents

    def __iter__(self) -> Iterator[str]:
        return iter(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def __repr__(self) -> str:
        return f"Stats({self._contents!r})"
