"""Path-indexed module table owned by a single resolution run."""

from __future__ import annotations

from collections.abc import Iterator

from .module_record import ModuleRecord


class ModuleTable:
    """Map of resolved import path to module record.

    Replaced modules are indexed under their replacement path. A second record
    claiming an already indexed path is rejected rather than overwriting the
    first one; ``add`` reports the rejection so the caller can warn about it.
    """

    def __init__(self) -> None:
        self._records: dict[str, ModuleRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ModuleRecord]:
        return iter(self._records.values())

    def get(self, path: str) -> ModuleRecord | None:
        return self._records.get(path)

    def add(self, record: ModuleRecord) -> ModuleRecord | None:
        """Index ``record``; return the existing record if the path is taken."""
        existing = self._records.get(record.key)
        if existing is not None:
            return existing
        self._records[record.key] = record
        return None

    def missing_sums(self) -> list[ModuleRecord]:
        """Records that still have no checksum, ordered by path."""
        return [self._records[key] for key in sorted(self._records) if not self._records[key].sum]
