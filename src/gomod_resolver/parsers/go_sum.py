"""Parse go.sum to capture known module checksums."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

GO_MOD_SUFFIX = "/go.mod"


@dataclass(slots=True)
class GoSumLedger:
    """Checksum entries read from a go.sum file."""

    entries: list[tuple[str, str, str]] = field(default_factory=list)
    skipped_records: list[str] = field(default_factory=list)


def parse(path: Path) -> GoSumLedger:
    """Return (module, version, checksum) entries from go.sum.

    A missing file yields an empty ledger. Entries for a module's own go.mod
    (version suffixed with ``/go.mod``) are ignored, as are blank lines; lines
    that are not valid UTF-8 or not exactly three fields are recorded in
    ``skipped_records``.
    """
    ledger = GoSumLedger()
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return ledger

    for index, raw in enumerate(data.splitlines(), start=1):
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError:
            ledger.skipped_records.append(f"line {index}: not valid UTF-8")
            continue
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 3:
            ledger.skipped_records.append(f"line {index}: expected 3 fields, got {len(fields)}")
            continue
        module, version, checksum = fields
        if version.endswith(GO_MOD_SUFFIX):
            continue
        ledger.entries.append((module, version, checksum))

    return ledger
