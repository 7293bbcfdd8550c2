"""Report aggregation and schema-friendly output."""

from __future__ import annotations

from typing import Any

from .models import ResolutionResult


def build_report(result: ResolutionResult) -> dict[str, Any]:
    """Turn a resolution result into a single serialisable report.

    ``modules`` is the descriptor list in resolution order (sorted by name);
    ``warnings`` lists the non-fatal conditions met along the way.
    """
    data = result.to_dict()
    replaced = sum(1 for descriptor in result.descriptors if descriptor.replace is not None)

    report: dict[str, Any] = {
        "version": "1",
        "hasWarnings": bool(result.warnings),
        **data,
        "totals": {
            "modules": len(result.descriptors),
            "replaced": replaced,
            "warnings": len(result.warnings),
        },
    }

    return report
