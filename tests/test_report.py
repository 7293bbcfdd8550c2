from __future__ import annotations

import pytest

from gomod_resolver.models import RepoDescriptor, ResolutionResult
from gomod_resolver.report import build_report


def test_build_report_totals() -> None:
    result = ResolutionResult(
        descriptors=(
            RepoDescriptor("com_github_a_a", "github.com/a/a", "v1.0.0", "h1:A="),
            RepoDescriptor("com_github_c_c", "github.com/c/c", "v2.0.0", "h1:D=", "github.com/d/d"),
        ),
        warnings=("could not determine sum for module github.com/b/b",),
    )

    report = build_report(result)

    assert report["version"] == "1"
    assert report["hasWarnings"] is True
    assert report["totals"] == {"modules": 2, "replaced": 1, "warnings": 1}
    assert report["modules"][1]["replace"] == "github.com/d/d"
    assert "replace" not in report["modules"][0]


def test_empty_report() -> None:
    report = build_report(ResolutionResult(descriptors=()))

    assert report["modules"] == []
    assert report["hasWarnings"] is False


def test_descriptor_requires_checksum() -> None:
    with pytest.raises(ValueError, match="Checksum must be non-empty"):
        RepoDescriptor("com_github_a_a", "github.com/a/a", "v1.0.0", "")


def test_result_requires_sorted_unique_names() -> None:
    a = RepoDescriptor("com_github_a_a", "github.com/a/a", "v1.0.0", "h1:A=")
    b = RepoDescriptor("com_github_b_b", "github.com/b/b", "v1.0.0", "h1:B=")

    with pytest.raises(ValueError, match="sorted"):
        ResolutionResult(descriptors=(b, a))
    with pytest.raises(ValueError, match="unique"):
        ResolutionResult(descriptors=(a, a))


def test_report_embeds_result_dict() -> None:
    result = ResolutionResult(
        descriptors=(RepoDescriptor("com_github_a_a", "github.com/a/a", "v1.0.0", "h1:A="),),
        warnings=("path collision on github.com/d/d",),
    )

    report = build_report(result)

    assert {key: report[key] for key in ("modules", "warnings")} == result.to_dict()
