from __future__ import annotations

from pathlib import Path

import pytest

from gomod_resolver.workspace import WorkspaceError, isolated_manifest


def test_isolated_manifest_copies_and_cleans_up(manifest: Path) -> None:
    original = manifest.read_bytes()

    with isolated_manifest(manifest) as workdir:
        assert workdir.is_dir()
        assert workdir != manifest.parent
        assert (workdir / "go.mod").read_bytes() == original
        (workdir / "go.mod").write_text("module rewritten\n", encoding="utf-8")
        (workdir / "go.sum").write_text("extra\n", encoding="utf-8")

    assert not workdir.exists()
    assert manifest.read_bytes() == original


def test_isolated_manifest_cleans_up_on_error(manifest: Path) -> None:
    with pytest.raises(RuntimeError):
        with isolated_manifest(manifest) as workdir:
            raise RuntimeError("boom")

    assert not workdir.exists()


def test_each_run_gets_a_fresh_directory(manifest: Path) -> None:
    with isolated_manifest(manifest) as first, isolated_manifest(manifest) as second:
        assert first != second


def test_missing_manifest_raises_workspace_error(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceError, match="Failed to open manifest"):
        with isolated_manifest(tmp_path / "missing" / "go.mod"):
            pass  # pragma: no cover


def test_workspace_error_is_an_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        with isolated_manifest(tmp_path / "go.mod"):
            pass  # pragma: no cover
