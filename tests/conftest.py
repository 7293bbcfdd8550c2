"""Shared fixtures: an in-memory module authority and fake go executables."""

from __future__ import annotations

import json
import os
import stat
import sys
import textwrap
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

import pytest

from gomod_resolver.models import DownloadedModule, ModuleRecord


class FakeAuthority:
    """ModuleAuthority double that serves canned records and records calls."""

    def __init__(
        self,
        modules: Iterable[dict],
        downloads: Iterable[dict] = (),
    ) -> None:
        self.modules = [ModuleRecord.from_dict(m) for m in modules]
        self.downloads = [DownloadedModule.from_dict(d) for d in downloads]
        self.list_calls: list[Path] = []
        self.download_calls: list[list[str]] = []
        self.workdir_contents: list[str] = []

    def list_modules(self, workdir: Path) -> list[ModuleRecord]:
        self.list_calls.append(workdir)
        self.workdir_contents.append((workdir / "go.mod").read_text(encoding="utf-8"))
        return [
            ModuleRecord(path=m.path, version=m.version, main=m.main, replace=m.replace)
            for m in self.modules
        ]

    def download(self, workdir: Path, targets: Sequence[str]) -> list[DownloadedModule]:
        self.download_calls.append(list(targets))
        requested = set(targets)
        return [d for d in self.downloads if f"{d.path}@{d.version}" in requested]


@pytest.fixture
def manifest(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    path = project / "go.mod"
    path.write_text("module example.com/app\n\ngo 1.21\n", encoding="utf-8")
    return path


_FAKE_GO = """\
#!{python}
import json, os, sys, time

config = json.load(open({config!r}, encoding="utf-8"))
with open({calls!r}, "a", encoding="utf-8") as log:
    log.write(json.dumps({{"args": sys.argv[1:], "cwd": os.getcwd()}}) + "\\n")

mode = "list" if sys.argv[1:2] == ["list"] else "download"
time.sleep(config.get("sleep", 0))
sys.stdout.write(config.get(mode + "_output", ""))
sys.stdout.flush()
sys.exit(config.get(mode + "_status", 0))
"""


@pytest.fixture
def fake_go(tmp_path: Path) -> Callable[..., Path]:
    """Write an executable that mimics ``go list``/``go mod download``.

    Each invocation appends ``{"args", "cwd"}`` to ``calls.jsonl`` next to the
    script.
    """

    def _make(
        list_output: str | Sequence[dict] = "",
        download_output: str | Sequence[dict] = "",
        list_status: int = 0,
        download_status: int = 0,
        sleep: float = 0,
    ) -> Path:
        bin_dir = tmp_path / "fakego"
        bin_dir.mkdir(exist_ok=True)

        def _render(output: str | Sequence[dict]) -> str:
            if isinstance(output, str):
                return output
            return "".join(json.dumps(record, indent="\t") + "\n" for record in output)

        config = bin_dir / "config.json"
        config.write_text(
            json.dumps(
                {
                    "list_output": _render(list_output),
                    "download_output": _render(download_output),
                    "list_status": list_status,
                    "download_status": download_status,
                    "sleep": sleep,
                }
            ),
            encoding="utf-8",
        )
        script = bin_dir / "go"
        script.write_text(
            textwrap.dedent(
                _FAKE_GO.format(
                    python=sys.executable,
                    config=str(config),
                    calls=str(bin_dir / "calls.jsonl"),
                )
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    if os.name == "nt":  # pragma: no cover
        pytest.skip("fake go executables need a POSIX shebang")
    return _make


@pytest.fixture
def go_calls() -> Callable[[Path], list[dict]]:
    """Return a reader for the invocations logged by a fake go script."""

    def _read(script: Path) -> list[dict]:
        calls = script.parent / "calls.jsonl"
        if not calls.exists():
            return []
        return [json.loads(line) for line in calls.read_text(encoding="utf-8").splitlines()]

    return _read


@pytest.fixture
def fake_authority() -> type[FakeAuthority]:
    return FakeAuthority
