"""Module records produced by ``go list`` and ``go mod download``."""

from __future__ import annotations

import ntpath
import posixpath
from dataclasses import dataclass
from typing import Any


def _is_local_path(path: str) -> bool:
    if posixpath.isabs(path) or ntpath.isabs(path):
        return True
    return path in {".", ".."} or path.startswith(("./", "../", ".\\", "..\\"))


@dataclass(frozen=True)
class Replacement:
    """Target of a ``replace`` directive."""

    path: str
    version: str = ""

    @property
    def is_local(self) -> bool:
        """True when the target is a filesystem directory rather than a module."""
        return _is_local_path(self.path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Replacement:
        return cls(path=data["Path"], version=data.get("Version", ""))


@dataclass(slots=True)
class ModuleRecord:
    """One module reported by ``go list -m -json all``.

    ``sum`` starts empty and is filled in from go.sum or ``go mod download``.
    """

    path: str
    version: str = ""
    main: bool = False
    replace: Replacement | None = None
    sum: str = ""

    @property
    def key(self) -> str:
        """Path that imports actually resolve to."""
        return self.replace.path if self.replace is not None else self.path

    @property
    def effective_version(self) -> str:
        return self.replace.version if self.replace is not None else self.version

    @property
    def query(self) -> str:
        """Version-qualified identifier understood by ``go mod download``."""
        return f"{self.key}@{self.effective_version}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleRecord:
        replace = data.get("Replace")
        return cls(
            path=data["Path"],
            version=data.get("Version", ""),
            main=data.get("Main", False),
            replace=Replacement.from_dict(replace) if replace else None,
        )


@dataclass(frozen=True)
class DownloadedModule:
    """One record reported by ``go mod download -json``."""

    path: str
    version: str = ""
    sum: str = ""
    error: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DownloadedModule:
        return cls(
            path=data["Path"],
            version=data.get("Version", ""),
            sum=data.get("Sum", ""),
            error=data.get("Error", ""),
        )
