"""Output models handed to the build-file generator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoDescriptor:
    """A resolved external repository.

    ``importpath`` is the module path that Go sources import. When the module
    is replaced, ``replace`` holds the path fetched instead and ``version`` is
    the replacement's version.
    """

    name: str
    importpath: str
    version: str
    sum: str
    replace: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Repository name must be non-empty")
        if not self.importpath:
            raise ValueError("Import path must be non-empty")
        if not self.sum:
            raise ValueError(f"Checksum must be non-empty for {self.importpath}")

    def to_dict(self) -> dict[str, str]:
        data = {
            "name": self.name,
            "importpath": self.importpath,
            "version": self.version,
            "sum": self.sum,
        }
        if self.replace is not None:
            data["replace"] = self.replace
        return data


@dataclass(frozen=True)
class ResolutionResult:
    """Sorted descriptors plus the non-fatal warnings raised while resolving."""

    descriptors: tuple[RepoDescriptor, ...]
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        names = [descriptor.name for descriptor in self.descriptors]
        if names != sorted(names) or len(set(names)) != len(names):
            raise ValueError("Descriptors must be unique and sorted by name")

    def to_dict(self) -> dict[str, object]:
        return {
            "modules": [descriptor.to_dict() for descriptor in self.descriptors],
            "warnings": list(self.warnings),
        }
