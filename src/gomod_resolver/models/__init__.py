"""Data models for a module resolution run."""

from __future__ import annotations

from .descriptor import RepoDescriptor, ResolutionResult
from .module_record import DownloadedModule, ModuleRecord, Replacement
from .module_table import ModuleTable

__all__ = [
    "DownloadedModule",
    "ModuleRecord",
    "ModuleTable",
    "Replacement",
    "RepoDescriptor",
    "ResolutionResult",
]
