"""Core resolution entrypoint.

This module MUST NOT format build files or parse command lines so it can be
used both by the ``gomod-resolver`` CLI and by build-file generators directly.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from .config import Settings
from .gotool import GoCommand, ModuleAuthority
from .models import ModuleTable, RepoDescriptor, ResolutionResult
from .naming import import_path_to_repo_name
from .parsers.go_sum import parse as parse_go_sum
from .workspace import isolated_manifest

logger = logging.getLogger(__name__)


class _Warnings(list):
    """Warnings collected during one run; each is logged as it is added."""

    def add(self, message: str) -> None:
        logger.warning("%s", message)
        self.append(message)


def resolve_modules(
    manifest_path: Path | str,
    *,
    authority: ModuleAuthority | None = None,
    settings: Settings | None = None,
) -> ResolutionResult:
    """Resolve every external module required to build the module at ``manifest_path``.

    Params:
        manifest_path: path to the project's go.mod; it is copied, never written
        authority: source of the module graph and checksums; defaults to the go
            command configured by ``settings``
        settings: resolver settings; defaults to ``Settings()``

    Returns: descriptors sorted by repository name, plus non-fatal warnings

    Raises WorkspaceError, GoCommandError and ModuleDecodeError on fatal errors.
    """
    manifest_path = Path(manifest_path)
    settings = settings or Settings()
    if authority is None:
        deadline = time.monotonic() + settings.timeout if settings.timeout else None
        authority = GoCommand(settings.go_tool, env=settings.env, deadline=deadline)

    warnings = _Warnings()

    with isolated_manifest(manifest_path) as workdir:
        table = _index_modules(authority, workdir, warnings)
        _merge_go_sum(table, manifest_path.parent / settings.sum_filename, warnings)
        _download_missing_sums(authority, workdir, table, warnings)

    descriptors = _build_descriptors(table, warnings)
    return ResolutionResult(descriptors=tuple(descriptors), warnings=tuple(warnings))


# ---- Pipeline stages -------------------------------------------------------------------


def _index_modules(authority: ModuleAuthority, workdir: Path, warnings: _Warnings) -> ModuleTable:
    """List all modules except the main module, including indirect dependencies."""
    table = ModuleTable()
    for mod in authority.list_modules(workdir):
        if mod.main:
            continue
        if mod.replace is not None and mod.replace.is_local:
            warnings.add(
                f"file path replacements are not supported: {mod.path} -> {mod.replace.path}"
            )
            continue
        existing = table.add(mod)
        if existing is not None:
            warnings.add(
                f"path collision on {mod.key}: {mod.path} conflicts with {existing.path}; "
                f"keeping {existing.path}"
            )
    logger.debug("Indexed %d modules", len(table))
    return table


def _merge_go_sum(table: ModuleTable, go_sum_path: Path, warnings: _Warnings) -> None:
    """Attach checksums recorded in go.sum. Ideally, they're all there."""
    ledger = parse_go_sum(go_sum_path)
    for skipped in ledger.skipped_records:
        warnings.add(f"{go_sum_path}: {skipped}")

    for path, version, checksum in ledger.entries:
        mod = table.get(path)
        if mod is not None and mod.effective_version == version:
            mod.sum = checksum


def _download_missing_sums(
    authority: ModuleAuthority, workdir: Path, table: ModuleTable, warnings: _Warnings
) -> None:
    """Fetch checksums for every module go.sum did not cover, in a single batch."""
    targets = [mod.query for mod in table.missing_sums()]
    if not targets:
        return

    logger.info("Downloading %d modules missing from go.sum", len(targets))
    for dl in authority.download(workdir, targets):
        if dl.error:
            warnings.add(f"go mod download failed for {dl.path}@{dl.version}: {dl.error}")
            continue
        mod = table.get(dl.path)
        if mod is None:
            continue
        mod.sum = dl.sum


def _build_descriptors(table: ModuleTable, warnings: _Warnings) -> list[RepoDescriptor]:
    """Translate module records into descriptors sorted by repository name."""
    by_name: dict[str, RepoDescriptor] = {}
    for mod in sorted(table, key=lambda m: m.path):
        if not mod.sum:
            warnings.add(f"could not determine sum for module {mod.path}")
            continue

        version, replace = mod.version, None
        if mod.replace is not None:
            version, replace = mod.replace.version, mod.replace.path

        descriptor = RepoDescriptor(
            name=import_path_to_repo_name(mod.path),
            importpath=mod.path,
            version=version,
            sum=mod.sum,
            replace=replace,
        )

        existing = by_name.get(descriptor.name)
        if existing is not None:
            warnings.add(
                f"repository name collision on {descriptor.name}: {mod.path} conflicts with "
                f"{existing.importpath}; keeping {existing.importpath}"
            )
            continue
        by_name[descriptor.name] = descriptor

    return [by_name[name] for name in sorted(by_name)]
