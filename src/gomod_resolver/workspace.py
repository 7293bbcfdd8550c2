"""Disposable copies of go.mod for running the go command.

``go list`` and ``go mod download`` may rewrite go.mod in place; they are
always pointed at a private copy so the caller's file is never touched.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_PREFIX = "gomod-resolver-"
MANIFEST_NAME = "go.mod"


class WorkspaceError(OSError):
    """Raised when the isolated workspace cannot be prepared."""


def copy_manifest_to_temp(manifest_path: Path) -> Path:
    """Copy ``manifest_path`` into a new temporary directory and return it.

    The caller owns the directory and must remove it.
    """
    try:
        source = manifest_path.open("rb")
    except OSError as exc:
        raise WorkspaceError(f"Failed to open manifest {manifest_path}: {exc}") from exc

    with source:
        try:
            temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        except OSError as exc:
            raise WorkspaceError(f"Failed to create temporary directory: {exc}") from exc

        try:
            with (temp_dir / MANIFEST_NAME).open("wb") as copy:
                shutil.copyfileobj(source, copy)
        except OSError as exc:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise WorkspaceError(f"Failed to copy {manifest_path} to {temp_dir}: {exc}") from exc

    return temp_dir


@contextmanager
def isolated_manifest(manifest_path: Path) -> Iterator[Path]:
    """Yield a temporary directory holding a copy of ``manifest_path``.

    The directory is removed when the block exits, whether or not it raised.
    """
    temp_dir = copy_manifest_to_temp(Path(manifest_path))
    logger.debug("Copied %s to %s", manifest_path, temp_dir)
    try:
        yield temp_dir
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
