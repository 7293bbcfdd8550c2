"""Locate and invoke the go command.

``GoCommand`` is the production ``ModuleAuthority``. Tests and embedding
callers can pass any object with the same two methods to
``core.resolve_modules`` instead of running a real toolchain.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import threading
import time
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import IO, Protocol, TypeVar, cast

from .models import DownloadedModule, ModuleRecord
from .parsers.go_json import ModuleDecodeError, decode_downloads, decode_module_list

logger = logging.getLogger(__name__)

GOROOT_ENV_VAR = "GOROOT"

T = TypeVar("T")


class GoCommandError(RuntimeError):
    """Raised when the go command cannot be started or exits unsuccessfully."""

    def __init__(self, message: str, args: Sequence[str] = (), returncode: int | None = None):
        super().__init__(message)
        self.command = list(args)
        self.returncode = returncode


class GoCommandTimeout(GoCommandError):
    """Raised when the go command is killed for running past its deadline."""


class ModuleAuthority(Protocol):
    """Source of the module graph and of missing module checksums."""

    def list_modules(self, workdir: Path) -> Iterable[ModuleRecord]: ...

    def download(self, workdir: Path, targets: Sequence[str]) -> Iterable[DownloadedModule]: ...


def find_go_tool(environ: Mapping[str, str] | None = None, platform: str | None = None) -> str:
    """Return the path of the go executable to run.

    ``$GOROOT/bin/go`` is preferred when GOROOT is set, so that a toolchain
    configured by the build system wins over whatever is on PATH. Otherwise
    the bare name is returned and PATH lookup is left to the process launcher.
    """
    environ = os.environ if environ is None else environ
    platform = sys.platform if platform is None else platform

    path = "go"
    goroot = environ.get(GOROOT_ENV_VAR)
    if goroot is not None:
        path = os.path.join(goroot, "bin", "go")
    if platform.startswith("win"):
        path += ".exe"
    return path


class GoCommand:
    """Run go subcommands in a module directory and decode their JSON output."""

    def __init__(
        self,
        go_tool: str | None = None,
        *,
        env: Mapping[str, str] | None = None,
        deadline: float | None = None,
    ) -> None:
        self.go_tool = go_tool or find_go_tool()
        self.env = dict(env or {})
        # Absolute time.monotonic() value shared by every invocation of a run.
        self.deadline = deadline

    def list_modules(self, workdir: Path) -> Iterator[ModuleRecord]:
        """List every module in the build list, including the main module."""
        return self._run(["list", "-m", "-json", "all"], workdir, decode_module_list)

    def download(self, workdir: Path, targets: Sequence[str]) -> Iterator[DownloadedModule]:
        """Download ``targets`` (``path@version``) and report their checksums."""
        return self._run(["mod", "download", "-json", *targets], workdir, decode_downloads)

    def _remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def _run(
        self,
        subcommand: list[str],
        workdir: Path,
        decode: Callable[[IO[bytes]], Iterator[T]],
    ) -> Iterator[T]:
        args = [self.go_tool, *subcommand]
        command = " ".join(args)
        env = {**os.environ, **self.env} if self.env else None

        remaining = self._remaining()
        if remaining is not None and remaining <= 0:
            raise GoCommandTimeout(f"Deadline expired before running {command}", args)

        logger.debug("Running: %s (in %s)", command, workdir)
        try:
            proc = subprocess.Popen(args, cwd=workdir, env=env, stdout=subprocess.PIPE)
        except OSError as exc:
            raise GoCommandError(f"Failed to run {command}: {exc}", args) from exc

        expired = threading.Event()

        def _kill() -> None:
            expired.set()
            proc.kill()

        watchdog = threading.Timer(remaining, _kill) if remaining is not None else None
        if watchdog is not None:
            watchdog.daemon = True
            watchdog.start()

        stdout = cast(IO[bytes], proc.stdout)
        finished = False
        try:
            try:
                yield from decode(stdout)
            except ModuleDecodeError as exc:
                if expired.is_set():
                    raise GoCommandTimeout(f"{command} timed out and was killed", args) from exc
                # A failing command may leave a partial record behind; its exit
                # status takes precedence over the decode error.
                stdout.read()
                returncode = proc.wait()
                if returncode != 0:
                    raise GoCommandError(
                        f"{command} exited with status {returncode}", args, returncode
                    ) from exc
                raise
            stdout.read()
            returncode = proc.wait()
            finished = True
        finally:
            if watchdog is not None:
                watchdog.cancel()
            if not finished:
                proc.kill()
                proc.wait()
            stdout.close()

        if expired.is_set():
            raise GoCommandTimeout(f"{command} timed out and was killed", args, returncode)
        if returncode != 0:
            raise GoCommandError(f"{command} exited with status {returncode}", args, returncode)
