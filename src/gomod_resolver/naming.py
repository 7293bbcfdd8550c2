"""Repository naming for Go import paths."""

from __future__ import annotations


_REPLACEMENTS = str.maketrans({".": "_", "-": "_"})


def import_path_to_repo_name(importpath: str) -> str:
    """Return the Bazel repository name for ``importpath``.

    The host name is reversed label by label and joined with the rest of the
    path, so ``github.com/foo/bar-baz`` becomes ``com_github_foo_bar_baz``.
    """
    components = importpath.lower().split("/")
    labels = components[0].split(".")
    repo = ".".join(list(reversed(labels)) + components[1:])
    return repo.translate(_REPLACEMENTS)
