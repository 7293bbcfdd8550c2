"""gomod-resolver core package.

Resolves the full external module set of a ``go.mod`` (direct, indirect and
replaced modules, with checksums) for consumption by a build-file generator.
"""

from .core import resolve_modules
from .models import ResolutionResult, RepoDescriptor

__all__ = [
    "RepoDescriptor",
    "ResolutionResult",
    "resolve_modules",
]
