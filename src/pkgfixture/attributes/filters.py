"""Index filters: pick the base a file's key is relative to, or drop it."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class IndexFilter(Protocol):
    def __call__(self, path: Path) -> Path | None: ...


@dataclass(frozen=True, slots=True)
class IncludeAll:
    root: Path

    def __call__(self, path: Path) -> Path | None:
        return self.root


@dataclass(frozen=True, slots=True)
class RebaseToPackageParent:
    """Key files as ``<package-dir>/<file>``, whatever lies above the package dir.

    ``packages/prefix-foo/foo.2/opam`` and ``packages/foo.2/opam`` both map
    to ``foo.2/opam``.
    """

    def __call__(self, path: Path) -> Path | None:
        return path.parent.parent


@dataclass(frozen=True, slots=True)
class ExcludeVcsAndManifest:
    """Installed payload only: no ``.git`` internals, no ``*.install`` manifest."""

    package_root: Path
    vcs_dir: str = ".git"
    manifest_suffix: str = ".install"

    def __call__(self, path: Path) -> Path | None:
        if path.is_relative_to(self.package_root / self.vcs_dir):
            return None
        if path.name.endswith(self.manifest_suffix):
            return None
        return self.package_root
