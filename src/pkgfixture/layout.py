"""Paths inside a fixture repository and inside a package-manager root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pkgfixture.ids import PackageId

PACKAGES_DIR = "packages"
ARCHIVES_DIR = "archives"


def archive_name(nv: PackageId) -> str:
    return f"{nv}+opam.tar.gz"


@dataclass(frozen=True, slots=True)
class PackageFiles:
    opam: Path
    descr: Path
    url: Path
    archive: Path

    def all(self) -> tuple[Path, Path, Path, Path]:
        return (self.opam, self.descr, self.url, self.archive)


@dataclass(frozen=True, slots=True)
class RepositoryLayout:
    root: Path

    @property
    def packages_dir(self) -> Path:
        return self.root / PACKAGES_DIR

    @property
    def archives_dir(self) -> Path:
        return self.root / ARCHIVES_DIR

    def package_dir(self, prefix: str | None, nv: PackageId) -> Path:
        base = self.packages_dir if prefix is None else self.packages_dir / prefix
        return base / str(nv)

    def files(self, prefix: str | None, nv: PackageId) -> PackageFiles:
        package_dir = self.package_dir(prefix, nv)
        return PackageFiles(
            opam=package_dir / "opam",
            descr=package_dir / "descr",
            url=package_dir / "url",
            archive=self.archives_dir / archive_name(nv),
        )


@dataclass(frozen=True, slots=True)
class OpamRootLayout:
    root: Path
    switch: str = "system"

    @property
    def packages_dir(self) -> Path:
        return self.root / PACKAGES_DIR

    @property
    def archives_dir(self) -> Path:
        return self.root / ARCHIVES_DIR

    @property
    def lib_dir(self) -> Path:
        return self.root / self.switch / "lib"

    @property
    def bin_dir(self) -> Path:
        return self.root / self.switch / "bin"


def contents_dir(contents_root: Path, nv: PackageId) -> Path:
    return contents_root / str(nv)
