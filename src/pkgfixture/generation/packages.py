"""Full synthetic package specifications derived from identity and seed.

Seed ``0`` is the minimal-package sentinel: it produces neither URL,
description nor archive. Seeds ``1`` and ``3`` skip only the archive, which
gives scenarios packages that must be fetched from their URL.
"""

from __future__ import annotations

import logging
import tarfile
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pkgfixture.archive import Archiver, TarGzArchiver
from pkgfixture.config import get_settings
from pkgfixture.errors import GenerationError
from pkgfixture.generation.contents import ContentEntry, build_contents
from pkgfixture.generation.seeded import check_seed
from pkgfixture.ids import PackageId

logger = logging.getLogger(__name__)

NO_ARCHIVE_SEEDS = frozenset({0, 1, 3})


class UrlKind(str, Enum):
    GIT = "git"
    LOCAL = "local"


@dataclass(frozen=True, slots=True)
class UrlDescriptor:
    kind: UrlKind
    path: str
    checksum: str
    revision: str | None = None


@dataclass(frozen=True, slots=True)
class OpamMetadata:
    name: str
    version: str
    maintainer: str


@dataclass(frozen=True, slots=True)
class PackageSpec:
    nv: PackageId
    prefix: str | None
    opam: OpamMetadata
    url: UrlDescriptor | None
    descr: str | None
    contents: tuple[ContentEntry, ...]
    archive: bytes | None


def build_opam(nv: PackageId, seed: int) -> OpamMetadata:
    return OpamMetadata(name=nv.name, version=nv.version, maintainer=f"test-{seed}")


def build_url(
    seed: int,
    kind: UrlKind | None = None,
    path: str | None = None,
) -> UrlDescriptor | None:
    if seed == 0:
        return None
    kind = kind or UrlKind.LOCAL
    revision = get_settings().test_branch if kind is UrlKind.GIT else None
    return UrlDescriptor(
        kind=kind,
        path=path or ".",
        checksum=f"checksum-{seed}",
        revision=revision,
    )


def build_descr(seed: int) -> str | None:
    if seed == 0:
        return None
    return f"This is a very nice package ({seed})!"


def build_prefix(nv: PackageId) -> str | None:
    if nv.version == "1":
        return None
    return f"prefix-{nv.name}"


def build_archive(
    nv: PackageId,
    contents: tuple[ContentEntry, ...],
    seed: int,
    archiver: Archiver | None = None,
) -> bytes | None:
    """Pack ``contents`` as ``<nv>/...`` and return the tarball bytes.

    Staging files and the tarball live in one temporary directory that is
    removed before returning, whether packing succeeded or not.
    """
    if seed in NO_ARCHIVE_SEEDS:
        return None
    archiver = archiver or TarGzArchiver()
    with tempfile.TemporaryDirectory(prefix=f"{nv}-archive-") as tmp:
        root = Path(tmp)
        staging = root / "staging" / str(nv)
        output = root / f"{nv}+opam.tar.gz"
        logger.debug("Creating an archive for %s in %s", nv, output)
        try:
            for entry in contents:
                target = staging / entry.path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(entry.content)
            staging.mkdir(parents=True, exist_ok=True)
            archiver.pack(staging, str(nv), output)
            return output.read_bytes()
        except (OSError, tarfile.TarError) as exc:
            raise GenerationError(f"cannot pack archive for {nv}: {exc}") from exc


def build_package(
    nv: PackageId,
    seed: int,
    *,
    url_kind: UrlKind | None = None,
    url_path: str | None = None,
    archiver: Archiver | None = None,
) -> PackageSpec:
    check_seed(seed)
    contents = build_contents(nv, seed)
    return PackageSpec(
        nv=nv,
        prefix=build_prefix(nv),
        opam=build_opam(nv, seed),
        url=build_url(seed, url_kind, url_path),
        descr=build_descr(seed),
        contents=contents,
        archive=build_archive(nv, contents, seed, archiver),
    )
