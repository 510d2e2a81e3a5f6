"""Consistency checks between a generated tree and what the package manager produced.

Only key *presence* is compared by default: a file present on both sides
with different bytes is not a divergence. Pass ``compare_content=True`` to
also report shared keys whose fingerprints differ.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pkgfixture.attributes import (
    AttributeIndex,
    ExcludeVcsAndManifest,
    IndexFilter,
    RebaseToPackageParent,
    build_index,
    merge_indexes,
)
from pkgfixture.config import get_settings
from pkgfixture.errors import SyncErrors
from pkgfixture.ids import PackageId
from pkgfixture.layout import OpamRootLayout, RepositoryLayout, contents_dir

logger = logging.getLogger(__name__)

Labelled = tuple[str, AttributeIndex]


@dataclass(frozen=True, slots=True)
class SyncError:
    source: str
    key: str
    file: Path


def compare(a: Labelled, b: Labelled, *, compare_content: bool = False) -> list[SyncError]:
    name_a, index_a = a
    name_b, index_b = b
    errors: list[SyncError] = []
    for key in sorted(index_a.keys() ^ index_b.keys()):
        if key in index_a:
            errors.append(SyncError(source=name_a, key=key, file=index_a[key].path))
        else:
            errors.append(SyncError(source=name_b, key=key, file=index_b[key].path))
    if compare_content:
        for key in sorted(index_a.keys() & index_b.keys()):
            if index_a[key].record == index_b[key].record:
                continue
            errors.append(SyncError(source=name_a, key=key, file=index_a[key].path))
            errors.append(SyncError(source=name_b, key=key, file=index_b[key].path))
    return errors


def _dump(file: Path) -> str:
    if not get_settings().dump_contents:
        return ""
    try:
        return file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        return f"<unreadable: {exc}>"


def report_sync_errors(errors: list[SyncError]) -> None:
    logger.error("\n -- Sync error --")
    for err in errors:
        logger.error("%s: %s\n%s\n%s\n", err.source, err.key, err.file, _dump(err.file))
    raise SyncErrors(errors)


def check_attributes(a: Labelled, b: Labelled, *, compare_content: bool = False) -> None:
    errors = compare(a, b, compare_content=compare_content)
    if errors:
        report_sync_errors(errors)


def check_dirs(
    a: tuple[str, Path],
    b: tuple[str, Path],
    *,
    index_filter: IndexFilter | None = None,
    compare_content: bool = False,
) -> None:
    (name_a, dir_a), (name_b, dir_b) = a, b
    check_attributes(
        (name_a, build_index(dir_a, index_filter)),
        (name_b, build_index(dir_b, index_filter)),
        compare_content=compare_content,
    )


def check_repository(repo_root: Path, opam_root: Path) -> None:
    repo = RepositoryLayout(repo_root)
    opam = OpamRootLayout(opam_root)
    check_dirs(
        ("repo", repo.packages_dir),
        ("opam", opam.packages_dir),
        index_filter=RebaseToPackageParent(),
    )
    check_dirs(("repo", repo.archives_dir), ("opam", opam.archives_dir))


def installed_index(opam_root: Path, switch: str | None = None) -> AttributeIndex:
    layout = OpamRootLayout(opam_root, switch or get_settings().switch)
    return merge_indexes(build_index(layout.lib_dir), build_index(layout.bin_dir))


def check_package_contents(
    contents_root: Path,
    opam_root: Path,
    nv: PackageId,
    switch: str | None = None,
) -> None:
    package_root = contents_dir(contents_root, nv)
    contents = build_index(package_root, ExcludeVcsAndManifest(package_root))
    check_attributes(("opam", installed_index(opam_root, switch)), ("contents", contents))
