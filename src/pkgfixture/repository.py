"""Persist generated packages into a repository tree and a contents tree."""

from __future__ import annotations

import logging
from pathlib import Path

from pkgfixture import formats
from pkgfixture.errors import PersistenceError
from pkgfixture.generation import ContentEntry, PackageSpec
from pkgfixture.ids import PackageId
from pkgfixture.layout import RepositoryLayout, contents_dir
from pkgfixture.vcs import ContentStore, log_commit

logger = logging.getLogger(__name__)


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise PersistenceError(f"cannot remove {path}: {exc}", path=path) from exc


def _write_bytes(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise PersistenceError(f"cannot write {path}: {exc}", path=path) from exc


class RepositoryWriter:
    def __init__(self, store: ContentStore) -> None:
        self.store = store

    def read_contents(self, contents_root: Path, nv: PackageId) -> tuple[ContentEntry, ...]:
        logger.debug("read contents %s", nv)
        root = contents_dir(contents_root, nv)
        entries = [
            ContentEntry(path=path.relative_to(root).as_posix(), content=path.read_bytes())
            for path in root.rglob("*")
            if path.is_file() and not path.is_relative_to(root / ".git")
        ]
        return tuple(sorted(entries))

    def write_contents(
        self,
        contents_root: Path,
        nv: PackageId,
        entries: tuple[ContentEntry, ...],
    ) -> str:
        """Write and commit a package's payload; returns the new revision."""
        logger.debug("write contents %s", nv)
        root = contents_dir(contents_root, nv)
        if not root.is_dir():
            try:
                root.mkdir(parents=True)
            except OSError as exc:
                raise PersistenceError(f"cannot create {root}: {exc}", path=root) from exc
            self.store.init(root)
            self.store.branch(root)
        for entry in sorted(entries):
            file = root / entry.path
            _write_bytes(file, entry.content)
            self.store.add(root, file)
        self.store.commit(root, f"Add new content for package {nv}")
        revision = self.store.revision(root)
        log_commit(root, revision, nv, "Adding contents")
        return revision

    def write_package(self, repo_root: Path, contents_root: Path, spec: PackageSpec) -> None:
        files = RepositoryLayout(repo_root).files(spec.prefix, spec.nv)
        for path in files.all():
            _remove(path)
        formats.write_opam(files.opam, spec.opam)
        if spec.descr is not None:
            formats.write_descr(files.descr, spec.descr)
        if spec.url is not None:
            formats.write_url(files.url, spec.url)
        if spec.archive is not None:
            _write_bytes(files.archive, spec.archive)
        self.write_contents(contents_root, spec.nv, spec.contents)

    def read_package(
        self,
        repo_root: Path,
        contents_root: Path,
        prefix: str | None,
        nv: PackageId,
    ) -> PackageSpec:
        files = RepositoryLayout(repo_root).files(prefix, nv)
        return PackageSpec(
            nv=nv,
            prefix=prefix,
            opam=formats.read_opam(files.opam),
            url=formats.read_url(files.url) if files.url.exists() else None,
            descr=formats.read_descr(files.descr) if files.descr.exists() else None,
            contents=self.read_contents(contents_root, nv),
            archive=files.archive.read_bytes() if files.archive.exists() else None,
        )

    def add_package(self, repo_root: Path, contents_root: Path, spec: PackageSpec) -> None:
        """Write ``spec`` and commit each of its repository files separately."""
        self.write_package(repo_root, contents_root, spec)
        for file in RepositoryLayout(repo_root).files(spec.prefix, spec.nv).all():
            if not file.exists():
                continue
            self.store.commit_file(repo_root, file, f"Add package {spec.nv} ({file})")
            revision = self.store.revision(repo_root)
            log_commit(repo_root, revision, spec.nv, f"Add {file}")
