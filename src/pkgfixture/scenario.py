"""Drive one repository/package-manager scenario end to end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pkgfixture.check import check_package_contents, check_repository
from pkgfixture.generation import GenerationContext, PackageSpec, UrlKind, new_context
from pkgfixture.ids import PackageId
from pkgfixture.layout import contents_dir
from pkgfixture.logging import bind_scenario
from pkgfixture.opam import OpamClient, PackageManagerClient, RepositorySource
from pkgfixture.repository import RepositoryWriter
from pkgfixture.vcs import ContentStore, GitContentStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Scenario:
    repo_root: Path
    contents_root: Path
    opam_root: Path
    repo_name: str = "testing"
    url_kind: UrlKind = UrlKind.GIT
    context: GenerationContext = field(default_factory=new_context)
    store: ContentStore = field(default_factory=GitContentStore)
    client: PackageManagerClient = field(default_factory=OpamClient)
    published: dict[PackageId, PackageSpec] = field(default_factory=dict)

    @property
    def writer(self) -> RepositoryWriter:
        return RepositoryWriter(self.store)

    def init_repository(self) -> None:
        self.repo_root.mkdir(parents=True, exist_ok=True)
        self.contents_root.mkdir(parents=True, exist_ok=True)
        self.store.init(self.repo_root)
        self.store.branch(self.repo_root)
        self.store.commit(self.repo_root, "Initial commit")
        bind_scenario(repo=self.repo_root)
        self.client.init(
            self.opam_root,
            RepositorySource(name=self.repo_name, address=self.repo_root, kind="git"),
        )

    def generate(self, nv: PackageId, seed: int | None = None) -> PackageSpec:
        if seed is not None:
            self.context.set_seed(seed)
        url_path = str(contents_dir(self.contents_root, nv))
        return self.context.package(nv, url_kind=self.url_kind, url_path=url_path)

    def publish(self, nv: PackageId, seed: int | None = None) -> PackageSpec:
        spec = self.generate(nv, seed)
        bind_scenario(nv=nv)
        logger.info("publishing %s (seed %d)", nv, self.context.seed)
        self.writer.add_package(self.repo_root, self.contents_root, spec)
        self.published[nv] = spec
        return spec

    def install(self, nv: PackageId) -> None:
        self.client.install(self.opam_root, nv)

    def update(self) -> None:
        self.client.update(self.opam_root)

    def upgrade(self, nv: PackageId) -> None:
        self.client.upgrade(self.opam_root, nv)

    def pin(self, name: str, path: Path) -> None:
        self.client.pin(self.opam_root, name, path)

    def check(self, nv: PackageId | None = None) -> None:
        check_repository(self.repo_root, self.opam_root)
        if nv is not None:
            check_package_contents(self.contents_root, self.opam_root, nv)
