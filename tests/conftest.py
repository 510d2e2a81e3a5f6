import logging
import os
import shutil
from pathlib import Path

import pytest

from pkgfixture.config import get_settings
from pkgfixture.ids import PackageId
from pkgfixture.logging import HANDLER_NAME, clear_scenario
from pkgfixture.opam import RepositorySource


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("PKGFIXTURE_SEED", "1664")
    monkeypatch.setenv("PKGFIXTURE_TEST_BRANCH", "test")
    monkeypatch.setenv("PKGFIXTURE_SWITCH", "system")
    monkeypatch.setenv("PKGFIXTURE_DUMP_CONTENTS", "1")
    monkeypatch.setenv("PKGFIXTURE_GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("PKGFIXTURE_GIT_AUTHOR_EMAIL", "test@example.com")
    for key in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
        monkeypatch.delenv(key, raising=False)
    root = logging.getLogger()
    level = root.level
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
    root.setLevel(level)
    clear_scenario()


class MemoryContentStore:
    """Records version-control calls instead of running git."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.heads: dict[Path, int] = {}

    def init(self, repo: Path) -> None:
        self.calls.append(("init", str(repo)))
        self.heads.setdefault(repo, 0)

    def add(self, repo: Path, file: Path) -> None:
        if file.exists():
            self.calls.append(("add", str(repo), file.relative_to(repo).as_posix()))

    def commit(self, repo: Path, message: str, allow_empty: bool = True) -> None:
        self.calls.append(("commit", str(repo), message))
        self.heads[repo] = self.heads.get(repo, 0) + 1

    def commit_file(self, repo: Path, file: Path, message: str) -> None:
        from pkgfixture.errors import PersistenceError

        if not file.exists():
            raise PersistenceError(f"Cannot commit {file}", path=file)
        self.calls.append(("commit_file", str(repo), file.relative_to(repo).as_posix(), message))
        self.heads[repo] = self.heads.get(repo, 0) + 1

    def revision(self, repo: Path) -> str:
        return f"rev{self.heads.get(repo, 0)}"

    def commits(self, repo: Path) -> list[str]:
        return [f"rev{n}" for n in range(self.heads.get(repo, 0), 0, -1)]

    def branch(self, repo: Path) -> None:
        self.calls.append(("branch", str(repo)))

    def checkout(self, repo: Path, revision: str) -> None:
        self.calls.append(("checkout", str(repo), revision))

    def named(self, name: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == name]


class RecordingClient:
    """Package-manager double; ``install`` lays files out the way opam would."""

    def __init__(self, repo_root: Path | None = None, contents_root: Path | None = None) -> None:
        self.repo_root = repo_root
        self.contents_root = contents_root
        self.calls: list[tuple[str, ...]] = []

    def init(self, opam_root: Path, source: RepositorySource) -> None:
        self.calls.append(("init", str(opam_root), source.name, str(source.address), source.kind))

    def install(self, opam_root: Path, nv: PackageId) -> None:
        self.calls.append(("install", str(opam_root), str(nv)))
        if self.repo_root is not None and self.contents_root is not None:
            install_like_opam(self.repo_root, self.contents_root, opam_root, nv)

    def update(self, opam_root: Path) -> None:
        self.calls.append(("update", str(opam_root)))

    def upgrade(self, opam_root: Path, nv: PackageId) -> None:
        self.calls.append(("upgrade", str(opam_root), str(nv)))

    def pin(self, opam_root: Path, name: str, path: Path) -> None:
        self.calls.append(("pin", str(opam_root), name, str(path)))


def install_like_opam(repo_root: Path, contents_root: Path, opam_root: Path, nv: PackageId) -> None:
    """Mirror repository metadata/archives and install the payload into the switch."""
    switch = opam_root / "system"
    for source in (repo_root / "packages").rglob(str(nv)):
        if not source.is_dir():
            continue
        target = opam_root / "packages" / str(nv)
        target.mkdir(parents=True, exist_ok=True)
        for file in source.iterdir():
            (target / file.name).write_bytes(file.read_bytes())
    archive = repo_root / "archives" / f"{nv}+opam.tar.gz"
    if archive.exists():
        (opam_root / "archives").mkdir(parents=True, exist_ok=True)
        (opam_root / "archives" / archive.name).write_bytes(archive.read_bytes())
    payload = contents_root / str(nv)
    for rel, section in (("a/a", "lib"), ("a/b", "lib"), ("c", "bin")):
        target = switch / section / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes((payload / rel).read_bytes())


@pytest.fixture
def memory_store() -> MemoryContentStore:
    return MemoryContentStore()


@pytest.fixture
def foo1() -> PackageId:
    return PackageId("foo", "1")


@pytest.fixture
def git_available() -> None:
    if shutil.which(os.environ.get("PKGFIXTURE_GIT_BIN", "git")) is None:
        pytest.skip("git not available")


@pytest.fixture
def recording_client() -> type[RecordingClient]:
    return RecordingClient
