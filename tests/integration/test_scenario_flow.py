from pathlib import Path

import pytest

from pkgfixture.errors import SyncErrors
from pkgfixture.generation import UrlKind, new_context
from pkgfixture.ids import PackageId
from pkgfixture.scenario import Scenario
from pkgfixture.vcs import GitContentStore

pytestmark = pytest.mark.usefixtures("git_available")


@pytest.fixture
def scenario(tmp_path: Path, recording_client) -> Scenario:
    repo = tmp_path / "repo"
    contents = tmp_path / "contents"
    return Scenario(
        repo_root=repo,
        contents_root=contents,
        opam_root=tmp_path / "opam",
        context=new_context(0),
        store=GitContentStore(),
        client=recording_client(repo, contents),
    )


def test_init_repository_drives_collaborators(scenario: Scenario) -> None:
    scenario.init_repository()
    assert (scenario.repo_root / ".git").is_dir()
    assert scenario.client.calls == [
        ("init", str(scenario.opam_root), "testing", str(scenario.repo_root), "git"),
    ]
    assert len(scenario.store.commits(scenario.repo_root)) == 1


def test_publish_install_and_check(scenario: Scenario) -> None:
    scenario.init_repository()
    nv = PackageId("foo", "1")
    spec = scenario.publish(nv)
    assert spec.url is None
    assert nv in scenario.published
    scenario.install(nv)
    scenario.check(nv)


@pytest.mark.parametrize("seed", [1, 2, 5])
def test_publish_with_seed_checks_out(scenario: Scenario, seed: int) -> None:
    scenario.init_repository()
    nv = PackageId("bar", "2")
    spec = scenario.publish(nv, seed=seed)
    assert spec.url is not None
    assert spec.url.kind is UrlKind.GIT
    assert spec.url.path == str(scenario.contents_root / "bar.2")
    assert spec.prefix == "prefix-bar"
    # one commit per repository file, on top of the initial commit
    expected = 1 + sum(
        1 for present in (True, spec.descr, spec.url, spec.archive) if present is not None
    )
    assert len(scenario.store.commits(scenario.repo_root)) == expected
    scenario.install(nv)
    scenario.check(nv)


def test_check_detects_missing_install(scenario: Scenario) -> None:
    scenario.init_repository()
    nv = PackageId("foo", "1")
    scenario.publish(nv, seed=4)
    scenario.install(nv)
    (scenario.opam_root / "system" / "bin" / "c").unlink()
    (scenario.opam_root / "archives" / "foo.1+opam.tar.gz").unlink()
    with pytest.raises(SyncErrors) as info:
        scenario.check()
    assert [(err.source, err.key) for err in info.value.errors] == [
        ("repo", "foo.1+opam.tar.gz"),
    ]
    (scenario.opam_root / "archives").rmdir()
    scenario.publish(nv, seed=0)
    for name in ("descr", "url"):
        (scenario.opam_root / "packages" / "foo.1" / name).unlink(missing_ok=True)
    scenario.check()
    with pytest.raises(SyncErrors) as info:
        scenario.check(nv)
    assert [(err.source, err.key) for err in info.value.errors] == [("contents", "c")]


def test_client_operations_are_delegated(scenario: Scenario) -> None:
    nv = PackageId("foo", "2")
    scenario.update()
    scenario.upgrade(nv)
    scenario.pin("foo", scenario.contents_root / "foo.2")
    assert scenario.client.calls == [
        ("update", str(scenario.opam_root)),
        ("upgrade", str(scenario.opam_root), "foo.2"),
        ("pin", str(scenario.opam_root), "foo", str(scenario.contents_root / "foo.2")),
    ]
