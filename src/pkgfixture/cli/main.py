"""Click CLI group: show, write, check-repo and check-contents commands."""

from __future__ import annotations

import hashlib
import json
import sys
from collections.abc import Callable
from pathlib import Path

import click

from pkgfixture.check import check_package_contents, check_repository
from pkgfixture.config import get_settings, validate_settings
from pkgfixture.errors import PkgFixtureError, SyncErrors
from pkgfixture.generation import PackageSpec, UrlKind, new_context
from pkgfixture.ids import PackageId
from pkgfixture.logging import configure_from_settings
from pkgfixture.repository import RepositoryWriter
from pkgfixture.vcs import GitContentStore

EXIT_SYNC_ERRORS = 1
EXIT_FAILURE = 2


class FixtureFailure(click.ClickException):
    """A fixture operation failed for a reason other than a divergence."""

    exit_code = EXIT_FAILURE


def _parse_nv(_ctx: click.Context, _param: click.Parameter, value: str) -> PackageId:
    try:
        return PackageId.parse(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


def spec_payload(spec: PackageSpec) -> dict[str, object]:
    archive: dict[str, object] | None = None
    if spec.archive is not None:
        archive = {
            "size": len(spec.archive),
            "sha256": hashlib.sha256(spec.archive).hexdigest(),
        }
    url: dict[str, object] | None = None
    if spec.url is not None:
        url = {
            "kind": spec.url.kind.value,
            "path": spec.url.path,
            "revision": spec.url.revision,
            "checksum": spec.url.checksum,
        }
    return {
        "nv": str(spec.nv),
        "prefix": spec.prefix,
        "opam": {
            "name": spec.opam.name,
            "version": spec.opam.version,
            "maintainer": spec.opam.maintainer,
        },
        "url": url,
        "descr": spec.descr,
        "contents": [
            {"path": entry.path, "content": entry.content.decode("utf-8")}
            for entry in spec.contents
        ],
        "archive": archive,
    }


def _run_check(fn: Callable[..., None], *args: object) -> None:
    try:
        fn(*args)
    except SyncErrors as exc:
        click.echo(str(exc), err=True)
        sys.exit(EXIT_SYNC_ERRORS)
    except PkgFixtureError as exc:
        click.echo(f"error: {exc}", err=True)
        sys.exit(EXIT_FAILURE)
    click.echo("no divergence")


url_kind_option = click.option(
    "--url-kind",
    type=click.Choice([kind.value for kind in UrlKind]),
    default=None,
    help="URL kind for the package (default: local).",
)
seed_option = click.option(
    "--seed", type=int, default=None, help="Generation seed (default: PKGFIXTURE_SEED)."
)


@click.group()
def cli() -> None:
    """Synthetic package-repository fixtures and consistency checks."""
    settings = get_settings()
    try:
        validate_settings(settings)
    except PkgFixtureError as exc:
        raise FixtureFailure(str(exc)) from exc
    configure_from_settings(settings)


@cli.command()
@click.argument("nv", callback=_parse_nv)
@seed_option
@url_kind_option
@click.option("--url-path", type=str, default=None, help="URL location.")
def show(nv: PackageId, seed: int | None, url_kind: str | None, url_path: str | None) -> None:
    """Print the generated package specification as JSON."""
    try:
        spec = new_context(seed).package(
            nv, url_kind=UrlKind(url_kind) if url_kind else None, url_path=url_path
        )
    except PkgFixtureError as exc:
        raise FixtureFailure(str(exc)) from exc
    click.echo(json.dumps(spec_payload(spec), indent=2, sort_keys=True))


@cli.command()
@click.argument("repo", type=click.Path(file_okay=False, path_type=Path))
@click.argument("contents", type=click.Path(file_okay=False, path_type=Path))
@click.argument("nv", callback=_parse_nv)
@seed_option
@url_kind_option
@click.option("--url-path", type=str, default=None, help="URL location.")
@click.option("--commit", is_flag=True, help="Also commit each repository file.")
def write(
    repo: Path,
    contents: Path,
    nv: PackageId,
    seed: int | None,
    url_kind: str | None,
    url_path: str | None,
    commit: bool,
) -> None:
    """Generate one package and persist it into REPO and CONTENTS."""
    writer = RepositoryWriter(GitContentStore())
    try:
        spec = new_context(seed).package(
            nv, url_kind=UrlKind(url_kind) if url_kind else None, url_path=url_path
        )
        if commit:
            writer.add_package(repo, contents, spec)
        else:
            writer.write_package(repo, contents, spec)
    except PkgFixtureError as exc:
        raise FixtureFailure(str(exc)) from exc
    click.echo(f"wrote {nv}")


@cli.command("check-repo")
@click.argument("repo", type=click.Path(file_okay=False, path_type=Path))
@click.argument("opam_root", type=click.Path(file_okay=False, path_type=Path))
def check_repo(repo: Path, opam_root: Path) -> None:
    """Compare REPO metadata and archives with OPAM_ROOT."""
    _run_check(check_repository, repo, opam_root)


@cli.command("check-contents")
@click.argument("contents", type=click.Path(file_okay=False, path_type=Path))
@click.argument("opam_root", type=click.Path(file_okay=False, path_type=Path))
@click.argument("nv", callback=_parse_nv)
def check_contents(contents: Path, opam_root: Path, nv: PackageId) -> None:
    """Compare the installed files of NV with its recorded contents."""
    _run_check(check_package_contents, contents, opam_root, nv)

