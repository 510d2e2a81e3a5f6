"""Tests for error hierarchy."""

from pathlib import Path

from pkgfixture.check import SyncError
from pkgfixture.errors import (
    CollaboratorError,
    ConfigError,
    GenerationError,
    IndexCollisionError,
    PersistenceError,
    PkgFixtureError,
    SyncErrors,
)


def test_hierarchy() -> None:
    assert issubclass(GenerationError, PkgFixtureError)
    assert issubclass(PersistenceError, PkgFixtureError)
    assert issubclass(CollaboratorError, PkgFixtureError)
    assert issubclass(IndexCollisionError, PkgFixtureError)
    assert issubclass(ConfigError, PkgFixtureError)
    assert issubclass(SyncErrors, PkgFixtureError)


def test_nothing_is_retryable() -> None:
    assert PkgFixtureError("test").retryable is False
    assert GenerationError("test").retryable is False
    assert PersistenceError("test", path=Path("/x")).retryable is False
    assert CollaboratorError("test", command=["git", "init"]).retryable is False


def test_persistence_error_carries_path() -> None:
    err = PersistenceError("Cannot commit /r/x", path=Path("/r/x"))
    assert str(err) == "Cannot commit /r/x"
    assert err.path == Path("/r/x")


def test_sync_errors_lists_every_divergence() -> None:
    err = SyncErrors(
        [
            SyncError(source="opam", key="a/a", file=Path("/o/lib/a/a")),
            SyncError(source="contents", key="c", file=Path("/c/foo.1/c")),
        ]
    )
    assert len(err.errors) == 2
    text = str(err)
    assert text.startswith("2 sync error(s)")
    assert "opam: a/a (/o/lib/a/a)" in text
    assert "contents: c (/c/foo.1/c)" in text


def test_catch_as_pkgfixture_error() -> None:
    try:
        raise CollaboratorError("boom", command=["opam", "install"], returncode=1)
    except PkgFixtureError as exc:
        assert isinstance(exc, CollaboratorError)
        assert exc.returncode == 1
