"""pkgfixture exception hierarchy.

All pkgfixture-specific exceptions inherit from PkgFixtureError,
enabling structured error handling and cleaner catch clauses.
None of them are retried: a failure aborts the current scenario.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkgfixture.check import SyncError


class PkgFixtureError(Exception):
    """Base exception for all pkgfixture errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class GenerationError(PkgFixtureError):
    """A fixture could not be generated (invalid seed, archive packing failed)."""


class PersistenceError(PkgFixtureError):
    """Writing or committing a fixture file failed."""

    def __init__(self, message: str = "", *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class CollaboratorError(PkgFixtureError):
    """An external command (git, opam, archiver) exited with failure."""

    def __init__(
        self,
        message: str = "",
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class IndexCollisionError(PkgFixtureError):
    """Two attribute indexes being merged share a key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"duplicate attribute key while merging indexes: {key}")
        self.key = key


class ConfigError(PkgFixtureError):
    """Invalid or missing configuration."""


class SyncErrors(PkgFixtureError):
    """Two trees diverge; carries every divergence found."""

    def __init__(self, errors: Sequence[SyncError]) -> None:
        self.errors = tuple(errors)
        lines = [f"{len(self.errors)} sync error(s)"]
        lines.extend(f"  {err.source}: {err.key} ({err.file})" for err in self.errors)
        super().__init__("\n".join(lines))
