"""Package-manager contract and the opam command-line client."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pkgfixture.config import get_settings
from pkgfixture.errors import CollaboratorError
from pkgfixture.ids import PackageId

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RepositorySource:
    name: str
    address: Path
    kind: str = "git"


class PackageManagerClient(Protocol):
    def init(self, opam_root: Path, source: RepositorySource) -> None: ...

    def install(self, opam_root: Path, nv: PackageId) -> None: ...

    def update(self, opam_root: Path) -> None: ...

    def upgrade(self, opam_root: Path, nv: PackageId) -> None: ...

    def pin(self, opam_root: Path, name: str, path: Path) -> None: ...


class OpamClient:
    def __init__(
        self,
        opam_bin: str | None = None,
        timeout_seconds: float | None = None,
        debug: bool | None = None,
    ) -> None:
        settings = get_settings()
        self.opam_bin = opam_bin or settings.opam_bin
        self.timeout_seconds = timeout_seconds or settings.command_timeout_seconds
        self.debug = bool(settings.opam_debug) if debug is None else debug

    def command(self, opam_root: Path, subcommand: str, args: list[str]) -> list[str]:
        debug = ["--debug"] if self.debug else []
        return [self.opam_bin, subcommand, "--root", str(opam_root), *debug, *args]

    def _run(self, opam_root: Path, subcommand: str, args: list[str]) -> None:
        command = self.command(opam_root, subcommand, args)
        logger.info("opam %s %s", subcommand, " ".join(args))
        try:
            proc = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise CollaboratorError(
                f"opam {subcommand} timed out after {self.timeout_seconds}s", command=command
            ) from exc
        except OSError as exc:
            raise CollaboratorError(f"cannot run {self.opam_bin}: {exc}", command=command) from exc
        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            raise CollaboratorError(
                stderr or proc.stdout.strip() or f"opam {subcommand} failed",
                command=command,
                returncode=proc.returncode,
                stderr=stderr,
            )

    def init(self, opam_root: Path, source: RepositorySource) -> None:
        self._run(
            opam_root,
            "init",
            [
                source.name,
                str(source.address),
                "--no-setup",
                "--no-base-packages",
                "--kind",
                source.kind,
            ],
        )

    def install(self, opam_root: Path, nv: PackageId) -> None:
        self._run(opam_root, "install", [str(nv)])

    def update(self, opam_root: Path) -> None:
        self._run(opam_root, "update", ["--sync-archives"])

    def upgrade(self, opam_root: Path, nv: PackageId) -> None:
        self._run(opam_root, "upgrade", [str(nv)])

    def pin(self, opam_root: Path, name: str, path: Path) -> None:
        self._run(opam_root, "pin", [name, str(path)])
