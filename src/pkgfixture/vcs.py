"""Version-control contract for fixture content, with a git implementation."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from pkgfixture.config import get_settings
from pkgfixture.errors import CollaboratorError, PersistenceError
from pkgfixture.ids import PackageId

logger = logging.getLogger(__name__)


class ContentStore(Protocol):
    def init(self, repo: Path) -> None: ...

    def add(self, repo: Path, file: Path) -> None: ...

    def commit(self, repo: Path, message: str, allow_empty: bool = True) -> None: ...

    def commit_file(self, repo: Path, file: Path, message: str) -> None: ...

    def revision(self, repo: Path) -> str: ...

    def commits(self, repo: Path) -> list[str]: ...

    def branch(self, repo: Path) -> None: ...

    def checkout(self, repo: Path, revision: str) -> None: ...


def log_commit(repo: Path, revision: str, nv: PackageId, action: str) -> None:
    logger.info("%-25s %s     %-10s %-30s", repo, revision, nv, action)


class GitContentStore:
    def __init__(
        self,
        git_bin: str | None = None,
        timeout_seconds: float | None = None,
        branch_name: str | None = None,
    ) -> None:
        settings = get_settings()
        self.git_bin = git_bin or settings.git_bin
        self.timeout_seconds = timeout_seconds or settings.command_timeout_seconds
        self.branch_name = branch_name or settings.test_branch
        self._identity = [
            "-c",
            f"user.name={settings.git_author_name}",
            "-c",
            f"user.email={settings.git_author_email}",
        ]

    def _run(self, repo: Path, *args: str) -> str:
        command = [self.git_bin, "-C", str(repo), *self._identity, *args]
        logger.debug("running %s", " ".join(command))
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
                f"git {args[0]} timed out after {self.timeout_seconds}s", command=command
            ) from exc
        except OSError as exc:
            raise CollaboratorError(f"cannot run {self.git_bin}: {exc}", command=command) from exc
        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            raise CollaboratorError(
                stderr or f"git {args[0]} failed",
                command=command,
                returncode=proc.returncode,
                stderr=stderr,
            )
        return proc.stdout

    def _relative(self, repo: Path, file: Path) -> str:
        try:
            return file.relative_to(repo).as_posix()
        except ValueError as exc:
            raise PersistenceError(f"{file} is outside of {repo}", path=file) from exc

    def init(self, repo: Path) -> None:
        self._run(repo, "init")

    def add(self, repo: Path, file: Path) -> None:
        if file.exists():
            self._run(repo, "add", self._relative(repo, file))

    def commit(self, repo: Path, message: str, allow_empty: bool = True) -> None:
        args = ["commit", "-a", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        self._run(repo, *args)

    def commit_file(self, repo: Path, file: Path, message: str) -> None:
        if not file.exists():
            raise PersistenceError(f"Cannot commit {file}", path=file)
        relative = self._relative(repo, file)
        self._run(repo, "add", relative)
        self._run(repo, "commit", "-m", message, "--allow-empty", "--", relative)

    def revision(self, repo: Path) -> str:
        lines = self._run(repo, "rev-parse", "HEAD").splitlines()
        return lines[0].strip() if lines else ""

    def commits(self, repo: Path) -> list[str]:
        out = self._run(repo, "log", self.branch_name, "--pretty=format:%H")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def branch(self, repo: Path) -> None:
        self._run(repo, "checkout", "-B", self.branch_name)

    def checkout(self, repo: Path, revision: str) -> None:
        self._run(repo, "checkout", revision)
        self._run(repo, "clean", "-fdx")
