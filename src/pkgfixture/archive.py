"""Archiver contract and a reproducible tar.gz implementation."""

from __future__ import annotations

import gzip
import io
import tarfile
from pathlib import Path
from typing import Protocol


class Archiver(Protocol):
    def pack(self, source_dir: Path, arcname: str, output: Path) -> None:
        """Pack ``source_dir`` into ``output`` with members rooted at ``arcname``."""
        ...


def _iter_tree(root: Path) -> tuple[list[Path], list[Path]]:
    dirs: list[Path] = []
    files: list[Path] = []
    for path in sorted(root.rglob("*")):
        if path.is_dir():
            dirs.append(path)
        elif path.is_file():
            files.append(path)
    return dirs, files


class TarGzArchiver:
    """Byte-stable tarballs: sorted members, zeroed times and owners."""

    def __init__(self, mtime: int = 0) -> None:
        self.mtime = mtime

    def _info(self, name: str, *, mode: int) -> tarfile.TarInfo:
        info = tarfile.TarInfo(name)
        info.mode = mode
        info.mtime = self.mtime
        info.uid = 0
        info.gid = 0
        info.uname = ""
        info.gname = ""
        return info

    def pack(self, source_dir: Path, arcname: str, output: Path) -> None:
        dirs, files = _iter_tree(source_dir)
        with output.open("wb") as raw:
            with gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=self.mtime) as gz:
                with tarfile.open(fileobj=gz, mode="w|", format=tarfile.USTAR_FORMAT) as tar:
                    root = self._info(arcname, mode=0o755)
                    root.type = tarfile.DIRTYPE
                    tar.addfile(root)
                    for directory in dirs:
                        rel = directory.relative_to(source_dir).as_posix()
                        info = self._info(f"{arcname}/{rel}", mode=0o755)
                        info.type = tarfile.DIRTYPE
                        tar.addfile(info)
                    for file in files:
                        rel = file.relative_to(source_dir).as_posix()
                        data = file.read_bytes()
                        info = self._info(f"{arcname}/{rel}", mode=0o644)
                        info.size = len(data)
                        tar.addfile(info, io.BytesIO(data))
