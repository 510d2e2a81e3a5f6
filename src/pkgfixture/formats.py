"""Read/write the repository metadata files (opam, url, descr).

Files are ``key: "value"`` lines with JSON string quoting. The url file
carries ``<kind>: "<path>[#<revision>]"`` followed by ``checksum: "..."``.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from pkgfixture.errors import PersistenceError
from pkgfixture.generation.packages import OpamMetadata, UrlDescriptor, UrlKind

OPAM_FORMAT_VERSION = "1"
_FIELD_RE = re.compile(r'^([A-Za-z][A-Za-z0-9_-]*):\s*(".*")\s*$')


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"cannot write {path}: {exc}", path=path) from exc


def _render_fields(fields: list[tuple[str, str]]) -> str:
    return "".join(f"{key}: {json.dumps(value)}\n" for key, value in fields)


def _parse_fields(path: Path) -> dict[str, str]:
    fields: dict[str, str] = {}
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        match = _FIELD_RE.match(line)
        if match is None:
            raise PersistenceError(f"{path}:{lineno}: malformed field line", path=path)
        try:
            fields[match.group(1)] = json.loads(match.group(2))
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"{path}:{lineno}: bad string literal", path=path) from exc
    return fields


def _require(fields: dict[str, str], key: str, path: Path) -> str:
    if key not in fields:
        raise PersistenceError(f"{path}: missing field {key!r}", path=path)
    return fields[key]


def write_opam(path: Path, opam: OpamMetadata) -> None:
    _write_text(
        path,
        _render_fields(
            [
                ("opam-version", OPAM_FORMAT_VERSION),
                ("name", opam.name),
                ("version", opam.version),
                ("maintainer", opam.maintainer),
            ]
        ),
    )


def read_opam(path: Path) -> OpamMetadata:
    fields = _parse_fields(path)
    return OpamMetadata(
        name=_require(fields, "name", path),
        version=_require(fields, "version", path),
        maintainer=_require(fields, "maintainer", path),
    )


def write_url(path: Path, url: UrlDescriptor) -> None:
    address = url.path
    if url.kind is UrlKind.GIT:
        # git addresses always end in "#<revision>", possibly empty
        address = f"{url.path}#{url.revision or ''}"
    _write_text(path, _render_fields([(url.kind.value, address), ("checksum", url.checksum)]))


def read_url(path: Path) -> UrlDescriptor:
    fields = _parse_fields(path)
    for kind in UrlKind:
        if kind.value not in fields:
            continue
        address, revision = fields[kind.value], ""
        if kind is UrlKind.GIT and "#" in address:
            address, revision = address.rsplit("#", 1)
        return UrlDescriptor(
            kind=kind,
            path=address,
            checksum=_require(fields, "checksum", path),
            revision=revision or None,
        )
    raise PersistenceError(f"{path}: no url kind field", path=path)


def write_descr(path: Path, descr: str) -> None:
    _write_text(path, descr)


def read_descr(path: Path) -> str:
    return path.read_text(encoding="utf-8")
