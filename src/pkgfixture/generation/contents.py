"""File payload of a synthetic package."""

from __future__ import annotations

from dataclasses import dataclass

from pkgfixture.generation.seeded import GenerationContext, check_seed, random_string
from pkgfixture.ids import PackageId

INSTALL_MANIFEST_TEXT = 'lib: [ "a/a" "a/b" ]\nbin: [ "c" ]\n'


@dataclass(frozen=True, slots=True, order=True)
class ContentEntry:
    path: str
    content: bytes


def _data_lengths(seed: int) -> tuple[tuple[str, int], ...]:
    return (
        ("a/a", 1 + seed * 2),
        ("a/b", 1 + seed * 3),
        ("c", 1 + seed),
    )


def install_manifest(name: str) -> ContentEntry:
    return ContentEntry(path=f"{name}.install", content=INSTALL_MANIFEST_TEXT.encode("utf-8"))


def build_contents(nv: PackageId, seed: int) -> tuple[ContentEntry, ...]:
    """Three seeded data files plus the install manifest, sorted by path."""
    rng = GenerationContext(check_seed(seed)).rng("contents", nv)
    entries = [
        ContentEntry(path=path, content=random_string(rng, length).encode("ascii"))
        for path, length in _data_lengths(seed)
    ]
    entries.append(install_manifest(nv.name))
    return tuple(sorted(entries))
