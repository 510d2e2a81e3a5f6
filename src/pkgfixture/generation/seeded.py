"""Seeded character streams for fixture payloads."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pkgfixture.config import get_settings
from pkgfixture.errors import GenerationError

if TYPE_CHECKING:
    from pkgfixture.generation.contents import ContentEntry
    from pkgfixture.generation.packages import PackageSpec, UrlKind
    from pkgfixture.ids import PackageId

ALPHABET_START = ord("A")
ALPHABET_SIZE = 58


def check_seed(seed: int) -> int:
    if seed < 0:
        raise GenerationError(f"seed must be >= 0, got {seed}")
    return seed


def random_string(rng: random.Random, length: int) -> str:
    """Return ``length`` characters drawn uniformly from ``A`` .. ``A+57``."""
    return "".join(chr(ALPHABET_START + rng.randrange(ALPHABET_SIZE)) for _ in range(length))


def seeded_rng(*parts: object) -> random.Random:
    """A fresh engine whose state is a pure function of ``parts``.

    Two calls with equal parts yield identical streams, regardless of how
    much of any other stream has been consumed in between.
    """
    material = "\x1f".join(str(part) for part in parts).encode("utf-8")
    digest = hashlib.sha256(material).digest()
    return random.Random(int.from_bytes(digest[:8], "big"))


@dataclass(slots=True)
class GenerationContext:
    """Seed state for one fixture run, passed explicitly to whatever generates."""

    seed: int

    def set_seed(self, seed: int) -> None:
        self.seed = check_seed(seed)

    def rng(self, *parts: object) -> random.Random:
        """An engine keyed on ``parts`` and this context's seed."""
        return seeded_rng(*parts, self.seed)

    def contents(self, nv: PackageId) -> tuple[ContentEntry, ...]:
        from pkgfixture.generation.contents import build_contents

        return build_contents(nv, self.seed)

    def package(
        self,
        nv: PackageId,
        *,
        url_kind: UrlKind | None = None,
        url_path: str | None = None,
    ) -> PackageSpec:
        from pkgfixture.generation.packages import build_package

        return build_package(nv, self.seed, url_kind=url_kind, url_path=url_path)


def new_context(seed: int | None = None) -> GenerationContext:
    if seed is None:
        seed = get_settings().seed
    return GenerationContext(seed=check_seed(seed))
