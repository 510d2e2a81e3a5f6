"""Package identity helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class PackageId:
    name: str
    version: str

    @classmethod
    def parse(cls, raw: str) -> PackageId:
        """Parse ``<name>.<version>``; the name ends at the first dot."""
        name, sep, version = raw.strip().partition(".")
        if not sep or not name or not version:
            raise ValueError(f"invalid package identity: {raw!r} (expected NAME.VERSION)")
        return cls(name=name, version=version)

    def __str__(self) -> str:
        return f"{self.name}.{self.version}"
