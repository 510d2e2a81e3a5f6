"""Types for file fingerprint indexes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True, order=True)
class AttributeRecord:
    digest: str
    mode: int


@dataclass(frozen=True, slots=True)
class IndexEntry:
    record: AttributeRecord
    path: Path


AttributeIndex = dict[str, IndexEntry]
