"""Scan directory trees into fingerprint indexes keyed by relative path."""

from __future__ import annotations

import hashlib
import logging
import stat
from pathlib import Path

from pkgfixture.attributes.filters import IncludeAll, IndexFilter
from pkgfixture.attributes.types import AttributeIndex, AttributeRecord, IndexEntry
from pkgfixture.errors import IndexCollisionError

logger = logging.getLogger(__name__)


def fingerprint(path: Path) -> AttributeRecord:
    digest = hashlib.sha256(path.read_bytes()).hexdigest()
    return AttributeRecord(digest=digest, mode=stat.S_IMODE(path.stat().st_mode))


def rec_files(root: Path) -> list[Path]:
    if not root.is_dir():
        return []
    return sorted(path for path in root.rglob("*") if path.is_file())


def build_index(root: Path, index_filter: IndexFilter | None = None) -> AttributeIndex:
    selector = index_filter or IncludeAll(root)
    index: AttributeIndex = {}
    for path in rec_files(root):
        base = selector(path)
        if base is None:
            continue
        key = path.relative_to(base).as_posix()
        index[key] = IndexEntry(record=fingerprint(path), path=path)
    logger.debug("indexed %d file(s) under %s", len(index), root)
    return index


def merge_indexes(*indexes: AttributeIndex) -> AttributeIndex:
    merged: AttributeIndex = {}
    for index in indexes:
        for key, entry in index.items():
            if key in merged:
                raise IndexCollisionError(key)
            merged[key] = entry
    return merged
