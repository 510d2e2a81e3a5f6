"""File fingerprint indexes."""

from pkgfixture.attributes.builder import build_index, fingerprint, merge_indexes
from pkgfixture.attributes.filters import (
    ExcludeVcsAndManifest,
    IncludeAll,
    IndexFilter,
    RebaseToPackageParent,
)
from pkgfixture.attributes.types import AttributeIndex, AttributeRecord, IndexEntry

__all__ = [
    "AttributeIndex",
    "AttributeRecord",
    "ExcludeVcsAndManifest",
    "IncludeAll",
    "IndexEntry",
    "IndexFilter",
    "RebaseToPackageParent",
    "build_index",
    "fingerprint",
    "merge_indexes",
]
