"""Deterministic synthetic package generation."""

from pkgfixture.generation.contents import ContentEntry, build_contents, install_manifest
from pkgfixture.generation.packages import (
    OpamMetadata,
    PackageSpec,
    UrlDescriptor,
    UrlKind,
    build_package,
)
from pkgfixture.generation.seeded import GenerationContext, new_context, random_string

__all__ = [
    "ContentEntry",
    "GenerationContext",
    "OpamMetadata",
    "PackageSpec",
    "UrlDescriptor",
    "UrlKind",
    "build_contents",
    "build_package",
    "install_manifest",
    "new_context",
    "random_string",
]
