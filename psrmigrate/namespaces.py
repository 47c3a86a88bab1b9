"""Namespace assignment from the (renamed) directory layout."""

from __future__ import annotations

from pathlib import Path

from psrmigrate.models import NAMESPACE_SEPARATOR, SourceFile


def normalize_namespace(namespace: str) -> str:
    """Strip leading/trailing separators: ``\\Vendor\\App\\`` -> ``Vendor\\App``."""
    return namespace.strip().strip(NAMESPACE_SEPARATOR)


def namespace_for(path: Path, root_namespace: str) -> str:
    """Root namespace followed by one segment per directory of ``path``."""
    parts = [p for p in normalize_namespace(root_namespace).split(NAMESPACE_SEPARATOR) if p]
    parts.extend(p for p in path.parent.parts if p not in ("", "."))
    return NAMESPACE_SEPARATOR.join(parts)


def assign_namespaces(files: list[SourceFile], root_namespace: str) -> None:
    """Set every file's namespace. Mutates ``files``."""
    for f in files:
        f.namespace = namespace_for(f.path, root_namespace)
