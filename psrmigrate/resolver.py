"""Resolve extracted type names into a file's import set."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import Any

from psrmigrate.index import SymbolIndex
from psrmigrate.models import NAMESPACE_SEPARATOR, SourceFile, TypeReference


def resolve(
    candidates: Iterable[Any],
    file: SourceFile,
    index: SymbolIndex,
) -> list[str]:
    """Map candidate names to the fully-qualified names ``file`` must import.

    Self-references, names the file already imports and names it declares
    itself are dropped. Every comparison ignores case, as PHP does for
    class names. Names the index knows become fully qualified;
    anything else is kept as-is (a global or built-in type).

    Args:
        candidates: Extractor output. TypeReference, plain strings, None
            and nested sequences of those are all accepted.
        file: The file the candidates were extracted from.
        index: Project symbol index.

    Returns:
        Resolved names in first-seen order, without duplicates.
    """
    resolved: list[str] = []
    for name in _unique_names(candidates):
        if name.lower() == file.type_name.lower():
            continue
        if _already_imported(name, file.contents):
            continue
        if _declared_locally(name, file.contents):
            continue
        if NAMESPACE_SEPARATOR in name:
            qualified = name
        else:
            qualified = index.lookup(name) or name
        if qualified.lower() == file.fqn.lower():
            continue
        resolved.append(qualified)
    return resolved


def build_import_set(resolved: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate resolved names, keeping the first spelling of each.

    Names that differ only in case are the same PHP class.
    """
    unique: dict[str, str] = {}
    for name in resolved:
        unique.setdefault(name.lower(), name)
    return tuple(unique.values())


def resolve_file(
    file: SourceFile, candidates: Iterable[Any], index: SymbolIndex
) -> tuple[str, ...]:
    """Resolve and deduplicate in one step."""
    return build_import_set(resolve(candidates, file, index))


def _flatten(items: Iterable[Any]) -> Iterator[Any]:
    for item in items:
        if isinstance(item, (list, tuple)):
            yield from _flatten(item)
        else:
            yield item


def _unique_names(candidates: Iterable[Any]) -> list[str]:
    names: dict[str, None] = {}
    for item in _flatten(candidates):
        name = item.name if isinstance(item, TypeReference) else item
        if name:
            names.setdefault(name, None)
    return list(names)


def _already_imported(name: str, contents: str) -> bool:
    """Check the raw source for a ``use`` that already brings ``name`` in.

    Matches ``use A\\B\\Name;`` and ``use A\\B\\Other as Name;``.
    """
    escaped = re.escape(name)
    pattern = (
        rf"^\s*use\s+\\?(?:[\w\\]+\\)?{escaped}\s*;"
        rf"|^\s*use\s+\\?[\w\\]+\s+as\s+{escaped}\s*;"
    )
    return re.search(pattern, contents, re.MULTILINE | re.IGNORECASE) is not None


def _declared_locally(name: str, contents: str) -> bool:
    """Check whether the file itself declares a type called ``name``."""
    pattern = rf"\b(?:class|interface|trait|enum)\s+{re.escape(name)}\b"
    return re.search(pattern, contents, re.IGNORECASE) is not None
