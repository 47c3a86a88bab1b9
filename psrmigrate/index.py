"""Project-wide index from bare type name to fully-qualified name."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from psrmigrate.models import SourceFile

log = structlog.get_logger(__name__)


class StaleIndexError(RuntimeError):
    """Raised when the file registry changed after the index was built."""


def _fingerprint(files: Iterable[SourceFile]) -> frozenset[tuple[str, str, str | None]]:
    return frozenset((str(f.path), f.type_name, f.namespace) for f in files)


@dataclass(frozen=True)
class SymbolIndex:
    """Immutable snapshot of every type the project defines.

    Built once, after renaming and namespace assignment. It is a plain
    frozen value so it can be shared with worker processes.
    """

    symbols: dict[str, str] = field(default_factory=dict)
    fingerprint: frozenset[tuple[str, str, str | None]] = frozenset()
    _folded: dict[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        folded: dict[str, str] = {}
        for name, fqn in self.symbols.items():
            folded.setdefault(name.lower(), fqn)
        object.__setattr__(self, "_folded", folded)

    def lookup(self, name: str) -> str | None:
        """Return the fully-qualified name for ``name``, or None if unknown.

        PHP class names are case-insensitive, so ``helper`` finds ``Helper``.
        """
        return self.symbols.get(name) or self._folded.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self.symbols)

    def is_stale(self, files: Iterable[SourceFile]) -> bool:
        """Check whether any file was renamed or re-namespaced since the build."""
        return _fingerprint(files) != self.fingerprint

    def ensure_fresh(self, files: Iterable[SourceFile]) -> None:
        """Raise StaleIndexError if the index no longer matches ``files``.

        Raises:
            StaleIndexError: If the registry changed after the build.
        """
        if self.is_stale(files):
            raise StaleIndexError(
                "symbol index was built before the latest rename; rebuild it"
            )


def build_index(files: list[SourceFile]) -> SymbolIndex:
    """Register ``type_name -> namespace\\type_name`` for every declaring file.

    Templates and files without a namespace declare no importable type and
    are skipped. When two files share a bare type name the first one in
    registry order wins; the loser is logged. Names that differ only
    in case count as the same name.

    Args:
        files: The final file registry (renames and namespaces applied).

    Returns:
        A frozen SymbolIndex.
    """
    symbols: dict[str, str] = {}
    seen: dict[str, str] = {}
    for f in files:
        if f.is_template or not f.namespace:
            continue
        existing = seen.get(f.type_name.lower())
        if existing is not None:
            log.warning(
                "duplicate_type_name",
                name=f.type_name,
                kept=existing,
                ignored=f.fqn,
                path=str(f.path),
            )
            continue
        seen[f.type_name.lower()] = f.fqn
        symbols[f.type_name] = f.fqn
    return SymbolIndex(symbols=symbols, fingerprint=_fingerprint(files))
