"""Core data structures for psrmigrate."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

TEMPLATE_SUFFIXES: frozenset[str] = frozenset({".phtml"})

NAMESPACE_SEPARATOR = "\\"


@dataclass(frozen=True)
class TypeReference:
    """A candidate type name found at a type-bearing position.

    ``name`` is None when the position holds something that is not a
    type name (``new $class``). ``context`` is the node kind it came from
    and is only used for diagnostics.
    """

    name: str | None
    context: str


@dataclass
class SourceFile:
    """A single source file moving through the migration."""

    path: Path
    type_name: str
    contents: str
    namespace: str | None = None
    imports: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: Path, contents: str) -> SourceFile:
        """Create a record whose expected type name is the file stem."""
        return cls(path=path, type_name=path.stem, contents=contents)

    @property
    def is_template(self) -> bool:
        """Templates never declare a type or a namespace."""
        return self.path.suffix in TEMPLATE_SUFFIXES

    @property
    def fqn(self) -> str:
        """Fully-qualified name of the file's primary type."""
        if not self.namespace:
            return self.type_name
        return f"{self.namespace}{NAMESPACE_SEPARATOR}{self.type_name}"
