"""Migration settings, populated from command-line options."""

from __future__ import annotations

from dataclasses import dataclass

from psrmigrate.discovery import DEFAULT_EXTENSIONS
from psrmigrate.files import DEFAULT_ENCODING
from psrmigrate.namespaces import normalize_namespace
from psrmigrate.rewriting import Replacement

DEFAULT_PHP_CONSTRAINT = ">=8.0"


@dataclass(frozen=True)
class MigrationConfig:
    """Everything a migration run needs besides the project root."""

    root_namespace: str
    encoding: str = DEFAULT_ENCODING
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude: tuple[str, ...] = ()
    replacements: tuple[Replacement, ...] = ()
    php_constraint: str = DEFAULT_PHP_CONSTRAINT
    composer_install: bool = False
    fast: bool = False

    def __post_init__(self) -> None:
        if not normalize_namespace(self.root_namespace):
            raise ValueError("root namespace must not be empty")
