"""End-to-end migration: rename, namespace, resolve imports, persist."""

from __future__ import annotations

from pathlib import Path

import structlog

from psrmigrate.composer import composer_install, update_autoload
from psrmigrate.config import MigrationConfig
from psrmigrate.discovery import discover_files, exclusion_spec
from psrmigrate.extractor import extract
from psrmigrate.files import load_files
from psrmigrate.index import SymbolIndex, build_index
from psrmigrate.models import SourceFile
from psrmigrate.namespaces import assign_namespaces
from psrmigrate.parsing import parse_php
from psrmigrate.persist import persist
from psrmigrate.renaming import rename_files, rename_folders
from psrmigrate.resolver import resolve_file
from psrmigrate.rewriting import apply_replacements

log = structlog.get_logger(__name__)


def analyze_file(file: SourceFile, index: SymbolIndex) -> tuple[str, ...]:
    """Parse one file and return its import set."""
    tree = parse_php(file.contents)
    return resolve_file(file, extract(tree), index)


def resolve_imports(files: list[SourceFile], index: SymbolIndex) -> None:
    """Populate every file's import set. Mutates ``files``.

    Raises:
        StaleIndexError: If ``index`` predates the current registry.
    """
    index.ensure_fresh(files)
    for f in files:
        f.imports = analyze_file(f, index)


def _resolve(files: list[SourceFile], index: SymbolIndex, fast: bool) -> None:
    if fast:
        from psrmigrate.parallel import resolve_files_parallel

        resolve_files_parallel(files, index)
    else:
        resolve_imports(files, index)


def load_project(root: Path, config: MigrationConfig) -> list[SourceFile]:
    """Discover and read every migratable file under root."""
    paths = discover_files(
        root, extensions=config.extensions, extra_ignores=list(config.exclude)
    )
    return load_files(root, paths, config.encoding)


def analyze(root: Path, config: MigrationConfig) -> list[SourceFile]:
    """Compute namespaces and imports for the tree as it is, writing nothing."""
    files = load_project(root, config)
    assign_namespaces(files, config.root_namespace)
    _resolve(files, build_index(files), config.fast)
    return files


def migrate(root: Path, config: MigrationConfig) -> list[SourceFile]:
    """Run the full migration in place.

    Steps: rename folders, load files, rename files (rewriting references),
    update composer autoload, apply configured replacements, assign
    namespaces, build the symbol index, resolve imports, write files, and
    optionally run ``composer install``.

    Returns:
        The final file registry.

    Raises:
        ComposerError: If ``composer install`` was requested and failed.
    """
    folders = rename_folders(root, exclude=exclusion_spec(config.exclude))
    log.info("folders_renamed", count=len(folders))

    files = load_project(root, config)
    renames = rename_files(root, files)
    log.info("files_renamed", count=len(renames), files=len(files))

    update_autoload(root, files, config.root_namespace, config.php_constraint)
    apply_replacements(files, config.replacements)
    assign_namespaces(files, config.root_namespace)

    index = build_index(files)
    _resolve(files, index, config.fast)

    written = persist(root, files, config.encoding)
    log.info("files_written", count=written)

    if config.composer_install:
        composer_install(root)
    return files
