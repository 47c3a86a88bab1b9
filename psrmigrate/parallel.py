"""Parallel import resolution for the --fast flag."""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from psrmigrate.index import SymbolIndex
from psrmigrate.models import SourceFile
from psrmigrate.pipeline import analyze_file


def _resolve_file_worker(
    file: SourceFile, index: SymbolIndex
) -> tuple[Path, tuple[str, ...]]:
    """Resolve a single file's import set.

    Module-level function required for ProcessPoolExecutor pickling.

    Returns:
        Tuple of (path, imports).
    """
    return (file.path, analyze_file(file, index))


def resolve_files_parallel(
    files: list[SourceFile],
    index: SymbolIndex,
    *,
    max_workers: int | None = None,
) -> None:
    """Populate import sets using a process pool. Mutates ``files``.

    The index is read-only, so files resolve independently. Parsing never
    fails on malformed source; any other worker error propagates.

    Raises:
        StaleIndexError: If ``index`` predates the current registry.
    """
    index.ensure_fresh(files)
    if not files:
        return
    if max_workers is None:
        max_workers = min(os.cpu_count() or 1, len(files))

    by_path = {f.path: f for f in files}
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_resolve_file_worker, f, index) for f in files]
        for future in as_completed(futures):
            path, imports = future.result()
            by_path[path].imports = imports
