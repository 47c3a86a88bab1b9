"""Encoding-aware reading and writing of source files."""

from __future__ import annotations

from pathlib import Path

import typer

from psrmigrate.models import SourceFile

# Legacy trees are stored as Latin-1.
DEFAULT_ENCODING = "iso-8859-1"


def read_source(root: Path, rel_path: Path, encoding: str = DEFAULT_ENCODING) -> str:
    """Read and decode a file, keeping its line endings untouched.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the bytes are not valid in ``encoding``.
    """
    return (root / rel_path).read_bytes().decode(encoding)


def write_source(
    root: Path, rel_path: Path, contents: str, encoding: str = DEFAULT_ENCODING
) -> None:
    """Encode and write a file in the same encoding it was read with."""
    (root / rel_path).write_bytes(contents.encode(encoding))


def load_files(
    root: Path, paths: list[Path], encoding: str = DEFAULT_ENCODING
) -> list[SourceFile]:
    """Read every path into a SourceFile, skipping files that fail to load."""
    files: list[SourceFile] = []
    for rel_path in paths:
        try:
            contents = read_source(root, rel_path, encoding)
        except (OSError, UnicodeDecodeError) as exc:
            typer.echo(f"Warning: failed to read {rel_path}: {exc}", err=True)
            continue
        files.append(SourceFile.from_path(rel_path, contents))
    return files
