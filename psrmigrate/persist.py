"""Write namespace declarations and import blocks back into files."""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from psrmigrate.files import DEFAULT_ENCODING, write_source
from psrmigrate.models import SourceFile

log = structlog.get_logger(__name__)

# ``<?php`` or a short ``<?`` tag; never the ``<?=`` echo tag.
_OPEN_TAG = re.compile(r"<\?(?:php\b)?(?!=)", re.IGNORECASE)


def use_block(imports: tuple[str, ...]) -> str:
    """One ``use X;`` line per import, or an empty string."""
    return "".join(f"use {name};\n" for name in imports)


def render_file(file: SourceFile) -> str | None:
    """Return the new contents for ``file``, or None to leave it untouched.

    Class files get ``namespace`` and ``use`` lines right after the first
    open tag. Templates only get a ``use`` block, and only when they
    import something.
    """
    if file.is_template:
        return _render_template(file)

    if not _OPEN_TAG.search(file.contents):
        log.warning("missing_open_tag", path=str(file.path))
        return None

    header = "<?php\n\n"
    if file.namespace:
        header += f"namespace {file.namespace};\n\n"
    header += use_block(file.imports)
    return _OPEN_TAG.sub(lambda _m: header, file.contents, count=1)


def _render_template(file: SourceFile) -> str | None:
    if not file.imports:
        return None
    uses = use_block(file.imports)
    first_line = next((line for line in file.contents.splitlines() if line.strip()), "")
    if _OPEN_TAG.search(first_line):
        return _OPEN_TAG.sub(lambda _m: f"<?php\n\n{uses}", file.contents, count=1)
    return f"<?php\n\n{uses}\n?>\n\n{file.contents}"


def persist(
    root: Path, files: list[SourceFile], encoding: str = DEFAULT_ENCODING
) -> int:
    """Render and write every file that changes.

    Returns:
        Number of files written.
    """
    written = 0
    for f in files:
        contents = render_file(f)
        if contents is None or contents == f.contents:
            continue
        write_source(root, f.path, contents, encoding)
        written += 1
    return written
