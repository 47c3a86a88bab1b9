"""Rename folders and files to PascalCase and rewrite references to them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import pathspec
import structlog

from psrmigrate.discovery import SKIP_DIRS
from psrmigrate.models import SourceFile
from psrmigrate.rewriting import Replacement, apply_replacements

log = structlog.get_logger(__name__)

_SEPARATORS = re.compile(r"[\W_]+")
_WORD_BOUNDARY = re.compile(
    r"(?<=[a-z0-9])(?=[A-Z])"
    r"|(?<=[A-Z])(?=[A-Z][a-z])"
    r"|(?<=[A-Za-z])(?=[0-9])"
    r"|(?<=[0-9])(?=[A-Za-z])"
)


def pascal_case(text: str) -> str:
    """Convert ``user_model``, ``user-model`` or ``userModel`` to ``UserModel``.

    Words are split on separators and case/digit boundaries; each word
    keeps its own casing after the first letter, so ``XMLParser`` stays
    ``XMLParser``.
    """
    words: list[str] = []
    for chunk in _SEPARATORS.split(text):
        words.extend(w for w in _WORD_BOUNDARY.split(chunk) if w)
    return "".join(w[:1].upper() + w[1:] for w in words)


def is_pascal_case(text: str) -> bool:
    return text == pascal_case(text)


def rename_folders(
    root: Path, exclude: pathspec.PathSpec | None = None
) -> list[tuple[Path, Path]]:
    """Rename every directory below root to PascalCase, parents first.

    Hidden, vendor-like and excluded directories are left alone, and so is
    everything below them. A rename whose target already exists as a
    different directory is skipped.

    Args:
        root: Project root directory (not renamed itself).
        exclude: Gitignore-style matcher for directories to keep as they are.

    Returns:
        The (old, new) relative paths of the renamed directories.
    """
    renamed: list[tuple[Path, Path]] = []
    pending: list[Path] = [Path()]
    while pending:
        rel_dir = pending.pop()
        for entry in sorted((root / rel_dir).iterdir()):
            if not entry.is_dir() or entry.is_symlink():
                continue
            if entry.name.startswith(".") or entry.name in SKIP_DIRS:
                continue
            child = rel_dir / entry.name
            if exclude and exclude.match_file(f"{child.as_posix()}/"):
                continue

            new_name = pascal_case(entry.name)
            if new_name and new_name != entry.name:
                target = entry.with_name(new_name)
                if target.exists() and not entry.samefile(target):
                    log.warning(
                        "rename_target_exists", path=str(child), target=new_name
                    )
                else:
                    entry.rename(target)
                    renamed.append((child, rel_dir / new_name))
                    child = rel_dir / new_name
            pending.append(child)
    return renamed


@dataclass(frozen=True)
class FileRename:
    """A planned file rename and the rewrites it implies."""

    old_path: Path
    new_path: Path
    old_name: str
    new_name: str

    def replacements(self) -> list[Replacement]:
        """Rules that update declarations and uses of the renamed type."""
        old = re.escape(self.old_name)
        new = self.new_name
        return [
            Replacement(re.compile(rf"\b(class)\s+{old}\b"), rf"\1 {new}"),
            Replacement(
                re.compile(rf"\b(extends|implements)\s+{old}\b"), rf"\1 {new}"
            ),
            Replacement(re.compile(rf"\bnew\s+{old}\b"), f"new {new}"),
            Replacement(re.compile(rf"(?<![\w$\\>]){old}\s*::\s*"), f"{new}::"),
        ]


def plan_file_renames(files: list[SourceFile]) -> list[FileRename]:
    """List the files whose stem is not already PascalCase."""
    plans: list[FileRename] = []
    for f in files:
        old_name = f.path.stem
        if is_pascal_case(old_name):
            continue
        new_name = pascal_case(old_name)
        if not new_name:
            continue
        plans.append(
            FileRename(
                old_path=f.path,
                new_path=f.path.with_name(new_name + f.path.suffix),
                old_name=old_name,
                new_name=new_name,
            )
        )
    return plans


def rename_files(root: Path, files: list[SourceFile]) -> list[FileRename]:
    """Rename files on disk, update their records and rewrite references.

    Mutates ``files``: renamed records get their new path and type name,
    and every record's contents get the rename rules applied.

    Returns:
        The renames that were carried out.
    """
    done: list[FileRename] = []
    by_path = {f.path: f for f in files}
    for plan in plan_file_renames(files):
        source = root / plan.old_path
        target = root / plan.new_path
        if target.exists() and not source.samefile(target):
            log.warning(
                "rename_target_exists",
                path=str(plan.old_path),
                target=str(plan.new_path),
            )
            continue
        source.rename(target)
        record = by_path[plan.old_path]
        record.path = plan.new_path
        record.type_name = plan.new_name
        done.append(plan)

    rules = [rule for plan in done for rule in plan.replacements()]
    apply_replacements(files, rules)
    return done
