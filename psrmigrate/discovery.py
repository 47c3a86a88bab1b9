"""Source discovery with gitignore and exclusion-pattern support."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable
from pathlib import Path

import pathspec

from psrmigrate.languages import language_for_extension

SKIP_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        "vendor",
        ".git",
        ".hg",
        ".svn",
        ".idea",
        "build",
        "dist",
        "cache",
    }
)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".php", ".phtml")


def _git_ls_files(root: Path) -> set[str] | None:
    """Return the set of git-tracked and untracked-but-not-ignored files.

    Uses ``git ls-files --cached --others --exclude-standard`` to respect
    all gitignore files (root, subdirectory, and global).

    Returns:
        Set of repo-relative file paths, or None if git is unavailable
        or the directory is not a git repository.
    """
    if not (root / ".git").exists():
        return None
    try:
        result = subprocess.run(
            ["git", "ls-files", "--cached", "--others", "--exclude-standard"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return set(result.stdout.splitlines())


def exclusion_spec(patterns: Iterable[str] | None) -> pathspec.PathSpec | None:
    """Compile gitignore-style exclusion patterns, or None when there are none."""
    lines = [p for p in patterns or () if p.strip()]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def discover_files(
    root: Path,
    *,
    extensions: Iterable[str] | None = None,
    extra_ignores: list[str] | None = None,
) -> list[Path]:
    """Walk root and return the relative paths of every migratable file.

    Args:
        root: Project root directory.
        extensions: File suffixes to collect (default: .php and .phtml).
        extra_ignores: Additional gitignore-style patterns to exclude.

    Returns:
        Relative paths, sorted.
    """
    wanted = {e.lower() for e in (extensions or DEFAULT_EXTENSIONS)}
    git_files = _git_ls_files(root)
    gitignore = _load_gitignore(root) if git_files is None else None
    extra_spec = exclusion_spec(extra_ignores)

    results: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        rel_dir = Path(dirpath).relative_to(root)

        # Prune skip dirs, hidden dirs and excluded dirs in-place to prevent descent
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in SKIP_DIRS
            and not d.startswith(".")
            and not (
                extra_spec and extra_spec.match_file(f"{(rel_dir / d).as_posix()}/")
            )
        )

        for fname in sorted(filenames):
            if fname.startswith("."):
                continue

            full_path = Path(dirpath) / fname
            if full_path.is_symlink():
                continue

            rel = rel_dir / fname

            if git_files is not None:
                if rel.as_posix() not in git_files:
                    continue
            elif gitignore and gitignore.match_file(rel.as_posix()):
                continue

            if extra_spec and extra_spec.match_file(rel.as_posix()):
                continue

            suffix = Path(fname).suffix.lower()
            if suffix not in wanted or language_for_extension(suffix) is None:
                continue

            results.append(rel)

    results.sort()
    return results


def _load_gitignore(root: Path) -> pathspec.PathSpec:
    """Load .gitignore from root, returning a PathSpec matcher."""
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file():
        lines = gitignore_path.read_text(encoding="utf-8").splitlines()
        return pathspec.PathSpec.from_lines("gitignore", lines)
    return pathspec.PathSpec.from_lines("gitignore", [])
