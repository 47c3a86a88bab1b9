"""composer.json autoload editing and ``composer install``."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

import structlog

from psrmigrate.models import NAMESPACE_SEPARATOR, SourceFile
from psrmigrate.namespaces import normalize_namespace

log = structlog.get_logger(__name__)

MANIFEST = "composer.json"


class ComposerError(RuntimeError):
    """``composer install`` could not be run or failed."""


def autoload_map(files: list[SourceFile], root_namespace: str) -> dict[str, str]:
    """Build a PSR-4 mapping with one prefix per top-level directory.

    Files directly under the root map the bare root namespace to ``""``.
    """
    prefix = normalize_namespace(root_namespace) + NAMESPACE_SEPARATOR
    mapping: dict[str, str] = {}
    for f in files:
        parts = f.path.parts
        if len(parts) == 1:
            mapping[prefix] = ""
        else:
            mapping[f"{prefix}{parts[0]}{NAMESPACE_SEPARATOR}"] = f"{parts[0]}/"
    return dict(sorted(mapping.items()))


def update_autoload(
    root: Path,
    files: list[SourceFile],
    root_namespace: str,
    php_constraint: str,
) -> dict[str, Any]:
    """Point composer.json's PSR-4 autoload at the migrated layout.

    Other manifest keys are preserved; a missing manifest is created.

    Returns:
        The manifest as written.
    """
    path = root / MANIFEST
    manifest: dict[str, Any] = {}
    if path.is_file():
        manifest = json.loads(path.read_text(encoding="utf-8"))

    autoload = manifest.setdefault("autoload", {})
    autoload["psr-4"] = autoload_map(files, root_namespace)
    manifest.setdefault("require", {})["php"] = php_constraint

    path.write_text(
        json.dumps(manifest, indent=4, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    log.info("composer_autoload_updated", prefixes=len(autoload["psr-4"]))
    return manifest


def composer_install(root: Path) -> None:
    """Run ``composer install`` in root.

    Raises:
        ComposerError: If composer is missing or exits non-zero.
    """
    try:
        subprocess.run(["composer", "install"], cwd=root, check=True)
    except FileNotFoundError as exc:
        raise ComposerError("composer executable not found") from exc
    except subprocess.CalledProcessError as exc:
        raise ComposerError(f"composer install exited with {exc.returncode}") from exc
