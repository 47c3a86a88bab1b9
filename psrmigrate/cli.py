"""CLI entry point for psrmigrate."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from psrmigrate.composer import ComposerError
from psrmigrate.config import DEFAULT_PHP_CONSTRAINT, MigrationConfig
from psrmigrate.files import DEFAULT_ENCODING
from psrmigrate.log import LOG_LEVELS, configure_logging
from psrmigrate.models import SourceFile
from psrmigrate.pipeline import analyze, migrate
from psrmigrate.rewriting import Replacement, parse_replacement

app = typer.Typer(
    name="psrmigrate",
    help="Migrate a legacy PHP tree to a PSR-4 namespaced layout.",
    no_args_is_help=True,
)

RootArg = Annotated[
    Path,
    typer.Argument(
        help="Project root directory.",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
]
NamespaceOpt = Annotated[
    str,
    typer.Option(
        "--namespace",
        "-n",
        help="Root namespace, e.g. 'Vendor\\Site'.",
    ),
]
ExcludeOpt = Annotated[
    list[str] | None,
    typer.Option(
        "--exclude",
        "-x",
        help="Gitignore-style pattern to leave untouched (repeatable).",
    ),
]
EncodingOpt = Annotated[
    str,
    typer.Option("--encoding", help="Source file encoding."),
]
FastOpt = Annotated[
    bool,
    typer.Option("--fast", help="Resolve imports in parallel worker processes."),
]
LogLevelOpt = Annotated[
    str,
    typer.Option(
        "--log-level",
        help=f"Diagnostic log level ({', '.join(LOG_LEVELS)}).",
    ),
]


def _parse_replacements(specs: list[str] | None) -> tuple[Replacement, ...]:
    """Parse --replace rules, exiting with an error on a malformed one."""
    rules: list[Replacement] = []
    for spec in specs or []:
        try:
            rules.append(parse_replacement(spec))
        except ValueError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
    return tuple(rules)


def _build_config(namespace: str, **kwargs: object) -> MigrationConfig:
    try:
        return MigrationConfig(root_namespace=namespace, **kwargs)  # type: ignore[arg-type]
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def _format_report(files: list[SourceFile]) -> str:
    lines: list[str] = []
    for f in files:
        lines.append(f"{f.path.as_posix()}  {f.namespace or ''}".rstrip())
        lines.extend(f"  use {name};" for name in f.imports)
    return "\n".join(lines)


@app.command()
def imports(
    root: RootArg,
    namespace: NamespaceOpt,
    exclude: ExcludeOpt = None,
    encoding: EncodingOpt = DEFAULT_ENCODING,
    fast: FastOpt = False,
    log_level: LogLevelOpt = "WARNING",
) -> None:
    """Print each file's namespace and import set without changing anything."""
    configure_logging(log_level)
    config = _build_config(
        namespace, exclude=tuple(exclude or ()), encoding=encoding, fast=fast
    )

    files = analyze(root, config)
    if not files:
        typer.echo("No PHP files found.", err=True)
        raise typer.Exit(1)

    typer.echo(_format_report(files))


@app.command(name="migrate")
def migrate_command(
    root: RootArg,
    namespace: NamespaceOpt,
    exclude: ExcludeOpt = None,
    encoding: EncodingOpt = DEFAULT_ENCODING,
    replace: Annotated[
        list[str] | None,
        typer.Option(
            "--replace",
            "-r",
            help="Literal OLD=NEW substitution applied to every file (repeatable).",
        ),
    ] = None,
    php: Annotated[
        str,
        typer.Option("--php", help="PHP version constraint for composer.json."),
    ] = DEFAULT_PHP_CONSTRAINT,
    run_composer: Annotated[
        bool,
        typer.Option(
            "--composer-install", help="Run 'composer install' when done."
        ),
    ] = False,
    fast: FastOpt = False,
    log_level: LogLevelOpt = "WARNING",
) -> None:
    """Rename, namespace and rewrite the project in place."""
    configure_logging(log_level)
    config = _build_config(
        namespace,
        exclude=tuple(exclude or ()),
        encoding=encoding,
        replacements=_parse_replacements(replace),
        php_constraint=php,
        composer_install=run_composer,
        fast=fast,
    )

    try:
        files = migrate(root, config)
    except ComposerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    if not files:
        typer.echo("No PHP files found.", err=True)
        raise typer.Exit(1)

    imported = sum(1 for f in files if f.imports)
    typer.echo(f"Migrated {len(files)} files ({imported} with imports).")
