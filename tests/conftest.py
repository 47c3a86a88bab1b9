"""Shared test fixtures for psrmigrate."""

from __future__ import annotations

from pathlib import Path

import pytest

from psrmigrate.index import SymbolIndex, build_index
from psrmigrate.models import SourceFile
from psrmigrate.syntax import (
    Block,
    Catch,
    ClassDecl,
    FunctionDecl,
    Name,
    New,
    Parameter,
    Try,
)

SERVICE_PHP = """\
<?php
class Service extends Base implements Loggable
{
    function run(Request $r)
    {
        try {
            new Helper();
        } catch (Exception $e) {
        }
    }
}
"""


@pytest.fixture()
def service_tree() -> Block:
    """Hand-built tree for the Service class in SERVICE_PHP."""
    return Block(
        "program",
        (
            ClassDecl(
                name="Service",
                extends=(Name("Base"),),
                implements=(Name("Loggable"),),
                body=(
                    FunctionDecl(
                        name="run",
                        parameters=(Parameter("$r", (Name("Request"),)),),
                        body=(
                            Block(
                                "compound_statement",
                                (
                                    Try(
                                        body=(New(Name("Helper")),),
                                        catches=(Catch((Name("Exception"),)),),
                                    ),
                                ),
                            ),
                        ),
                    ),
                ),
            ),
        ),
    )


@pytest.fixture()
def service_file() -> SourceFile:
    return SourceFile(
        path=Path("App/Service.php"),
        type_name="Service",
        contents=SERVICE_PHP,
        namespace="App",
    )


@pytest.fixture()
def scenario_index() -> SymbolIndex:
    """Index where Base, Loggable, Request and Helper live in the project."""
    return SymbolIndex(
        symbols={
            "Base": "Core\\Base",
            "Loggable": "Core\\Loggable",
            "Request": "Http\\Request",
            "Helper": "App\\Helper",
        }
    )


def write_php(root: Path, rel: str, contents: str) -> Path:
    """Write a Latin-1 encoded file below root, creating parents."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(contents.encode("iso-8859-1"))
    return path


@pytest.fixture()
def legacy_project(tmp_path: Path) -> Path:
    """A small legacy tree with lower-case folders and snake_case files."""
    root = tmp_path / "project"
    root.mkdir()
    write_php(
        root,
        "core/base_model.php",
        """\
<?php
class base_model
{
    public static function make()
    {
        return new base_model();
    }
}
""",
    )
    write_php(
        root,
        "core/Loggable.php",
        """\
<?php
interface Loggable
{
}
""",
    )
    write_php(
        root,
        "app/user_service.php",
        """\
<?php
class user_service extends base_model implements Loggable
{
    public function run(Request $request)
    {
        try {
            $helper = new Helper();
        } catch (\\Exception $e) {
            throw new ServiceError('failed');
        }
    }
}
""",
    )
    write_php(
        root,
        "app/Helper.php",
        """\
<?php
class Helper
{
}
""",
    )
    write_php(
        root,
        "http/Request.php",
        """\
<?php
class Request
{
}
""",
    )
    write_php(
        root,
        "views/home_page.phtml",
        """\
<html><body>
<?php $h = new Helper(); ?>
<p>Café</p>
</body></html>
""",
    )
    return root


@pytest.fixture()
def namespaced_files() -> list[SourceFile]:
    """A finished registry (renamed and namespaced) for index tests."""
    files = [
        SourceFile(Path("Core/Base.php"), "Base", "<?php class Base {}", "Core"),
        SourceFile(Path("Http/Request.php"), "Request", "<?php class Request {}", "Http"),
        SourceFile(Path("App/Helper.php"), "Helper", "<?php class Helper {}", "App"),
    ]
    return files


@pytest.fixture()
def namespaced_index(namespaced_files: list[SourceFile]) -> SymbolIndex:
    return build_index(namespaced_files)
