"""Tests for writing namespace and use declarations."""

from __future__ import annotations

from pathlib import Path

from structlog.testing import capture_logs

from psrmigrate.models import SourceFile
from psrmigrate.persist import persist, render_file, use_block


def _php(contents: str, imports: tuple[str, ...] = (), namespace: str | None = "Acme\\App") -> SourceFile:
    return SourceFile(
        path=Path("App/Service.php"),
        type_name="Service",
        contents=contents,
        namespace=namespace,
        imports=imports,
    )


def _template(contents: str, imports: tuple[str, ...] = ()) -> SourceFile:
    return SourceFile(
        path=Path("Views/Home.phtml"),
        type_name="Home",
        contents=contents,
        namespace="Acme\\Views",
        imports=imports,
    )


class TestUseBlock:
    """Tests for use_block."""

    def test_empty(self) -> None:
        assert use_block(()) == ""

    def test_one_line_per_import(self) -> None:
        assert use_block(("Core\\Base", "Exception")) == "use Core\\Base;\nuse Exception;\n"


class TestRenderClassFile:
    """Tests for render_file on .php files."""

    def test_namespace_and_uses_after_open_tag(self) -> None:
        f = _php("<?php\nclass Service {}\n", ("Core\\Base", "Exception"))
        assert render_file(f) == (
            "<?php\n\n"
            "namespace Acme\\App;\n\n"
            "use Core\\Base;\n"
            "use Exception;\n"
            "\nclass Service {}\n"
        )

    def test_empty_import_set_has_no_use_lines(self) -> None:
        rendered = render_file(_php("<?php\nclass Service {}\n"))
        assert rendered == "<?php\n\nnamespace Acme\\App;\n\n\nclass Service {}\n"
        assert "use" not in rendered

    def test_short_open_tag(self) -> None:
        rendered = render_file(_php("<?\nclass Service {}\n"))
        assert rendered is not None
        assert rendered.startswith("<?php\n\nnamespace Acme\\App;")

    def test_only_first_open_tag_replaced(self) -> None:
        rendered = render_file(_php("<?php\n$a = 1;\n?>\n<?php $b = 2;\n"))
        assert rendered is not None
        assert rendered.count("namespace") == 1
        assert rendered.endswith("?>\n<?php $b = 2;\n")

    def test_echo_tag_not_an_open_tag(self) -> None:
        f = _php("<p><?= $x ?></p>")
        with capture_logs() as logs:
            assert render_file(f) is None
        assert logs[0]["event"] == "missing_open_tag"

    def test_without_namespace(self) -> None:
        rendered = render_file(_php("<?php\n", ("Exception",), namespace=None))
        assert rendered == "<?php\n\nuse Exception;\n\n"


class TestRenderTemplate:
    """Tests for render_file on .phtml templates."""

    def test_no_imports_left_untouched(self) -> None:
        assert render_file(_template("<?php echo 1; ?>")) is None

    def test_uses_after_leading_open_tag(self) -> None:
        f = _template("<?php $h = new Helper(); ?>\n<p>x</p>\n", ("Acme\\App\\Helper",))
        assert render_file(f) == (
            "<?php\n\nuse Acme\\App\\Helper;\n $h = new Helper(); ?>\n<p>x</p>\n"
        )

    def test_prepends_block_when_first_line_is_markup(self) -> None:
        f = _template("<html>\n<?php new Helper(); ?>\n", ("Acme\\App\\Helper",))
        assert render_file(f) == (
            "<?php\n\nuse Acme\\App\\Helper;\n\n?>\n\n<html>\n<?php new Helper(); ?>\n"
        )

    def test_never_declares_namespace(self) -> None:
        rendered = render_file(_template("<?php\n", ("Exception",)))
        assert rendered is not None
        assert "namespace" not in rendered


class TestPersist:
    """Tests for persist."""

    def test_writes_changed_files_in_encoding(self, tmp_path: Path) -> None:
        (tmp_path / "App").mkdir()
        (tmp_path / "Views").mkdir()
        service = _php("<?php\n// café\nclass Service {}\n", ("Exception",))
        home = _template("<p>unchanged</p>\n")
        (tmp_path / "Views" / "Home.phtml").write_text(home.contents, encoding="utf-8")

        assert persist(tmp_path, [service, home], "iso-8859-1") == 1

        raw = (tmp_path / "App" / "Service.php").read_bytes()
        assert "café".encode("iso-8859-1") in raw
        assert raw.decode("iso-8859-1").startswith("<?php\n\nnamespace Acme\\App;")
        assert (tmp_path / "Views" / "Home.phtml").read_text(encoding="utf-8") == (
            "<p>unchanged</p>\n"
        )
