"""Tests for tree-sitter PHP parsing into extractor node shapes."""

from __future__ import annotations

from psrmigrate.extractor import extract
from psrmigrate.parsing import parse_php
from psrmigrate.syntax import Block, ClassDecl


def _names(code: str) -> list[str]:
    return [ref.name for ref in extract(parse_php(code)) if ref.name]


class TestParsePhp:
    """Integration tests for parse_php using the real PHP grammar."""

    def test_empty_text(self) -> None:
        assert parse_php("") is None
        assert parse_php("   \n") is None

    def test_root_is_program_block(self) -> None:
        tree = parse_php("<?php\n$x = 1;\n")
        assert isinstance(tree, Block)
        assert tree.label == "program"

    def test_class_declaration_shape(self) -> None:
        tree = parse_php("<?php\nclass Service extends Base implements A, B {}\n")
        assert isinstance(tree, Block)
        decl = next(c for c in tree.children if isinstance(c, ClassDecl))
        assert decl.name == "Service"
        assert [n.name for n in decl.extends] == ["Base"]
        assert [n.name for n in decl.implements] == ["A", "B"]

    def test_malformed_source_does_not_raise(self) -> None:
        tree = parse_php("<?php\nclass { function ( new Foo(; \n")
        assert tree is not None
        extract(tree)


class TestTypePositions:
    """Type-bearing positions found in parsed PHP."""

    def test_service_scenario(self) -> None:
        code = """<?php
class Service extends Base implements Loggable {
    function run(Request $r) {
        try { new Helper(); } catch (Exception $e) {}
    }
}
"""
        assert set(_names(code)) == {"Base", "Loggable", "Request", "Helper", "Exception"}

    def test_nullable_and_return_types(self) -> None:
        code = "<?php\nfunction load(?Config $c): Result { return null; }\n"
        assert set(_names(code)) == {"Config", "Result"}

    def test_scalar_types_ignored(self) -> None:
        code = "<?php\nfunction f(int $a, string $b, array $c): void {}\n"
        assert _names(code) == []

    def test_non_keyword_type_names_are_classes(self) -> None:
        code = "<?php\nfunction f(Integer $i) { return new Double(); }\n"
        assert _names(code) == ["Integer", "Double"]

    def test_typed_properties(self) -> None:
        code = """<?php
class Service {
    private Clock $clock;
    protected ?Cache $cache = null;
    public int $count = 0;
    public $mode = Mode::FAST;
}
"""
        assert _names(code) == ["Clock", "Cache", "Mode"]

    def test_multi_catch(self) -> None:
        code = "<?php\ntry { run(); } catch (NotFound | Forbidden $e) { log($e); }\n"
        assert set(_names(code)) == {"NotFound", "Forbidden"}

    def test_fully_qualified_catch(self) -> None:
        code = "<?php\ntry { run(); } catch (\\Exception $e) {}\n"
        assert _names(code) == ["Exception"]

    def test_static_call_and_constant(self) -> None:
        code = "<?php\n$a = Registry::get(Config::KEY);\n$b = Cache::$store;\n"
        assert set(_names(code)) == {"Registry", "Config", "Cache"}

    def test_relative_scopes_ignored(self) -> None:
        code = """<?php
class Foo extends Bar {
    static function make() {
        self::boot();
        parent::boot();
        return new static();
    }
}
"""
        assert _names(code) == ["Bar"]

    def test_instanceof(self) -> None:
        code = "<?php\nif ($x instanceof Shape) { echo 1; }\n"
        assert _names(code) == ["Shape"]

    def test_nested_in_control_flow(self) -> None:
        code = """<?php
function f($a) {
    if ($a) {
        $x = $a ? new Left() : new Right();
    } elseif ($a > 1) {
        throw new Oops();
    } else {
        echo Printer::render([1 => new Item()]);
    }
    return $x->with(new Arg());
}
"""
        assert set(_names(code)) == {"Left", "Right", "Oops", "Printer", "Item", "Arg"}

    def test_non_type_identifiers_ignored(self) -> None:
        code = """<?php
$name = 'new Fake()';
$other = "Fake::run()";
strlen($name);
$obj->Fake();
define('Fake', 1);
"""
        assert _names(code) == []

    def test_use_declarations_are_not_references(self) -> None:
        code = "<?php\nuse Vendor\\Lib\\Thing;\n$x = 1;\n"
        assert _names(code) == []

    def test_closures_and_arrow_functions(self) -> None:
        code = """<?php
$f = function (Input $in) use ($y) { return new Output(); };
$g = fn(Source $s) => new Target();
"""
        assert set(_names(code)) == {"Input", "Output", "Source", "Target"}

    def test_interface_extends(self) -> None:
        code = "<?php\ninterface Repo extends Readable, Writable {}\n"
        assert set(_names(code)) == {"Readable", "Writable"}

    def test_anonymous_class(self) -> None:
        code = "<?php\n$x = new class(new Dep()) extends Base {};\n"
        assert set(_names(code)) == {"Dep", "Base"}

    def test_template_with_html(self) -> None:
        code = "<html>\n<?php $h = new Helper(); ?>\n<p>hi</p>\n"
        assert _names(code) == ["Helper"]

    def test_repeated_references_are_all_reported(self) -> None:
        code = """<?php
function f() {
    try { $l = new Logger(); } catch (Logger $e) { Logger::flush(); }
}
"""
        assert _names(code) == ["Logger", "Logger", "Logger"]


class TestDeepSource:
    """Source whose syntax tree is far deeper than the recursion limit."""

    def test_long_concatenation_keeps_other_references(self) -> None:
        chain = " . ".join(["'x'"] * 3000)
        code = f"""<?php
class Report extends Base {{
    function sql() {{
        $s = {chain};
        return new Helper();
    }}
}}
"""
        assert _names(code) == ["Base", "Helper"]

    def test_reference_inside_the_chain(self) -> None:
        chain = " . ".join(["'x'"] * 1500 + ["Format::SEP"] + ["'y'"] * 1500)
        assert _names(f"<?php\n$s = {chain};\n") == ["Format"]
