"""Tree-sitter parsing of PHP source into extractor node shapes."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from tree_sitter import Node as TSNode

from psrmigrate.languages import PHP
from psrmigrate.syntax import (
    Assign,
    Binary,
    Block,
    Call,
    Catch,
    ClassDecl,
    Echo,
    Entry,
    ExpressionStatement,
    FunctionDecl,
    If,
    InstanceOf,
    Leaf,
    Name,
    New,
    Node,
    Parameter,
    Property,
    PropertyLookup,
    Return,
    StaticLookup,
    Ternary,
    Throw,
    Try,
    Unary,
)

# Reserved and built-in type keywords; they may sit in a type position but
# never name a class.
_NON_CLASS_NAMES: frozenset[str] = frozenset(
    {
        "self",
        "static",
        "parent",
        "array",
        "callable",
        "iterable",
        "bool",
        "int",
        "float",
        "string",
        "void",
        "mixed",
        "object",
        "null",
        "false",
        "true",
        "never",
    }
)

# Nodes whose content is never inspected.
_LEAF_TYPES: frozenset[str] = frozenset(
    {
        "comment",
        "text",
        "php_tag",
        "name",
        "variable_name",
        "string",
        "string_content",
        "string_value",
        "encapsed_string",
        "shell_command_expression",
        "heredoc",
        "nowdoc",
        "integer",
        "float",
        "boolean",
        "null",
        "namespace_use_declaration",
        "use_declaration",
        "attribute_list",
    }
)

_NAME_TYPES: frozenset[str] = frozenset({"name", "qualified_name"})

_TYPE_TYPES: frozenset[str] = frozenset(
    {
        "named_type",
        "optional_type",
        "union_type",
        "intersection_type",
        "disjunctive_normal_form_type",
        "primitive_type",
        "type_list",
    }
)


def parse_php(text: str) -> Node | None:
    """Parse PHP source text into a syntax tree.

    tree-sitter recovers from syntax errors, so a malformed file still
    yields a (partial) tree; broken regions become generic blocks.

    Args:
        text: Decoded file contents.

    Returns:
        The root node, or None for an empty file.
    """
    if not text.strip():
        return None
    tree = PHP.get_parser().parse(text.encode("utf-8"))
    return _Converter().run(tree.root_node)


def _text(node: TSNode | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _field(node: TSNode, name: str) -> TSNode | None:
    return node.child_by_field_name(name)


def _named(node: TSNode | None) -> list[TSNode]:
    """Named children, comments excluded."""
    if node is None:
        return []
    return [c for c in node.named_children if c.type != "comment"]


def _first_named(node: TSNode) -> TSNode | None:
    children = _named(node)
    return children[0] if children else None


def _last_named(node: TSNode) -> TSNode | None:
    children = _named(node)
    return children[-1] if children else None


def _name(node: TSNode | None) -> Name | None:
    """Build a Name from a name/qualified_name node, skipping keywords."""
    if node is None or node.type not in _NAME_TYPES:
        return None
    text = _text(node).strip()
    if not text or text.lower() in _NON_CLASS_NAMES:
        return None
    return Name.parse(text)


def _type_names(node: TSNode | None) -> tuple[Name, ...]:
    """Flatten a type expression (nullable, union, intersection) into names."""
    if node is None or node.type in ("primitive_type", "bottom_type"):
        return ()
    if node.type in _NAME_TYPES:
        name = _name(node)
        return (name,) if name else ()
    names: list[Name] = []
    for child in _named(node):
        names.extend(_type_names(child))
    return tuple(names)


def _declared_type(node: TSNode) -> TSNode | None:
    type_node = _field(node, "type")
    if type_node is None:
        type_node = next((c for c in _named(node) if c.type in _TYPE_TYPES), None)
    return type_node


def _clause_names(node: TSNode) -> list[Name]:
    names = [_name(c) for c in _named(node) if c.type in _NAME_TYPES]
    return [n for n in names if n is not None]


class _Converter:
    """Converts one tree-sitter tree, children before parents.

    The walk uses an explicit stack, so arbitrarily deep trees (long
    ``.`` concatenation chains) convert without touching the recursion
    limit. Every converter reads its sub-nodes from the finished ones.
    """

    def __init__(self) -> None:
        self._done: dict[int, Node] = {}

    def run(self, root: TSNode) -> Node:
        stack: list[tuple[TSNode, bool]] = [(root, False)]
        while stack:
            node, children_done = stack.pop()
            if children_done or node.type in _LEAF_TYPES:
                self._done[node.id] = self._build(node)
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in node.children)
        return self._done[root.id]

    def convert(self, node: TSNode) -> Node:
        done = self._done.get(node.id)
        if done is None:
            done = self._done[node.id] = self._build(node)
        return done

    def convert_opt(self, node: TSNode | None) -> Node | None:
        return None if node is None else self.convert(node)

    def convert_all(self, nodes: Iterable[TSNode]) -> tuple[Node, ...]:
        return tuple(self.convert(n) for n in nodes if n.type != "comment")

    def _build(self, node: TSNode) -> Node:
        converter = _CONVERTERS.get(node.type)
        if converter is not None:
            return converter(self, node)
        if node.type in _LEAF_TYPES:
            return Leaf(node.type)
        children = _named(node)
        if not children:
            return Leaf(node.type)
        return Block(node.type, self.convert_all(children))

    def body_of(self, node: TSNode) -> tuple[Node, ...]:
        body = _field(node, "body")
        return () if body is None else (self.convert(body),)

    def arguments(self, node: TSNode | None) -> tuple[Node, ...]:
        return self.convert_all(_named(node))

    def class_decl(self, node: TSNode) -> ClassDecl:
        extends: list[Name] = []
        implements: list[Name] = []
        body: tuple[Node, ...] = ()
        for child in _named(node):
            if child.type == "base_clause":
                extends.extend(_clause_names(child))
            elif child.type == "class_interface_clause":
                implements.extend(_clause_names(child))
            elif child.type in ("declaration_list", "enum_declaration_list"):
                body = self.convert_all(_named(child))
        return ClassDecl(
            name=_text(_field(node, "name")) or None,
            extends=tuple(extends),
            implements=tuple(implements),
            body=body,
            declaration=node.type.removesuffix("_declaration"),
        )

    def function(self, node: TSNode) -> FunctionDecl:
        return FunctionDecl(
            name=_text(_field(node, "name")) or None,
            parameters=self.convert_all(_named(_field(node, "parameters"))),
            body=self.body_of(node),
            return_type=_type_names(_field(node, "return_type")),
        )

    def parameter(self, node: TSNode) -> Parameter:
        return Parameter(
            name=_text(_field(node, "name")), type=_type_names(_declared_type(node))
        )

    def property_decl(self, node: TSNode) -> Property:
        return Property(
            type=_type_names(_declared_type(node)),
            elements=self.convert_all(
                c for c in _named(node) if c.type == "property_element"
            ),
        )

    def try_(self, node: TSNode) -> Try:
        catches: list[Node] = []
        finally_body: tuple[Node, ...] = ()
        for child in _named(node):
            if child.type == "catch_clause":
                catches.append(self.convert(child))
            elif child.type == "finally_clause":
                finally_body = self.body_of(child)
        return Try(
            body=self.body_of(node), catches=tuple(catches), finally_body=finally_body
        )

    def catch(self, node: TSNode) -> Catch:
        type_node = _field(node, "type")
        if type_node is not None:
            types = _type_names(type_node)
        else:
            types = tuple(
                name
                for c in _named(node)
                if c.type in _TYPE_TYPES or c.type in _NAME_TYPES
                for name in _type_names(c)
            )
        return Catch(types=types, body=self.body_of(node))

    def new(self, node: TSNode) -> New:
        what: Name | ClassDecl | None = None
        arguments: tuple[Node, ...] = ()
        inline_class = False
        for child in _named(node):
            if child.type in _NAME_TYPES:
                what = _name(child)
            elif child.type == "anonymous_class":
                what = self.class_decl(child)
                arguments = self.arguments(
                    next((c for c in _named(child) if c.type == "arguments"), None)
                )
            elif child.type == "arguments":
                arguments = self.arguments(child)
            elif child.type == "declaration_list":
                inline_class = True
        if inline_class and what is None:
            what = self.class_decl(node)
        return New(what=what, arguments=arguments)

    def scoped_call(self, node: TSNode) -> Call:
        return Call(
            callee=StaticLookup(_name(_field(node, "scope"))),
            arguments=self.arguments(_field(node, "arguments")),
        )

    def scoped_access(self, node: TSNode) -> StaticLookup:
        scope = _field(node, "scope")
        if scope is None:
            scope = _first_named(node)
        return StaticLookup(_name(scope))

    def binary(self, node: TSNode) -> Node:
        left = _field(node, "left")
        right = _field(node, "right")
        if _text(_field(node, "operator")).lower() == "instanceof":
            return InstanceOf(subject=self.convert_opt(left), type=_name(right))
        return Binary(left=self.convert_opt(left), right=self.convert_opt(right))

    def assign(self, node: TSNode) -> Assign:
        return Assign(
            left=self.convert_opt(_field(node, "left")),
            right=self.convert_opt(_field(node, "right")),
        )

    def ternary(self, node: TSNode) -> Ternary:
        return Ternary(
            test=self.convert_opt(_field(node, "condition")),
            true_expr=self.convert_opt(_field(node, "body")),
            false_expr=self.convert_opt(_field(node, "alternative")),
        )

    def if_(self, node: TSNode) -> If:
        return If(
            test=self.convert_opt(_field(node, "condition")),
            body=self.body_of(node),
            alternate=self.convert_all(node.children_by_field_name("alternative")),
        )

    def else_(self, node: TSNode) -> Block:
        return Block(node.type, self.body_of(node))

    def throw(self, node: TSNode) -> Throw:
        return Throw(self.convert_opt(_first_named(node)))

    def return_(self, node: TSNode) -> Return:
        return Return(self.convert_opt(_first_named(node)))

    def echo(self, node: TSNode) -> Echo:
        return Echo(self.convert_all(_named(node)))

    def unary(self, node: TSNode) -> Unary:
        what = _field(node, "argument")
        if what is None:
            what = _last_named(node)
        return Unary(self.convert_opt(what))

    def entry(self, node: TSNode) -> Entry:
        return Entry(self.convert_opt(_last_named(node)))

    def function_call(self, node: TSNode) -> Call:
        return Call(
            callee=self.convert_opt(_field(node, "function")),
            arguments=self.arguments(_field(node, "arguments")),
        )

    def member_call(self, node: TSNode) -> Call:
        return Call(
            callee=PropertyLookup(self.convert_opt(_field(node, "object"))),
            arguments=self.arguments(_field(node, "arguments")),
        )

    def member_access(self, node: TSNode) -> PropertyLookup:
        return PropertyLookup(self.convert_opt(_field(node, "object")))

    def expression_statement(self, node: TSNode) -> ExpressionStatement:
        return ExpressionStatement(self.convert_opt(_first_named(node)))


_CONVERTERS: dict[str, Callable[[_Converter, TSNode], Node]] = {
    "class_declaration": _Converter.class_decl,
    "interface_declaration": _Converter.class_decl,
    "trait_declaration": _Converter.class_decl,
    "enum_declaration": _Converter.class_decl,
    "method_declaration": _Converter.function,
    "function_definition": _Converter.function,
    "anonymous_function": _Converter.function,
    "anonymous_function_creation_expression": _Converter.function,
    "arrow_function": _Converter.function,
    "simple_parameter": _Converter.parameter,
    "variadic_parameter": _Converter.parameter,
    "property_promotion_parameter": _Converter.parameter,
    "property_declaration": _Converter.property_decl,
    "try_statement": _Converter.try_,
    "catch_clause": _Converter.catch,
    "object_creation_expression": _Converter.new,
    "scoped_call_expression": _Converter.scoped_call,
    "scoped_property_access_expression": _Converter.scoped_access,
    "class_constant_access_expression": _Converter.scoped_access,
    "binary_expression": _Converter.binary,
    "assignment_expression": _Converter.assign,
    "augmented_assignment_expression": _Converter.assign,
    "reference_assignment_expression": _Converter.assign,
    "conditional_expression": _Converter.ternary,
    "if_statement": _Converter.if_,
    "else_if_clause": _Converter.if_,
    "else_clause": _Converter.else_,
    "throw_expression": _Converter.throw,
    "throw_statement": _Converter.throw,
    "return_statement": _Converter.return_,
    "echo_statement": _Converter.echo,
    "unary_op_expression": _Converter.unary,
    "array_element_initializer": _Converter.entry,
    "function_call_expression": _Converter.function_call,
    "member_call_expression": _Converter.member_call,
    "nullsafe_member_call_expression": _Converter.member_call,
    "member_access_expression": _Converter.member_access,
    "nullsafe_member_access_expression": _Converter.member_access,
    "expression_statement": _Converter.expression_statement,
}
