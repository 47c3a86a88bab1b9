"""Syntax tree node shapes consumed by the reference extractor.

The parser adapter (:mod:`psrmigrate.parsing`) turns a concrete tree-sitter
tree into these immutable nodes. The set is closed: every shape listed in
:data:`NODE_TYPES` has an explicit entry in the extractor's dispatch table.
Constructs without a dedicated shape become a :class:`Block` when they
have children worth walking, or a :class:`Leaf` when they do not.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Union


class NodeKind(enum.Enum):
    """Discriminant of a syntax node."""

    BLOCK = "block"
    LEAF = "leaf"
    CLASS = "class"
    FUNCTION = "function"
    PARAMETER = "parameter"
    TRY = "try"
    CATCH = "catch"
    NEW = "new"
    STATIC_LOOKUP = "staticlookup"
    INSTANCEOF = "instanceof"
    IF = "if"
    TERNARY = "retif"
    THROW = "throw"
    RETURN = "return"
    ECHO = "echo"
    UNARY = "unary"
    BINARY = "bin"
    ASSIGN = "assign"
    ENTRY = "entry"
    CALL = "call"
    PROPERTY_LOOKUP = "propertylookup"
    EXPRESSION = "expressionstatement"
    PROPERTY = "property"


class Resolution(enum.Enum):
    """How a name is qualified where it is written."""

    UNQUALIFIED = "uqn"
    QUALIFIED = "qn"
    FULLY_QUALIFIED = "fqn"
    RELATIVE = "rn"


@dataclass(frozen=True)
class Name:
    """A type name at a type-bearing position.

    ``name`` never carries the leading namespace separator; whether the
    source wrote one is recorded in ``resolution``.
    """

    name: str
    resolution: Resolution = Resolution.UNQUALIFIED

    @classmethod
    def parse(cls, text: str) -> Name:
        """Build a Name from its source spelling (``Foo``, ``\\A\\Foo``)."""
        text = text.strip()
        if text.startswith("\\"):
            return cls(text.lstrip("\\"), Resolution.FULLY_QUALIFIED)
        if text.lower().startswith("namespace\\"):
            return cls(text.split("\\", 1)[1], Resolution.RELATIVE)
        if "\\" in text:
            return cls(text, Resolution.QUALIFIED)
        return cls(text, Resolution.UNQUALIFIED)


@dataclass(frozen=True)
class Block:
    """Any construct whose only interest is its children."""

    kind: ClassVar[NodeKind] = NodeKind.BLOCK
    label: str
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Leaf:
    """A construct with nothing type-bearing inside (literals, variables)."""

    kind: ClassVar[NodeKind] = NodeKind.LEAF
    label: str


@dataclass(frozen=True)
class ClassDecl:
    """Class, interface, trait or enum declaration (named or anonymous)."""

    kind: ClassVar[NodeKind] = NodeKind.CLASS
    name: str | None
    extends: tuple[Name, ...] = ()
    implements: tuple[Name, ...] = ()
    body: tuple[Node, ...] = ()
    declaration: str = "class"


@dataclass(frozen=True)
class FunctionDecl:
    """Function, method, closure or arrow function."""

    kind: ClassVar[NodeKind] = NodeKind.FUNCTION
    name: str | None
    parameters: tuple[Node, ...] = ()
    body: tuple[Node, ...] = ()
    return_type: tuple[Name, ...] = ()


@dataclass(frozen=True)
class Parameter:
    kind: ClassVar[NodeKind] = NodeKind.PARAMETER
    name: str
    type: tuple[Name, ...] = ()


@dataclass(frozen=True)
class Property:
    """Property declaration; defaults in ``elements`` are walked."""

    kind: ClassVar[NodeKind] = NodeKind.PROPERTY
    type: tuple[Name, ...] = ()
    elements: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Try:
    kind: ClassVar[NodeKind] = NodeKind.TRY
    body: tuple[Node, ...] = ()
    catches: tuple[Node, ...] = ()
    finally_body: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Catch:
    kind: ClassVar[NodeKind] = NodeKind.CATCH
    types: tuple[Name, ...] = ()
    body: tuple[Node, ...] = ()


@dataclass(frozen=True)
class New:
    """Object construction; ``what`` is None for ``new $var``/``new static``."""

    kind: ClassVar[NodeKind] = NodeKind.NEW
    what: Name | ClassDecl | None
    arguments: tuple[Node, ...] = ()


@dataclass(frozen=True)
class StaticLookup:
    """``T::member``; ``scope`` is None for self/static/parent or ``$var::``."""

    kind: ClassVar[NodeKind] = NodeKind.STATIC_LOOKUP
    scope: Name | None


@dataclass(frozen=True)
class InstanceOf:
    kind: ClassVar[NodeKind] = NodeKind.INSTANCEOF
    subject: Node | None
    type: Name | None


@dataclass(frozen=True)
class If:
    kind: ClassVar[NodeKind] = NodeKind.IF
    test: Node | None
    body: tuple[Node, ...] = ()
    alternate: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Ternary:
    kind: ClassVar[NodeKind] = NodeKind.TERNARY
    test: Node | None
    true_expr: Node | None
    false_expr: Node | None


@dataclass(frozen=True)
class Throw:
    kind: ClassVar[NodeKind] = NodeKind.THROW
    what: Node | None


@dataclass(frozen=True)
class Return:
    kind: ClassVar[NodeKind] = NodeKind.RETURN
    expr: Node | None


@dataclass(frozen=True)
class Echo:
    kind: ClassVar[NodeKind] = NodeKind.ECHO
    expressions: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Unary:
    kind: ClassVar[NodeKind] = NodeKind.UNARY
    what: Node | None


@dataclass(frozen=True)
class Binary:
    kind: ClassVar[NodeKind] = NodeKind.BINARY
    left: Node | None
    right: Node | None


@dataclass(frozen=True)
class Assign:
    kind: ClassVar[NodeKind] = NodeKind.ASSIGN
    left: Node | None
    right: Node | None


@dataclass(frozen=True)
class Entry:
    """Array element; only the value can hold a type reference."""

    kind: ClassVar[NodeKind] = NodeKind.ENTRY
    value: Node | None


@dataclass(frozen=True)
class Call:
    kind: ClassVar[NodeKind] = NodeKind.CALL
    callee: Node | None
    arguments: tuple[Node, ...] = ()


@dataclass(frozen=True)
class PropertyLookup:
    """``$obj->prop`` and ``$obj->method``; only the object is walked."""

    kind: ClassVar[NodeKind] = NodeKind.PROPERTY_LOOKUP
    what: Node | None


@dataclass(frozen=True)
class ExpressionStatement:
    kind: ClassVar[NodeKind] = NodeKind.EXPRESSION
    expression: Node | None


Node = Union[
    Block,
    Leaf,
    ClassDecl,
    FunctionDecl,
    Parameter,
    Property,
    Try,
    Catch,
    New,
    StaticLookup,
    InstanceOf,
    If,
    Ternary,
    Throw,
    Return,
    Echo,
    Unary,
    Binary,
    Assign,
    Entry,
    Call,
    PropertyLookup,
    ExpressionStatement,
]

NODE_TYPES: tuple[type, ...] = Node.__args__  # type: ignore[attr-defined]
