"""Collect candidate type names from a syntax tree.

The walk is a partial visitor: node shapes that carry type-bearing
positions (inheritance clauses, parameter and property types, catch
clauses, ``new``, ``T::``, ``instanceof``) contribute names, control
constructs only lead the walk to their relevant sub-nodes, and everything
else falls back to its generic children. Names are emitted in source order and are not
deduplicated here.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import structlog

from psrmigrate.models import TypeReference
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
    Resolution,
    Return,
    StaticLookup,
    Ternary,
    Throw,
    Try,
    Unary,
)

log = structlog.get_logger(__name__)

# (names found on the node itself, sub-nodes still to walk)
_Visit = tuple[list[TypeReference], Sequence["Node | None"]]


def extract(tree: Node | None) -> list[TypeReference]:
    """Return every type reference candidate in ``tree``, in source order.

    Args:
        tree: Root node from the parser adapter, or None for an empty file.

    Returns:
        List of TypeReference; may hold duplicates and ``None`` names.
    """
    if tree is None:
        return []

    references: list[TypeReference] = []
    stack: list[Node] = [tree]
    while stack:
        node = stack.pop()
        handler = _HANDLERS.get(type(node), _generic)
        found, children = handler(node)
        references.extend(found)
        stack.extend(child for child in reversed(children) if child is not None)
    return references


def type_name(name: Name | None, context: str) -> TypeReference:
    """Turn a Name at a type-bearing position into a reference.

    Fully-qualified spellings need no import of their own; they are
    reported for manual review and returned without the leading separator.
    """
    if name is None or not name.name:
        return TypeReference(None, context)
    if name.resolution is Resolution.FULLY_QUALIFIED:
        log.warning("fully_qualified_reference", name=name.name, context=context)
    return TypeReference(name.name, context)


def _generic(node: Any) -> _Visit:
    return [], getattr(node, "children", ())


def _leaf(node: Leaf) -> _Visit:
    return [], ()


def _class(node: ClassDecl) -> _Visit:
    refs = [type_name(n, "extends") for n in node.extends]
    refs.extend(type_name(n, "implements") for n in node.implements)
    return refs, node.body


def _function(node: FunctionDecl) -> _Visit:
    refs = [type_name(n, "return") for n in node.return_type]
    return refs, (*node.parameters, *node.body)


def _parameter(node: Parameter) -> _Visit:
    return [type_name(n, "parameter") for n in node.type], ()


def _property(node: Property) -> _Visit:
    return [type_name(n, "property") for n in node.type], node.elements


def _try(node: Try) -> _Visit:
    return [], (*node.body, *node.catches, *node.finally_body)


def _catch(node: Catch) -> _Visit:
    return [type_name(n, "catch") for n in node.types], node.body


def _new(node: New) -> _Visit:
    if isinstance(node.what, ClassDecl):
        return [], (node.what, *node.arguments)
    # Read straight off the expression: no qualification check.
    name = node.what.name if node.what is not None else None
    return [TypeReference(name or None, "new")], node.arguments


def _static_lookup(node: StaticLookup) -> _Visit:
    return [type_name(node.scope, "staticlookup")], ()


def _instanceof(node: InstanceOf) -> _Visit:
    return [type_name(node.type, "instanceof")], ()


def _if(node: If) -> _Visit:
    return [], (node.test, *node.body, *node.alternate)


def _ternary(node: Ternary) -> _Visit:
    return [], (node.test, node.true_expr, node.false_expr)


def _throw(node: Throw) -> _Visit:
    return [], (node.what,)


def _return(node: Return) -> _Visit:
    return [], (node.expr,)


def _echo(node: Echo) -> _Visit:
    return [], node.expressions


def _unary(node: Unary) -> _Visit:
    return [], (node.what,)


def _binary(node: Binary | Assign) -> _Visit:
    return [], (node.left, node.right)


def _entry(node: Entry) -> _Visit:
    return [], (node.value,)


def _call(node: Call) -> _Visit:
    return [], (node.callee, *node.arguments)


def _property_lookup(node: PropertyLookup) -> _Visit:
    return [], (node.what,)


def _expression(node: ExpressionStatement) -> _Visit:
    return [], (node.expression,)


_HANDLERS: dict[type, Callable[[Any], _Visit]] = {
    Block: _generic,
    Leaf: _leaf,
    ClassDecl: _class,
    FunctionDecl: _function,
    Parameter: _parameter,
    Property: _property,
    Try: _try,
    Catch: _catch,
    New: _new,
    StaticLookup: _static_lookup,
    InstanceOf: _instanceof,
    If: _if,
    Ternary: _ternary,
    Throw: _throw,
    Return: _return,
    Echo: _echo,
    Unary: _unary,
    Binary: _binary,
    Assign: _binary,
    Entry: _entry,
    Call: _call,
    PropertyLookup: _property_lookup,
    ExpressionStatement: _expression,
}
