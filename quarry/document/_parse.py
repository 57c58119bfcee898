"""
Parsing — query text → Document.

Grammar is graphql-core's; this module only converts its AST into quarry's
own immutable nodes (expanding named fragments on the way).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from graphql import GraphQLSyntaxError, parse as parse_source, print_ast
from graphql.language import ast as gql

from quarry._types import UNSET
from quarry.errors import DocumentError
from quarry.document._types import (
    Directive,
    Document,
    FieldNode,
    InlineFragment,
    Operation,
    Selection,
    Variable,
    VariableDefinition,
)

logger = logging.getLogger(__name__)


def parse(text: str) -> Document:
    """
    Parse query text.

    Raises DocumentError on syntax errors, subscriptions, type-system
    definitions, unknown fragments and fragment cycles.
    """
    try:
        tree = parse_source(text, no_location=True)
    except GraphQLSyntaxError as exc:
        raise DocumentError(f"Syntax Error: {exc.message}") from exc

    fragments: dict[str, gql.FragmentDefinitionNode] = {}
    op_nodes: list[gql.OperationDefinitionNode] = []
    for definition in tree.definitions:
        match definition:
            case gql.OperationDefinitionNode():
                op_nodes.append(definition)
            case gql.FragmentDefinitionNode():
                name = definition.name.value
                if name in fragments:
                    raise DocumentError(f"There can be only one fragment named '{name}'.")
                fragments[name] = definition
            case _:
                raise DocumentError("Type system definitions are not executable.")

    if not op_nodes:
        raise DocumentError("Document contains no operations.")

    converter = _Converter(fragments)
    return Document(tuple(converter.operation(node) for node in op_nodes))


# ═══════════════════════════════════════════════════════════════════════════════
# AST conversion
# ═══════════════════════════════════════════════════════════════════════════════


class _Converter:
    __slots__ = ("_fragments",)

    def __init__(self, fragments: Mapping[str, gql.FragmentDefinitionNode]) -> None:
        self._fragments = fragments

    def operation(self, node: gql.OperationDefinitionNode) -> Operation:
        kind = node.operation.value
        if kind not in ("query", "mutation"):
            raise DocumentError(f"Operation type '{kind}' is not supported.")
        return Operation(
            kind=kind,
            selections=self.selections(node.selection_set, visiting=()),
            name=node.name.value if node.name else None,
            variables=tuple(
                VariableDefinition(
                    name=v.variable.name.value,
                    type=print_ast(v.type),
                    default=value(v.default_value) if v.default_value else UNSET,
                )
                for v in node.variable_definitions or ()
            ),
        )

    def selections(
        self,
        selection_set: gql.SelectionSetNode,
        visiting: tuple[str, ...],
    ) -> tuple[Selection, ...]:
        out: list[Selection] = []
        for sel in selection_set.selections:
            match sel:
                case gql.FieldNode():
                    out.append(self.field(sel, visiting))
                case gql.InlineFragmentNode():
                    out.append(
                        InlineFragment(
                            type_condition=sel.type_condition.name.value if sel.type_condition else None,
                            selections=self.selections(sel.selection_set, visiting),
                            directives=directives(sel.directives),
                        )
                    )
                case gql.FragmentSpreadNode():
                    out.append(self.spread(sel, visiting))
                case _:
                    raise DocumentError(f"Unsupported selection {type(sel).__name__}.")
        return tuple(out)

    def field(self, node: gql.FieldNode, visiting: tuple[str, ...]) -> FieldNode:
        return FieldNode(
            name=node.name.value,
            alias=node.alias.value if node.alias else None,
            arguments=arguments(node.arguments),
            selections=(
                self.selections(node.selection_set, visiting)
                if node.selection_set is not None
                else None
            ),
            directives=directives(node.directives),
        )

    def spread(self, node: gql.FragmentSpreadNode, visiting: tuple[str, ...]) -> InlineFragment:
        name = node.name.value
        definition = self._fragments.get(name)
        if definition is None:
            raise DocumentError(f"Unknown fragment '{name}'.")
        if name in visiting:
            raise DocumentError(f"Cannot spread fragment '{name}' within itself.")
        return InlineFragment(
            type_condition=definition.type_condition.name.value,
            selections=self.selections(definition.selection_set, (*visiting, name)),
            directives=directives(node.directives),
        )


def arguments(nodes: Iterable[gql.ArgumentNode] | None) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for arg in nodes or ():
        name = arg.name.value
        if name in out:
            raise DocumentError(f"There can be only one argument named '{name}'.")
        out[name] = value(arg.value)
    return out


def directives(nodes: Iterable[gql.DirectiveNode] | None) -> tuple[Directive, ...]:
    return tuple(Directive(d.name.value, arguments(d.arguments)) for d in nodes or ())


def value(node: gql.ValueNode) -> Any:
    """Literal AST value → Python value; variables stay as Variable."""
    match node:
        case gql.VariableNode():
            return Variable(node.name.value)
        case gql.IntValueNode():
            return int(node.value)
        case gql.FloatValueNode():
            return float(node.value)
        case gql.BooleanValueNode():
            return node.value
        case gql.NullValueNode():
            return None
        case gql.StringValueNode() | gql.EnumValueNode():
            return node.value
        case gql.ListValueNode():
            return [value(v) for v in node.values]
        case gql.ObjectValueNode():
            return {f.name.value: value(f.value) for f in node.fields}
        case _:
            raise DocumentError(f"Unsupported value {type(node).__name__}.")


__all__ = ("parse",)
