"""
Selection validation — checks a selection tree against the schema before
anything resolves. Every failure is a DocumentError.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from quarry.document import Directive, FieldNode, InlineFragment, Operation, Selection, Variable
from quarry.errors import DocumentError
from quarry.schema import ObjectType, Scalar, Schema, describe

_DIRECTIVES = frozenset({"skip", "include"})


def validate(schema: Schema, operation: Operation, root: ObjectType) -> None:
    declared = frozenset(v.name for v in operation.variables)
    _selections(schema, root, operation.selections, declared)


def _selections(
    schema: Schema,
    parent: ObjectType,
    selections: Iterable[Selection],
    declared: frozenset[str],
) -> None:
    for sel in selections:
        _directives(sel.directives, declared)
        match sel:
            case FieldNode():
                _field(schema, parent, sel, declared)
            case InlineFragment(type_condition=None):
                _selections(schema, parent, sel.selections, declared)
            case InlineFragment(type_condition=cond):
                typ = schema.types.get(cond)
                if not isinstance(typ, ObjectType):
                    raise DocumentError(f"Unknown type '{cond}'.")
                _selections(schema, typ, sel.selections, declared)


def _field(schema: Schema, parent: ObjectType, node: FieldNode, declared: frozenset[str]) -> None:
    if node.name == "__typename":
        if node.selections is not None:
            raise DocumentError("Field '__typename' must not have a selection.")
        return

    fld = parent.fields.get(node.name)
    if fld is None:
        raise DocumentError(f"Cannot query field '{node.name}' on type '{parent.name}'.")

    for name, value in node.arguments.items():
        if fld.argument(name) is None:
            raise DocumentError(f"Unknown argument '{name}' on field '{parent.name}.{node.name}'.")
        _variables(value, declared)

    typ = schema.named_type(fld.type)
    if isinstance(typ, Scalar):
        if node.selections is not None:
            raise DocumentError(
                f"Field '{node.name}' must not have a selection since type "
                f"'{describe(fld.type)}' has no subfields."
            )
        return
    if not node.selections:
        raise DocumentError(
            f"Field '{node.name}' of type '{describe(fld.type)}' must have a selection of subfields."
        )
    _selections(schema, schema.object_type(typ.name), node.selections, declared)


def _directives(directives: Iterable[Directive], declared: frozenset[str]) -> None:
    for d in directives:
        if d.name not in _DIRECTIVES:
            raise DocumentError(f"Unknown directive '@{d.name}'.")
        if "if" not in d.arguments:
            raise DocumentError(f"Directive '@{d.name}' requires argument 'if'.")
        cond = d.arguments["if"]
        if not isinstance(cond, (bool, Variable)):
            raise DocumentError(f"Directive '@{d.name}' argument 'if' must be a Boolean.")
        _variables(cond, declared)


def _variables(value: Any, declared: frozenset[str]) -> None:
    match value:
        case Variable(name) if name not in declared:
            raise DocumentError(f"Variable '${name}' is not defined.")
        case list():
            for item in value:
                _variables(item, declared)
        case dict():
            for item in value.values():
                _variables(item, declared)
        case _:
            pass


__all__ = ("validate",)
