"""
Document types — the parsed selection tree.

Immutable; one Document may be executed many times.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from quarry._types import UNSET
from quarry.errors import DocumentError

# ═══════════════════════════════════════════════════════════════════════════════
# Values
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Variable:
    """$name inside an argument value."""

    name: str


@dataclass(frozen=True, slots=True)
class Directive:
    """@name(arguments)"""

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict[str, Any])


# ═══════════════════════════════════════════════════════════════════════════════
# Selections
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FieldNode:
    """
    Field selection.

    selections is None for a scalar-field selection and a tuple for an
    object-field selection.
    """

    name: str
    alias: str | None = None
    arguments: Mapping[str, Any] = field(default_factory=dict[str, Any])
    selections: tuple[Selection, ...] | None = None
    directives: tuple[Directive, ...] = ()

    @property
    def response_key(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True, slots=True)
class InlineFragment:
    """... on Type { ... } — also what named fragment spreads expand to."""

    type_condition: str | None
    selections: tuple[Selection, ...]
    directives: tuple[Directive, ...] = ()


type Selection = FieldNode | InlineFragment

# ═══════════════════════════════════════════════════════════════════════════════
# Operations
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class VariableDefinition:
    name: str
    type: str
    default: Any = UNSET


@dataclass(frozen=True, slots=True)
class Operation:
    kind: Literal["query", "mutation"]
    selections: tuple[Selection, ...]
    name: str | None = None
    variables: tuple[VariableDefinition, ...] = ()

    def variable_values(self, provided: Mapping[str, Any] | None) -> dict[str, Any]:
        """Declared defaults overlaid with provided values."""
        values: dict[str, Any] = {
            v.name: v.default for v in self.variables if v.default is not UNSET
        }
        if provided:
            values.update(provided)
        return values


@dataclass(frozen=True, slots=True)
class Document:
    operations: tuple[Operation, ...]

    def operation(self, name: str | None = None) -> Operation:
        if name is not None:
            for op in self.operations:
                if op.name == name:
                    return op
            raise DocumentError(f"Unknown operation named '{name}'.")
        if len(self.operations) != 1:
            raise DocumentError("Must provide operation name if query contains multiple operations.")
        return self.operations[0]


__all__ = (
    "Variable",
    "Directive",
    "FieldNode",
    "InlineFragment",
    "Selection",
    "VariableDefinition",
    "Operation",
    "Document",
)
