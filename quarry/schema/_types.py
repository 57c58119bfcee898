"""
Schema types — core data structures.

Type references are plain names wrapped in ListOf / NonNull; the registry
resolves names, so object types may point at each other.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from quarry._types import UNSET, Unset

if TYPE_CHECKING:
    from quarry.execution._scope import ExecutionScope


class SchemaError(Exception):
    """Type or field referenced but never registered, or an invalid definition."""


# ═══════════════════════════════════════════════════════════════════════════════
# Wrappers
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ListOf:
    """List of the inner type."""

    of: TypeRef


@dataclass(frozen=True, slots=True)
class NonNull:
    """Non-null inner type."""

    of: TypeRef


type TypeRef = str | ListOf | NonNull
"""A type name, or a wrapper around one."""

# ═══════════════════════════════════════════════════════════════════════════════
# Named Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Scalar:
    """
    Leaf type.

    serialize: internal value → response value
    parse_value: request value → internal value

    Both raise TypeError/ValueError on values they cannot represent.
    """

    name: str
    serialize: Callable[[Any], Any]
    parse_value: Callable[[Any], Any]


type Resolver = Callable[[Any, Mapping[str, Any], ExecutionScope], Any]
"""resolve(parent, args, scope) -> value | awaitable"""


@dataclass(frozen=True, slots=True)
class Argument:
    """Argument of a field, or a field of an input object."""

    type: TypeRef
    name: str = ""
    default: Any = UNSET
    description: str | None = None

    @property
    def required(self) -> bool:
        return isinstance(self.type, NonNull) and self.default is UNSET

    @property
    def has_default(self) -> bool:
        return not isinstance(self.default, Unset)


@dataclass(frozen=True, slots=True)
class Field:
    """
    Output field.

    Without resolve, the value is read from the parent: mapping key or
    attribute named by source (defaults to the field name).
    """

    type: TypeRef
    resolve: Resolver | None = None
    args: tuple[Argument, ...] = ()
    source: str | None = None
    description: str | None = None
    name: str = ""

    def argument(self, name: str) -> Argument | None:
        for arg in self.args:
            if arg.name == name:
                return arg
        return None


@dataclass(frozen=True, slots=True)
class ObjectType:
    name: str
    fields: Mapping[str, Field] = field(default_factory=dict[str, Field])


@dataclass(frozen=True, slots=True)
class InputObject:
    name: str
    fields: Mapping[str, Argument] = field(default_factory=dict[str, Argument])


type NamedType = Scalar | ObjectType | InputObject
type OutputType = Scalar | ObjectType
type InputType = Scalar | InputObject


def named(ref: TypeRef) -> str:
    """Innermost type name of a reference."""
    while not isinstance(ref, str):
        ref = ref.of
    return ref


def describe(ref: TypeRef) -> str:
    """GraphQL spelling of a reference: [Order!]!"""
    match ref:
        case NonNull(of):
            return f"{describe(of)}!"
        case ListOf(of):
            return f"[{describe(of)}]"
        case _:
            return ref


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "SchemaError",
    "ListOf",
    "NonNull",
    "TypeRef",
    "Scalar",
    "Resolver",
    "Argument",
    "Field",
    "ObjectType",
    "InputObject",
    "NamedType",
    "OutputType",
    "InputType",
    "named",
    "describe",
)
