"""
Schema registry — register once, build, read forever.

    registry = SchemaRegistry()
    registry.register_type("Query", {"hello": Field("String", resolve=...)})
    schema = registry.build()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Literal, Self

from quarry.schema._scalars import BUILTIN_SCALARS
from quarry.schema._types import (
    Argument,
    Field,
    InputObject,
    ListOf,
    NamedType,
    NonNull,
    ObjectType,
    Scalar,
    SchemaError,
    TypeRef,
    describe,
    named,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Schema — the immutable result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Schema:
    """
    Built schema. Read-only; shared by every execution.
    """

    types: Mapping[str, NamedType]
    query_type: str
    mutation_type: str | None = None

    def resolve(self, name: str) -> NamedType:
        typ = self.types.get(name)
        if typ is None:
            raise SchemaError(f"Unknown type '{name}'")
        return typ

    def named_type(self, ref: TypeRef) -> NamedType:
        return self.resolve(named(ref))

    def object_type(self, name: str) -> ObjectType:
        typ = self.resolve(name)
        if not isinstance(typ, ObjectType):
            raise SchemaError(f"Type '{name}' is not an object type")
        return typ

    def field(self, type_name: str, field_name: str) -> Field:
        fld = self.object_type(type_name).fields.get(field_name)
        if fld is None:
            raise SchemaError(f"Unknown field '{type_name}.{field_name}'")
        return fld

    def root(self, kind: Literal["query", "mutation"]) -> ObjectType:
        if kind == "mutation":
            if self.mutation_type is None:
                raise SchemaError("Schema does not support mutations")
            return self.object_type(self.mutation_type)
        return self.object_type(self.query_type)

    @staticmethod
    def describe(ref: TypeRef) -> str:
        return describe(ref)


# ═══════════════════════════════════════════════════════════════════════════════
# SchemaRegistry — mutable until build()
# ═══════════════════════════════════════════════════════════════════════════════


class SchemaRegistry:
    """
    Collects type definitions, validates references, freezes into a Schema.

    Built-in scalars (Int, Float, String, Boolean, ID, Decimal, DateTime)
    are pre-registered.
    """

    def __init__(self) -> None:
        self._types: dict[str, NamedType] = {s.name: s for s in BUILTIN_SCALARS}
        self._frozen = False

    # ─── registration ────────────────────────────────────────────────────────

    def register_scalar(self, scalar: Scalar) -> Self:
        self._add(scalar)
        return self

    def register_type(self, name: str, fields: Mapping[str, Field]) -> Self:
        named_fields: dict[str, Field] = {}
        for key, fld in fields.items():
            _check_args(fld.args, owner=f"{name}.{key}")
            named_fields[key] = replace(fld, name=key)
        self._add(ObjectType(name, MappingProxyType(named_fields)))
        return self

    def register_input(self, name: str, fields: Mapping[str, Argument]) -> Self:
        named_fields = {key: replace(arg, name=key) for key, arg in fields.items()}
        self._add(InputObject(name, MappingProxyType(named_fields)))
        return self

    def _add(self, typ: NamedType) -> None:
        if self._frozen:
            raise SchemaError(f"Cannot register '{typ.name}': registry is frozen")
        if typ.name in self._types:
            raise SchemaError(f"Type '{typ.name}' is already registered")
        self._types[typ.name] = typ

    # ─── lookup ──────────────────────────────────────────────────────────────

    def resolve(self, name: str) -> NamedType:
        typ = self._types.get(name)
        if typ is None:
            raise SchemaError(f"Unknown type '{name}'")
        return typ

    # ─── build ───────────────────────────────────────────────────────────────

    def build(self, query: str = "Query", mutation: str | None = None) -> Schema:
        """
        Validate every reference and freeze.

        Raises SchemaError on the first problem found.
        """
        for root in (query, mutation):
            if root is not None and not isinstance(self._types.get(root), ObjectType):
                raise SchemaError(f"Root type '{root}' is not a registered object type")

        for typ in self._types.values():
            match typ:
                case ObjectType(name, fields):
                    for fld in fields.values():
                        self._check_output(fld.type, where=f"{name}.{fld.name}")
                        for arg in fld.args:
                            self._check_input(arg.type, where=f"{name}.{fld.name}({arg.name})")
                case InputObject(name, fields):
                    for arg in fields.values():
                        self._check_input(arg.type, where=f"{name}.{arg.name}")
                case _:
                    pass

        self._frozen = True
        schema = Schema(
            types=MappingProxyType(dict(self._types)),
            query_type=query,
            mutation_type=mutation,
        )
        logger.debug("Schema built with %d types", len(schema.types))
        return schema

    def _check_ref(self, ref: TypeRef, where: str) -> NamedType:
        inner = ref
        while not isinstance(inner, str):
            if isinstance(inner, NonNull) and isinstance(inner.of, NonNull):
                raise SchemaError(f"{where}: non-null of non-null ({describe(ref)})")
            if not isinstance(inner, (NonNull, ListOf)):
                raise SchemaError(f"{where}: invalid type reference {inner!r}")
            inner = inner.of
        typ = self._types.get(inner)
        if typ is None:
            raise SchemaError(f"{where}: references unregistered type '{inner}'")
        return typ

    def _check_output(self, ref: TypeRef, where: str) -> None:
        if isinstance(self._check_ref(ref, where), InputObject):
            raise SchemaError(f"{where}: output field cannot use input type '{named(ref)}'")

    def _check_input(self, ref: TypeRef, where: str) -> None:
        if isinstance(self._check_ref(ref, where), ObjectType):
            raise SchemaError(f"{where}: argument cannot use object type '{named(ref)}'")


def _check_args(args: tuple[Argument, ...], owner: str) -> None:
    seen: set[str] = set()
    for arg in args:
        if not arg.name:
            raise SchemaError(f"{owner}: argument without a name")
        if arg.name in seen:
            raise SchemaError(f"{owner}: duplicate argument '{arg.name}'")
        seen.add(arg.name)


__all__ = ("Schema", "SchemaRegistry")
