"""
Schema — typed registry of object, input and scalar types.

    from quarry import schema as S

    registry = S.SchemaRegistry()
    registry.register_type("Item", {
        "barcode": S.Field(S.NonNull("String")),
        "sellingPrice": S.Field(S.NonNull("Decimal"), source="selling_price"),
    })
    registry.register_type("Query", {
        "items": S.Field(S.ListOf(S.NonNull("Item")), resolve=list_items),
    })
    schema = registry.build()
"""

from quarry.schema._types import (
    SchemaError,
    ListOf,
    NonNull,
    TypeRef,
    Scalar,
    Resolver,
    Argument,
    Field,
    ObjectType,
    InputObject,
    NamedType,
    named,
    describe,
)
from quarry.schema._scalars import (
    Int,
    Float,
    String,
    Boolean,
    ID,
    DecimalScalar,
    DateTime,
    BUILTIN_SCALARS,
)
from quarry.schema._registry import Schema, SchemaRegistry

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
    "named",
    "describe",
    "Int",
    "Float",
    "String",
    "Boolean",
    "ID",
    "DecimalScalar",
    "DateTime",
    "BUILTIN_SCALARS",
    "Schema",
    "SchemaRegistry",
)
