from __future__ import annotations

import pytest

from quarry import schema as S
from quarry.inventory import build_schema


def _registry_with_query(**fields: S.Field) -> S.SchemaRegistry:
    registry = S.SchemaRegistry()
    registry.register_type("Query", fields or {"ok": S.Field("Boolean")})
    return registry


def test_register_and_build_fills_field_names() -> None:
    registry = S.SchemaRegistry()
    registry.register_type("Item", {"barcode": S.Field(S.NonNull("String"))})
    registry.register_type("Query", {"items": S.Field(S.ListOf(S.NonNull("Item")))})
    schema = registry.build()

    assert schema.field("Item", "barcode").name == "barcode"
    assert schema.root("query").name == "Query"
    assert isinstance(schema.named_type(S.NonNull(S.ListOf("Item"))), S.ObjectType)
    assert schema.resolve("Decimal") is S.DecimalScalar


def test_duplicate_type_is_rejected() -> None:
    registry = _registry_with_query()
    with pytest.raises(S.SchemaError):
        registry.register_type("Query", {})
    with pytest.raises(S.SchemaError):
        registry.register_scalar(S.Scalar("Int", int, int))


def test_resolve_unknown_type() -> None:
    with pytest.raises(S.SchemaError):
        S.SchemaRegistry().resolve("Nope")


@pytest.mark.parametrize(
    "fields",
    [
        {"x": S.Field("Nope")},
        {"x": S.Field(S.NonNull(S.NonNull("Int")))},
        {"x": S.Field("Int", args=(S.Argument("Query", name="q"),))},
    ],
    ids=["unregistered", "non-null-of-non-null", "object-as-argument"],
)
def test_build_rejects_invalid_references(fields: dict[str, S.Field]) -> None:
    with pytest.raises(S.SchemaError):
        _registry_with_query(**fields).build()


def test_output_field_cannot_use_input_type() -> None:
    registry = _registry_with_query(x=S.Field("In"))
    registry.register_input("In", {"a": S.Argument("Int")})
    with pytest.raises(S.SchemaError):
        registry.build()


def test_input_field_must_reference_registered_type() -> None:
    registry = _registry_with_query()
    registry.register_input("In", {"a": S.Argument("Missing")})
    with pytest.raises(S.SchemaError):
        registry.build()


def test_root_must_be_object_type() -> None:
    with pytest.raises(S.SchemaError):
        S.SchemaRegistry().build()
    with pytest.raises(S.SchemaError):
        _registry_with_query().build(mutation="Int")


def test_duplicate_argument_names() -> None:
    registry = S.SchemaRegistry()
    with pytest.raises(S.SchemaError):
        registry.register_type("Query", {
            "x": S.Field("Int", args=(S.Argument("Int", name="a"), S.Argument("Int", name="a"))),
        })


def test_registry_is_frozen_after_build() -> None:
    registry = _registry_with_query()
    registry.build()
    with pytest.raises(S.SchemaError):
        registry.register_type("Late", {})


def test_schema_lookups() -> None:
    schema = _registry_with_query().build()
    with pytest.raises(S.SchemaError):
        schema.field("Query", "missing")
    with pytest.raises(S.SchemaError):
        schema.object_type("Int")
    with pytest.raises(S.SchemaError):
        schema.root("mutation")


def test_describe() -> None:
    assert S.describe(S.NonNull(S.ListOf(S.NonNull("Order")))) == "[Order!]!"
    assert S.Schema.describe(S.ListOf("Int")) == "[Int]"
    assert S.named(S.NonNull(S.ListOf("Order"))) == "Order"


def test_argument_required() -> None:
    assert S.Argument(S.NonNull("String")).required
    assert not S.Argument(S.NonNull("Int"), default=1).required
    assert not S.Argument("String").required
    assert S.Argument("Int", default=None).has_default


def test_builtin_scalars() -> None:
    assert S.Int.serialize(3.0) == 3
    with pytest.raises(ValueError):
        S.Int.parse_value(2**31)
    with pytest.raises(TypeError):
        S.String.parse_value(5)
    assert S.DecimalScalar.parse_value(20) == S.DecimalScalar.parse_value("20")
    assert S.DateTime.parse_value("2024-01-02T03:04:05").year == 2024


def test_inventory_schema_builds() -> None:
    schema = build_schema()

    assert schema.root("mutation").name == "Mutation"
    assert S.describe(schema.field("Customer", "orders").type) == "[Order!]!"
    assert S.describe(schema.field("Order", "customer").type) == "Customer"
    assert schema.field("Query", "item").argument("barcode") is not None
    assert isinstance(schema.resolve("OrderItemInput"), S.InputObject)
