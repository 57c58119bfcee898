"""
Argument coercion — literal/variable values → typed resolver arguments.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quarry._types import UNSET, Error, Ok, Result
from quarry.document import Variable
from quarry.errors import ArgumentError
from quarry.schema import (
    Argument,
    Field,
    InputObject,
    ListOf,
    NonNull,
    Scalar,
    Schema,
    TypeRef,
    describe,
)


def coerce_arguments(
    schema: Schema,
    fld: Field,
    values: Mapping[str, Any],
    variables: Mapping[str, Any],
) -> Result[dict[str, Any], ArgumentError]:
    """
    Coerce the arguments of one field selection.

    Variables are substituted (a missing variable counts as absent),
    defaults applied, required arguments enforced.
    """
    for name in values:
        if fld.argument(name) is None:
            return Error(ArgumentError(f"Unknown argument '{name}' on field '{fld.name}'."))
    try:
        return Ok(_coerce_fields(schema, fld.args, values, variables, owner=f"field '{fld.name}'"))
    except ArgumentError as exc:
        return Error(exc)


def coerce_value(schema: Schema, ref: TypeRef, value: Any, variables: Mapping[str, Any]) -> Any:
    """Coerce one input value to ref. Raises ArgumentError."""
    if isinstance(value, Variable):
        value = variables.get(value.name)

    match ref:
        case NonNull(of):
            if value is None:
                raise ArgumentError(f"Expected non-null value of type '{describe(ref)}'.")
            return coerce_value(schema, of, value, variables)
        case _ if value is None:
            return None
        case ListOf(of):
            if isinstance(value, (list, tuple)):
                return [coerce_value(schema, of, item, variables) for item in value]
            return [coerce_value(schema, of, value, variables)]
        case str(name):
            return _coerce_named(schema, name, value, variables)
        case _:
            raise ArgumentError(f"Invalid type reference {ref!r}.")


def _coerce_named(schema: Schema, name: str, value: Any, variables: Mapping[str, Any]) -> Any:
    typ = schema.resolve(name)
    match typ:
        case Scalar():
            try:
                return typ.parse_value(value)
            except (TypeError, ValueError) as exc:
                raise ArgumentError(str(exc)) from exc
        case InputObject(name=input_name, fields=fields):
            if not isinstance(value, Mapping):
                raise ArgumentError(f"Expected type '{input_name}' to be an object, got {value!r}.")
            for key in value:
                if key not in fields:
                    raise ArgumentError(f"Field '{key}' is not defined by type '{input_name}'.")
            return _coerce_fields(
                schema, tuple(fields.values()), value, variables, owner=f"type '{input_name}'"
            )
        case _:
            raise ArgumentError(f"Type '{name}' is not an input type.")


def _coerce_fields(
    schema: Schema,
    args: tuple[Argument, ...],
    values: Mapping[str, Any],
    variables: Mapping[str, Any],
    owner: str,
) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for arg in args:
        raw = values.get(arg.name, UNSET)
        if isinstance(raw, Variable):
            raw = variables.get(raw.name, UNSET)

        if raw is UNSET:
            if arg.has_default:
                out[arg.name] = arg.default
            elif arg.required:
                raise ArgumentError(
                    f"Argument '{arg.name}' of required type '{describe(arg.type)}' "
                    f"was not provided for {owner}."
                )
            continue

        try:
            out[arg.name] = coerce_value(schema, arg.type, raw, variables)
        except ArgumentError as exc:
            raise ArgumentError(f"Argument '{arg.name}' of {owner} has invalid value: {exc.message}") from exc
    return out


__all__ = ("coerce_arguments", "coerce_value")
