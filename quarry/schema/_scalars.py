"""
Built-in scalars.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from quarry.schema._types import Scalar

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


# ═══════════════════════════════════════════════════════════════════════════════
# Int
# ═══════════════════════════════════════════════════════════════════════════════


def _serialize_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        num = value
    elif isinstance(value, (float, Decimal)) and value == int(value):
        num = int(value)
    else:
        raise TypeError(f"Int cannot represent non-integer value: {value!r}")
    if not _INT_MIN <= num <= _INT_MAX:
        raise ValueError(f"Int cannot represent non 32-bit signed integer value: {value!r}")
    return num


def _parse_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Int cannot represent non-integer value: {value!r}")
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"Int cannot represent non 32-bit signed integer value: {value!r}")
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Float / Decimal
# ═══════════════════════════════════════════════════════════════════════════════


def _serialize_float(value: Any) -> float:
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    raise TypeError(f"Float cannot represent non-numeric value: {value!r}")


def _parse_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Float cannot represent non-numeric value: {value!r}")
    return float(value)


def _serialize_decimal(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"Decimal cannot represent non-numeric value: {value!r}")
    return float(value)


def _parse_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise TypeError(f"Decimal cannot represent value: {value!r}")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Decimal cannot represent value: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Decimal cannot represent value: {value!r}")
    return parsed


# ═══════════════════════════════════════════════════════════════════════════════
# String / Boolean / ID
# ═══════════════════════════════════════════════════════════════════════════════


def _serialize_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    raise TypeError(f"String cannot represent value: {value!r}")


def _parse_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"String cannot represent a non string value: {value!r}")
    return value


def _serialize_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    raise TypeError(f"Boolean cannot represent a non boolean value: {value!r}")


def _parse_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"Boolean cannot represent a non boolean value: {value!r}")
    return value


def _serialize_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"ID cannot represent value: {value!r}")


def _parse_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"ID cannot represent value: {value!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# DateTime (ISO-8601)
# ═══════════════════════════════════════════════════════════════════════════════


def _serialize_datetime(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise TypeError(f"DateTime cannot represent value: {value!r}")


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise TypeError(f"DateTime cannot represent value: {value!r}")
    return datetime.fromisoformat(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Registry of built-ins
# ═══════════════════════════════════════════════════════════════════════════════

Int = Scalar("Int", _serialize_int, _parse_int)
Float = Scalar("Float", _serialize_float, _parse_float)
String = Scalar("String", _serialize_string, _parse_string)
Boolean = Scalar("Boolean", _serialize_boolean, _parse_boolean)
ID = Scalar("ID", _serialize_id, _parse_id)
DecimalScalar = Scalar("Decimal", _serialize_decimal, _parse_decimal)
DateTime = Scalar("DateTime", _serialize_datetime, _parse_datetime)

BUILTIN_SCALARS: tuple[Scalar, ...] = (
    Int,
    Float,
    String,
    Boolean,
    ID,
    DecimalScalar,
    DateTime,
)

__all__ = (
    "Int",
    "Float",
    "String",
    "Boolean",
    "ID",
    "DecimalScalar",
    "DateTime",
    "BUILTIN_SCALARS",
)
