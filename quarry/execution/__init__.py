"""
Execution — run documents against a schema with per-request batching.

    from quarry.execution import Executor

    executor = Executor(schema, timeout=10.0)
    result = await executor.run(
        "query($b: String!) { item(barcode: $b) { title } }",
        {"b": "123"},
        context=store,
    )
    result.data    # {"item": {"title": "Headphone"}}
    result.errors  # ()

Resolvers receive (parent, args, scope); scope.context is the application
object and scope.get_or_create_loader() hands out request-scoped loaders.
"""

from quarry.errors import (
    FieldError,
    QueryError,
    DocumentError,
    ArgumentError,
    ResolverError,
    NonNullViolation,
)
from quarry.loader import LoaderError
from quarry.execution._scope import ExecutionScope
from quarry.execution._values import coerce_arguments, coerce_value
from quarry.execution._validate import validate
from quarry.execution._executor import (
    Executor,
    ExecutionResult,
    default_resolve,
    TIMEOUT_MESSAGE,
)

__all__ = (
    # Errors
    "FieldError",
    "QueryError",
    "DocumentError",
    "ArgumentError",
    "ResolverError",
    "NonNullViolation",
    "LoaderError",
    # Scope
    "ExecutionScope",
    # Values
    "coerce_arguments",
    "coerce_value",
    "validate",
    # Executor
    "Executor",
    "ExecutionResult",
    "default_resolve",
    "TIMEOUT_MESSAGE",
)
