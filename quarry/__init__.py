"""
quarry — typed graph queries with per-request batched loading.

    from quarry import schema as S      # Type registry
    from quarry import document as D    # Parsed queries
    from quarry import loader as L      # Batch loaders
    from quarry import execution as X   # Executor + scope
    from quarry import store            # Inventory repositories
    from quarry import inventory        # Inventory schema
    from quarry import wire             # HTTP exposure
"""

from quarry import schema
from quarry import document
from quarry import loader
from quarry import execution
from quarry import store
from quarry import inventory
from quarry import wire
from quarry._types import (
    UNSET,
    Unset,
    Key,
    Path,
)
from quarry.execution import Executor, ExecutionResult, ExecutionScope

__version__ = "0.1.0"

__all__ = (
    "schema",
    "document",
    "loader",
    "execution",
    "store",
    "inventory",
    "wire",
    "UNSET",
    "Unset",
    "Key",
    "Path",
    "Executor",
    "ExecutionResult",
    "ExecutionScope",
)
