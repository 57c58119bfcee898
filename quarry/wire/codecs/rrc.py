"""
Request/response codec — transport payload ↔ GraphQuery / ExecutionResult.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from quarry.execution import ExecutionResult

DomainT_co = TypeVar("DomainT_co", covariant=True)
DomainT_contra = TypeVar("DomainT_contra", contravariant=True)


class ToDomain(Protocol[DomainT_co]):
    def to_domain(self) -> DomainT_co: ...


class FromDomain(Protocol[DomainT_contra]):
    @classmethod
    def from_domain(cls, dom: DomainT_contra) -> FromDomain[DomainT_contra]: ...


@dataclass(frozen=True, slots=True)
class RequestResponseCodec:
    request: type[ToDomain[GraphQuery]]
    response: type[FromDomain[ExecutionResult]]


# ═══════════════════════════════════════════════════════════════════════════════
# Domain request
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class GraphQuery:
    """Query text plus its variables, ready for Executor.run."""

    query: str
    variables: Mapping[str, Any] | None = None
    operation_name: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Wire models
# ═══════════════════════════════════════════════════════════════════════════════


class GraphRequest(BaseModel):
    """POST body: {"query": ..., "variables": {...}, "operationName": ...}"""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = Field(default=None, alias="operationName")

    def to_domain(self) -> GraphQuery:
        return GraphQuery(
            query=self.query,
            variables=self.variables,
            operation_name=self.operation_name,
        )


class GraphErrorEntry(BaseModel):
    message: str
    path: list[str | int] = Field(default_factory=list)


class GraphResponse(BaseModel):
    """{"data": ..., "errors": [...]}; errors is always present."""

    data: dict[str, Any] | None = None
    errors: list[GraphErrorEntry] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, dom: ExecutionResult) -> GraphResponse:
        return cls(
            data=dom.data,
            errors=[GraphErrorEntry(message=e.message, path=list(e.path)) for e in dom.errors],
        )


__all__ = (
    "ToDomain",
    "FromDomain",
    "RequestResponseCodec",
    "GraphQuery",
    "GraphRequest",
    "GraphErrorEntry",
    "GraphResponse",
)
