"""
Executor — walks a selection tree against the schema.

Query fields resolve concurrently, mutation fields serially. Errors are
located by response path; a failure at a non-null position nulls the
nearest nullable ancestor instead.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any

from quarry._types import Error, Ok, Path
from quarry.document import Document, DocumentCache, FieldNode, InlineFragment, Operation, Selection, Variable
from quarry.errors import (
    DocumentError,
    FieldError,
    NonNullViolation,
    QueryError,
    ResolverError,
)
from quarry.execution._scope import ExecutionScope
from quarry.execution._validate import validate
from quarry.execution._values import coerce_arguments
from quarry.schema import (
    Field,
    ListOf,
    NonNull,
    ObjectType,
    Scalar,
    Schema,
    SchemaError,
    TypeRef,
)

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Execution timed out"

type FieldMap = dict[str, list[FieldNode]]


# ═══════════════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    data: dict[str, Any] | None
    errors: tuple[FieldError, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "errors": [e.to_dict() for e in self.errors]}


def _fatal(message: str) -> ExecutionResult:
    return ExecutionResult(data=None, errors=(FieldError(message),))


# ═══════════════════════════════════════════════════════════════════════════════
# Executor
# ═══════════════════════════════════════════════════════════════════════════════


class Executor:
    """
    Runs documents against one schema.

    Example:
        executor = Executor(schema, timeout=10.0)
        result = await executor.run("{ items { barcode } }", context=store)
        result.to_dict()  # {"data": {...}, "errors": [...]}
    """

    def __init__(
        self,
        schema: Schema,
        *,
        timeout: float | None = None,
        document_cache: DocumentCache | None = None,
        max_batch_size: int | None = None,
    ) -> None:
        self.schema = schema
        self.timeout = timeout
        self.document_cache = document_cache if document_cache is not None else DocumentCache()
        self.max_batch_size = max_batch_size

    async def run(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        context: Any = None,
        operation_name: str | None = None,
    ) -> ExecutionResult:
        """Parse (through the document cache) and execute query text."""
        try:
            document = self.document_cache.get_or_parse(query)
        except DocumentError as exc:
            logger.debug("Rejected document: %s", exc.message)
            return _fatal(exc.message)
        return await self.execute(
            document,
            variables=variables,
            context=context,
            operation_name=operation_name,
        )

    async def execute(
        self,
        document: Document,
        root_type: str | None = None,
        root_value: Any = None,
        variables: Mapping[str, Any] | None = None,
        *,
        context: Any = None,
        operation_name: str | None = None,
    ) -> ExecutionResult:
        try:
            operation = document.operation(operation_name)
            root = (
                self.schema.object_type(root_type)
                if root_type is not None
                else self.schema.root(operation.kind)
            )
            validate(self.schema, operation, root)
        except (DocumentError, SchemaError) as exc:
            logger.debug("Rejected document: %s", exc)
            return _fatal(str(exc))

        logger.debug("Executing %s %s", operation.kind, operation.name or "<anonymous>")
        async with ExecutionScope(context, max_batch_size=self.max_batch_size) as scope:
            run = _Run(self.schema, scope, operation.variable_values(variables))
            try:
                async with asyncio.timeout(self.timeout):
                    data = await run.operation(root, operation, root_value)
            except TimeoutError:
                logger.warning("Execution of %s timed out after %ss", operation.name or operation.kind, self.timeout)
                return _fatal(TIMEOUT_MESSAGE)
            except DocumentError as exc:
                return _fatal(exc.message)

            errors = scope.get_errors()
        logger.debug("Finished %s with %d errors", operation.kind, len(errors))
        return ExecutionResult(data=data, errors=errors)


# ═══════════════════════════════════════════════════════════════════════════════
# _Run — one execution
# ═══════════════════════════════════════════════════════════════════════════════


class _Run:
    __slots__ = ("schema", "scope", "variables")

    def __init__(self, schema: Schema, scope: ExecutionScope, variables: Mapping[str, Any]) -> None:
        self.schema = schema
        self.scope = scope
        self.variables = variables

    async def operation(
        self,
        root: ObjectType,
        operation: Operation,
        root_value: Any,
    ) -> dict[str, Any] | None:
        fields = self.collect_fields(root, operation.selections)
        try:
            if operation.kind == "mutation":
                return await self.execute_fields_serially(root, root_value, fields, ())
            return await self.execute_fields(root, root_value, fields, ())
        except NonNullViolation as violation:
            self.scope.record(violation.error)
            return None

    # ─── field collection ────────────────────────────────────────────────────

    def collect_fields(
        self,
        typ: ObjectType,
        selections: Iterable[Selection],
        fields: FieldMap | None = None,
    ) -> FieldMap:
        """Merge selections by response key, applying @skip/@include and fragments."""
        if fields is None:
            fields = {}
        for sel in selections:
            if not self._included(sel):
                continue
            match sel:
                case FieldNode():
                    fields.setdefault(sel.response_key, []).append(sel)
                case InlineFragment(type_condition=cond) if cond is None or cond == typ.name:
                    self.collect_fields(typ, sel.selections, fields)
                case _:
                    pass
        return fields

    def _included(self, sel: Selection) -> bool:
        for directive in sel.directives:
            cond = directive.arguments.get("if")
            if isinstance(cond, Variable):
                cond = self.variables.get(cond.name)
            if not isinstance(cond, bool):
                raise DocumentError(f"Directive '@{directive.name}' argument 'if' must be a Boolean.")
            if directive.name == "skip" and cond:
                return False
            if directive.name == "include" and not cond:
                return False
        return True

    # ─── fields ──────────────────────────────────────────────────────────────

    async def execute_fields(
        self,
        typ: ObjectType,
        source: Any,
        fields: FieldMap,
        path: Path,
    ) -> dict[str, Any]:
        keys = list(fields)
        results = await asyncio.gather(
            *(self.resolve_field(typ, source, fields[key], (*path, key)) for key in keys),
            return_exceptions=True,
        )
        return dict(zip(keys, self._settle(results), strict=True))

    async def execute_fields_serially(
        self,
        typ: ObjectType,
        source: Any,
        fields: FieldMap,
        path: Path,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key, nodes in fields.items():
            data[key] = await self.resolve_field(typ, source, nodes, (*path, key))
        return data

    def _settle(self, results: list[Any]) -> list[Any]:
        """Gathered sibling results; the first bubbling violation wins."""
        violation: NonNullViolation | None = None
        for res in results:
            match res:
                case NonNullViolation():
                    if violation is None:
                        violation = res
                    else:
                        self.scope.record(res.error)
                case BaseException():
                    raise res
                case _:
                    pass
        if violation is not None:
            raise violation
        return results

    async def resolve_field(
        self,
        typ: ObjectType,
        source: Any,
        nodes: list[FieldNode],
        path: Path,
    ) -> Any:
        self.scope.mark_progress()
        if nodes[0].name == "__typename":
            return typ.name
        fld = typ.fields[nodes[0].name]
        return await self._protect(fld.type, path, partial(self._resolve, fld, nodes, source, path))

    async def _protect(
        self,
        ref: TypeRef,
        path: Path,
        work: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Null a nullable position on error; bubble at a non-null one."""
        try:
            return await work()
        except DocumentError:
            raise
        except NonNullViolation as violation:
            if isinstance(ref, NonNull):
                raise
            self.scope.record(violation.error)
            return None
        except QueryError as exc:
            error = FieldError(exc.message, path)
            if isinstance(ref, NonNull):
                raise NonNullViolation(error) from exc
            self.scope.record(error)
            return None

    async def _resolve(self, fld: Field, nodes: list[FieldNode], source: Any, path: Path) -> Any:
        match coerce_arguments(self.schema, fld, nodes[0].arguments, self.variables):
            case Error(error):
                raise error
            case Ok(args):
                value = await self._call(fld, source, args, path)
        self.scope.mark_progress()
        return await self.complete_value(fld.type, nodes, value, path)

    async def _call(self, fld: Field, source: Any, args: dict[str, Any], path: Path) -> Any:
        try:
            if fld.resolve is None:
                return default_resolve(source, fld.source or fld.name)
            value = fld.resolve(source, args, self.scope)
            if isinstance(value, asyncio.Future):
                # loader futures are shared across fields
                value = await asyncio.shield(value)
            elif inspect.isawaitable(value):
                value = await value
            return value
        except QueryError:
            raise
        except Exception as exc:
            logger.warning("Resolver for %s failed at %s: %r", fld.name, _format(path), exc)
            raise ResolverError.wrap(exc) from exc

    # ─── completion ──────────────────────────────────────────────────────────

    async def complete_value(self, ref: TypeRef, nodes: list[FieldNode], value: Any, path: Path) -> Any:
        if isinstance(ref, NonNull):
            completed = await self.complete_value(ref.of, nodes, value, path)
            if completed is None:
                raise NonNullViolation(
                    FieldError(f"Cannot return null for non-nullable field '{nodes[0].name}'.", path)
                )
            return completed

        if value is None:
            return None

        if isinstance(ref, ListOf):
            return await self._complete_list(ref.of, nodes, value, path)

        typ = self.schema.resolve(ref)
        if isinstance(typ, Scalar):
            try:
                return typ.serialize(value)
            except Exception as exc:
                raise ResolverError.wrap(exc) from exc

        obj = self.schema.object_type(typ.name)
        fields: FieldMap = {}
        for node in nodes:
            self.collect_fields(obj, node.selections or (), fields)
        return await self.execute_fields(obj, value, fields, path)

    async def _complete_list(self, item: TypeRef, nodes: list[FieldNode], value: Any, path: Path) -> list[Any]:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise ResolverError(
                f"Expected an iterable for list field '{nodes[0].name}', got {type(value).__name__}."
            )
        results = await asyncio.gather(
            *(
                self._protect(item, (*path, i), partial(self.complete_value, item, nodes, element, (*path, i)))
                for i, element in enumerate(value)
            ),
            return_exceptions=True,
        )
        return self._settle(results)


def default_resolve(source: Any, name: str) -> Any:
    """Mapping key or attribute of the parent; None when absent."""
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _format(path: Path) -> str:
    return ".".join(str(p) for p in path) or "<root>"


__all__ = ("Executor", "ExecutionResult", "default_resolve", "TIMEOUT_MESSAGE")
