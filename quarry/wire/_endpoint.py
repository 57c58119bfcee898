from __future__ import annotations

from dataclasses import dataclass, field

from quarry.execution import ExecutionResult, Executor
from quarry.wire._types import Codec, ContextProvider, Exposure, Trigger
from quarry.wire.codecs.rrc import GraphQuery


def _no_context() -> None:
    return None


@dataclass(slots=True)
class Endpoint:
    executor: Executor
    context: ContextProvider = _no_context
    exposures: list[Exposure] = field(default_factory=list[Exposure])

    @classmethod
    def from_executor(cls, executor: Executor, context: ContextProvider = _no_context) -> Endpoint:
        return cls(executor=executor, context=context)

    def expose(self, trigger: Trigger, codec: Codec) -> Endpoint:
        return Endpoint(
            executor=self.executor,
            context=self.context,
            exposures=[*self.exposures, (trigger, codec)],
        )

    async def handle(self, query: GraphQuery) -> ExecutionResult:
        return await self.executor.run(
            query.query,
            query.variables,
            context=self.context(),
            operation_name=query.operation_name,
        )


def endpoint(executor: Executor, context: ContextProvider = _no_context) -> Endpoint:
    return Endpoint.from_executor(executor, context)
