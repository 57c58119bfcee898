from typing import Any

import fastapi

from quarry.execution import ExecutionResult
from quarry.wire._app import Application
from quarry.wire._endpoint import Endpoint
from quarry.wire.codecs.rrc import GraphQuery
from quarry.wire.triggers.http import Path


def compile_to_fastapi_route(
    endp: Endpoint,
) -> list[tuple[str, Path, Any]]:  # (method, path, route_func)
    routes: list[tuple[str, str, Any]] = []

    for trigger, codec in endp.exposures:

        def make_handler(req_cls: type[Any], resp_cls: type[Any]) -> Any:
            async def _route_handler(req: Any) -> Any:
                query: GraphQuery = req.to_domain()
                result: ExecutionResult = await endp.handle(query)
                return resp_cls.from_domain(result)

            _route_handler.__annotations__ = {
                "req": req_cls,
                "return": resp_cls,
            }

            return _route_handler

        handler = make_handler(codec.request, codec.response)

        routes.append((trigger.method.upper(), trigger.path, handler))

    return routes


def add_endpoint_to_app(
    app: fastapi.FastAPI,
    endp: Endpoint,
) -> None:
    for method, path, handler in compile_to_fastapi_route(endp):
        route_method = getattr(app, method.lower(), None)
        if route_method is None:
            raise ValueError(f"Unsupported HTTP method: {method}")

        route_method(path)(handler)


def from_application(app: Application, **kwargs: Any) -> fastapi.FastAPI:
    f_app = fastapi.FastAPI(**kwargs)

    for endp in app.endpoints:
        add_endpoint_to_app(f_app, endp)

    return f_app
