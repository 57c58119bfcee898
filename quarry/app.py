"""
HTTP service — the inventory graph over FastAPI.

    app = create_app()  # serve with any ASGI server

POST {"query": ..., "variables": ..., "operationName": ...} to
settings.graphql_path; every response is HTTP 200 with {data, errors}.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quarry._logging import configure_logging
from quarry.config import Settings, get_settings
from quarry.inventory import create_executor
from quarry.store import InventoryStore, create_memory_store, create_sqlalchemy_store, seed
from quarry.wire import (
    Application,
    GraphRequest,
    GraphResponse,
    HTTPRouteTrigger,
    RequestResponseCodec,
    endpoint,
)
from quarry.wire.contrib import fastapi as wire_fastapi

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: InventoryStore | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    With store given, it is used as-is (no seeding); otherwise the lifespan
    builds one from settings.database_url and seeds it if settings.seed.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = None
        if store is not None:
            app.state.store = store
        elif settings.database_url:
            app.state.store, engine = await create_sqlalchemy_store(settings.database_url)
        else:
            app.state.store = create_memory_store()

        if store is None and settings.seed:
            await seed(app.state.store)

        logger.info(
            "quarry serving %s (%s store)",
            settings.graphql_path,
            "sqlalchemy" if engine is not None else "memory",
        )
        try:
            yield
        finally:
            if engine is not None:
                await engine.dispose()

    def current_store() -> InventoryStore:
        return fapp.state.store

    graph = endpoint(create_executor(settings), context=current_store).expose(
        HTTPRouteTrigger("POST", settings.graphql_path),
        RequestResponseCodec(GraphRequest, GraphResponse),
    )
    fapp = wire_fastapi.from_application(
        Application().mount(graph),
        title="quarry",
        lifespan=lifespan,
    )

    @fapp.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return JSONResponse(
            status_code=200,
            content={"data": None, "errors": [{"message": f"Invalid request: {messages}", "path": []}]},
        )

    return fapp


__all__ = ("create_app",)
