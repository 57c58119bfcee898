"""
Wire — expose an executor via triggers and codecs.

    from quarry.wire import endpoint, Application, HTTPRouteTrigger, RequestResponseCodec
    from quarry.wire.codecs import GraphRequest, GraphResponse
    from quarry.wire.contrib import fastapi

    endp = endpoint(executor, context=lambda: store).expose(
        HTTPRouteTrigger("POST", "/api/graphql"),
        RequestResponseCodec(GraphRequest, GraphResponse),
    )
    fapp = fastapi.from_application(Application().mount(endp))
"""

from quarry.wire._endpoint import (
    Endpoint,
    endpoint,
)
from quarry.wire._app import Application, application
from quarry.wire._types import (
    Trigger,
    Codec,
    Exposure,
    ContextProvider,
)

# Common codecs and triggers
from quarry.wire.codecs.rrc import (
    RequestResponseCodec,
    GraphQuery,
    GraphRequest,
    GraphResponse,
)
from quarry.wire.triggers.http import (
    HTTPRouteTrigger,
    Method,
    Path,
)

# Subpackages
from quarry.wire import codecs, triggers, contrib

__all__ = (
    # Core API
    "Endpoint",
    "endpoint",
    "Application",
    "application",
    "Trigger",
    "Codec",
    "Exposure",
    "ContextProvider",
    # Built-ins
    "RequestResponseCodec",
    "GraphQuery",
    "GraphRequest",
    "GraphResponse",
    "HTTPRouteTrigger",
    "Method",
    "Path",
    # Subpackages
    "codecs",
    "triggers",
    "contrib",
)
