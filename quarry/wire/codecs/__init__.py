"""
Codecs — convert transport payloads to queries and results back.

    from quarry.wire.codecs import RequestResponseCodec, GraphRequest, GraphResponse

    codec = RequestResponseCodec(GraphRequest, GraphResponse)
"""

from quarry.wire.codecs.rrc import (
    RequestResponseCodec,
    ToDomain,
    FromDomain,
    GraphQuery,
    GraphRequest,
    GraphErrorEntry,
    GraphResponse,
)

__all__ = (
    "RequestResponseCodec",
    "ToDomain",
    "FromDomain",
    "GraphQuery",
    "GraphRequest",
    "GraphErrorEntry",
    "GraphResponse",
)
