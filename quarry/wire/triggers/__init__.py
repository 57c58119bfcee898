"""
Triggers — describe how endpoints are exposed (HTTP routes).

    from quarry.wire.triggers.http import HTTPRouteTrigger

    http = HTTPRouteTrigger("POST", "/api/graphql")
"""

from quarry.wire.triggers import http


__all__ = ("http",)
