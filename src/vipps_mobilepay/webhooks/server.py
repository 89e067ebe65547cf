"""
FastAPI adapter exposing a :class:`WebhookEndpoint` as a route.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.concurrency import run_in_threadpool

from .endpoint import WebhookEndpoint
from .request import InboundRequest

__all__ = ["build_webhook_router"]

_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def build_webhook_router(
    endpoint: WebhookEndpoint,
    path: str = "/webhooks/vipps",
) -> APIRouter:
    """
    Mount the endpoint on ``path``.

    Every method is routed to the endpoint so that it, not FastAPI, answers
    non-POST requests. Handlers are synchronous and run in the threadpool.
    """
    router = APIRouter()

    @router.api_route(path, methods=_ALL_METHODS, include_in_schema=False)
    async def receive_webhook(request: Request) -> Response:
        body = await request.body()
        inbound = InboundRequest.build(
            request.method,
            request.url.path,
            dict(request.headers),
            body,
        )
        result = await run_in_threadpool(endpoint.handle, inbound)
        return Response(
            content=result.body,
            status_code=result.status_code,
            headers=dict(result.headers),
            media_type="text/plain",
        )

    return router
