from __future__ import annotations

import logging

import httpx

from gcm_push.application.interfaces.transport import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport backed by httpx.

    Uses the given `AsyncClient` when provided (the caller owns and closes it),
    otherwise opens a short-lived client per request.
    """

    def __init__(self, *, client: httpx.AsyncClient | None = None, timeout: float = 10.0) -> None:
        self.client = client
        self.timeout = timeout

    async def execute(self, request: HttpRequest) -> HttpResponse:
        if self.client is not None:
            return await self._send(self.client, request)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._send(client, request)

    async def _send(self, client: httpx.AsyncClient, request: HttpRequest) -> HttpResponse:
        resp = await client.request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
        )
        logger.debug("POST %s -> %s", request.url, resp.status_code)
        return HttpResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=resp.content,
        )
