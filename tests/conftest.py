from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from gcm_push.application.interfaces.transport import HttpRequest, HttpResponse


class SpyTransport:
    """Records requests and replays a canned response or raises a canned error."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        body: Any = None,
        headers: dict[str, str] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.headers = headers or {}
        self.error = error
        self.requests: list[HttpRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].body)

    async def execute(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        body = self.body
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return HttpResponse(status_code=self.status_code, headers=self.headers, body=body or b"")


@pytest.fixture()
def spy_transport_factory():
    def factory(**kwargs: Any) -> SpyTransport:
        return SpyTransport(**kwargs)

    return factory
