import logging

import pytest

from libs.http_client.middleware import headers_middleware, logging_middleware
from libs.http_client.models import Request, Response


async def capture(request: Request, seen: list[Request]) -> Response:
    seen.append(request)
    return Response(status_code=200, headers={}, content=b"", latency_ms=0, request=request)


class TestHeadersMiddleware:
    @pytest.mark.asyncio
    async def test_headers_are_added(self):
        req = Request(method="GET", url="https://example.com", headers={"Accept": "application/json"})
        seen: list[Request] = []

        middleware = headers_middleware({"Authorization": "Bearer token"})
        await middleware(req, lambda r: capture(r, seen))

        assert seen[0].headers == {
            "Accept": "application/json",
            "Authorization": "Bearer token",
        }
        assert req.headers == {"Accept": "application/json"}

    @pytest.mark.asyncio
    async def test_request_headers_win_by_default(self):
        req = Request(method="GET", url="https://example.com", headers={"user-agent": "own/1.0"})
        seen: list[Request] = []

        await headers_middleware({"User-Agent": "default/1.0"})(req, lambda r: capture(r, seen))

        assert seen[0].headers == {"user-agent": "own/1.0"}

    @pytest.mark.asyncio
    async def test_overwrite(self):
        req = Request(method="GET", url="https://example.com", headers={"X-Env": "dev"})
        seen: list[Request] = []

        await headers_middleware({"X-Env": "prod"}, overwrite=True)(req, lambda r: capture(r, seen))

        assert seen[0].headers == {"X-Env": "prod"}


class TestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_logs_request_and_failed_response(self, caplog):
        req = Request(method="POST", url="https://example.com/orders")
        resp = Response(status_code=500, headers={}, content=b"", latency_ms=12, request=req)

        async def next_fn(r: Request) -> Response:
            return resp

        logger = logging.getLogger("test.http")
        middleware = logging_middleware(logger)
        with caplog.at_level(logging.INFO, logger="test.http"):
            result = await middleware(req, next_fn)

        assert result is resp
        messages = [record.getMessage() for record in caplog.records]
        assert "-> POST https://example.com/orders" in messages
        assert any(
            record.levelno == logging.WARNING and "<- 500 (12ms)" in record.getMessage()
            for record in caplog.records
        )
