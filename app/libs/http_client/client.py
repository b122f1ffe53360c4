import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx

from exceptions.api import TransportError

from .middleware import Middleware
from .models import Request, Response
from .pool import PoolLimits, ProxyConfig

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Async HTTP client sharing one lazily created ``httpx.AsyncClient``.

    Every request runs through the middlewares in registration order before
    it goes on the wire. Bodies are raw bytes, encoding is up to the caller.
    ``httpx`` errors surface as ``TransportError``.
    """

    def __init__(
        self,
        middlewares: list[Middleware] | None = None,
        pool_limits: PoolLimits | None = None,
        proxy: str | ProxyConfig | None = None,
        default_timeout: float = 30.0,
    ):
        self._middlewares = list(middlewares or [])
        self._pool_limits = pool_limits or PoolLimits()
        self._proxy = proxy.to_httpx_proxy() if isinstance(proxy, ProxyConfig) else proxy
        self._default_timeout = default_timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return tuple(self._middlewares)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=self._pool_limits.to_httpx_limits(),
                proxy=self._proxy,
                timeout=self._default_timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        content: bytes = b"",
        timeout: float | None = None,
    ) -> Response:
        """
        Send one request through the middleware chain.

        :param method: HTTP method, case-insensitive
        :param url: absolute url
        :param headers: request headers
        :param content: encoded request body
        :param timeout: per-request timeout, the client default when omitted
        :return: the raw response, whatever its status
        :raises TransportError: the exchange itself failed
        """
        request = Request(
            method=method.upper(),
            url=url,
            headers=dict(headers or {}),
            content=content,
            timeout=timeout or self._default_timeout,
        )
        return await self._dispatch(request, 0)

    async def _dispatch(self, request: Request, index: int) -> Response:
        if index == len(self._middlewares):
            return await self._send(request)

        async def next_fn(req: Request) -> Response:
            return await self._dispatch(req, index + 1)

        return await self._middlewares[index](request, next_fn)

    async def _send(self, request: Request) -> Response:
        client = await self._ensure_client()
        started = time.perf_counter()

        try:
            http_response = await client.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                content=request.content,
                timeout=request.timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP {request.target} failed: {e!r}")
            raise TransportError(f"HTTP communication error for {request.target}", cause=e)

        return Response(
            status_code=http_response.status_code,
            headers=dict(http_response.headers),
            content=http_response.content,
            latency_ms=int((time.perf_counter() - started) * 1000),
            request=request,
        )
