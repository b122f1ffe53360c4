import logging
from collections.abc import Awaitable, Callable, Mapping

from .models import Request, Response

NextFn = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, NextFn], Awaitable[Response]]


def logging_middleware(logger: logging.Logger | None = None) -> Middleware:
    log = logger or logging.getLogger(__name__)

    async def middleware(request: Request, next: NextFn) -> Response:
        log.info(f"-> {request.target}")
        response = await next(request)
        if response.is_success:
            log.info(f"<- {response.status_code} ({response.latency_ms}ms)")
        else:
            log.warning(f"<- {response.status_code} ({response.latency_ms}ms) {request.target}")
        return response

    return middleware


def headers_middleware(headers: Mapping[str, str], *, overwrite: bool = False) -> Middleware:
    """
    Add fixed headers to every request.

    Headers already present on the request win unless ``overwrite`` is set,
    so a per-call ``User-Agent`` is never replaced by the configured one.
    """
    fixed = dict(headers)

    async def middleware(request: Request, next: NextFn) -> Response:
        return await next(request.with_headers(fixed, overwrite=overwrite))

    return middleware
