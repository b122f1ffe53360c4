"""Low-level async HTTP client with a middleware chain."""

from .client import HttpClient
from .middleware import Middleware, NextFn, headers_middleware, logging_middleware
from .models import Request, Response
from .pool import PoolLimits, ProxyConfig

__all__ = [
    "HttpClient",
    "Request",
    "Response",
    "PoolLimits",
    "ProxyConfig",
    "Middleware",
    "NextFn",
    "logging_middleware",
    "headers_middleware",
]
