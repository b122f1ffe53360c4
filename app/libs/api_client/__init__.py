"""Typed API client layer used by the sequential service."""

from .base import ApiClient
from .client import JsonApiClient
from .conversion import ConversionPolicy, cast_body, convert_response, decode_body
from .models import OPAQUE, ApiRequest, ApiResponse, HttpMethod

__all__ = [
    "OPAQUE",
    "ApiClient",
    "ApiRequest",
    "ApiResponse",
    "ConversionPolicy",
    "HttpMethod",
    "JsonApiClient",
    "cast_body",
    "convert_response",
    "decode_body",
]
