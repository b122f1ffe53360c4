from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from libs.api_client.models import ApiResponse


@runtime_checkable
class ApiClient(Protocol):
    """
    Transport contract consumed by the sequential service.

    Implementations return for any 2xx status with the body decoded as
    ``result_type`` and raise an ``ApiError`` subclass otherwise:
    ``RequestFailedError`` for non-2xx, ``TransportError`` for connection
    problems, ``SerializationError`` for encode/decode problems.
    """

    async def get(
        self,
        url: str,
        result_type: Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]: ...

    async def post(
        self,
        url: str,
        body: Any,
        result_type: Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]: ...
