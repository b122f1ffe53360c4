import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

from pydantic_core import PydanticSerializationError, to_json

from exceptions.api import RequestFailedError, SerializationError
from libs.api_client.conversion import decode_body
from libs.api_client.models import OPAQUE, ApiResponse
from libs.http_client import HttpClient, Response

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class JsonApiClient:
    """
    ``ApiClient`` implementation speaking JSON over ``HttpClient``.

    Bodies of POST, PUT and PATCH are always sent as JSON, a ``None`` body
    as ``null``. Non-2xx responses raise ``RequestFailedError`` with the raw
    body text, connection problems surface as ``TransportError`` from ``HttpClient``
    and decode problems as ``SerializationError``.
    """

    def __init__(self, http_client: HttpClient, base_url: str = ""):
        self._http_client = http_client
        self._base_url = base_url

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    async def close(self) -> None:
        await self._http_client.close()

    async def __aenter__(self) -> "JsonApiClient":
        await self._http_client.__aenter__()
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()

    def _resolve_url(self, url: str) -> str:
        if not self._base_url:
            return url
        return urljoin(self._base_url.rstrip("/") + "/", url.lstrip("/"))

    def _headers(self, headers: Mapping[str, str] | None, with_body: bool) -> dict[str, str]:
        merged = dict(JSON_HEADERS) if with_body else {"Accept": JSON_HEADERS["Accept"]}
        if headers:
            merged.update(headers)
        return merged

    @staticmethod
    def _encode_body(body: Any) -> bytes:
        if isinstance(body, bytes):
            return body
        try:
            # str becomes a JSON string literal and None becomes null
            return to_json(body)
        except PydanticSerializationError as e:
            logger.error(f"Failed to serialize request body of type {type(body).__name__}: {e}")
            raise SerializationError(
                f"Failed to serialize request body of type {type(body).__name__}",
                cause=e,
            )

    def _to_api_response(self, response: Response, result_type: Any) -> ApiResponse[Any]:
        if not response.is_success:
            logger.error(
                f"Request {response.request.target} "
                f"failed with status {response.status_code}: {response.text()}"
            )
            raise RequestFailedError(
                f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text(),
            )

        body = decode_body(response.content, result_type, status_code=response.status_code)
        return ApiResponse(status_code=response.status_code, headers=response.headers, body=body)

    async def _send(
        self,
        method: str,
        url: str,
        result_type: Any,
        headers: Mapping[str, str] | None = None,
        content: bytes | None = None,
    ) -> ApiResponse[Any]:
        with_body = content is not None
        response = await self._http_client.request(
            method,
            self._resolve_url(url),
            headers=self._headers(headers, with_body),
            content=content if with_body else b"",
        )
        return self._to_api_response(response, result_type)

    async def get(
        self,
        url: str,
        result_type: Any = OPAQUE,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        return await self._send("GET", url, result_type, headers=headers)

    async def post(
        self,
        url: str,
        body: Any = None,
        result_type: Any = OPAQUE,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        return await self._send("POST", url, result_type, headers=headers, content=self._encode_body(body))

    async def put(
        self,
        url: str,
        body: Any = None,
        result_type: Any = OPAQUE,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        return await self._send("PUT", url, result_type, headers=headers, content=self._encode_body(body))

    async def patch(
        self,
        url: str,
        body: Any = None,
        result_type: Any = OPAQUE,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        return await self._send("PATCH", url, result_type, headers=headers, content=self._encode_body(body))

    async def delete(
        self,
        url: str,
        result_type: Any = OPAQUE,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        return await self._send("DELETE", url, result_type, headers=headers)
