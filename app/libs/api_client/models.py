from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# Result type for calls whose body type is not the caller's final type.
OPAQUE: Any = Any


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "str | HttpMethod") -> "HttpMethod | str":
        """
        Case-insensitive lookup. Unknown methods come back as the upper-cased
        string so that dispatch, not construction, rejects them.
        """
        if isinstance(value, HttpMethod):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            return normalized


@dataclass(frozen=True)
class ApiRequest:
    method: HttpMethod | str
    url: str
    body: Any | None = None
    headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod.parse(self.method))
        if self.headers is not None:
            object.__setattr__(self, "headers", dict(self.headers))

    @classmethod
    def get(cls, url: str, headers: Mapping[str, str] | None = None) -> "ApiRequest":
        return cls(method=HttpMethod.GET, url=url, headers=headers)

    @classmethod
    def post(
        cls,
        url: str,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> "ApiRequest":
        return cls(method=HttpMethod.POST, url=url, body=body, headers=headers)

    def with_headers(self, **headers: str) -> "ApiRequest":
        return replace(self, headers={**(self.headers or {}), **headers})


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: T | None = None

    def __post_init__(self) -> None:
        # header names are case-insensitive, keep them lower-cased
        object.__setattr__(
            self,
            "headers",
            {str(key).lower(): value for key, value in (self.headers or {}).items()},
        )

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)

    def with_body(self, body: Any) -> "ApiResponse[Any]":
        return ApiResponse(status_code=self.status_code, headers=self.headers, body=body)

    def body_text(self) -> str | None:
        if self.body is None:
            return None
        if isinstance(self.body, str):
            return self.body
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return str(self.body)
