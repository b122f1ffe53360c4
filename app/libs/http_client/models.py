from collections.abc import Mapping
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class Request:
    """One outgoing HTTP exchange as the middleware chain sees it."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    timeout: float = 30.0

    @property
    def target(self) -> str:
        return f"{self.method} {self.url}"

    def has_header(self, name: str) -> bool:
        lowered = name.lower()
        return any(key.lower() == lowered for key in self.headers)

    def with_headers(self, headers: Mapping[str, str], *, overwrite: bool = True) -> "Request":
        merged = dict(self.headers)
        for name, value in headers.items():
            if overwrite or not self.has_header(name):
                merged[name] = value
        return replace(self, headers=merged)


@dataclass(frozen=True)
class Response:
    """Raw HTTP exchange result, before any body decoding."""

    status_code: int
    headers: dict[str, str]
    content: bytes
    latency_ms: int
    request: Request

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")
