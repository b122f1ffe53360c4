from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

if TYPE_CHECKING:
    from configs.feature import HttpClientConfig


@dataclass
class PoolLimits:
    max_connections: int = 100
    max_keepalive: int = 20
    keepalive_expiry: float = 30.0

    @classmethod
    def from_config(cls, config: "HttpClientConfig") -> "PoolLimits":
        return cls(
            max_connections=config.HTTP_MAX_CONNECTIONS,
            max_keepalive=config.HTTP_MAX_KEEPALIVE_CONNECTIONS,
            keepalive_expiry=config.HTTP_KEEPALIVE_EXPIRY,
        )

    def to_httpx_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive,
            keepalive_expiry=self.keepalive_expiry,
        )


@dataclass
class ProxyConfig:
    url: str
    auth: tuple[str, str] | None = None

    @classmethod
    def from_config(cls, config: "HttpClientConfig") -> "ProxyConfig | None":
        """Proxy settings from config, ``None`` when no proxy url is set."""
        if not config.HTTP_PROXY_URL:
            return None
        auth = None
        if config.HTTP_PROXY_USERNAME and config.HTTP_PROXY_PASSWORD:
            auth = (config.HTTP_PROXY_USERNAME, config.HTTP_PROXY_PASSWORD)
        return cls(url=config.HTTP_PROXY_URL, auth=auth)

    def to_httpx_proxy(self) -> str:
        if not self.auth:
            return self.url
        username, password = (quote(part, safe="") for part in self.auth)
        parts = urlsplit(self.url)
        # credentials already embedded in the url are replaced
        host = parts.netloc.rpartition("@")[2]
        return urlunsplit(parts._replace(netloc=f"{username}:{password}@{host}"))
