from pydantic import Field, PositiveFloat, PositiveInt
from pydantic_settings import BaseSettings

from libs.api_client.conversion import ConversionPolicy


class HttpClientConfig(BaseSettings):
    """
    Configuration for the outgoing HTTP client
    """

    HTTP_BASE_URL: str = Field(
        description="Base URL that relative request urls are resolved against, empty to disable",
        default="",
    )

    HTTP_DEFAULT_TIMEOUT: PositiveFloat = Field(
        description="Default timeout in seconds for a single HTTP request",
        default=30.0,
    )

    HTTP_MAX_CONNECTIONS: PositiveInt = Field(
        description="Maximum number of concurrent connections in the pool",
        default=100,
    )

    HTTP_MAX_KEEPALIVE_CONNECTIONS: PositiveInt = Field(
        description="Maximum number of idle keep-alive connections in the pool",
        default=20,
    )

    HTTP_KEEPALIVE_EXPIRY: PositiveFloat = Field(
        description="Seconds an idle keep-alive connection is kept open",
        default=30.0,
    )

    HTTP_PROXY_URL: str | None = Field(
        description="Proxy URL for outgoing requests (e.g. http://proxy:8080)",
        default=None,
    )

    HTTP_PROXY_USERNAME: str | None = Field(
        description="Proxy username, only used together with HTTP_PROXY_PASSWORD",
        default=None,
    )

    HTTP_PROXY_PASSWORD: str | None = Field(
        description="Proxy password",
        default=None,
    )

    HTTP_USER_AGENT: str = Field(
        description="User-Agent header sent with every request",
        default="sequential-api/0.1",
    )


class ChainConfig(BaseSettings):
    """
    Configuration for sequential call chains
    """

    CHAIN_CONVERSION_POLICY: ConversionPolicy = Field(
        description="What to do when the final body cannot be cast to the requested type: "
        "'pass_through' returns the response unchanged, 'strict' raises",
        default=ConversionPolicy.PASS_THROUGH,
    )

    CHAIN_TIMEOUT_SECONDS: PositiveFloat | None = Field(
        description="Deadline in seconds for a whole chain, unset for no deadline",
        default=None,
    )


class LoggingConfig(BaseSettings):
    """
    Configuration for application logging
    """

    LOG_LEVEL: str = Field(
        description="Logging level, default to INFO. Set to ERROR for production environments.",
        default="INFO",
    )

    LOG_FILE: str | None = Field(
        description="File path for log output.",
        default=None,
    )

    LOG_FILE_MAX_SIZE: PositiveInt = Field(
        description="Maximum file size for file rotation retention, the unit is megabytes (MB)",
        default=20,
    )

    LOG_FILE_BACKUP_COUNT: PositiveInt = Field(
        description="Maximum file backup count file rotation retention",
        default=5,
    )

    LOG_FORMAT: str = Field(
        description="Format string for log messages",
        default=(
            "%(asctime)s.%(msecs)03d %(levelname)s [%(name)s] "
            "[%(filename)s:%(lineno)d] %(trace_id)s - %(message)s"
        ),
    )

    LOG_DATEFORMAT: str | None = Field(
        description="Date format string for log timestamps",
        default=None,
    )

    LOG_TZ: str | None = Field(
        description="Timezone for log timestamps (e.g., 'America/New_York')",
        default="UTC",
    )


class FeatureConfig(
    HttpClientConfig,
    ChainConfig,
    LoggingConfig,
):
    pass
