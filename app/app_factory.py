import logging

from configs import AppConfig, app_config
from extensions import ext_logging
from libs.api_client import ApiClient, JsonApiClient
from libs.http_client import HttpClient, PoolLimits, ProxyConfig, headers_middleware, logging_middleware
from services.sequential_api_service import SequentialApiService

logger = logging.getLogger(__name__)


def create_http_client(config: AppConfig | None = None) -> HttpClient:
    config = config or app_config
    return HttpClient(
        middlewares=[
            headers_middleware({"User-Agent": config.HTTP_USER_AGENT}),
            logging_middleware(),
        ],
        pool_limits=PoolLimits.from_config(config),
        proxy=ProxyConfig.from_config(config),
        default_timeout=config.HTTP_DEFAULT_TIMEOUT,
    )


def create_sequential_api_service(
    config: AppConfig | None = None,
    *,
    api_client: ApiClient | None = None,
) -> SequentialApiService:
    """
    Wire logging, the HTTP client and the sequential service from config.

    :param config: the app config, defaults to the environment based one
    :param api_client: a ready transport, skips building the JSON client
    :return: the sequential service
    """
    config = config or app_config
    if not ext_logging.is_initialized():
        ext_logging.init_logging(config)

    if api_client is None:
        api_client = JsonApiClient(create_http_client(config), base_url=config.HTTP_BASE_URL)

    service = SequentialApiService(
        api_client,
        conversion_policy=config.CHAIN_CONVERSION_POLICY,
        timeout=config.CHAIN_TIMEOUT_SECONDS,
    )
    logger.info(f"{config.PROJECT_NAME} {config.CURRENT_VERSION} sequential service created")
    return service
