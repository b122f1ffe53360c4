import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from core.response_processor import ResponseProcessorRegistry
from exceptions.api import (
    ApiError,
    ChainTimeoutError,
    RequestBuildError,
    RequestFailedError,
    TransportError,
    UnsupportedMethodError,
)
from extensions.ext_logging import trace_id_generator, trace_id_var
from libs.api_client import (
    OPAQUE,
    ApiClient,
    ApiRequest,
    ApiResponse,
    ConversionPolicy,
    HttpMethod,
    convert_response,
)

logger = logging.getLogger(__name__)

RequestBuilder = Callable[[ApiResponse[Any]], ApiRequest]
MethodHandler = Callable[[ApiClient, ApiRequest, Any], Awaitable[ApiResponse[Any]]]


async def _dispatch_get(api_client: ApiClient, request: ApiRequest, result_type: Any) -> ApiResponse[Any]:
    return await api_client.get(request.url, result_type, headers=request.headers)


async def _dispatch_post(api_client: ApiClient, request: ApiRequest, result_type: Any) -> ApiResponse[Any]:
    return await api_client.post(request.url, request.body, result_type, headers=request.headers)


DEFAULT_METHOD_HANDLERS: dict[HttpMethod | str, MethodHandler] = {
    HttpMethod.GET: _dispatch_get,
    HttpMethod.POST: _dispatch_post,
}


@dataclass
class _ChainState:
    step: int = 0


def _step_label(step: int) -> str:
    return "Initial call" if step == 0 else f"Chained call {step}"


def _failure_message(error: ApiError, step: int) -> str:
    if isinstance(error, RequestFailedError) and error.status_code is not None:
        return f"{_step_label(step)} failed with status {error.status_code}"
    return f"{_step_label(step)} failed: {error.message}"


class SequentialApiService:
    """
    Runs chains of dependent API calls.

    Every call after the first is built from the response of the previous
    one by a caller supplied builder. Steps run strictly one after another
    and the first failing step aborts the chain.
    """

    def __init__(
        self,
        api_client: ApiClient,
        conversion_policy: ConversionPolicy = ConversionPolicy.PASS_THROUGH,
        timeout: float | None = None,
        processors: ResponseProcessorRegistry | None = None,
    ):
        self._api_client = api_client
        self._conversion_policy = conversion_policy
        self._timeout = timeout
        self._method_handlers: dict[HttpMethod | str, MethodHandler] = dict(DEFAULT_METHOD_HANDLERS)
        # post-processing hooks for callers, never used by the chain itself
        self.processors = processors if processors is not None else ResponseProcessorRegistry()

    @property
    def api_client(self) -> ApiClient:
        return self._api_client

    async def close(self) -> None:
        close = getattr(self._api_client, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "SequentialApiService":
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()

    @property
    def supported_methods(self) -> frozenset[HttpMethod | str]:
        return frozenset(self._method_handlers)

    def register_method(self, method: HttpMethod | str, handler: MethodHandler) -> None:
        """
        Add or replace the dispatcher for an HTTP method.

        :param method: the method, case-insensitive
        :param handler: ``handler(api_client, request, result_type)`` returning an awaitable response
        """
        self._method_handlers[HttpMethod.parse(method)] = handler

    async def execute_single_call(self, request: ApiRequest, result_type: Any = OPAQUE) -> ApiResponse[Any]:
        """
        Execute one request through the API client.

        :param request: the request to send
        :param result_type: the type the response body is decoded into
        :return: the decoded response
        :raises ApiError: any failure, transport specific errors are wrapped
        """
        handler = self._method_handlers.get(request.method)
        if handler is None:
            logger.error(f"Unsupported HTTP method {request.method} for {request.url}")
            raise UnsupportedMethodError(f"Unsupported HTTP method: {request.method}")

        logger.debug(f"Executing {request.method} {request.url}")
        try:
            return await handler(self._api_client, request, result_type)
        except ApiError as e:
            logger.error(f"Call to {request.url} failed: {e.message}")
            raise
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during call to {request.url}: {e!r}")
            raise TransportError(f"HTTP communication error for {request.url}", cause=e)
        except Exception as e:
            logger.error(f"Error during call to {request.url}: {e!r}")
            raise ApiError("Error while executing call", cause=e)

    async def execute_sequential_calls(
        self,
        initial_request: ApiRequest,
        builders: Iterable[RequestBuilder],
        final_type: Any = OPAQUE,
        *,
        conversion_policy: ConversionPolicy | None = None,
        timeout: float | None = None,
    ) -> ApiResponse[Any]:
        """
        Execute a chain of dependent calls.

        :param initial_request: the first request of the chain
        :param builders: one builder per following call, each receives the previous response
        :param final_type: the type the last response body is decoded or converted into
        :param conversion_policy: overrides the service policy for the no-builder case
        :param timeout: deadline in seconds for the whole chain, overrides the service default
        :return: the response of the last call
        :raises ApiError: the failure of the first failing step, with ``step`` set
        """
        builders = list(builders)
        policy = conversion_policy or self._conversion_policy
        deadline = timeout if timeout is not None else self._timeout
        state = _ChainState()

        token = trace_id_var.set(trace_id_generator())
        try:
            logger.info(f"Starting sequential execution of {len(builders) + 1} API calls")
            try:
                if deadline is None:
                    return await self._run_chain(initial_request, builders, final_type, policy, state)
                async with asyncio.timeout(deadline):
                    return await self._run_chain(initial_request, builders, final_type, policy, state)
            except TimeoutError as e:
                logger.error(f"Sequential execution timed out after {deadline}s at step {state.step}")
                raise ChainTimeoutError(
                    f"Sequential execution timed out after {deadline}s",
                    step=state.step,
                    cause=e,
                )
            except ApiError as e:
                logger.error(f"Sequential execution aborted at step {e.step}: {e.message}")
                raise
        finally:
            trace_id_var.reset(token)

    async def _run_chain(
        self,
        initial_request: ApiRequest,
        builders: list[RequestBuilder],
        final_type: Any,
        policy: ConversionPolicy,
        state: _ChainState,
    ) -> ApiResponse[Any]:
        logger.debug(f"Executing initial call: {initial_request.method} {initial_request.url}")
        previous = await self._execute_step(initial_request, OPAQUE, step=0)
        self._ensure_success(previous, step=0)

        if not builders:
            try:
                return convert_response(previous, final_type, policy)
            except ApiError as e:
                e.step = 0
                raise

        last_step = len(builders)
        for step, builder in enumerate(builders, start=1):
            state.step = step
            next_request = self._build_request(builder, previous, step)
            # only the last call knows the caller's type
            result_type = final_type if step == last_step else OPAQUE
            logger.debug(f"Executing call {step}: {next_request.method} {next_request.url}")
            previous = await self._execute_step(next_request, result_type, step=step)
            self._ensure_success(previous, step=step)

        logger.info(f"Sequential execution finished with status {previous.status_code}")
        return previous

    async def _execute_step(self, request: ApiRequest, result_type: Any, step: int) -> ApiResponse[Any]:
        try:
            return await self.execute_single_call(request, result_type)
        except ApiError as e:
            if e.step is None:
                e.step = step
                e.message = _failure_message(e, step)
            raise

    @staticmethod
    def _build_request(builder: RequestBuilder, previous: ApiResponse[Any], step: int) -> ApiRequest:
        try:
            request = builder(previous)
        except Exception as e:
            raise RequestBuildError(
                f"Request builder {step} raised {type(e).__name__}",
                cause=e,
                step=step,
            )
        if not isinstance(request, ApiRequest):
            raise RequestBuildError(
                f"Request builder {step} returned {type(request).__name__}, expected ApiRequest",
                step=step,
            )
        return request

    @staticmethod
    def _ensure_success(response: ApiResponse[Any], step: int) -> None:
        if response.is_success:
            return
        raise RequestFailedError(
            f"{_step_label(step)} failed with status {response.status_code}",
            status_code=response.status_code,
            body=response.body_text(),
            step=step,
        )
