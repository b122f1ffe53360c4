"""Pytest 配置文件"""

import asyncio
from typing import Any

import pytest

from libs.api_client import ApiResponse
from services.sequential_api_service import SequentialApiService


class FakeApiClient:
    """
    Scripted transport. Each ``get``/``post`` pops the next outcome: an
    ``ApiResponse`` is returned, an exception is raised, a callable is
    awaited (for slow or inspecting transports).
    """

    def __init__(self, outcomes: list[Any] | None = None):
        self.outcomes = list(outcomes or [])
        self.calls: list[dict[str, Any]] = []
        self.events: list[tuple] = []

    async def _next(self, call: dict[str, Any]) -> ApiResponse[Any]:
        self.calls.append(call)
        self.events.append(("call", call["method"], call["url"]))
        if not self.outcomes:
            raise AssertionError(f"unexpected call {call['method']} {call['url']}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return await outcome(call)
        return outcome

    async def get(self, url, result_type, *, headers=None):
        return await self._next(
            {"method": "GET", "url": url, "result_type": result_type, "headers": headers}
        )

    async def post(self, url, body, result_type, *, headers=None):
        return await self._next(
            {
                "method": "POST",
                "url": url,
                "body": body,
                "result_type": result_type,
                "headers": headers,
            }
        )


def pytest_configure(config):
    """Pytest 配置钩子"""
    config.addinivalue_line("markers", "e2e: chain tests running through the real HTTP client")


@pytest.fixture
def fake_api_client() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture
def service(fake_api_client) -> SequentialApiService:
    return SequentialApiService(fake_api_client)


@pytest.fixture
def slow_response():
    def factory(response: ApiResponse[Any], delay: float = 1.0):
        async def outcome(_call):
            await asyncio.sleep(delay)
            return response

        return outcome

    return factory
