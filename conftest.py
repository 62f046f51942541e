from __future__ import annotations

import json
from typing import Any, List, Tuple

import httpx
import pytest

from salt_netapi.client import SaltClient
from salt_netapi.config import get_settings

MASTER_URL = "http://salt.example:8000"

_ENV_VARS = (
    "SALT_API_URL",
    "SALT_API_USER",
    "SALT_API_PASSWORD",
    "SALT_API_EAUTH",
    "SALT_API_TIMEOUT",
    "SALT_API_VERIFY_SSL",
)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeMaster:
    """Records every request and answers with queued replies."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._replies: List[Tuple[int, Any]] = []

    def reply(self, body: Any, status_code: int = 200) -> "FakeMaster":
        self._replies.append((status_code, body))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self._replies.pop(0)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, (str, bytes)):
            return httpx.Response(status_code, content=body)
        return httpx.Response(status_code, json=body)

    def client(self, **kwargs: Any) -> SaltClient:
        return SaltClient(MASTER_URL, transport=httpx.MockTransport(self.handler), **kwargs)

    def sent(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def path(self, index: int = -1) -> str:
        return self.requests[index].url.path


@pytest.fixture
def master() -> FakeMaster:
    return FakeMaster()
