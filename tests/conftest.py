from __future__ import annotations

from typing import Callable

import httpx
import pytest

from myhttp.http_utils import build_client

Handler = Callable[[httpx.Request], httpx.Response]


def respond_with_url(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=f"Response from {request.url}".encode())


def fail_with_some_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("some error", request=request)


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an AsyncClient with the production settings over a mock transport."""

    def _make(handler: Handler) -> httpx.AsyncClient:
        return build_client(5, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture(autouse=True)
def _clear_timeout_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MYHTTP_TIMEOUT", raising=False)
