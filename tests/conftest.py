from __future__ import annotations

from typing import Callable

import httpx
import pytest

from loadenv import HTTPXClient


@pytest.fixture
def make_client() -> Callable[..., HTTPXClient]:
    """Build an HTTPXClient whose requests are answered by ``handler``."""

    def factory(handler) -> HTTPXClient:
        return HTTPXClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    return factory


@pytest.fixture
def ok_client(make_client) -> HTTPXClient:
    return make_client(lambda request: httpx.Response(200, json={"path": request.url.path}))
