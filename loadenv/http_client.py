# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
HTTP client used by HTTP actions.

Any object with a matching ``request`` coroutine can be attached to a
session. ``HTTPXClient`` is the default implementation on top of
``httpx.AsyncClient``; it is shared by every scenario of an environment run.
"""

from typing import Any, Dict, Mapping, Optional, Protocol

import httpx

from .errors import HTTPClientError
from .models import HTTPResponse


class HTTPClient(Protocol):
    async def request(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: Mapping[str, str],
        options: Mapping[str, Any],
    ) -> HTTPResponse:
        ...


class HTTPXClient:
    """
    HTTP client backed by httpx.

    Example:
        >>> async with HTTPXClient(timeout=30.0) as client:
        ...     response = await client.request("get", "http://localhost:8000/", b"", {}, {})
        ...     print(response.status)
    """

    def __init__(
        self,
        timeout: float = 120.0,
        max_connections: int = 1000,
        max_keepalive_connections: int = 100,
        client: Optional[httpx.AsyncClient] = None,
        **client_kwargs: Any,
    ):
        # Increase connection limits for high concurrency (default is 100)
        if client is None:
            limits = httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_keepalive_connections,
            )
            client = httpx.AsyncClient(timeout=timeout, limits=limits, **client_kwargs)
        self._client = client

    async def __aenter__(self) -> "HTTPXClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self._client.__aexit__(*exc_info)

    async def request(
        self,
        method: str,
        url: str,
        body: bytes,
        headers: Mapping[str, str],
        options: Mapping[str, Any],
    ) -> HTTPResponse:
        """
        Send one request.

        Args:
            method: HTTP method (any case)
            url: Absolute request URL
            body: Raw request body
            headers: Request headers
            options: Extra keyword arguments for ``httpx.AsyncClient.request``
                (``params``, ``timeout``, ``follow_redirects``, ...)

        Returns:
            HTTPResponse with status, headers and body

        Raises:
            HTTPClientError: On transport failures; HTTP status codes are not errors
        """
        try:
            response = await self._client.request(
                method.upper(),
                url,
                content=body,
                headers=dict(headers),
                **dict(options),
            )
        except httpx.HTTPError as e:
            raise HTTPClientError(e, method, url) from e

        return HTTPResponse(
            status=response.status_code,
            headers=_headers(response.headers),
            body=response.content,
        )


def _headers(headers: httpx.Headers) -> Dict[str, str]:
    return {name: value for name, value in headers.items()}
