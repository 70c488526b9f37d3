# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
HTTP actions.

Supports GET, POST, PUT, PATCH, DELETE and HEAD requests with optional
headers, query params and JSON or form encoded bodies. The request itself is
delegated to the HTTP client attached to the session; this module only
shapes requests and measures them.

Example:
    >>> action = post("/orders", json={"sku": "A-1"}, headers={"X-Trace": "1"})
    >>> action.headers
    {'Content-Type': 'application/json', 'X-Trace': '1'}
    >>> str(action)
    'POST /orders'
"""

import json
import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from ..errors import ActionError, ConfigError, HTTPClientError
from ..models import HTTPResponse
from .base import Action

if TYPE_CHECKING:
    from ..session import Session

METHODS = ("get", "post", "put", "patch", "delete", "head")

Params = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]


@dataclass
class HTTPAction(Action):
    """A single HTTP request run against a session."""

    method: str = "get"
    path: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    params: Params = field(default_factory=dict)
    body: bytes = b""
    response: Optional[HTTPResponse] = None

    def __post_init__(self):
        self.method = self.method.lower()
        if self.method not in METHODS:
            raise ConfigError(f"Unsupported HTTP method: {self.method!r}")

    async def run(self, session: "Session") -> "Session":
        if session.client is None:
            raise ConfigError(f"Session {session.name} has no HTTP client")

        url = full_url(self, session)
        method = self.method.upper()
        session.logger.info("%s %s", method, url)

        start = time.perf_counter()
        try:
            response = await session.client.request(
                self.method,
                url,
                self.body or b"",
                self.headers,
                options(self, session),
            )
        except HTTPClientError as e:
            session.logger.error("HTTP action %s failed: %r", self, e.reason)
            raise ActionError(e.reason, self, session) from e
        duration = time.perf_counter() - start

        session.logger.debug("HTTP Response %s : %s", self, response.status)
        return (
            session.assign(last_action=replace(self, response=response))
            .add_result(self, response)
            .add_metric(("duration", method, metrics_url(self, session)), duration)
        )

    def __str__(self) -> str:
        return f"{self.method.upper()} {full_url(self)}"


# =============================================================================
# Factories
# =============================================================================


def get(
    path: str,
    params: Optional[Params] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> HTTPAction:
    return HTTPAction(
        method="get",
        path=path,
        params=params if params is not None else {},
        headers=dict(headers or {}),
    )


def head(
    path: str,
    params: Optional[Params] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> HTTPAction:
    return HTTPAction(
        method="head",
        path=path,
        params=params if params is not None else {},
        headers=dict(headers or {}),
    )


def post(path: str, **opts: Any) -> HTTPAction:
    return add_options(HTTPAction(method="post", path=path), **opts)


def put(path: str, **opts: Any) -> HTTPAction:
    return add_options(HTTPAction(method="put", path=path), **opts)


def patch(path: str, **opts: Any) -> HTTPAction:
    return add_options(HTTPAction(method="patch", path=path), **opts)


def delete(path: str, **opts: Any) -> HTTPAction:
    return add_options(HTTPAction(method="delete", path=path), **opts)


def add_options(
    action: HTTPAction,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Params] = None,
    json: Any = None,
    form: Any = None,
) -> HTTPAction:
    """
    Apply headers, params and a body to ``action``.

    Args:
        action: Action to update in place
        headers: Extra headers; these win over encoding headers on conflict
        params: Query params
        json: Data to send as a JSON body
        form: Data to send as a URL-encoded form body

    Returns:
        The updated action
    """
    encoding_headers, body = _encode_body(json, form)
    explicit = dict(headers or {})
    overridden = {name.lower() for name in explicit}

    merged = dict(action.headers)
    merged.update((k, v) for k, v in encoding_headers.items() if k.lower() not in overridden)
    merged.update(explicit)

    action.headers = merged
    action.params = params if params is not None else {}
    action.body = body
    return action


def _encode_body(json_data: Any, form_data: Any) -> Tuple[Dict[str, str], bytes]:
    if json_data is not None and form_data is not None:
        raise ConfigError("HTTP action accepts either json or form data, not both")
    if json_data is not None:
        body = json.dumps(json_data, separators=(",", ":")).encode("utf-8")
        return {"Content-Type": "application/json"}, body
    if form_data is not None:
        body = urlencode(form_data, doseq=True).encode("utf-8")
        return {"Content-Type": "x-www-form-urlencoded"}, body
    return {}, b""


# =============================================================================
# URLs & request options
# =============================================================================


def url(action: HTTPAction, session: Optional["Session"] = None) -> str:
    """Request URL without query string."""
    base_url = session.config.get("base_url") if session is not None else None
    if base_url is None:
        return action.path
    if action.path == "/":
        return base_url
    return base_url + action.path


def full_url(action: HTTPAction, session: Optional["Session"] = None) -> str:
    """Request URL, with the query string appended for GET requests."""
    request_url = url(action, session)
    if action.method == "get":
        return request_url + query_params_string(action.params)
    return request_url


def metrics_url(action: HTTPAction, session: "Session") -> str:
    """URL used in duration metric keys."""
    if session.config.get("skip_metrics_in_query_params"):
        return url(action, session)
    return full_url(action, session)


def full_path(action: HTTPAction) -> str:
    return action.path + query_params_string(action.params)


def query_params_string(params: Optional[Params]) -> str:
    if not params:
        return ""
    return "?" + urlencode(params, doseq=True)


def options(action: HTTPAction, session: "Session") -> Dict[str, Any]:
    """Client request options: the session's ``http`` config plus the action's params."""
    opts = dict(session.config.get("http") or {})
    opts["params"] = action.params
    return opts
