from __future__ import annotations

import json

import httpx
import pytest

from loadenv import ActionError, ConfigError, HTTPAction, Session
from loadenv.actions import http


# =============================================================================
# URL construction
# =============================================================================


def test_query_params_string_empty() -> None:
    assert http.query_params_string([]) == ""
    assert http.query_params_string({}) == ""
    assert http.query_params_string(None) == ""


def test_query_params_string_keeps_input_order() -> None:
    assert http.query_params_string({"a": "1", "b": "2"}) == "?a=1&b=2"
    assert http.query_params_string([("b", "2"), ("a", "1")]) == "?b=2&a=1"


def test_query_params_string_encodes_values() -> None:
    assert http.query_params_string({"q": "a b&c"}) == "?q=a+b%26c"


def test_root_path_uses_base_url_verbatim() -> None:
    session = Session(name="s", config={"base_url": "http://x.com"})

    assert http.url(http.get("/"), session) == "http://x.com"


def test_path_is_appended_to_base_url() -> None:
    session = Session(name="s", config={"base_url": "http://x.com"})

    assert http.url(http.get("/foo"), session) == "http://x.com/foo"
    # No slash normalisation
    assert http.url(http.get("foo"), session) == "http://x.comfoo"


def test_path_is_absolute_without_base_url() -> None:
    session = Session(name="s", config={})

    assert http.url(http.get("http://other.com/a"), session) == "http://other.com/a"


def test_full_url_adds_query_only_for_get() -> None:
    session = Session(name="s", config={"base_url": "http://x.com"})

    assert http.full_url(http.get("/a", params={"p": 1}), session) == "http://x.com/a?p=1"
    assert http.full_url(http.get("/a"), session) == "http://x.com/a"
    assert http.full_url(http.post("/a", params={"p": 1}), session) == "http://x.com/a"


def test_metrics_url_can_skip_query_params() -> None:
    action = http.get("/a", params={"id": "123"})
    with_query = Session(name="s", config={"base_url": "http://x.com"})
    without_query = Session(name="s", config={"base_url": "http://x.com", "skip_metrics_in_query_params": True})

    assert http.metrics_url(action, with_query) == "http://x.com/a?id=123"
    assert http.metrics_url(action, without_query) == "http://x.com/a"


def test_full_path() -> None:
    assert http.full_path(http.get("/a", params={"x": "y"})) == "/a?x=y"


def test_options_merge_session_http_config_with_params() -> None:
    session = Session(name="s", config={"http": {"timeout": 5.0, "params": {"ignored": 1}}})

    assert http.options(http.get("/a", params={"p": 1}), session) == {"timeout": 5.0, "params": {"p": 1}}


def test_string_form_has_no_session_context() -> None:
    assert str(http.get("/a", params={"p": "1"})) == "GET /a?p=1"
    assert str(http.delete("/a/1")) == "DELETE /a/1"
    assert str(http.head("/")) == "HEAD /"


# =============================================================================
# Construction
# =============================================================================


def test_post_json_body_and_content_type() -> None:
    action = http.post("/a", json={"a": 1})

    assert action.body == b'{"a":1}'
    assert json.loads(action.body) == {"a": 1}
    assert action.headers == {"Content-Type": "application/json"}


def test_json_accepts_lists() -> None:
    assert http.put("/a", json=[1, 2]).body == b"[1,2]"


def test_explicit_headers_override_encoding_headers() -> None:
    action = http.post("/a", json={"a": 1}, headers={"Content-Type": "text/plain", "X-Id": "7"})

    assert action.headers == {"Content-Type": "text/plain", "X-Id": "7"}


def test_explicit_header_override_is_case_insensitive() -> None:
    action = http.patch("/a", json={"a": 1}, headers={"content-type": "text/plain"})

    assert action.headers == {"content-type": "text/plain"}


def test_form_body() -> None:
    action = http.post("/login", form={"user": "bob", "pw": "s e"})

    assert action.body == b"user=bob&pw=s+e"
    assert action.headers == {"Content-Type": "x-www-form-urlencoded"}


def test_no_body_options_yield_empty_body() -> None:
    action = http.delete("/a", params={"force": "1"})

    assert action.body == b""
    assert action.headers == {}
    assert action.params == {"force": "1"}


def test_json_and_form_are_exclusive() -> None:
    with pytest.raises(ConfigError):
        http.post("/a", json={"a": 1}, form={"b": 2})


def test_unknown_method_is_rejected() -> None:
    with pytest.raises(ConfigError):
        HTTPAction(method="trace", path="/")


# =============================================================================
# Execution
# =============================================================================


@pytest.mark.asyncio
async def test_run_records_one_metric_and_one_result(make_client) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    session = Session(name="s", config={"base_url": "http://x.com"}, client=make_client(handler))
    action = http.get("/items", params={"page": "2"})

    session = await action.run(session)

    key = ("duration", "GET", "http://x.com/items?page=2")
    assert list(session.metrics) == [key]
    assert len(session.metrics[key]) == 1
    assert session.metrics[key][0][1] >= 0
    assert list(session.results) == ["GET /items?page=2"]
    assert session.results["GET /items?page=2"].status == 200
    assert session.results["GET /items?page=2"].json() == {"ok": True}
    assert session.assigns["last_action"].response.status == 200
    assert str(seen[0].url) == "http://x.com/items?page=2"


@pytest.mark.asyncio
async def test_run_sends_method_headers_and_body(make_client) -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201)

    session = Session(name="s", config={"base_url": "http://x.com"}, client=make_client(handler))

    await http.post("/orders", json={"sku": "A-1"}).run(session)

    request = seen[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert request.content == b'{"sku":"A-1"}'
    assert ("duration", "POST", "http://x.com/orders") in session.metrics


@pytest.mark.asyncio
async def test_http_error_status_is_an_ordinary_result(make_client) -> None:
    session = Session(
        name="s",
        config={"base_url": "http://x.com"},
        client=make_client(lambda request: httpx.Response(503)),
    )

    session = await http.get("/").run(session)

    assert session.results["GET /"].status == 503
    assert len(session.metrics[("duration", "GET", "http://x.com")]) == 1


@pytest.mark.asyncio
async def test_failed_run_records_nothing(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    session = Session(name="s", config={"base_url": "http://x.com"}, client=make_client(handler))
    action = http.get("/down")

    with pytest.raises(ActionError) as exc_info:
        await action.run(session)

    error = exc_info.value
    assert error.action is action
    assert error.session is session
    assert isinstance(error.reason, httpx.ConnectError)
    assert session.metrics == {}
    assert session.results == {}
    assert session.assigns == {}


@pytest.mark.asyncio
async def test_run_without_client_is_a_config_error() -> None:
    with pytest.raises(ConfigError):
        await http.get("/").run(Session(name="s"))


@pytest.mark.asyncio
async def test_abort_returns_action_and_session() -> None:
    action, session = http.get("/"), Session(name="s")

    assert await action.abort(session) == (action, session)


@pytest.mark.asyncio
async def test_session_helpers_run_actions(ok_client) -> None:
    session = Session(name="s", config={"base_url": "http://x.com"}, client=ok_client)

    session = await session.get("/a")
    session = await session.post("/b", json={"x": 1})
    session = await session.delay(0)

    assert set(session.results) == {"GET /a", "POST /b"}
    assert session.assigns["last_action"].method == "post"
