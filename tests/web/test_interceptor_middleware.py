# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for HandlerInterceptorMiddleware — handler resolution, veto, passthrough."""

from __future__ import annotations

import pytest
import structlog
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Mount, Route
from starlette.testclient import TestClient

from handlerchain.interceptor.chain import InterceptorEntry
from handlerchain.interceptor.response import ShortCircuitResponse
from handlerchain.web.adapters.starlette.interceptor_middleware import (
    REQUEST_ATTRIBUTE,
    HandlerInterceptorMiddleware,
    resolve_handler,
)
from handlerchain.web.registry import InterceptorRegistry


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class Recorder:
    def __init__(self, proceed: bool = True, response=None) -> None:
        self.proceed = proceed
        self.response = response
        self.calls: list[tuple[str, str]] = []
        self.post_responses: list[object] = []
        self.request_ids: list[str] = []

    def pre_handle(self, context, handler_id):
        self.calls.append(("pre", handler_id))
        self.request_ids.append(context.request_id)
        assert isinstance(context[REQUEST_ATTRIBUTE], Request)
        if not self.proceed:
            context.response = self.response
        return self.proceed

    def post_handle(self, context, handler_id, response):
        self.calls.append(("post", handler_id))
        self.post_responses.append(response)


async def foo(request: Request) -> PlainTextResponse:
    return PlainTextResponse("foo", headers={"X-Handler": "foo"})


async def fail(request: Request) -> PlainTextResponse:
    raise RuntimeError("handler exploded")


def _make_app(registry: InterceptorRegistry) -> Starlette:
    return Starlette(
        routes=[
            Route("/app/foo", foo),
            Route("/app/fail", fail),
            Route("/app/items/{item_id}", foo, name="item"),
        ],
        middleware=[Middleware(HandlerInterceptorMiddleware, registry=registry)],
    )


def _registry(*interceptors, patterns=()) -> InterceptorRegistry:
    registry = InterceptorRegistry()
    for interceptor in interceptors:
        registry.add_interceptor(interceptor).add_path_patterns(*patterns)
    return registry


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestPassthrough:
    def test_continue_reaches_handler(self):
        recorder = Recorder()
        client = TestClient(_make_app(_registry(recorder)))

        resp = client.get("/app/foo")

        assert resp.status_code == 200
        assert resp.text == "foo"
        assert resp.headers["X-Handler"] == "foo"
        assert recorder.calls == [("pre", "foo"), ("post", "foo")]
        assert recorder.post_responses[0].status_code == 200

    def test_handler_id_is_route_name(self):
        recorder = Recorder()
        TestClient(_make_app(_registry(recorder))).get("/app/items/3")
        assert recorder.calls[0] == ("pre", "item")

    def test_unmatched_route_is_not_intercepted(self):
        recorder = Recorder()
        resp = TestClient(_make_app(_registry(recorder))).get("/nowhere")
        assert resp.status_code == 404
        assert recorder.calls == []

    def test_wrong_method_is_not_intercepted(self):
        recorder = Recorder()
        resp = TestClient(_make_app(_registry(recorder))).post("/app/foo")
        assert resp.status_code == 405
        assert recorder.calls == []

    def test_path_outside_patterns_is_not_intercepted(self):
        recorder = Recorder()
        resp = TestClient(_make_app(_registry(recorder, patterns=["/app/bar"]))).get("/app/foo")
        assert resp.text == "foo"
        assert recorder.calls == []

    def test_request_id_header_is_used(self):
        recorder = Recorder()
        TestClient(_make_app(_registry(recorder))).get("/app/foo", headers={"X-Request-Id": "req-1"})
        assert recorder.request_ids == ["req-1"]


class TestVeto:
    def test_short_circuit_response_is_rendered(self):
        recorder = Recorder(
            proceed=False,
            response=ShortCircuitResponse(body={"error": "Could not load foo"}, status_code=401),
        )
        resp = TestClient(_make_app(_registry(recorder))).get("/app/foo")

        assert resp.status_code == 401
        assert resp.headers["content-type"] == "application/json"
        assert resp.json() == {"error": "Could not load foo"}
        assert recorder.calls == [("pre", "foo"), ("post", "foo")]

    def test_starlette_response_passes_through(self):
        recorder = Recorder(proceed=False, response=JSONResponse({"limited": True}, status_code=429))
        resp = TestClient(_make_app(_registry(recorder))).get("/app/foo")
        assert resp.status_code == 429
        assert resp.json() == {"limited": True}

    def test_veto_without_response_gives_empty_200(self):
        recorder = Recorder(proceed=False)
        resp = TestClient(_make_app(_registry(recorder))).get("/app/foo")
        assert resp.status_code == 200
        assert resp.content == b""

    def test_later_interceptors_do_not_run_after_veto(self):
        first = Recorder(proceed=False)
        second = Recorder()
        TestClient(_make_app(_registry(first, second))).get("/app/foo")
        assert first.calls == [("pre", "foo"), ("post", "foo")]
        assert second.calls == []


class TestHandlerFailure:
    def test_post_hooks_run_and_error_reaches_server(self):
        recorder = Recorder()
        client = TestClient(_make_app(_registry(recorder)), raise_server_exceptions=False)

        resp = client.get("/app/fail")

        assert resp.status_code == 500
        assert recorder.calls == [("pre", "fail"), ("post", "fail")]
        assert recorder.post_responses == [None]

    def test_error_propagates_to_caller(self):
        client = TestClient(_make_app(_registry(Recorder())))
        with pytest.raises(RuntimeError, match="handler exploded"):
            client.get("/app/fail")


class TestCoroutineHooks:
    def test_async_entry(self):
        seen: list[str] = []

        async def pre(context, handler_id):
            seen.append(handler_id)
            context.response = ShortCircuitResponse(body={"async": True}, status_code=403)
            return False

        registry = InterceptorRegistry()
        registry.add_interceptor(InterceptorEntry(pre=pre, name="async-veto"))
        resp = TestClient(_make_app(registry)).get("/app/foo")

        assert seen == ["foo"]
        assert resp.status_code == 403
        assert resp.json() == {"async": True}


class TestMountedRoutes:
    @staticmethod
    def _mounted_app(registry: InterceptorRegistry) -> Starlette:
        return Starlette(
            routes=[
                Mount(
                    "/api",
                    routes=[
                        Route("/foo", foo, name="foo"),
                        Mount("/v1", routes=[Route("/items/{item_id}", foo, name="item")], name="v1"),
                    ],
                    name="api",
                )
            ],
            middleware=[Middleware(HandlerInterceptorMiddleware, registry=registry)],
        )

    def test_handler_id_is_leaf_route_name(self):
        recorder = Recorder()
        resp = TestClient(self._mounted_app(_registry(recorder))).get("/api/foo")
        assert resp.text == "foo"
        assert recorder.calls == [("pre", "foo"), ("post", "foo")]

    def test_nested_mounts(self):
        recorder = Recorder()
        TestClient(self._mounted_app(_registry(recorder))).get("/api/v1/items/9")
        assert recorder.calls[0] == ("pre", "item")

    def test_unknown_path_under_mount_is_not_intercepted(self):
        recorder = Recorder()
        resp = TestClient(self._mounted_app(_registry(recorder))).get("/api/missing")
        assert resp.status_code == 404
        assert recorder.calls == []

    def test_resolve_handler_from_scope(self):
        app = self._mounted_app(InterceptorRegistry())
        scope = {"type": "http", "method": "GET", "path": "/api/foo", "root_path": "", "app": app}
        assert resolve_handler(scope) == "foo"
        assert resolve_handler({**scope, "path": "/elsewhere"}) is None


class TestRequestLogFields:
    def test_hooks_see_bound_request_fields(self):
        seen: list[dict] = []

        def pre(context, handler_id):
            seen.append(structlog.contextvars.get_contextvars())
            return True

        registry = InterceptorRegistry()
        registry.add_interceptor(InterceptorEntry(pre=pre, name="fields"))
        TestClient(_make_app(registry)).get("/app/foo", headers={"X-Request-Id": "req-1"})

        assert seen == [{"request_id": "req-1", "handler": "foo"}]

    @pytest.mark.asyncio
    async def test_fields_unbound_after_request(self):
        seen: list[dict] = []

        async def pre(context, handler_id):
            seen.append(structlog.contextvars.get_contextvars())
            return True

        registry = InterceptorRegistry()
        registry.add_interceptor(InterceptorEntry(pre=pre, name="fields"))
        app = _make_app(registry)
        sent: list[dict] = []

        async def receive():
            return {"type": "http.request", "body": b"", "more_body": False}

        async def send(message):
            sent.append(message)

        scope = {
            "type": "http",
            "method": "GET",
            "path": "/app/foo",
            "root_path": "",
            "query_string": b"",
            "headers": [(b"x-request-id", b"req-2")],
        }
        await app(scope, receive, send)

        assert seen == [{"request_id": "req-2", "handler": "foo"}]
        assert sent[0]["status"] == 200
        assert structlog.contextvars.get_contextvars() == {}
