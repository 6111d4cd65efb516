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
"""HandlerInterceptorMiddleware — pure ASGI middleware running interceptor chains."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import BaseRoute, Match, Route
from starlette.types import ASGIApp, Receive, Scope, Send

from handlerchain.interceptor.context import RequestContext
from handlerchain.logging.structlog_adapter import bind_request
from handlerchain.web.adapters.starlette.response import handle_return_value
from handlerchain.web.registry import InterceptorRegistry

REQUEST_ATTRIBUTE = "request"


def resolve_handler(scope: Scope) -> str | None:
    """Return the name of the endpoint route that fully matches *scope*, if any.

    Uses the application Starlette stores under ``scope["app"]`` and descends
    into mounts with their child scope, so the name is always the leaf
    route's. Requests that match no endpoint route (404s, wrong method,
    mounted plain ASGI apps) have no handler.
    """
    return _resolve(getattr(scope.get("app"), "routes", ()), scope)


def _resolve(routes: Iterable[BaseRoute], scope: Scope) -> str | None:
    for route in routes:
        match, child_scope = route.matches(scope)
        if match != Match.FULL:
            continue
        if isinstance(route, Route):
            return route.name
        return _resolve(getattr(route, "routes", ()), {**scope, **child_scope})
    return None


class HandlerInterceptorMiddleware:
    """Runs the interceptors registered for the request path around the app.

    Each request gets its own :class:`RequestContext` seeded with the
    Starlette request; the chain is built from the registry per request.
    Log lines emitted during dispatch carry ``request_id`` and ``handler``.
    A vetoing interceptor's response is rendered instead of calling the
    downstream app.
    """

    def __init__(self, app: ASGIApp, registry: InterceptorRegistry) -> None:
        self.app = app
        self._registry = registry

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        handler_id = resolve_handler(scope)
        if handler_id is None:
            await self.app(scope, receive, send)
            return

        chain = self._registry.chain_for(scope["path"])
        if not chain:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive, send)
        context = RequestContext(
            {REQUEST_ATTRIBUTE: request},
            request_id=request.headers.get("x-request-id"),
        )

        async def _call_app() -> Response:
            """Terminal: run downstream ASGI app and capture its response."""
            status_code = 200
            raw_headers: list[tuple[bytes, bytes]] = []
            body_parts: list[bytes] = []

            async def _intercept(message: Any) -> None:
                nonlocal status_code, raw_headers
                if message["type"] == "http.response.start":
                    status_code = message["status"]
                    raw_headers = list(message.get("headers", []))
                elif message["type"] == "http.response.body":
                    body = message.get("body", b"")
                    if body:
                        body_parts.append(body)

            await self.app(scope, receive, _intercept)

            response = Response(content=b"".join(body_parts), status_code=status_code)
            response.raw_headers[:] = raw_headers
            return response

        with bind_request(context.request_id, handler_id):
            result = await chain.adispatch(context, handler_id, _call_app)
        if result is None:
            # Vetoed without writing a response.
            response = Response(status_code=200)
        else:
            response = handle_return_value(result)
        await response(scope, receive, send)
