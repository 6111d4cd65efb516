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
"""Web application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Route

from handlerchain.web.adapters.starlette.controller import ControllerRegistrar
from handlerchain.web.adapters.starlette.interceptor_middleware import (
    HandlerInterceptorMiddleware,
)
from handlerchain.web.registry import InterceptorRegistry, WebMvcConfigurer


def create_app(
    controllers: Sequence[Any] = (),
    configurers: Sequence[WebMvcConfigurer] = (),
    debug: bool = False,
    extra_routes: list[Route] | None = None,
) -> Starlette:
    """Create a Starlette application with controller routes and interceptors.

    Every configurer's ``add_interceptors`` is called, in order, on one shared
    :class:`InterceptorRegistry`, which is then installed through
    :class:`HandlerInterceptorMiddleware`.
    """
    registry = InterceptorRegistry()
    for configurer in configurers:
        configurer.add_interceptors(registry)

    routes: list[Route] = ControllerRegistrar().collect_routes(*controllers)
    if extra_routes:
        routes.extend(extra_routes)

    middleware = [Middleware(HandlerInterceptorMiddleware, registry=registry)]

    app = Starlette(debug=debug, routes=routes, middleware=middleware)
    app.state.interceptor_registry = registry
    return app
