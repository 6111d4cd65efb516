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
"""Controller route collection and request dispatching."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from handlerchain.web.adapters.starlette.response import handle_return_value
from handlerchain.web.mappings import base_path, handler_mapping


async def _maybe_await(result: Any) -> Any:
    """Await the result if it's a coroutine, otherwise return as-is."""
    if inspect.isawaitable(result):
        return await result
    return result


class ControllerRegistrar:
    """Builds Starlette routes from controller instances.

    For each controller:
    1. Reads the @request_mapping base path from the class
    2. Finds @*_mapping handler methods
    3. Creates a Route per handler, named after the handler method so
       interceptors can identify it
    """

    def collect_routes(self, *controllers: Any) -> list[Route]:
        routes: list[Route] = []

        for controller in controllers:
            cls = type(controller)
            prefix = base_path(cls)

            for attr_name in dir(cls):
                mapping = handler_mapping(getattr(cls, attr_name, None))
                if mapping is None:
                    continue

                bound_method = getattr(controller, attr_name)
                endpoint = self._make_endpoint(bound_method, mapping.status_code)
                routes.append(
                    Route(
                        prefix + mapping.path,
                        endpoint,
                        methods=[mapping.method],
                        name=attr_name,
                    )
                )

        return routes

    @staticmethod
    def _make_endpoint(method: Callable[..., Any], status_code: int) -> Any:
        """Wrap *method*; it receives the request only if it declares a parameter."""
        wants_request = bool(inspect.signature(method).parameters)

        async def endpoint(request: Request) -> Response:
            result = method(request) if wants_request else method()
            return handle_return_value(await _maybe_await(result), status_code)

        return endpoint
