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
"""handlerchain web — interceptor registration and controller mappings.

Framework-agnostic types are exported directly; the default adapter
(Starlette) exports are re-exported for convenience.
"""

from handlerchain.web.adapters.starlette import (
    ControllerRegistrar,
    HandlerInterceptorMiddleware,
    create_app,
    handle_return_value,
)
from handlerchain.web.mappings import HandlerMapping, get_mapping, request_mapping
from handlerchain.web.registry import (
    InterceptorRegistration,
    InterceptorRegistry,
    WebMvcConfigurer,
)

__all__ = [
    # Framework-agnostic
    "HandlerMapping",
    "InterceptorRegistration",
    "InterceptorRegistry",
    "WebMvcConfigurer",
    "get_mapping",
    "request_mapping",
    # Default adapter (Starlette)
    "ControllerRegistrar",
    "HandlerInterceptorMiddleware",
    "create_app",
    "handle_return_value",
]
