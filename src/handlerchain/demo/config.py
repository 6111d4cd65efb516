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
"""Demo interceptor wiring."""

from __future__ import annotations

from handlerchain.interceptor.loading_time import (
    LoadingTimeInterceptor,
    LoadingTimeProperties,
)
from handlerchain.web.registry import InterceptorRegistry


class MvcConfig:
    """Registers the loading-time interceptor on the configured paths.

    With the default properties ``/app/foo`` and ``/app/bar`` are
    intercepted and ``/app/baz`` is not.
    """

    def __init__(
        self,
        properties: LoadingTimeProperties | None = None,
        interceptor: LoadingTimeInterceptor | None = None,
    ) -> None:
        self._properties = properties or LoadingTimeProperties()
        self._interceptor = interceptor or LoadingTimeInterceptor(self._properties)

    @property
    def interceptor(self) -> LoadingTimeInterceptor:
        return self._interceptor

    def add_interceptors(self, registry: InterceptorRegistry) -> None:
        if not self._properties.enabled:
            return
        (
            registry.add_interceptor(self._interceptor)
            .add_path_patterns(*self._properties.path_patterns)
            .exclude_path_patterns(*self._properties.exclude_path_patterns)
        )
