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
"""InterceptorRegistry — binds interceptors to URL patterns.

Framework-agnostic: works on plain path strings, so no Starlette import is
needed. The host adapter asks for :meth:`InterceptorRegistry.chain_for` once
per request.
"""

from __future__ import annotations

from fnmatch import fnmatch
from typing import Protocol, runtime_checkable

from handlerchain.interceptor.chain import (
    HandlerInterceptor,
    InterceptorChain,
    InterceptorEntry,
)


class InterceptorRegistration:
    """One interceptor plus the glob patterns it applies to.

    Attributes:
        url_patterns: Glob patterns that this interceptor applies to.
            If empty (default), the interceptor applies to *all* paths.
        exclude_patterns: Glob patterns to exclude even if ``url_patterns``
            matches. Checked *after* ``url_patterns``.
    """

    def __init__(self, entry: InterceptorEntry) -> None:
        self.entry = entry
        self.url_patterns: list[str] = []
        self.exclude_patterns: list[str] = []

    def add_path_patterns(self, *patterns: str) -> InterceptorRegistration:
        self.url_patterns.extend(patterns)
        return self

    def exclude_path_patterns(self, *patterns: str) -> InterceptorRegistration:
        self.exclude_patterns.extend(patterns)
        return self

    def matches(self, path: str) -> bool:
        """Return ``True`` if this interceptor should run for *path*."""
        if self.url_patterns and not any(fnmatch(path, p) for p in self.url_patterns):
            return False
        return not any(fnmatch(path, p) for p in self.exclude_patterns)


class InterceptorRegistry:
    """Ordered interceptor registrations; order of ``add_interceptor`` calls is kept."""

    def __init__(self) -> None:
        self._registrations: list[InterceptorRegistration] = []

    def add_interceptor(
        self, interceptor: HandlerInterceptor | InterceptorEntry
    ) -> InterceptorRegistration:
        registration = InterceptorRegistration(InterceptorEntry.of(interceptor))
        self._registrations.append(registration)
        return registration

    @property
    def registrations(self) -> tuple[InterceptorRegistration, ...]:
        return tuple(self._registrations)

    def chain_for(self, path: str) -> InterceptorChain:
        """Build a fresh chain of the interceptors that apply to *path*."""
        return InterceptorChain([r.entry for r in self._registrations if r.matches(path)])


@runtime_checkable
class WebMvcConfigurer(Protocol):
    """Application hook that contributes interceptor registrations."""

    def add_interceptors(self, registry: InterceptorRegistry) -> None: ...
