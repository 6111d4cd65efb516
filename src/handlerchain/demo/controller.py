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
"""Demo controller with three passthrough handlers under ``/app``."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from handlerchain.web.mappings import get_mapping, request_mapping


@request_mapping("/app")
class AppController:
    """Each handler just reports its own name and the current time."""

    @staticmethod
    def _message(name: str) -> dict[str, Any]:
        return {
            "message": f"handler {name} of the controller",
            "time": datetime.now().astimezone().isoformat(),
        }

    @get_mapping("/foo")
    def foo(self) -> dict[str, Any]:
        return self._message("foo")

    @get_mapping("/bar")
    def bar(self) -> dict[str, Any]:
        return self._message("bar")

    @get_mapping("/baz")
    def baz(self) -> dict[str, Any]:
        return self._message("baz")
