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
"""LoadingTimeInterceptor — measures how long a handler takes to load.

The pre phase records a start timestamp, simulates a slow dependency with a
bounded random sleep, and either lets the request through or answers it
with a JSON error. The post phase logs how long the whole round took.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from handlerchain.core.config import config_properties
from handlerchain.interceptor.context import RequestContext
from handlerchain.interceptor.response import ShortCircuitResponse

START_ATTRIBUTE = "start"

_NAME = "LoadingTimeInterceptor"

_logger = structlog.get_logger("handlerchain.interceptor.loading_time")


@config_properties(prefix="handlerchain.interceptors.loading-time")
class LoadingTimeProperties(BaseModel):
    """Settings for :class:`LoadingTimeInterceptor` and its URL registration."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    enabled: bool = True
    max_delay_ms: int = Field(default=500, alias="max-delay-ms", ge=0)
    block: bool = True
    status_code: int = Field(default=401, alias="status-code", ge=100, le=599)
    path_patterns: list[str] = Field(
        default_factory=lambda: ["/app/bar", "/app/foo"], alias="path-patterns"
    )
    exclude_path_patterns: list[str] = Field(default_factory=list, alias="exclude-path-patterns")


def _date_string() -> str:
    return datetime.now().astimezone().strftime("%a %b %d %H:%M:%S %Z %Y")


class LoadingTimeInterceptor:
    """Logs entry, simulated delay, and elapsed time around a handler.

    With ``block`` enabled every request it sees is answered with
    ``{"error": "Could not load <handler>", "date": ...}`` and the configured
    status (401 by default), and the handler never runs.
    """

    def __init__(
        self,
        properties: LoadingTimeProperties | None = None,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter,
        date_factory: Callable[[], str] = _date_string,
        logger: Any = None,
    ) -> None:
        self._properties = properties or LoadingTimeProperties()
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._clock = clock
        self._date_factory = date_factory
        self._logger = logger if logger is not None else _logger

    @property
    def properties(self) -> LoadingTimeProperties:
        return self._properties

    def pre_handle(self, context: RequestContext, handler_id: str) -> bool:
        context[START_ATTRIBUTE] = self._clock()

        max_delay = self._properties.max_delay_ms
        delay_ms = self._rng.randrange(max_delay) if max_delay > 0 else 0
        self._sleep(delay_ms / 1000)

        self._logger.info(
            f"{_NAME}: preHandle() entered method {handler_id}...",
            handler=handler_id,
            delay_ms=delay_ms,
            request_id=context.request_id,
        )

        if not self._properties.block:
            return True

        context.response = ShortCircuitResponse(
            body={
                "error": f"Could not load {handler_id}",
                "date": self._date_factory(),
            },
            status_code=self._properties.status_code,
        )
        return False

    def post_handle(self, context: RequestContext, handler_id: str, response: Any) -> float:
        """Log exit and elapsed time; returns the elapsed milliseconds."""
        start = context.require(START_ATTRIBUTE, handler_id)
        elapsed_ms = (self._clock() - start) * 1000

        self._logger.info(
            f"{_NAME}: postHandle() exiting method {handler_id}...",
            handler=handler_id,
            request_id=context.request_id,
        )
        self._logger.info(
            f"{_NAME}: Time taken for method {handler_id} is {round(elapsed_ms)} ms",
            handler=handler_id,
            duration_ms=round(elapsed_ms, 2),
            request_id=context.request_id,
        )
        return elapsed_ms
