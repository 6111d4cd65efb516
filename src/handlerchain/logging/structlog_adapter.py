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
"""Structlog configuration with request-scoped fields for interceptor logs.

Every log line emitted while a request runs through the interceptor chain
carries that request's ``request_id`` and ``handler``, whether it comes from
the chain itself, an interceptor hook, or the handler.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator

import structlog

from handlerchain.core.config import Config

REQUEST_FIELDS = ("request_id", "handler")

_FORMATS = ("console", "json")


@contextlib.contextmanager
def bind_request(request_id: str | None, handler: str) -> Iterator[None]:
    """Bind the request fields to every log line emitted inside the block.

    Backed by contextvars, so hooks run in an executor with a copied context
    see the same fields.
    """
    with structlog.contextvars.bound_contextvars(request_id=request_id, handler=handler):
        yield


def _request_fields_first(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Put the request fields right after the event so requests are easy to follow."""
    event = event_dict.pop("event", None)
    ordered = {"event": event} if event is not None else {}
    for key in REQUEST_FIELDS:
        if key in event_dict:
            ordered[key] = event_dict.pop(key)
    ordered.update(event_dict)
    return ordered


class StructlogAdapter:
    """Configures structlog and stdlib levels from ``handlerchain.logging``.

    ``format`` is ``console`` or ``json``; ``level.root`` sets the root
    level and any other ``level.<logger>`` key sets that logger's level.
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> StructlogAdapter:
        level_section = dict(config.get_section("handlerchain.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get("handlerchain.logging.format", "console")).lower()
        if self._format not in _FORMATS:
            raise ValueError(
                f"Unknown log format '{self._format}' (expected one of: {', '.join(_FORMATS)})"
            )

        structlog.configure(
            processors=self.processors(),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
        for name, level in self._module_levels.items():
            self.set_level(name, level)
        return self

    def processors(self) -> list[structlog.types.Processor]:
        """Processor pipeline for the configured format."""
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _request_fields_first,
        ]
        if self._format == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())
        return processors

    @staticmethod
    def set_level(name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))
