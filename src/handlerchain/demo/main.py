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
"""Demo application factory.

``uvicorn --factory handlerchain.demo.main:build_app`` serves it with the
packaged defaults.
"""

from __future__ import annotations

from starlette.applications import Starlette

from handlerchain.core.config import Config
from handlerchain.demo.config import MvcConfig
from handlerchain.demo.controller import AppController
from handlerchain.interceptor.loading_time import LoadingTimeProperties
from handlerchain.logging.structlog_adapter import StructlogAdapter
from handlerchain.web.adapters.starlette.app import create_app


def build_app(config: Config | None = None, configure_logging: bool = True) -> Starlette:
    """Build the demo app from *config* (packaged defaults when omitted)."""
    config = config or Config.defaults()
    if configure_logging:
        StructlogAdapter().configure(config)

    properties = config.bind(LoadingTimeProperties)
    return create_app(
        controllers=[AppController()],
        configurers=[MvcConfig(properties)],
    )
