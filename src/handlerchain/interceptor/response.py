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
"""Framework-agnostic response written by a pre-hook that vetoes a request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ShortCircuitResponse:
    """Body, status, and content type of a response sent without the handler.

    The host adapter renders it with its own response type; the interceptor
    never touches the wire format.
    """

    body: dict[str, Any]
    status_code: int = 200
    media_type: str = "application/json"
    headers: dict[str, str] = field(default_factory=dict)
