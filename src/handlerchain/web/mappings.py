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
"""Route mapping decorators for controller classes.

``@request_mapping`` sets a controller's base path and ``@get_mapping``
marks a method as a GET handler. The method's name becomes the handler id
interceptors see.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T", bound=type)
F = TypeVar("F", bound=Callable[..., Any])

_BASE_PATH_ATTR = "__handlerchain_request_mapping__"
_MAPPING_ATTR = "__handlerchain_mapping__"


@dataclass(frozen=True)
class HandlerMapping:
    """Where a controller method is served."""

    path: str
    method: str = "GET"
    status_code: int = 200


def request_mapping(path: str) -> Callable[[T], T]:
    """Class-level decorator that sets the base path for all handler methods."""

    def decorator(cls: T) -> T:
        setattr(cls, _BASE_PATH_ATTR, path.rstrip("/"))
        return cls

    return decorator


def get_mapping(path: str = "", *, status_code: int = 200) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        setattr(func, _MAPPING_ATTR, HandlerMapping(path, "GET", status_code))
        return func

    return decorator


def base_path(controller_cls: type) -> str:
    return getattr(controller_cls, _BASE_PATH_ATTR, "")


def handler_mapping(obj: Any) -> HandlerMapping | None:
    """Return the mapping of a decorated method, or ``None``."""
    mapping = getattr(obj, _MAPPING_ATTR, None)
    return mapping if isinstance(mapping, HandlerMapping) else None
