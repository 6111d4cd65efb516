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
"""Per-request attribute storage handed from the pre phase to the post phase.

A RequestContext is created by the host when a request arrives, passed by
reference through every hook of the chain, and discarded when the response
has been written. Nothing in it is shared between requests.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator, MutableMapping
from typing import Any

from handlerchain.kernel.exceptions import MissingRequestAttributeException


class RequestContext(MutableMapping[str, Any]):
    """Mutable mapping of request attributes plus a response slot.

    A pre-hook that vetoes the request writes its response into
    :attr:`response`; the chain hands that value back to the host.
    """

    def __init__(
        self,
        attributes: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> None:
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._request_id = request_id or uuid.uuid4().hex
        self.response: Any = None

    @property
    def request_id(self) -> str:
        return self._request_id

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def __delitem__(self, key: str) -> None:
        del self._attributes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def require(self, key: str, handler_id: str | None = None) -> Any:
        """Return the attribute stored under *key*.

        Raises:
            MissingRequestAttributeException: if no phase has set *key*.
        """
        try:
            return self._attributes[key]
        except KeyError:
            raise MissingRequestAttributeException(key, handler_id) from None

    def __repr__(self) -> str:
        return f"RequestContext(request_id={self._request_id!r}, attributes={self._attributes!r})"
