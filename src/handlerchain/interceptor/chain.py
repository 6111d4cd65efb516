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
"""InterceptorChain — ordered pre/post hooks wrapped around a handler call.

For a chain of entries ``[A, B]`` a request that every pre-hook lets through
runs ``A.pre, B.pre, handler, B.post, A.post``. When a pre-hook vetoes the
request the handler is skipped and only the entries entered so far, the
vetoing one included, get their post-hook, in reverse order.
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import inspect
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import structlog

from handlerchain.interceptor.context import RequestContext

logger = structlog.get_logger("handlerchain.interceptor")

PreHook = Callable[[RequestContext, str], "bool | Awaitable[bool]"]
PostHook = Callable[[RequestContext, str, Any], "None | Awaitable[None]"]
HandlerInvoke = Callable[[], Any]


@runtime_checkable
class HandlerInterceptor(Protocol):
    """Object-style interceptor, adapted into an :class:`InterceptorEntry`."""

    def pre_handle(self, context: RequestContext, handler_id: str) -> bool: ...

    def post_handle(self, context: RequestContext, handler_id: str, response: Any) -> None: ...


def _noop_post(context: RequestContext, handler_id: str, response: Any) -> None:
    return None


@dataclass(frozen=True)
class InterceptorEntry:
    """A (pre-hook, post-hook) pair registered on a chain."""

    pre: PreHook
    post: PostHook = _noop_post
    name: str = ""

    @classmethod
    def of(cls, interceptor: HandlerInterceptor | InterceptorEntry) -> InterceptorEntry:
        """Wrap a :class:`HandlerInterceptor` object; entries pass through unchanged."""
        if isinstance(interceptor, InterceptorEntry):
            return interceptor
        if not isinstance(interceptor, HandlerInterceptor):
            raise TypeError(
                f"{type(interceptor).__name__} does not implement pre_handle/post_handle"
            )
        return cls(
            pre=interceptor.pre_handle,
            post=interceptor.post_handle,
            name=type(interceptor).__name__,
        )

    @property
    def display_name(self) -> str:
        return self.name or getattr(self.pre, "__qualname__", repr(self.pre))


class InterceptorChain:
    """Runs registered entries around a handler invocation.

    The chain keeps no per-request state, so one instance may serve many
    concurrent requests as long as nobody registers entries meanwhile.
    """

    def __init__(self, entries: list[InterceptorEntry] | None = None) -> None:
        self._entries: list[InterceptorEntry] = list(entries or [])

    def register(self, entry: InterceptorEntry | HandlerInterceptor) -> InterceptorChain:
        """Append *entry* after every entry registered so far."""
        self._entries.append(InterceptorEntry.of(entry))
        return self

    @property
    def entries(self) -> tuple[InterceptorEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[InterceptorEntry]:
        return iter(self._entries)

    # ------------------------------------------------------------------
    # Synchronous dispatch
    # ------------------------------------------------------------------

    def dispatch(
        self,
        context: RequestContext,
        handler_id: str,
        handler_invoke: HandlerInvoke,
    ) -> Any:
        """Run the pre phase, the handler, and the post phase for one request.

        Returns the handler's result, or ``context.response`` when a pre-hook
        vetoed the request. Hook errors propagate immediately; a handler
        error propagates once the entered entries' post-hooks have run.
        Coroutine hooks are rejected with ``TypeError``; use :meth:`adispatch`.
        """
        entered = 0
        for entry in self._entries:
            entered += 1
            if not _call_sync(entry.pre, context, handler_id):
                self._log_short_circuit(handler_id, entered - 1)
                self._post_phase(context, handler_id, context.response, entered)
                return context.response

        try:
            response = handler_invoke()
        except Exception:
            self._post_phase(context, handler_id, None, entered)
            raise

        self._post_phase(context, handler_id, response, entered)
        return response

    def _post_phase(
        self, context: RequestContext, handler_id: str, response: Any, entered: int
    ) -> None:
        for entry in reversed(self._entries[:entered]):
            _call_sync(entry.post, context, handler_id, response)

    # ------------------------------------------------------------------
    # Asynchronous dispatch
    # ------------------------------------------------------------------

    async def adispatch(
        self,
        context: RequestContext,
        handler_id: str,
        handler_invoke: HandlerInvoke,
    ) -> Any:
        """Async counterpart of :meth:`dispatch` for event-loop hosts.

        Coroutine hooks are awaited. Plain hooks run in the loop's default
        executor, so a hook that sleeps or does blocking I/O holds up only
        its own request.
        """
        entered = 0
        for entry in self._entries:
            entered += 1
            if not await _call_hook(entry.pre, context, handler_id):
                self._log_short_circuit(handler_id, entered - 1)
                await self._apost_phase(context, handler_id, context.response, entered)
                return context.response

        try:
            response = handler_invoke()
            if inspect.isawaitable(response):
                response = await response
        except Exception:
            await self._apost_phase(context, handler_id, None, entered)
            raise

        await self._apost_phase(context, handler_id, response, entered)
        return response

    async def _apost_phase(
        self, context: RequestContext, handler_id: str, response: Any, entered: int
    ) -> None:
        for entry in reversed(self._entries[:entered]):
            await _call_hook(entry.post, context, handler_id, response)

    def _log_short_circuit(self, handler_id: str, index: int) -> None:
        logger.debug(
            "interceptor_chain_short_circuit",
            handler=handler_id,
            interceptor=self._entries[index].display_name,
            index=index,
        )


async def _call_hook(hook: Callable[..., Any], *args: Any) -> Any:
    if inspect.iscoroutinefunction(hook) or inspect.iscoroutinefunction(
        getattr(hook, "__call__", None)
    ):
        return await hook(*args)
    ctx = contextvars.copy_context()
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(ctx.run, hook, *args))


def _call_sync(hook: Callable[..., Any], *args: Any) -> Any:
    result = hook(*args)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        name = getattr(hook, "__qualname__", repr(hook))
        raise TypeError(f"Hook {name} returned an awaitable; use adispatch for coroutine hooks")
    return result
