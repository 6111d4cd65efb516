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
"""Tests for InterceptorChain.adispatch — coroutine hooks and off-loop sync hooks."""

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from handlerchain.interceptor.chain import InterceptorChain, InterceptorEntry
from handlerchain.interceptor.context import RequestContext


def _async_entry(name: str, calls: list[str], proceed: bool = True) -> InterceptorEntry:
    async def pre(context, handler_id):
        calls.append(f"{name}.pre")
        return proceed

    async def post(context, handler_id, response):
        calls.append(f"{name}.post")

    return InterceptorEntry(pre=pre, post=post, name=name)


def _sync_entry(name: str, calls: list[str], proceed: bool = True) -> InterceptorEntry:
    def pre(context, handler_id):
        calls.append(f"{name}.pre")
        return proceed

    def post(context, handler_id, response):
        calls.append(f"{name}.post")

    return InterceptorEntry(pre=pre, post=post, name=name)


class TestAsyncDispatchOrdering:
    @pytest.mark.asyncio
    async def test_mixed_hooks_keep_order(self):
        calls: list[str] = []

        async def handler():
            calls.append("handler")
            return "done"

        chain = InterceptorChain([_async_entry("A", calls), _sync_entry("B", calls)])
        result = await chain.adispatch(RequestContext(), "foo", handler)

        assert result == "done"
        assert calls == ["A.pre", "B.pre", "handler", "B.post", "A.post"]

    @pytest.mark.asyncio
    async def test_plain_handler_result_is_returned(self):
        chain = InterceptorChain([_async_entry("A", [])])
        assert await chain.adispatch(RequestContext(), "foo", lambda: 7) == 7

    @pytest.mark.asyncio
    async def test_veto_skips_handler_and_runs_entered_posts(self):
        calls: list[str] = []

        async def handler():
            calls.append("handler")

        chain = InterceptorChain(
            [_sync_entry("A", calls), _async_entry("B", calls, proceed=False), _async_entry("C", calls)]
        )
        await chain.adispatch(RequestContext(), "foo", handler)

        assert calls == ["A.pre", "B.pre", "B.post", "A.post"]

    @pytest.mark.asyncio
    async def test_veto_returns_context_response(self):
        async def pre(context, handler_id):
            context.response = "blocked"
            return False

        chain = InterceptorChain([InterceptorEntry(pre=pre)])
        assert await chain.adispatch(RequestContext(), "foo", lambda: "unreachable") == "blocked"


class TestAsyncDispatchFailures:
    @pytest.mark.asyncio
    async def test_handler_error_runs_posts_then_propagates(self):
        calls: list[str] = []

        async def handler():
            raise RuntimeError("handler failed")

        chain = InterceptorChain([_async_entry("A", calls), _sync_entry("B", calls)])
        with pytest.raises(RuntimeError, match="handler failed"):
            await chain.adispatch(RequestContext(), "foo", handler)

        assert calls == ["A.pre", "B.pre", "B.post", "A.post"]

    @pytest.mark.asyncio
    async def test_sync_pre_hook_error_propagates(self):
        def broken(context, handler_id):
            raise LookupError("broken")

        chain = InterceptorChain([InterceptorEntry(pre=broken)])
        with pytest.raises(LookupError):
            await chain.adispatch(RequestContext(), "foo", lambda: None)


class TestAsyncDispatchConcurrency:
    @pytest.mark.asyncio
    async def test_sync_hooks_run_off_the_event_loop_thread(self):
        threads: list[int] = []

        def pre(context, handler_id):
            threads.append(threading.get_ident())
            return True

        chain = InterceptorChain([InterceptorEntry(pre=pre)])
        await chain.adispatch(RequestContext(), "foo", lambda: None)

        assert threads and threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_blocking_pre_hooks_do_not_serialize_requests(self):
        def slow_pre(context, handler_id):
            time.sleep(0.2)
            return True

        chain = InterceptorChain([InterceptorEntry(pre=slow_pre)])

        started = time.perf_counter()
        await asyncio.gather(
            chain.adispatch(RequestContext(), "foo", lambda: None),
            chain.adispatch(RequestContext(), "bar", lambda: None),
        )
        elapsed = time.perf_counter() - started

        assert elapsed < 0.38

    @pytest.mark.asyncio
    async def test_each_request_keeps_its_own_context(self):
        def pre(context, handler_id):
            context["handler"] = handler_id
            return True

        seen: list[tuple[str, str]] = []
        entry = InterceptorEntry(pre=pre, post=lambda c, h, r: seen.append((h, c["handler"])))
        chain = InterceptorChain([entry])

        await asyncio.gather(
            *(chain.adispatch(RequestContext(), name, lambda: None) for name in ("foo", "bar", "baz"))
        )

        assert sorted(seen) == [("bar", "bar"), ("baz", "baz"), ("foo", "foo")]
