# tests/core/test_context.py
import asyncio

from causelog.core import context as context_module
from causelog.core.context import ExecutionContext, current_action, use_context


class TestExecutionContext:
    def test_current_is_none_without_push(self):
        assert ExecutionContext().current() is None

    def test_current_returns_last_pushed(self):
        ctx = ExecutionContext()
        a, b = object(), object()
        ctx.push(a)
        assert ctx.current() is a
        ctx.push(b)
        assert ctx.current() is b
        assert ctx.current() is b

    def test_pop_cancels_the_last_push(self):
        ctx = ExecutionContext()
        a, b = object(), object()
        ctx.push(a)
        ctx.push(b)
        ctx.pop()
        assert ctx.current() is a
        ctx.pop()
        assert ctx.current() is None
        assert len(ctx) == 0

    def test_instances_are_independent(self):
        first, second = ExecutionContext(), ExecutionContext()
        first.push(object())
        assert second.current() is None

    def test_asyncio_tasks_see_their_own_stack(self):
        ctx = ExecutionContext()
        outer = object()
        ctx.push(outer)

        async def worker(marker):
            ctx.push(marker)
            await asyncio.sleep(0)
            seen = ctx.current()
            ctx.pop()
            return seen

        async def main():
            a, b = object(), object()
            results = await asyncio.gather(worker(a), worker(b))
            return results == [a, b]

        assert asyncio.run(main())
        assert ctx.current() is outer


class TestGlobalContext:
    def test_has_a_global_instance(self):
        assert isinstance(context_module.get_context(), ExecutionContext)

    def test_use_context_installs_and_restores(self):
        previous = context_module.get_context()
        scratch = ExecutionContext()
        marker = object()
        with use_context(scratch) as installed:
            assert installed is scratch
            scratch.push(marker)
            assert current_action() is marker
        assert context_module.get_context() is previous
        assert current_action() is None

    def test_use_context_restores_after_exception(self):
        previous = context_module.get_context()
        try:
            with use_context():
                raise KeyError("boom")
        except KeyError:
            pass
        assert context_module.get_context() is previous
