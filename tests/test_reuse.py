"""Tests for in-flight call sharing."""

import asyncio

import pytest

from refscope.reuse import InflightMap, freeze, reusable


class TestFreeze:
    """Tests for argument canonicalization."""

    def test_equal_structures_freeze_equal(self):
        assert freeze({'a': [1, 2], 'b': {'c': 3}}) == freeze({'b': {'c': 3}, 'a': [1, 2]})

    def test_list_and_tuple_are_the_same_sequence(self):
        assert freeze([1, 2]) == freeze((1, 2))

    def test_bool_and_int_stay_distinct(self):
        assert freeze(True) != freeze(1)

    def test_result_is_hashable(self):
        hash(freeze({'a': [{'b': {1, 2}}]}))

    def test_unhashable_object_falls_back_to_repr(self):
        class Thing:
            __hash__ = None

            def __repr__(self):
                return 'Thing()'

        assert freeze(Thing()) == ('repr', 'Thing()')


class TestReusable:
    """Tests for the reusable decorator."""

    def test_concurrent_calls_share_one_invocation(self):
        calls = []

        @reusable
        async def lookup(force_update=False):
            calls.append(force_update)
            await asyncio.sleep(0.01)
            return object()

        async def run():
            return await asyncio.gather(lookup(), lookup(), lookup(False))

        a, b, c = asyncio.run(run())
        assert calls == [False]
        assert a is b is c

    def test_different_arguments_do_not_share(self):
        calls = []

        @reusable
        async def lookup(force_update=False):
            calls.append(force_update)
            await asyncio.sleep(0)
            return force_update

        async def run():
            return await asyncio.gather(lookup(False), lookup(True))

        assert asyncio.run(run()) == [False, True]
        assert sorted(calls) == [False, True]

    def test_structurally_equal_arguments_share(self):
        calls = []

        @reusable
        async def lookup(options):
            calls.append(options)
            await asyncio.sleep(0)
            return len(calls)

        async def run():
            return await asyncio.gather(lookup({'x': [1]}), lookup(options={'x': [1]}))

        assert asyncio.run(run()) == [1, 1]
        assert len(calls) == 1

    def test_next_call_after_settlement_starts_fresh(self):
        calls = []

        @reusable
        async def lookup():
            calls.append(1)
            await asyncio.sleep(0)
            return len(calls)

        async def run():
            first = await lookup()
            second = await lookup()
            return first, second

        assert asyncio.run(run()) == (1, 2)

    def test_failure_reaches_every_sharer_and_does_not_poison(self):
        attempts = []

        @reusable
        async def lookup():
            attempts.append(1)
            await asyncio.sleep(0)
            if len(attempts) == 1:
                raise ConnectionError("boom")
            return "ok"

        async def run():
            results = await asyncio.gather(lookup(), lookup(), return_exceptions=True)
            retry = await lookup()
            return results, retry

        results, retry = asyncio.run(run())
        assert all(isinstance(r, ConnectionError) for r in results)
        assert results[0] is results[1]
        assert retry == "ok"
        assert len(attempts) == 2

    def test_methods_keep_separate_maps_per_instance(self):
        class Source:
            def __init__(self):
                self.calls = 0

            @reusable
            async def get(self, force_update=False):
                self.calls += 1
                await asyncio.sleep(0)
                return self.calls

        one, two = Source(), Source()

        async def run():
            return await asyncio.gather(one.get(), one.get(), two.get())

        assert asyncio.run(run()) == [1, 1, 1]
        assert one.calls == 1
        assert two.calls == 1

    def test_rejects_plain_functions(self):
        with pytest.raises(TypeError):
            reusable(lambda: None)


class TestInflightMap:
    """Tests for InflightMap bookkeeping."""

    def test_entry_removed_after_settlement(self):
        inflight = InflightMap()

        async def work():
            await asyncio.sleep(0)
            return 42

        async def run():
            task = asyncio.ensure_future(inflight.run('k', work))
            await asyncio.sleep(0)
            during = inflight.pending('k')
            result = await task
            await asyncio.sleep(0)
            return during, result

        during, result = asyncio.run(run())
        assert during is True
        assert result == 42
        assert len(inflight) == 0
        assert not inflight.pending('k')
