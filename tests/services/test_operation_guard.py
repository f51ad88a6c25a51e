"""
Tests for the operation guard (in-flight lock and duplicate window).
"""

import asyncio

import pytest

from prepchef.services.operation_guard import (
    OperationGuard,
    derive_operation_key,
    fingerprint_payload,
)
from tests.fakes import FakeClock


class TestDeriveOperationKey:
    """Tests for derive_operation_key."""

    def test_id_only(self):
        assert derive_operation_key("delete_prep_list", "p1") == "delete_prep_list:p1"

    def test_id_and_fingerprint(self):
        key = derive_operation_key("save_prep_list", "p1", "Dinner Prep")
        assert key == "save_prep_list:p1:Dinner Prep"

    def test_id_is_trimmed(self):
        assert derive_operation_key("delete_event", "  e1 ") == "delete_event:e1"

    def test_without_id_uses_bounded_payload_digest(self):
        """Keys for id-less operations must not embed the whole payload."""
        payload = {"name": "x" * 5000}
        key = derive_operation_key("save_recipe", None, payload=payload)

        assert key.startswith("save_recipe:#")
        assert len(key) == len("save_recipe:#") + 16
        assert key == derive_operation_key("save_recipe", "", payload=dict(payload))

    def test_payload_digest_ignores_key_order(self):
        a = derive_operation_key("op", payload={"a": 1, "b": 2})
        b = derive_operation_key("op", payload={"b": 2, "a": 1})
        assert a == b

    def test_fingerprint_is_canonical(self):
        assert fingerprint_payload({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'


class TestExecuteWithLock:
    """Tests for OperationGuard.execute_with_lock."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_call(self):
        guard = OperationGuard()
        calls = 0
        release = asyncio.Event()

        async def work():
            nonlocal calls
            calls += 1
            await release.wait()
            return "done"

        first = asyncio.ensure_future(guard.execute_with_lock("k", work))
        second = asyncio.ensure_future(guard.execute_with_lock("k", work))
        await asyncio.sleep(0)
        assert guard.is_in_flight("k")

        release.set()
        assert await asyncio.gather(first, second) == ["done", "done"]
        assert calls == 1
        assert not guard.is_in_flight("k")

    @pytest.mark.asyncio
    async def test_different_keys_run_independently(self):
        guard = OperationGuard()
        calls = []

        async def work(name):
            calls.append(name)
            await asyncio.sleep(0)
            return name

        results = await asyncio.gather(
            guard.execute_with_lock("a", lambda: work("a")),
            guard.execute_with_lock("b", lambda: work("b")),
        )

        assert results == ["a", "b"]
        assert sorted(calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failure_reaches_every_waiter_and_releases_lock(self):
        guard = OperationGuard()

        async def boom():
            await asyncio.sleep(0)
            raise RuntimeError("network down")

        results = await asyncio.gather(
            guard.execute_with_lock("k", boom),
            guard.execute_with_lock("k", boom),
            return_exceptions=True,
        )

        assert all(isinstance(r, RuntimeError) for r in results)
        assert not guard.is_in_flight("k")

        async def ok():
            return 1

        # The key is usable again after the failure
        assert await guard.execute_with_lock("k", ok) == 1

    @pytest.mark.asyncio
    async def test_sequential_calls_each_run(self):
        guard = OperationGuard()
        calls = 0

        async def work():
            nonlocal calls
            calls += 1
            return calls

        assert await guard.execute_with_lock("k", work) == 1
        assert await guard.execute_with_lock("k", work) == 2


class TestDuplicateWindow:
    """Tests for recent-duplicate suppression."""

    def test_identical_write_inside_window_is_duplicate(self):
        clock = FakeClock()
        guard = OperationGuard(2000, clock=clock)
        guard.record("k", "fp")

        clock.advance(1.0)
        assert guard.is_recent_duplicate("k", "fp") is True

    def test_different_payload_is_not_duplicate(self):
        guard = OperationGuard(2000, clock=FakeClock())
        guard.record("k", "fp")

        assert guard.is_recent_duplicate("k", "other") is False

    def test_entry_expires_at_window_boundary(self):
        clock = FakeClock()
        guard = OperationGuard(2000, clock=clock)
        guard.record("k", "fp")

        clock.advance(2.0)
        assert guard.is_recent_duplicate("k", "fp") is False
        # Evicted on lookup
        assert "k" not in guard._recent

    def test_reset_forgets_recent_writes(self):
        guard = OperationGuard(2000, clock=FakeClock())
        guard.record("k", "fp")
        guard.reset()

        assert guard.is_recent_duplicate("k", "fp") is False

    def test_forget_entity_only_drops_that_id(self):
        guard = OperationGuard(2000, clock=FakeClock())
        guard.record("save_prep_list:p1:Dinner", "fp", entity_id="p1")
        guard.record("save_prep_list:p10:Lunch", "fp", entity_id="p10")

        guard.forget_entity("p1")

        assert guard.is_recent_duplicate("save_prep_list:p1:Dinner", "fp") is False
        assert guard.is_recent_duplicate("save_prep_list:p10:Lunch", "fp") is True

    def test_forget_entity_with_colon_in_id(self):
        guard = OperationGuard(2000, clock=FakeClock())
        guard.record("save_prep_list:p:1:Dinner", "fp", entity_id="p:1")

        guard.forget_entity("p:1")

        assert guard.is_recent_duplicate("save_prep_list:p:1:Dinner", "fp") is False

    def test_new_write_replaces_older_record_for_same_entity(self):
        guard = OperationGuard(2000, clock=FakeClock())
        guard.record("save_prep_list:p1:A", "fp-a", entity_id="p1")
        guard.record("save_prep_list:p1:B", "fp-b", entity_id="p1")

        # Writing "A" again must reach the backend: the row now holds "B"
        assert guard.is_recent_duplicate("save_prep_list:p1:A", "fp-a") is False
        assert guard.is_recent_duplicate("save_prep_list:p1:B", "fp-b") is True

    @pytest.mark.asyncio
    async def test_run_write_reverted_payload_is_written(self):
        guard = OperationGuard(2000, clock=FakeClock())
        written = []

        async def write(name):
            written.append(name)
            return name

        for name in ("A", "B", "A"):
            await guard.run_write(
                f"save_prep_list:p1:{name}",
                {"id": "p1", "name": name},
                lambda: write(name),
                "skipped",
                entity_id="p1",
            )

        assert written == ["A", "B", "A"]

    @pytest.mark.asyncio
    async def test_run_write_skips_duplicate_and_returns_fallback(self):
        clock = FakeClock()
        guard = OperationGuard(2000, clock=clock)
        calls = 0

        async def write():
            nonlocal calls
            calls += 1
            return "stored"

        assert await guard.run_write("k", {"id": "p1"}, write, "fallback") == "stored"
        clock.advance(0.5)
        assert await guard.run_write("k", {"id": "p1"}, write, "fallback") == "fallback"
        assert calls == 1

        clock.advance(2.0)
        assert await guard.run_write("k", {"id": "p1"}, write, "fallback") == "stored"
        assert calls == 2

    @pytest.mark.asyncio
    async def test_failed_write_is_not_recorded(self):
        guard = OperationGuard(2000, clock=FakeClock())

        async def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await guard.run_write("k", {"id": "p1"}, fail, None)

        async def ok():
            return "stored"

        assert await guard.run_write("k", {"id": "p1"}, ok, "fallback") == "stored"

    @pytest.mark.asyncio
    async def test_zero_window_disables_suppression(self):
        guard = OperationGuard(0, clock=FakeClock())
        calls = 0

        async def write():
            nonlocal calls
            calls += 1
            return calls

        await guard.run_write("k", {"a": 1}, write, None)
        await guard.run_write("k", {"a": 1}, write, None)
        assert calls == 2
