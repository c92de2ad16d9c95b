"""
Unit tests for fileio.cache module.

Tests cover:
- ExpirationTimer firing, idempotent cancel, state reporting
- CacheSlot.lookup honours from_cache
- CacheSlot.store populates and arms timers
- CacheSlot.extend only concatenates onto an existing value
- reset_timer True restarts / False preserves the countdown
- Uncached operations leave state untouched
"""

import asyncio

import pytest

from fileio.cache import CacheSlot, ExpirationTimer
from fileio.options import CacheOptions


class TestExpirationTimer:
    """Tests for ExpirationTimer."""

    @pytest.mark.asyncio
    async def test_timer_fires_callback(self):
        fired = []
        timer = ExpirationTimer(20, lambda: fired.append(True))

        assert timer.active
        await asyncio.sleep(0.08)

        assert fired == [True]
        assert not timer.active

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self):
        fired = []
        timer = ExpirationTimer(20, lambda: fired.append(True))

        timer.cancel()
        await asyncio.sleep(0.08)

        assert fired == []
        assert not timer.active

    @pytest.mark.asyncio
    async def test_cancel_is_idempotent(self):
        fired = []
        timer = ExpirationTimer(10, lambda: fired.append(True))
        await asyncio.sleep(0.05)

        # Already fired; both cancels are no-ops
        timer.cancel()
        timer.cancel()

        assert fired == [True]
        assert "fired" in repr(timer)

    @pytest.mark.asyncio
    async def test_when_is_loop_time_plus_delay(self):
        loop = asyncio.get_running_loop()
        before = loop.time()
        timer = ExpirationTimer(500, lambda: None)

        assert before + 0.5 <= timer.when <= loop.time() + 0.5
        timer.cancel()

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            ExpirationTimer(10, lambda: None)


class TestCacheSlotLookup:
    """Tests for CacheSlot.lookup."""

    def test_lookup_misses_when_empty(self):
        slot = CacheSlot()

        assert slot.lookup(CacheOptions(from_cache=True)) is None

    def test_lookup_requires_from_cache(self):
        slot = CacheSlot()
        slot.value = b"data"

        assert slot.lookup(CacheOptions(from_cache=False)) is None
        assert slot.lookup(CacheOptions(from_cache=True)) == b"data"

    def test_empty_value_counts_as_populated(self):
        slot = CacheSlot()
        slot.value = b""

        assert slot.populated
        assert slot.lookup(CacheOptions(from_cache=True)) == b""


class TestCacheSlotStore:
    """Tests for CacheSlot.store."""

    def test_store_without_cache_flag_is_noop(self):
        slot = CacheSlot()
        slot.value = "base"

        slot.store("new", CacheOptions(cache=False, expires=100))

        assert slot.value == "base"
        assert slot.timer is None

    def test_store_replaces_value_persistently(self):
        slot = CacheSlot()
        slot.value = b"old"

        slot.store(b"new", CacheOptions(cache=True))

        assert slot.value == b"new"
        assert slot.timer is None

    @pytest.mark.asyncio
    async def test_store_with_expires_arms_timer(self):
        slot = CacheSlot()

        slot.store(b"data", CacheOptions(cache=True, expires=30))

        assert slot.timer is not None and slot.timer.active
        await asyncio.sleep(0.1)
        assert slot.value is None
        assert slot.timer is None

    @pytest.mark.asyncio
    async def test_reset_timer_replaces_armed_timer(self):
        slot = CacheSlot()
        slot.store(b"a", CacheOptions(cache=True, expires=1000))
        first = slot.timer

        slot.store(b"b", CacheOptions(cache=True, expires=1000, reset_timer=True))

        assert not first.active
        assert slot.timer is not first and slot.timer.active
        slot.clear()

    @pytest.mark.asyncio
    async def test_reset_timer_false_keeps_original_timer(self):
        slot = CacheSlot()
        slot.store(b"a", CacheOptions(cache=True, expires=1000))
        first = slot.timer
        when = first.when

        slot.store(b"b", CacheOptions(cache=True, expires=5000, reset_timer=False))

        assert slot.timer is first
        assert slot.timer.when == when
        assert slot.value == b"b"
        slot.clear()

    @pytest.mark.asyncio
    async def test_reset_without_expires_leaves_persistent(self):
        slot = CacheSlot()
        slot.store(b"a", CacheOptions(cache=True, expires=1000))
        first = slot.timer

        slot.store(b"b", CacheOptions(cache=True, expires=0, reset_timer=True))

        assert not first.active
        assert slot.timer is None
        await asyncio.sleep(0)
        assert slot.value == b"b"


class TestCacheSlotExtend:
    """Tests for CacheSlot.extend."""

    def test_extend_empty_slot_stays_empty(self):
        slot = CacheSlot()

        slot.extend("x", CacheOptions(cache=True))

        assert slot.value is None

    def test_extend_concatenates_text(self):
        slot = CacheSlot()
        slot.value = "base"

        slot.extend("-more", CacheOptions(cache=True))

        assert slot.value == "base-more"

    def test_extend_without_cache_flag_is_noop(self):
        slot = CacheSlot()
        slot.value = "base"

        slot.extend("x", CacheOptions(cache=False))

        assert slot.value == "base"

    def test_extend_mixed_types_become_bytes(self):
        slot = CacheSlot(encoding="utf-8")
        slot.value = b"caf"

        slot.extend("é", CacheOptions(cache=True))

        assert slot.value == "café".encode("utf-8")

    def test_extend_text_cache_with_bytes(self):
        slot = CacheSlot()
        slot.value = "ab"

        slot.extend(b"cd", CacheOptions(cache=True))

        assert slot.value == b"abcd"

    @pytest.mark.asyncio
    async def test_extend_arms_timer(self):
        slot = CacheSlot()
        slot.value = b"a"

        slot.extend(b"b", CacheOptions(cache=True, expires=20))

        assert slot.timer is not None
        await asyncio.sleep(0.08)
        assert slot.value is None


class TestCacheSlotClear:
    """Tests for CacheSlot.clear and manual resets."""

    @pytest.mark.asyncio
    async def test_clear_cancels_timer(self):
        slot = CacheSlot()
        slot.store(b"a", CacheOptions(cache=True, expires=1000))
        timer = slot.timer

        slot.clear()

        assert slot.value is None
        assert slot.timer is None
        assert not timer.active

    @pytest.mark.asyncio
    async def test_manual_reset_leaves_timer_which_fires_harmlessly(self):
        slot = CacheSlot()
        slot.store(b"a", CacheOptions(cache=True, expires=20))

        slot.value = None
        assert slot.timer is not None

        await asyncio.sleep(0.08)
        assert slot.value is None
        assert slot.timer is None
