#!/usr/bin/env python3
"""Tests for the ScheduledTask base class."""

import asyncio

import pytest

from batch_submitter.utils.scheduled_task import ScheduledTask


class ScriptedTask(ScheduledTask):
    """Task that returns scripted results and stops when they run out."""

    def __init__(self, period_seconds, results):
        super().__init__(period_seconds)
        self.results = list(results)
        self.calls = 0

    async def run_task(self) -> bool:
        self.calls += 1
        if not self.results:
            self.stop()
            return False
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class TestScheduledTask:
    """Test suite for ScheduledTask."""

    def test_negative_period_rejected(self):
        with pytest.raises(ValueError, match="period_seconds must be >= 0"):
            ScriptedTask(-1, [])

    @pytest.mark.asyncio
    async def test_rerun_immediately(self):
        """Runs returning True do not wait for the (long) period."""
        task = ScriptedTask(60, [True, True])

        await asyncio.wait_for(task.run(), timeout=5)

        assert task.calls == 3
        assert task.is_running is False

    @pytest.mark.asyncio
    async def test_waits_between_runs(self):
        task = ScriptedTask(0.01, [False, False])

        await asyncio.wait_for(task.run(), timeout=5)

        assert task.calls == 3

    @pytest.mark.asyncio
    async def test_error_stops_and_propagates(self):
        task = ScriptedTask(0, [True, RuntimeError("boom"), True])

        with pytest.raises(RuntimeError, match="boom"):
            await task.run()

        assert task.calls == 2
        assert task.is_running is False

    @pytest.mark.asyncio
    async def test_start_runs_in_background(self):
        task = ScriptedTask(0, [False])

        background = task.start()
        assert task.start() is background  # second start is a no-op

        await asyncio.wait_for(background, timeout=5)
        assert task.calls == 2

    @pytest.mark.asyncio
    async def test_stop_ends_loop(self):
        task = ScriptedTask(0.01, [False] * 1000)

        background = task.start()
        await asyncio.sleep(0.05)
        task.stop()
        await asyncio.wait_for(background, timeout=5)

        assert background.done()
        assert task.calls < 1000
