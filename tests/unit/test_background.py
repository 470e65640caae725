"""Unit tests for the background task registry."""

import asyncio

import pytest

from src.marketplace.core.background import BackgroundTasks

pytestmark = pytest.mark.unit


async def test_tracks_task_until_done():
    registry = BackgroundTasks()
    gate = asyncio.Event()

    async def work() -> None:
        await gate.wait()

    registry.spawn(work(), name="work")
    assert registry.pending_count == 1

    gate.set()
    assert await registry.wait_for_drain(timeout=1) is True
    assert registry.pending_count == 0


async def test_failure_is_contained():
    """A failing task is dropped from the registry without raising."""
    registry = BackgroundTasks()

    async def boom() -> None:
        raise RuntimeError("index unavailable")

    task = registry.spawn(boom(), name="boom")
    assert await registry.wait_for_drain(timeout=1) is True
    assert task.done()
    assert registry.pending_count == 0


async def test_drain_timeout():
    registry = BackgroundTasks()
    task = registry.spawn(asyncio.sleep(10), name="slow")

    assert await registry.wait_for_drain(timeout=0.01) is False

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)


async def test_empty_registry_drains_immediately():
    assert await BackgroundTasks().wait_for_drain(timeout=0) is True
