"""Detached post-commit tasks (notifications, search re-index)."""

import asyncio
from collections.abc import Coroutine
from typing import Any

from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)


class BackgroundTasks:
    """Keeps strong references to fire-and-forget tasks until they finish."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
        """Schedule a coroutine without awaiting it. Failures are only logged."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background task failed", task=task.get_name(), error=str(exc))

    async def wait_for_drain(self, timeout: float) -> bool:
        """
        Wait for scheduled tasks to finish.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            True if all tasks completed within timeout, False otherwise
        """
        if not self._tasks:
            return True
        done, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if pending:
            logger.warning(
                f"Shutdown timeout after {timeout}s - {len(pending)} background tasks still running"
            )
            return False
        return True


# Global registry instance
background_tasks = BackgroundTasks()


def fire_and_forget(coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task[Any]:
    return background_tasks.spawn(coro, name=name)
