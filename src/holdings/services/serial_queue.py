"""Serialized asyncio job queue."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

Job = Callable[[], Awaitable[Any]]


class SerialTaskQueue:
    """
    FIFO queue drained by a single worker task.

    Jobs run strictly one at a time in the order submit() was called.
    submit() enqueues synchronously, so the order is fixed at the submit()
    call itself. A wrapper that defers submit() behind its own coroutine
    gives up that guarantee; return the future from submit() instead.
    """

    def __init__(self, name: str = "serial-queue", logger: Optional[logging.Logger] = None):
        self._name = name
        self._logger = logger or logging.getLogger(__name__)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    def submit(self, job: Callable[[], Awaitable[T]]) -> "asyncio.Future[T]":
        """Enqueue job and return a future resolved with its outcome."""
        loop = asyncio.get_running_loop()
        self._ensure_worker(loop)
        future: asyncio.Future = loop.create_future()
        self._queue.put_nowait((job, future))
        return future

    @property
    def pending(self) -> int:
        """Number of jobs waiting behind the one in flight."""
        return self._queue.qsize() if self._queue is not None else 0

    async def aclose(self) -> None:
        """Stop the worker; queued jobs are cancelled."""
        worker, queue = self._worker, self._queue
        self._worker = None
        self._queue = None
        self._loop = None
        if queue is not None:
            while not queue.empty():
                _, future = queue.get_nowait()
                future.cancel()
        if worker is not None and not worker.done():
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._loop is loop and self._worker is not None and not self._worker.done():
            return
        if self._loop is not loop or self._queue is None:
            # First use, or the previous loop has gone away: start afresh on this one
            self._loop = loop
            self._queue = asyncio.Queue()
        self._worker = loop.create_task(self._drain(self._queue), name=self._name)

    async def _drain(self, queue: asyncio.Queue) -> None:
        while True:
            job, future = await queue.get()
            try:
                if future.cancelled():
                    continue
                try:
                    result = await job()
                except asyncio.CancelledError:
                    future.cancel()
                    if self._queue is not queue:
                        # Closed or replaced: stop draining
                        raise
                    self._logger.warning("%s: job cancelled", self._name)
                except Exception as exc:
                    if not future.cancelled():
                        future.set_exception(exc)
                else:
                    if not future.cancelled():
                        future.set_result(result)
            finally:
                queue.task_done()
