"""
Ingestion worker pool.

A fixed number of asyncio worker tasks consume IngestionJobs from an
unbounded queue. Submitting never blocks the request that accepted the
upload; each job's outcome is persisted on its document record by the
coordinator. Jobs for the same document id run one at a time.

Dependencies: asyncio (stdlib), lectern.core.document_processing.coordinator
System role: Background execution of document ingestion
"""

import asyncio
import logging
from collections import defaultdict

from lectern.boundary.db.models.document_model import DocumentStatus
from lectern.observability.log_utils import log_with_context

from .coordinator import IngestionCoordinator
from .models import IngestionJob

logger = logging.getLogger(__name__)


class IngestionWorkerPool:
    """Run ingestion jobs concurrently in the background."""

    def __init__(
        self,
        coordinator: IngestionCoordinator,
        concurrency: int = 4,
        shutdown_timeout: float = 30.0,
    ) -> None:
        """
        Initialize the pool. Workers start with start().

        Args:
            coordinator: Runs one job end to end
            concurrency: Number of worker tasks
            shutdown_timeout: Seconds stop() waits for queued jobs
        """
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self._coordinator = coordinator
        self._concurrency = concurrency
        self._shutdown_timeout = shutdown_timeout
        self._queue: asyncio.Queue[IngestionJob] | None = None
        self._workers: list[asyncio.Task] = []
        self._document_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: defaultdict[str, int] = defaultdict(int)
        self._in_flight = 0
        self._completed = 0
        self._failed = 0

    @property
    def is_running(self) -> bool:
        return bool(self._workers)

    @property
    def stats(self) -> dict[str, int]:
        """Queue depth, running jobs and terminal counts since start."""
        return {
            "queued": self._queue.qsize() if self._queue else 0,
            "in_flight": self._in_flight,
            "completed": self._completed,
            "failed": self._failed,
        }

    async def start(self) -> None:
        if self.is_running:
            return
        self._queue = asyncio.Queue()
        self._workers = [
            asyncio.create_task(self._worker(worker_id), name=f"ingestion-worker-{worker_id}")
            for worker_id in range(self._concurrency)
        ]
        logger.info(f"{__name__}:start - Started {self._concurrency} ingestion workers")

    def submit(self, job: IngestionJob) -> None:
        """
        Enqueue a job without waiting for it.

        Raises:
            RuntimeError: If the pool has not been started
        """
        if self._queue is None:
            raise RuntimeError("Ingestion worker pool is not running")
        self._queue.put_nowait(job)
        logger.info(
            f"{__name__}:submit - Job queued",
            extra={"document_id": str(job.document_id), "queued": self._queue.qsize()},
        )

    async def join(self) -> None:
        """Wait until every submitted job has finished."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Drain the queue (bounded by the shutdown timeout) and stop the workers."""
        if not self.is_running:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=self._shutdown_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"{__name__}:stop - Shutdown timeout reached, unfinished documents resume on next startup",
                extra=self.stats,
            )

        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        self._queue = None
        logger.info(f"{__name__}:stop - Ingestion workers stopped", extra=self.stats)

    async def _worker(self, worker_id: int) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._run_serialized(job)
            except Exception as e:
                logger.exception(
                    f"{__name__}:_worker - Unexpected error in worker {worker_id}",
                    extra={"document_id": str(job.document_id), "error": str(e)},
                )
                self._failed += 1
            finally:
                self._queue.task_done()

    async def _run_serialized(self, job: IngestionJob) -> None:
        key = str(job.document_id)
        lock = self._document_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] += 1
        try:
            async with lock:
                self._in_flight += 1
                try:
                    outcome = await self._coordinator.run(job)
                finally:
                    self._in_flight -= 1
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] == 0:
                del self._lock_users[key]
                self._document_locks.pop(key, None)

        if outcome.status == DocumentStatus.COMPLETED:
            self._completed += 1
        else:
            self._failed += 1

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:_run_serialized - Job finished",
            document_id=key,
            status=outcome.status.value,
            chunk_count=outcome.chunk_count,
            processing_time_ms=outcome.processing_time_ms,
            error=outcome.error,
        )
