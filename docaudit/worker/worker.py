import asyncio

from docaudit.config.settings import Settings
from docaudit.database.connection import get_connection
from docaudit.database.models import JobRecord
from docaudit.database.repositories.job_repository import JobRepository
from docaudit.logging.logger import Log
from docaudit.worker.job_runner import JobRunner


class Worker:
    """Poll loop: claim -> dispatch, sleeping while the queue is empty.

    Jobs run one at a time; ``stop()`` lets the current job finish and
    ends the loop before the next claim.
    """

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings
        self._stopping = asyncio.Event()

    def stop(self) -> None:
        Log.info("Worker stop requested")
        self._stopping.set()

    async def run(self, max_jobs: int | None = None) -> None:
        """Poll until stopped, interrupted or cancelled.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, polling for jobs")
        jobs_done = 0
        try:
            while not self._stopping.is_set():
                if max_jobs is not None and jobs_done >= max_jobs:
                    break
                job = await self._try_claim_job()
                if job is None:
                    Log.debug("No jobs available, sleeping")
                    await asyncio.sleep(self._settings.job_poll_interval_seconds)
                    continue
                await self._job_runner.run(job)
                jobs_done += 1
        except (KeyboardInterrupt, asyncio.CancelledError):
            Log.info("Worker interrupted")
        Log.info(f"Worker shutting down after {jobs_done} jobs")

    async def _try_claim_job(self) -> JobRecord | None:
        """Claim the next queued job; database errors are logged and retried later."""
        try:
            async with get_connection() as conn:
                return await self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
