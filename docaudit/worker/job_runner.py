from docaudit.database.models import JobRecord, JobType
from docaudit.database.repositories.job_repository import JobRepository
from docaudit.logging.logger import Log
from docaudit.processor.batch import BatchProcessor
from docaudit.processor.processor import DocumentProcessor


class JobRunner:
    """Run one job, catch exceptions, and record the outcome.

    Failed jobs are not retried; re-processing is triggered by the caller.
    """

    def __init__(
        self,
        processor: DocumentProcessor,
        batch_processor: BatchProcessor,
        job_repo: JobRepository,
    ) -> None:
        self._processor = processor
        self._batch_processor = batch_processor
        self._job_repo = job_repo

    async def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info(
            f"Running {job.job_type} job {job.id}",
            job_id=job.id,
            document_ids=job.document_ids,
        )
        try:
            await self._dispatch(job)
        except Exception as exc:
            await self._handle_failure(job, exc)
            return
        await self._job_repo.mark_completed(job.id)
        Log.info(f"Job {job.id} completed successfully", job_id=job.id)

    async def _dispatch(self, job: JobRecord) -> None:
        if not job.document_ids:
            raise ValueError(f"Job {job.id} has no documents")
        if job.job_type == JobType.SINGLE and len(job.document_ids) == 1:
            await self._processor.process(job.document_ids[0], job.id)
        else:
            await self._batch_processor.process(job.document_ids, job.id)

    async def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        message = str(exc) or type(exc).__name__
        Log.exception(f"Job {job.id} failed: {message}", job_id=job.id)
        await self._job_repo.mark_failed(job.id, message)
