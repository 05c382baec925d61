import asyncio
from dataclasses import dataclass

from docaudit.database.models import JobRecord, JobType
from docaudit.database.repositories.document_repository import DocumentRepository
from docaudit.database.repositories.job_repository import JobRepository
from docaudit.extraction.file_types import is_supported
from docaudit.logging.logger import Log
from docaudit.processor.file_loader import FileLoader


@dataclass(frozen=True)
class IncomingFile:
    """A file already saved by the upload layer."""

    file_name: str
    original_name: str
    file_type: str
    file_size: int
    file_path: str


class UploadIntake:
    """Registers uploaded files and queues them for processing."""

    def __init__(
        self,
        doc_repo: DocumentRepository,
        job_repo: JobRepository,
        file_loader: FileLoader,
    ) -> None:
        self._doc_repo = doc_repo
        self._job_repo = job_repo
        self._file_loader = file_loader

    async def submit(self, user_id: str, files: list[IncomingFile], priority: int = 0) -> JobRecord:
        """Create one document per file and enqueue a single job for the batch.

        Unsupported files are accepted here and fail in the pipeline, so the
        user sees them as failed documents.
        """
        if not files:
            raise ValueError("At least one file is required")

        document_ids = []
        for incoming in files:
            if not is_supported(incoming.file_type, incoming.original_name):
                Log.warning(
                    f"'{incoming.original_name}' has unsupported type '{incoming.file_type}'"
                )
            document = await self._doc_repo.create(
                user_id=user_id,
                file_name=incoming.file_name,
                original_name=incoming.original_name,
                file_type=incoming.file_type,
                file_size=incoming.file_size,
                file_path=incoming.file_path,
            )
            document_ids.append(document.id)

        job_type = JobType.SINGLE if len(document_ids) == 1 else JobType.BATCH
        job = await self._job_repo.enqueue(document_ids, job_type, priority)
        Log.info(f"Queued {job_type} job {job.id} for documents {document_ids}")
        return job

    async def delete_document(self, document_id: int) -> None:
        """Remove a document row and its stored file.

        Raises:
            DocumentNotFoundError: if the document does not exist.
        """
        document = await self._doc_repo.find_by_id(document_id)
        await self._doc_repo.delete(document_id)
        path = self._file_loader.path_for(document)
        await asyncio.to_thread(path.unlink, missing_ok=True)
        Log.info(f"Deleted document {document_id} and file {path}")
