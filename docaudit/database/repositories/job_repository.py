from typing import Any

import psycopg
from psycopg.rows import dict_row

from docaudit.database.connection import get_connection
from docaudit.database.models import JobRecord, JobStatus, JobType


def _to_record(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        document_ids=list(row["document_ids"]),
        job_type=row["job_type"],
        status=row["status"],
        priority=row["priority"],
        error_message=row.get("error_message"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class JobRepository:
    """Database operations for the processing_jobs table."""

    async def enqueue(
        self,
        document_ids: list[int],
        job_type: JobType,
        priority: int = 0,
    ) -> JobRecord:
        """Queue one job covering an upload batch."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    INSERT INTO processing_jobs (document_ids, job_type, status, priority)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id, document_ids, job_type, status, priority, created_at
                    """,
                    (document_ids, job_type, JobStatus.QUEUED, priority),
                )
                row = await cur.fetchone()
            await conn.commit()
        if row is None:
            raise RuntimeError("INSERT INTO processing_jobs returned no row")
        return _to_record(row)

    async def claim_next_job(self, conn: psycopg.AsyncConnection[Any]) -> JobRecord | None:
        """Claim the next queued job using SELECT FOR UPDATE SKIP LOCKED."""
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(
                """
                SELECT id, document_ids, job_type, status, priority
                FROM processing_jobs
                WHERE status = %s
                ORDER BY priority DESC, created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (JobStatus.QUEUED,),
            )
            row = await cur.fetchone()

        if row is None:
            return None

        await conn.execute(
            """
            UPDATE processing_jobs
            SET status = %s, updated_at = NOW()
            WHERE id = %s
            """,
            (JobStatus.PROCESSING, row["id"]),
        )
        await conn.commit()

        record = _to_record(row)
        record.status = JobStatus.PROCESSING
        return record

    async def mark_completed(self, job_id: int) -> None:
        async with get_connection() as conn:
            await conn.execute(
                """
                UPDATE processing_jobs
                SET status = %s, error_message = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (JobStatus.COMPLETED, job_id),
            )
            await conn.commit()

    async def mark_failed(self, job_id: int, error: str) -> None:
        async with get_connection() as conn:
            await conn.execute(
                """
                UPDATE processing_jobs
                SET status = %s, error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (JobStatus.FAILED, error, job_id),
            )
            await conn.commit()

    async def find_by_id(self, job_id: int) -> JobRecord | None:
        """Find a job by ID. Useful for tests."""
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    SELECT id, document_ids, job_type, status, priority,
                           error_message, created_at, updated_at
                    FROM processing_jobs
                    WHERE id = %s
                    """,
                    (job_id,),
                )
                row = await cur.fetchone()
        return _to_record(row) if row is not None else None
