from typing import Any

from psycopg.rows import dict_row

from docaudit.database.connection import get_connection
from docaudit.database.models import (
    DocumentRecord,
    ProcessingStatus,
    TextExtractionStatus,
)
from docaudit.processor.exceptions import DocumentNotFoundError, InvalidStatusTransitionError
from docaudit.processor.state import allowed_sources

_COLUMNS = """
    id, user_id, file_name, original_name, file_type, file_size, file_path,
    processing_status, text_extraction_status, extracted_text,
    extraction_method, extraction_error, processed_at, created_at, updated_at
"""


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        user_id=str(row["user_id"]),
        file_name=row["file_name"],
        original_name=row["original_name"],
        file_type=row["file_type"],
        file_size=row["file_size"],
        file_path=row["file_path"],
        processing_status=row["processing_status"],
        text_extraction_status=row["text_extraction_status"],
        extracted_text=row["extracted_text"],
        extraction_method=row["extraction_method"],
        extraction_error=row["extraction_error"],
        processed_at=row["processed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentRepository:
    """Database operations for the documents table.

    Status writes only succeed when the row is in one of the source states
    allowed by the processing state machine, so a document's
    processing_status never moves backwards.
    """

    async def create(
        self,
        *,
        user_id: str,
        file_name: str,
        original_name: str,
        file_type: str,
        file_size: int,
        file_path: str,
    ) -> DocumentRecord:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    INSERT INTO documents
                    (user_id, file_name, original_name, file_type, file_size, file_path,
                     processing_status, text_extraction_status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        user_id,
                        file_name,
                        original_name,
                        file_type,
                        file_size,
                        file_path,
                        ProcessingStatus.UPLOADED,
                        TextExtractionStatus.PENDING,
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()
        if row is None:
            raise RuntimeError("INSERT INTO documents returned no row")
        return _to_record(row)

    async def find_by_id(self, document_id: int) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = await cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _to_record(row)

    async def list_by_user(self, user_id: str) -> list[DocumentRecord]:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM documents
                    WHERE user_id = %s
                    ORDER BY created_at DESC
                    """,
                    (user_id,),
                )
                rows = await cur.fetchall()
        return [_to_record(row) for row in rows]

    async def mark_extracting(self, document_id: int) -> None:
        await self._transition(
            document_id,
            ProcessingStatus.EXTRACTING,
            "text_extraction_status = %s",
            (TextExtractionStatus.PROCESSING,),
        )

    async def mark_extracted(self, document_id: int, extracted_text: str, method: str) -> None:
        """Persist extracted text and move the document to analyzing."""
        await self._transition(
            document_id,
            ProcessingStatus.ANALYZING,
            "extracted_text = %s, extraction_method = %s, "
            "text_extraction_status = %s, extraction_error = NULL",
            (extracted_text, method, TextExtractionStatus.COMPLETED),
        )

    async def mark_completed(self, document_id: int) -> None:
        await self._transition(
            document_id,
            ProcessingStatus.COMPLETED,
            "processed_at = NOW()",
            (),
        )

    async def mark_failed(
        self,
        document_id: int,
        error: str,
        *,
        extraction_failed: bool = False,
    ) -> None:
        """Move a document to failed and record the error message.

        When ``extraction_failed`` is set the extracted text is cleared and
        text_extraction_status becomes failed as well.
        """
        if extraction_failed:
            assignments = (
                "extraction_error = %s, text_extraction_status = %s, extracted_text = NULL"
            )
            params: tuple[Any, ...] = (error, TextExtractionStatus.FAILED)
        else:
            assignments = "extraction_error = %s"
            params = (error,)
        await self._transition(document_id, ProcessingStatus.FAILED, assignments, params)

    async def delete(self, document_id: int) -> None:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            await conn.commit()

    async def _transition(
        self,
        document_id: int,
        target: ProcessingStatus,
        assignments: str,
        params: tuple[Any, ...],
    ) -> None:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"""
                    UPDATE documents
                    SET processing_status = %s, {assignments}, updated_at = NOW()
                    WHERE id = %s AND processing_status = ANY(%s)
                    """,
                    (target, *params, document_id, allowed_sources(target)),
                )
                if cur.rowcount == 0:
                    raise InvalidStatusTransitionError(
                        f"Document {document_id} not found or cannot move to '{target}'"
                    )
            await conn.commit()
