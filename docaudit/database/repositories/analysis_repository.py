from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docaudit.database.connection import get_connection
from docaudit.database.models import AnalysisRecord, AnalysisStatus, AnalysisType

_COLUMNS = """
    id, document_id, analysis_type, status, model, summary, confidence_score,
    risk_level, processing_time_ms, raw_response, completed_at, created_at
"""


def _to_record(row: dict[str, Any]) -> AnalysisRecord:
    return AnalysisRecord(
        id=row["id"],
        document_id=row["document_id"],
        analysis_type=row["analysis_type"],
        status=row["status"],
        model=row["model"],
        summary=row["summary"],
        confidence_score=row["confidence_score"],
        risk_level=row["risk_level"],
        processing_time_ms=row["processing_time_ms"],
        raw_response=row["raw_response"],
        completed_at=row["completed_at"],
        created_at=row["created_at"],
    )


class AnalysisRepository:
    """Database operations for the document_analyses table."""

    async def create(
        self,
        document_id: int,
        *,
        analysis_type: AnalysisType,
        model: str,
    ) -> int:
        """Insert an analysis in processing state and return its ID."""
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO document_analyses (document_id, analysis_type, status, model)
                    VALUES (%s, %s, %s, %s)
                    RETURNING id
                    """,
                    (document_id, analysis_type, AnalysisStatus.PROCESSING, model),
                )
                row = await cur.fetchone()
            await conn.commit()
        if row is None:
            raise RuntimeError("INSERT INTO document_analyses returned no row")
        return int(row[0])

    async def complete(
        self,
        analysis_id: int,
        *,
        summary: str,
        confidence_score: float,
        risk_level: str,
        processing_time_ms: int,
        raw_response: dict[str, Any],
    ) -> None:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE document_analyses
                    SET status = %s, summary = %s, confidence_score = %s,
                        risk_level = %s, processing_time_ms = %s,
                        raw_response = %s, completed_at = NOW()
                    WHERE id = %s
                    """,
                    (
                        AnalysisStatus.COMPLETED,
                        summary,
                        max(0.0, min(1.0, confidence_score)),
                        risk_level,
                        processing_time_ms,
                        Jsonb(raw_response),
                        analysis_id,
                    ),
                )
                if cur.rowcount == 0:
                    raise LookupError(f"Analysis {analysis_id} not found")
            await conn.commit()

    async def find_by_id(self, analysis_id: int) -> AnalysisRecord | None:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"SELECT {_COLUMNS} FROM document_analyses WHERE id = %s",
                    (analysis_id,),
                )
                row = await cur.fetchone()
        return _to_record(row) if row is not None else None

    async def list_by_document(self, document_id: int) -> list[AnalysisRecord]:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM document_analyses
                    WHERE document_id = %s
                    ORDER BY created_at DESC
                    """,
                    (document_id,),
                )
                rows = await cur.fetchall()
        return [_to_record(row) for row in rows]
