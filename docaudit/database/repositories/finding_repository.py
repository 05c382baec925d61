from dataclasses import asdict
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docaudit.analysis.models import Contradiction, CrossDocumentContradiction
from docaudit.analysis.serialization import to_json_dict
from docaudit.analysis.validator import normalize_severity, normalize_type
from docaudit.database.connection import get_connection
from docaudit.database.models import FindingRecord, FindingStatus

_COLUMNS = """
    f.id, f.analysis_id, f.document_id, f.contradiction_type, f.severity, f.title,
    f.description, f.text_snippet, f.potential_impact, f.recommendation,
    f.suggested_fix, f.page_number, f.line_number, f.financial_impact,
    f.prevented_loss, f.status, f.resolved_by, f.resolution_notes, f.resolved_at,
    f.metadata, f.created_at
"""

_UPDATABLE_FIELDS = frozenset({
    "contradiction_type",
    "severity",
    "title",
    "description",
    "potential_impact",
    "recommendation",
    "suggested_fix",
    "financial_impact",
    "prevented_loss",
    "status",
    "resolution_notes",
})


def _to_record(row: dict[str, Any]) -> FindingRecord:
    return FindingRecord(
        id=row["id"],
        analysis_id=row["analysis_id"],
        document_id=row["document_id"],
        contradiction_type=row["contradiction_type"],
        severity=row["severity"],
        title=row["title"],
        description=row["description"],
        text_snippet=row["text_snippet"] or "",
        potential_impact=row["potential_impact"] or "",
        recommendation=row["recommendation"] or "",
        suggested_fix=row["suggested_fix"] or "",
        page_number=row["page_number"],
        line_number=row["line_number"],
        financial_impact=row["financial_impact"],
        prevented_loss=row["prevented_loss"],
        status=row["status"],
        resolved_by=row["resolved_by"],
        resolution_notes=row["resolution_notes"],
        resolved_at=row["resolved_at"],
        metadata=row["metadata"] or {},
        created_at=row["created_at"],
    )


def build_metadata(contradiction: Contradiction) -> dict[str, Any]:
    """Collect the JSON metadata stored alongside a finding."""
    metadata: dict[str, Any] = {}
    if contradiction.deliverable is not None:
        metadata["deliverable"] = to_json_dict(contradiction.deliverable)
    if contradiction.highlight is not None:
        metadata["highlight"] = asdict(contradiction.highlight)
    if isinstance(contradiction, CrossDocumentContradiction):
        metadata["crossDocument"] = True
        metadata["documentIds"] = list(contradiction.document_ids)
        metadata["documentNames"] = list(contradiction.document_names)
        metadata["textSnippets"] = [
            {"documentId": s.document_id, "snippet": s.snippet}
            for s in contradiction.text_snippets
        ]
    return metadata


class FindingRepository:
    """Database operations for the contradiction_findings table."""

    async def create(
        self,
        analysis_id: int,
        document_id: int,
        contradiction: Contradiction,
    ) -> int:
        """Insert a finding in detected state and return its ID."""
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    INSERT INTO contradiction_findings
                    (analysis_id, document_id, contradiction_type, severity, title,
                     description, text_snippet, potential_impact, recommendation,
                     suggested_fix, page_number, line_number, financial_impact,
                     prevented_loss, status, metadata)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        analysis_id,
                        document_id,
                        contradiction.type,
                        contradiction.severity,
                        contradiction.title,
                        contradiction.description,
                        contradiction.text_snippet,
                        contradiction.potential_impact,
                        contradiction.recommendation,
                        contradiction.suggested_fix,
                        contradiction.page_number,
                        contradiction.line_number,
                        contradiction.financial_impact,
                        contradiction.prevented_loss,
                        FindingStatus.DETECTED,
                        Jsonb(build_metadata(contradiction)),
                    ),
                )
                row = await cur.fetchone()
            await conn.commit()
        if row is None:
            raise RuntimeError("INSERT INTO contradiction_findings returned no row")
        return int(row[0])

    async def find_by_id(self, finding_id: int) -> FindingRecord | None:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"SELECT {_COLUMNS} FROM contradiction_findings f WHERE f.id = %s",
                    (finding_id,),
                )
                row = await cur.fetchone()
        return _to_record(row) if row is not None else None

    async def list_by_document(self, document_id: int) -> list[FindingRecord]:
        return await self._list("f.document_id = %s", (document_id,))

    async def list_by_analysis(self, analysis_id: int) -> list[FindingRecord]:
        return await self._list("f.analysis_id = %s", (analysis_id,))

    async def list_by_user(
        self,
        user_id: str,
        *,
        contradiction_type: str | None = None,
        severity: str | None = None,
        status: str | None = None,
    ) -> list[FindingRecord]:
        """List a user's findings, optionally filtered by type, severity and status."""
        conditions = ["d.user_id = %s"]
        params: list[Any] = [user_id]
        for column, value in (
            ("f.contradiction_type", contradiction_type),
            ("f.severity", severity),
            ("f.status", status),
        ):
            if value is not None:
                conditions.append(f"{column} = %s")
                params.append(value)

        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM contradiction_findings f
                    JOIN documents d ON d.id = f.document_id
                    WHERE {" AND ".join(conditions)}
                    ORDER BY f.created_at DESC
                    """,
                    tuple(params),
                )
                rows = await cur.fetchall()
        return [_to_record(row) for row in rows]

    async def resolve(self, finding_id: int, resolved_by: str, notes: str | None = None) -> None:
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    """
                    UPDATE contradiction_findings
                    SET status = %s, resolved_by = %s, resolution_notes = %s,
                        resolved_at = NOW()
                    WHERE id = %s
                    """,
                    (FindingStatus.RESOLVED, resolved_by, notes, finding_id),
                )
                if cur.rowcount == 0:
                    raise LookupError(f"Finding {finding_id} not found")
            await conn.commit()

    async def update(self, finding_id: int, fields: dict[str, Any]) -> None:
        """Apply a generic field update.

        Raises:
            ValueError: if a field is not updatable.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        if not fields:
            return

        values = dict(fields)
        if "contradiction_type" in values:
            values["contradiction_type"] = normalize_type(values["contradiction_type"])
        if "severity" in values:
            values["severity"] = normalize_severity(values["severity"])
        if "status" in values:
            values["status"] = FindingStatus(values["status"])

        columns = sorted(values)
        assignments = ", ".join(f"{column} = %s" for column in columns)
        async with get_connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    f"UPDATE contradiction_findings SET {assignments} WHERE id = %s",
                    (*(values[column] for column in columns), finding_id),
                )
                if cur.rowcount == 0:
                    raise LookupError(f"Finding {finding_id} not found")
            await conn.commit()

    async def _list(self, condition: str, params: tuple[Any, ...]) -> list[FindingRecord]:
        async with get_connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM contradiction_findings f
                    WHERE {condition}
                    ORDER BY f.created_at
                    """,
                    params,
                )
                rows = await cur.fetchall()
        return [_to_record(row) for row in rows]
