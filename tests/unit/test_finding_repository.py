from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from docaudit.analysis.models import (
    Contradiction,
    ContradictionType,
    CrossDocumentContradiction,
    DocumentSnippet,
    EmailDraft,
    Highlight,
    Severity,
)
from docaudit.database.models import FindingStatus
from docaudit.database.repositories.finding_repository import FindingRepository, build_metadata

MODULE = "docaudit.database.repositories.finding_repository"

MockDb = Callable[[str], tuple[MagicMock, MagicMock]]


def _contradiction(**overrides: object) -> Contradiction:
    values: dict = {
        "type": ContradictionType.BUDGET,
        "severity": Severity.HIGH,
        "title": "Budget mismatch",
        "description": "Two totals disagree",
        "text_snippet": "$50,000 ... $75,000",
    }
    values.update(overrides)
    return Contradiction(**values)


def _finding_row(**overrides: object) -> dict:
    row = {
        "id": 1,
        "analysis_id": 2,
        "document_id": 3,
        "contradiction_type": "budget",
        "severity": "high",
        "title": "Budget mismatch",
        "description": "Two totals disagree",
        "text_snippet": None,
        "potential_impact": None,
        "recommendation": None,
        "suggested_fix": None,
        "page_number": None,
        "line_number": None,
        "financial_impact": "$25,000",
        "prevented_loss": None,
        "status": "detected",
        "resolved_by": None,
        "resolution_notes": None,
        "resolved_at": None,
        "metadata": None,
        "created_at": None,
    }
    row.update(overrides)
    return row


class TestBuildMetadata:
    def test_plain_finding_without_extras_is_empty(self) -> None:
        assert build_metadata(_contradiction()) == {}

    def test_includes_deliverable_and_highlight(self) -> None:
        contradiction = _contradiction(
            deliverable=EmailDraft(subject="Fix budget", body="Please align"),
            highlight=Highlight(),
        )

        metadata = build_metadata(contradiction)

        assert metadata["deliverable"]["subject"] == "Fix budget"
        assert metadata["highlight"]["page"] == 1

    def test_cross_document_fields(self) -> None:
        contradiction = CrossDocumentContradiction(
            type=ContradictionType.DEADLINE,
            severity=Severity.HIGH,
            title="Dates differ",
            description="Deadlines disagree",
            document_ids=["1", "2"],
            document_names=["a.pdf", "b.docx"],
            text_snippets=[DocumentSnippet("1", "March 1"), DocumentSnippet("2", "March 9")],
        )

        metadata = build_metadata(contradiction)

        assert metadata["crossDocument"] is True
        assert metadata["documentIds"] == ["1", "2"]
        assert metadata["documentNames"] == ["a.pdf", "b.docx"]
        assert metadata["textSnippets"][1] == {"documentId": "2", "snippet": "March 9"}


class TestCreate:
    @pytest.mark.asyncio
    async def test_inserts_detected_finding(self, mock_db: MockDb) -> None:
        conn, cursor = mock_db(MODULE)
        cursor.fetchone.return_value = (44,)

        finding_id = await FindingRepository().create(2, 3, _contradiction())

        assert finding_id == 44
        params = cursor.execute.call_args.args[1]
        assert params[:5] == (2, 3, ContradictionType.BUDGET, Severity.HIGH, "Budget mismatch")
        assert params[14] == FindingStatus.DETECTED
        conn.commit.assert_awaited_once()


class TestQueries:
    @pytest.mark.asyncio
    async def test_find_by_id_fills_blank_text(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)
        cursor.fetchone.return_value = _finding_row()

        record = await FindingRepository().find_by_id(1)

        assert record is not None
        assert record.text_snippet == ""
        assert record.metadata == {}
        assert record.financial_impact == "$25,000"

    @pytest.mark.asyncio
    async def test_list_by_user_applies_filters(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)
        cursor.fetchall.return_value = [_finding_row(id=1), _finding_row(id=2)]

        records = await FindingRepository().list_by_user(
            "user-1", severity="high", status="detected"
        )

        assert [r.id for r in records] == [1, 2]
        sql, params = cursor.execute.call_args.args
        assert "f.severity = %s" in sql
        assert "f.status = %s" in sql
        assert "f.contradiction_type" not in sql.split("WHERE")[1]
        assert params == ("user-1", "high", "detected")

    @pytest.mark.asyncio
    async def test_list_by_analysis(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)

        assert await FindingRepository().list_by_analysis(2) == []
        assert cursor.execute.call_args.args[1] == (2,)


class TestResolve:
    @pytest.mark.asyncio
    async def test_marks_resolved(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)

        await FindingRepository().resolve(1, "user-1", "Fixed in v2")

        assert cursor.execute.call_args.args[1] == (
            FindingStatus.RESOLVED,
            "user-1",
            "Fixed in v2",
            1,
        )

    @pytest.mark.asyncio
    async def test_missing_finding_raises(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)
        cursor.rowcount = 0

        with pytest.raises(LookupError):
            await FindingRepository().resolve(1, "user-1")


class TestUpdate:
    @pytest.mark.asyncio
    async def test_rejects_unknown_fields(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)

        with pytest.raises(ValueError, match="document_id"):
            await FindingRepository().update(1, {"document_id": 9})
        cursor.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_normalizes_type_and_severity(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)

        await FindingRepository().update(1, {"severity": "SEVERE", "contradiction_type": "Legal"})

        sql, params = cursor.execute.call_args.args
        assert sql.startswith("UPDATE contradiction_findings SET contradiction_type = %s, severity = %s")
        assert params == (ContradictionType.LEGAL, Severity.MEDIUM, 1)

    @pytest.mark.asyncio
    async def test_invalid_status_raises(self, mock_db: MockDb) -> None:
        mock_db(MODULE)

        with pytest.raises(ValueError):
            await FindingRepository().update(1, {"status": "archived"})

    @pytest.mark.asyncio
    async def test_empty_update_is_noop(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)

        await FindingRepository().update(1, {})

        cursor.execute.assert_not_awaited()
