from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from docaudit.database.models import AnalysisStatus, AnalysisType
from docaudit.database.repositories.analysis_repository import AnalysisRepository

MODULE = "docaudit.database.repositories.analysis_repository"

MockDb = Callable[[str], tuple[MagicMock, MagicMock]]


class TestCreate:
    @pytest.mark.asyncio
    async def test_returns_new_id(self, mock_db: MockDb) -> None:
        conn, cursor = mock_db(MODULE)
        cursor.fetchone.return_value = (12,)

        analysis_id = await AnalysisRepository().create(
            3, analysis_type=AnalysisType.CROSS_DOCUMENT, model="gpt-4o-mini"
        )

        assert analysis_id == 12
        assert cursor.execute.call_args.args[1] == (
            3,
            AnalysisType.CROSS_DOCUMENT,
            AnalysisStatus.PROCESSING,
            "gpt-4o-mini",
        )
        conn.commit.assert_awaited_once()


class TestComplete:
    @pytest.mark.asyncio
    async def test_clamps_confidence(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)

        await AnalysisRepository().complete(
            12,
            summary="ok",
            confidence_score=1.7,
            risk_level="medium",
            processing_time_ms=40,
            raw_response={"raw": "{}"},
        )

        params = cursor.execute.call_args.args[1]
        assert params[0] == AnalysisStatus.COMPLETED
        assert params[2] == 1.0
        assert params[-1] == 12

    @pytest.mark.asyncio
    async def test_missing_analysis_raises(self, mock_db: MockDb) -> None:
        conn, cursor = mock_db(MODULE)
        cursor.rowcount = 0

        with pytest.raises(LookupError):
            await AnalysisRepository().complete(
                99,
                summary="ok",
                confidence_score=0.5,
                risk_level="low",
                processing_time_ms=1,
                raw_response={},
            )
        conn.commit.assert_not_awaited()


class TestFind:
    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, mock_db: MockDb) -> None:
        mock_db(MODULE)

        assert await AnalysisRepository().find_by_id(5) is None

    @pytest.mark.asyncio
    async def test_list_by_document_maps_rows(self, mock_db: MockDb) -> None:
        _conn, cursor = mock_db(MODULE)
        cursor.fetchall.return_value = [
            {
                "id": 1,
                "document_id": 3,
                "analysis_type": "single",
                "status": "completed",
                "model": "gpt-4o-mini",
                "summary": "fine",
                "confidence_score": 0.8,
                "risk_level": "low",
                "processing_time_ms": 120,
                "raw_response": {},
                "completed_at": None,
                "created_at": None,
            }
        ]

        records = await AnalysisRepository().list_by_document(3)

        assert len(records) == 1
        assert records[0].summary == "fine"
        assert records[0].analysis_type == "single"
