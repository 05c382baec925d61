import pytest

from docaudit.database.models import ProcessingStatus
from docaudit.processor.exceptions import InvalidStatusTransitionError
from docaudit.processor.state import (
    allowed_sources,
    can_transition,
    ensure_transition,
    is_terminal,
)


class TestTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("uploaded", "extracting"),
            ("uploaded", "failed"),
            ("extracting", "analyzing"),
            ("extracting", "failed"),
            ("analyzing", "completed"),
            ("analyzing", "failed"),
        ],
    )
    def test_forward_moves_allowed(self, current: str, target: str) -> None:
        assert can_transition(current, target) is True

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("completed", "extracting"),
            ("completed", "failed"),
            ("failed", "analyzing"),
            ("analyzing", "extracting"),
            ("uploaded", "completed"),
            ("uploaded", "bogus"),
        ],
    )
    def test_regressions_refused(self, current: str, target: str) -> None:
        assert can_transition(current, target) is False

    def test_ensure_transition_raises(self) -> None:
        with pytest.raises(InvalidStatusTransitionError, match="completed"):
            ensure_transition("completed", "extracting")


class TestAllowedSources:
    def test_failed_reachable_from_every_active_status(self) -> None:
        assert sorted(allowed_sources(ProcessingStatus.FAILED)) == [
            "analyzing",
            "extracting",
            "uploaded",
        ]

    def test_completed_only_from_analyzing(self) -> None:
        assert allowed_sources(ProcessingStatus.COMPLETED) == ["analyzing"]

    def test_nothing_moves_back_to_uploaded(self) -> None:
        assert allowed_sources(ProcessingStatus.UPLOADED) == []


class TestTerminal:
    def test_terminal_statuses(self) -> None:
        assert is_terminal("completed")
        assert is_terminal("failed")
        assert not is_terminal("analyzing")
