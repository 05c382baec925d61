"""Document processing state machine.

uploaded -> extracting -> analyzing -> completed
    |            |            |
    +------------+------------+--> failed
"""

from docaudit.database.models import ProcessingStatus
from docaudit.processor.exceptions import InvalidStatusTransitionError

TRANSITIONS: dict[ProcessingStatus, frozenset[ProcessingStatus]] = {
    ProcessingStatus.UPLOADED: frozenset(
        {ProcessingStatus.EXTRACTING, ProcessingStatus.FAILED}
    ),
    ProcessingStatus.EXTRACTING: frozenset(
        {ProcessingStatus.ANALYZING, ProcessingStatus.FAILED}
    ),
    ProcessingStatus.ANALYZING: frozenset(
        {ProcessingStatus.COMPLETED, ProcessingStatus.FAILED}
    ),
    ProcessingStatus.COMPLETED: frozenset(),
    ProcessingStatus.FAILED: frozenset(),
}

TERMINAL_STATUSES = frozenset({ProcessingStatus.COMPLETED, ProcessingStatus.FAILED})


def allowed_sources(target: ProcessingStatus) -> list[str]:
    """Statuses from which a document may move to ``target``."""
    return [str(source) for source, targets in TRANSITIONS.items() if target in targets]


def can_transition(current: str, target: str) -> bool:
    try:
        return ProcessingStatus(target) in TRANSITIONS[ProcessingStatus(current)]
    except ValueError:
        return False


def ensure_transition(current: str, target: str) -> None:
    """Raise if moving from ``current`` to ``target`` is not allowed."""
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(
            f"Cannot move document from '{current}' to '{target}'"
        )


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES
