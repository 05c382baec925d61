"""Type-specific draft artifacts attached to findings."""

from dataclasses import replace
from datetime import date, timedelta

from docaudit.analysis.models import (
    ComplianceFiling,
    Contradiction,
    ContradictionType,
    Deliverable,
    EmailDraft,
    Highlight,
    RevisedDeck,
)

FILING_DUE_DAYS = 30
_LINE_HEIGHT = 14.0
_LINES_PER_PAGE = 50

_FORM_TYPES: dict[str, str] = {
    ContradictionType.LEGAL: "Contract Amendment Request",
    ContradictionType.COMPLIANCE: "Vendor Compliance Attestation Request",
    ContradictionType.VERSION: "Document Version Reconciliation",
    ContradictionType.DATA: "Data Correction Notice",
}


def generate_deliverable(contradiction: Contradiction, today: date | None = None) -> Deliverable:
    """Build the draft artifact for a finding, keyed on its type."""
    if contradiction.type == ContradictionType.BUDGET:
        impact = contradiction.financial_impact or "the amount under dispute"
        return EmailDraft(
            subject=f"Action required: {contradiction.title}",
            body=(
                "Hello,\n\n"
                f"During document review we identified the following issue: "
                f"{contradiction.description}\n\n"
                f"Financial impact: {impact}.\n\n"
                f"Proposed resolution: {contradiction.suggested_fix}\n\n"
                "Please confirm the correct figure so we can update the affected "
                "documents before approval.\n"
            ),
            recipients=["[finance contact]"],
            attachments=["[source document]", "[reconciliation worksheet]"],
        )

    if contradiction.type == ContradictionType.DEADLINE:
        return RevisedDeck(
            title=f"Revised timeline: {contradiction.title}",
            slide_changes=[
                f"Timeline slide: {contradiction.description}",
                f"Milestones slide: {contradiction.suggested_fix}",
                "Appendix: add revision note listing the reconciled dates",
            ],
            download_url="/deliverables/revised-timeline.pptx",
        )

    start = today or date.today()
    return ComplianceFiling(
        form_type=_FORM_TYPES.get(str(contradiction.type), "Compliance Review Request"),
        description=f"{contradiction.title}: {contradiction.recommendation}",
        due_date=start + timedelta(days=FILING_DUE_DAYS),
    )


def placeholder_highlight(contradiction: Contradiction) -> Highlight:
    line = contradiction.line_number or 1
    return Highlight(
        page=contradiction.page_number or 1,
        y=72.0 + ((line - 1) % _LINES_PER_PAGE) * _LINE_HEIGHT,
    )


def attach_presentation(
    contradiction: Contradiction, today: date | None = None
) -> Contradiction:
    """Return a copy of the finding with its deliverable and highlight filled in."""
    return replace(
        contradiction,
        deliverable=generate_deliverable(contradiction, today),
        highlight=placeholder_highlight(contradiction),
    )
