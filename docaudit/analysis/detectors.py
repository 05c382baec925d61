"""Local detectors used when the reasoning backend reports nothing.

Single-document detectors take the document text and return a finding or
None. Pairwise detectors take two analysed documents and are tried in
priority order; the first finding wins.
"""

from collections.abc import Callable, Sequence
from itertools import combinations

from docaudit.analysis.models import (
    AnalyzedDocument,
    Contradiction,
    ContradictionType,
    CrossDocumentContradiction,
    DocumentSnippet,
    Severity,
)
from docaudit.analysis.patterns import (
    COMPLIANCE_KEYWORD_RE,
    AmountToken,
    DateToken,
    EntityToken,
    extract_amounts,
    extract_dates,
    extract_entities,
    format_amount,
    locate,
)

SNIPPET_CONTEXT_CHARS = 60
KEYWORD_WINDOW_CHARS = 400
DAILY_PENALTY = 2500
GENERIC_SNIPPET_CHARS = 200

SingleDetector = Callable[[str], Contradiction | None]
PairDetector = Callable[[AnalyzedDocument, AnalyzedDocument], CrossDocumentContradiction | None]


def _snippet(text: str, offset: int, length: int) -> str:
    start = max(0, offset - SNIPPET_CONTEXT_CHARS)
    end = min(len(text), offset + length + SNIPPET_CONTEXT_CHARS)
    return " ".join(text[start:end].split())


def _display(token: AmountToken) -> str:
    if token.is_percentage:
        return f"{token.value:g}%"
    return format_amount(token.value)


# Single-document detectors


def detect_amount_conflict(text: str) -> Contradiction | None:
    amounts = extract_amounts(text)
    if len(amounts) < 2:
        return None

    first, second = amounts[0], amounts[1]
    page, line = locate(text, first.offset)
    financial_impact = None
    if not first.is_percentage and not second.is_percentage:
        financial_impact = format_amount(abs(first.value - second.value))

    return Contradiction(
        type=ContradictionType.BUDGET,
        severity=Severity.HIGH,
        title="Conflicting Amounts Detected",
        description=(
            f"The document states both {first.text} and {second.text}. "
            "These figures may refer to the same budget line and should be reconciled."
        ),
        text_snippet=_snippet(text, first.offset, len(first.text)),
        potential_impact="Payments or approvals may be based on the wrong figure",
        recommendation="Confirm which amount is authoritative with the finance owner",
        suggested_fix=(
            f"Reconcile {_display(first)} and {_display(second)} and update the document "
            "so a single approved figure is used throughout"
        ),
        page_number=page,
        line_number=line,
        financial_impact=financial_impact,
        prevented_loss=financial_impact,
    )


def detect_date_conflict(text: str) -> Contradiction | None:
    dates = extract_dates(text)
    if len(dates) < 2:
        return None

    first, second = dates[0], dates[1]
    page, line = locate(text, first.offset)
    return Contradiction(
        type=ContradictionType.DEADLINE,
        severity=Severity.MEDIUM,
        title="Multiple Dates Require Confirmation",
        description=(
            f"The document references both {first.text} and {second.text}. "
            "Confirm that milestones and deadlines are consistent."
        ),
        text_snippet=_snippet(text, first.offset, len(first.text)),
        potential_impact="Missed deadlines or misaligned milestones",
        recommendation="Verify the timeline with the project owner",
        suggested_fix=(
            f"Align the schedule so {first.text} and {second.text} refer to distinct, "
            "intended milestones, or correct the outdated date"
        ),
        page_number=page,
        line_number=line,
    )


def _keyword_near(text: str, entity: EntityToken) -> str | None:
    start = max(0, entity.offset - KEYWORD_WINDOW_CHARS)
    end = min(len(text), entity.offset + len(entity.text) + KEYWORD_WINDOW_CHARS)
    match = COMPLIANCE_KEYWORD_RE.search(text, start, end)
    return match.group(0) if match else None


def detect_vendor_attestation(text: str) -> Contradiction | None:
    for entity in extract_entities(text):
        keyword = _keyword_near(text, entity)
        if keyword is None:
            continue

        page, line = locate(text, entity.offset)
        return Contradiction(
            type=ContradictionType.COMPLIANCE,
            severity=Severity.HIGH,
            title="Vendor Attestation Required",
            description=(
                f"{entity.text} is referenced alongside a compliance requirement "
                f"({keyword}). Current attestation evidence is not attached."
            ),
            text_snippet=_snippet(text, entity.offset, len(entity.text)),
            potential_impact="Engaging a vendor without current attestation may breach policy",
            recommendation=f"Request current {keyword} evidence from {entity.text}",
            suggested_fix=(
                f"Obtain and attach {entity.text}'s {keyword} attestation before approval"
            ),
            page_number=page,
            line_number=line,
        )
    return None


SINGLE_DOCUMENT_DETECTORS: list[SingleDetector] = [
    detect_amount_conflict,
    detect_date_conflict,
    detect_vendor_attestation,
]


def run_single(text: str) -> list[Contradiction]:
    """Run every single-document detector and collect what they find."""
    findings = []
    for detector in SINGLE_DOCUMENT_DETECTORS:
        finding = detector(text)
        if finding is not None:
            findings.append(finding)
    return findings


def generic_review_finding(text: str) -> Contradiction:
    return Contradiction(
        type=ContradictionType.COMPLIANCE,
        severity=Severity.MEDIUM,
        title="Document Review Required",
        description=(
            "This document contains content that requires professional review "
            "to ensure compliance and accuracy."
        ),
        text_snippet=text[:GENERIC_SNIPPET_CHARS] + "...",
        potential_impact="Potential compliance issues or operational risks may exist",
        recommendation="Conduct thorough manual review of document contents",
        suggested_fix="Review all sections for accuracy, completeness, and compliance",
        page_number=1,
        line_number=1,
        financial_impact="Potential cost of compliance violations",
        prevented_loss="Early detection prevents downstream issues",
    )


# Pairwise detectors


def top_amount(tokens: Sequence[AmountToken]) -> AmountToken | None:
    """Largest currency amount, or the largest percentage when there is no currency."""
    currency = [t for t in tokens if not t.is_percentage]
    candidates = currency or list(tokens)
    if not candidates:
        return None
    return max(candidates, key=lambda t: t.value)


def top_date(tokens: Sequence[DateToken]) -> DateToken | None:
    """Earliest parseable date."""
    parsed = [t for t in tokens if t.value is not None]
    if not parsed:
        return None
    return min(parsed, key=lambda t: t.value)


def _cross_finding(
    first: AnalyzedDocument,
    second: AnalyzedDocument,
    first_snippet: str,
    second_snippet: str,
    **fields,
) -> CrossDocumentContradiction:
    snippets = [
        DocumentSnippet(document_id=str(first.id), snippet=first_snippet),
        DocumentSnippet(document_id=str(second.id), snippet=second_snippet),
    ]
    return CrossDocumentContradiction(
        **fields,
        text_snippet=" | ".join(s.snippet for s in snippets),
        document_ids=[str(first.id), str(second.id)],
        document_names=[first.name, second.name],
        text_snippets=snippets,
    )


def amount_diff(
    first: AnalyzedDocument, second: AnalyzedDocument
) -> CrossDocumentContradiction | None:
    a = top_amount(extract_amounts(first.text))
    b = top_amount(extract_amounts(second.text))
    if a is None or b is None or a.is_percentage != b.is_percentage or a.value == b.value:
        return None

    variance = abs(a.value - b.value)
    baseline = max(a.value, b.value)
    percent = variance / baseline * 100 if baseline else 0.0
    page, line = locate(first.text, a.offset)

    if a.is_percentage:
        variance_text = f"{variance:g} percentage points"
        exposure = f"A {variance_text} gap in agreed rates"
        financial_impact = None
    else:
        variance_text = format_amount(variance)
        exposure = f"An unreconciled variance of {variance_text}"
        financial_impact = variance_text

    return _cross_finding(
        first,
        second,
        _snippet(first.text, a.offset, len(a.text)),
        _snippet(second.text, b.offset, len(b.text)),
        type=ContradictionType.BUDGET,
        severity=Severity.CRITICAL,
        title="Budget Mismatch Between Documents",
        description=(
            f"{first.name} states {_display(a)} while {second.name} states {_display(b)} "
            f"(variance {variance_text}, {percent:.1f}%)."
        ),
        potential_impact=(
            f"{exposure} exposes the organisation to overpayment, "
            "contract penalties, or audit findings"
        ),
        recommendation="Reconcile both documents against the approved budget before signing",
        suggested_fix=(
            f"Update {first.name} ({_display(a)}) and {second.name} ({_display(b)}) "
            "to the single approved amount"
        ),
        page_number=page,
        line_number=line,
        financial_impact=financial_impact,
        prevented_loss=financial_impact,
    )


def date_diff(
    first: AnalyzedDocument, second: AnalyzedDocument
) -> CrossDocumentContradiction | None:
    a = top_date(extract_dates(first.text))
    b = top_date(extract_dates(second.text))
    if a is None or b is None or a.value == b.value:
        return None

    days = abs((a.value - b.value).days)
    exposure = format_amount(days * DAILY_PENALTY)
    page, line = locate(first.text, a.offset)
    return _cross_finding(
        first,
        second,
        _snippet(first.text, a.offset, len(a.text)),
        _snippet(second.text, b.offset, len(b.text)),
        type=ContradictionType.DEADLINE,
        severity=Severity.HIGH,
        title="Timeline Mismatch Between Documents",
        description=(
            f"{first.name} references {a.text} while {second.name} references {b.text}, "
            f"a difference of {days} days."
        ),
        potential_impact=(
            f"At {format_amount(DAILY_PENALTY)} per day of delay, the {days}-day gap "
            f"represents up to {exposure} in penalty exposure"
        ),
        recommendation="Confirm the binding deadline with all counterparties",
        suggested_fix=f"Align both documents on a single date ({a.text} or {b.text})",
        page_number=page,
        line_number=line,
        financial_impact=exposure,
        prevented_loss=exposure,
    )


def entity_diff(
    first: AnalyzedDocument, second: AnalyzedDocument
) -> CrossDocumentContradiction | None:
    entities_b = extract_entities(second.text)
    for a in extract_entities(first.text):
        for b in entities_b:
            if a.text.lower() == b.text.lower() or not a.stems & b.stems:
                continue

            page, line = locate(first.text, a.offset)
            return _cross_finding(
                first,
                second,
                _snippet(first.text, a.offset, len(a.text)),
                _snippet(second.text, b.offset, len(b.text)),
                type=ContradictionType.COMPLIANCE,
                severity=Severity.HIGH,
                title="Vendor Name Mismatch Between Documents",
                description=(
                    f"{first.name} names the counterparty '{a.text}' while "
                    f"{second.name} names it '{b.text}'."
                ),
                potential_impact=(
                    "Contracts or payments may be issued to the wrong legal entity"
                ),
                recommendation="Ask the vendor to confirm its registered legal name",
                suggested_fix=(
                    f"Replace '{a.text}' and '{b.text}' with the vendor's confirmed "
                    "legal entity name in both documents"
                ),
                page_number=page,
                line_number=line,
            )
    return None


PAIRWISE_DETECTORS: list[PairDetector] = [amount_diff, date_diff, entity_diff]


def run_pairwise(documents: Sequence[AnalyzedDocument]) -> CrossDocumentContradiction | None:
    """First finding from any document pair, trying detectors in priority order."""
    for first, second in combinations(documents, 2):
        for detector in PAIRWISE_DETECTORS:
            finding = detector(first, second)
            if finding is not None:
                return finding
    return None


def generic_cross_finding(documents: Sequence[AnalyzedDocument]) -> CrossDocumentContradiction:
    snippets = [
        DocumentSnippet(document_id=str(doc.id), snippet=doc.text[:GENERIC_SNIPPET_CHARS])
        for doc in documents
    ]
    return CrossDocumentContradiction(
        type=ContradictionType.COMPLIANCE,
        severity=Severity.MEDIUM,
        title="Cross-Document Review Required",
        description=(
            "These documents were compared and should be reviewed together "
            "to confirm their terms are consistent."
        ),
        text_snippet=" | ".join(s.snippet for s in snippets if s.snippet),
        potential_impact="Inconsistencies between related documents may go unnoticed",
        recommendation="Review the documents side by side",
        suggested_fix="Confirm amounts, dates, and counterparties match across all documents",
        page_number=1,
        line_number=1,
        document_ids=[str(doc.id) for doc in documents],
        document_names=[doc.name for doc in documents],
        text_snippets=snippets,
    )
