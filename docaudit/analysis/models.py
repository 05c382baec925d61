from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class ContradictionType(StrEnum):
    BUDGET = "budget"
    LEGAL = "legal"
    COMPLIANCE = "compliance"
    VERSION = "version"
    DEADLINE = "deadline"
    DATA = "data"


class Severity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class EmailDraft:
    """Remediation email attached to budget findings."""

    subject: str
    body: str
    recipients: list[str] = field(default_factory=list)
    attachments: list[str] = field(default_factory=list)
    priority: str = "HIGH"
    kind: str = "email_draft"


@dataclass(frozen=True)
class RevisedDeck:
    """Revised timeline deck attached to deadline findings."""

    title: str
    slide_changes: list[str] = field(default_factory=list)
    download_url: str = ""
    kind: str = "revised_deck"


@dataclass(frozen=True)
class ComplianceFiling:
    """Compliance filing draft attached to every other finding type."""

    form_type: str
    description: str
    due_date: date
    status: str = "DRAFT"
    urgency: str = "CRITICAL"
    kind: str = "compliance_filing"


Deliverable = EmailDraft | RevisedDeck | ComplianceFiling


@dataclass(frozen=True)
class Highlight:
    """Placeholder highlight box for the document viewer."""

    page: int = 1
    x: float = 72.0
    y: float = 72.0
    width: float = 468.0
    height: float = 14.0


@dataclass
class Contradiction:
    """A single validated finding."""

    type: ContradictionType
    severity: Severity
    title: str
    description: str
    text_snippet: str = ""
    potential_impact: str = ""
    recommendation: str = ""
    suggested_fix: str = ""
    page_number: int | None = None
    line_number: int | None = None
    financial_impact: str | None = None
    prevented_loss: str | None = None
    deliverable: Deliverable | None = None
    highlight: Highlight | None = None


@dataclass(frozen=True)
class DocumentSnippet:
    document_id: str
    snippet: str


@dataclass
class CrossDocumentContradiction(Contradiction):
    """A finding spanning two or more documents."""

    document_ids: list[str] = field(default_factory=list)
    document_names: list[str] = field(default_factory=list)
    text_snippets: list[DocumentSnippet] = field(default_factory=list)


@dataclass
class ContradictionAnalysis:
    """Output of the single-document analyzer."""

    contradictions: list[Contradiction]
    summary: str
    risk_level: RiskLevel
    confidence_score: float
    raw_response: str = ""


@dataclass
class CrossDocumentAnalysis:
    """Output of the cross-document analyzer."""

    cross_document_contradictions: list[CrossDocumentContradiction]
    summary: str
    risk_level: RiskLevel
    confidence_score: float
    raw_response: str = ""


@dataclass(frozen=True)
class DocumentContext:
    file_name: str
    file_type: str
    user_id: str


@dataclass(frozen=True)
class AnalyzedDocument:
    """A document whose text was extracted and can take part in analysis."""

    id: int
    name: str
    file_type: str
    text: str
