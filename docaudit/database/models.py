from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class ProcessingStatus(StrEnum):
    UPLOADED = "uploaded"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


class TextExtractionStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class AnalysisType(StrEnum):
    SINGLE = "single"
    CROSS_DOCUMENT = "cross-document"


class AnalysisStatus(StrEnum):
    PROCESSING = "processing"
    COMPLETED = "completed"


class FindingStatus(StrEnum):
    DETECTED = "detected"
    RESOLVED = "resolved"


class JobStatus(StrEnum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class JobType(StrEnum):
    SINGLE = "single"
    BATCH = "batch"


@dataclass
class DocumentRecord:
    """Represents a row from the documents table."""

    id: int
    user_id: str
    file_name: str
    original_name: str
    file_type: str
    file_size: int
    file_path: str
    processing_status: str = ProcessingStatus.UPLOADED
    text_extraction_status: str = TextExtractionStatus.PENDING
    extracted_text: str | None = None
    extraction_method: str | None = None
    extraction_error: str | None = None
    processed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class AnalysisRecord:
    """Represents a row from the document_analyses table."""

    id: int
    document_id: int
    analysis_type: str
    status: str
    model: str
    summary: str | None = None
    confidence_score: float | None = None
    risk_level: str | None = None
    processing_time_ms: int | None = None
    raw_response: dict[str, Any] | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class FindingRecord:
    """Represents a row from the contradiction_findings table."""

    id: int
    analysis_id: int
    document_id: int
    contradiction_type: str
    severity: str
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
    status: str = FindingStatus.DETECTED
    resolved_by: str | None = None
    resolution_notes: str | None = None
    resolved_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass
class JobRecord:
    """Represents a row from the processing_jobs table."""

    id: int
    document_ids: list[int]
    job_type: str
    status: str
    priority: int = 0
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
