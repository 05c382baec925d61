"""Validation and repair of reasoning backend replies.

Backend output is untrusted: nothing here raises on bad content. Unknown
enum values are replaced by safe defaults, missing text fields get
human-readable placeholders, and confidence is clamped to [0, 1].
"""

import json
import math
from typing import Any

from docaudit.analysis.models import (
    Contradiction,
    ContradictionAnalysis,
    ContradictionType,
    CrossDocumentAnalysis,
    CrossDocumentContradiction,
    DocumentSnippet,
    RiskLevel,
    Severity,
)
from docaudit.logging.logger import Log

DEFAULT_TYPE = ContradictionType.DATA
DEFAULT_SEVERITY = Severity.MEDIUM
DEFAULT_RISK_LEVEL = RiskLevel.LOW
DEFAULT_CONFIDENCE = 0.8
RAW_DESCRIPTION_LIMIT = 500


def parse_response(raw: str) -> dict[str, Any] | None:
    """Parse a backend reply into a JSON object, or None if it is not one."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def unparseable_payload(raw: str, key: str = "contradictions") -> dict[str, Any]:
    """Stand-in payload for a reply that is not a JSON object."""
    return {
        key: [
            {
                "type": ContradictionType.COMPLIANCE,
                "severity": Severity.MEDIUM,
                "title": "Document Analysis Completed",
                "description": raw[:RAW_DESCRIPTION_LIMIT],
                "potentialImpact": "Analysis found potential issues requiring review",
                "recommendation": "Review document contents carefully",
                "suggestedFix": "Address any inconsistencies identified in the analysis",
            }
        ],
        "summary": "Document analysis completed",
        "riskLevel": RiskLevel.MEDIUM,
        "confidenceScore": DEFAULT_CONFIDENCE,
    }


def normalize_type(value: Any) -> ContradictionType:
    try:
        return ContradictionType(str(value).strip().lower())
    except ValueError:
        return DEFAULT_TYPE


def normalize_severity(value: Any) -> Severity:
    try:
        return Severity(str(value).strip().lower())
    except ValueError:
        return DEFAULT_SEVERITY


def normalize_risk_level(value: Any) -> RiskLevel:
    try:
        return RiskLevel(str(value).strip().lower())
    except ValueError:
        return DEFAULT_RISK_LEVEL


def clamp_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    if value != value:  # NaN
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, float(value)))


def repair_analysis(data: dict[str, Any], raw_response: str = "") -> ContradictionAnalysis:
    """Build a ContradictionAnalysis from a parsed single-document reply."""
    return ContradictionAnalysis(
        contradictions=[
            _build_contradiction(item) for item in _items(data.get("contradictions"))
        ],
        summary=_text(data.get("summary"), "Document analysis completed"),
        risk_level=normalize_risk_level(data.get("riskLevel")),
        confidence_score=clamp_confidence(data.get("confidenceScore")),
        raw_response=raw_response,
    )


def repair_cross_analysis(
    data: dict[str, Any], raw_response: str = ""
) -> CrossDocumentAnalysis:
    """Build a CrossDocumentAnalysis from a parsed cross-document reply."""
    raw_items = data.get("crossDocumentContradictions")
    if raw_items is None:
        raw_items = data.get("contradictions")
    return CrossDocumentAnalysis(
        cross_document_contradictions=[
            _build_cross_contradiction(item) for item in _items(raw_items)
        ],
        summary=_text(data.get("summary"), "Cross-document analysis completed"),
        risk_level=normalize_risk_level(data.get("riskLevel")),
        confidence_score=clamp_confidence(data.get("confidenceScore")),
        raw_response=raw_response,
    )


def _items(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    items = [item for item in raw if isinstance(item, dict)]
    if len(items) != len(raw):
        Log.warning(f"Dropped {len(raw) - len(items)} malformed contradiction entries")
    return items


def _common_fields(raw: dict[str, Any], default_title: str) -> dict[str, Any]:
    return {
        "type": normalize_type(raw.get("type")),
        "severity": normalize_severity(raw.get("severity")),
        "title": _text(raw.get("title"), default_title),
        "description": _text(raw.get("description"), "No description provided"),
        "potential_impact": _text(raw.get("potentialImpact"), "Impact assessment needed"),
        "recommendation": _text(raw.get("recommendation"), "Review required"),
        "suggested_fix": _text(raw.get("suggestedFix"), "Manual review recommended"),
        "financial_impact": _optional_text(raw.get("financialImpact")),
        "prevented_loss": _optional_text(raw.get("preventedLoss")),
    }


def _build_contradiction(raw: dict[str, Any]) -> Contradiction:
    return Contradiction(
        **_common_fields(raw, "Unspecified issue"),
        text_snippet=_text(raw.get("textSnippet"), ""),
        page_number=_positive_int(raw.get("pageNumber")),
        line_number=_positive_int(raw.get("lineNumber")),
    )


def _build_cross_contradiction(raw: dict[str, Any]) -> CrossDocumentContradiction:
    snippets = [
        DocumentSnippet(
            document_id=str(item.get("documentId", "")),
            snippet=_text(item.get("snippet"), ""),
        )
        for item in _items(raw.get("textSnippets"))
    ]
    return CrossDocumentContradiction(
        **_common_fields(raw, "Cross-document issue"),
        text_snippet=" | ".join(s.snippet for s in snippets if s.snippet),
        document_ids=_string_list(raw.get("documentIds")),
        document_names=_string_list(raw.get("documentNames")),
        text_snippets=snippets,
    )


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _optional_text(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)) and value >= 1:
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        try:
            number = int(value)
        except ValueError:
            return None
        return number if number >= 1 else None
    return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int)) and str(item)]
