"""Cross-document contradiction analyzer."""

from collections.abc import Sequence
from pathlib import Path

from docaudit.analysis.base import BaseAnalyzer
from docaudit.analysis.deliverables import attach_presentation
from docaudit.analysis.detectors import generic_cross_finding, run_pairwise
from docaudit.analysis.exceptions import InsufficientDocumentsError
from docaudit.analysis.models import (
    AnalyzedDocument,
    CrossDocumentAnalysis,
    CrossDocumentContradiction,
    RiskLevel,
)
from docaudit.analysis.prompt_loader import format_taxonomy, load_prompt
from docaudit.analysis.validator import (
    parse_response,
    repair_cross_analysis,
    unparseable_payload,
)
from docaudit.logging.logger import Log
from docaudit.reasoning.client_base import BaseReasoningClient

TRUNCATION_MARKER = "...[truncated]"
GENERIC_SUMMARY = (
    "Documents compared successfully. Manual review recommended to confirm consistency."
)


class CrossDocumentAnalyzer(BaseAnalyzer):
    """Finds contradictions between two or more documents."""

    def __init__(
        self,
        *,
        client: BaseReasoningClient,
        max_tokens: int = 2000,
        timeout_seconds: float | None = 60,
        excerpt_chars: int = 2000,
        prompt_dir: Path | None = None,
    ) -> None:
        super().__init__(client=client, max_tokens=max_tokens, timeout_seconds=timeout_seconds)
        self._excerpt_chars = excerpt_chars
        self._system_prompt = load_prompt("cross_document_system", prompt_dir).strip()
        self._prompt_template = load_prompt("cross_document_prompt", prompt_dir)

    async def analyze(self, documents: Sequence[AnalyzedDocument]) -> CrossDocumentAnalysis:
        """Compare documents that have extracted text.

        Raises:
            InsufficientDocumentsError: if fewer than two documents have text.
            ReasoningNetworkError: on backend transport failure or timeout.
        """
        usable = [doc for doc in documents if doc.text and doc.text.strip()]
        if len(usable) < 2:
            raise InsufficientDocumentsError(
                f"Cross-document analysis needs at least 2 documents with text, got {len(usable)}"
            )

        raw = await self._call_backend(self._system_prompt, self._build_prompt(usable))

        parsed = parse_response(raw)
        if parsed is None:
            Log.warning("Unparseable cross-document backend reply, using raw text")
            parsed = unparseable_payload(raw, key="crossDocumentContradictions")
            analysis = repair_cross_analysis(parsed, raw)
            for finding in analysis.cross_document_contradictions:
                self._attribute_to_all(finding, usable)
        else:
            analysis = repair_cross_analysis(parsed, raw)

        if not analysis.cross_document_contradictions:
            finding = run_pairwise(usable)
            if finding is not None:
                Log.info(f"Pairwise detectors found '{finding.title}'")
                analysis.cross_document_contradictions = [finding]
            else:
                Log.info("Pairwise detectors found nothing, emitting review finding")
                analysis.cross_document_contradictions = [generic_cross_finding(usable)]
                analysis.summary = GENERIC_SUMMARY
                analysis.risk_level = RiskLevel.MEDIUM

        analysis.cross_document_contradictions = [
            attach_presentation(c) for c in analysis.cross_document_contradictions
        ]
        Log.info(
            f"Cross-document analysis of {len(usable)} documents complete: "
            f"{len(analysis.cross_document_contradictions)} findings"
        )
        return analysis

    def _build_prompt(self, documents: Sequence[AnalyzedDocument]) -> str:
        sections = []
        for index, doc in enumerate(documents, start=1):
            excerpt = doc.text
            if len(excerpt) > self._excerpt_chars:
                excerpt = excerpt[: self._excerpt_chars] + TRUNCATION_MARKER
            sections.append(
                f"DOCUMENT {index} (ID: {doc.id}): {doc.name} ({doc.file_type.upper()})\n"
                f"{excerpt}"
            )
        return self._prompt_template.format(
            document_count=len(documents),
            documents="\n\n---\n\n".join(sections),
            taxonomy=format_taxonomy(),
        )

    @staticmethod
    def _attribute_to_all(
        finding: CrossDocumentContradiction, documents: Sequence[AnalyzedDocument]
    ) -> None:
        finding.document_ids = [str(doc.id) for doc in documents]
        finding.document_names = [doc.name for doc in documents]
