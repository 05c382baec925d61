"""Single-document contradiction analyzer."""

from pathlib import Path

from docaudit.analysis.base import BaseAnalyzer
from docaudit.analysis.deliverables import attach_presentation
from docaudit.analysis.detectors import generic_review_finding, run_single
from docaudit.analysis.models import ContradictionAnalysis, DocumentContext, RiskLevel
from docaudit.analysis.prompt_loader import format_taxonomy, load_prompt
from docaudit.analysis.validator import parse_response, repair_analysis, unparseable_payload
from docaudit.logging.logger import Log
from docaudit.reasoning.client_base import BaseReasoningClient

GENERIC_SUMMARY = (
    "Document processed successfully. Manual review recommended to ensure compliance."
)


class DocumentAnalyzer(BaseAnalyzer):
    """Finds contradictions inside one document.

    The backend reply is validated and repaired; when it reports nothing the
    local detectors run, and when they find nothing too a generic review
    finding is emitted. The returned analysis always has at least one finding.
    """

    def __init__(
        self,
        *,
        client: BaseReasoningClient,
        max_tokens: int = 2000,
        timeout_seconds: float | None = 60,
        prompt_dir: Path | None = None,
    ) -> None:
        super().__init__(client=client, max_tokens=max_tokens, timeout_seconds=timeout_seconds)
        self._system_prompt = load_prompt("single_document_system", prompt_dir).strip()
        self._prompt_template = load_prompt("single_document_prompt", prompt_dir)

    async def analyze(self, text: str, context: DocumentContext) -> ContradictionAnalysis:
        """Analyze extracted text.

        Raises:
            ReasoningNetworkError: on backend transport failure or timeout.
        """
        raw = await self._call_backend(self._system_prompt, self._build_prompt(text, context))

        parsed = parse_response(raw)
        if parsed is None:
            Log.warning(f"Unparseable backend reply for '{context.file_name}', using raw text")
            parsed = unparseable_payload(raw)
        analysis = repair_analysis(parsed, raw)

        if not analysis.contradictions:
            analysis.contradictions = run_single(text)
            Log.info(
                f"Backend reported no contradictions for '{context.file_name}'; "
                f"local detectors found {len(analysis.contradictions)}"
            )

        if not analysis.contradictions:
            analysis.contradictions = [generic_review_finding(text)]
            analysis.summary = GENERIC_SUMMARY
            analysis.risk_level = RiskLevel.MEDIUM

        analysis.contradictions = [attach_presentation(c) for c in analysis.contradictions]
        Log.info(
            f"Analysis complete for '{context.file_name}': "
            f"{len(analysis.contradictions)} findings, risk {analysis.risk_level}"
        )
        return analysis

    def _build_prompt(self, text: str, context: DocumentContext) -> str:
        return self._prompt_template.format(
            file_name=context.file_name,
            file_type=context.file_type,
            document_text=text,
            taxonomy=format_taxonomy(),
        )
