from docaudit.analysis.analyzer import DocumentAnalyzer
from docaudit.analysis.cross_analyzer import CrossDocumentAnalyzer
from docaudit.config.settings import Settings
from docaudit.reasoning.client_base import BaseReasoningClient
from docaudit.reasoning.factory import ReasoningClientFactory


class AnalyzerFactory:
    """Creates both analyzers around one shared reasoning client."""

    @classmethod
    def create(
        cls, settings: Settings, client: BaseReasoningClient | None = None
    ) -> tuple[DocumentAnalyzer, CrossDocumentAnalyzer]:
        client = client or ReasoningClientFactory.create(settings)
        single = DocumentAnalyzer(
            client=client,
            max_tokens=settings.reasoning_max_tokens,
            timeout_seconds=settings.reasoning_timeout_seconds,
        )
        cross = CrossDocumentAnalyzer(
            client=client,
            max_tokens=settings.reasoning_max_tokens,
            timeout_seconds=settings.reasoning_timeout_seconds,
            excerpt_chars=settings.cross_document_excerpt_chars,
        )
        return single, cross
