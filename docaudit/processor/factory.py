from pathlib import Path

from docaudit.analysis.factory import AnalyzerFactory
from docaudit.config.settings import Settings
from docaudit.database.repositories.analysis_repository import AnalysisRepository
from docaudit.database.repositories.document_repository import DocumentRepository
from docaudit.database.repositories.finding_repository import FindingRepository
from docaudit.extraction.factory import ExtractionChainFactory
from docaudit.processor.batch import BatchProcessor
from docaudit.processor.file_loader import FileLoader
from docaudit.processor.processor import DocumentProcessor, analysis_steps, extraction_steps
from docaudit.processor.steps import MarkFailedStep
from docaudit.reasoning.client_base import BaseReasoningClient


class ProcessorFactory:
    """Builds the single-document and batch processors with all adapters."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        files_root: Path | None = None,
        client: BaseReasoningClient | None = None,
    ) -> tuple[DocumentProcessor, BatchProcessor]:
        doc_repo = DocumentRepository()
        analysis_repo = AnalysisRepository()
        finding_repo = FindingRepository()
        file_loader = FileLoader(
            files_root=files_root if files_root is not None else Path(settings.files_root)
        )
        chain = ExtractionChainFactory.create(settings)
        analyzer, cross_analyzer = AnalyzerFactory.create(settings, client)
        failed_step = MarkFailedStep(doc_repo)

        extract = extraction_steps(doc_repo, chain, file_loader)
        analyze = analysis_steps(doc_repo, analyzer, analysis_repo, finding_repo)

        single = DocumentProcessor(extract + analyze, failed_step)
        batch = BatchProcessor(
            extractor=DocumentProcessor(extract, failed_step),
            single_analysis=DocumentProcessor(analyze, failed_step),
            cross_analyzer=cross_analyzer,
            doc_repo=doc_repo,
            analysis_repo=analysis_repo,
            finding_repo=finding_repo,
        )
        return single, batch
