from docaudit.analysis.analyzer import DocumentAnalyzer
from docaudit.database.repositories.analysis_repository import AnalysisRepository
from docaudit.database.repositories.document_repository import DocumentRepository
from docaudit.database.repositories.finding_repository import FindingRepository
from docaudit.extraction.chain import TextExtractionChain
from docaudit.logging.logger import Log
from docaudit.processor.file_loader import FileLoader
from docaudit.processor.pipeline import PipelineContext, PipelineStep
from docaudit.processor.steps import (
    AnalyzeDocumentStep,
    CheckFileTypeStep,
    ExtractTextStep,
    LoadDocumentStep,
    MarkCompletedStep,
    MarkExtractingStep,
    PersistExtractedStep,
    PersistFindingsStep,
)


class DocumentProcessor:
    """Runs a sequence of pipeline steps for one document.

    Any exception marks the document as failed via ``failed_step`` and is
    re-raised to the caller.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    async def process(self, document_id: int, job_id: int) -> PipelineContext:
        Log.info(f"Processing document {document_id}", document_id=document_id, job_id=job_id)
        return await self.run(PipelineContext(document_id=document_id, job_id=job_id))

    async def run(self, context: PipelineContext) -> PipelineContext:
        """Continue the pipeline from an existing context."""
        try:
            for step in self._steps:
                context = await step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or type(exc).__name__
            await self._failed_step.run(context)
            raise
        return context


def extraction_steps(
    doc_repo: DocumentRepository,
    chain: TextExtractionChain,
    file_loader: FileLoader,
) -> list[PipelineStep]:
    """Steps taking a document from uploaded to analyzing."""
    return [
        LoadDocumentStep(doc_repo),
        CheckFileTypeStep(),
        MarkExtractingStep(doc_repo),
        ExtractTextStep(chain, file_loader),
        PersistExtractedStep(doc_repo),
    ]


def analysis_steps(
    doc_repo: DocumentRepository,
    analyzer: DocumentAnalyzer,
    analysis_repo: AnalysisRepository,
    finding_repo: FindingRepository,
) -> list[PipelineStep]:
    """Steps taking an extracted document from analyzing to completed."""
    return [
        AnalyzeDocumentStep(analyzer, analysis_repo),
        PersistFindingsStep(finding_repo),
        MarkCompletedStep(doc_repo),
    ]

