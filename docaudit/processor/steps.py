import time

from docaudit.analysis.analyzer import DocumentAnalyzer
from docaudit.analysis.models import DocumentContext
from docaudit.analysis.serialization import to_json_dict
from docaudit.database.models import AnalysisType, DocumentRecord, ProcessingStatus
from docaudit.database.repositories.analysis_repository import AnalysisRepository
from docaudit.database.repositories.document_repository import DocumentRepository
from docaudit.database.repositories.finding_repository import FindingRepository
from docaudit.extraction.chain import TextExtractionChain
from docaudit.extraction.file_types import resolve_kind
from docaudit.logging.logger import Log
from docaudit.processor.exceptions import FileReadError, InvalidStatusTransitionError
from docaudit.processor.file_loader import FileLoader
from docaudit.processor.pipeline import PipelineContext, PipelineStep
from docaudit.processor.state import ensure_transition, is_terminal


def _require_document(context: PipelineContext) -> DocumentRecord:
    if context.document is None:
        raise ValueError("PipelineContext.document must be set before this step")
    return context.document


class LoadDocumentStep(PipelineStep):
    """Loads the document row; only uploaded documents may enter the pipeline."""

    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.document = await self._doc_repo.find_by_id(context.document_id)
        ensure_transition(context.document.processing_status, ProcessingStatus.EXTRACTING)
        return context


class CheckFileTypeStep(PipelineStep):
    """Rejects unsupported files while the document is still uploaded."""

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        kind = resolve_kind(document.file_type, document.original_name)
        Log.info(f"Document {context.document_id} routed to {kind} extraction")
        return context


class MarkExtractingStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._doc_repo.mark_extracting(context.document_id)
        Log.info(f"Document {context.document_id} marked as extracting")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, chain: TextExtractionChain, file_loader: FileLoader) -> None:
        self._chain = chain
        self._file_loader = file_loader

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        try:
            context.file_path = self._file_loader.resolve(document)
            context.extraction = await self._chain.extract(
                context.file_path, document.file_type
            )
        except OSError as exc:
            raise FileReadError(f"Cannot read file for document {document.id}: {exc}") from exc
        Log.info(
            f"Extracted {len(context.extraction.text)} chars from document "
            f"{context.document_id} ({context.extraction.method})"
        )
        return context


class PersistExtractedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before persist")
        await self._doc_repo.mark_extracted(
            context.document_id,
            context.extraction.text,
            context.extraction.method,
        )
        context.text_extracted = True
        Log.info(f"Document {context.document_id} marked as analyzing")
        return context


class AnalyzeDocumentStep(PipelineStep):
    def __init__(self, analyzer: DocumentAnalyzer, analysis_repo: AnalysisRepository) -> None:
        self._analyzer = analyzer
        self._analysis_repo = analysis_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before analysis")

        started = time.monotonic()
        analysis = await self._analyzer.analyze(
            context.extraction.text,
            DocumentContext(
                file_name=document.original_name,
                file_type=document.file_type,
                user_id=document.user_id,
            ),
        )
        elapsed_ms = int((time.monotonic() - started) * 1000)

        analysis_id = await self._analysis_repo.create(
            context.document_id,
            analysis_type=AnalysisType.SINGLE,
            model=self._analyzer.model,
        )
        await self._analysis_repo.complete(
            analysis_id,
            summary=analysis.summary,
            confidence_score=analysis.confidence_score,
            risk_level=analysis.risk_level,
            processing_time_ms=elapsed_ms,
            raw_response={"raw": analysis.raw_response, "analysis": to_json_dict(analysis)},
        )
        context.analysis = analysis
        context.analysis_id = analysis_id
        return context


class PersistFindingsStep(PipelineStep):
    def __init__(self, finding_repo: FindingRepository) -> None:
        self._finding_repo = finding_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.analysis is None or context.analysis_id is None:
            raise ValueError("PipelineContext.analysis must be set before persisting findings")
        for contradiction in context.analysis.contradictions:
            await self._finding_repo.create(
                context.analysis_id, context.document_id, contradiction
            )
        Log.info(
            f"Stored {len(context.analysis.contradictions)} findings for document "
            f"{context.document_id}"
        )
        return context


class MarkCompletedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._doc_repo.mark_completed(context.document_id)
        Log.info(f"Document {context.document_id} marked as completed")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is not None and is_terminal(context.document.processing_status):
            Log.warning(
                f"Document {context.document_id} was already "
                f"{context.document.processing_status}, status left unchanged"
            )
            return context
        try:
            await self._doc_repo.mark_failed(
                context.document_id,
                context.error_message,
                extraction_failed=not context.text_extracted,
            )
        except InvalidStatusTransitionError as exc:
            Log.warning(f"Document {context.document_id} not marked as failed: {exc}")
            return context
        Log.error(f"Document {context.document_id} marked as failed: {context.error_message}")
        return context
