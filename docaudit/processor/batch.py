"""Batch processing: extract every document, then analyze them together.

Extraction failures are isolated per document. Cross-document analysis runs
once over the documents whose text was extracted; when fewer than two of
them have any text, each extracted document is analyzed on its own instead.
"""

import time
from dataclasses import dataclass, field

from docaudit.analysis.cross_analyzer import CrossDocumentAnalyzer
from docaudit.analysis.models import AnalyzedDocument
from docaudit.analysis.serialization import to_json_dict
from docaudit.database.models import AnalysisType
from docaudit.database.repositories.analysis_repository import AnalysisRepository
from docaudit.database.repositories.document_repository import DocumentRepository
from docaudit.database.repositories.finding_repository import FindingRepository
from docaudit.logging.logger import Log
from docaudit.processor.exceptions import InvalidStatusTransitionError, ProcessorError
from docaudit.processor.pipeline import PipelineContext
from docaudit.processor.processor import DocumentProcessor


@dataclass
class BatchResult:
    completed: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    analysis_id: int | None = None


class BatchProcessor:
    def __init__(
        self,
        *,
        extractor: DocumentProcessor,
        single_analysis: DocumentProcessor,
        cross_analyzer: CrossDocumentAnalyzer,
        doc_repo: DocumentRepository,
        analysis_repo: AnalysisRepository,
        finding_repo: FindingRepository,
    ) -> None:
        self._extractor = extractor
        self._single_analysis = single_analysis
        self._cross_analyzer = cross_analyzer
        self._doc_repo = doc_repo
        self._analysis_repo = analysis_repo
        self._finding_repo = finding_repo

    async def process(self, document_ids: list[int], job_id: int) -> BatchResult:
        """Process one upload batch.

        Raises:
            ProcessorError: if no document in the batch could be extracted.
        """
        Log.info(f"Processing batch of {len(document_ids)} documents for job {job_id}")
        result = BatchResult()
        extracted: list[PipelineContext] = []

        for document_id in document_ids:
            try:
                extracted.append(await self._extractor.process(document_id, job_id))
            except Exception as exc:
                Log.warning(f"Skipping document {document_id} in batch {job_id}: {exc}")
                result.failed.append(document_id)

        if not extracted:
            raise ProcessorError(f"No document in job {job_id} could be extracted")

        if sum(1 for context in extracted if _has_text(context)) < 2:
            return await self._analyze_individually(extracted, result)

        try:
            result.analysis_id = await self._analyze_together(extracted)
            for context in extracted:
                await self._doc_repo.mark_completed(context.document_id)
                result.completed.append(context.document_id)
        except Exception as exc:
            await self._fail_remaining(extracted, str(exc) or type(exc).__name__)
            raise

        Log.info(
            f"Batch {job_id} done: {len(result.completed)} completed, "
            f"{len(result.failed)} failed"
        )
        return result

    async def _analyze_together(self, extracted: list[PipelineContext]) -> int:
        documents = [self._analyzed_document(context) for context in extracted]
        primary_id = documents[0].id

        started = time.monotonic()
        analysis = await self._cross_analyzer.analyze(documents)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        analysis_id = await self._analysis_repo.create(
            primary_id,
            analysis_type=AnalysisType.CROSS_DOCUMENT,
            model=self._cross_analyzer.model,
        )
        await self._analysis_repo.complete(
            analysis_id,
            summary=analysis.summary,
            confidence_score=analysis.confidence_score,
            risk_level=analysis.risk_level,
            processing_time_ms=elapsed_ms,
            raw_response={"raw": analysis.raw_response, "analysis": to_json_dict(analysis)},
        )
        for contradiction in analysis.cross_document_contradictions:
            await self._finding_repo.create(analysis_id, primary_id, contradiction)
        Log.info(
            f"Stored {len(analysis.cross_document_contradictions)} cross-document findings "
            f"on document {primary_id}"
        )
        return analysis_id

    @staticmethod
    def _analyzed_document(context: PipelineContext) -> AnalyzedDocument:
        if context.document is None or context.extraction is None:
            raise ValueError("Batch document must be loaded and extracted before analysis")
        return AnalyzedDocument(
            id=context.document_id,
            name=context.document.original_name,
            file_type=context.document.file_type,
            text=context.extraction.text,
        )

    async def _fail_remaining(self, extracted: list[PipelineContext], error: str) -> None:
        for context in extracted:
            try:
                await self._doc_repo.mark_failed(context.document_id, error)
            except InvalidStatusTransitionError:
                Log.debug(f"Document {context.document_id} already terminal, left as is")
            else:
                Log.error(f"Document {context.document_id} marked as failed: {error}")

    async def _analyze_individually(
        self, extracted: list[PipelineContext], result: BatchResult
    ) -> BatchResult:
        Log.info("Fewer than 2 documents with text, analyzing batch documents individually")
        for context in extracted:
            try:
                context = await self._single_analysis.run(context)
            except Exception as exc:
                Log.warning(f"Analysis failed for document {context.document_id}: {exc}")
                result.failed.append(context.document_id)
                continue
            result.completed.append(context.document_id)
            result.analysis_id = context.analysis_id

        if not result.completed:
            raise ProcessorError("No document in batch could be analyzed")
        return result


def _has_text(context: PipelineContext) -> bool:
    return context.extraction is not None and bool(context.extraction.text.strip())
