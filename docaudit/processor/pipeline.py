from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from docaudit.analysis.models import ContradictionAnalysis
from docaudit.database.models import DocumentRecord
from docaudit.extraction.chain import ExtractionResult


@dataclass(slots=True)
class PipelineContext:
    document_id: int
    job_id: int
    document: DocumentRecord | None = None
    file_path: Path | None = None
    extraction: ExtractionResult | None = None
    text_extracted: bool = False
    analysis: ContradictionAnalysis | None = None
    analysis_id: int | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
