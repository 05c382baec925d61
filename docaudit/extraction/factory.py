from docaudit.config.settings import Settings
from docaudit.extraction.base import BaseTextExtractor
from docaudit.extraction.chain import TextExtractionChain
from docaudit.extraction.docx_adapter import PythonDocxAdapter
from docaudit.extraction.fallbacks import DocumentXmlReader
from docaudit.extraction.pdfplumber_adapter import PdfPlumberAdapter
from docaudit.extraction.pymupdf_adapter import PyMuPdfAdapter


class ExtractionChainFactory:
    """Builds the extraction chain with the configured PDF engine first."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> TextExtractionChain:
        return TextExtractionChain(
            pdf_extractors=cls.pdf_extractors(settings.pdf_engine),
            word_extractors=[PythonDocxAdapter(), DocumentXmlReader()],
        )

    @classmethod
    def pdf_extractors(cls, engine: str) -> list[BaseTextExtractor]:
        """Return the primary engine followed by the remaining engines."""
        primary = engine.lower()
        if primary not in cls.PDF_ADAPTERS:
            raise ValueError(
                f"Unknown PDF engine '{primary}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        ordered = [primary, *(name for name in cls.PDF_ADAPTERS if name != primary)]
        return [cls.PDF_ADAPTERS[name]() for name in ordered]
