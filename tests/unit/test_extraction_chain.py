from pathlib import Path
from unittest.mock import MagicMock

import pytest

from docaudit.extraction.base import BaseTextExtractor
from docaudit.extraction.chain import ExtractionMethod, ExtractionResult, TextExtractionChain
from docaudit.extraction.docx_adapter import PythonDocxAdapter
from docaudit.extraction.exceptions import PdfExtractionError, UnsupportedFileTypeError
from docaudit.extraction.factory import ExtractionChainFactory
from docaudit.extraction.fallbacks import DocumentXmlReader


def _extractor(name: str, result: str | Exception) -> MagicMock:
    extractor = MagicMock(spec=BaseTextExtractor)
    extractor.name = name
    if isinstance(result, Exception):
        extractor.extract.side_effect = result
    else:
        extractor.extract.return_value = result
    return extractor


def _real_chain() -> TextExtractionChain:
    return TextExtractionChain(
        pdf_extractors=ExtractionChainFactory.pdf_extractors("pdfplumber"),
        word_extractors=[PythonDocxAdapter(), DocumentXmlReader()],
    )


class TestPdfChain:
    def test_primary_success(self) -> None:
        primary = _extractor("primary", "contract text")
        secondary = _extractor("secondary", "unused")
        chain = TextExtractionChain(pdf_extractors=[primary, secondary], word_extractors=[])

        result = chain.extract_bytes(b"%PDF", "pdf", "a.pdf")

        assert result.text == "contract text"
        assert result.method is ExtractionMethod.PRIMARY
        secondary.extract.assert_not_called()

    def test_secondary_engine_is_fallback(self) -> None:
        primary = _extractor("primary", PdfExtractionError("broken xref"))
        secondary = _extractor("secondary", "recovered")
        chain = TextExtractionChain(pdf_extractors=[primary, secondary], word_extractors=[])

        result = chain.extract_bytes(b"%PDF", "application/pdf", "a.pdf")

        assert result.text == "recovered"
        assert result.method is ExtractionMethod.FALLBACK

    def test_primary_empty_text_is_accepted(self) -> None:
        primary = _extractor("primary", "")
        secondary = _extractor("secondary", "unused")
        chain = TextExtractionChain(pdf_extractors=[primary, secondary], word_extractors=[])

        result = chain.extract_bytes(b"%PDF", "pdf", "blank.pdf")

        assert result == ExtractionResult(text="", method=ExtractionMethod.PRIMARY)

    def test_raw_decode_after_all_parsers_fail(self) -> None:
        failing = _extractor("primary", PdfExtractionError("encrypted"))
        chain = TextExtractionChain(pdf_extractors=[failing], word_extractors=[])

        result = chain.extract_bytes(b"Invoice total \xff\xfe$1,200", "pdf", "a.pdf")

        assert result.text == "Invoice total $1,200"
        assert result.method is ExtractionMethod.FALLBACK

    def test_placeholder_when_nothing_readable(self) -> None:
        failing = _extractor("primary", PdfExtractionError("encrypted"))
        chain = TextExtractionChain(pdf_extractors=[failing], word_extractors=[])

        result = chain.extract_bytes(b"\xff\xfe\x00", "pdf", "scan.pdf")

        assert result.text == "[Unable to extract text from file: scan.pdf]"
        assert result.method is ExtractionMethod.FALLBACK


class TestWordChain:
    def test_python_docx_primary(self, sample_docx_bytes: bytes) -> None:
        result = _real_chain().extract_bytes(sample_docx_bytes, "docx", "a.docx")
        assert "Master services agreement" in result.text
        assert result.method is ExtractionMethod.PRIMARY

    def test_falls_back_to_document_xml(self, xml_only_docx_bytes: bytes) -> None:
        result = _real_chain().extract_bytes(xml_only_docx_bytes, "docx", "a.docx")
        assert result.text == "Budget scope Due 03/15/2024"
        assert result.method is ExtractionMethod.FALLBACK

    def test_placeholder_for_garbage(self) -> None:
        result = _real_chain().extract_bytes(b"garbage", "doc", "old.doc")
        assert result.text == "[Unable to extract text from file: old.doc]"

    def test_placeholder_for_corrupt_zip_member(self, corrupt_docx_bytes: bytes) -> None:
        result = _real_chain().extract_bytes(corrupt_docx_bytes, "docx", "broken.docx")
        assert result.text == "[Unable to extract text from file: broken.docx]"
        assert result.method is ExtractionMethod.FALLBACK


class TestTextChain:
    def test_decodes_utf8(self) -> None:
        result = _real_chain().extract_bytes("Café $5".encode(), "text/plain", "a.txt")
        assert result.text == "Café $5"
        assert result.method is ExtractionMethod.PRIMARY

    def test_strips_bom(self) -> None:
        result = _real_chain().extract_bytes(b"\xef\xbb\xbfhello", "md", "a.md")
        assert result.text == "hello"


class TestNeverRaisesForSupportedTypes:
    @pytest.mark.parametrize("declared", ["pdf", "docx", "doc", "txt", "json"])
    @pytest.mark.parametrize("data", [b"", b"\x00\x01\x02", b"%PDF-1.7 truncated"])
    def test_returns_string(self, declared: str, data: bytes) -> None:
        result = _real_chain().extract_bytes(data, declared, f"file.{declared}")
        assert isinstance(result.text, str)
        assert result.method in (ExtractionMethod.PRIMARY, ExtractionMethod.FALLBACK)


class TestAsyncExtract:
    @pytest.mark.asyncio
    async def test_reads_file_from_disk(self, tmp_path: Path, sample_pdf_bytes: bytes) -> None:
        path = tmp_path / "report.pdf"
        path.write_bytes(sample_pdf_bytes)

        result = await _real_chain().extract(path, "application/pdf")

        assert "Hello PDF World" in result.text
        assert result.method is ExtractionMethod.PRIMARY

    @pytest.mark.asyncio
    async def test_rejects_exe_before_reading(self, tmp_path: Path) -> None:
        missing = tmp_path / "setup.exe"

        with pytest.raises(UnsupportedFileTypeError):
            await _real_chain().extract(missing, "exe")

    @pytest.mark.asyncio
    async def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            await _real_chain().extract(tmp_path / "gone.pdf", "pdf")


class TestExtractionChainFactory:
    def test_configured_engine_comes_first(self) -> None:
        names = [e.name for e in ExtractionChainFactory.pdf_extractors("pymupdf")]
        assert names == ["pymupdf", "pdfplumber"]

    def test_is_case_insensitive(self) -> None:
        names = [e.name for e in ExtractionChainFactory.pdf_extractors("PdfPlumber")]
        assert names == ["pdfplumber", "pymupdf"]

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            ExtractionChainFactory.pdf_extractors("unknown")

    def test_create_uses_settings(self) -> None:
        settings = MagicMock(pdf_engine="pymupdf")
        chain = ExtractionChainFactory.create(settings)
        assert isinstance(chain, TextExtractionChain)
