"""Best-effort text extraction.

Each structured file kind degrades through its parsers in order:

    PDF:  primary PDF engine -> secondary PDF engine -> printable-byte decode
    Word: python-docx -> word/document.xml reader
    Text: UTF-8 decode

and ends with a placeholder naming the file when nothing readable is left.
Only an unsupported declared type raises.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from docaudit.extraction.base import BaseTextExtractor
from docaudit.extraction.exceptions import ExtractionError
from docaudit.extraction.fallbacks import decode_printable, unreadable_placeholder
from docaudit.extraction.file_types import FileKind, resolve_kind
from docaudit.logging.logger import Log


class ExtractionMethod(StrEnum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    method: ExtractionMethod


class TextExtractionChain:
    """Runs the parser chain for a declared file type."""

    def __init__(
        self,
        *,
        pdf_extractors: list[BaseTextExtractor],
        word_extractors: list[BaseTextExtractor],
    ) -> None:
        self._pdf_extractors = pdf_extractors
        self._word_extractors = word_extractors

    async def extract(self, file_path: Path, declared_type: str) -> ExtractionResult:
        """Read a file and extract its text.

        The declared type is checked before any I/O so unsupported files are
        rejected immediately.

        Raises:
            UnsupportedFileTypeError: if the declared type is not supported.
            OSError: if the file cannot be read.
        """
        resolve_kind(declared_type, file_path.name)
        data = await asyncio.to_thread(file_path.read_bytes)
        return await asyncio.to_thread(self.extract_bytes, data, declared_type, file_path.name)

    def extract_bytes(self, data: bytes, declared_type: str, file_name: str) -> ExtractionResult:
        """Extract text from bytes already in memory; runs the parsers synchronously."""
        kind = resolve_kind(declared_type, file_name)
        return self._extract_kind(kind, data, file_name)

    def _extract_kind(self, kind: FileKind, data: bytes, file_name: str) -> ExtractionResult:
        if kind is FileKind.PDF:
            return self._run_chain(
                self._pdf_extractors, data, file_name, last_resort=decode_printable
            )
        if kind is FileKind.WORD:
            return self._run_chain(self._word_extractors, data, file_name)
        return ExtractionResult(
            text=data.decode("utf-8-sig", errors="replace"),
            method=ExtractionMethod.PRIMARY,
        )

    @staticmethod
    def _run_chain(
        extractors: list[BaseTextExtractor],
        data: bytes,
        file_name: str,
        last_resort: Callable[[bytes], str] | None = None,
    ) -> ExtractionResult:
        for position, extractor in enumerate(extractors):
            try:
                text = extractor.extract(data)
            except ExtractionError as exc:
                Log.warning(f"{extractor.name} failed for {file_name}: {exc}")
                continue
            method = ExtractionMethod.PRIMARY if position == 0 else ExtractionMethod.FALLBACK
            if method is ExtractionMethod.FALLBACK:
                Log.info(f"Extracted {file_name} with fallback parser {extractor.name}")
            return ExtractionResult(text=text, method=method)

        text = last_resort(data) if last_resort is not None else ""
        if not text:
            Log.warning(f"No readable text recovered from {file_name}, using placeholder")
            text = unreadable_placeholder(file_name)
        return ExtractionResult(text=text, method=ExtractionMethod.FALLBACK)
