"""Last-resort text recovery used when structured parsers fail."""

import io
import re
import zipfile

from docaudit.extraction.base import BaseTextExtractor
from docaudit.extraction.exceptions import DocxExtractionError

_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E\n\r]")
_XML_TAG_RE = re.compile(r"<[^>]*>")
_XML_ENTITY_RE = re.compile(r"&[^;\s]+;")
_WHITESPACE_RE = re.compile(r"\s+")

DOCUMENT_XML_ENTRY = "word/document.xml"


def decode_printable(data: bytes) -> str:
    """Decode bytes as UTF-8, dropping invalid sequences and non-printable characters."""
    text = data.decode("utf-8", errors="ignore")
    return _NON_PRINTABLE_RE.sub("", text).strip()


def strip_markup(xml: str) -> str:
    text = _XML_TAG_RE.sub(" ", xml)
    text = _XML_ENTITY_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def unreadable_placeholder(file_name: str) -> str:
    return f"[Unable to extract text from file: {file_name}]"


class DocumentXmlReader(BaseTextExtractor):
    """Reads word/document.xml straight out of the .docx zip container."""

    name = "document-xml"

    def extract(self, data: bytes) -> str:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                xml = archive.read(DOCUMENT_XML_ENTRY).decode("utf-8", errors="ignore")
        except Exception as exc:
            raise DocxExtractionError(f"document.xml read failed: {exc}") from exc
        return strip_markup(xml)
