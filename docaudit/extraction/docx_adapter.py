import io

import docx

from docaudit.extraction.base import BaseTextExtractor
from docaudit.extraction.exceptions import DocxExtractionError


class PythonDocxAdapter(BaseTextExtractor):
    """Extracts paragraph and table text from Word documents using python-docx.

    An empty result is treated as a failure so the caller can try the raw
    XML reader instead.
    """

    name = "python-docx"

    def extract(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
            lines = [paragraph.text for paragraph in document.paragraphs]
            for table in document.tables:
                for row in table.rows:
                    lines.append("\t".join(cell.text for cell in row.cells))
        except Exception as exc:
            raise DocxExtractionError(f"python-docx extraction failed: {exc}") from exc

        text = "\n".join(line for line in lines if line.strip()).strip()
        if not text:
            raise DocxExtractionError("python-docx extraction returned no text")
        return text
