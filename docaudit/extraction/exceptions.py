class ExtractionError(Exception):
    """Base exception for text extraction errors."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when a declared file type has no extraction route."""


class PdfExtractionError(ExtractionError):
    """Raised when a PDF parser cannot read a document."""


class DocxExtractionError(ExtractionError):
    """Raised when a Word document parser cannot read a document."""
