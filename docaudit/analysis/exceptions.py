class AnalysisError(Exception):
    """Raised when contradiction analysis cannot be performed."""


class InsufficientDocumentsError(AnalysisError):
    """Raised when cross-document analysis gets fewer than two documents with text."""
