class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class InvalidStatusTransitionError(ProcessorError):
    """Raised when a status write would move a document backwards."""


class FileReadError(ProcessorError):
    """Raised when a file cannot be read from disk."""
