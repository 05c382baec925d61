from abc import ABC, abstractmethod


class BaseTextExtractor(ABC):
    """Contract for all structured text extraction adapters."""

    name: str = "base"

    @abstractmethod
    def extract(self, data: bytes) -> str:
        """Extract plain text from raw file bytes.

        Args:
            data: Raw file content.

        Returns:
            Extracted text as a single normalized string.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """
