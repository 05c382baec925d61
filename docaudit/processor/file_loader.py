from pathlib import Path

from docaudit.database.models import DocumentRecord


class FileLoader:
    """Resolves the filesystem path of an uploaded document."""

    FILES_ROOT = Path("/app/uploads")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def resolve(self, document: DocumentRecord) -> Path:
        """Absolute path of the document's file.

        Relative storage paths are resolved against the files root.

        Raises:
            FileNotFoundError: if the file does not exist at the resolved path.
        """
        path = self.path_for(document)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path

    def path_for(self, document: DocumentRecord) -> Path:
        path = Path(document.file_path)
        return path if path.is_absolute() else self._files_root / path
