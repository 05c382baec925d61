from enum import StrEnum
from pathlib import PurePath

from docaudit.extraction.exceptions import UnsupportedFileTypeError


class FileKind(StrEnum):
    PDF = "pdf"
    WORD = "word"
    TEXT = "text"


_EXTENSIONS: dict[str, FileKind] = {
    "pdf": FileKind.PDF,
    "docx": FileKind.WORD,
    "doc": FileKind.WORD,
    "txt": FileKind.TEXT,
    "csv": FileKind.TEXT,
    "json": FileKind.TEXT,
    "xml": FileKind.TEXT,
    "html": FileKind.TEXT,
    "md": FileKind.TEXT,
}

_MIME_TYPES: dict[str, FileKind] = {
    "application/pdf": FileKind.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileKind.WORD,
    "application/msword": FileKind.WORD,
    "application/json": FileKind.TEXT,
    "application/xml": FileKind.TEXT,
}

_GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream"})


def _extension_of(file_name: str | None) -> str:
    if not file_name:
        return ""
    return PurePath(file_name).suffix.lower().lstrip(".")


def resolve_kind(declared_type: str, file_name: str | None = None) -> FileKind:
    """Map a declared extension or MIME type onto an extraction route.

    Generic MIME types fall back to the extension of ``file_name``.

    Raises:
        UnsupportedFileTypeError: if no route exists for the declared type.
    """
    declared = (declared_type or "").strip().lower()

    if declared in _GENERIC_MIME_TYPES:
        kind = _EXTENSIONS.get(_extension_of(file_name))
    elif "/" in declared:
        kind = _MIME_TYPES.get(declared)
        if kind is None and declared.startswith("text/"):
            kind = FileKind.TEXT
    else:
        kind = _EXTENSIONS.get(declared.lstrip("."))

    if kind is None:
        raise UnsupportedFileTypeError(f"Unsupported file type: {declared_type or 'unknown'}")
    return kind


def is_supported(declared_type: str, file_name: str | None = None) -> bool:
    try:
        resolve_kind(declared_type, file_name)
    except UnsupportedFileTypeError:
        return False
    return True
