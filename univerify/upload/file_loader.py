import mimetypes
from pathlib import Path

from univerify.upload.models import DocumentFile

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def load_document_file(path: Path, content_type: str | None = None) -> DocumentFile:
    """Read a file from disk into a DocumentFile.

    The MIME type is guessed from the file extension unless given explicitly.

    Raises:
        FileNotFoundError: if the path does not point to a file.
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    if content_type is None:
        guessed, _ = mimetypes.guess_type(path.name)
        content_type = guessed or DEFAULT_CONTENT_TYPE
    return DocumentFile(
        filename=path.name,
        content=path.read_bytes(),
        content_type=content_type,
    )
