import io
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from univerify.upload.models import DocumentFile


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Certificate of Authenticity")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_file(sample_pdf_bytes: bytes) -> DocumentFile:
    return DocumentFile(
        filename="certificate.pdf",
        content=sample_pdf_bytes,
        content_type="application/pdf",
    )


@pytest.fixture()
def five_mb_pdf_file(sample_pdf_bytes: bytes) -> DocumentFile:
    """A 5 MB PDF: a real PDF padded with trailing bytes."""
    size = 5 * 1024 * 1024
    return DocumentFile(
        filename="thesis.pdf",
        content=sample_pdf_bytes + b"\0" * (size - len(sample_pdf_bytes)),
        content_type="application/pdf",
    )


@pytest.fixture()
def sample_pdf_on_disk(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "certificate.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path
