import io
from datetime import datetime

import pytest
from pypdf import PdfReader
from reportlab.pdfgen import canvas

from transcript_pdf.font_manager import FontMetrics
from transcript_pdf.media_resolver import MediaResolver
from transcript_pdf.message_renderer import RenderContext
from transcript_pdf.models import TranscriptMetadata
from transcript_pdf.pagination import PaginationManager
from transcript_pdf import settings


@pytest.fixture
def metrics():
    return FontMetrics()


@pytest.fixture
def metadata():
    return TranscriptMetadata(
        participants=["Alice", "Bob"],
        source_filename="chat_export.zip",
        source_hash="ab" * 32,
        generated_at=datetime(2024, 3, 1, 12, 0, 0),
    )


@pytest.fixture
def pdf_canvas():
    return canvas.Canvas(io.BytesIO(), pagesize=settings.PAGE_SIZE, invariant=1)


@pytest.fixture
def make_context(pdf_canvas, metrics):
    """Build a RenderContext over a fresh canvas for the given descriptors."""

    def _make(descriptors=(), participants=("Alice", "Bob"), options=None):
        pager = PaginationManager(pdf_canvas)
        return RenderContext(
            pdf_canvas,
            metrics,
            pager,
            MediaResolver(list(descriptors)),
            base_url="https://transcripts.example",
            participants=participants,
            options=options,
        )

    return _make


def read_pdf(pdf_bytes):
    return PdfReader(io.BytesIO(pdf_bytes))


def pdf_text(pdf_bytes):
    return "\n".join(page.extract_text() for page in read_pdf(pdf_bytes).pages)


def link_uris(pdf_bytes):
    uris = []
    for page in read_pdf(pdf_bytes).pages:
        annots = page.get("/Annots")
        if annots is None:
            continue
        for annot in annots.get_object():
            action = annot.get_object().get("/A")
            if action is None:
                continue
            action = action.get_object()
            if "/URI" in action:
                uris.append(action["/URI"])
    return uris
