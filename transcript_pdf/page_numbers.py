import io
from pypdf import PdfReader, PdfWriter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from . import settings


def create_page_number_overlay(text, font_name, pagesize, margin=settings.MARGIN):
    """
    Build a one-page PDF in memory holding a centred footer text.
    """
    packet = io.BytesIO()
    can = canvas.Canvas(packet, pagesize=pagesize, invariant=1)

    font_size = settings.FOOTER_FONT_SIZE
    text_width = pdfmetrics.stringWidth(text, font_name, font_size)
    ascent, descent = pdfmetrics.getAscentDescent(font_name, font_size)
    text_height = ascent - descent

    can.setFont(font_name, font_size)
    can.setFillColor(settings.META_COLOR)
    # Centred horizontally and vertically inside the bottom margin
    can.drawString(pagesize[0] / 2 - text_width / 2, margin / 2 - text_height / 2, text)
    can.save()
    packet.seek(0)
    return PdfReader(packet)


def stamp_page_numbers(pdf_bytes, total_pages=None, font_name=settings.DEFAULT_FONT):
    """
    Stamp "Page i of N" onto every page of a finished PDF.

    :param pdf_bytes: Serialized PDF
    :param total_pages: N; defaults to the number of pages in the PDF
    :param font_name: Footer font
    :return: (stamped_pdf_bytes, page_count)
    """
    writer = PdfWriter(clone_from=PdfReader(io.BytesIO(pdf_bytes)))
    num_pages = len(writer.pages)
    if total_pages is None:
        total_pages = num_pages

    for idx, page in enumerate(writer.pages):
        overlay = create_page_number_overlay(
            f"Page {idx + 1} of {total_pages}",
            font_name,
            pagesize=(float(page.mediabox.width), float(page.mediabox.height)),
        )
        page.merge_page(overlay.pages[0])

    out = io.BytesIO()
    writer.write(out)
    return out.getvalue(), num_pages
