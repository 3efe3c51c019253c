"""
Single-line drawing helpers.

Each helper sanitizes once and uses the same string for measuring and
drawing, so widths reported back to callers match what is on the page.
"""

from reportlab.pdfbase import pdfmetrics
from .text_processing import sanitize_text


def draw_string(canvas_obj, x, y, text, font_name, font_size, color):
    """
    Draw text left-aligned at (x, y).

    :return: (drawn_text, width) of the sanitized string
    """
    safe_text = sanitize_text(text)
    canvas_obj.setFont(font_name, font_size)
    canvas_obj.setFillColor(color)
    canvas_obj.drawString(x, y, safe_text)
    return safe_text, pdfmetrics.stringWidth(safe_text, font_name, font_size)


def draw_centred_string(canvas_obj, center_x, y, text, font_name, font_size, color):
    """
    Draw text horizontally centred on center_x.

    :return: (drawn_text, x, width) where x is the left edge of the text
    """
    safe_text = sanitize_text(text)
    width = pdfmetrics.stringWidth(safe_text, font_name, font_size)
    x = center_x - width / 2
    canvas_obj.setFont(font_name, font_size)
    canvas_obj.setFillColor(color)
    canvas_obj.drawString(x, y, safe_text)
    return safe_text, x, width


def truncate_text(text, max_chars, ellipsis="..."):
    """
    Shorten text to at most max_chars characters, ending with an ellipsis.

    :param text: Text to shorten
    :param max_chars: Maximum length of the result
    :return: Original text if short enough, otherwise the truncated text
    """
    if len(text) <= max_chars:
        return text
    return text[: max_chars - len(ellipsis)] + ellipsis
