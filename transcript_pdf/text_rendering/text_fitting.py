"""
Text fitting utilities for transcript generation.
Handles word wrapping against real font metrics and line-count estimation.
"""

import logging
from reportlab.pdfbase import pdfmetrics
from .text_processing import sanitize_text, split_paragraphs

_LOGGER = logging.getLogger(__name__)


def get_font_line_height(font_name, font_size):
    """
    Calculate line height based on font-specific metrics.

    :param font_name: Name of the font
    :param font_size: Size of the font in points
    :return: Line height in points
    """
    try:
        font_info = pdfmetrics.getFont(font_name)
        font_ascent = font_info.face.ascent
        font_descent = font_info.face.descent

        # Calculate line height based on actual font metrics with small padding
        actual_font_height = font_ascent - font_descent  # descent is negative
        line_height = actual_font_height * font_size / 1000 + 2  # Add 2pt padding
        return line_height
    except (KeyError, AttributeError):
        # Fallback to simple calculation if font metrics not available
        return font_size * 1.2  # 120% of font size is a common line height


def _break_long_word(word, max_width, font_name, font_size):
    """
    Break a word that is wider than max_width into parts that fit.

    Every part holds at least one character so wrapping always progresses.
    """
    broken_parts = []
    current_part = ""

    for char in word:
        test_part = current_part + char
        if pdfmetrics.stringWidth(test_part, font_name, font_size) <= max_width:
            current_part = test_part
        elif current_part:
            broken_parts.append(current_part)
            current_part = char
        else:
            # Single character exceeds width - force it anyway
            broken_parts.append(char)

    if current_part:
        broken_parts.append(current_part)

    return broken_parts


def _wrap_paragraph(paragraph, max_width, font_name, font_size):
    words = paragraph.split()
    if not words:
        return [""]

    lines = []
    current_line = ""

    for word in words:
        test_line = f"{current_line} {word}" if current_line else word

        if pdfmetrics.stringWidth(test_line, font_name, font_size) <= max_width:
            current_line = test_line
            continue

        # Finalize what we have before starting with the overflowing word
        if current_line:
            lines.append(current_line)

        if pdfmetrics.stringWidth(word, font_name, font_size) > max_width:
            broken_parts = _break_long_word(word, max_width, font_name, font_size)
            lines.extend(broken_parts[:-1])
            # The last part becomes the start of the next line
            current_line = broken_parts[-1]
        else:
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines


def wrap_text_to_width(text, max_width, font_name, font_size):
    """
    Wrap text to fit within max_width using actual character measurements.

    Paragraphs separated by line breaks are wrapped one by one and empty
    paragraphs are kept as empty lines. The returned lines are sanitized, so
    they can be drawn exactly as measured.

    :param text: Text to wrap
    :param max_width: Maximum width in points
    :param font_name: Font name
    :param font_size: Font size
    :return: List of wrapped lines (never empty)
    """
    lines = []
    for paragraph in split_paragraphs(text):
        lines.extend(
            _wrap_paragraph(sanitize_text(paragraph), max_width, font_name, font_size)
        )
    return lines


def estimate_line_count(text, max_width, font_name, font_size):
    """
    Number of lines wrap_text_to_width produces for the same input.

    Used to predict block heights before drawing, so it delegates to the
    wrapper instead of approximating.

    :return: Line count, at least 1
    """
    return max(1, len(wrap_text_to_width(text, max_width, font_name, font_size)))
