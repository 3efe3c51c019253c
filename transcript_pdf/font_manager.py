"""
Font Manager for transcript rendering

Registers the text faces used by the layout engine and exposes the width and
height queries the wrap engine, the pagination manager and the link writer
all share. Only the built-in Times faces are needed by default; TrueType
faces can be configured through TRANSCRIPT_FONT_PATH and
TRANSCRIPT_BOLD_FONT_PATH.
"""

import os
import logging
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfbase import pdfmetrics

from . import settings

_LOGGER = logging.getLogger(__name__)


class FontLoadError(Exception):
    """A configured font could not be read or registered."""


def is_font_registered(font_name):
    """
    Check whether ReportLab already knows a font (built-in or registered).

    :param font_name: Font name
    :return: True if the font can be used on a canvas
    """
    try:
        pdfmetrics.getFont(font_name)
        return True
    except KeyError:
        return False


def register_font(font_name, font_path):
    """
    Register a TrueType font for use with ReportLab.

    :param font_name: Name to register the font as in ReportLab
    :param font_path: Path to the .ttf file
    :return: Registered font name
    :raises FontLoadError: if the file is missing or not a usable font
    """
    if is_font_registered(font_name):
        _LOGGER.debug(f"Font '{font_name}' is already registered")
        return font_name

    if not font_path or not os.path.exists(font_path):
        raise FontLoadError(f"Font file not found for '{font_name}': {font_path}")

    try:
        pdfmetrics.registerFont(TTFont(font_name, font_path))
    except Exception as e:
        raise FontLoadError(f"Failed to register font '{font_name}' from {font_path}: {e}") from e

    _LOGGER.info(f"Registered font '{font_name}' from: {font_path}")
    return font_name


class FontMetrics:
    """
    Read-only view over the regular and bold faces at arbitrary sizes.

    Safe to share between concurrent generation calls once constructed.
    """

    def __init__(self, regular=settings.DEFAULT_FONT, bold=settings.DEFAULT_BOLD_FONT):
        for font_name in (regular, bold):
            if not is_font_registered(font_name):
                raise FontLoadError(f"Font '{font_name}' is not registered")
        self.regular = regular
        self.bold = bold

    def string_width(self, text, font_name, font_size):
        return pdfmetrics.stringWidth(text, font_name, font_size)

    def ascent_descent(self, font_name, font_size):
        """
        :return: (ascent, descent) in points; descent is negative
        """
        return pdfmetrics.getAscentDescent(font_name, font_size)

    def line_height(self, font_name, font_size):
        ascent, descent = self.ascent_descent(font_name, font_size)
        return ascent - descent + 2  # Add 2pt padding


def load_transcript_fonts(font_path=None, bold_font_path=None):
    """
    Build the FontMetrics used for a transcript.

    Falls back to Times-Roman/Times-Bold when no TrueType paths are given.
    A configured path that cannot be loaded is fatal.

    :param font_path: Optional regular TrueType font path
    :param bold_font_path: Optional bold TrueType font path
    :return: FontMetrics
    """
    font_path = font_path or settings.FONT_PATH
    bold_font_path = bold_font_path or settings.BOLD_FONT_PATH

    regular = settings.DEFAULT_FONT
    bold = settings.DEFAULT_BOLD_FONT
    if font_path:
        regular = register_font("TranscriptFont", font_path)
        # Without a dedicated bold face the regular one is used for both
        bold = regular
    if bold_font_path:
        bold = register_font("TranscriptFont-Bold", bold_font_path)

    return FontMetrics(regular, bold)
