"""
Text rendering utilities package.
Sanitization, word wrapping and single-line drawing for transcript pages.
"""

from .text_processing import PLACEHOLDER_CHAR, sanitize_text, split_paragraphs, replace_emojis_with_names
from .text_fitting import get_font_line_height, wrap_text_to_width, estimate_line_count
from .text_drawing import draw_string, draw_centred_string, truncate_text

__all__ = [
    # Text processing
    'PLACEHOLDER_CHAR',
    'sanitize_text',
    'split_paragraphs',
    'replace_emojis_with_names',
    # Text fitting
    'get_font_line_height',
    'wrap_text_to_width',
    'estimate_line_count',
    # Drawing
    'draw_string',
    'draw_centred_string',
    'truncate_text',
]
