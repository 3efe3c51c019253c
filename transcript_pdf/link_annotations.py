"""
Clickable link regions on transcript pages.
"""

import logging
from collections import namedtuple

from .text_rendering import sanitize_text

_LOGGER = logging.getLogger(__name__)

# Rectangle in absolute page coordinates, (x, y) is the lower-left corner
LinkBox = namedtuple("LinkBox", ["x", "y", "width", "height"])


def text_box(metrics, x, baseline_y, text, font_name, font_size):
    """
    Bounding box of a line of text drawn with its baseline at baseline_y.

    Uses the same sanitized string and font metrics as the drawing helpers so
    the clickable region lines up with the visible text.

    :param metrics: FontMetrics
    :return: LinkBox
    """
    safe_text = sanitize_text(text)
    width = metrics.string_width(safe_text, font_name, font_size)
    ascent, descent = metrics.ascent_descent(font_name, font_size)
    return LinkBox(x, baseline_y + descent, width, ascent - descent)


def _rect(box):
    return (box.x, box.y, box.x + box.width, box.y + box.height)


def add_url_link(canvas_obj, box, url):
    """
    Register a borderless URI link covering box on the current page.

    :param canvas_obj: ReportLab canvas
    :param box: LinkBox
    :param url: Target URL
    """
    canvas_obj.linkURL(url, _rect(box), relative=0, thickness=0)
    _LOGGER.debug(f"Link annotation {_rect(box)} -> {url}")


def add_internal_link(canvas_obj, box, destination):
    """
    Register a borderless link to a named destination (see canvas.bookmarkPage).

    :param canvas_obj: ReportLab canvas
    :param box: LinkBox
    :param destination: Bookmark name
    """
    canvas_obj.linkAbsolute("", destination, Rect=_rect(box), thickness=0)
