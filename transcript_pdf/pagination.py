"""
Pagination for transcript pages.

The manager owns the write cursor. Callers ask it for room before drawing a
block; it starts a new page when the block would run into the bottom margin.
Page footers are stamped after the canvas is saved, once the total page
count is known.
"""

import logging
from enum import Enum

from .models import LayoutCursor
from .page_numbers import stamp_page_numbers
from . import settings

_LOGGER = logging.getLogger(__name__)


class PageState(Enum):
    ON_PAGE = "on_page"
    NEED_PAGE = "need_page"


class PaginationManager:
    """
    Vertical cursor over a ReportLab canvas.

    :param canvas_obj: ReportLab canvas (page 1 is the canvas' current page)
    :param page_size: (width, height) in points
    :param top_margin: Distance from the top edge to the first baseline
    :param bottom_margin: Space kept free at the bottom of every page
    :param footer_font: Font used for the "Page i of N" footers
    """

    def __init__(
        self,
        canvas_obj,
        page_size=settings.PAGE_SIZE,
        top_margin=settings.MARGIN,
        bottom_margin=settings.MARGIN,
        footer_font=settings.DEFAULT_FONT,
    ):
        self.canvas = canvas_obj
        self.page_width, self.page_height = page_size
        self.top_margin = top_margin
        self.bottom_margin = bottom_margin
        self.footer_font = footer_font
        self.cursor = LayoutCursor(page_number=1, y=self.top_y)
        self.state = PageState.ON_PAGE
        # Called after every page break, e.g. to repeat a table header
        self.on_page_start = None

    @property
    def top_y(self):
        return self.page_height - self.top_margin

    @property
    def usable_height(self):
        return self.top_y - self.bottom_margin

    @property
    def page_number(self):
        return self.cursor.page_number

    @property
    def y(self):
        return self.cursor.y

    def remaining_height(self):
        return self.cursor.y - self.bottom_margin

    def fits(self, height):
        return height <= self.remaining_height()

    def new_page(self):
        """Finish the current page and move the cursor to the top of the next."""
        self.canvas.showPage()
        self.cursor = LayoutCursor(page_number=self.cursor.page_number + 1, y=self.top_y)
        self.state = PageState.ON_PAGE
        _LOGGER.debug(f"Started page {self.cursor.page_number}")
        if self.on_page_start is not None:
            self.on_page_start(self)

    def reserve(self, height):
        """
        Claim height points below the cursor, breaking the page first if needed.

        A block taller than a whole page is placed at the top of a new page
        and overruns the bottom margin; callers split such blocks themselves.

        :param height: Block height in points
        :return: (page_number, y) where y is the top of the reserved block
        """
        if not self.fits(height):
            self.state = PageState.NEED_PAGE
            if self.cursor.y < self.top_y:
                self.new_page()
            if not self.fits(height):
                # Already at the top of an empty page, another break would not help
                _LOGGER.warning(
                    f"Block of {height:.1f}pt exceeds the usable page height "
                    f"({self.usable_height:.1f}pt)"
                )
            self.state = PageState.ON_PAGE

        page_number, y = self.cursor.page_number, self.cursor.y
        self.cursor.y -= height
        return page_number, y

    def skip(self, height):
        """Move the cursor down without a page-break check (spacing after a block)."""
        self.cursor.y -= height

    def finalize(self):
        """
        Serialize the canvas and stamp every page with "Page i of N".

        :return: (pdf_bytes, total_pages)
        """
        total_pages = self.cursor.page_number
        # Emits the pending page; the canvas must not be drawn on afterwards
        raw_pdf = self.canvas.getpdfdata()
        pdf_bytes, counted_pages = stamp_page_numbers(raw_pdf, total_pages, self.footer_font)
        if counted_pages != total_pages:
            _LOGGER.warning(
                f"Layout tracked {total_pages} pages but the document has {counted_pages}"
            )
        return pdf_bytes, counted_pages
