"""
Media Files and Authentication Summary.

Closes every transcript with a table of all media files (id, original
name, type and SHA-256 hash) so each linked file can be checked against the
evidence package. Long tables continue on as many pages as needed with the
column header repeated.
"""

import logging

from .media_resolver import descriptor_type_label, UNKNOWN_FILE_NAME
from .message_renderer import fit_to_width
from .text_rendering import draw_centred_string, draw_string, truncate_text, wrap_text_to_width
from . import settings

_LOGGER = logging.getLogger(__name__)

SUMMARY_TITLE = "Media Files and Authentication Summary"
SUMMARY_INTRO = (
    "This section lists all media files referenced in this transcript. Each file is "
    "identified by its unique Media ID and SHA-256 hash for authentication purposes."
)
NO_MEDIA_TEXT = "No media files are present in this transcript."
HASH_UNAVAILABLE_TEXT = "[hash available in the companion manifest]"
LEGAL_NOTICE = (
    "Legal Authentication: The SHA-256 hashes listed above uniquely identify each "
    "media file at the time this transcript was generated. Any modification to a "
    "file changes its hash, so the integrity of every attachment can be verified "
    "independently by recomputing its hash and comparing it with this summary."
)

# Column x offsets relative to the left margin
ID_COLUMN = 0
NAME_COLUMN = 200
TYPE_COLUMN = 400
COLUMN_WIDTH = 190

MAX_NAME_CHARS = 40
TITLE_HEIGHT = 30
TABLE_HEADER_HEIGHT = 20
ROW_LINE_HEIGHT = 15
HASH_LINE_HEIGHT = 12
ROW_PADDING = 6
ROW_HEIGHT = ROW_LINE_HEIGHT + HASH_LINE_HEIGHT + ROW_PADDING
TABLE_FONT_SIZE = 9
SUMMARY_HASH_FONT_SIZE = 7


def _draw_paragraph(ctx, text, font_name, font_size, color, line_height=settings.CONTENT_LINE_HEIGHT):
    width = ctx.page_width - 2 * ctx.margin
    for line in wrap_text_to_width(text, width, font_name, font_size):
        _, y = ctx.pager.reserve(line_height)
        if line:
            draw_string(ctx.canvas, ctx.margin, y, line, font_name, font_size, color)


def _draw_table_header(ctx, continued=False):
    _, y = ctx.pager.reserve(TABLE_HEADER_HEIGHT)
    bold = ctx.metrics.bold
    suffix = " (continued)" if continued else ""
    draw_string(ctx.canvas, ctx.margin + ID_COLUMN, y, "MEDIA ID" + suffix,
                bold, TABLE_FONT_SIZE, settings.PRIMARY_COLOR)
    draw_string(ctx.canvas, ctx.margin + NAME_COLUMN, y, "ORIGINAL FILENAME",
                bold, TABLE_FONT_SIZE, settings.PRIMARY_COLOR)
    draw_string(ctx.canvas, ctx.margin + TYPE_COLUMN, y, "TYPE",
                bold, TABLE_FONT_SIZE, settings.PRIMARY_COLOR)

    rule_y = y - 6
    ctx.canvas.setStrokeColor(settings.RULE_COLOR)
    ctx.canvas.setLineWidth(0.5)
    ctx.canvas.line(ctx.margin, rule_y, ctx.page_width - ctx.margin, rule_y)


def _draw_row(ctx, descriptor, file_hash):
    _, y = ctx.pager.reserve(ROW_HEIGHT)
    y -= ROW_PADDING
    regular = ctx.metrics.regular
    name = truncate_text(descriptor.original_name or UNKNOWN_FILE_NAME, MAX_NAME_CHARS)

    for column, text in (
        (ID_COLUMN, descriptor.id),
        (NAME_COLUMN, name),
        (TYPE_COLUMN, descriptor_type_label(descriptor)),
    ):
        text = fit_to_width(ctx.metrics, text, regular, TABLE_FONT_SIZE, COLUMN_WIDTH)
        draw_string(ctx.canvas, ctx.margin + column, y, text,
                    regular, TABLE_FONT_SIZE, settings.TEXT_COLOR)

    hash_text = f"SHA-256: {file_hash}" if file_hash else HASH_UNAVAILABLE_TEXT
    draw_string(ctx.canvas, ctx.margin + ID_COLUMN, y - ROW_LINE_HEIGHT + 3, hash_text,
                regular, SUMMARY_HASH_FONT_SIZE, settings.META_COLOR)

    rule_y = y - ROW_LINE_HEIGHT - HASH_LINE_HEIGHT + 6
    ctx.canvas.setStrokeColor(settings.LIGHT_RULE_COLOR)
    ctx.canvas.setLineWidth(0.25)
    ctx.canvas.line(ctx.margin, rule_y, ctx.page_width - ctx.margin, rule_y)


def draw_media_summary(ctx, descriptors, hashes=None):
    """
    Draw the summary section starting on a fresh page.

    :param ctx: RenderContext
    :param descriptors: Distinct MediaDescriptors in display order
    :param hashes: Dict of descriptor id to SHA-256 hex digest for files
                   whose descriptor carries no stored hash
    :return: List of warnings recorded while drawing (table continuations)
    """
    hashes = hashes or {}
    warnings = []
    pager = ctx.pager

    pager.new_page()
    ctx.canvas.bookmarkPage(settings.SUMMARY_BOOKMARK)
    summary_page = pager.page_number

    _, y = pager.reserve(TITLE_HEIGHT)
    draw_centred_string(ctx.canvas, ctx.page_width / 2, y - 14, SUMMARY_TITLE,
                        ctx.metrics.bold, 14, settings.PRIMARY_COLOR)
    _draw_paragraph(ctx, SUMMARY_INTRO, ctx.metrics.regular, settings.BODY_FONT_SIZE, settings.TEXT_COLOR)
    pager.skip(settings.MESSAGE_SPACING)

    if not descriptors:
        _draw_paragraph(ctx, NO_MEDIA_TEXT, ctx.metrics.regular, settings.BODY_FONT_SIZE, settings.META_COLOR)
    else:
        def continue_table(_pager):
            warning = (
                f"Media summary continued on page {_pager.page_number} "
                f"({len(descriptors)} media files)"
            )
            _LOGGER.warning(warning)
            warnings.append(warning)
            _draw_table_header(ctx, continued=True)

        _draw_table_header(ctx)
        pager.on_page_start = continue_table
        try:
            for descriptor in descriptors:
                _draw_row(ctx, descriptor, descriptor.file_hash or hashes.get(descriptor.id))
        finally:
            pager.on_page_start = None

    pager.skip(settings.MESSAGE_SPACING)
    _draw_paragraph(ctx, LEGAL_NOTICE, ctx.metrics.regular, settings.PLACEHOLDER_FONT_SIZE,
                    settings.META_COLOR, line_height=12)

    _LOGGER.info(
        f"Media summary with {len(descriptors)} files on pages {summary_page}-{pager.page_number}"
    )
    return warnings
