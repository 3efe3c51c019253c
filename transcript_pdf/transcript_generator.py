"""
Chat transcript PDF generator.

Turns parsed chat messages and their media descriptors into a paginated PDF:
a header block on the first page, messages grouped under date separators,
clickable media links and a closing media authentication summary. Every
page carries a "Page i of N" footer.

Usage:
    transcript-pdf export.json transcript.pdf --base-url https://example.org
"""

import io
import os
import json
import logging
import argparse
import dataclasses
from datetime import datetime
from itertools import groupby

from reportlab.pdfgen import canvas

from .file_hash import resolve_descriptor_hashes
from .font_manager import load_transcript_fonts
from .link_annotations import add_internal_link, text_box
from .media_resolver import MediaResolver
from .message_renderer import MessageRenderer, RenderContext
from .models import (
    ProcessingOptions,
    TranscriptDocument,
    TranscriptMetadata,
    descriptor_from_dict,
    message_from_dict,
    options_from_dict,
)
from .pagination import PaginationManager
from .summary_page import draw_media_summary
from .text_rendering import draw_centred_string, draw_string, wrap_text_to_width
from . import settings

_LOGGER = logging.getLogger(__name__)

SUMMARY_LINK_TEXT = ">> See Media Files and Authentication Summary on the Last Page"
TITLE_HEIGHT = 35
SEPARATOR_HEIGHT = 20
HASH_LINE_HEIGHT = 12


class TranscriptGenerationError(Exception):
    """The transcript could not be serialized or written."""


def parse_timestamp(value):
    """
    Parse a message timestamp into a naive local datetime.

    Aware timestamps are converted to local time first so messages group by
    the reader's calendar date.

    :param value: datetime or ISO 8601 string (a trailing "Z" is accepted)
    :return: datetime, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        when = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            when = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if when.tzinfo is not None:
        try:
            when = when.astimezone().replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            # Outside the range the local clock can represent
            return None
    return when


def prepare_messages(messages):
    """
    Convert, validate and sort messages.

    Records with an unknown type or an unparsable timestamp are skipped with
    a warning. Sorting is stable, so messages sharing a timestamp keep their
    input order.

    :param messages: Iterable of Message or export-parser dicts
    :return: List of (datetime, Message) tuples in chronological order
    """
    prepared = []
    for item in messages:
        message = message_from_dict(item) if isinstance(item, dict) else item
        if message is None:
            continue
        when = parse_timestamp(message.timestamp)
        if when is None:
            _LOGGER.warning(
                f"Skipping message {message.id} with invalid timestamp: {message.timestamp!r}"
            )
            continue
        prepared.append((when, message))

    prepared.sort(key=lambda item: item[0])
    return prepared


def summarize_processing_options(options):
    """
    One-line description of which media kinds were processed.

    :param options: ProcessingOptions, a free-text summary or None
    :return: Summary text
    """
    if options is None:
        return "Default Processing"
    if isinstance(options, str):
        return options or "Default Processing"

    included = [
        label
        for enabled, label in (
            (options.include_voice_messages, "Voice"),
            (options.include_images, "Images"),
            (options.include_attachments, "Files"),
        )
        if enabled
    ]
    if not included:
        return "Text Messages Only"
    return f"Included: {', '.join(included)}"


def _draw_wrapped(ctx, x, text, font_name, font_size, color, line_height):
    for line in wrap_text_to_width(text, ctx.page_width - x - ctx.margin, font_name, font_size):
        _, y = ctx.pager.reserve(line_height)
        if line:
            draw_string(ctx.canvas, x, y, line, font_name, font_size, color)


def _draw_rule(ctx, color=settings.RULE_COLOR):
    _, y = ctx.pager.reserve(SEPARATOR_HEIGHT)
    rule_y = y - SEPARATOR_HEIGHT / 2
    ctx.canvas.setStrokeColor(color)
    ctx.canvas.setLineWidth(1)
    ctx.canvas.line(ctx.margin, rule_y, ctx.page_width - ctx.margin, rule_y)


def draw_transcript_header(ctx, metadata):
    """
    First-page header: title, metadata block, link to the summary and a rule.

    :param ctx: RenderContext
    :param metadata: TranscriptMetadata
    """
    _, y = ctx.pager.reserve(TITLE_HEIGHT)
    draw_centred_string(
        ctx.canvas, ctx.page_width / 2, y - 10, metadata.title or settings.DOCUMENT_TITLE,
        ctx.metrics.bold, settings.TITLE_FONT_SIZE, settings.PRIMARY_COLOR,
    )

    participants = ", ".join(metadata.participants) if metadata.participants else "Unknown"
    lines = [
        (f"Participants: {participants}", settings.META_FONT_SIZE, settings.CONTENT_LINE_HEIGHT),
        (
            f"Generated On: {metadata.generated_at:%d %B %Y, %H:%M:%S}",
            settings.META_FONT_SIZE,
            settings.CONTENT_LINE_HEIGHT,
        ),
    ]
    if metadata.source_filename:
        lines.append((
            f"Original Filename: {metadata.source_filename}",
            settings.META_FONT_SIZE,
            settings.CONTENT_LINE_HEIGHT,
        ))
    if metadata.source_hash:
        lines.append((
            f"File Hash (SHA256): {metadata.source_hash}",
            settings.HASH_FONT_SIZE,
            HASH_LINE_HEIGHT,
        ))
    lines.append((
        f"Processing Options: {summarize_processing_options(metadata.processing_options)}",
        settings.META_FONT_SIZE,
        settings.CONTENT_LINE_HEIGHT,
    ))

    for text, font_size, line_height in lines:
        _draw_wrapped(ctx, ctx.margin, text, ctx.metrics.regular, font_size,
                      settings.SECONDARY_COLOR, line_height)

    ctx.pager.skip(5)
    _, y = ctx.pager.reserve(settings.LINK_LINE_HEIGHT)
    link_text, _ = draw_string(
        ctx.canvas, ctx.margin, y, SUMMARY_LINK_TEXT,
        ctx.metrics.bold, settings.BODY_FONT_SIZE, settings.LINK_COLOR,
    )
    add_internal_link(
        ctx.canvas,
        text_box(ctx.metrics, ctx.margin, y, link_text, ctx.metrics.bold, settings.BODY_FONT_SIZE),
        settings.SUMMARY_BOOKMARK,
    )

    _draw_rule(ctx)


def draw_date_separator(ctx, day, next_height=0):
    """
    Centred "DD Month YYYY" line introducing the messages of one day.

    :param ctx: RenderContext
    :param day: datetime.date
    :param next_height: Height of the first message of the day; the separator
                        moves to a new page with it
    """
    pager = ctx.pager
    keep_with_next = min(settings.DATE_SEPARATOR_HEIGHT + next_height, pager.usable_height)
    if not pager.fits(keep_with_next) and pager.y < pager.top_y:
        pager.new_page()

    _, y = pager.reserve(settings.DATE_SEPARATOR_HEIGHT)
    draw_centred_string(
        ctx.canvas, ctx.page_width / 2, y - 15, f"{day:%d %B %Y}",
        ctx.metrics.bold, settings.BODY_FONT_SIZE, settings.META_COLOR,
    )


def _set_document_info(canvas_obj, metadata):
    canvas_obj.setTitle(f"Chat Transcript - {metadata.generated_at:%Y-%m-%d}")
    canvas_obj.setAuthor(settings.DOCUMENT_AUTHOR)
    canvas_obj.setCreator(settings.DOCUMENT_AUTHOR)
    if metadata.source_filename:
        canvas_obj.setSubject(f"Chat Export: {metadata.source_filename}")


def generate_transcript_pdf(
    messages,
    descriptors=None,
    metadata=None,
    media_base_url=None,
    media_dirs=None,
    hashes=None,
    fonts=None,
):
    """
    Lay out a complete transcript and serialize it.

    Everything is built per call; nothing is shared between documents except
    the registered fonts.

    :param messages: Iterable of Message or export-parser dicts
    :param descriptors: Iterable of MediaDescriptor or media-file dicts
    :param metadata: TranscriptMetadata (generated_at defaults to now)
    :param media_base_url: Base address for media proxy links
                           (default: TRANSCRIPT_MEDIA_BASE_URL)
    :param media_dirs: Directories searched to hash media without a stored hash
    :param hashes: Precomputed dict of descriptor id to hash; skips the search
    :param fonts: FontMetrics (default: load_transcript_fonts())
    :return: Sealed TranscriptDocument
    :raises FontLoadError: if a configured font cannot be loaded
    :raises TranscriptGenerationError: if the PDF cannot be serialized
    """
    metadata = metadata or TranscriptMetadata()
    if metadata.generated_at is None:
        metadata = dataclasses.replace(metadata, generated_at=datetime.now())
    descriptors = [
        descriptor_from_dict(d) if isinstance(d, dict) else d for d in (descriptors or [])
    ]
    descriptors = [d for d in descriptors if d is not None]
    fonts = fonts or load_transcript_fonts()
    base_url = media_base_url or settings.MEDIA_BASE_URL

    document = TranscriptDocument(metadata=metadata, descriptors=descriptors)
    resolver = MediaResolver(descriptors)
    document.warnings.extend(resolver.warnings)
    if hashes is None:
        hashes = resolve_descriptor_hashes(resolver.descriptors(), media_dirs)

    buffer = io.BytesIO()
    # invariant=1 keeps the output identical for identical inputs
    pdf_canvas = canvas.Canvas(buffer, pagesize=settings.PAGE_SIZE, invariant=1)
    _set_document_info(pdf_canvas, metadata)

    pager = PaginationManager(pdf_canvas, settings.PAGE_SIZE, footer_font=fonts.regular)
    options = metadata.processing_options
    ctx = RenderContext(
        pdf_canvas,
        fonts,
        pager,
        resolver,
        base_url=base_url,
        participants=metadata.participants,
        options=options if isinstance(options, ProcessingOptions) else None,
    )

    draw_transcript_header(ctx, metadata)

    prepared = prepare_messages(messages)
    _LOGGER.info(f"Rendering {len(prepared)} messages")
    renderer = MessageRenderer(ctx)
    for day, day_messages in groupby(prepared, key=lambda item: item[0].date()):
        day_messages = list(day_messages)
        _, first_height = renderer.measure(day_messages[0][1])
        draw_date_separator(ctx, day, first_height)
        for when, message in day_messages:
            renderer.render(message, when)

    document.warnings.extend(draw_media_summary(ctx, resolver.descriptors(), hashes))

    try:
        pdf_bytes, page_count = pager.finalize()
    except Exception as e:
        raise TranscriptGenerationError(f"Failed to serialize transcript PDF: {e}") from e

    document.seal(pdf_bytes, page_count)
    _LOGGER.info(f"Generated transcript with {page_count} pages ({len(pdf_bytes)} bytes)")
    return document


def write_transcript_pdf(document, output_path):
    """
    Write a sealed document to disk.

    :param document: TranscriptDocument
    :param output_path: Destination path
    :raises TranscriptGenerationError: if the document is not sealed or the
                                       file cannot be written
    """
    if not document.sealed:
        raise TranscriptGenerationError("Transcript has not been generated yet")

    try:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(document.pdf_bytes)
    except OSError as e:
        raise TranscriptGenerationError(f"Failed to write transcript to {output_path}: {e}") from e
    _LOGGER.info(f"Transcript saved to: {output_path}")


def _participants_from_messages(messages):
    participants = []
    for item in messages:
        sender = item.get("sender") if isinstance(item, dict) else getattr(item, "sender", None)
        if sender and sender not in participants:
            participants.append(sender)
    return participants


def load_export(input_path):
    """
    Read a parsed chat export from JSON.

    :param input_path: Path to a JSON file with "messages", "mediaFiles" and
                       optional "participants", "originalFilename",
                       "fileHash" and "processingOptions"
    :return: (messages, descriptors, metadata)
    """
    with open(input_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    messages = data.get("messages") or []
    descriptors = data.get("mediaFiles") or []
    metadata = TranscriptMetadata(
        participants=data.get("participants") or _participants_from_messages(messages),
        source_filename=data.get("originalFilename"),
        source_hash=data.get("fileHash"),
        processing_options=options_from_dict(data.get("processingOptions")),
        title=data.get("title"),
    )
    return messages, descriptors, metadata


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a paginated PDF transcript from a parsed chat export"
    )
    parser.add_argument("input_path", help="Path to the parsed chat export (JSON)")
    parser.add_argument("output_path", help="Path to output PDF file")
    parser.add_argument(
        "--base-url",
        default=None,
        help="Base address for media links (default: TRANSCRIPT_MEDIA_BASE_URL)",
    )
    parser.add_argument(
        "--media-dir",
        action="append",
        dest="media_dirs",
        help="Directory searched for media files without a stored hash (repeatable)",
    )
    parser.add_argument("--font", default=None, help="Regular TrueType font file")
    parser.add_argument("--bold-font", default=None, help="Bold TrueType font file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    messages, descriptors, metadata = load_export(args.input_path)
    fonts = load_transcript_fonts(args.font, args.bold_font)
    document = generate_transcript_pdf(
        messages,
        descriptors,
        metadata,
        media_base_url=args.base_url,
        media_dirs=args.media_dirs,
        fonts=fonts,
    )
    write_transcript_pdf(document, args.output_path)

    print(
        f"Transcript written to {args.output_path} ({document.page_count} pages, "
        f"{len(document.warnings)} warnings)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
