"""
Message rendering for transcript pages.

Each message is a bold "[time] sender:" header followed by a body. Bodies
are drawn by one renderer per message kind; every renderer reports the
height it needs before anything is drawn so the pagination manager can
keep a message on one page.
"""

import logging

from .link_annotations import add_url_link, text_box
from .media_resolver import (
    format_duration,
    media_display_name,
    message_media_label,
    resolve_link_target,
)
from .models import MessageKind, ProcessingOptions
from .text_rendering import draw_string, sanitize_text, truncate_text, wrap_text_to_width
from . import settings

_LOGGER = logging.getLogger(__name__)

UNAVAILABLE_SUFFIX = " [media unavailable]"


class RenderContext:
    """
    Everything a renderer needs for one document.

    Created per generation call and never shared between documents.
    """

    def __init__(
        self,
        canvas_obj,
        metrics,
        pager,
        resolver,
        base_url=settings.MEDIA_BASE_URL,
        participants=None,
        options=None,
    ):
        self.canvas = canvas_obj
        self.metrics = metrics
        self.pager = pager
        self.resolver = resolver
        self.base_url = base_url
        self.participants = list(participants or [])
        self.options = options if isinstance(options, ProcessingOptions) else ProcessingOptions()
        self.page_width = pager.page_width
        self.margin = settings.MARGIN
        self.content_x = self.margin + settings.CONTENT_INDENT
        self.content_width = self.page_width - self.content_x - self.margin

    @property
    def first_participant(self):
        return self.participants[0] if self.participants else None


def fit_to_width(metrics, text, font_name, font_size, max_width):
    """
    Shorten a single line with an ellipsis until it fits max_width.

    :return: Sanitized text that fits (or cannot be shortened further)
    """
    text = sanitize_text(text)
    max_chars = len(text)
    fitted = text
    while max_chars > 4 and metrics.string_width(fitted, font_name, font_size) > max_width:
        max_chars -= 1
        fitted = truncate_text(text, max_chars)
    return fitted


class _BlockCursor:
    """Hands out line positions inside an already reserved block."""

    def __init__(self, top_y):
        self.y = top_y

    def place(self, height):
        line_y = self.y
        self.y -= height
        return line_y


class BodyRenderer:
    """Draws the body of one kind of message."""

    def estimate_height(self, ctx, message, media):
        raise NotImplementedError

    def render(self, ctx, message, media, place):
        """
        Draw the body.

        :param place: Callable taking a line height and returning the
                      baseline y for that line
        :return: Height consumed in points
        """
        raise NotImplementedError


class TextBody(BodyRenderer):
    font_size = settings.BODY_FONT_SIZE
    line_height = settings.CONTENT_LINE_HEIGHT

    def _lines(self, ctx, message):
        return wrap_text_to_width(
            message.content, ctx.content_width, ctx.metrics.regular, self.font_size
        )

    def estimate_height(self, ctx, message, media):
        return len(self._lines(ctx, message)) * self.line_height

    def render(self, ctx, message, media, place):
        lines = self._lines(ctx, message)
        for line in lines:
            y = place(self.line_height)
            if line:
                draw_string(
                    ctx.canvas, ctx.content_x, y, line,
                    ctx.metrics.regular, self.font_size, settings.TEXT_COLOR,
                )
        return len(lines) * self.line_height


class MediaLinkBody(BodyRenderer):
    """Single link line for image and attachment messages."""

    font_size = settings.BODY_FONT_SIZE
    line_height = settings.LINK_LINE_HEIGHT

    def label_parts(self, message, media):
        """
        Split the link label around the file name.

        :return: (prefix, name, suffix); only the name is shortened to fit
        """
        name = media_display_name(message, media)
        return f"View {message_media_label(message, name)}: ", name, ""

    def link_text(self, message, media):
        return "".join(self.label_parts(message, media))

    def fitted_text(self, ctx, message, media, font_name, font_size, extra_suffix=""):
        """
        Label that fits the content width, shortening only the file name.

        :param extra_suffix: Text appended after the label (kept whole)
        :return: Sanitized label
        """
        prefix, name, suffix = self.label_parts(message, media)
        prefix = sanitize_text(prefix)
        suffix = sanitize_text(suffix + extra_suffix)
        fixed_width = ctx.metrics.string_width(prefix + suffix, font_name, font_size)
        name = fit_to_width(ctx.metrics, name, font_name, font_size, ctx.content_width - fixed_width)
        return prefix + name + suffix

    def estimate_height(self, ctx, message, media):
        return self.line_height

    def render(self, ctx, message, media, place):
        y = place(self.line_height)
        target = resolve_link_target(message, media, ctx.base_url)

        if target.url is None:
            # Keep the message visible even though nothing can be linked
            font_name = ctx.metrics.regular
            font_size = settings.PLACEHOLDER_FONT_SIZE
            text = self.fitted_text(ctx, message, media, font_name, font_size, UNAVAILABLE_SUFFIX)
            draw_string(ctx.canvas, ctx.content_x, y, text, font_name, font_size, settings.WARNING_COLOR)
            return self.line_height

        font_name = ctx.metrics.bold
        text = self.fitted_text(ctx, message, media, font_name, self.font_size)
        draw_string(ctx.canvas, ctx.content_x, y, text, font_name, self.font_size, settings.LINK_COLOR)
        add_url_link(
            ctx.canvas,
            text_box(ctx.metrics, ctx.content_x, y, text, font_name, self.font_size),
            target.url,
        )
        return self.line_height


class VoiceBody(MediaLinkBody):
    def label_parts(self, message, media):
        name = media_display_name(message, media)
        return "Play Voice Message (", name, f", {format_duration(message.duration)})"


BODY_RENDERERS = {
    MessageKind.TEXT: TextBody(),
    MessageKind.VOICE: VoiceBody(),
    MessageKind.IMAGE: MediaLinkBody(),
    MessageKind.ATTACHMENT: MediaLinkBody(),
}

_missing_kinds = set(MessageKind) - set(BODY_RENDERERS)
if _missing_kinds:
    raise RuntimeError(f"No body renderer for message kinds: {_missing_kinds}")


class MessageRenderer:
    """Draws messages at the pagination cursor."""

    def __init__(self, ctx):
        self.ctx = ctx

    def header_text(self, message, when):
        sender = message.sender or "Unknown Sender"
        if self.ctx.options.include_timestamps and when is not None:
            return f"[{when:%H:%M:%S}] {sender}:"
        return f"{sender}:"

    def header_color(self, message):
        if self.ctx.options.highlight_senders and message.sender == self.ctx.first_participant:
            return settings.PRIMARY_COLOR
        return settings.SECONDARY_COLOR

    def estimate_height(self, message, media=None):
        """
        Height of header, body and trailing spacing.

        :param message: Message
        :param media: Resolved MediaDescriptor or None
        :return: Height in points
        """
        body = BODY_RENDERERS[message.kind]
        return (
            settings.HEADER_LINE_HEIGHT
            + body.estimate_height(self.ctx, message, media)
            + settings.MESSAGE_SPACING
        )

    def measure(self, message):
        """
        Resolve the media of a message and estimate its block height.

        :return: (MediaDescriptor or None, height in points)
        """
        media = None
        if message.kind is not MessageKind.TEXT:
            media = self.ctx.resolver.for_message(message)
        return media, self.estimate_height(message, media)

    def _draw_header(self, message, when, y):
        font_name = self.ctx.metrics.bold
        text = fit_to_width(
            self.ctx.metrics,
            self.header_text(message, when),
            font_name,
            settings.BODY_FONT_SIZE,
            self.ctx.page_width - 2 * self.ctx.margin,
        )
        draw_string(
            self.ctx.canvas, self.ctx.margin, y, text,
            font_name, settings.BODY_FONT_SIZE, self.header_color(message),
        )

    def render(self, message, when=None):
        """
        Draw one message, moving it whole to the next page if it does not fit.

        Only a message taller than a complete page is split across pages.

        :param message: Message
        :param when: Parsed timestamp (datetime) shown in the header
        :return: Height consumed in points
        """
        ctx = self.ctx
        media, height = self.measure(message)
        body = BODY_RENDERERS[message.kind]

        if height <= ctx.pager.usable_height:
            _, top_y = ctx.pager.reserve(height)
            block = _BlockCursor(top_y)
            self._draw_header(message, when, block.place(settings.HEADER_LINE_HEIGHT))
            body.render(ctx, message, media, block.place)
            return height

        _LOGGER.warning(
            f"Message {message.id} from {message.sender} needs {height:.0f}pt, more than a "
            f"full page; splitting it across pages"
        )
        _, header_y = ctx.pager.reserve(settings.HEADER_LINE_HEIGHT)
        self._draw_header(message, when, header_y)
        body.render(ctx, message, media, lambda h: ctx.pager.reserve(h)[1])
        ctx.pager.skip(settings.MESSAGE_SPACING)
        return height
