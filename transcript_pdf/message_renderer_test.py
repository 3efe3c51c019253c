import logging
from datetime import datetime

import pytest

from transcript_pdf.message_renderer import BODY_RENDERERS, MessageRenderer, fit_to_width
from transcript_pdf.models import MediaDescriptor, Message, MessageKind, ProcessingOptions
from transcript_pdf import settings

WHEN = datetime(2024, 3, 1, 9, 5, 7)


def _message(content="", kind=MessageKind.TEXT, sender="Alice", **kwargs):
    return Message(timestamp=WHEN.isoformat(), sender=sender, content=content, kind=kind, **kwargs)


def test_every_kind_has_a_body_renderer():
    assert set(BODY_RENDERERS) == set(MessageKind)


def test_empty_text_consumes_one_line(make_context):
    ctx = make_context()
    renderer = MessageRenderer(ctx)
    expected = settings.HEADER_LINE_HEIGHT + settings.CONTENT_LINE_HEIGHT + settings.MESSAGE_SPACING

    start_y = ctx.pager.y
    assert renderer.estimate_height(_message("")) == expected
    assert renderer.render(_message(""), WHEN) == expected
    assert start_y - ctx.pager.y == expected


def test_estimate_follows_wrapped_line_count(make_context):
    ctx = make_context()
    renderer = MessageRenderer(ctx)
    text = "word " * 400
    lines = BODY_RENDERERS[MessageKind.TEXT]._lines(ctx, _message(text))
    assert len(lines) > 1
    assert renderer.estimate_height(_message(text)) == (
        settings.HEADER_LINE_HEIGHT + len(lines) * settings.CONTENT_LINE_HEIGHT + settings.MESSAGE_SPACING
    )


def test_message_moves_whole_to_next_page(make_context):
    ctx = make_context()
    renderer = MessageRenderer(ctx)
    message = _message("one\ntwo\nthree")
    height = renderer.estimate_height(message)
    ctx.pager.skip(ctx.pager.remaining_height() - height + 1)

    renderer.render(message, WHEN)

    assert ctx.pager.page_number == 2
    assert ctx.pager.y == ctx.pager.top_y - height


def test_message_taller_than_a_page_is_split(make_context, caplog):
    ctx = make_context()
    renderer = MessageRenderer(ctx)
    message = _message("\n".join(f"line {i}" for i in range(80)))
    assert renderer.estimate_height(message) > ctx.pager.usable_height

    with caplog.at_level(logging.WARNING, logger="transcript_pdf.message_renderer"):
        renderer.render(message, WHEN)

    assert "splitting it across pages" in caplog.text
    assert ctx.pager.page_number == 2
    assert ctx.pager.y >= ctx.pager.bottom_margin


def test_header_text_and_colours(make_context):
    renderer = MessageRenderer(make_context())
    assert renderer.header_text(_message(), WHEN) == "[09:05:07] Alice:"
    assert renderer.header_color(_message(sender="Alice")) == settings.PRIMARY_COLOR
    assert renderer.header_color(_message(sender="Bob")) == settings.SECONDARY_COLOR


def test_header_respects_processing_options(make_context):
    options = ProcessingOptions(include_timestamps=False, highlight_senders=False)
    renderer = MessageRenderer(make_context(options=options))
    assert renderer.header_text(_message(), WHEN) == "Alice:"
    assert renderer.header_color(_message(sender="Alice")) == settings.SECONDARY_COLOR


@pytest.mark.parametrize(
    "kind, media_ref, duration, expected",
    [
        (MessageKind.VOICE, "/media/note.opus", 125, "Play Voice Message (note.opus, 2:05)"),
        (MessageKind.IMAGE, "/media/pic.jpg", None, "View Image: pic.jpg"),
        (MessageKind.ATTACHMENT, "/media/report.pdf", None, "View PDF: report.pdf"),
        (MessageKind.ATTACHMENT, None, None, "View File: unknown_file"),
    ],
)
def test_link_text(kind, media_ref, duration, expected):
    message = _message(kind=kind, media_ref=media_ref, duration=duration)
    assert BODY_RENDERERS[kind].link_text(message, None) == expected


def test_media_messages_use_one_link_line(make_context):
    descriptor = MediaDescriptor(id="m1", message_id=3, original_name="pic.jpg")
    ctx = make_context([descriptor])
    renderer = MessageRenderer(ctx)
    resolved = _message(kind=MessageKind.IMAGE, id=3)
    unresolved = _message(kind=MessageKind.IMAGE, id=4)

    expected = settings.HEADER_LINE_HEIGHT + settings.LINK_LINE_HEIGHT + settings.MESSAGE_SPACING
    assert renderer.render(resolved, WHEN) == expected
    assert renderer.render(unresolved, WHEN) == expected


def test_fit_to_width_shortens_long_lines(metrics):
    text = "x" * 500
    fitted = fit_to_width(metrics, text, "Times-Roman", 10, 100)
    assert fitted.endswith("...")
    assert metrics.string_width(fitted, "Times-Roman", 10) <= 100
    assert fit_to_width(metrics, "short", "Times-Roman", 10, 100) == "short"


def test_long_file_name_is_shortened_before_the_duration(make_context, metrics):
    ctx = make_context()
    name = "voice_note_recorded_on_holiday_" + "x" * 70 + ".opus"
    message = _message(kind=MessageKind.VOICE, media_ref=f"/media/{name}", duration=125)
    body = BODY_RENDERERS[MessageKind.VOICE]

    assert body.link_text(message, None) == f"Play Voice Message ({name}, 2:05)"
    fitted = body.fitted_text(ctx, message, None, "Times-Bold", settings.BODY_FONT_SIZE)
    assert fitted.startswith("Play Voice Message (voice_note_recorded_on_holiday_")
    assert fitted.endswith("..., 2:05)")
    assert metrics.string_width(fitted, "Times-Bold", settings.BODY_FONT_SIZE) <= ctx.content_width


def test_unavailable_suffix_survives_long_names(make_context):
    ctx = make_context()
    message = _message(kind=MessageKind.ATTACHMENT, media_ref="y" * 200 + ".pdf")
    body = BODY_RENDERERS[MessageKind.ATTACHMENT]
    fitted = body.fitted_text(ctx, message, None, "Times-Roman", settings.PLACEHOLDER_FONT_SIZE,
                              " [media unavailable]")
    assert fitted.startswith("View PDF: yyy")
    assert fitted.endswith("... [media unavailable]")
