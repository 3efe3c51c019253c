import logging

import pytest

from transcript_pdf.media_resolver import (
    MediaResolver,
    attachment_label,
    descriptor_type_label,
    format_duration,
    media_display_name,
    parse_proxy_media_id,
    resolve_link_target,
)
from transcript_pdf.models import MediaDescriptor, MediaKind, Message, MessageKind

BASE_URL = "https://transcripts.example"


def _image_message(message_id=1, media_ref=None):
    return Message(
        id=message_id,
        timestamp="2024-03-01T10:00:00",
        sender="Alice",
        kind=MessageKind.IMAGE,
        media_ref=media_ref,
    )


def test_unique_message_ids_resolve():
    descriptors = [
        MediaDescriptor(id="m1", message_id=1, original_name="a.jpg", kind=MediaKind.IMAGE),
        MediaDescriptor(id="m2", message_id=2, original_name="b.pdf", kind=MediaKind.DOCUMENT),
    ]
    resolver = MediaResolver(descriptors)
    assert resolver.for_message(_image_message(1)) is descriptors[0]
    assert resolver.for_message(_image_message(2)) is descriptors[1]
    assert resolver.warnings == []


def test_duplicate_message_id_keeps_first_and_warns_once(caplog):
    first = MediaDescriptor(id="m1", message_id=7, original_name="first.jpg")
    second = MediaDescriptor(id="m2", message_id=7, original_name="second.jpg")

    with caplog.at_level(logging.WARNING, logger="transcript_pdf.media_resolver"):
        resolver = MediaResolver([first, second])

    assert resolver.for_message(_image_message(7)) is first
    assert len(resolver.warnings) == 1
    assert "m1" in resolver.warnings[0] and "m2" in resolver.warnings[0]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_duplicate_descriptor_id_keeps_first():
    first = MediaDescriptor(id="m1", original_name="first.jpg")
    resolver = MediaResolver([first, MediaDescriptor(id="m1", original_name="other.jpg")])
    assert resolver.by_id("m1") is first
    assert resolver.descriptors() == [first]
    assert len(resolver.warnings) == 1


def test_media_reference_resolves_by_descriptor_id_or_proxy_url():
    descriptor = MediaDescriptor(id="abc-123", original_name="photo.jpg")
    resolver = MediaResolver([descriptor])
    assert resolver.for_message(_image_message(None, "abc-123")) is descriptor
    proxy = f"{BASE_URL}/api/media/proxy/abc-123"
    assert resolver.for_message(_image_message(None, proxy)) is descriptor
    assert resolver.for_message(_image_message(99, "/uploads/missing.jpg")) is None


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("https://host.example/api/media/proxy/abc", "abc"),
        ("http://localhost:5000/api/media/proxy/abc/", "abc"),
        ("/api/media/proxy/abc", None),
        ("https://host.example/media/abc", None),
        ("not a url", None),
        (None, None),
    ],
)
def test_parse_proxy_media_id(reference, expected):
    assert parse_proxy_media_id(reference) == expected


def test_link_prefers_proxy_url_on_message():
    proxy = "https://cdn.example/api/media/proxy/zzz"
    descriptor = MediaDescriptor(id="m1")
    target = resolve_link_target(_image_message(1, proxy), descriptor, BASE_URL)
    assert target.url == proxy
    assert target.source == "message"


def test_link_built_from_descriptor():
    target = resolve_link_target(_image_message(1, "photo.jpg"), MediaDescriptor(id="m1"), BASE_URL + "/")
    assert target.url == f"{BASE_URL}/api/media/proxy/m1"
    assert target.source == "descriptor"


def test_link_from_relative_reference():
    target = resolve_link_target(_image_message(1, "/uploads/photo.jpg"), None, BASE_URL)
    assert target.url == f"{BASE_URL}/uploads/photo.jpg"
    assert target.source == "relative"


def test_unresolved_link_logs_error(caplog):
    with caplog.at_level(logging.ERROR, logger="transcript_pdf.media_resolver"):
        target = resolve_link_target(_image_message(1, None), None, BASE_URL)
    assert target.url is None
    assert target.source == "unresolved"
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_display_name_fallbacks():
    message = _image_message(1, "https://host.example/files/holiday.jpg")
    assert media_display_name(message, MediaDescriptor(id="m1", original_name="beach.jpg")) == "beach.jpg"
    assert media_display_name(message, MediaDescriptor(id="m1")) == "holiday.jpg"
    assert media_display_name(_image_message(1, None), None) == "unknown_file"


@pytest.mark.parametrize(
    "name, label",
    [
        ("report.PDF", "PDF"),
        ("notes.docx", "Document"),
        ("budget.xls", "Spreadsheet"),
        ("backup.7z", "Archive"),
        ("clip.mov", "Video"),
        ("data.bin", "File"),
        (None, "File"),
    ],
)
def test_attachment_label(name, label):
    assert attachment_label(name) == label


def test_descriptor_type_label():
    assert descriptor_type_label(MediaDescriptor(id="1", kind=MediaKind.IMAGE)) == "Image"
    assert descriptor_type_label(MediaDescriptor(id="2", kind=MediaKind.VOICE)) == "Voice"
    assert descriptor_type_label(
        MediaDescriptor(id="3", kind=MediaKind.ATTACHMENT, original_name="sheet.xlsx")
    ) == "Spreadsheet"


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (125, "2:05"),
        (59.9, "0:59"),
        (0, "0:00"),
        (3600, "60:00"),
        (-4, "0:00"),
        (float("nan"), "0:00"),
        (None, "0:00"),
        ("12", "0:12"),
        ("abc", "0:00"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_repeated_descriptor_warns_once():
    first = MediaDescriptor(id="m1", message_id=4, original_name="first.jpg")
    repeat = MediaDescriptor(id="m1", message_id=4, original_name="again.jpg")
    resolver = MediaResolver([first, repeat])

    assert len(resolver.warnings) == 1
    assert resolver.by_message_id(4) is first
