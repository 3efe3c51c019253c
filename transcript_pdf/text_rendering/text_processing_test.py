import pytest

from transcript_pdf.text_rendering import PLACEHOLDER_CHAR, sanitize_text, split_paragraphs


def test_ascii_and_latin1_are_kept():
    assert sanitize_text("Grüße aus Köln, café & crème") == "Grüße aus Köln, café & crème"


def test_unsupported_characters_become_placeholder():
    assert sanitize_text("Hello 世界") == f"Hello {PLACEHOLDER_CHAR}{PLACEHOLDER_CHAR}"


def test_emoji_become_short_names():
    assert sanitize_text("Great \U0001F44D") == "Great :thumbs_up:"


def test_tabs_become_spaces():
    assert sanitize_text("a\tb") == "a b"


@pytest.mark.parametrize("text", ["plain", "Zoë ☃ \U0001F600", "“quoted”", ""])
def test_sanitize_is_idempotent(text):
    once = sanitize_text(text)
    assert sanitize_text(once) == once


def test_split_paragraphs_normalises_line_breaks():
    assert split_paragraphs("one\r\ntwo\rthree\nfour") == ["one", "two", "three", "four"]
    assert split_paragraphs("") == [""]
