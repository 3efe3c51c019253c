import pytest

from transcript_pdf.font_manager import (
    FontLoadError,
    FontMetrics,
    is_font_registered,
    load_transcript_fonts,
    register_font,
)


def test_default_fonts():
    fonts = load_transcript_fonts()
    assert (fonts.regular, fonts.bold) == ("Times-Roman", "Times-Bold")
    assert fonts.string_width("abc", fonts.regular, 10) > 0
    ascent, descent = fonts.ascent_descent(fonts.regular, 10)
    assert ascent > 0 > descent
    assert fonts.line_height(fonts.regular, 10) == pytest.approx(ascent - descent + 2)


def test_missing_font_file_is_fatal(tmp_path):
    with pytest.raises(FontLoadError):
        register_font("MissingFace", str(tmp_path / "missing.ttf"))
    assert not is_font_registered("MissingFace")


def test_unreadable_font_file_is_fatal(tmp_path):
    broken = tmp_path / "broken.ttf"
    broken.write_bytes(b"not a font")
    with pytest.raises(FontLoadError):
        register_font("BrokenFace", str(broken))


def test_metrics_require_registered_fonts():
    with pytest.raises(FontLoadError):
        FontMetrics("NoSuchFont", "Times-Bold")
