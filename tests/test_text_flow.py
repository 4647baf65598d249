from __future__ import annotations

from reportlab.pdfbase import pdfmetrics

from faktura.pdf.text_flow import height_of, wrap


def test_two_words_split_when_only_one_fits(body_font):
    width = pdfmetrics.stringWidth("AAAA", body_font, 10) + 1
    assert wrap("AAAA BBBB", width, body_font, 10) == ["AAAA", "BBBB"]


def test_fits_on_one_line(body_font):
    assert wrap("short text", 500, body_font, 10) == ["short text"]


def test_explicit_newlines_kept(body_font):
    assert wrap("Line 1\r\nLine 2", 500, body_font, 10) == ["Line 1", "Line 2"]


def test_blank_logical_line_stays_blank(body_font):
    assert wrap("a\n\nb", 500, body_font, 10) == ["a", "", "b"]


def test_empty_text_has_no_lines(body_font):
    assert wrap("", 100, body_font, 10) == []
    assert wrap("   \n ", 100, body_font, 10) == []


def test_long_word_gets_its_own_line(body_font):
    word = "Supercalifragilisticexpialidocious"
    lines = wrap(f"a {word} b", 30, body_font, 10)
    assert lines == ["a", word, "b"]


def test_lines_respect_width(body_font):
    text = "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod"
    for line in wrap(text, 120, body_font, 10):
        assert pdfmetrics.stringWidth(line, body_font, 10) <= 120


def test_height_of():
    assert height_of([], 12) == 12
    assert height_of(["a", "b", "c"], 12) == 36


def test_no_characters_lost(body_font):
    text = "Izrada i održavanje veb sajta za period od jednog meseca uz tehničku podršku"
    lines = wrap(text, 90, body_font, 10)
    assert len(lines) > 1
    assert " ".join(lines) == text
