import random

import pytest

from punchcard import BitStringError, InvalidLengthError, LINE_BASED
from punchcard.linebits import (
    CARD_BITS,
    LineBasedCard,
    LineBasedDeck,
    card_to_grid,
    decode_line,
    decode_source,
    deck_to_visual_grid,
    detect_language,
    encode_line,
    encode_source,
    get_deck_stats,
    validate_bit_string,
)
from punchcard.demos import LINE_BASED_DEMOS


@pytest.mark.parametrize("line", ["", "x", "A" * 80, "B" * 200, "caf\xe9", "€ uro"])
def test_encoded_length(line):
    assert len(encode_line(line)) == CARD_BITS == 640


@pytest.mark.parametrize("line", [
    "PRINT 'HI'",
    "    indented(x)",
    "trailing   ",
    "~" * 80,
    "",
])
def test_round_trip(line):
    assert decode_line(encode_line(line)) == line.ljust(80).rstrip()


def test_long_lines_truncated():
    assert decode_line(encode_line("x" * 100)) == "x" * 80


def test_bits_msb_first():
    bits = encode_line("A")
    assert bits[:8] == "01000001"
    assert bits[8:16] == "00100000"


def test_wide_characters_become_question_mark():
    assert decode_line(encode_line("€")) == "?"


@pytest.mark.parametrize("length", [0, 8, 639, 641])
def test_decode_wrong_length(length):
    with pytest.raises(InvalidLengthError) as exc:
        decode_line("0" * length)
    assert exc.value.expected == 640
    assert exc.value.got == length


def test_decode_rejects_non_binary():
    with pytest.raises(BitStringError):
        decode_line("2" * 640)


def test_invalid_length_is_value_error():
    assert issubclass(InvalidLengthError, BitStringError)
    assert issubclass(InvalidLengthError, ValueError)


@pytest.mark.parametrize("bits,valid", [
    ("0" * 640, True),
    ("01" * 320, True),
    ("0" * 639, False),
    ("0" * 641, False),
    ("0" * 639 + "2", False),
    ("0" * 639 + "\n", False),
    ("", False),
])
def test_validate_bit_string(bits, valid):
    assert validate_bit_string(bits) is valid


def test_encode_source():
    long_line = "y" * 50
    deck = encode_source("a\n" + long_line + "\n", language="Python", filename="x.py")
    assert [c.column for c in deck.cards] == [1, 2, 3]
    assert deck.cards[0].preview == "a"
    assert deck.cards[1].preview == "y" * 40 + "..."
    assert deck.metadata == {"language": "Python", "filename": "x.py", "total_lines": 3}


def test_encode_source_crlf():
    deck = encode_source("a\r\nb")
    assert decode_source(deck).lines == ["a", "b"]


def test_decode_source():
    text = LINE_BASED_DEMOS["FIBONACCI_PYTHON"]
    result = decode_source(encode_source(text, language="Python"))
    assert result.source_code == text
    assert result.total_lines == 7
    assert result.lines[0] == "def fibonacci(n):"
    assert result.language == "Python"


def test_decode_source_is_order_independent():
    text = LINE_BASED_DEMOS["CLASSIC_FORTRAN"]
    deck = encode_source(text)
    shuffled = list(deck.cards)
    random.Random(4).shuffle(shuffled)
    assert decode_source(LineBasedDeck(shuffled)).source_code == text
    assert decode_source(LineBasedDeck(deck.cards[::-1])).source_code == text


@pytest.mark.parametrize("text,language", [
    ("def f():\n    return 1", "Python"),
    ("import os", "Python"),
    ("const x = 1;", "JavaScript"),
    ("public class Foo {}", "Java"),
    ("      PROGRAM X", "FORTRAN"),
    ("BEGIN\nEND.", "Pascal"),
    ("hello", "Unknown"),
    ("import x\nconst y = 1", "Python"),
])
def test_detect_language(text, language):
    assert detect_language(text) == language


def test_deck_stats():
    stats = get_deck_stats(encode_source("abc\nde"))
    assert stats.total_cards == 2
    assert stats.total_bits == 1280
    assert stats.total_bytes == 160
    assert stats.total_characters == 5
    assert stats.average_line_length == 2.5


def test_deck_stats_round_half_up():
    stats = get_deck_stats(encode_source("a\n\n\n"))
    assert stats.total_cards == 4
    assert stats.average_line_length == 0.3


def test_empty_deck_stats():
    stats = get_deck_stats(LineBasedDeck())
    assert stats.total_cards == 0
    assert stats.average_line_length == 0.0


def test_card_to_grid():
    grid = card_to_grid(LineBasedCard(1, encode_line("A")))
    assert grid.shape == LINE_BASED
    assert grid.column(0) == (False, True, False, False, False, False, False, True)
    assert grid.column(1) == (False, False, True, False, False, False, False, False)


def test_card_to_grid_wrong_length():
    with pytest.raises(InvalidLengthError):
        card_to_grid("0101")


def test_deck_to_visual_grid():
    visual = deck_to_visual_grid(encode_source("A\nB"))
    assert len(visual) == 2
    assert len(visual[0]) == 80
    assert visual[0][0] == [False, True, False, False, False, False, False, True]


def test_deck_dict_round_trip():
    deck = encode_source("x = 1\ny = 2", language="Python")
    d = deck.to_dict()
    assert d["metadata"]["totalLines"] == 2
    assert set(d["cards"][0]) == {"column", "bits", "preview"}
    assert LineBasedDeck.from_dict(d) == deck


def test_from_dict_without_metadata():
    d = {"cards": [
        {"column": 2, "bits": encode_line("second")},
        {"column": 1, "bits": encode_line("first")},
    ]}
    deck = LineBasedDeck.from_dict(d)
    assert decode_source(deck).source_code == "first\nsecond"
    assert decode_source(deck).language is None


@pytest.mark.parametrize("line", ["A\x1f", "A\x1c", "B\x85", "C\xa0", "tab\t"])
def test_only_spaces_are_trimmed(line):
    assert decode_line(encode_line(line)) == line
