import pytest

from punchcard import HoleGrid, LINE_BASED, PunchPattern, ShapeError, UnencodableCharacterError
from punchcard.ebcdic import (
    PLACEHOLDER,
    TABLES,
    LegacyLanguage,
    Standard,
    auto_detect_encoding,
    decode,
    decode_pattern,
    detect_language,
    encode_text,
    score_coherence,
    translate,
)
from punchcard.demos import DEMO_CARDS, demo_grid


ALL_ROWS = [(row, 0) for row in range(12)]


def test_decode_letter_a():
    grid = HoleGrid.from_punches([(0, 0), (3, 0)])
    card = decode(grid, Standard.IBM029)
    assert card.source_code == "A"
    assert card.encoding == Standard.IBM029
    assert card.language == LegacyLanguage.UNKNOWN
    assert card.confidence == 1.0


def test_decode_digit():
    grid = HoleGrid.from_punches([(7, 0)])
    assert decode(grid).source_code == "5"


def test_standard_accepts_plain_string():
    grid = HoleGrid.from_punches([(0, 0), (3, 0)])
    assert decode(grid, "IBM026").encoding == Standard.IBM026


@pytest.mark.parametrize("standard", list(Standard))
def test_blank_column_is_space(standard):
    assert translate(HoleGrid.blank(), standard) == " " * 80
    grid = HoleGrid.from_punches([(0, 0), (3, 0), (0, 2), (4, 2)])
    assert decode(grid, standard).source_code == "A B"


@pytest.mark.parametrize("standard", list(Standard))
def test_all_rows_punched_is_placeholder(standard):
    grid = HoleGrid.from_punches(ALL_ROWS)
    assert translate(grid, standard)[0] == PLACEHOLDER
    card = decode(grid, standard)
    assert card.source_code == PLACEHOLDER
    assert card.confidence == 0.0


def test_placeholder_lowers_confidence():
    grid = HoleGrid.from_punches([(0, 0), (3, 0)] + [(row, 1) for row in range(12)])
    card = decode(grid)
    assert card.source_code == "A" + PLACEHOLDER
    assert card.confidence == pytest.approx(0.5)


def test_trailing_blank_columns_trimmed():
    card = decode(encode_text("HELLO"))
    assert card.source_code == "HELLO"


def test_blank_card_decodes_to_empty_text():
    card = decode(HoleGrid.blank())
    assert card.source_code == ""
    assert card.confidence == 1.0


def test_language_boosts_confidence():
    grid = encode_text("IF X THEN GOTO 10")
    card = decode(grid, ocr_confidence=0.8)
    assert card.language == LegacyLanguage.FORTRAN
    assert card.confidence == pytest.approx(0.9)


def test_boost_is_clamped():
    card = decode(encode_text("IF X THEN GOTO 10"), ocr_confidence=0.95)
    assert card.confidence == 1.0


def test_decode_pattern_uses_pattern_confidence():
    pattern = PunchPattern(encode_text("HELLO"), 0.7)
    assert decode_pattern(pattern).confidence == pytest.approx(0.7)


def test_decode_rejects_line_based_grid():
    with pytest.raises(ShapeError):
        decode(HoleGrid.blank(LINE_BASED))


@pytest.mark.parametrize("code,standard,char", [
    ("12-11", Standard.IBM029, "#"),
    ("12-11", Standard.IBM026, "="),
    ("11-7-8", Standard.IBM029, "_"),
    ("11-7-8", Standard.IBM026, "@"),
    ("11-8-9", Standard.IBM029, "="),
    ("11-8-9", Standard.IBM026, "#"),
])
def test_standards_differ(code, standard, char):
    assert TABLES[standard][code] == char


def test_026_lacks_029_specials():
    assert "0-6-8" in TABLES[Standard.IBM029]
    assert "0-6-8" not in TABLES[Standard.IBM026]


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        TABLES[Standard.IBM029]["12-1"] = "Z"


@pytest.mark.parametrize("text,language", [
    ("      PROGRAM HELLO\n      END", LegacyLanguage.FORTRAN),
    ("10 FORMAT(I5)\n      WRITE(6,10) X", LegacyLanguage.FORTRAN),
    ("IDENTIFICATION DIVISION.", LegacyLanguage.COBOL),
    ("procedure division.", LegacyLanguage.COBOL),
    ('10 PRINT "HELLO"\n20 GOTO 10', LegacyLanguage.BASIC),
    ("MOV AX, BX\nPUSH CX", LegacyLanguage.ASSEMBLER),
    ("HELLO WORLD", LegacyLanguage.UNKNOWN),
    ("", LegacyLanguage.UNKNOWN),
])
def test_detect_language(text, language):
    assert detect_language(text) == language


@pytest.mark.parametrize("text", ["SUBROUTINE", "END", "PROGRAM"])
def test_single_keyword_is_not_enough(text):
    assert detect_language(text) == LegacyLanguage.UNKNOWN


def test_keywords_match_whole_words_only():
    assert detect_language("ENDING DOING") == LegacyLanguage.UNKNOWN


def test_tie_keeps_earlier_language():
    # IF and THEN score 2 for both FORTRAN and BASIC
    assert detect_language("IF X THEN Y") == LegacyLanguage.FORTRAN


def test_score_coherence_constants():
    assert score_coherence("", LegacyLanguage.UNKNOWN) == 0
    assert score_coherence(PLACEHOLDER, LegacyLanguage.UNKNOWN) == -5
    assert score_coherence("X = (1)\nY", LegacyLanguage.FORTRAN) == pytest.approx(100)


def test_auto_detect_program_is_029(program_punches):
    pattern = PunchPattern(HoleGrid.from_punches(program_punches), 1.0)
    assert decode_pattern(pattern).source_code == "PROGRAM"
    assert auto_detect_encoding(pattern) == Standard.IBM029


def test_auto_detect_prefers_026_assignment():
    # X then 12-11, which is '#' on an 029 and '=' on an 026
    grid = HoleGrid.from_punches([(2, 0), (9, 0), (0, 1), (1, 1)])
    assert auto_detect_encoding(grid) == Standard.IBM026


def test_auto_detect_blank_card_is_029():
    assert auto_detect_encoding(HoleGrid.blank()) == Standard.IBM029


def test_auto_detect_penalizes_placeholders():
    # 11-5-8 is '\' on an 029 but unknown on an 026
    grid = HoleGrid.from_punches([(1, 0), (7, 0), (10, 0)])
    assert auto_detect_encoding(grid) == Standard.IBM029


def test_encode_text_round_trip():
    text = "      CALL SUB(X, 1.5 $ * / - + &"
    for standard in Standard:
        assert decode(encode_text(text, standard), standard).source_code == text


def test_encode_text_rejects_unknown_character():
    with pytest.raises(UnencodableCharacterError):
        encode_text("lower case")
    with pytest.raises(KeyError):
        encode_text("~")


def test_encode_text_rejects_long_text():
    with pytest.raises(ShapeError):
        encode_text("X" * 81)


@pytest.mark.parametrize("name", sorted(DEMO_CARDS))
def test_demo_cards(name):
    assert decode(demo_grid(name)).source_code == name


def test_unknown_demo():
    with pytest.raises(KeyError):
        demo_grid("NOPE")


@pytest.mark.parametrize("standard,other_code", [
    (Standard.IBM029, "11-8-9"),
    (Standard.IBM026, "12-11"),
])
def test_equals_sign_has_two_codes(standard, other_code):
    assert TABLES[standard]["11"] == "="
    assert TABLES[standard][other_code] == "="
    assert encode_text("=", standard).punch_code(0) == "11"


def test_comma_and_period_codes():
    grid = HoleGrid.from_punches([(0, 0), (5, 0), (10, 0), (2, 1), (5, 1), (10, 1)])
    for standard in Standard:
        assert decode(grid, standard).source_code == ",."
