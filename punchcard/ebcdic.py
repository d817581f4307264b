#!/usr/bin/env python3
#
# BSD 2-Clause License
#
# SPDX-License-Identifier: BSD-2-Clause
#
# Copyright (c) 2020-2025, Poul-Henning Kamp
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice, this
#    list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright notice,
#    this list of conditions and the following disclaimer in the documentation
#    and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

'''
   Keypunch character sets
   -----------------------

   Decode classic 12x80 cards punched on IBM 029 or IBM 026 keypunches.

   Each column is turned into a punch code, the labels of the punched
   rows joined by dashes ("12-1" is 'A'), which is looked up in the
   table of the chosen standard.

   The two standards agree on letters, digits and most punctuation, but
   the 026 predates a number of the 029 special characters, and moved
   a few others around.  We keep one base table and an override table
   per standard.

   Decoding never fails on content: a column which is not in the table
   comes out as U+FFFD, and the confidence of the card drops accordingly.
'''

import re
import enum
import logging
import types
from dataclasses import dataclass

from .grid import CLASSIC, ROW_LABELS, HoleGrid
from .errors import ShapeError, UnencodableCharacterError

log = logging.getLogger(__name__)

PLACEHOLDER = '�'

class Standard(str, enum.Enum):
    ''' Keypunch encoding standards '''

    IBM029 = 'IBM029'
    IBM026 = 'IBM026'

class LegacyLanguage(str, enum.Enum):
    ''' Languages we expect to find on cards '''

    FORTRAN = 'FORTRAN'
    COBOL = 'COBOL'
    ASSEMBLER = 'ASSEMBLER'
    BASIC = 'BASIC'
    UNKNOWN = 'UNKNOWN'

BASE_TABLE = {
    # Zone 12 + 1-9
    '12-1': 'A', '12-2': 'B', '12-3': 'C', '12-4': 'D', '12-5': 'E',
    '12-6': 'F', '12-7': 'G', '12-8': 'H', '12-9': 'I',

    # Zone 11 + 1-9
    '11-1': 'J', '11-2': 'K', '11-3': 'L', '11-4': 'M', '11-5': 'N',
    '11-6': 'O', '11-7': 'P', '11-8': 'Q', '11-9': 'R',

    # Zone 0 + 2-9
    '0-2': 'S', '0-3': 'T', '0-4': 'U', '0-5': 'V',
    '0-6': 'W', '0-7': 'X', '0-8': 'Y', '0-9': 'Z',

    '0': '0', '1': '1', '2': '2', '3': '3', '4': '4',
    '5': '5', '6': '6', '7': '7', '8': '8', '9': '9',

    '12-0': '&', '11-0': '-', '0-1': '/',
    '12-0-1': '?', '11-0-1': '!',
    '0-3-8': '.', '12-3-8': ',', '11-3-8': '$',
    '12-4-8': '*', '11-4-8': ']', '0-4-8': '<',
    '12-5-8': ';', '0-5-8': '>',
    '12-7-8': '(',
    '12-8-9': ':', '0-8-9': '"',
    # '=' is also 11-8-9 (029) and 12-11 (026), encode_text uses 11
    '12': '+', '11': '=',

    '': ' ',
}

OVERRIDES = {
    Standard.IBM029: {
        '12-11': '#',
        '11-7-8': '_',
        '11-8-9': '=',
        '11-5-8': '\\',
        '12-6-8': '¬',
        '11-6-8': '%',
        '0-6-8': '|',
        '12-11-0': '@',
        '12-0-9': '[',
    },
    Standard.IBM026: {
        '12-11': '=',
        '11-7-8': '@',
        '11-8-9': '#',
    },
}

TABLES = {
    std: types.MappingProxyType({**BASE_TABLE, **OVERRIDES[std]})
    for std in Standard
}

def _reverse(table):
    rev = {}
    for code, char in table.items():
        rev.setdefault(char, code)
    return types.MappingProxyType(rev)

REVERSE_TABLES = {std: _reverse(tbl) for std, tbl in TABLES.items()}

LANGUAGE_KEYWORDS = {
    LegacyLanguage.FORTRAN: (
        'PROGRAM', 'SUBROUTINE', 'FUNCTION', 'END', 'DO', 'IF', 'THEN', 'ELSE',
        'FORMAT', 'WRITE', 'READ', 'CALL', 'RETURN', 'CONTINUE', 'GOTO',
        'DIMENSION', 'COMMON', 'EQUIVALENCE', 'DATA', 'IMPLICIT', 'REAL', 'INTEGER',
    ),
    LegacyLanguage.COBOL: (
        'IDENTIFICATION', 'DIVISION', 'PROCEDURE', 'DATA', 'WORKING-STORAGE',
        'PERFORM', 'MOVE', 'TO', 'DISPLAY', 'ACCEPT', 'STOP', 'RUN',
        'PIC', 'PICTURE', 'VALUE', 'COMPUTE', 'ADD', 'SUBTRACT', 'MULTIPLY', 'DIVIDE',
    ),
    LegacyLanguage.ASSEMBLER: (
        'MOV', 'ADD', 'SUB', 'MUL', 'DIV', 'JMP', 'JE', 'JNE', 'CALL', 'RET',
        'PUSH', 'POP', 'CMP', 'TEST', 'AND', 'OR', 'XOR', 'NOT',
        'AX', 'BX', 'CX', 'DX', 'SI', 'DI', 'SP', 'BP',
    ),
    LegacyLanguage.BASIC: (
        'PRINT', 'INPUT', 'LET', 'GOTO', 'GOSUB', 'RETURN', 'IF', 'THEN',
        'FOR', 'NEXT', 'STEP', 'DIM', 'REM', 'END', 'DATA', 'READ',
    ),
}

KEYWORD_PATTERNS = {
    lang: tuple(re.compile(r'\b%s\b' % re.escape(kw)) for kw in kws)
    for lang, kws in LANGUAGE_KEYWORDS.items()
}

# Statement labels in columns 1-5
FORTRAN_LABEL = re.compile(r'^\s{0,5}\d{1,5}\s+[A-Z]', re.MULTILINE)
BASIC_LINE_NUMBER = re.compile(r'^\d+\s+[A-Z]', re.MULTILINE)
REGISTER_NAME = re.compile(r'\b(AX|BX|CX|DX|SI|DI|SP|BP)\b')

# A language must score at least this much to be reported
MIN_LANGUAGE_SCORE = 2

VALID_CHAR = re.compile(r'[A-Za-z0-9\s.,;:()\[\]{}+\-*/=<>!@#$%&|]')
ASSIGNMENT = re.compile(r'[A-Z][A-Z0-9_]*\s*=')
PARENTHESIZED = re.compile(r'\([^)]*\)')

@dataclass(frozen=True)
class DecodedCard():
    ''' Text read off a card '''

    source_code: str
    language: LegacyLanguage
    encoding: Standard
    confidence: float

def _check_classic(grid):
    if not isinstance(grid, HoleGrid) or grid.shape != CLASSIC:
        raise ShapeError("Expected a %dx%d card" % CLASSIC)

def translate(grid, standard=Standard.IBM029):
    ''' Convert a classic grid to text, without trimming '''

    _check_classic(grid)
    table = TABLES[Standard(standard)]
    return ''.join(
        table.get(grid.punch_code(col), PLACEHOLDER) for col in range(grid.ncols)
    )

def unknown_ratio(text):
    ''' Fraction of placeholder characters in text '''

    if not text:
        return 0.0
    return text.count(PLACEHOLDER) / len(text)

def detect_language(text):
    ''' Guess which legacy language text is written in '''

    upper = text.upper()
    scores = dict.fromkeys(KEYWORD_PATTERNS, 0)

    for lang, patterns in KEYWORD_PATTERNS.items():
        for pat in patterns:
            scores[lang] += len(pat.findall(upper))

    if FORTRAN_LABEL.search(text):
        scores[LegacyLanguage.FORTRAN] += 5
    if 'DIVISION' in upper:
        scores[LegacyLanguage.COBOL] += 10
    if BASIC_LINE_NUMBER.search(text):
        scores[LegacyLanguage.BASIC] += 5
    if REGISTER_NAME.search(upper):
        scores[LegacyLanguage.ASSEMBLER] += 5

    best = LegacyLanguage.UNKNOWN
    best_score = 0
    for lang, score in scores.items():
        if score > best_score:
            best = lang
            best_score = score

    if best_score < MIN_LANGUAGE_SCORE:
        return LegacyLanguage.UNKNOWN
    return best

def card_confidence(text, language, ocr_confidence=1.0):
    ''' Overall confidence in a decoded card '''

    confidence = ocr_confidence
    if language != LegacyLanguage.UNKNOWN:
        confidence = min(1.0, confidence + 0.1)
    confidence *= 1 - unknown_ratio(text)
    return max(0.0, min(1.0, confidence))

def decode(grid, standard=Standard.IBM029, ocr_confidence=1.0):
    '''
       Decode a classic card.

       ocr_confidence - confidence of the hole reading, 1.0 for cards
       which were not photographed.
    '''

    standard = Standard(standard)
    text = translate(grid, standard).rstrip()
    language = detect_language(text)
    confidence = card_confidence(text, language, ocr_confidence)
    log.debug(
        "%s: %d chars, language %s, confidence %.3f",
        standard.value, len(text), language.value, confidence
    )
    return DecodedCard(text, language, standard, confidence)

def decode_pattern(pattern, standard=Standard.IBM029):
    ''' Decode a card read from an image '''

    return decode(pattern.grid, standard, pattern.confidence)

def score_coherence(text, language):
    '''
       How much does text look like a program ?

       The weights are empirical, keep them as they are.
    '''

    score = 0.0

    if language != LegacyLanguage.UNKNOWN:
        score += 50

    if text:
        score += len(VALID_CHAR.findall(text)) / len(text) * 30

    score -= text.count(PLACEHOLDER) * 5

    lines = text.split('\n')
    if len(lines) > 1 and all(len(line) < 200 for line in lines):
        score += 10

    if ASSIGNMENT.search(text):
        score += 5
    if PARENTHESIZED.search(text):
        score += 5

    return score

def auto_detect_encoding(pattern):
    ''' Which standard was this card most likely punched in ? '''

    if isinstance(pattern, HoleGrid):
        grid, ocr_confidence = pattern, 1.0
    else:
        grid, ocr_confidence = pattern.grid, pattern.confidence

    scores = {}
    for std in (Standard.IBM029, Standard.IBM026):
        card = decode(grid, std, ocr_confidence)
        scores[std] = score_coherence(card.source_code, card.language)

    if scores[Standard.IBM029] >= scores[Standard.IBM026]:
        best = Standard.IBM029
    else:
        best = Standard.IBM026
    log.debug("Coherence 029=%.1f 026=%.1f, picked %s",
        scores[Standard.IBM029], scores[Standard.IBM026], best.value)
    return best

def encode_text(text, standard=Standard.IBM029):
    ''' Punch text onto a classic card '''

    ncols = CLASSIC[1]
    if len(text) > ncols:
        raise ShapeError("%d characters do not fit on a card" % len(text))

    rev = REVERSE_TABLES[Standard(standard)]
    label_row = {label: n for n, label in enumerate(ROW_LABELS)}
    punches = []
    for col, char in enumerate(text):
        code = rev.get(char)
        if code is None:
            raise UnencodableCharacterError(char)
        if code:
            punches.extend((label_row[label], col) for label in code.split('-'))
    return HoleGrid.from_punches(punches, CLASSIC)
