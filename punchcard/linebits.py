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
   Line based cards
   ----------------

   A modern, lossless alternative to the keypunch character sets: each
   card holds one whole line of text, up to 80 characters, eight bits
   per character, most significant bit first, for 640 bits per card.

   Lines are padded with spaces to 80 characters, and trailing spaces
   are removed again when decoding, so indentation survives but
   trailing spaces do not.

   A deck is a list of cards numbered from 1 by their "column".
   Decks which have been stored somewhere may come back in any order,
   so decoding always sorts by column first.
'''

import re
import math
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .grid import LINE_BASED, HoleGrid
from .errors import BitStringError, InvalidLengthError

log = logging.getLogger(__name__)

LINE_LENGTH = 80
BITS_PER_CHAR = 8
CARD_BITS = LINE_LENGTH * BITS_PER_CHAR
PREVIEW_LENGTH = 40

BIT_STRING = re.compile(r'[01]+')
LINE_BREAK = re.compile(r'\r?\n')

# First match wins
SOURCE_LANGUAGES = (
    ('Python', ('DEF ', 'IMPORT ', 'PRINT(')),
    ('JavaScript', ('FUNCTION ', 'CONST ', 'LET ')),
    ('Java', ('PUBLIC CLASS', 'SYSTEM.OUT')),
    ('FORTRAN', ('PROGRAM', 'SUBROUTINE')),
    ('Pascal', ('PROCEDURE', 'BEGIN')),
)

@dataclass
class LineBasedCard():
    ''' One line of text as a bit string '''

    column: int
    bits: str
    preview: Optional[str] = None

    def to_dict(self):
        d = {'column': self.column, 'bits': self.bits}
        if self.preview is not None:
            d['preview'] = self.preview
        return d

@dataclass
class LineBasedDeck():
    ''' Cards plus optional language, filename and total_lines '''

    cards: List[LineBasedCard] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    def to_dict(self):
        d = {'cards': [c.to_dict() for c in self.cards]}
        if self.metadata:
            meta = dict(self.metadata)
            if 'total_lines' in meta:
                meta['totalLines'] = meta.pop('total_lines')
            d['metadata'] = meta
        return d

    @classmethod
    def from_dict(cls, d):
        ''' Inverse of to_dict(), also accepts totalLines/total_lines '''

        cards = [
            LineBasedCard(int(c['column']), c['bits'], c.get('preview'))
            for c in d.get('cards', ())
        ]
        meta = dict(d.get('metadata') or {})
        if 'totalLines' in meta:
            meta['total_lines'] = meta.pop('totalLines')
        return cls(cards, meta)

@dataclass(frozen=True)
class DecodedSource():
    source_code: str
    lines: List[str]
    total_lines: int
    language: Optional[str] = None

@dataclass(frozen=True)
class DeckStats():
    total_cards: int
    total_bits: int
    total_bytes: int
    total_characters: int
    average_line_length: float

def encode_line(line):
    '''
       Convert one line to a 640 bit string.

       Lines longer than 80 characters are silently truncated, characters
       which do not fit in eight bits become '?'.
    '''

    padded = line[:LINE_LENGTH].ljust(LINE_LENGTH)
    data = padded.encode('latin-1', errors='replace')
    return ''.join(format(b, '08b') for b in data)

def decode_line(bits):
    ''' Convert a 640 bit string back to a line, trailing spaces removed '''

    if len(bits) != CARD_BITS:
        raise InvalidLengthError(CARD_BITS, len(bits))
    if not BIT_STRING.fullmatch(bits):
        raise BitStringError("Bit string may only contain '0' and '1'")

    data = bytes(
        int(bits[i:i + BITS_PER_CHAR], 2)
        for i in range(0, CARD_BITS, BITS_PER_CHAR)
    )
    return data.decode('latin-1').rstrip(' ')

def validate_bit_string(bits):
    ''' True if bits is one valid card '''

    return bool(BIT_STRING.fullmatch(bits)) and len(bits) == CARD_BITS

def preview(line):
    if len(line) > PREVIEW_LENGTH:
        return line[:PREVIEW_LENGTH] + '...'
    return line

def encode_source(text, language=None, filename=None):
    ''' Punch a whole source text, one card per line '''

    lines = LINE_BREAK.split(text)
    cards = [
        LineBasedCard(n + 1, encode_line(line), preview(line))
        for n, line in enumerate(lines)
    ]

    meta = {}
    if language is not None:
        meta['language'] = language
    if filename is not None:
        meta['filename'] = filename
    meta['total_lines'] = len(lines)

    truncated = sum(1 for line in lines if len(line) > LINE_LENGTH)
    if truncated:
        log.debug("%d lines longer than %d characters truncated", truncated, LINE_LENGTH)
    return LineBasedDeck(cards, meta)

def decode_source(deck):
    ''' Read a deck back into source text, in column order '''

    cards = sorted(deck.cards, key=lambda c: c.column)
    lines = [decode_line(c.bits) for c in cards]
    return DecodedSource(
        '\n'.join(lines),
        lines,
        len(lines),
        deck.metadata.get('language'),
    )

def detect_language(text):
    ''' Rough guess at a modern language '''

    upper = text.upper()
    for name, needles in SOURCE_LANGUAGES:
        if any(x in upper for x in needles):
            return name
    return 'Unknown'

def get_deck_stats(deck):
    ''' Size statistics, computed from the cards every time '''

    total_cards = len(deck.cards)
    total_bits = total_cards * CARD_BITS
    total_chars = sum(len(line) for line in decode_source(deck).lines)

    if total_cards:
        # Half-up rounding to one decimal
        average = math.floor(total_chars / total_cards * 10 + .5) / 10
    else:
        average = 0.0

    return DeckStats(total_cards, total_bits, total_bits // 8, total_chars, average)

def card_to_grid(card):
    ''' 8x80 display grid: one column per character, MSB in the top row '''

    bits = card.bits if isinstance(card, LineBasedCard) else card
    if len(bits) != CARD_BITS:
        raise InvalidLengthError(CARD_BITS, len(bits))

    nrows, ncols = LINE_BASED
    return HoleGrid(
        [
            [bits[col * BITS_PER_CHAR + row] == '1' for col in range(ncols)]
            for row in range(nrows)
        ],
        LINE_BASED,
    )

def deck_to_visual_grid(deck, bits_per_segment=BITS_PER_CHAR):
    ''' Per card, the bits cut into segments of booleans '''

    return [
        [
            [b == '1' for b in card.bits[i:i + bits_per_segment]]
            for i in range(0, len(card.bits), bits_per_segment)
        ]
        for card in deck.cards
    ]
