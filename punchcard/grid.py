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
   Hole grids
   ----------

   A HoleGrid is the punched/unpunched state of every cell on a card.

   Classic cards are 12 rows by 80 columns.  The rows are, from the top
   edge of the card: 12, 11, 0, 1, 2, ... 9.  The 12 and 11 rows are the
   "zone" rows, which is why they sit above row 0.

   Line based cards are 8 rows by 80 columns, one bit per row and one
   character per column.

   Grids are immutable, and the constructor refuses any shape which does
   not match the card type, so the codecs never have to worry about
   ragged or short rows.
'''

from dataclasses import dataclass, field

from .errors import ShapeError

CLASSIC = (12, 80)
LINE_BASED = (8, 80)

SHAPES = (CLASSIC, LINE_BASED)

# Row index to row label, top to bottom
ROW_LABELS = ('12', '11', '0', '1', '2', '3', '4', '5', '6', '7', '8', '9')

class HoleGrid():

    '''
       Immutable rows x columns matrix of booleans
       ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
    '''

    __slots__ = ('_rows', '_shape')

    def __init__(self, rows, shape=CLASSIC):
        '''
           rows - sequence of rows, each a sequence of truthy/falsy cells
           shape - CLASSIC or LINE_BASED
        '''

        shape = tuple(shape)
        if shape not in SHAPES:
            raise ShapeError("Unsupported grid shape %s" % (shape,))
        nrows, ncols = shape

        rows = tuple(tuple(bool(x) for x in r) for r in rows)
        if len(rows) != nrows:
            raise ShapeError("Expected %d rows, got %d" % (nrows, len(rows)))
        for n, r in enumerate(rows):
            if len(r) != ncols:
                raise ShapeError(
                    "Row %d has %d columns, expected %d" % (n, len(r), ncols)
                )

        self._rows = rows
        self._shape = shape

    @classmethod
    def blank(cls, shape=CLASSIC):
        ''' A card with no holes '''

        nrows, ncols = shape
        return cls([[False] * ncols for _ in range(nrows)], shape)

    @classmethod
    def from_punches(cls, punches, shape=CLASSIC):
        ''' Build a grid from (row, col) pairs '''

        nrows, ncols = shape
        cells = [[False] * ncols for _ in range(nrows)]
        for row, col in punches:
            if not (0 <= row < nrows and 0 <= col < ncols):
                raise ShapeError("Punch (%d, %d) is outside the card" % (row, col))
            cells[row][col] = True
        return cls(cells, shape)

    @property
    def shape(self):
        return self._shape

    @property
    def rows(self):
        return self._rows

    @property
    def nrows(self):
        return self._shape[0]

    @property
    def ncols(self):
        return self._shape[1]

    def __getitem__(self, idx):
        row, col = idx
        return self._rows[row][col]

    def __eq__(self, other):
        if not isinstance(other, HoleGrid):
            return NotImplemented
        return self._shape == other._shape and self._rows == other._rows

    def __hash__(self):
        return hash((self._shape, self._rows))

    def __repr__(self):
        return "<HoleGrid %dx%d, %d holes>" % (self.nrows, self.ncols, self.count())

    def column(self, col):
        ''' The cells of one column, top to bottom '''

        return tuple(r[col] for r in self._rows)

    def count(self):
        ''' Total number of holes '''

        return sum(sum(r) for r in self._rows)

    def punch_code(self, col):
        '''
           The punch code of a column, for instance "12-1" for 'A'.

           Labels are emitted in row order, never re-sorted.
        '''

        if self._shape != CLASSIC:
            raise ShapeError("Punch codes only exist on classic cards")
        return '-'.join(ROW_LABELS[n] for n, x in enumerate(self.column(col)) if x)

    def dump(self):
        ''' Debugging aid '''

        for r in self._rows:
            yield ''.join('#' if x else '-' for x in r)

    def to_list(self):
        ''' Nested lists, suitable for JSON '''

        return [list(r) for r in self._rows]

@dataclass(frozen=True)
class PunchPattern():

    '''
       Hole grid read from an image, with the confidence of the reading.

       metadata holds image_width, image_height and detected_columns.
    '''

    grid: HoleGrid
    confidence: float = 1.0
    metadata: dict = field(default_factory=dict, hash=False)
