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
   Read holes from photographs
   ---------------------------

   Unlike a scanner in a controlled setup, a photograph of a card can
   come in any size and aspect ratio, so we make few assumptions:

   1. Convert the image to greyscale, stretch the contrast to the full
      0-255 range and threshold it at the midpoint.

   2. Lay a 12x80 grid over the whole image, cell size is simply the
      image size divided by the grid size, independently in X and Y.

   3. Look only at the central 50% x 50% of each cell, so that printed
      grid lines and the edges of neighbouring holes do not count.

   4. A cell is a hole if it is on average darker than DARKNESS_THRESHOLD.

   The expectation is that holes photograph dark against a light card.
   If your holes come out light, invert the image first.

   The confidence of the reading is a plausibility check of the hole
   pattern, it knows nothing about the image itself.
'''

import logging

import imageio.v3

import numpy

from scipy import ndimage

from .grid import CLASSIC, HoleGrid, PunchPattern
from .errors import ImageDecodeError

log = logging.getLogger(__name__)

class HoleDetector():

    '''
       Hole detection and confidence scoring
       ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

       Tuning is done by subclassing and overriding the constants.
    '''

    ROWS, COLUMNS = CLASSIC

    # Mean darkness (0 = white, 1 = black) above which a cell is a hole
    DARKNESS_THRESHOLD = 0.3

    # Binarization level after contrast stretching
    BINARY_THRESHOLD = 128

    # Fraction of the cell ignored on each side
    SAMPLE_MARGIN = 0.25

    # Photographs must reach this, virtual cards must be perfect
    MIN_CONFIDENCE_REAL = 0.95
    MIN_CONFIDENCE_VIRTUAL = 1.0

    # More than this fraction of cells punched is noise
    MAX_HOLE_RATIO = 0.5

    # Standard deviation of holes per column which zeroes the alignment score
    EXPECTED_STDDEV = 6

    WEIGHT_VALIDITY = 0.4
    WEIGHT_ALIGNMENT = 0.4
    WEIGHT_HOLE_RATIO = 0.2

    def read_image(self, buffer):
        ''' Decode image bytes to an array '''

        try:
            im = imageio.v3.imread(bytes(buffer), index=0)
        except Exception as err:
            raise ImageDecodeError("Cannot decode image: %s" % err) from err
        if im.ndim not in (2, 3) or im.size == 0:
            raise ImageDecodeError("Unexpected image shape %s" % (im.shape,))
        return im

    def binarize(self, im):
        ''' Greyscale, normalize and threshold to 0/255 '''

        im = im.astype(float)
        if im.ndim == 3:
            if im.shape[2] >= 3:
                # Ignore alpha
                im = im[..., :3] @ numpy.array((.299, .587, .114))
            else:
                im = im[..., 0]

        lo = im.min()
        hi = im.max()
        if hi > lo:
            im = (im - lo) * (255. / (hi - lo))
        im = numpy.clip(im, 0, 255)

        return numpy.where(im >= self.BINARY_THRESHOLD, 255, 0).astype(numpy.uint8)

    def preprocess_image(self, buffer):
        ''' Return the binarized image as PNG '''

        im = self.binarize(self.read_image(buffer))
        return imageio.v3.imwrite("<bytes>", im, extension=".png")

    def cell_labels(self, height, width):
        '''
           Label the sampled center of each cell with 1 + row * COLUMNS + col,
           everything else is 0.
        '''

        labels = numpy.zeros((height, width), dtype=numpy.int32)
        cell_w = width / self.COLUMNS
        cell_h = height / self.ROWS
        for row in range(self.ROWS):
            y1 = int(row * cell_h)
            y2 = int((row + 1) * cell_h)
            cy1 = int(y1 + cell_h * self.SAMPLE_MARGIN)
            cy2 = int(y2 - cell_h * self.SAMPLE_MARGIN)
            for col in range(self.COLUMNS):
                x1 = int(col * cell_w)
                x2 = int((col + 1) * cell_w)
                cx1 = int(x1 + cell_w * self.SAMPLE_MARGIN)
                cx2 = int(x2 - cell_w * self.SAMPLE_MARGIN)
                labels[cy1:cy2, cx1:cx2] = 1 + row * self.COLUMNS + col
        return labels

    def cell_darkness(self, binary):
        ''' Mean darkness of the sampled center of every cell, ROWS x COLUMNS '''

        darkness = 1. - binary / 255.
        labels = self.cell_labels(*binary.shape)
        index = numpy.arange(1, self.ROWS * self.COLUMNS + 1)
        sums = ndimage.sum_labels(darkness, labels, index)
        counts = ndimage.sum_labels(numpy.ones_like(darkness), labels, index)
        # Cells too small to sample read as unpunched
        means = numpy.divide(sums, counts, out=numpy.zeros_like(sums), where=counts > 0)
        return means.reshape(self.ROWS, self.COLUMNS)

    def detect_holes(self, buffer):
        ''' Read the hole pattern from image bytes '''

        im = self.read_image(buffer)
        height, width = im.shape[:2]
        darkness = self.cell_darkness(self.binarize(im))

        grid = HoleGrid(darkness > self.DARKNESS_THRESHOLD, CLASSIC)
        metadata = {
            'image_width': width,
            'image_height': height,
            'detected_columns': self.COLUMNS,
        }
        confidence = self.calculate_confidence(grid)
        log.debug("%dx%d image: %d holes, confidence %.3f",
            width, height, grid.count(), confidence)
        return PunchPattern(grid, confidence, metadata)

    def calculate_confidence(self, pattern):
        ''' Plausibility of a hole pattern, 0...1 '''

        grid = pattern if isinstance(pattern, HoleGrid) else pattern.grid
        per_column = numpy.array(grid.rows, dtype=bool).sum(axis=0)
        total = int(per_column.sum())
        used = per_column[per_column > 0]

        # Holds by construction, kept as a sanity signal
        if len(used):
            validity = numpy.count_nonzero((used >= 1) & (used <= grid.nrows)) / len(used)
        else:
            validity = 0.

        alignment = 1.
        if len(used) > 1:
            alignment = max(0., 1. - float(numpy.std(used)) / self.EXPECTED_STDDEV)

        if total == 0:
            hole_ratio = 0.
        elif total > grid.nrows * grid.ncols * self.MAX_HOLE_RATIO:
            hole_ratio = .3
        elif total < 1:
            hole_ratio = .5
        else:
            hole_ratio = 1.

        confidence = (
            validity * self.WEIGHT_VALIDITY +
            alignment * self.WEIGHT_ALIGNMENT +
            hole_ratio * self.WEIGHT_HOLE_RATIO
        )
        return max(0., min(1., float(confidence)))

    def is_confidence_acceptable(self, confidence, is_virtual=False):
        ''' Is a reading good enough to act on ? '''

        if is_virtual:
            return confidence >= self.MIN_CONFIDENCE_VIRTUAL
        return confidence >= self.MIN_CONFIDENCE_REAL

    def low_confidence_message(self, confidence):
        ''' Advice for the user when a reading is not acceptable '''

        if confidence < .5:
            return "The card is too faded to read, the holes cannot be told from the card"
        if confidence < .75:
            return "The image is obscured by shadows, try better lighting"
        return "The card is unclear, please provide a sharper image"

_detector = HoleDetector()

def preprocess_image(buffer):
    ''' See HoleDetector.preprocess_image '''
    return _detector.preprocess_image(buffer)

def detect_holes(buffer):
    ''' See HoleDetector.detect_holes '''
    return _detector.detect_holes(buffer)

def calculate_confidence(pattern):
    ''' See HoleDetector.calculate_confidence '''
    return _detector.calculate_confidence(pattern)

def is_confidence_acceptable(confidence, is_virtual=False):
    ''' See HoleDetector.is_confidence_acceptable '''
    return _detector.is_confidence_acceptable(confidence, is_virtual)

def low_confidence_message(confidence):
    ''' See HoleDetector.low_confidence_message '''
    return _detector.low_confidence_message(confidence)
