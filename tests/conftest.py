'''Shared fixtures: synthetic card photographs.'''

import imageio.v3
import numpy as np
import pytest


# Punches spelling PROGRAM in IBM 029 (P=11-7 R=11-9 O=11-6 G=12-7 R=11-9 A=12-1 M=11-4)
PROGRAM_PUNCHES = [
    (1, 0), (9, 0),
    (1, 1), (11, 1),
    (1, 2), (8, 2),
    (0, 3), (9, 3),
    (1, 4), (11, 4),
    (0, 5), (3, 5),
    (1, 6), (6, 6),
]


def _card_image(punches, width=800, height=240, background=230, hole=20, color=False):
    im = np.full((height, width), background, dtype=np.uint8)
    cell_w = width / 80
    cell_h = height / 12
    for row, col in punches:
        im[int(row * cell_h):int((row + 1) * cell_h), int(col * cell_w):int((col + 1) * cell_w)] = hole
    if color:
        im = np.stack([im, im, im], axis=-1)
    return im


def _png(im):
    return imageio.v3.imwrite("<bytes>", im, extension=".png")


@pytest.fixture
def card_image():
    '''Factory for a card image array with dark holes at (row, col) cells.'''
    return _card_image


@pytest.fixture
def card_png():
    '''Factory for PNG bytes of a card image.'''
    def make(punches, **kwargs):
        return _png(_card_image(punches, **kwargs))
    return make


@pytest.fixture
def program_punches():
    return list(PROGRAM_PUNCHES)
