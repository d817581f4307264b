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
   main function for command line use
   ==================================

   python -m punchcard read IMAGE...
   python -m punchcard encode SOURCE
   python -m punchcard decode DECK.json

   Add -v for debug logging.
'''

import sys
import json
import logging

from . import ebcdic
from . import linebits
from . import vision
from .errors import PunchCardError

log = logging.getLogger("punchcard")

def read_images(filenames):
    ''' Read photographed cards, one line of output per image '''

    for fn in filenames:
        with open(fn, "rb") as file:
            pattern = vision.detect_holes(file.read())
        standard = ebcdic.auto_detect_encoding(pattern)
        card = ebcdic.decode_pattern(pattern, standard)
        t = card.source_code
        if not t.isprintable():
            t = "<<unreadable>>"
        if vision.is_confidence_acceptable(pattern.confidence):
            print("good", t.ljust(80), standard.value, card.language.value, fn)
        else:
            print("bad ", t.ljust(80), standard.value, card.language.value, fn)
            print("# " + vision.low_confidence_message(pattern.confidence))
            for i in pattern.grid.dump():
                print("# " + i)

def encode(fn):
    ''' Source file to line based deck on stdout '''

    with open(fn, encoding="utf-8") as file:
        text = file.read()
    deck = linebits.encode_source(
        text,
        language=linebits.detect_language(text),
        filename=fn,
    )
    json.dump(deck.to_dict(), sys.stdout, indent=1)
    print()

def decode(fn):
    ''' Line based deck to source on stdout '''

    with open(fn, encoding="utf-8") as file:
        deck = linebits.LineBasedDeck.from_dict(json.load(file))
    print(linebits.decode_source(deck).source_code)

def main(argv):
    ''' Dispatch on the first argument '''

    argv = list(argv[1:])
    verbose = "-v" in argv
    argv = [a for a in argv if a != "-v"]
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if len(argv) < 2 or argv[0] not in ("read", "encode", "decode"):
        print(__doc__, file=sys.stderr)
        return 1

    try:
        if argv[0] == "read":
            read_images(argv[1:])
        elif argv[0] == "encode":
            encode(argv[1])
        else:
            decode(argv[1])
    except (PunchCardError, OSError) as err:
        log.error("%s", err)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main(sys.argv))
