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
   Exceptions
   ----------

   Only structural problems are exceptions.  Unreadable columns, poor
   vision confidence and unrecognized languages are reported as data.
'''

class PunchCardError(Exception):
    ''' Base class for all punchcard errors '''

class ShapeError(PunchCardError, ValueError):
    ''' Grid does not have the dimensions of its card type '''

class BitStringError(PunchCardError, ValueError):
    ''' Bit string contains something other than '0' and '1' '''

class InvalidLengthError(BitStringError):
    ''' Bit string is not exactly one card long '''

    def __init__(self, expected, got):
        super().__init__("Invalid bit length: expected %d, got %d" % (expected, got))
        self.expected = expected
        self.got = got

class ImageDecodeError(PunchCardError):
    ''' Buffer could not be decoded as an image '''

class UnencodableCharacterError(PunchCardError, KeyError):
    ''' Character has no punch code in the chosen standard '''
