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
   Demonstration cards
   -------------------
'''

from .ebcdic import Standard, encode_text

DEMO_CARDS = {
    'HELLO WORLD': 'Classic programmer greeting',
    'FORTRAN': 'The ancient language of punch cards',
    'CODE 1960': 'When punch cards ruled the world',
    'IBM 029': 'The legendary keypunch machine',
    'PUNCH CARD': 'The medium itself',
}

LINE_BASED_DEMOS = {
    'HELLO_WORLD_PYTHON': '''\
print("Hello, World!")
print("Resurrected from punch cards!")
print("Each line is a binary sequence")''',

    'FIBONACCI_PYTHON': '''\
def fibonacci(n):
    if n <= 1:
        return n
    return fibonacci(n-1) + fibonacci(n-2)

for i in range(10):
    print(fibonacci(i))''',

    'FACTORIAL_JS': '''\
function factorial(n) {
    if (n <= 1) return 1;
    return n * factorial(n - 1);
}

console.log(factorial(5));''',

    'CLASSIC_FORTRAN': '''\
      PROGRAM HELLO
      PRINT *, 'HELLO WORLD'
      PRINT *, 'FROM PUNCHCARDS'
      END PROGRAM''',
}

def demo_grid(name, standard=Standard.IBM029):
    ''' The classic card for a demo, KeyError for unknown names '''

    if name not in DEMO_CARDS:
        raise KeyError(name)
    return encode_text(name, standard)
