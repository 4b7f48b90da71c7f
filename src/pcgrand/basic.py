# -*- encoding: utf-8 -*-
#
# The MIT License (MIT)
#
# Copyright © 2021 Maurizio Tomasi
#
# Permission is hereby granted, free of charge, to any person obtaining a copy of this software and associated
# documentation files (the “Software”), to deal in the Software without restriction, including without limitation the
# rights to use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all copies or substantial portions of
# the Software. THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT NOT
# LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT
# SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF
# CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.


from pcgrand.numops import to_uint32, to_uint64

# Constants of the 64-bit LCG used by the minimal PCG32
_MULTIPLIER = 6364136223846793005


class Pcg32Basic:
    """A minimal PCG32 generator: 64-bit state, 32-bit output, XSH-RR permutation

    This is a direct implementation of the "minimal C" version of PCG, with none of
    the configurability of :class:`.PcgEngine`. It is mostly useful to show how PCG
    works, and as an independent check of the generic engine."""

    __slots__ = ("state", "inc")

    def __init__(self, init_state=42, init_seq=54):
        self.state = 0
        self.inc = to_uint64((init_seq << 1) | 1)
        self.next_u32()
        self.state = to_uint64(self.state + init_state)
        self.next_u32()

    @classmethod
    def from_state(cls, state: int, inc: int) -> "Pcg32Basic":
        """Build a generator with the given raw state and increment (forced to be odd)"""
        result = cls.__new__(cls)
        result.state = to_uint64(state)
        result.inc = to_uint64(inc | 1)
        return result

    def next_u32(self) -> int:
        """Return a new 32-bit random number and advance the internal state"""
        oldstate = self.state
        self.state = to_uint64(oldstate * _MULTIPLIER + self.inc)

        xorshifted = to_uint32(((oldstate >> 18) ^ oldstate) >> 27)
        rot = oldstate >> 59
        return to_uint32((xorshifted >> rot) | (xorshifted << ((-rot) & 31)))

    def next_u64(self) -> int:
        """Return a 64-bit number made of two consecutive 32-bit outputs (the first one is the low half)"""
        low = self.next_u32()
        return (self.next_u32() << 32) | low

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.next_u32()
