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


from dataclasses import dataclass
import secrets

from pcgrand.errors import InvalidPcgData
from pcgrand.numops import check_width, to_uint


def _uint128(high: int, low: int) -> int:
    return (high << 64) | low


# Seeds used when a generator is created without an explicit one: every
# "unseeded" generator of a given width produces the same sequence
_DEFAULT_SEEDS = {
    8: (0xE1, 0xB3),
    16: (0xAA19, 0x4FD8),
    32: (0x308A20A0, 0xD13351F1),
    64: (0x18013CAD3A483F72, 0x51DBFCDA0D6B21D4),
    128: (_uint128(0xECC1C32BE531D51A, 0x93DCE189F91629F4), _uint128(0xF1CB2035E14FF74B, 0x46EF3505C5386547)),
}


@dataclass(frozen=True)
class Seed:
    """The two numbers needed to seed a PCG generator

    -   `state`: the initial state contribution;
    -   `sequence`: the sequence selector. It is ignored by every stream kind
        except :attr:`.StreamKind.SETSEQ`.
    """

    state: int = 0
    sequence: int = 0

    def clip(self, bits: int) -> "Seed":
        """Return a copy of the seed with both values clipped to `bits` bits"""
        return Seed(state=to_uint(self.state, bits), sequence=to_uint(self.sequence, bits))

    @staticmethod
    def default(bits: int) -> "Seed":
        """Return the fixed seed used by unseeded generators of width `bits`"""
        state, sequence = _DEFAULT_SEEDS[check_width(bits)]
        return Seed(state=state, sequence=sequence)

    @staticmethod
    def from_entropy(bits: int) -> "Seed":
        """Draw a new seed from the operating system's source of randomness"""
        check_width(bits)
        return Seed(state=secrets.randbits(bits), sequence=secrets.randbits(bits))

    @staticmethod
    def from_bytes(data: bytes, bits: int) -> "Seed":
        """Read a seed from two consecutive little-endian words of `bits` bits each"""
        size = check_width(bits) // 8
        if len(data) != 2 * size:
            raise InvalidPcgData(f"a seed for a {bits}-bit generator needs {2 * size} bytes, got {len(data)}")

        return Seed(
            state=int.from_bytes(data[:size], "little"),
            sequence=int.from_bytes(data[size:], "little"),
        )
