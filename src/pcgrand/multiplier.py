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


from enum import Enum

from pcgrand.numops import check_width


class MultiplierKind(Enum):
    """Families of LCG multipliers

    -   `DEFAULT`: the multiplier recommended for a full LCG with an odd increment;
    -   `MCG`: the multiplier recommended for a multiplicative generator (zero increment);
    -   `CHEAP`: a multiplier that is only 64-bit wide even for 128-bit states. Used by DXSM.
    """

    DEFAULT = 1
    MCG = 2
    CHEAP = 3


def _uint128(high: int, low: int) -> int:
    return (high << 64) | low


# Multipliers with good figures of merit in the spectral test, taken from the
# reference C++ implementation of PCG (and originally from L'Ecuyer's tables)
_MULTIPLIERS = {
    MultiplierKind.DEFAULT: {
        8: 141,
        16: 12829,
        32: 747796405,
        64: 6364136223846793005,
        128: _uint128(2549297995355413924, 4865540595714422341),
    },
    MultiplierKind.MCG: {
        8: 217,
        16: 62169,
        32: 277803737,
        64: 12605985483714917081,
        128: _uint128(17766728186571221404, 12605985483714917081),
    },
    MultiplierKind.CHEAP: {
        8: 141,
        16: 12829,
        32: 747796405,
        64: 6364136223846793005,
        128: 0xDA942042E4DD58B5,
    },
}

# Increments used by generators with a single fixed stream
_ONESEQ_INCREMENTS = {
    8: 77,
    16: 47989,
    32: 2891336453,
    64: 1442695040888963407,
    128: _uint128(6364136223846793005, 1442695040888963407),
}


def multiplier(bits: int, kind: MultiplierKind = MultiplierKind.DEFAULT) -> int:
    """Return the LCG multiplier for a state of `bits` bits"""
    return _MULTIPLIERS[kind][check_width(bits)]


def oneseq_increment(bits: int) -> int:
    """Return the fixed (odd) increment shared by all the single-stream generators of width `bits`"""
    return _ONESEQ_INCREMENTS[check_width(bits)]
