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


"""Output permutation functions

Each function takes the W-bit internal state of a generator and returns an O-bit
value. Shift and rotation amounts are computed from W and O in the same way as the
reference C++ implementation of PCG (``pcg_random.hpp``), so that the outputs match
the published generators bit for bit. None of the amounts can be configured.

Naming follows the PCG paper:

-   ``XSH``: xorshift the high bits down;
-   ``XSL``: xorshift the high half into the low half;
-   ``RR``: random rotation, the amount being read from the top bits of the state;
-   ``RS``: random shift, the amount being read from the top bits of the state;
-   ``RXS``: random xorshift;
-   ``M``: multiplication by a constant;
-   ``DXSM``: "double xorshift multiply".
"""

from enum import Enum
from typing import Callable, Dict

from pcgrand.multiplier import MultiplierKind, multiplier
from pcgrand.numops import check_width, mask, rotr, wrap_mul


class PermutationKind(Enum):
    XSH_RS = 1
    XSH_RR = 2
    XSL_RR = 3
    RXS_M_XS = 4
    DXSM = 5


def output_xsh_rs(state: int, bits: int, xbits: int) -> int:
    sparebits = bits - xbits
    if sparebits - 5 >= 64:
        opbits = 5
    elif sparebits - 4 >= 32:
        opbits = 4
    elif sparebits - 3 >= 16:
        opbits = 3
    elif sparebits - 2 >= 4:
        opbits = 2
    elif sparebits - 1 >= 1:
        opbits = 1
    else:
        opbits = 0

    opmask = (1 << opbits) - 1
    maxrandshift = opmask
    topspare = opbits
    bottomspare = sparebits - topspare
    xshift = topspare + (xbits + maxrandshift) // 2

    rshift = (state >> (bits - opbits)) & opmask if opbits else 0
    state ^= state >> xshift
    return (state >> (bottomspare - maxrandshift + rshift)) & mask(xbits)


def _wanted_rotation_bits(xbits: int) -> int:
    if xbits >= 128:
        return 7
    elif xbits >= 64:
        return 6
    elif xbits >= 32:
        return 5
    elif xbits >= 16:
        return 4
    else:
        return 3


def output_xsh_rr(state: int, bits: int, xbits: int) -> int:
    sparebits = bits - xbits
    wantedopbits = _wanted_rotation_bits(xbits)
    opbits = min(sparebits, wantedopbits)
    amplifier = wantedopbits - opbits
    opmask = (1 << opbits) - 1
    topspare = opbits
    bottomspare = sparebits - topspare
    xshift = (topspare + xbits) // 2

    rot = (state >> (bits - opbits)) & opmask if opbits else 0
    amprot = (rot << amplifier) & opmask
    state ^= state >> xshift
    return rotr((state >> bottomspare) & mask(xbits), amprot, xbits)


def output_xsl_rr(state: int, bits: int, xbits: int) -> int:
    sparebits = bits - xbits
    wantedopbits = _wanted_rotation_bits(xbits)
    opbits = min(sparebits, wantedopbits)
    amplifier = wantedopbits - opbits
    opmask = (1 << opbits) - 1
    topspare = sparebits
    bottomspare = sparebits - topspare
    xshift = (topspare + xbits) // 2

    rot = (state >> (bits - opbits)) & opmask if opbits else 0
    amprot = (rot << amplifier) & opmask
    state ^= state >> xshift
    return rotr((state >> bottomspare) & mask(xbits), amprot, xbits)


def output_rxs_m_xs(state: int, bits: int, xbits: int) -> int:
    if xbits >= 128:
        opbits = 6
    elif xbits >= 64:
        opbits = 5
    elif xbits >= 32:
        opbits = 4
    elif xbits >= 16:
        opbits = 3
    else:
        opbits = 2

    shift = bits - xbits
    opmask = (1 << opbits) - 1

    rshift = (state >> (bits - opbits)) & opmask
    state ^= state >> (opbits + rshift)
    state = wrap_mul(state, multiplier(bits, MultiplierKind.MCG), bits)
    result = (state >> shift) & mask(xbits)
    return result ^ (result >> ((2 * xbits + 2) // 3))


def output_dxsm(state: int, bits: int, xbits: int) -> int:
    xmask = mask(xbits)
    hi = (state >> (bits - xbits)) & xmask
    lo = (state & xmask) | 1

    hi ^= hi >> (xbits // 2)
    hi = wrap_mul(hi, multiplier(bits, MultiplierKind.CHEAP), xbits)
    hi ^= hi >> (3 * (xbits // 4))
    return wrap_mul(hi, lo, xbits)


PERMUTATIONS: Dict[PermutationKind, Callable[[int, int, int], int]] = {
    PermutationKind.XSH_RS: output_xsh_rs,
    PermutationKind.XSH_RR: output_xsh_rr,
    PermutationKind.XSL_RR: output_xsl_rr,
    PermutationKind.RXS_M_XS: output_rxs_m_xs,
    PermutationKind.DXSM: output_dxsm,
}


def check_output_width(kind: PermutationKind, bits: int, xbits: int):
    """Raise `ValueError` if permutation `kind` cannot map `bits` bits of state into `xbits` bits"""
    check_width(bits)
    check_width(xbits)

    if kind == PermutationKind.RXS_M_XS:
        ok = xbits <= bits
    elif kind == PermutationKind.DXSM:
        ok = 2 * xbits <= bits
    else:
        ok = xbits < bits

    if not ok:
        raise ValueError(f"permutation {kind.name} cannot produce {xbits}-bit outputs from a {bits}-bit state")


def permute(kind: PermutationKind, state: int, bits: int, xbits: int) -> int:
    """Apply the output permutation `kind` to a `bits`-wide state, returning `xbits` bits"""
    return PERMUTATIONS[kind](state, bits, xbits)
