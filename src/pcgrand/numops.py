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


from pcgrand.errors import UnsupportedOperationError

# Python integers have no fixed width, so every arithmetic operation on a
# generator's state must be clipped explicitly. In languages like C++ or Rust
# declaring a variable as `uint64_t` or `u64` is enough, and the CPU wraps the
# result for free.

SUPPORTED_WIDTHS = (8, 16, 32, 64, 128)


def check_width(bits: int) -> int:
    """Return `bits` if it is a state/output width known to the library

    Raise :class:`.UnsupportedOperationError` otherwise."""
    if bits not in SUPPORTED_WIDTHS:
        raise UnsupportedOperationError(
            f"unsupported integer width {bits}, valid widths are {', '.join(str(x) for x in SUPPORTED_WIDTHS)}"
        )
    return bits


def mask(bits: int) -> int:
    """Return an integer with the lowest `bits` bits set"""
    return (1 << bits) - 1


def to_uint(x: int, bits: int) -> int:
    """Clip an integer so that it occupies `bits` bits"""
    return x & ((1 << bits) - 1)


def to_uint64(x: int) -> int:
    """Clip an integer so that it occupies 64 bits"""
    return x & 0xFFFFFFFFFFFFFFFF


def to_uint32(x: int) -> int:
    """Clip an integer so that it occupies 32 bits"""
    return x & 0xFFFFFFFF


def wrap_add(a: int, b: int, bits: int) -> int:
    return (a + b) & ((1 << bits) - 1)


def wrap_mul(a: int, b: int, bits: int) -> int:
    return (a * b) & ((1 << bits) - 1)


def rotr(value: int, rot: int, bits: int) -> int:
    """Rotate the `bits`-wide integer `value` right by `rot` positions"""
    rot &= bits - 1
    return ((value >> rot) | (value << ((-rot) & (bits - 1)))) & ((1 << bits) - 1)


def lcg_step(state: int, increment: int, multiplier: int, bits: int) -> int:
    """Advance a linear congruential generator by one step

    Compute ``(state * multiplier + increment) mod 2**bits``. This is the only
    way the internal state of a PCG generator ever moves forward."""
    return (state * multiplier + increment) & ((1 << bits) - 1)
