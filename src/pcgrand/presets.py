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


from typing import Dict

from pcgrand.engine import GeneratorConfig
from pcgrand.outputmix import PermutationKind
from pcgrand.stream import StreamKind

# The names follow the ones used by the reference C and C++ libraries

PCG32 = GeneratorConfig(64, 32, StreamKind.SETSEQ, PermutationKind.XSH_RR, name="pcg32")
PCG32_ONESEQ = GeneratorConfig(64, 32, StreamKind.ONESEQ, PermutationKind.XSH_RR, name="pcg32_oneseq")
PCG32_UNIQUE = GeneratorConfig(64, 32, StreamKind.UNIQUE, PermutationKind.XSH_RR, name="pcg32_unique")
PCG32_FAST = GeneratorConfig(64, 32, StreamKind.NOSEQ, PermutationKind.XSH_RS, name="pcg32_fast")

# 32-bit output, 128-bit state: much longer period, slower
PCG32L = GeneratorConfig(128, 32, StreamKind.SETSEQ, PermutationKind.XSH_RR, name="pcg32l")

PCG64 = GeneratorConfig(128, 64, StreamKind.SETSEQ, PermutationKind.XSL_RR, name="pcg64")
PCG64_ONESEQ = GeneratorConfig(128, 64, StreamKind.ONESEQ, PermutationKind.XSL_RR, name="pcg64_oneseq")
PCG64_UNIQUE = GeneratorConfig(128, 64, StreamKind.UNIQUE, PermutationKind.XSL_RR, name="pcg64_unique")
PCG64_FAST = GeneratorConfig(128, 64, StreamKind.NOSEQ, PermutationKind.XSL_RR, name="pcg64_fast")
PCG64_DXSM = GeneratorConfig(128, 64, StreamKind.SETSEQ, PermutationKind.DXSM, name="pcg64_dxsm")

# Output is as wide as the state: every number is produced exactly once per period
PCG32_ONCE_INSECURE = GeneratorConfig(32, 32, StreamKind.SETSEQ, PermutationKind.RXS_M_XS, name="pcg32_once_insecure")
PCG64_ONCE_INSECURE = GeneratorConfig(64, 64, StreamKind.SETSEQ, PermutationKind.RXS_M_XS, name="pcg64_once_insecure")

DEFAULT = PCG64_DXSM

PRESETS: Dict[str, GeneratorConfig] = {
    config.name: config
    for config in [
        PCG32,
        PCG32_ONESEQ,
        PCG32_UNIQUE,
        PCG32_FAST,
        PCG32L,
        PCG64,
        PCG64_ONESEQ,
        PCG64_UNIQUE,
        PCG64_FAST,
        PCG64_DXSM,
        PCG32_ONCE_INSECURE,
        PCG64_ONCE_INSECURE,
    ]
}


def preset(name: str) -> GeneratorConfig:
    """Return the configuration of a named generator, e.g. ``"pcg32"``"""
    try:
        return PRESETS[name.lower()]
    except KeyError:
        raise KeyError(f"unknown generator «{name}», valid names are {', '.join(sorted(PRESETS))}")
