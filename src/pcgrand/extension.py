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


"""Extended PCG generators (EXPERIMENTAL)

An extended generator pairs a base :class:`.PcgEngine` with a table of K = 2^n
additional words. Every output of the base generator is xored with one of the words,
picked using the low bits of the base state, and the whole table is advanced like an
odometer every time a group of state bits is zero. This multiplies the period by a
factor related to the period of the table.

The construction follows the description in the PCG paper, but it has not been
checked against the reference C++ implementation: its output sequence must not be
considered canonical. The base generator is never modified by the table, so the
guarantees of :class:`.PcgEngine` still hold for the wrapped engine.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
import logging

from pcgrand.engine import GeneratorConfig, PcgEngine
from pcgrand.numops import lcg_step, mask
from pcgrand.seeds import Seed
from pcgrand.stream import StreamKind

LOGGER = logging.getLogger(__name__)

EXPERIMENTAL = True

MAX_TABLE_BITS = 16

_warned = False


@dataclass(frozen=True)
class ExtendedConfig:
    """The shape of an extended generator

    -   `base` (:class:`.GeneratorConfig`): the wrapped generator;
    -   `table_bits` (int): the table holds ``2**table_bits`` words;
    -   `tick_bits` (int or ``None``): the table is advanced whenever the lowest
        `tick_bits` bits of the base state are all zero. If ``None``, the table
        never changes.
    """

    base: GeneratorConfig = field(default_factory=GeneratorConfig)
    table_bits: int = 6
    tick_bits: Optional[int] = 16

    def __post_init__(self):
        if not (0 <= self.table_bits <= MAX_TABLE_BITS):
            raise ValueError(f"invalid table size 2^{self.table_bits}, the exponent must be in [0, {MAX_TABLE_BITS}]")

        if self.tick_bits is not None and not (1 <= self.tick_bits < self.base.bits):
            raise ValueError(f"invalid tick_bits={self.tick_bits} for a {self.base.bits}-bit generator")

    @property
    def table_size(self) -> int:
        return 1 << self.table_bits


def _warn_experimental():
    global _warned
    if not _warned:
        LOGGER.warning("extended PCG generators are experimental, their output is not canonical")
        _warned = True


class ExtendedGenerator:
    """A PCG generator with an extension table (EXPERIMENTAL)

    Use :meth:`.ExtendedGenerator.new` to create and seed a generator, or
    :meth:`.ExtendedGenerator.from_engine` to extend an existing engine."""

    base: PcgEngine
    table: List[int]

    def __init__(self, base: PcgEngine, table: List[int], tick_bits: Union[int, None] = 16):
        self.base = base
        self.table = [x & mask(base.config.bits) for x in table]
        self.config = ExtendedConfig(base=base.config, table_bits=len(table).bit_length() - 1, tick_bits=tick_bits)
        assert len(self.table) == self.config.table_size, "the size of the table must be a power of two"

        _warn_experimental()

    @classmethod
    def from_engine(cls, base: PcgEngine, table_bits: int = 6, tick_bits: Union[int, None] = 16):
        """Wrap `base`, filling the table with its outputs

        Each W-bit word is made of W/O consecutive outputs of the base generator, so
        this advances `base` by ``2**table_bits * W / O`` steps."""
        words_per_entry = base.config.bits // base.config.output_bits
        table = []
        for _ in range(1 << table_bits):
            word = 0
            for _ in range(words_per_entry):
                word = (word << base.config.output_bits) | base.random()
            table.append(word)

        return cls(base, table, tick_bits)

    @classmethod
    def zeroed(cls, base: PcgEngine, table_bits: int = 6, tick_bits: Union[int, None] = None):
        """Wrap `base` with a table full of zeros

        With ``tick_bits=None`` the extended generator returns exactly the same
        numbers as `base` would."""
        return cls(base, [0] * (1 << table_bits), tick_bits)

    @classmethod
    def new(cls, config: ExtendedConfig = ExtendedConfig(), seed: Union[Seed, None] = None):
        """Create a new base generator from `seed` and extend it"""
        return cls.from_engine(PcgEngine(config.base, seed), config.table_bits, config.tick_bits)

    def _step_word(self, index: int) -> bool:
        bits = self.base.config.bits
        self.table[index] = lcg_step(self.table[index], 2 * index + 1, self.base.multiplier, bits)
        return self.table[index] == 0

    def advance_table(self):
        """Advance every word in the table; a word that wraps around to zero makes the next one skip ahead"""
        carry = False
        for i in range(len(self.table)):
            if carry:
                carry = self._step_word(i)
            carry = self._step_word(i) or carry

        LOGGER.debug("extension table of %d words advanced", len(self.table))

    def _extension_value(self) -> int:
        counter = self.base.state
        if self.base.config.stream == StreamKind.NOSEQ:
            # The two lowest bits of a multiplicative generator are constant
            counter >>= 2

        tick_bits = self.config.tick_bits
        if tick_bits is not None and counter & mask(tick_bits) == 0:
            self.advance_table()

        return self.table[counter & (len(self.table) - 1)]

    def random(self) -> int:
        """Return a new random number and advance the base generator and (sometimes) the table"""
        extension = self._extension_value()
        base_config = self.base.config
        return self.base.random() ^ (extension >> (base_config.bits - base_config.output_bits))

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.random()

    def __eq__(self, other):
        if not isinstance(other, ExtendedGenerator):
            return NotImplemented

        return self.config == other.config and self.base == other.base and self.table == other.table

    def __repr__(self):
        return f"ExtendedGenerator({self.base!r}, table_size={len(self.table)}, tick_bits={self.config.tick_bits})"
