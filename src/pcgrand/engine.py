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


from dataclasses import dataclass, field
from typing import Optional, Union
import logging

from pcgrand.errors import UnsupportedOperationError
from pcgrand.multiplier import MultiplierKind, multiplier
from pcgrand.numops import check_width, lcg_step, mask, to_uint, wrap_add
from pcgrand.outputmix import PermutationKind, check_output_width, permute
from pcgrand.seeds import Seed
from pcgrand.stream import SetSeqStream, Stream, StreamKind, build_stream

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratorConfig:
    """The shape of a PCG generator

    A configuration fixes everything that determines the output sequence apart
    from the seed:

    -   `bits` (int): width of the internal state and of the increment;
    -   `output_bits` (int): width of the numbers returned by :meth:`.PcgEngine.random`;
    -   `stream` (:class:`.StreamKind`): how the increment is chosen;
    -   `permutation` (:class:`.PermutationKind`): the output function;
    -   `multiplier` (:class:`.MultiplierKind`): which table multiplier drives the LCG.
        If ``None``, `MCG` is used for `NOSEQ` streams, `CHEAP` for DXSM generators
        and `DEFAULT` for everything else;
    -   `output_previous` (bool): if ``True``, the permutation is applied to the state
        *before* advancing it. If ``None``, use the same rule as the reference
        implementation: ``True`` for states up to 64 bits and for cheap-multiplier
        generators, ``False`` otherwise.

    The default values describe a 128-bit generator with 64-bit DXSM output, which is
    the recommended choice for new code.
    """

    bits: int = 128
    output_bits: int = 64
    stream: StreamKind = StreamKind.SETSEQ
    permutation: PermutationKind = PermutationKind.DXSM
    multiplier: Optional[MultiplierKind] = None
    output_previous: Optional[bool] = None
    name: str = field(default="", compare=False)

    def __post_init__(self):
        check_width(self.bits)
        check_output_width(self.permutation, self.bits, self.output_bits)

        # The dataclass is frozen, so defaults must be resolved behind its back
        if self.multiplier is None:
            if self.stream == StreamKind.NOSEQ:
                kind = MultiplierKind.MCG
            elif self.permutation == PermutationKind.DXSM:
                kind = MultiplierKind.CHEAP
            else:
                kind = MultiplierKind.DEFAULT
            object.__setattr__(self, "multiplier", kind)

        if self.output_previous is None:
            object.__setattr__(self, "output_previous", self.bits <= 64 or self.multiplier == MultiplierKind.CHEAP)

    @property
    def multiplier_value(self) -> int:
        return multiplier(self.bits, self.multiplier)

    @property
    def period_pow2(self) -> int:
        """Base-2 logarithm of the period of the generator"""
        # The two lowest bits of a multiplicative generator never change
        return self.bits - 2 if self.stream == StreamKind.NOSEQ else self.bits

    def describe(self) -> str:
        """Return a short name like ``setseq_xsh_rr_64_32``"""
        return "_".join(
            [self.stream.name.lower(), self.permutation.name.lower(), str(self.bits), str(self.output_bits)]
        )


class PcgEngine:
    """A generic PCG generator

    The engine combines a linear congruential generator (LCG) with an output
    permutation. Its shape is fixed by a :class:`.GeneratorConfig`; the initial state
    comes from a :class:`.Seed` (if ``None``, a fixed default seed is used, so that
    unseeded generators are reproducible).

    Engines are not thread-safe: use one instance per thread, or protect a shared
    instance with a lock.
    """

    config: GeneratorConfig
    stream: Stream

    def __init__(self, config: GeneratorConfig = GeneratorConfig(), seed: Union[Seed, None] = None):
        self.config = config
        self._multiplier = config.multiplier_value
        self.stream = build_stream(config.stream, config.bits)
        self._state = 0

        if seed is None:
            seed = Seed.default(config.bits)

        self.seed(seed.state, seed.sequence)

    @property
    def state(self) -> int:
        return self._state

    @property
    def increment(self) -> int:
        return self.stream.increment

    @property
    def multiplier(self) -> int:
        return self._multiplier

    def seed(self, init_state: int, init_seq: int = 0):
        """Reset the generator

        The `init_seq` parameter selects the sequence, and it is used only by
        `SETSEQ` generators. Any pair of integers is accepted; they are clipped to
        the width of the state."""
        bits = self.config.bits
        clipped = Seed(state=init_state, sequence=init_seq).clip(bits)

        if self.config.stream == StreamKind.SETSEQ:
            self.stream.set_stream(clipped.sequence)

        if self.config.stream == StreamKind.NOSEQ:
            # With a zero increment, state 0 is a fixed point and even states
            # shorten the period: the reference implementation forces the two
            # lowest bits to 1
            self._state = clipped.state | 3
            return

        self._state = 0
        self.step()
        self._state = wrap_add(self._state, clipped.state, bits)
        self.step()

    def set_stream(self, selector: int):
        """Switch to another sequence without touching the state (only for `SETSEQ` generators)"""
        self.stream.set_stream(to_uint(selector, self.config.bits))

    def step(self):
        """Advance the internal state by one step, without producing any output"""
        self._state = lcg_step(self._state, self.stream.increment, self._multiplier, self.config.bits)

    def random(self) -> int:
        """Return a new random number and advance the internal state"""
        config = self.config
        oldstate = self._state
        self.step()

        permuted = oldstate if config.output_previous else self._state
        return permute(config.permutation, permuted, config.bits, config.output_bits)

    def __iter__(self):
        return self

    def __next__(self) -> int:
        return self.random()

    def _load(self, state: int, increment: Union[int, None] = None):
        # Only called after the caller has checked that `state` and `increment` are valid
        if increment is not None:
            assert isinstance(self.stream, SetSeqStream)
            self.stream.set_increment(increment)

        self._state = state

    @classmethod
    def from_state(cls, config: GeneratorConfig, state: int, increment: Union[int, None] = None) -> "PcgEngine":
        """Create a generator whose internal state is exactly `state`

        The `increment` must be an odd number, and it can only be passed to
        `SETSEQ` generators; the other stream kinds derive it from their type."""
        result = cls(config)

        if increment is not None:
            if config.stream != StreamKind.SETSEQ:
                raise UnsupportedOperationError(f"the increment of a {config.stream.name} generator cannot be set")

            if increment & 1 == 0 or increment > mask(config.bits):
                raise ValueError(f"invalid increment {increment:#x} for a {config.bits}-bit generator")

        result._load(to_uint(state, config.bits), increment)
        return result

    def __eq__(self, other):
        if not isinstance(other, PcgEngine):
            return NotImplemented

        return self.config == other.config and self._state == other._state and self.increment == other.increment

    def __repr__(self):
        return f"PcgEngine({self.config.describe()}, state={self._state:#x}, increment={self.increment:#x})"


def new(config: GeneratorConfig = GeneratorConfig(), seed: Union[Seed, None] = None) -> PcgEngine:
    """Create and seed a new generator"""
    engine = PcgEngine(config, seed)
    LOGGER.debug("created %s", engine)
    return engine
