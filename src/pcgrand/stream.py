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
from itertools import count
import logging
import threading

from pcgrand.errors import UnsupportedOperationError
from pcgrand.multiplier import oneseq_increment
from pcgrand.numops import mask

LOGGER = logging.getLogger(__name__)


class StreamKind(Enum):
    """Policies used to pick the increment of the underlying LCG

    -   `ONESEQ`: one fixed increment shared by every generator with the same width;
    -   `NOSEQ`: the increment is zero, and the LCG degenerates into a multiplicative
        generator. Faster, but the period drops to 2^(W-2) and quality is lower;
    -   `UNIQUE`: every instance gets its own increment, drawn from a process-wide counter.
        Sequences are not reproducible across runs and cannot be saved;
    -   `SETSEQ`: the caller chooses the sequence; the increment is ``(selector << 1) | 1``.
    """

    ONESEQ = 1
    NOSEQ = 2
    UNIQUE = 3
    SETSEQ = 4


# The only piece of process-wide mutable state in the library
_UNIQUE_COUNTER = count()
_UNIQUE_LOCK = threading.Lock()

# An odd constant, so that multiplying by it modulo 2^k is a bijection
_UNIQUE_SCRAMBLER = 0x9E3779B97F4A7C15F39CC0605CEDC835


def next_unique_identity() -> int:
    """Return a number that no other call in this process has ever returned"""
    with _UNIQUE_LOCK:
        return next(_UNIQUE_COUNTER)


class Stream:
    """Base class for the objects that hold the increment of a generator

    Streams are chosen when a generator is built and never change kind afterwards."""

    kind: StreamKind
    bits: int

    def __init__(self, bits: int):
        self.bits = bits

    @property
    def increment(self) -> int:
        raise NotImplementedError("Stream.increment is an abstract property")

    @property
    def serializable(self) -> bool:
        """True if the increment can be rebuilt from saved data or from the type alone"""
        return True

    def set_stream(self, selector: int):
        raise UnsupportedOperationError(f"the sequence of a {self.kind.name} stream cannot be changed")

    def __eq__(self, other):
        return type(self) is type(other) and self.bits == other.bits and self.increment == other.increment

    def __repr__(self):
        return f"{type(self).__name__}(bits={self.bits}, increment={self.increment:#x})"


class OneSeqStream(Stream):
    """A stream whose increment is a fixed constant"""

    kind = StreamKind.ONESEQ

    @property
    def increment(self) -> int:
        return oneseq_increment(self.bits)


class NoSeqStream(Stream):
    """A stream with a zero increment (multiplicative congruential generator)"""

    kind = StreamKind.NOSEQ

    @property
    def increment(self) -> int:
        return 0


class UniqueStream(Stream):
    """A stream that is different for every instance

    The identity is taken from a process-wide counter protected by a lock, and it is
    scrambled through a bijection of the (W-1)-bit selectors. Increments are therefore
    exactly distinct as long as fewer than 2^(W-1) instances are created; for small
    widths (8 or 16 bits) this limit is easy to reach, and uniqueness becomes best-effort."""

    kind = StreamKind.UNIQUE

    def __init__(self, bits: int):
        super().__init__(bits)
        self.identity = next_unique_identity()
        selector = (self.identity * _UNIQUE_SCRAMBLER) & mask(bits - 1)
        self._increment = ((selector << 1) | 1) & mask(bits)
        LOGGER.debug("unique stream %d got increment %#x", self.identity, self._increment)

    @property
    def increment(self) -> int:
        return self._increment

    @property
    def serializable(self) -> bool:
        return False


class SetSeqStream(Stream):
    """A stream selected by the caller"""

    kind = StreamKind.SETSEQ

    def __init__(self, bits: int, selector: int = 0):
        super().__init__(bits)
        self._increment = 1
        self.set_stream(selector)

    @property
    def increment(self) -> int:
        return self._increment

    def set_stream(self, selector: int):
        """Select a new sequence; only the lowest W-1 bits of `selector` matter"""
        self._increment = ((selector << 1) | 1) & mask(self.bits)

    def set_increment(self, increment: int):
        """Restore an increment read back from a saved generator"""
        assert increment & 1 == 1
        self._increment = increment & mask(self.bits)


_STREAM_CLASSES = {
    StreamKind.ONESEQ: OneSeqStream,
    StreamKind.NOSEQ: NoSeqStream,
    StreamKind.UNIQUE: UniqueStream,
    StreamKind.SETSEQ: SetSeqStream,
}


def build_stream(kind: StreamKind, bits: int, selector: int = 0) -> Stream:
    """Create a new stream of the given kind

    The `selector` is only used by `SETSEQ` streams."""
    if kind == StreamKind.SETSEQ:
        return SetSeqStream(bits, selector)

    return _STREAM_CLASSES[kind](bits)
