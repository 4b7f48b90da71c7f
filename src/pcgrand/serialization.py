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


"""Save and restore PCG generators

A saved generator is a sequence of bytes with this layout (all integers are
little-endian):

1.  the :class:`.Definition` of the generator, packed by :meth:`.Definition.pack`;
2.  the state, ``W/8`` bytes;
3.  the increment, ``W/8`` bytes, only for `SETSEQ` streams (the other streams
    derive it from the definition);
4.  the words of the extension table, ``W/8`` bytes each, only for extended generators.

There is no magic number nor version: when restoring, the definition found in the
data must match the one of the requested type, field by field.
"""

from dataclasses import dataclass, fields
from typing import List, Tuple, Union
import logging
import struct

from pcgrand.engine import GeneratorConfig, PcgEngine
from pcgrand.errors import CompatibilityError, InvalidPcgData, UnsupportedOperationError
from pcgrand.extension import ExtendedConfig, ExtendedGenerator
from pcgrand.multiplier import MultiplierKind
from pcgrand.outputmix import PermutationKind
from pcgrand.stream import StreamKind

LOGGER = logging.getLogger(__name__)

# "<": little endian, no padding
# "B": unsigned 8-bit integer
# "I": unsigned 32-bit integer
_DEFINITION_FORMAT = "<BBBBBBIB"
DEFINITION_SIZE = struct.calcsize(_DEFINITION_FORMAT)

Generator = Union[PcgEngine, ExtendedGenerator]


@dataclass(frozen=True)
class Definition:
    """A compact description of the shape of a generator

    Two generators with the same definition produce the same sequence if their
    states (and increments, and extension tables) are the same."""

    width: int
    output_width: int
    stream: StreamKind
    permutation: PermutationKind
    multiplier: MultiplierKind
    output_previous: bool
    extension_length: int = 0
    extension_tick_bits: int = 0

    def pack(self) -> bytes:
        return struct.pack(
            _DEFINITION_FORMAT,
            self.width,
            self.output_width,
            self.stream.value,
            self.permutation.value,
            self.multiplier.value,
            int(self.output_previous),
            self.extension_length,
            self.extension_tick_bits,
        )

    @staticmethod
    def unpack(data: bytes) -> "Definition":
        """Read a definition from the first bytes of `data`

        Unknown stream, permutation, or multiplier tags are kept as plain integers:
        they never match a valid definition, so they are reported as a mismatch on
        that field."""
        try:
            (width, output_width, stream, permutation, mult, previous, ext_length, tick_bits) = struct.unpack(
                _DEFINITION_FORMAT, data[:DEFINITION_SIZE]
            )
        except struct.error:
            raise InvalidPcgData("impossible to read the generator definition")

        return Definition(
            width=width,
            output_width=output_width,
            stream=_decode_tag(StreamKind, stream),
            permutation=_decode_tag(PermutationKind, permutation),
            multiplier=_decode_tag(MultiplierKind, mult),
            output_previous=bool(previous),
            extension_length=ext_length,
            extension_tick_bits=tick_bits,
        )


def _decode_tag(kind, value: int):
    try:
        return kind(value)
    except ValueError:
        return value


def definition_of(target: Union[GeneratorConfig, ExtendedConfig]) -> Definition:
    """Return the definition implied by a generator configuration"""
    if isinstance(target, ExtendedConfig):
        base = target.base
        ext_length = target.table_size
        tick_bits = target.tick_bits or 0
    else:
        base = target
        ext_length = 0
        tick_bits = 0

    return Definition(
        width=base.bits,
        output_width=base.output_bits,
        stream=base.stream,
        permutation=base.permutation,
        multiplier=base.multiplier,
        output_previous=base.output_previous,
        extension_length=ext_length,
        extension_tick_bits=tick_bits,
    )


def define(generator: Generator) -> Definition:
    """Return the definition of a generator"""
    return definition_of(generator.config)


def mismatched_fields(expected: Definition, found: Definition) -> List[str]:
    """Return the names of the fields that differ between two definitions"""
    return [f.name for f in fields(Definition) if getattr(expected, f.name) != getattr(found, f.name)]


def _base_engine(generator: Generator) -> PcgEngine:
    return generator.base if isinstance(generator, ExtendedGenerator) else generator


def serialize(generator: Generator) -> bytes:
    """Save the state of a generator into a sequence of bytes

    Raise :class:`.UnsupportedOperationError` for `UNIQUE` generators, as their
    stream cannot be rebuilt."""
    engine = _base_engine(generator)
    config = engine.config
    if not engine.stream.serializable:
        raise UnsupportedOperationError(f"{config.stream.name} generators cannot be serialized")

    size = config.bits // 8
    result = bytearray(define(generator).pack())
    result += engine.state.to_bytes(size, "little")

    if config.stream == StreamKind.SETSEQ:
        result += engine.increment.to_bytes(size, "little")

    if isinstance(generator, ExtendedGenerator):
        for word in generator.table:
            result += word.to_bytes(size, "little")

    LOGGER.debug("serialized %s into %d bytes", generator, len(result))
    return bytes(result)


def _parse(data: bytes, expected: Definition) -> Tuple[int, Union[int, None], List[int]]:
    if expected.stream == StreamKind.UNIQUE:
        raise UnsupportedOperationError("UNIQUE generators cannot be deserialized")

    found = Definition.unpack(data)
    mismatches = mismatched_fields(expected, found)
    if mismatches:
        LOGGER.debug("definition mismatch on %s", ", ".join(mismatches))
        raise CompatibilityError(mismatches, expected=expected, found=found)

    size = expected.width // 8
    num_of_words = 1 + (1 if expected.stream == StreamKind.SETSEQ else 0) + expected.extension_length
    payload = data[DEFINITION_SIZE:]
    if len(payload) != num_of_words * size:
        raise InvalidPcgData(f"expected {num_of_words * size} bytes after the definition, found {len(payload)}")

    words = [int.from_bytes(payload[i * size : (i + 1) * size], "little") for i in range(num_of_words)]

    state = words[0]
    increment = None
    if expected.stream == StreamKind.SETSEQ:
        increment = words[1]
        if increment & 1 == 0:
            raise InvalidPcgData(f"invalid even increment {increment:#x}")

    return state, increment, words[num_of_words - expected.extension_length :]


def deserialize(data: bytes, target: Union[GeneratorConfig, ExtendedConfig]) -> Generator:
    """Rebuild a generator saved by :func:`.serialize`

    The `target` is the configuration of the generator that the caller expects to
    get back. If the definition stored in `data` differs from the one implied by
    `target` (including unknown tags), raise :class:`.CompatibilityError`. If the
    data are truncated, too long, or hold an even increment, raise
    :class:`.InvalidPcgData`."""
    state, increment, table = _parse(data, definition_of(target))

    if isinstance(target, ExtendedConfig):
        engine = PcgEngine(target.base)
        engine._load(state, increment)
        return ExtendedGenerator(engine, table, target.tick_bits)

    engine = PcgEngine(target)
    engine._load(state, increment)
    return engine


def restore(generator: Generator, data: bytes):
    """Overwrite the state of `generator` with the one saved in `data`

    Everything is validated before `generator` is touched: if an exception is
    raised, the generator is left unchanged."""
    state, increment, table = _parse(data, define(generator))

    _base_engine(generator)._load(state, increment)
    if isinstance(generator, ExtendedGenerator):
        generator.table = table
