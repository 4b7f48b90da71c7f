# The MIT License (MIT)
#
# Copyright © 2021 Maurizio Tomasi
#
# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the “Software”), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software. THE
# SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS
# OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from copy import deepcopy
from itertools import islice
import os
import tempfile
import threading

import unittest
from click.testing import CliRunner
from pcgrand.basic import Pcg32Basic
from pcgrand.engine import GeneratorConfig, PcgEngine, new
from pcgrand.errors import CompatibilityError, InvalidPcgData, UnsupportedOperationError
from pcgrand.extension import ExtendedConfig, ExtendedGenerator
from pcgrand.main import cli
from pcgrand.multiplier import MultiplierKind, multiplier, oneseq_increment
from pcgrand.numops import check_width, lcg_step, rotr, to_uint, wrap_add, wrap_mul
from pcgrand.outputmix import (
    PermutationKind,
    check_output_width,
    output_dxsm,
    output_rxs_m_xs,
    output_xsh_rr,
    output_xsh_rs,
    output_xsl_rr,
)
from pcgrand.presets import (
    PCG32,
    PCG32_FAST,
    PCG32_ONCE_INSECURE,
    PCG32_ONESEQ,
    PCG32_UNIQUE,
    PCG32L,
    PCG64,
    PCG64_DXSM,
    PCG64_FAST,
    PCG64_ONCE_INSECURE,
    PCG64_ONESEQ,
    PCG64_UNIQUE,
    PRESETS,
    preset,
)
from pcgrand.seeds import Seed
from pcgrand.serialization import (
    DEFINITION_SIZE,
    Definition,
    define,
    definition_of,
    deserialize,
    restore,
    serialize,
)
from pcgrand.stream import SetSeqStream, StreamKind, UniqueStream, build_stream

import pytest

M32 = 0xFFFFFFFF
M64 = 0xFFFFFFFFFFFFFFFF

# First outputs of the PCG32 demo program in the reference C library,
# seeded with init_state=42 and init_seq=54
PCG32_42_54 = [
    0xA15C02B7,
    0x7B47F409,
    0xBA1D3330,
    0x83D2F293,
    0xBFA4784B,
    0xCBED606E,
]

# The state and increment of the PCG32_INITIALIZER constant in the reference C library
PCG32_INIT_STATE = 0x853C49E6748FEA9B
PCG32_INIT_SEQ = 0xDA3E39CB94B95BDB

# First outputs of the reference C library seeded with PCG32_INIT_STATE and PCG32_INIT_SEQ
PCG32_INIT_OUTPUTS = [
    0x1BBEB4F2,
    0xE82E89E9,
    0x681CFDEB,
    0xE00FA2EC,
    0xB1E1A434,
    0xBE56068D,
]

STATES_64 = [0, 1, M64, 0x853C49E6748FEA9B, 0xDA3E39CB94B95BDB, 0x0123456789ABCDEF, 0xF000000000000001]
STATES_128 = [(a << 64) | b for a in STATES_64 for b in STATES_64[:4]]


def take(rng, n):
    return list(islice(rng, n))


class TestNumOps(unittest.TestCase):
    def test_clip(self):
        assert to_uint(0x1FF, 8) == 0xFF
        assert to_uint(-1, 16) == 0xFFFF
        assert wrap_add(0xFF, 2, 8) == 1
        assert wrap_mul(0x80, 2, 8) == 0

    def test_rotr(self):
        assert rotr(0x12345678, 8, 32) == 0x78123456
        assert rotr(0x12345678, 0, 32) == 0x12345678
        assert rotr(0x01, 1, 8) == 0x80
        assert rotr(0x8000000000000000, 63, 64) == 0x1

    def test_lcg_step(self):
        assert lcg_step(0, 109, 6364136223846793005, 64) == 109
        assert lcg_step(1, 0, 3, 8) == 3
        assert lcg_step(0xFF, 1, 1, 8) == 0

    def test_widths(self):
        for bits in [8, 16, 32, 64, 128]:
            assert check_width(bits) == bits

        with pytest.raises(UnsupportedOperationError):
            check_width(24)


class TestMultiplier(unittest.TestCase):
    def test_table(self):
        assert multiplier(64) == 6364136223846793005
        assert multiplier(32) == 747796405
        assert multiplier(64, MultiplierKind.MCG) == 12605985483714917081
        assert multiplier(128) == 47026247687942121848144207491837523525
        assert multiplier(128, MultiplierKind.MCG) == 327738287884841127335028083622016905945
        assert multiplier(128, MultiplierKind.CHEAP) == 0xDA942042E4DD58B5
        assert multiplier(64, MultiplierKind.CHEAP) == multiplier(64)

    def test_full_period_multipliers(self):
        # Hull-Dobell: with an odd increment, a full period needs a multiplier ≡ 1 (mod 4)
        for bits in [8, 16, 32, 64, 128]:
            assert multiplier(bits) % 4 == 1
            assert oneseq_increment(bits) & 1 == 1

    def test_unsupported_width(self):
        with pytest.raises(UnsupportedOperationError):
            multiplier(12)


class TestStreams(unittest.TestCase):
    def test_increment_parity(self):
        for bits in [8, 16, 32, 64, 128]:
            assert build_stream(StreamKind.ONESEQ, bits).increment & 1 == 1
            assert build_stream(StreamKind.NOSEQ, bits).increment == 0
            assert build_stream(StreamKind.UNIQUE, bits).increment & 1 == 1

            for selector in [0, 1, 2, 12345, (1 << bits) - 1]:
                assert build_stream(StreamKind.SETSEQ, bits, selector).increment & 1 == 1

    def test_setseq(self):
        stream = SetSeqStream(64, 54)
        assert stream.increment == 109

        stream.set_stream(0)
        assert stream.increment == 1

        # Only W-1 bits of the selector are used
        stream.set_stream(1 << 63)
        assert stream.increment == 1

    def test_set_stream_unsupported(self):
        for kind in [StreamKind.ONESEQ, StreamKind.NOSEQ, StreamKind.UNIQUE]:
            with pytest.raises(UnsupportedOperationError):
                build_stream(kind, 64).set_stream(3)

    def test_unique(self):
        a = UniqueStream(64)
        b = UniqueStream(64)
        assert a.identity != b.identity
        assert a.increment != b.increment
        assert not a.serializable

    def test_unique_threads(self):
        increments = []
        lock = threading.Lock()

        def worker():
            local = [UniqueStream(64).increment for _ in range(200)]
            with lock:
                increments.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(increments) == 1600
        assert len(set(increments)) == 1600


class TestPermutations(unittest.TestCase):
    # The reference formulas come from the minimal C implementation of PCG

    def test_xsh_rr_64_32(self):
        for state in STATES_64:
            xorshifted = (((state >> 18) ^ state) >> 27) & M32
            rot = state >> 59
            expected = ((xorshifted >> rot) | (xorshifted << ((-rot) & 31))) & M32
            assert output_xsh_rr(state, 64, 32) == expected

    def test_xsh_rr_16_8(self):
        for state in range(0, 1 << 16, 97):
            expected = rotr((((state >> 5) ^ state) >> 5) & 0xFF, state >> 13, 8)
            assert output_xsh_rr(state, 16, 8) == expected

    def test_xsh_rs(self):
        for state in STATES_64:
            expected = (((state >> 22) ^ state) >> ((state >> 61) + 22)) & M32
            assert output_xsh_rs(state, 64, 32) == expected

        for state in range(0, 1 << 16, 89):
            expected = (((state >> 7) ^ state) >> ((state >> 14) + 3)) & 0xFF
            assert output_xsh_rs(state, 16, 8) == expected

        for state in STATES_128:
            expected = (((state >> 43) ^ state) >> ((state >> 124) + 45)) & M64
            assert output_xsh_rs(state, 128, 64) == expected

    def test_xsl_rr(self):
        for state in STATES_128:
            expected = rotr(((state >> 64) ^ state) & M64, state >> 122, 64)
            assert output_xsl_rr(state, 128, 64) == expected

        for state in STATES_64:
            expected = rotr(((state >> 32) ^ state) & M32, state >> 59, 32)
            assert output_xsl_rr(state, 64, 32) == expected

    def test_rxs_m_xs(self):
        for state in STATES_64:
            state32 = state & M32
            word = (((state32 >> ((state32 >> 28) + 4)) ^ state32) * 277803737) & M32
            assert output_rxs_m_xs(state32, 32, 32) == (word >> 22) ^ word

            word = (((state >> ((state >> 59) + 5)) ^ state) * 12605985483714917081) & M64
            assert output_rxs_m_xs(state, 64, 64) == (word >> 43) ^ word

    def test_rxs_m_xs_is_a_bijection(self):
        outputs = {output_rxs_m_xs(state, 8, 8) for state in range(256)}
        assert outputs == set(range(256))

    def test_dxsm(self):
        for state in STATES_128:
            hi = state >> 64
            lo = (state & M64) | 1
            hi ^= hi >> 32
            hi = (hi * 0xDA942042E4DD58B5) & M64
            hi ^= hi >> 48
            assert output_dxsm(state, 128, 64) == (hi * lo) & M64

    def test_output_widths(self):
        check_output_width(PermutationKind.RXS_M_XS, 64, 64)
        check_output_width(PermutationKind.DXSM, 64, 32)

        with pytest.raises(ValueError):
            check_output_width(PermutationKind.XSH_RR, 64, 64)

        with pytest.raises(ValueError):
            check_output_width(PermutationKind.DXSM, 64, 64)

        with pytest.raises(ValueError):
            check_output_width(PermutationKind.RXS_M_XS, 32, 64)


class TestSeed(unittest.TestCase):
    def test_clip(self):
        seed = Seed(state=0x1FF, sequence=-1).clip(8)
        assert seed == Seed(state=0xFF, sequence=0xFF)

    def test_clipped_seeds_give_the_same_generator(self):
        a = PcgEngine(PCG32, Seed(state=42 + (1 << 64), sequence=54 + (3 << 70)))
        b = PcgEngine(PCG32, Seed(state=42, sequence=54))
        assert a == b

    def test_default(self):
        assert Seed.default(64) == Seed(state=0x18013CAD3A483F72, sequence=0x51DBFCDA0D6B21D4)

        with pytest.raises(UnsupportedOperationError):
            Seed.default(24)

    def test_from_bytes(self):
        data = (0x0123456789ABCDEF).to_bytes(8, "little") + (0xFEDCBA9876543210).to_bytes(8, "little")
        assert Seed.from_bytes(data, 64) == Seed(state=0x0123456789ABCDEF, sequence=0xFEDCBA9876543210)

        assert Seed.from_bytes(bytes([0x34, 0x12, 0x78, 0x56]), 16) == Seed(state=0x1234, sequence=0x5678)

        with pytest.raises(InvalidPcgData):
            Seed.from_bytes(data[:-1], 64)

        with pytest.raises(InvalidPcgData):
            Seed.from_bytes(data, 128)

    def test_from_entropy(self):
        for bits in [8, 16, 32, 64, 128]:
            seed = Seed.from_entropy(bits)
            assert 0 <= seed.state < (1 << bits)
            assert 0 <= seed.sequence < (1 << bits)

        with pytest.raises(UnsupportedOperationError):
            Seed.from_entropy(24)


class TestGeneratorConfig(unittest.TestCase):
    def test_defaults(self):
        config = GeneratorConfig()
        assert config == PCG64_DXSM
        assert config.multiplier == MultiplierKind.CHEAP
        assert config.output_previous

    def test_resolved_fields(self):
        assert PCG32.multiplier == MultiplierKind.DEFAULT
        assert PCG32.output_previous
        assert PCG32_FAST.multiplier == MultiplierKind.MCG
        assert PCG64_FAST.multiplier == MultiplierKind.MCG
        assert not PCG64.output_previous
        assert not PCG32L.output_previous

    def test_period(self):
        assert PCG32.period_pow2 == 64
        assert PCG32_FAST.period_pow2 == 62
        assert PCG64.period_pow2 == 128

    def test_invalid(self):
        with pytest.raises(UnsupportedOperationError):
            GeneratorConfig(bits=24, output_bits=8, permutation=PermutationKind.XSH_RR)

        with pytest.raises(ValueError):
            GeneratorConfig(bits=64, output_bits=64, permutation=PermutationKind.XSH_RR)

    def test_describe(self):
        assert PCG32.describe() == "setseq_xsh_rr_64_32"

    def test_presets(self):
        assert preset("pcg32") is PCG32
        assert preset("PCG64_DXSM") is PCG64_DXSM
        assert len(PRESETS) == 12

        with pytest.raises(KeyError):
            preset("mt19937")


class TestPcgEngine(unittest.TestCase):
    def test_known_answers(self):
        pcg = PcgEngine(PCG32, Seed(state=42, sequence=54))
        assert pcg.state == 1753877967969059832
        assert pcg.increment == 109

        for expected in PCG32_42_54:
            result = pcg.random()
            assert expected == result

    def test_known_answers_initializer(self):
        pcg = PcgEngine(PCG32, Seed(state=PCG32_INIT_STATE, sequence=PCG32_INIT_SEQ))
        assert take(pcg, len(PCG32_INIT_OUTPUTS)) == PCG32_INIT_OUTPUTS

        basic = Pcg32Basic(init_state=PCG32_INIT_STATE, init_seq=PCG32_INIT_SEQ)
        assert take(basic, len(PCG32_INIT_OUTPUTS)) == PCG32_INIT_OUTPUTS

    def test_matches_minimal_pcg32(self):
        pcg = PcgEngine(PCG32, Seed(state=PCG32_INIT_STATE, sequence=PCG32_INIT_SEQ))
        basic = Pcg32Basic(init_state=PCG32_INIT_STATE, init_seq=PCG32_INIT_SEQ)

        assert pcg.state == basic.state
        assert pcg.increment == basic.inc
        assert take(pcg, 1000) == take(basic, 1000)

    def test_from_state(self):
        pcg = PcgEngine.from_state(PCG32, PCG32_INIT_STATE, PCG32_INIT_SEQ)
        basic = Pcg32Basic.from_state(PCG32_INIT_STATE, PCG32_INIT_SEQ)
        assert take(pcg, 100) == take(basic, 100)

        with pytest.raises(UnsupportedOperationError):
            PcgEngine.from_state(PCG32_ONESEQ, 1, 3)

        with pytest.raises(ValueError):
            PcgEngine.from_state(PCG32, 1, 2)

    def test_determinism(self):
        for config in [PCG32, PCG32_ONESEQ, PCG32L, PCG64, PCG64_ONESEQ, PCG64_DXSM, PCG64_ONCE_INSECURE]:
            seed = Seed(state=0x0123456789ABCDEF, sequence=0xFEDCBA9876543210)
            a = new(config, seed)
            b = new(config, seed)
            assert a == b
            assert take(a, 500) == take(b, 500)

    def test_unseeded(self):
        a = PcgEngine(PCG64)
        b = PcgEngine(PCG64)
        assert take(a, 100) == take(b, 100)

    def test_different_sequences(self):
        a = PcgEngine(PCG32, Seed(state=11, sequence=12))
        b = PcgEngine(PCG32, Seed(state=11, sequence=14))
        assert take(a, 100) != take(b, 100)

    def test_different_seeds(self):
        a = PcgEngine(PCG64, Seed(state=11, sequence=12))
        b = PcgEngine(PCG64, Seed(state=12, sequence=12))
        assert take(a, 100) != take(b, 100)

    def test_unique(self):
        a = PcgEngine(PCG32_UNIQUE, Seed(state=1))
        b = PcgEngine(PCG32_UNIQUE, Seed(state=1))
        assert a.increment != b.increment
        assert take(a, 100) != take(b, 100)

    def test_noseq(self):
        pcg = PcgEngine(PCG32_FAST, Seed(state=0))
        assert pcg.increment == 0
        assert pcg.state == 3

        for _ in range(100):
            pcg.random()
            assert pcg.state & 3 == 3

    def test_oneseq_ignores_sequence(self):
        a = PcgEngine(PCG32_ONESEQ, Seed(state=5, sequence=1))
        b = PcgEngine(PCG32_ONESEQ, Seed(state=5, sequence=99))
        assert a.increment == oneseq_increment(64)
        assert take(a, 50) == take(b, 50)

    def test_output_order(self):
        # 128-bit generators permute the state after advancing it...
        pcg = PcgEngine(PCG64, Seed(state=7, sequence=8))
        result = pcg.random()
        assert result == output_xsl_rr(pcg.state, 128, 64)

        # ...except the DXSM one, which uses the state before
        pcg = PcgEngine(PCG64_DXSM, Seed(state=7, sequence=8))
        oldstate = pcg.state
        result = pcg.random()
        assert result == output_dxsm(oldstate, 128, 64)
        assert pcg.state == lcg_step(oldstate, pcg.increment, 0xDA942042E4DD58B5, 128)

    def test_seeding_procedure(self):
        pcg = PcgEngine(PCG64, Seed(state=1234, sequence=5678))
        inc = (5678 << 1) | 1
        mult = multiplier(128)
        expected = lcg_step(lcg_step(0, inc, mult, 128) + 1234, inc, mult, 128)
        assert pcg.increment == inc
        assert pcg.state == expected

    def test_full_period(self):
        pcg = PcgEngine(GeneratorConfig(8, 8, StreamKind.ONESEQ, PermutationKind.RXS_M_XS))
        initial_state = pcg.state

        returns = []
        for step in range(1, 257 + 1):
            pcg.step()
            if pcg.state == initial_state:
                returns.append(step)

        assert returns == [256]

    def test_full_period_16(self):
        state = initial_state = 0xBEEF
        for step in range(1, 1 << 16):
            state = lcg_step(state, oneseq_increment(16), multiplier(16), 16)
            assert state != initial_state

        assert lcg_step(state, oneseq_increment(16), multiplier(16), 16) == initial_state

    def test_once_insecure(self):
        # When output and state have the same width, each number comes out once per period
        pcg = PcgEngine(GeneratorConfig(8, 8, StreamKind.SETSEQ, PermutationKind.RXS_M_XS), Seed(3, 4))
        assert sorted(take(pcg, 256)) == list(range(256))

    def test_set_stream(self):
        a = PcgEngine(PCG32, Seed(state=42, sequence=54))
        a.set_stream(55)
        assert a.increment == 111

        with pytest.raises(UnsupportedOperationError):
            PcgEngine(PCG32_ONESEQ).set_stream(1)

    def test_output_ranges(self):
        for config in PRESETS.values():
            pcg = PcgEngine(config, Seed(state=1, sequence=2))
            for value in take(pcg, 100):
                assert 0 <= value < (1 << config.output_bits)


class TestPcg32Basic(unittest.TestCase):
    def test_random(self):
        pcg = Pcg32Basic()
        assert pcg.state == 1753877967969059832
        assert pcg.inc == 109

        for expected in PCG32_42_54:
            result = pcg.next_u32()
            assert expected == result

    def test_next_u64(self):
        pcg = Pcg32Basic()
        assert pcg.next_u64() == (PCG32_42_54[1] << 32) | PCG32_42_54[0]

    def test_consecutive_sequences(self):
        # The selector is shifted before the low bit is set, so 12 and 13 give different increments
        a = Pcg32Basic(11, 12)
        b = Pcg32Basic(11, 13)
        assert take(a, 20) != take(b, 20)


class TestExtendedGenerator(unittest.TestCase):
    def test_zeroed_table_does_not_change_output(self):
        base = PcgEngine(PCG32, Seed(state=42, sequence=54))
        reference = deepcopy(base)

        ext = ExtendedGenerator.zeroed(base, table_bits=4, tick_bits=None)
        assert take(ext, 1000) == take(reference, 1000)
        assert ext.table == [0] * 16

    def test_from_engine(self):
        base = PcgEngine(PCG32, Seed(state=1, sequence=2))
        reference = deepcopy(base)

        ext = ExtendedGenerator.from_engine(base, table_bits=3, tick_bits=8)

        # Each 64-bit word is made of two 32-bit outputs
        words = take(reference, 16)
        assert ext.table == [(words[2 * i] << 32) | words[2 * i + 1] for i in range(8)]
        assert ext.base == reference

    def test_determinism(self):
        config = ExtendedConfig(base=PCG32, table_bits=4, tick_bits=2)
        a = ExtendedGenerator.new(config, Seed(state=3, sequence=4))
        b = ExtendedGenerator.new(config, Seed(state=3, sequence=4))
        assert take(a, 500) == take(b, 500)
        assert a == b

    def test_output_differs_from_base(self):
        base = PcgEngine(PCG64, Seed(state=3, sequence=4))
        ext = ExtendedGenerator.from_engine(deepcopy(base), table_bits=2, tick_bits=4)
        reference = deepcopy(ext.base)
        assert take(ext, 100) != take(reference, 100)

    def test_advance_table(self):
        ext = ExtendedGenerator.zeroed(PcgEngine(PCG32), table_bits=1)
        ext.advance_table()
        assert ext.table == [1, 3]

    def test_advance_table_carry(self):
        mult = multiplier(64)
        ext = ExtendedGenerator.zeroed(PcgEngine(PCG32), table_bits=1)

        # The first word goes back to zero, so the second one advances twice
        ext.table[0] = (-pow(mult, -1, 1 << 64)) % (1 << 64)
        ext.advance_table()
        assert ext.table[0] == 0
        assert ext.table[1] == lcg_step(3, 3, mult, 64)

    def test_ticks(self):
        # With tick_bits=1 the table advances every time the state is even
        ext = ExtendedGenerator.zeroed(PcgEngine(PCG32, Seed(1, 2)), table_bits=2, tick_bits=1)
        take(ext, 10)
        assert ext.table != [0, 0, 0, 0]

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            ExtendedConfig(base=PCG32, table_bits=17)

        with pytest.raises(ValueError):
            ExtendedConfig(base=PCG32, tick_bits=64)


class TestSerialization(unittest.TestCase):
    def test_definition(self):
        pcg = PcgEngine(PCG32)
        d = define(pcg)
        assert d == Definition(
            width=64,
            output_width=32,
            stream=StreamKind.SETSEQ,
            permutation=PermutationKind.XSH_RR,
            multiplier=MultiplierKind.DEFAULT,
            output_previous=True,
        )
        assert Definition.unpack(d.pack()) == d
        assert len(d.pack()) == DEFINITION_SIZE == 11

    def test_layout(self):
        pcg = PcgEngine(PCG32, Seed(state=42, sequence=54))
        data = serialize(pcg)
        assert len(data) == DEFINITION_SIZE + 16
        assert data[DEFINITION_SIZE : DEFINITION_SIZE + 8] == pcg.state.to_bytes(8, "little")
        assert data[DEFINITION_SIZE + 8 :] == (109).to_bytes(8, "little")

        # The increment of these generators is implied by their type
        assert len(serialize(PcgEngine(PCG32_ONESEQ))) == DEFINITION_SIZE + 8
        assert len(serialize(PcgEngine(PCG64_FAST))) == DEFINITION_SIZE + 16

    def test_round_trip(self):
        for config in [PCG32, PCG32_ONESEQ, PCG32_FAST, PCG32L, PCG64, PCG64_DXSM, PCG32_ONCE_INSECURE]:
            pcg = PcgEngine(config, Seed(state=0xDEADBEEF, sequence=0xC0FFEE))
            take(pcg, 10)

            restored = deserialize(serialize(pcg), config)
            assert restored == pcg
            assert take(restored, 200) == take(pcg, 200)

    def test_round_trip_extended(self):
        config = ExtendedConfig(base=PCG32, table_bits=3, tick_bits=8)
        ext = ExtendedGenerator.new(config, Seed(state=5, sequence=6))
        take(ext, 50)

        data = serialize(ext)
        assert len(data) == DEFINITION_SIZE + 8 * (2 + 8)

        restored = deserialize(data, config)
        assert restored == ext
        assert take(restored, 500) == take(ext, 500)

    def test_incompatible(self):
        data = serialize(PcgEngine(PCG32))

        with pytest.raises(CompatibilityError) as exc:
            deserialize(data, PCG32_ONESEQ)
        assert exc.value.fields == ["stream"]

        with pytest.raises(CompatibilityError) as exc:
            deserialize(data, PCG64)
        assert exc.value.fields == ["width", "output_width", "permutation", "output_previous"]

        with pytest.raises(CompatibilityError) as exc:
            deserialize(data, ExtendedConfig(base=PCG32, table_bits=2, tick_bits=4))
        assert exc.value.fields == ["extension_length", "extension_tick_bits"]

        mcg = GeneratorConfig(64, 32, StreamKind.SETSEQ, PermutationKind.XSH_RR, multiplier=MultiplierKind.MCG)
        with pytest.raises(CompatibilityError) as exc:
            deserialize(data, mcg)
        assert exc.value.fields == ["multiplier"]

    def test_restore(self):
        source = PcgEngine(PCG32, Seed(state=1, sequence=2))
        target = PcgEngine(PCG32, Seed(state=3, sequence=4))

        restore(target, serialize(source))
        assert target == source

    def test_failed_restore_leaves_target_untouched(self):
        target = PcgEngine(PCG64, Seed(state=3, sequence=4))
        before = deepcopy(target)

        with pytest.raises(CompatibilityError):
            restore(target, serialize(PcgEngine(PCG32)))
        assert target == before

        good = serialize(PcgEngine(PCG64))
        with pytest.raises(InvalidPcgData):
            restore(target, good[:-1])
        assert target == before

    def test_invalid_data(self):
        data = bytearray(serialize(PcgEngine(PCG32)))

        with pytest.raises(InvalidPcgData):
            deserialize(bytes(data[:5]), PCG32)

        with pytest.raises(InvalidPcgData):
            deserialize(bytes(data) + b"\x00", PCG32)

        data[DEFINITION_SIZE + 8] &= 0xFE
        with pytest.raises(InvalidPcgData):
            deserialize(bytes(data), PCG32)

    def test_unknown_tags(self):
        data = bytearray(serialize(PcgEngine(PCG32)))
        data[2] = 99
        with pytest.raises(CompatibilityError) as exc:
            deserialize(bytes(data), PCG32)
        assert exc.value.fields == ["stream"]
        assert exc.value.found.stream == 99

        data = bytearray(serialize(PcgEngine(PCG32)))
        data[3] = 42
        data[4] = 42
        with pytest.raises(CompatibilityError) as exc:
            deserialize(bytes(data), PCG32)
        assert exc.value.fields == ["permutation", "multiplier"]

    def test_unique(self):
        with pytest.raises(UnsupportedOperationError):
            serialize(PcgEngine(PCG64_UNIQUE))

        data = definition_of(PCG32_UNIQUE).pack() + bytes(8)
        with pytest.raises(UnsupportedOperationError):
            deserialize(data, PCG32_UNIQUE)


class TestCli(unittest.TestCase):
    def test_generate(self):
        result = CliRunner().invoke(cli, ["generate", "--count", "3"])
        assert result.exit_code == 0
        assert result.output.split() == [str(x) for x in PCG32_42_54[:3]]

    def test_generate_hex(self):
        result = CliRunner().invoke(cli, ["generate", "-n", "1", "--hex"])
        assert result.exit_code == 0
        assert result.output.strip() == "0xa15c02b7"

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def path(self, file_name):
        return os.path.join(self.tmpdir.name, file_name)

    def test_save_and_load(self):
        runner = CliRunner()
        state_file = self.path("state.bin")

        result = runner.invoke(cli, ["save", "--skip", "3", state_file])
        assert result.exit_code == 0

        result = runner.invoke(cli, ["load", "-n", "3", state_file])
        assert result.exit_code == 0
        assert result.output.split() == [str(x) for x in PCG32_42_54[3:]]

        result = runner.invoke(cli, ["load", "--generator", "pcg64", state_file])
        assert result.exit_code == 1
        assert "incompatible" in result.output

    def test_save_unique(self):
        state_file = self.path("state.bin")
        result = CliRunner().invoke(cli, ["save", "--generator", "pcg32_unique", state_file])
        assert result.exit_code == 1
        assert not os.path.exists(state_file)

    def test_bitmap(self):
        png_file = self.path("noise.png")
        result = CliRunner().invoke(cli, ["bitmap", "--width", "32", "--height", "16", png_file])
        assert result.exit_code == 0

        with open(png_file, "rb") as f:
            assert f.read(8) == b"\x89PNG\r\n\x1a\n"
