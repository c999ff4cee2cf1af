"""Tests for the numeric instruction decoder."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from lmc_vm.decoder import DecodeResult, Decoder, Opcode, decode


class TestDecodeResultDataclass:
    """Test DecodeResult structure."""

    def test_valid_result(self):
        result = DecodeResult(Opcode.ADD, {"addr": 5}, True)
        assert result.key == Opcode.ADD
        assert result.address == 5
        assert result.valid is True
        assert result.error is None

    def test_invalid_result(self):
        result = DecodeResult(Opcode.UNKNOWN, {}, False, error="Unknown")
        assert result.valid is False
        assert result.address is None


class TestExactMatchCodes:
    """Test whole-value codes."""

    @pytest.fixture
    def decoder(self):
        return Decoder()

    def test_hlt(self, decoder):
        result = decoder.decode(0)
        assert result.key == Opcode.HLT
        assert result.params == {}

    def test_inp(self, decoder):
        result = decoder.decode(901)
        assert result.key == Opcode.INP
        assert result.params == {}

    def test_out(self, decoder):
        result = decoder.decode(902)
        assert result.key == Opcode.OUT
        assert result.params == {}


class TestDigitSlicedCodes:
    """Test hundreds-digit opcodes with address operands."""

    @pytest.fixture
    def decoder(self):
        return Decoder()

    @pytest.mark.parametrize("value,key,addr", [
        (190, Opcode.ADD, 90),
        (100, Opcode.ADD, 0),
        (291, Opcode.SUB, 91),
        (399, Opcode.STA, 99),
        (501, Opcode.LDA, 1),
        (600, Opcode.BRA, 0),
        (712, Opcode.BRZ, 12),
        (816, Opcode.BRP, 16),
    ])
    def test_opcode_and_address(self, decoder, value, key, addr):
        result = decoder.decode(value)
        assert result.valid is True
        assert result.key == key
        assert result.params == {"addr": addr}
        assert result.raw_instruction == value

    def test_decode_is_pure(self, decoder):
        assert decoder.decode(505) == decoder.decode(505)
        assert decode(505) == decoder.decode(505)


class TestUnknownCodes:
    """Test values that match neither layer."""

    @pytest.fixture
    def decoder(self):
        return Decoder()

    @pytest.mark.parametrize("value", [95, 1, 404, 450, 900, 903, 999, 1000, 1234, -1, -190])
    def test_unknown(self, decoder, value):
        result = decoder.decode(value)
        assert result.key == Opcode.UNKNOWN
        assert result.valid is False
        assert result.error == f"Unknown instruction: {value}"
        assert result.params == {"raw": value}


class TestDisassemble:
    """Test mnemonic rendering."""

    @pytest.fixture
    def decoder(self):
        return Decoder()

    def test_addressed(self, decoder):
        assert decoder.disassemble(505) == "LDA 05"
        assert decoder.disassemble(390) == "STA 90"

    def test_bare(self, decoder):
        assert decoder.disassemble(901) == "INP"
        assert decoder.disassemble(0) == "HLT"

    def test_data(self, decoder):
        assert decoder.disassemble(999) == "DAT 999"
