"""Integration tests for example programs."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from lmc_vm import LMC, SAMPLES, get_sample
from lmc_vm.loader import load_program_file

PROGRAMS_DIR = Path(__file__).parent.parent / "programs"

ADD_TWO = [901, 300, 901, 100, 902, 0]
ADD_TWO_HIGH = [901, 390, 901, 190, 902, 0]


class TestAddProgram:
    """Add two inputs."""

    def test_decimal_add(self):
        """5 + 3 on the decimal word."""
        cpu = LMC(word="decimal")
        cpu.load_program(ADD_TWO)
        cpu.add_inputs([5, 3])
        cpu.run()

        assert cpu.get_output() == (8,)
        assert cpu.is_halted() is True
        assert cpu.get_pc() == 5

    def test_decimal_add_wraps(self):
        cpu = LMC(word="decimal")
        cpu.load_program(ADD_TWO)
        cpu.add_inputs([900, 250])
        cpu.run()

        assert cpu.get_output() == (150,)

    def test_int64_large_add(self):
        """Values beyond 32 bits survive a 64-bit word."""
        cpu = LMC(word="int64")
        cpu.load_program(ADD_TWO_HIGH)
        cpu.add_inputs(5000000000000000000, 2000000000000000000)
        cpu.run()

        assert cpu.get_output() == (7000000000000000000,)

    def test_int32_large_add_clamps(self):
        cpu = LMC(word="int32")
        cpu.load_program(ADD_TWO_HIGH)
        cpu.add_inputs(2000000000, 2000000000)
        cpu.run()

        assert cpu.get_output() == (2**31 - 1,)


class TestSelfModifyingCountdown:
    """The decimal BRZ/BRA loop that rewrites mailbox 00.

    LDA 05 loads 600 (the BRA cell), SUB 00 leaves 95 which is stored over
    the LDA. 95 decodes to UNKNOWN and is skipped, so the second pass
    outputs 95, subtracts it from itself and BRZ lands on a zeroed mailbox
    00, which halts.
    """

    PROGRAM = [505, 902, 200, 300, 700, 600, 0, 5, 1]

    def test_output(self):
        cpu = LMC(word="decimal")
        cpu.load_program(self.PROGRAM)
        cpu.run()

        assert cpu.get_output() == (600, 95)
        assert cpu.is_halted() is True
        assert cpu.get_pc() == 0
        assert cpu.get_cycle_count() == 12

    def test_unknown_reported_once(self):
        cpu = LMC(word="decimal")
        cpu.load_program(self.PROGRAM)
        cpu.run()

        assert cpu.get_summary()["errors"] == ["Unknown instruction: 95"]


class TestUnknownOpcodeTolerance:
    """An undecodable cell is reported and skipped."""

    def test_int32_999(self):
        cpu = LMC(word="int32")
        cpu.load_program([999, 902, 0])
        entry = cpu.step()

        assert entry.error == "Unknown instruction: 999"
        assert cpu.get_pc() == 1
        assert cpu.get_accumulator() == 0
        assert cpu.is_halted() is False

        cpu.run()
        assert cpu.get_output() == (0,)


class TestRestart:
    """reset() followed by the same load reproduces the first run."""

    @pytest.mark.parametrize("word", ["decimal", "int32", "int64"])
    def test_idempotent_restart(self, word):
        cpu = LMC(word=word)
        cpu.load_program(ADD_TWO)
        cpu.add_inputs(12, 30)
        cpu.run()
        first = cpu.get_output()

        cpu.reset()
        cpu.load_program(ADD_TWO)
        cpu.add_inputs(12, 30)
        cpu.run()

        assert cpu.get_output() == first == (42,)


class TestSamples:
    """Built-in sample catalog."""

    def run_sample(self, name, word=None, inputs=None):
        sample = get_sample(name)
        cpu = LMC(word=word or sample.word, max_cycles=100000)
        sample.load_into(cpu, inputs=inputs)
        cpu.run()
        return cpu

    def test_every_sample_halts(self):
        for name in SAMPLES:
            cpu = self.run_sample(name)
            assert cpu.is_halted() is True, name

    def test_add(self):
        assert self.run_sample("add").get_output() == (8,)

    def test_add_large(self):
        assert self.run_sample("add-large").get_output() == (7000000000000000000,)

    def test_countdown_int32(self):
        cpu = self.run_sample("countdown")
        assert cpu.get_output() == tuple(range(10, -1, -1))
        assert cpu.get_memory(90) == -1

    def test_countdown_decimal(self):
        """On the decimal word -1 wraps to 999, which BRP treats as negative."""
        cpu = self.run_sample("countdown", word="decimal")
        assert cpu.get_output() == tuple(range(10, -1, -1))
        assert cpu.get_memory(90) == 999

    def test_countdown_zero(self):
        assert self.run_sample("countdown-zero").get_output() == (600, 95)

    @pytest.mark.parametrize("inputs,expected", [
        ([3, 9, 4], 9),
        ([9, 3, 4], 9),
        ([3, 4, 9], 9),
        ([5, 5, 5], 5),
    ])
    def test_max3(self, inputs, expected):
        assert self.run_sample("max3", inputs=inputs).get_output() == (expected,)

    def test_max3_negative_int32(self):
        cpu = self.run_sample("max3", word="int32", inputs=[-7, -2, -9])
        assert cpu.get_output() == (-2,)

    def test_multiply(self):
        assert self.run_sample("multiply").get_output() == (42,)

    def test_multiply_by_zero(self):
        assert self.run_sample("multiply", inputs=[6, 0]).get_output() == (0,)

    def test_multiply_int64(self):
        cpu = self.run_sample("multiply", word="int64", inputs=[1000000000, 5000])
        assert cpu.get_output() == (5000000000000,)

    def test_fibonacci(self):
        assert self.run_sample("fibonacci").get_output() == (0, 1, 1, 2, 3, 5, 8, 13, 21, 34)

    def test_step(self):
        cpu = LMC()
        get_sample("step").load_into(cpu)

        cpu.step()
        assert cpu.get_accumulator() == 42
        cpu.step()
        assert cpu.get_output() == (42,)
        cpu.step()
        assert cpu.is_halted() is True

    def test_load_into_resets(self):
        cpu = LMC()
        cpu.load_program([1, 2, 3], 50)
        cpu.add_input(99)
        get_sample("add").load_into(cpu)
        assert 50 not in cpu.dump_memory()
        assert cpu.channels.pending_inputs() == (5, 3)

    def test_unknown_sample(self):
        with pytest.raises(KeyError):
            get_sample("nope")


class TestProgramFromFile:
    """Test loading programs from files."""

    def test_add_file(self):
        cpu = LMC()
        cpu.load_program(load_program_file(PROGRAMS_DIR / "add.lmc"))
        cpu.add_inputs(20, 22)
        cpu.run()

        assert cpu.get_output() == (42,)

    def test_countdown_file(self):
        cpu = LMC()
        cpu.load_program(load_program_file(PROGRAMS_DIR / "countdown.lmc"))
        cpu.run()

        assert cpu.get_output() == (5, 4, 3, 2, 1)

    def test_max3_file(self):
        cpu = LMC(word="int64")
        cpu.load_program(load_program_file(PROGRAMS_DIR / "max3.lmc"))
        cpu.add_inputs(9223372036854775000, 5000000000000000000, 7777777777777777777)
        cpu.run()

        assert cpu.get_output() == (9223372036854775000,)
