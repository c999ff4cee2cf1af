"""Tests for program file parsing."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from lmc_vm.loader import load_program_file, parse_program, parse_values


class TestParseProgram:
    """Test the one-integer-per-line format."""

    def test_simple(self):
        assert parse_program("901\n902\n000\n") == [901, 902, 0]

    def test_skips_blank_and_comment_lines(self):
        source = """
            // add two numbers
            901

            390
              // indented comment
            000
        """
        assert parse_program(source) == [901, 390, 0]

    def test_negative_values(self):
        assert parse_program("-5\n+7") == [-5, 7]

    def test_malformed_lines_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="lmc_vm.loader"):
            program = parse_program("901\nLDA 5\n902\n12abc\n")
        assert program == [901, 902]
        assert "Line 2" in caplog.text
        assert "Line 4" in caplog.text

    def test_empty(self):
        assert parse_program("") == []


class TestLoadProgramFile:
    """Test reading program files."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "prog.lmc"
        path.write_text("// test\n505\n902\n0\n\n5\n")
        assert load_program_file(path) == [505, 902, 0, 5]

    def test_accepts_str_path(self, tmp_path):
        path = tmp_path / "prog.lmc"
        path.write_text("1\n")
        assert load_program_file(str(path)) == [1]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_program_file(tmp_path / "missing.lmc")


class TestParseValues:
    """Test inline value lists."""

    @pytest.mark.parametrize("text,expected", [
        ("901,390,902", [901, 390, 902]),
        ("901; 390 ;902", [901, 390, 902]),
        ("  5 3  ", [5, 3]),
        ("-1, 2", [-1, 2]),
        ("", []),
    ])
    def test_separators(self, text, expected):
        assert parse_values(text) == expected

    def test_invalid_token(self):
        with pytest.raises(ValueError, match="Invalid value: 'x'"):
            parse_values("1, x, 3")
