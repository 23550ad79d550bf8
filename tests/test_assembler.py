# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the one-pass assembler, from source text to bytes.
#
# Test coverage includes:
#   - Complete program assembly
#   - Blank and comment lines
#   - Fatal error reporting with line numbers
#   - Code size limits
#   - Listing and binary output
# =============================================================================

import pytest

from mcs4_asm.assembler import Assembler, assemble, assemble_file
from mcs4_asm.errors import (
    AssemblerError,
    AssemblySyntaxError,
    CodeOverflowError,
    TooFewOperandsError,
    TooManyOperandsError,
    UnknownMnemonicError,
)


PROGRAM = """\
; Read ROM port 0 and echo it to RAM
        FIM 0 00      ; select chip 0
        SRC 0
        RDR
        XCH 2
        LD 2
        WRM
        JUN 0 00
"""


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline."""

    def test_minimal_program(self):
        asm = Assembler()
        assert asm.assemble_string("NOP") == b"\x00"

    def test_program(self):
        asm = Assembler()
        code = asm.assemble_string(PROGRAM)
        assert code == bytes([0x20, 0x00, 0x21, 0xEA, 0xB2, 0xA2, 0xE0, 0x40, 0x00])
        assert asm.get_code() == code
        assert asm.get_size() == 9

    def test_worked_examples(self):
        code = assemble("FIM 2 5A\nSRC 3\nJUN 1 23\n")
        assert code == bytes([0x24, 0x5A, 0x27, 0x41, 0x23])

    def test_blank_and_comment_lines_contribute_nothing(self):
        source = "\n   \n; comment\n\t; indented comment\nNOP\n\n"
        assert assemble(source) == b"\x00"

    def test_empty_source(self):
        assert assemble("") == b""

    def test_assemble_line(self):
        asm = Assembler()
        assert asm.assemble_line("LDM 7") == b"\xd7"
        assert asm.assemble_line("   ; nothing") == b""
        assert asm.assemble_line("IAC") == b"\xf2"
        assert asm.get_code() == b"\xd7\xf2"


class TestIdempotence:
    """Assembling the same source again gives the same bytes."""

    def test_same_instance(self):
        asm = Assembler()
        first = asm.assemble_string(PROGRAM)
        second = asm.assemble_string(PROGRAM)
        assert first == second

    def test_fresh_instances(self):
        assert assemble(PROGRAM) == assemble(PROGRAM)

    def test_instances_are_independent(self):
        a = Assembler()
        b = Assembler()
        a.assemble_string("CLB")
        b.assemble_string("CLC\nIAC")
        assert a.get_code() == b"\xf0"
        assert b.get_code() == b"\xf1\xf2"


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestErrors:
    """Every error is fatal and points at its line."""

    def test_unknown_mnemonic(self):
        with pytest.raises(UnknownMnemonicError) as exc_info:
            assemble("NOP\nXYZ\n", "prog.asm")
        assert exc_info.value.location.line == 2
        assert str(exc_info.value).startswith("prog.asm:2:1: error: unknown mnemonic 'XYZ'")

    def test_too_many_modifiers(self):
        with pytest.raises(TooManyOperandsError, match="too many modifiers"):
            assemble("NOP 0x1")

    def test_too_few_modifiers(self):
        with pytest.raises(TooFewOperandsError, match="too few modifiers"):
            assemble("JUN")

    def test_syntax_error(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            assemble("NOP\n\nLDM Z\n")
        assert exc_info.value.location.line == 3

    def test_first_error_stops_assembly(self):
        asm = Assembler()
        with pytest.raises(AssemblerError):
            asm.assemble_string("CLB\nBAD\nCLC\n")
        assert asm.get_code() == b"\xf0"

    def test_line_numbers_follow_newlines_only(self):
        """Form feeds and other separators do not start a new line."""
        with pytest.raises(UnknownMnemonicError) as exc_info:
            assemble("NOP\x0c\nXYZ\n")
        assert exc_info.value.location.line == 2

    def test_bad_line_is_not_skipped(self):
        with pytest.raises(UnknownMnemonicError):
            assemble("nop\nNOP\n")


class TestCodeSize:
    """Tests for the code buffer limit."""

    def test_default_limit(self):
        assert Assembler().max_code_size == 4096

    def test_exact_fit(self):
        asm = Assembler(max_code_size=3)
        assert asm.assemble_string("NOP\nJUN 0 00") == b"\x00\x40\x00"

    def test_overflow_on_exact_line(self):
        asm = Assembler(max_code_size=3)
        with pytest.raises(CodeOverflowError) as exc_info:
            asm.assemble_string("NOP\nNOP\nJUN 0 00\nNOP")
        assert exc_info.value.location.line == 3

    def test_full_rom(self):
        source = "NOP\n" * 4096
        assert len(assemble(source)) == 4096
        with pytest.raises(CodeOverflowError):
            assemble(source + "NOP\n")


# =============================================================================
# File I/O Tests
# =============================================================================

class TestFiles:
    """Tests for reading sources and writing outputs."""

    def test_assemble_file(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text(PROGRAM)
        assert assemble_file(source) == assemble(PROGRAM)

    def test_error_names_file(self, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("LDM\n")
        with pytest.raises(TooFewOperandsError) as exc_info:
            Assembler().assemble_file(source)
        assert exc_info.value.location.filename == str(source)

    def test_non_utf8_comment(self, tmp_path):
        source = tmp_path / "latin.asm"
        source.write_bytes(b"LDM 7 ; caf\xe9\n; \xa9 2024\nCLB\n")
        assert assemble_file(source) == b"\xd7\xf0"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            assemble_file(tmp_path / "missing.asm")

    def test_write_binary(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(PROGRAM)
        out = tmp_path / "prog.bin"
        asm.write_binary(out)
        assert out.read_bytes() == asm.get_code()

    def test_listing(self, tmp_path):
        asm = Assembler()
        asm.assemble_string("; start\nFIM 2 5A\nSRC 3\n", "prog.asm")
        listing = asm.get_listing()
        assert "Source: prog.asm" in listing
        assert "$000  24 5A      2  FIM 2 5A" in listing
        assert "$002  27         3  SRC 3" in listing

        out = tmp_path / "prog.lst"
        asm.write_listing(out)
        assert "FIM 2 5A" in out.read_text()
