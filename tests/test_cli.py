"""
Tests for asm - Command-Line Interface
======================================

These tests run the Click command in-process with CliRunner.
"""

from click.testing import CliRunner

from mcs4_asm import __version__
from mcs4_asm.cli.asm import main
from mcs4_asm.cli.errors import ExitCode


def run(*args):
    return CliRunner().invoke(main, [str(a) for a in args])


class TestAsmCLI:
    """Tests for the asm CLI tool."""

    def test_assemble(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("FIM 2 5A\nSRC 3\nJUN 1 23\n")
        out = tmp_path / "prog.bin"

        result = run(source, out)

        assert result.exit_code == 0, result.output
        assert out.read_bytes() == bytes([0x24, 0x5A, 0x27, 0x41, 0x23])

    def test_help(self):
        result = run("--help")
        assert result.exit_code == 0
        assert "Assemble Intel 4004" in result.output

    def test_version(self):
        result = run("--version")
        assert result.exit_code == 0
        assert f"Intel 4004 Assembler [Version {__version__}]" in result.output

    def test_no_arguments(self):
        result = run()
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Usage" in result.output

    def test_too_many_arguments(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("NOP\n")
        result = run(source, tmp_path / "a.bin", tmp_path / "b.bin")
        assert result.exit_code != 0
        assert "Usage" in result.output

    def test_missing_input(self, tmp_path):
        result = run(tmp_path / "missing.asm", tmp_path / "out.bin")
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_assembly_error(self, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("NOP\nJUN\n")
        out = tmp_path / "bad.bin"

        result = run(source, out)

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Assembly error" in result.output
        assert "too few modifiers" in result.output
        assert not out.exists()

    def test_listing(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("LDM 7\n")
        listing = tmp_path / "prog.lst"

        result = run(source, tmp_path / "prog.bin", "-l", listing)

        assert result.exit_code == 0, result.output
        assert "LDM 7" in listing.read_text()

    def test_max_size(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("JUN 0 00\n")

        result = run(source, tmp_path / "prog.bin", "--max-size", "1")

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "overflow" in result.output

    def test_verbose(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("NOP\nCLB\n")

        result = run("-v", source, tmp_path / "prog.bin")

        assert result.exit_code == 0, result.output
        assert "Wrote 2 bytes" in result.output

    def test_non_utf8_comment(self, tmp_path):
        """Bytes inside a comment never block assembly."""
        source = tmp_path / "prog.asm"
        source.write_bytes(b"NOP ; \xff\xfe\n")
        out = tmp_path / "prog.bin"

        result = run(source, out)

        assert result.exit_code == 0, result.output
        assert out.read_bytes() == b"\x00"
