"""
Intel 4004 Assembler - Main Interface
=====================================

This module provides the Assembler class, which drives the one-pass
assembly of 4004 source code into a flat binary.

Each non-blank line goes through the same pipeline, in file order:

    parse_line -> resolve_mnemonic -> InstructionEncoder -> CodeBuffer

There are no labels, directives or expressions, so a single pass is
enough. The first error stops assembly; nothing is written to disk
unless the whole source assembled.

Example Usage
-------------
>>> from mcs4_asm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
...     FIM 2 5A    ; load pair 2
...     SRC 3
...     JUN 1 23
... ''').hex()
'245a274123'
>>> asm.write_binary("program.bin")
"""

import logging
from pathlib import Path
from typing import Optional

from mcs4_asm.assembler.codegen import MAX_CODE_SIZE, CodeBuffer, InstructionEncoder
from mcs4_asm.assembler.opcodes import resolve_mnemonic
from mcs4_asm.assembler.parser import ParsedLine, iter_source_lines, parse_line

logger = logging.getLogger(__name__)


class Assembler:
    """
    One-pass Intel 4004 assembler.

    Each instance owns its code buffer, so independent assemblies never
    share state. Every call to assemble_string or assemble_file starts
    from an empty buffer.

    Attributes:
        verbose: If True, log a summary after each assembly at INFO level
        max_code_size: Capacity of the code buffer in bytes
    """

    def __init__(self, verbose: bool = False, max_code_size: int = MAX_CODE_SIZE):
        """
        Initialize the assembler.

        Args:
            verbose: Log a summary of each assembly
            max_code_size: Code buffer capacity in bytes (default 4096)
        """
        self._verbose = verbose
        self._buffer = CodeBuffer(max_code_size)
        self._encoder = InstructionEncoder(self._buffer)
        self._listing_lines: list[str] = []
        self._source_name: Optional[str] = None

    @property
    def max_code_size(self) -> int:
        return self._buffer.capacity

    def reset(self) -> None:
        """Discard generated code and listing."""
        self._buffer.clear()
        self._listing_lines.clear()
        self._source_name = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_line(self, line: str, line_number: int = 1,
                      filename: str = "<input>") -> bytes:
        """
        Assemble one source line into the current buffer.

        Args:
            line: Source text
            line_number: Line number for error messages and listing
            filename: Source name for error messages

        Returns:
            Bytes generated for this line (empty for blank lines)

        Raises:
            AssemblerError: If the line cannot be assembled
        """
        parsed = parse_line(line, line_number, filename)
        if parsed is None:
            return b""
        return self._assemble_parsed(parsed)

    def _assemble_parsed(self, parsed: ParsedLine) -> bytes:
        address = len(self._buffer)
        info = resolve_mnemonic(parsed.mnemonic, parsed.location, parsed.source_line)
        code = self._encoder.encode(
            info, parsed.operands, parsed.location, parsed.source_line
        )

        hex_str = " ".join(f"{b:02X}" for b in code)
        self._listing_lines.append(
            f"${address:03X}  {hex_str:6s}  {parsed.location.line:4d}  "
            f"{parsed.source_line.strip()}"
        )
        return code

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Generated code as bytes

        Raises:
            AssemblerError: On the first line that fails
        """
        self.reset()
        self._source_name = filename

        count = 0
        for parsed in iter_source_lines(source, filename):
            self._assemble_parsed(parsed)
            count += 1

        code = self._buffer.snapshot()
        message = f"{filename}: {count} instructions, {len(code)} bytes"
        if self._verbose:
            logger.info(message)
        else:
            logger.debug(message)
        return code

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to the assembly source file

        Returns:
            Generated code as bytes

        Raises:
            AssemblerError: If assembly fails
            OSError: If the file cannot be read
        """
        filepath = Path(filepath)
        logger.debug(f"Reading {filepath}")
        source = filepath.read_text(encoding="latin-1")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Return the generated code."""
        return self._buffer.snapshot()

    def get_size(self) -> int:
        """Return the number of bytes generated."""
        return len(self._buffer)

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the generated code as a flat binary (no header, no padding).

        Args:
            filepath: Output file path
        """
        code = self.get_code()
        Path(filepath).write_bytes(code)
        logger.debug(f"Wrote {len(code)} bytes to {filepath}")

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Listing with address, generated bytes, line number and source
            for each instruction
        """
        lines = []
        lines.append("Intel 4004 Assembler Listing")
        if self._source_name:
            lines.append(f"Source: {self._source_name}")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr  Code    Line  Source")
        lines.append("-" * 60)
        lines.extend(self._listing_lines)
        lines.append("")
        lines.append(f"{len(self._buffer)} bytes of {self._buffer.capacity}")
        return "\n".join(lines)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing to a file."""
        with open(filepath, "w") as f:
            f.write(self.get_listing())
            f.write("\n")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             max_code_size: int = MAX_CODE_SIZE) -> bytes:
    """
    Assemble source code with a fresh Assembler.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(max_code_size=max_code_size)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path, max_code_size: int = MAX_CODE_SIZE) -> bytes:
    """
    Assemble a file with a fresh Assembler.

    Raises:
        AssemblerError: If assembly fails
        OSError: If the file cannot be read
    """
    asm = Assembler(max_code_size=max_code_size)
    return asm.assemble_file(filepath)
