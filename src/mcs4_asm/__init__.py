"""
MCS-4 Assembler - Intel 4004 Cross Assembler
============================================

This package assembles Intel 4004 (MCS-4) assembly source into a flat
binary image suitable for loading into 4001 ROMs or an emulator.

Main Components
---------------
- **assembler**: Instruction table, line parser, encoder and code buffer
- **cli**: The ``asm`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from mcs4_asm import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("blink.asm")
    >>> asm.write_binary("blink.bin")

Or use the command-line tool:
    $ asm blink.asm blink.bin

Version History
---------------
0.1.0 - Initial release
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from mcs4_asm.assembler import Assembler, assemble, assemble_file
from mcs4_asm.errors import (
    Mcs4Error,
    AssemblerError,
    AssemblySyntaxError,
    UnknownMnemonicError,
    OperandCountError,
    TooManyOperandsError,
    TooFewOperandsError,
    CodeOverflowError,
    InstructionTableError,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "Mcs4Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownMnemonicError",
    "OperandCountError",
    "TooManyOperandsError",
    "TooFewOperandsError",
    "CodeOverflowError",
    "InstructionTableError",
    "SourceLocation",
]
