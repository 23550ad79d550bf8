"""
Intel 4004 Assembler
====================

This package turns Intel 4004 (MCS-4) assembly source into a flat binary
instruction stream.

Main Components
---------------
- **Assembler**: Drives one-pass assembly of strings and files
- **parse_line**: Splits a source line into mnemonic and hex operands
- **resolve_mnemonic**: Looks a mnemonic up in the instruction table
- **InstructionEncoder**: Packs opcode and operands into 1 or 2 bytes
- **CodeBuffer**: Bounded, append-only output buffer

Source Format
-------------
One instruction per line, operands in hexadecimal, ';' starts a comment:

    FIM 0 5A      ; R0R1 <- $5A
    SRC 0
    JUN 0 00

There are no labels, directives or expressions.
"""

from mcs4_asm.assembler.assembler import Assembler, assemble, assemble_file
from mcs4_asm.assembler.codegen import (
    MAX_CODE_SIZE,
    CodeBuffer,
    InstructionEncoder,
    encode_instruction,
    encode_word,
)
from mcs4_asm.assembler.opcodes import (
    INSTRUCTION_TABLE,
    MNEMONICS,
    InstructionInfo,
    WordFormat,
    is_valid_instruction,
    lookup_instruction,
    resolve_mnemonic,
)
from mcs4_asm.assembler.parser import ParsedLine, iter_source_lines, parse_line

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Parser
    "ParsedLine",
    "parse_line",
    "iter_source_lines",
    # Code generator
    "MAX_CODE_SIZE",
    "CodeBuffer",
    "InstructionEncoder",
    "encode_instruction",
    "encode_word",
    # Opcodes
    "INSTRUCTION_TABLE",
    "MNEMONICS",
    "InstructionInfo",
    "WordFormat",
    "is_valid_instruction",
    "lookup_instruction",
    "resolve_mnemonic",
]
