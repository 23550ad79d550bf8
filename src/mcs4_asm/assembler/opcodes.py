"""
Intel 4004 Instruction Set Definition
=====================================

This module defines the MCS-4 (Intel 4004) instruction set: one entry per
mnemonic with its opcode, operand count, and the layout of the one or two
bytes it assembles to.

The 4004 is a 4-bit CPU with 8-bit instruction words. Most instructions
pack a 4-bit opcode (OPR) into the high nibble and a 4-bit modifier (OPA)
into the low nibble. Two-word instructions follow with a full byte of
address or data.

Word Formats
------------
Each instruction names a format for word 0 and word 1:

| Format           | Layout    | Example             |
|------------------|-----------|---------------------|
| NONE             | (no byte) |                     |
| ADDRESS          | AAAA AAAA | JUN 1 23 -> .. $23  |
| DATA             | DDDD DDDD | FIM 2 5A -> .. $5A  |
| OPCODE           | OOOO OOOO | CLB -> $F0          |
| OPCODE_COND      | OOOO CCCC | JCN 4 10 -> $14 ..  |
| OPCODE_ADDR      | OOOO AAAA | JUN 1 23 -> $41 ..  |
| OPCODE_DATA      | OOOO DDDD | LDM 7 -> $D7        |
| OPCODE_REGISTER  | OOOO RRRR | INC 3 -> $63        |
| OPCODE_REGPAIR_0 | OOOO PPP0 | FIN 1 -> $32        |
| OPCODE_REGPAIR_1 | OOOO PPP1 | SRC 3 -> $27        |

Operands are consumed left to right by the formats that take one.

Reference
---------
- MCS-4 Micro Computer Set Users Manual (Intel, 1973)
"""

import difflib
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from mcs4_asm.errors import (
    InstructionTableError,
    SourceLocation,
    UnknownMnemonicError,
)


# =============================================================================
# Word Format Enumeration
# =============================================================================

class WordFormat(Enum):
    """
    Bit layout of one instruction word.

    The set is closed: the encoder refuses to import unless every member
    has a byte builder.
    """
    NONE = auto()              # No byte emitted
    ADDRESS = auto()           # AAAA AAAA
    DATA = auto()              # DDDD DDDD
    OPCODE = auto()            # Opcode byte verbatim
    OPCODE_COND = auto()       # OOOO CCCC
    OPCODE_ADDR = auto()       # OOOO AAAA (address high nibble)
    OPCODE_DATA = auto()       # OOOO DDDD
    OPCODE_REGISTER = auto()   # OOOO RRRR
    OPCODE_REGPAIR_0 = auto()  # OOOO PPP0
    OPCODE_REGPAIR_1 = auto()  # OOOO PPP1

    @property
    def consumes_operand(self) -> bool:
        """True if building this word needs an operand value."""
        return self not in (WordFormat.NONE, WordFormat.OPCODE)

    def __str__(self) -> str:
        return self.name.lower()


# Formats allowed for the second word of an instruction
SECOND_WORD_FORMATS: frozenset[WordFormat] = frozenset({
    WordFormat.NONE,
    WordFormat.ADDRESS,
    WordFormat.DATA,
})


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Description of one instruction.

    Frozen so that table entries cannot be modified at runtime.

    Attributes:
        mnemonic: Uppercase mnemonic, unique across the table
        opcode: Base opcode (only the low nibble matters for packed formats)
        operand_count: Exact number of operands required (0, 1 or 2)
        word0: Format of the first byte
        word1: Format of the optional second byte
    """
    mnemonic: str
    opcode: int
    operand_count: int
    word0: WordFormat
    word1: WordFormat = WordFormat.NONE

    @property
    def size(self) -> int:
        """Number of bytes this instruction assembles to."""
        return sum(1 for fmt in (self.word0, self.word1) if fmt is not WordFormat.NONE)

    @property
    def operand_formats(self) -> tuple[WordFormat, ...]:
        """The word formats that consume an operand, in consumption order."""
        return tuple(fmt for fmt in (self.word0, self.word1) if fmt.consumes_operand)

    def __repr__(self) -> str:
        return (
            f"InstructionInfo({self.mnemonic}, opcode=${self.opcode:02X}, "
            f"operands={self.operand_count}, size={self.size})"
        )


# =============================================================================
# Instruction Table
# =============================================================================

_W = WordFormat

_INSTRUCTIONS: tuple[InstructionInfo, ...] = (
    # Machine instructions (OPR in the high nibble)
    InstructionInfo("NOP", 0x00, 0, _W.OPCODE),                        # No operation
    InstructionInfo("JCN", 0x01, 2, _W.OPCODE_COND, _W.ADDRESS),       # Jump conditional
    InstructionInfo("FIM", 0x02, 2, _W.OPCODE_REGPAIR_0, _W.DATA),     # Fetch immediate
    InstructionInfo("SRC", 0x02, 1, _W.OPCODE_REGPAIR_1),              # Send register control
    InstructionInfo("FIN", 0x03, 1, _W.OPCODE_REGPAIR_0),              # Fetch indirect
    InstructionInfo("JIN", 0x03, 1, _W.OPCODE_REGPAIR_1),              # Jump indirect
    InstructionInfo("JUN", 0x04, 2, _W.OPCODE_ADDR, _W.ADDRESS),       # Jump unconditional
    InstructionInfo("JMS", 0x05, 2, _W.OPCODE_ADDR, _W.ADDRESS),       # Jump to subroutine
    InstructionInfo("INC", 0x06, 1, _W.OPCODE_REGISTER),               # Increment register
    InstructionInfo("ISZ", 0x07, 2, _W.OPCODE_REGISTER, _W.ADDRESS),   # Increment, skip if zero
    InstructionInfo("ADD", 0x08, 1, _W.OPCODE_REGISTER),               # Add register
    InstructionInfo("SUB", 0x09, 1, _W.OPCODE_REGISTER),               # Subtract register
    InstructionInfo("LD", 0x0A, 1, _W.OPCODE_REGISTER),                # Load register
    InstructionInfo("XCH", 0x0B, 1, _W.OPCODE_REGISTER),               # Exchange register
    InstructionInfo("BBL", 0x0C, 1, _W.OPCODE_DATA),                   # Branch back and load
    InstructionInfo("LDM", 0x0D, 1, _W.OPCODE_DATA),                   # Load immediate

    # Accumulator group instructions (full byte opcodes)
    InstructionInfo("CLB", 0xF0, 0, _W.OPCODE),                        # Clear both
    InstructionInfo("CLC", 0xF1, 0, _W.OPCODE),                        # Clear carry
    InstructionInfo("IAC", 0xF2, 0, _W.OPCODE),                        # Increment accumulator
    InstructionInfo("CMC", 0xF3, 0, _W.OPCODE),                        # Complement carry
    InstructionInfo("CMA", 0xF4, 0, _W.OPCODE),                        # Complement accumulator
    InstructionInfo("RAL", 0xF5, 0, _W.OPCODE),                        # Rotate left
    InstructionInfo("RAR", 0xF6, 0, _W.OPCODE),                        # Rotate right
    InstructionInfo("TCC", 0xF7, 0, _W.OPCODE),                        # Transmit carry and clear
    InstructionInfo("DAC", 0xF8, 0, _W.OPCODE),                        # Decrement accumulator
    InstructionInfo("TCS", 0xF9, 0, _W.OPCODE),                        # Transfer carry subtract
    InstructionInfo("STC", 0xFA, 0, _W.OPCODE),                        # Set carry
    InstructionInfo("DAA", 0xFB, 0, _W.OPCODE),                        # Decimal adjust accumulator
    InstructionInfo("KBP", 0xFC, 0, _W.OPCODE),                        # Keyboard process
    InstructionInfo("DCL", 0xFD, 0, _W.OPCODE),                        # Designate command line

    # Input/output and RAM instructions
    InstructionInfo("WRM", 0xE0, 0, _W.OPCODE),                        # Write RAM character
    InstructionInfo("WMP", 0xE1, 0, _W.OPCODE),                        # Write RAM port
    InstructionInfo("WRR", 0xE2, 0, _W.OPCODE),                        # Write ROM port
    InstructionInfo("WPM", 0xE3, 0, _W.OPCODE),                        # Write program RAM
    InstructionInfo("WR0", 0xE4, 0, _W.OPCODE),                        # Write status char 0
    InstructionInfo("WR1", 0xE5, 0, _W.OPCODE),                        # Write status char 1
    InstructionInfo("WR2", 0xE6, 0, _W.OPCODE),                        # Write status char 2
    InstructionInfo("WR3", 0xE7, 0, _W.OPCODE),                        # Write status char 3
    InstructionInfo("SBM", 0xE8, 0, _W.OPCODE),                        # Subtract RAM character
    InstructionInfo("RDM", 0xE9, 0, _W.OPCODE),                        # Read RAM character
    InstructionInfo("RDR", 0xEA, 0, _W.OPCODE),                        # Read ROM port
    InstructionInfo("ADM", 0xEB, 0, _W.OPCODE),                        # Add RAM character
    InstructionInfo("RD0", 0xEC, 0, _W.OPCODE),                        # Read status char 0
    InstructionInfo("RD1", 0xED, 0, _W.OPCODE),                        # Read status char 1
    InstructionInfo("RD2", 0xEE, 0, _W.OPCODE),                        # Read status char 2
    InstructionInfo("RD3", 0xEF, 0, _W.OPCODE),                        # Read status char 3
)

del _W


def validate_table(entries: Iterable[InstructionInfo]) -> Mapping[str, InstructionInfo]:
    """
    Build the read-only mnemonic -> InstructionInfo mapping.

    Every entry is checked so that a hand-edited table cannot silently
    disagree with the encoder.

    Args:
        entries: Instruction descriptions

    Returns:
        Read-only mapping keyed by mnemonic

    Raises:
        InstructionTableError: If any entry is inconsistent
    """
    table: dict[str, InstructionInfo] = {}

    for info in entries:
        if info.mnemonic in table:
            raise InstructionTableError(f"duplicate mnemonic '{info.mnemonic}'")

        if not 0 <= info.opcode <= 0xFF:
            raise InstructionTableError(
                f"{info.mnemonic}: opcode {info.opcode:#x} does not fit in a byte"
            )

        if info.word0 is WordFormat.NONE:
            raise InstructionTableError(f"{info.mnemonic}: first word cannot be empty")

        if info.word1 not in SECOND_WORD_FORMATS:
            raise InstructionTableError(
                f"{info.mnemonic}: {info.word1} is not allowed as the second word"
            )

        consumed = len(info.operand_formats)
        if info.operand_count != consumed:
            raise InstructionTableError(
                f"{info.mnemonic}: operand count {info.operand_count} does not match "
                f"its word formats ({info.word0}, {info.word1} consume {consumed})"
            )

        table[info.mnemonic] = info

    return MappingProxyType(table)


INSTRUCTION_TABLE: Mapping[str, InstructionInfo] = validate_table(_INSTRUCTIONS)

# Set of all valid mnemonics
MNEMONICS: frozenset[str] = frozenset(INSTRUCTION_TABLE)


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_instruction(mnemonic: str) -> Optional[InstructionInfo]:
    """
    Look up an instruction by mnemonic.

    Matching is exact and case-sensitive.

    Returns:
        InstructionInfo if found, None otherwise
    """
    return INSTRUCTION_TABLE.get(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a valid 4004 instruction."""
    return mnemonic in MNEMONICS


def resolve_mnemonic(
    mnemonic: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> InstructionInfo:
    """
    Resolve a mnemonic to its instruction, failing loudly.

    Args:
        mnemonic: Mnemonic token from the source line
        location: Where the mnemonic appears, for the error message
        source_line: Source text, for the error message

    Returns:
        The matching InstructionInfo

    Raises:
        UnknownMnemonicError: If the mnemonic is not in the table
    """
    info = INSTRUCTION_TABLE.get(mnemonic)
    if info is not None:
        return info

    hint = None
    if mnemonic.upper() in INSTRUCTION_TABLE:
        hint = f"mnemonics are case-sensitive; did you mean '{mnemonic.upper()}'?"

    similar = difflib.get_close_matches(mnemonic.upper(), sorted(MNEMONICS), n=3)

    raise UnknownMnemonicError(
        mnemonic,
        location=location,
        hint=hint,
        source_line=source_line,
        similar_mnemonics=similar,
    )
