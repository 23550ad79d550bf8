"""
MCS-4 Assembler Error Hierarchy
===============================

This module defines the exception hierarchy for the assembler. All
exceptions inherit from Mcs4Error, allowing callers to catch every
assembler-related error with a single except clause.

Exception Hierarchy
-------------------
Mcs4Error (base)
├── AssemblerError (errors tied to a source line)
│   ├── AssemblySyntaxError - malformed operand token
│   ├── UnknownMnemonicError - mnemonic not in the instruction table
│   ├── OperandCountError - wrong number of operands
│   │   ├── TooManyOperandsError
│   │   └── TooFewOperandsError
│   └── CodeOverflowError - code buffer capacity exceeded
└── InstructionTableError - inconsistent instruction table definition

Every error raised while assembling is fatal: the assembler stops at the
first one and nothing is written.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Mcs4Error(Exception):
    """
    Base exception for all assembler errors.

        try:
            assembler.assemble_file("program.asm")
        except Mcs4Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source code, used for error reporting and listings.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Mcs4Error):
    """
    Base exception for errors found while assembling a source line.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            blink.asm:3:1: error: unknown mnemonic 'JMP'
                JMP 0 10
                ^
            hint: did you mean 'JMS', 'JUN'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in a source line.

    Raised when an operand token is not an unsigned hexadecimal number,
    e.g. ``LDM 1G`` or ``INC r3``.
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """
    Mnemonic not found in the instruction table.

    Lookup is exact and case-sensitive. When the mnemonic is close to a
    known one, the hint suggests it, which catches typos and lower-case
    input.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar_mnemonics = similar_mnemonics or []

        if not hint and self.similar_mnemonics:
            suggestions = ", ".join(f"'{m}'" for m in self.similar_mnemonics[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown mnemonic '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandCountError(AssemblerError):
    """
    Wrong number of operands for an instruction.

    The two directions are reported by distinct subclasses so callers
    can tell them apart without parsing the message.
    """

    # Overridden by subclasses
    problem = "wrong number of modifiers"

    def __init__(
        self,
        mnemonic: str,
        expected: int,
        actual: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected
        self.actual = actual

        noun = "operand" if expected == 1 else "operands"
        hint = f"{mnemonic} takes {expected} {noun}"

        super().__init__(
            f"{self.problem} for '{mnemonic}' (expected {expected}, got {actual})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class TooManyOperandsError(OperandCountError):
    """More operands were given than the instruction accepts."""
    problem = "too many modifiers"


class TooFewOperandsError(OperandCountError):
    """Fewer operands were given than the instruction requires."""
    problem = "too few modifiers"


class CodeOverflowError(AssemblerError):
    """
    Code buffer capacity exceeded.

    Raised on the first byte that does not fit. The 4004 program ROM
    space is 4 KiB, which is the default capacity.
    """

    def __init__(
        self,
        capacity: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.capacity = capacity
        super().__init__(
            f"code memory overflow (capacity is {capacity} bytes)",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Instruction Table Exceptions
# =============================================================================

class InstructionTableError(Mcs4Error):
    """
    The instruction table definition is inconsistent.

    Raised while the table is built, for duplicate mnemonics, an operand
    count that disagrees with the word formats, or a word format that is
    not allowed in that position.
    """
    pass
