"""
Intel 4004 Code Generator
=========================

Turns a resolved instruction and its operands into bytes, and collects
those bytes in a bounded code buffer.

Encoding
--------
Operands are checked against the instruction's operand count first; a
mismatch is an error in either direction. The operands are then handed,
left to right, to the word formats that consume one. Values wider than
their field are masked to the field width without complaint: a register
operand of 0x13 selects register 3.

Code Buffer
-----------
The buffer has a fixed capacity (4 KiB by default, the 4004 program
space). The byte that would exceed it raises CodeOverflowError and is not
stored.
"""

import logging
from typing import Callable, Mapping, Optional, Sequence

from mcs4_asm.assembler.opcodes import InstructionInfo, WordFormat
from mcs4_asm.errors import (
    CodeOverflowError,
    InstructionTableError,
    SourceLocation,
    TooFewOperandsError,
    TooManyOperandsError,
)

logger = logging.getLogger(__name__)

# Maximum program size in bytes
MAX_CODE_SIZE = 4096


# =============================================================================
# Code Buffer
# =============================================================================

class CodeBuffer:
    """
    Append-only byte buffer with a fixed capacity.

    Attributes:
        capacity: Maximum number of bytes the buffer accepts
    """

    def __init__(self, capacity: int = MAX_CODE_SIZE):
        if capacity <= 0:
            raise ValueError(f"code buffer capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._data = bytearray()

    def append(
        self,
        byte: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        """
        Append one byte.

        Raises:
            CodeOverflowError: If the buffer is already full
        """
        if len(self._data) >= self.capacity:
            raise CodeOverflowError(self.capacity, location=location, source_line=source_line)
        self._data.append(byte & 0xFF)

    def snapshot(self) -> bytes:
        """Return the bytes appended so far."""
        return bytes(self._data)

    def clear(self) -> None:
        self._data.clear()

    @property
    def remaining(self) -> int:
        """Number of bytes that can still be appended."""
        return self.capacity - len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"CodeBuffer({len(self._data)}/{self.capacity} bytes)"


# =============================================================================
# Word Encoding
# =============================================================================

def _packed(opcode: int, low_nibble: int) -> int:
    return (opcode & 0x0F) << 4 | (low_nibble & 0x0F)


_WORD_BUILDERS: dict[WordFormat, Callable[[int, int], Optional[int]]] = {
    WordFormat.NONE: lambda opcode, operand: None,
    WordFormat.ADDRESS: lambda opcode, operand: operand & 0xFF,
    WordFormat.DATA: lambda opcode, operand: operand & 0xFF,
    WordFormat.OPCODE: lambda opcode, operand: opcode & 0xFF,
    WordFormat.OPCODE_COND: _packed,
    WordFormat.OPCODE_ADDR: _packed,
    WordFormat.OPCODE_DATA: _packed,
    WordFormat.OPCODE_REGISTER: _packed,
    WordFormat.OPCODE_REGPAIR_0: lambda opcode, operand: _packed(opcode, (operand & 0x07) << 1),
    WordFormat.OPCODE_REGPAIR_1: lambda opcode, operand: _packed(opcode, (operand & 0x07) << 1 | 0x01),
}


def check_word_builders(builders: Mapping[WordFormat, Callable]) -> None:
    """
    Check that every word format has a byte builder.

    Raises:
        InstructionTableError: If any format is missing
    """
    missing = set(WordFormat) - set(builders)
    if missing:
        names = ", ".join(sorted(fmt.name for fmt in missing))
        raise InstructionTableError(f"no byte builder for word formats: {names}")


check_word_builders(_WORD_BUILDERS)


def encode_word(fmt: WordFormat, opcode: int, operand: int = 0) -> Optional[int]:
    """
    Build one instruction word.

    Args:
        fmt: Word format
        opcode: Instruction opcode
        operand: Operand value (ignored by NONE and OPCODE)

    Returns:
        The byte value, or None for WordFormat.NONE
    """
    return _WORD_BUILDERS[fmt](opcode, operand)


def encode_instruction(
    info: InstructionInfo,
    operands: Sequence[int],
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> bytes:
    """
    Encode one instruction.

    Args:
        info: The resolved instruction
        operands: Parsed operand values
        location: Position of the instruction, for error messages
        source_line: Source text, for error messages

    Returns:
        The encoded bytes (1 or 2)

    Raises:
        TooManyOperandsError: If more operands were given than required
        TooFewOperandsError: If fewer operands were given than required
    """
    if len(operands) > info.operand_count:
        raise TooManyOperandsError(
            info.mnemonic, info.operand_count, len(operands),
            location=location, source_line=source_line,
        )
    if len(operands) < info.operand_count:
        raise TooFewOperandsError(
            info.mnemonic, info.operand_count, len(operands),
            location=location, source_line=source_line,
        )

    pending = iter(operands)
    code = bytearray()
    for fmt in (info.word0, info.word1):
        operand = next(pending) if fmt.consumes_operand else 0
        byte = encode_word(fmt, info.opcode, operand)
        if byte is not None:
            code.append(byte)

    return bytes(code)


# =============================================================================
# Instruction Encoder
# =============================================================================

class InstructionEncoder:
    """
    Encodes instructions into a CodeBuffer, in program order.

    Example:
        >>> from mcs4_asm.assembler.opcodes import lookup_instruction
        >>> buffer = CodeBuffer()
        >>> encoder = InstructionEncoder(buffer)
        >>> encoder.encode(lookup_instruction("FIM"), [0x2, 0x5A])
        b'$Z'
        >>> buffer.snapshot().hex()
        '245a'
    """

    def __init__(self, buffer: CodeBuffer):
        self.buffer = buffer

    def encode(
        self,
        info: InstructionInfo,
        operands: Sequence[int],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> bytes:
        """
        Encode an instruction and append its bytes to the buffer.

        Returns:
            The bytes that were appended

        Raises:
            OperandCountError: On an operand count mismatch
            CodeOverflowError: If a byte does not fit in the buffer
        """
        code = encode_instruction(info, operands, location, source_line)
        for byte in code:
            self.buffer.append(byte, location=location, source_line=source_line)

        logger.debug(
            f"{info.mnemonic} {' '.join(f'{v:X}' for v in operands)} -> "
            f"{code.hex(' ').upper()}"
        )
        return code
