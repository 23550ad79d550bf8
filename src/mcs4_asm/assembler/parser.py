"""
Intel 4004 Source Line Parser
=============================

Splits one line of assembly source into a mnemonic and its operands.

Syntax
------
    MNEMONIC [OPERAND [OPERAND]]   ; comment

- Tokens are separated by whitespace; there is no quoting or escaping.
- Operands are unsigned hexadecimal numbers, with or without a 0x prefix.
- Everything from the first ';' to the end of the line is a comment.
- Lines that are empty after removing the comment are skipped.

Every token after the mnemonic counts as an operand, so a line with too
many operands is reported by the encoder rather than silently truncated.

Example
-------
>>> from mcs4_asm.assembler.parser import parse_line
>>> parsed = parse_line("  JUN 1 23   ; reset vector")
>>> parsed.mnemonic, parsed.operands
('JUN', (1, 35))
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from mcs4_asm.errors import AssemblySyntaxError, SourceLocation

# Characters that end the instruction part of a line
COMMENT_CHARS = ";\n\r"

_TOKEN_PATTERN = re.compile(r"\S+")
_HEX_PATTERN = re.compile(r"(?:0[xX])?[0-9A-Fa-f]+")


@dataclass(frozen=True)
class ParsedLine:
    """
    One non-blank source line, split into mnemonic and operands.

    Attributes:
        mnemonic: The first token, exactly as written
        operands: Numeric values of every following token
        location: Position of the mnemonic
        operand_locations: Position of each operand token
        source_line: The original line text without its newline
    """
    mnemonic: str
    operands: tuple[int, ...]
    location: SourceLocation
    operand_locations: tuple[SourceLocation, ...] = field(default=(), compare=False)
    source_line: str = field(default="", compare=False)

    @property
    def operand_count(self) -> int:
        return len(self.operands)


def strip_comment(line: str) -> str:
    """Cut the line at the first comment or newline character."""
    for index, char in enumerate(line):
        if char in COMMENT_CHARS:
            return line[:index]
    return line


def parse_hex(token: str, location: SourceLocation, source_line: str = "") -> int:
    """
    Parse an operand token as unsigned hexadecimal.

    Raises:
        AssemblySyntaxError: If the token is not a hex number
    """
    if not _HEX_PATTERN.fullmatch(token):
        raise AssemblySyntaxError(
            f"invalid hexadecimal operand '{token}'",
            location=location,
            hint="operands are hex digits, e.g. 'A' or '0x1F'",
            source_line=source_line,
        )
    return int(token, 16)


def parse_line(
    line: str,
    line_number: int = 1,
    filename: str = "<input>",
) -> Optional[ParsedLine]:
    """
    Parse one source line.

    Args:
        line: Raw source text (comment and newline may still be present)
        line_number: 1-indexed line number for error locations
        filename: Source name for error locations

    Returns:
        ParsedLine, or None for blank and comment-only lines

    Raises:
        AssemblySyntaxError: If an operand is not a hex number
    """
    source_line = line.rstrip("\r\n")
    code = strip_comment(line)

    tokens = list(_TOKEN_PATTERN.finditer(code))
    if not tokens:
        return None

    def _location(match: re.Match) -> SourceLocation:
        return SourceLocation(filename, line_number, match.start() + 1)

    mnemonic_match = tokens[0]
    operand_locations = tuple(_location(m) for m in tokens[1:])
    operands = tuple(
        parse_hex(m.group(), loc, source_line)
        for m, loc in zip(tokens[1:], operand_locations)
    )

    return ParsedLine(
        mnemonic=mnemonic_match.group(),
        operands=operands,
        location=_location(mnemonic_match),
        operand_locations=operand_locations,
        source_line=source_line,
    )


def iter_source_lines(source: str, filename: str = "<input>") -> Iterator[ParsedLine]:
    """
    Parse every non-blank line of a source text, in order.

    Lines are parsed lazily, so a syntax error is raised only when the
    iteration reaches the offending line.
    """
    for line_number, line in enumerate(source.split("\n"), start=1):
        parsed = parse_line(line, line_number, filename)
        if parsed is not None:
            yield parsed
