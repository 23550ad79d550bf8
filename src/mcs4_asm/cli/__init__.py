"""
MCS-4 Assembler Command-Line Interface
======================================

- **asm**: Intel 4004 assembler

The tool is a Click application; error reporting and exit codes are
shared through mcs4_asm.cli.errors.
"""

__all__ = ["asm"]
