"""
asm - Intel 4004 Assembler Command-Line Interface
=================================================

Usage Examples
--------------
Basic assembly:
    $ asm blink.asm blink.bin

With a listing file:
    $ asm blink.asm blink.bin -l blink.lst

Verbose mode:
    $ asm -v blink.asm blink.bin
"""

import logging
from pathlib import Path
from typing import Optional

import click

from mcs4_asm import __version__
from mcs4_asm.assembler import MAX_CODE_SIZE, Assembler
from mcs4_asm.cli.errors import handle_cli_exception


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "--max-size",
    type=click.IntRange(min=1),
    default=MAX_CODE_SIZE,
    show_default=True,
    help="Maximum program size in bytes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(
    version=__version__,
    prog_name="asm",
    message="Intel 4004 Assembler [Version %(version)s]",
)
def main(
    input_file: Path,
    output_file: Path,
    listing: Optional[Path],
    max_size: int,
    verbose: bool,
) -> None:
    """
    Assemble Intel 4004 source code into a raw binary.

    INPUT_FILE is the assembly source file. OUTPUT_FILE receives the
    assembled bytes with no header or padding.

    \b
    Source format:
        MNEMONIC [OPERAND [OPERAND]]   ; comment
    Operands are hexadecimal (e.g. "FIM 2 5A", "JUN 1 23").

    \b
    Examples:
        asm blink.asm blink.bin
        asm blink.asm blink.bin -l blink.lst
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    asm = Assembler(verbose=verbose, max_code_size=max_size)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        # Nothing is written until the whole source has assembled
        asm.write_binary(output_file)
        if verbose:
            click.echo(f"Wrote {asm.get_size()} bytes to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
