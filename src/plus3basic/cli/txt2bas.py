"""
txt2bas - BASIC Tokenizer Command-Line Interface
================================================

This module implements the command-line interface that tokenizes a text
listing into a ZX Spectrum BASIC program with a +3DOS header.

Usage Examples
--------------
Tokenize a listing:
    $ txt2bas game.txt game.bas

Run from line 100 after loading (overrides any #autostart directive):
    $ txt2bas --autostart 100 game.txt game.bas

Write the bare program without the +3DOS header:
    $ txt2bas --raw game.txt game.bin

Number unnumbered lines 1000, 1005, 1010, ...:
    $ txt2bas --start 1000 --step 5 game.txt game.bas
"""

from pathlib import Path
from typing import Optional

import click

from plus3basic import __version__
from plus3basic.cli.errors import handle_cli_exception, setup_logging
from plus3basic.config import CodecConfig
from plus3basic.encoder import BasicEncoder
from plus3basic.header import HEADER_SIZE


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
    "-a", "--autostart",
    type=click.IntRange(0, 32767),
    default=None,
    help="Line to run after loading (overrides #autostart in the source)",
)
@click.option(
    "--raw",
    is_flag=True,
    help="Omit the 128-byte +3DOS header",
)
@click.option(
    "--start",
    type=click.IntRange(0, 65535),
    default=10,
    show_default=True,
    help="Line number for the first unnumbered line",
)
@click.option(
    "--step",
    type=click.IntRange(1, 65535),
    default=10,
    show_default=True,
    help="Increment between implicit line numbers",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on line numbers above 65535 instead of wrapping them",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show program details and debug logging",
)
@click.version_option(version=__version__, prog_name="txt2bas")
def main(
    input_file: Path,
    output_file: Path,
    autostart: Optional[int],
    raw: bool,
    start: int,
    step: int,
    strict: bool,
    verbose: bool,
) -> None:
    """
    Tokenize a text listing into a ZX Spectrum BASIC program.

    INPUT_FILE is the UTF-8 listing. OUTPUT_FILE receives the tokenized
    program, preceded by a +3DOS header unless --raw is given.

    \b
    Source directives:
      #autostart N   run line N after loading
      # text         comment, ignored

    \b
    Examples:
      txt2bas game.txt game.bas
      txt2bas --autostart 10 game.txt game.bas
    """
    setup_logging(verbose)

    try:
        config = CodecConfig(
            first_line_number=start,
            line_number_step=step,
            strict_line_numbers=strict,
        )
        text = input_file.read_text(encoding="utf-8-sig")
        image = BasicEncoder(config).encode_program(text)

        if autostart is not None:
            image.autostart = autostart

        data = image.to_bytes(with_header=not raw)
        output_file.write_bytes(data)

        if verbose:
            program_length = len(data) if raw else len(data) - HEADER_SIZE
            click.echo(f"Lines: {len(image)}", err=True)
            click.echo(f"Program length: {program_length} bytes", err=True)
            if raw:
                click.echo("+3DOS header: omitted", err=True)
            elif image.autostart is not None:
                click.echo(f"Autostart line: {image.autostart}", err=True)

        click.echo(f"Success! Created {output_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Conversion")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
