"""
bas2txt - BASIC Lister Command-Line Interface
=============================================

This module implements the command-line interface that lists a tokenized
ZX Spectrum BASIC program as plain text.

Usage Examples
--------------
List a +3DOS program file:
    $ bas2txt game.bas game.txt

List to the terminal:
    $ bas2txt game.bas -

Show header and line details:
    $ bas2txt -v game.bas game.txt
"""

from pathlib import Path

import click

from plus3basic import __version__
from plus3basic.cli.errors import handle_cli_exception, setup_logging
from plus3basic.decoder import BasicDecoder
from plus3basic.header import FileType
from plus3basic.program import ProgramImage


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
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show header details and debug logging",
)
@click.version_option(version=__version__, prog_name="bas2txt")
def main(input_file: Path, output_file: Path, verbose: bool) -> None:
    """
    List a tokenized ZX Spectrum BASIC program as text.

    INPUT_FILE is the BASIC file, with or without a +3DOS header.
    OUTPUT_FILE receives the UTF-8 listing; use - for standard output.

    \b
    Examples:
      bas2txt game.bas game.txt
      bas2txt game.bas -
    """
    setup_logging(verbose)
    to_stdout = str(output_file) == "-"

    try:
        data = input_file.read_bytes()
        image = ProgramImage.from_bytes(data)
        text = BasicDecoder().render(image)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            if image.header is not None:
                header = image.header
                click.echo(
                    f"+3DOS header: {FileType.get_name(header.file_type)}, "
                    f"{header.program_length} bytes",
                    err=True,
                )
                if image.autostart is not None:
                    click.echo(f"Autostart line: {image.autostart}", err=True)
            else:
                click.echo("+3DOS header: none", err=True)
            click.echo(f"Lines: {len(image)}", err=True)

        if image.truncated:
            click.echo(
                f"Warning: {input_file} is truncated; "
                f"listed {len(image)} complete line(s)",
                err=True,
            )

        if to_stdout:
            click.echo(text, nl=False)
        else:
            output_file.write_text(text, encoding="utf-8")
            click.echo(f"Success! Decoded {input_file} to {output_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Listing")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
