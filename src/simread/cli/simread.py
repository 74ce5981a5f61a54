"""
simread - Simple Code Image Inspector Command-Line Interface
============================================================

This module implements the command-line interface for reading IAR
Simple Code (.sim) firmware images. It prints the file size, the header,
every record in stream order, and the recalculated checksum next to the
one stored in the end record.

Records are printed as they are decoded, so when an image is corrupt
everything up to the failing record is still shown before the error.

Usage Examples
--------------
Display an image:
    $ simread firmware.sim

Hide the program bytes of data records:
    $ simread firmware.sim -h

Fail when the stored checksum is wrong:
    $ simread firmware.sim --strict

Accept images up to 4MB:
    $ simread big.sim --max-size 4000000
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from simread import __version__
from simread.cli.errors import ExitCode, handle_cli_exception
from simread.config import SimreadConfig
from simread.sim import (
    HEADER_SIZE,
    EndRecord,
    RenderOptions,
    decode_header,
    format_checksum,
    format_file_size,
    format_header,
    format_record,
    iter_records,
    read_image_file,
    verify_checksum,
)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def echo_lines(lines: list[str]) -> None:
    """Print a block of lines preceded by a blank line."""
    click.echo()
    for line in lines:
        click.echo(line)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-h", "--hide-program-bytes",
    is_flag=True,
    help="Hide the program bytes of data records",
)
@click.option(
    "--max-size",
    type=click.IntRange(min=1),
    default=None,
    help="Reject files of this many bytes or more (default: 1000000)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 4 when the stored checksum does not match",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="simread")
def main(
    input_file: Path,
    hide_program_bytes: bool,
    max_size: Optional[int],
    strict: bool,
    verbose: bool,
) -> None:
    """
    Display an IAR Simple Code image in human-readable form.

    INPUT_FILE is the .sim file to read.

    \b
    Examples:
      simread firmware.sim
      simread firmware.sim -h
      simread firmware.sim --strict
    """
    setup_logging(verbose)

    config = SimreadConfig.from_env()
    if hide_program_bytes:
        config.hide_program_bytes = True
    if max_size is not None:
        config.max_file_size = max_size
    options = RenderOptions.from_config(config)

    try:
        data = read_image_file(input_file, config.max_file_size)
        echo_lines(format_file_size(len(data)))

        header = decode_header(data)
        echo_lines(format_header(header))

        end_record = None
        reader = iter_records(memoryview(data)[HEADER_SIZE:], base_offset=HEADER_SIZE)
        for record in reader:
            echo_lines(format_record(record, options))
            if isinstance(record, EndRecord):
                end_record = record

        result = verify_checksum(data, end_record.checksum if end_record else None)
        echo_lines(format_checksum(result))

    except Exception as e:
        handle_cli_exception(e, verbose)

    if verbose:
        click.echo(f"Records decoded: {reader.records_read}", err=True)

    if strict and not result.is_valid:
        click.echo(f"Error: {result.message}", err=True)
        sys.exit(ExitCode.CHECKSUM_MISMATCH)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
