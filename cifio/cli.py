# Licensed under the GPLv3 - see LICENSE
"""Command-line access to CIF files.

Provides the ``cifio`` command, with sub-commands to show, combine and
split CIF files.
"""
import functools

import click

from .base.errors import CIFError
from . import cif


def report_errors(func):
    """Turn CIF and I/O errors into clean command-line failures."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CIFError, ValueError, OSError, EOFError) as exc:
            raise click.ClickException(str(exc) or exc.__class__.__name__)
    return wrapper


encoding_option = click.option(
    "--encoding", default=None,
    help="Encoding of the files (default: guessed from the suffix).")


@click.group()
@click.version_option(package_name="cifio")
def main():
    """Read, write, combine and split CIF intensity files."""


@main.command()
@click.argument("filename", type=click.Path(exists=True, dir_okay=False))
@encoding_option
@report_errors
def header(filename, encoding):
    """Show the header of FILENAME."""
    with cif.open(filename, 'rb', encoding=encoding) as fh:
        header = fh.header0
    for key in header.keys():
        click.echo(f"{key} = {header[key]!r}")


@main.command()
@click.argument("filename", type=click.Path(exists=True, dir_okay=False))
@click.option("--clusters", default=0, show_default=True,
              type=click.IntRange(min=0),
              help="Maximum number of clusters to show (0 for all).")
@click.option("--cycles", default=0, show_default=True,
              type=click.IntRange(min=0),
              help="Maximum number of cycles to show (0 for all).")
@encoding_option
@report_errors
def dump(filename, clusters, cycles, encoding):
    """Show the intensities in FILENAME as a table."""
    frame = cif.read(filename, encoding=encoding)
    cif.dump(frame, click.get_text_stream('stdout'),
             max_clusters=clusters, max_cycles=cycles)


@main.command()
@click.argument("filenames", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False))
@click.option("-n", "--ncycle", required=True, type=int,
              help="Total number of cycles of the combined file.")
@click.option("-o", "--output", required=True,
              type=click.Path(dir_okay=False, writable=True),
              help="File to write the combined intensities to.")
@click.option("--allow-overlap", is_flag=True,
              help="Let later files overwrite cycles of earlier ones.")
@click.option("--complete", is_flag=True,
              help="Fail unless every cycle is covered.")
@encoding_option
@report_errors
def aggregate(filenames, ncycle, output, allow_overlap, complete, encoding):
    """Combine CIF files for different cycles of a tile into one."""
    frame = cif.aggregate(filenames, ncycle, allow_overlap=allow_overlap,
                          complete=complete, encoding=encoding)
    cif.write(output, frame)


@main.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.option("-l", "--lane", required=True, type=int)
@click.option("-t", "--tile", required=True, type=int)
@click.option("-n", "--ncycle", type=int, default=None,
              help="Total number of cycles (default: the last one found).")
@click.option("-o", "--output", required=True,
              type=click.Path(dir_okay=False, writable=True))
@report_errors
def gather(root, lane, tile, ncycle, output):
    """Combine the per-cycle CIF files of a tile found in run ROOT."""
    filenames = cif.cycle_files(root, lane, tile)
    if not filenames:
        raise click.ClickException(
            f"no files match {cif.cif_glob(root, lane, tile)}")
    if ncycle is None:
        with cif.open(filenames[-1], 'rb') as fh:
            ncycle = fh.header0.last_cycle
    frame = cif.aggregate(filenames, ncycle)
    cif.write(output, frame)


@main.command()
@click.argument("filename", type=click.Path(exists=True, dir_okay=False))
@click.option("--offset", required=True, type=int,
              help="0-based index of the first cycle to keep.")
@click.option("--count", required=True, type=int,
              help="Number of cycles to keep.")
@click.option("-o", "--output", required=True,
              type=click.Path(dir_okay=False, writable=True))
@encoding_option
@report_errors
def splice(filename, offset, count, output, encoding):
    """Extract a range of cycles from FILENAME into a new file."""
    frame = cif.read(filename, encoding=encoding)
    cif.write(output, cif.splice(frame, offset, count))


if __name__ == "__main__":
    main()
