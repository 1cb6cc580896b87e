# Licensed under the GPLv3 - see LICENSE
"""Locating the per-cycle CIF files of a sequencing run.

Runs store intensities per lane, cycle and tile, as
``<run>/Data/Intensities/L00<lane>/C<cycle>.1/s_<lane>_<tile>.cif``.
"""
import glob
import os
import re


__all__ = ['cif_glob', 'get_cycle', 'cycle_files']


_CYCLE_DIR = re.compile(r'^C(\d+)\.1$')


def cif_glob(root, lane, tile):
    """Glob pattern matching the CIF files of one tile for all cycles.

    Parameters
    ----------
    root : str or path-like
        Run directory.
    lane : int
        Lane number; should be less than 10.
    tile : int
        Tile number; should be less than 10000.

    Returns
    -------
    pattern : str

    Examples
    --------
    >>> cif_glob('run', 1, 1101)
    'run/Data/Intensities/L001/C*.1/s_1_1101.cif'
    """
    if not 0 <= lane <= 9:
        raise ValueError("lane numbers should be less than 10, "
                         "not {}.".format(lane))
    if not 0 <= tile <= 9999:
        raise ValueError("tile numbers should be less than 10000, "
                         "not {}.".format(tile))
    return '{}/Data/Intensities/L00{}/C*.1/s_{}_{}.cif'.format(
        os.fspath(root), lane, lane, tile)


def get_cycle(path):
    """Cycle number of a CIF file, from its 'C<cycle>.1' directory."""
    dirname = os.path.basename(os.path.dirname(os.fspath(path)))
    match = _CYCLE_DIR.match(dirname)
    if match is None:
        raise ValueError("cannot infer cycle from directory '{}'."
                         .format(dirname))
    return int(match.group(1))


def cycle_files(root, lane, tile):
    """List the CIF files of one tile, ordered by cycle.

    Parameters
    ----------
    root : str or path-like
        Run directory.
    lane : int
        Lane number.
    tile : int
        Tile number.

    Returns
    -------
    files : list of str
    """
    return sorted(glob.glob(cif_glob(root, lane, tile)), key=get_cycle)
