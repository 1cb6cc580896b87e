# Licensed under the GPLv3 - see LICENSE
"""Extraction of cycle ranges from CIF frames."""
import operator

from ..base.errors import CycleRangeError
from .frame import CIFFrame


__all__ = ['splice']


def splice(frame, offset, count):
    """Extract a contiguous range of cycles into a new frame.

    Parameters
    ----------
    frame : `~cifio.cif.CIFFrame`
        Frame to extract the cycles from.
    offset : int
        0-based index of the first cycle to extract, counted from the first
        cycle stored in ``frame``.
    count : int
        Number of cycles to extract.

    Returns
    -------
    frame : `~cifio.cif.CIFFrame`
        With ``first_cycle=1`` and ``ncycle=count``, and the same number of
        clusters and sample width as the input.  The intensities are copied,
        so the new frame does not share memory with the input.

    Raises
    ------
    CycleRangeError
        If ``count`` is not positive, or the range is not fully contained in
        the cycles of ``frame``.  Nothing is allocated in that case.

    Examples
    --------
    Take the second and third of four cycles::

        >>> import numpy as np
        >>> from cifio import cif
        >>> data = np.arange(4 * 4 * 3, dtype='i2').reshape(4, 4, 3)
        >>> frame = cif.CIFFrame.fromdata(data)
        >>> middle = cif.splice(frame, 1, 2)
        >>> middle['first_cycle'], middle['ncycle']
        (1, 2)
        >>> np.array_equal(middle.data, data[1:3])
        True
    """
    offset = operator.index(offset)
    count = operator.index(count)
    ncycle = frame.header['ncycle']
    if count <= 0:
        raise CycleRangeError("number of cycles to extract should be "
                              "positive, not {0}.".format(count))
    if offset < 0 or offset + count > ncycle:
        raise CycleRangeError("cycles {0} up to {1} are outside the {2} "
                              "cycles available."
                              .format(offset, offset + count, ncycle))

    header = frame.header.copy()
    header.update(first_cycle=1, ncycle=count)
    payload = frame.payload
    words = payload.words[payload.cycle_slice(offset, offset + count)].copy()
    return CIFFrame(header, payload.__class__(words, header=header))
