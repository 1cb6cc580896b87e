# Licensed under the GPLv3 - see LICENSE
"""Aggregation of CIF files that hold different cycles of the same tile.

Instruments write intensities for each cycle (or range of cycles) to
separate CIF files.  The `CIFAggregator` combines those into a single frame
covering all cycles, placing the intensities of each file according to its
own ``first_cycle``, so that the order in which files are added does not
matter.

Aggregation is all or nothing: if any file cannot be read or is
inconsistent with those added before, the combined intensities are
discarded and the exception is raised, so no partially filled frame can
be obtained.
"""
import operator
import warnings

import numpy as np

from ..base.errors import BoundsError, ConsistencyError, OverlapError
from .header import CIFHeader
from .payload import CIFPayload
from .frame import CIFFrame
from .base import open as cif_open


__all__ = ['CIFAggregator', 'aggregate']


class CIFAggregator:
    """Combine CIF frames or files for one tile into a single frame.

    The first frame added sets the number of clusters and sample width of
    the result; all later ones must have the same.  The result always starts
    at cycle 1 and holds ``ncycle`` cycles, with intensities of cycles not
    covered by any input set to zero.

    Parameters
    ----------
    ncycle : int
        Total number of cycles of the combined frame.
    allow_overlap : bool, optional
        If `False` (default), adding a frame with cycles that were already
        filled raises `~cifio.base.errors.OverlapError`.  If `True`, the
        later frame overwrites the earlier intensities, and a warning is
        emitted.

    Examples
    --------
    Combine two files holding one cycle each, written in arbitrary order::

        >>> from cifio import cif
        >>> aggregator = cif.CIFAggregator(2)  # doctest: +SKIP
        >>> aggregator.add('C2.1/s_1_1101.cif')  # doctest: +SKIP
        >>> aggregator.add('C1.1/s_1_1101.cif')  # doctest: +SKIP
        >>> frame = aggregator.result()  # doctest: +SKIP
    """

    def __init__(self, ncycle, *, allow_overlap=False):
        ncycle = operator.index(ncycle)
        if ncycle <= 0:
            raise ValueError("total number of cycles should be positive.")
        self.ncycle = ncycle
        self.allow_overlap = allow_overlap
        self._header = None
        self._payload = None
        self._filled = np.zeros(ncycle, dtype=bool)
        self._status = 'open'

    @property
    def header(self):
        """Header of the combined frame (`None` before anything is added)."""
        return self._header

    @property
    def nfilled(self):
        """Number of cycles filled so far."""
        return int(self._filled.sum()) if self._filled is not None else 0

    @property
    def missing_cycles(self):
        """1-based indices of the cycles not yet filled."""
        if self._filled is None:
            return []
        return (np.flatnonzero(~self._filled) + 1).tolist()

    def _check_open(self):
        if self._status != 'open':
            raise ValueError("cannot use aggregator that is {0}."
                             .format(self._status))

    def _discard(self):
        """Drop the combined intensities, making the aggregator unusable."""
        self._header = None
        self._payload = None
        self._filled = None
        self._status = 'aborted'

    def _prepare(self, header):
        """Check a header against the combined frame and locate its cycles.

        On the first call, the combined header and zeroed payload are
        created from the header's version, sample width and number of
        clusters.

        Returns
        -------
        start, stop : int
            0-based cycle range in the combined frame.
        """
        if self._header is None:
            combined = CIFHeader.fromvalues(
                version=header['version'],
                sample_nbytes=header['sample_nbytes'],
                first_cycle=1, ncycle=self.ncycle,
                ncluster=header['ncluster'])
            self._payload = CIFPayload.zeros(combined)
            self._header = combined

        for key in ('version', 'sample_nbytes', 'ncluster'):
            if header[key] != self._header[key]:
                raise ConsistencyError(
                    "cannot combine frame with {0}={1} with earlier ones "
                    "with {0}={2}.".format(key, header[key],
                                           self._header[key]))

        start = header['first_cycle'] - 1
        stop = start + header['ncycle']
        if start < 0 or stop > self.ncycle:
            raise BoundsError(
                "frame with cycles {0}-{1} does not fit in the {2} cycles "
                "being combined.".format(header['first_cycle'],
                                         header.last_cycle, self.ncycle))

        overlap = np.flatnonzero(self._filled[start:stop]) + start + 1
        if overlap.size:
            if not self.allow_overlap:
                raise OverlapError("cycles {0} were already filled."
                                   .format(overlap.tolist()))
            warnings.warn("overwriting intensities of cycles {0}."
                          .format(overlap.tolist()))

        return start, stop

    def _insert(self, start, stop, payload):
        self._payload.words[self._payload.cycle_slice(start, stop)] = (
            payload.words)
        self._filled[start:stop] = True

    def add(self, source, *, encoding=None):
        """Add the intensities of a frame or file.

        Header consistency and placement are checked before the intensities
        of a file are read.

        Parameters
        ----------
        source : `~cifio.cif.CIFFrame`, filehandle, str or path-like
            Frame, or file holding one.
        encoding : str, optional
            Encoding of the file.  Default: guessed from the file name.

        Returns
        -------
        self : `CIFAggregator`
            Such that calls can be chained.

        Raises
        ------
        ConsistencyError
            If the version, sample width or number of clusters differs from
            those of the first frame added.
        OverlapError
            If cycles were already filled and ``allow_overlap`` is `False`.
        BoundsError
            If the cycles of the frame lie outside those being combined.
        FormatError, EOFError, OSError
            If a file cannot be opened or read.

        Any exception aborts the aggregation: the combined intensities are
        discarded and the aggregator cannot be used further.
        """
        self._check_open()
        try:
            if isinstance(source, CIFFrame):
                start, stop = self._prepare(source.header)
                self._insert(start, stop, source.payload)
            else:
                fh = cif_open(source, 'rb', encoding=encoding)
                try:
                    header = fh.read_header()
                    start, stop = self._prepare(header)
                    payload = CIFPayload.fromfile(fh.fh_raw, header)
                finally:
                    if fh.fh_raw is not source:
                        fh.close()
                self._insert(start, stop, payload)
        except BaseException:
            self._discard()
            raise

        return self

    def result(self, *, complete=False):
        """Hand over the combined frame.

        The aggregator gives up its intensities to the frame, and cannot be
        used afterwards.

        Parameters
        ----------
        complete : bool, optional
            If `True`, raise `~cifio.base.errors.ConsistencyError` if not
            all cycles were filled.  Default: `False`, i.e., cycles that were
            not filled are left zero.

        Returns
        -------
        frame : `~cifio.cif.CIFFrame`
            With ``first_cycle=1`` and ``ncycle`` as given on initialisation.
        """
        self._check_open()
        if self._header is None:
            raise ValueError("no frames were added.")
        missing = self.missing_cycles
        if complete and missing:
            self._discard()
            raise ConsistencyError("cycles {0} were not filled."
                                   .format(missing))

        frame = CIFFrame(self._header, self._payload)
        self._header = None
        self._payload = None
        self._status = 'finished'
        return frame


def aggregate(sources, ncycle, *, allow_overlap=False, complete=False,
              encoding=None):
    """Combine CIF frames or files for one tile into a single frame.

    Parameters
    ----------
    sources : iterable
        Frames, filehandles or file names, in any order.
    ncycle : int
        Total number of cycles of the combined frame.
    allow_overlap : bool, optional
        Whether later sources may overwrite cycles of earlier ones.
        Default: `False`.
    complete : bool, optional
        Whether all cycles need to be covered.  Default: `False`.
    encoding : str, optional
        Encoding of the files.  Default: guessed from their names.

    Returns
    -------
    frame : `~cifio.cif.CIFFrame`

    Notes
    -----
    See `CIFAggregator` for the exceptions that can be raised.  If any is,
    no combined frame is returned.
    """
    aggregator = CIFAggregator(ncycle, allow_overlap=allow_overlap)
    for source in sources:
        aggregator.add(source, encoding=encoding)
    return aggregator.result(complete=complete)
