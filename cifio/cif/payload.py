# Licensed under the GPLv3 - see LICENSE
"""
Definitions for CIF intensity payloads.

Implements a CIFPayload class used to store the intensities of a CIF file
as a flat array of signed integers, and to access them as an array with
shape (ncycle, nchannel, ncluster).
"""
import numpy as np

from ..base.payload import PayloadBase
from .header import CIFSampleShape, CIF_NCHANNEL


__all__ = ['CIFPayload']


class CIFPayload(PayloadBase):
    """Container for CIF intensities.

    The intensities are stored as little-endian signed integers of 1, 2 or 4
    bytes, with the cluster varying fastest, then the channel, then the
    cycle.  Hence, element ``(cycle, channel, cluster)`` is found at index
    ``(cycle * nchannel + channel) * ncluster + cluster`` of ``words``,
    and ``payload[cycle, channel, cluster]`` gives the same value.

    Parameters
    ----------
    words : `~numpy.ndarray`
        One-dimensional array of integers with type '<i1', '<i2' or '<i4'.
        The payload does not copy the array, and should be its sole owner.
    header : `~cifio.cif.CIFHeader`, optional
        If given, used to infer ``sample_shape``, ``sample_nbytes`` and the
        number of cycles.
    sample_shape : tuple, optional
        Shape of a single cycle, (nchannel, ncluster).
    sample_nbytes : int, optional
        Bytes per intensity.  Default: inferred from the type of ``words``.
    nsample : int, optional
        Number of cycles.  Only needed if there are no clusters and no
        header is given.
    """
    _dtypes = {1: np.dtype('<i1'),
               2: np.dtype('<i2'),
               4: np.dtype('<i4')}
    _sample_shape_maker = CIFSampleShape

    def __init__(self, words, *, header=None, sample_shape=None,
                 sample_nbytes=None, nsample=None):
        if header is not None:
            # Needed when there are no clusters, and hence no words.
            if nsample is not None and nsample != header['ncycle']:
                raise ValueError("header is for {0} cycles, not {1}."
                                 .format(header['ncycle'], nsample))
            nsample = header['ncycle']
        if sample_shape is None:
            sample_shape = (CIF_NCHANNEL, words.size // CIF_NCHANNEL)
        super().__init__(words, header=header, sample_shape=sample_shape,
                         sample_nbytes=sample_nbytes, nsample=nsample)
        if self.sample_shape.nchannel != CIF_NCHANNEL:
            raise ValueError("CIF payloads should have {0} channels."
                             .format(CIF_NCHANNEL))

    @classmethod
    def zeros(cls, header):
        """Create a payload with all intensities zero, sized by the header."""
        words = np.zeros(header.payload_nbytes // header.sample_nbytes,
                         dtype=cls._dtypes[header.sample_nbytes])
        return cls(words, header=header)

    @property
    def ncycle(self):
        """Number of cycles in the payload."""
        return len(self)

    @property
    def ncluster(self):
        """Number of clusters in the payload."""
        return self.sample_shape.ncluster

    def cycle_slice(self, start, stop):
        """Slice into ``words`` covering cycles ``start`` up to ``stop``.

        Parameters
        ----------
        start, stop : int
            0-based cycle indices.
        """
        cycle_size = CIF_NCHANNEL * self.ncluster
        return slice(start * cycle_size, stop * cycle_size)
