# Licensed under the GPLv3 - see LICENSE
"""
Definitions for CIF intensity file headers.

Implements a CIFHeader class that reads & writes the 13-byte header that
starts every CIF file, and provides access to the values via a dict-like
interface.  The header is laid out as follows (all little-endian)::

    bytes 0-2   : "CIF"          magic
    byte  3     : version        u8, always 1
    byte  4     : sample_nbytes  u8, bytes per stored integer: 1, 2 or 4
    bytes 5-6   : first_cycle    u16, 1-based cycle of first stored cycle
    bytes 7-8   : ncycle         u16, number of cycles stored
    bytes 9-12  : ncluster       u32, number of clusters stored

It is followed by ``ncycle * 4 * ncluster`` signed integers, ordered with
cluster varying fastest, then channel, then cycle.
"""
import struct
from collections import namedtuple

import numpy as np

from ..base.header import HeaderParser, StructHeaderBase
from ..base.errors import FormatError


__all__ = ['CIF_MAGIC', 'CIF_VERSION', 'CIF_NCHANNEL', 'CIF_SAMPLE_NBYTES',
           'CIFHeader']


CIF_MAGIC = b'CIF'
"""Magic bytes at the start of each CIF file."""
CIF_VERSION = 1
"""The only CIF version defined."""
CIF_NCHANNEL = 4
"""Number of fluorescence channels, one per base (A, C, G, T)."""
CIF_SAMPLE_NBYTES = (1, 2, 4)
"""Allowed number of bytes per stored intensity."""

CIFSampleShape = namedtuple('CIFSampleShape', 'nchannel, ncluster')


class CIFHeader(StructHeaderBase):
    """CIF intensity file header.

    Parameters
    ----------
    words : tuple or list, or None
        Header fields, in the order magic, version, sample_nbytes,
        first_cycle, ncycle, ncluster.  If a tuple, the header is immutable.
        If `None`, set to defaults for later initialisation.
    verify : bool, optional
        Whether to check the magic, version and sample width.
        Default: `True`.

    Returns
    -------
    header : `CIFHeader`

    Examples
    --------
    >>> from cifio import cif
    >>> header = cif.CIFHeader.fromvalues(ncycle=2, ncluster=3)
    >>> header.payload_nbytes
    48
    >>> header.dtype
    dtype('int16')
    """

    _struct = struct.Struct('<3sBBHHI')

    _header_parser = HeaderParser(
        (('magic', (0, '3s', CIF_MAGIC)),
         ('version', (1, 'B', CIF_VERSION)),
         ('sample_nbytes', (2, 'B', 2)),
         ('first_cycle', (3, 'H', 1)),
         ('ncycle', (4, 'H', 0)),
         ('ncluster', (5, 'I', 0))))

    _properties = ('dtype', 'sample_shape', 'nchannel', 'last_cycle',
                   'payload_nbytes', 'frame_nbytes')
    """Properties accessible/usable in initialisation."""

    _dtypes = {1: np.dtype('<i1'),
               2: np.dtype('<i2'),
               4: np.dtype('<i4')}

    def verify(self):
        """Check the header has the CIF magic, version and a valid width.

        Raises
        ------
        FormatError
            If any of those are not as required.
        """
        super().verify()
        if self['magic'] != CIF_MAGIC:
            raise FormatError("not a CIF header: magic is {0!r} instead of "
                              "{1!r}.".format(self['magic'], CIF_MAGIC))
        if self['version'] != CIF_VERSION:
            raise FormatError("unsupported CIF version {0}; only {1} is "
                              "supported.".format(self['version'],
                                                  CIF_VERSION))
        if self['sample_nbytes'] not in CIF_SAMPLE_NBYTES:
            raise FormatError("unsupported CIF sample width of {0} bytes; "
                              "should be one of {1}."
                              .format(self['sample_nbytes'],
                                      CIF_SAMPLE_NBYTES))

    @classmethod
    def fromfile(cls, fh, verify=True):
        """Read CIF header from a filehandle.

        Parameters
        ----------
        fh : filehandle
            To read the header from.  Should be positioned at the start.
        verify : bool, optional
            Whether to check magic, version and sample width.

        Raises
        ------
        FormatError
            If the magic is missing or wrong, or verification fails.
        EOFError
            If the magic is fine but the rest of the header is incomplete.
        """
        s = fh.read(cls._struct.size)
        if s[:len(CIF_MAGIC)] != CIF_MAGIC:
            raise FormatError("not a CIF file: starts with {0!r} instead of "
                              "{1!r}.".format(s[:len(CIF_MAGIC)], CIF_MAGIC))
        if len(s) != cls._struct.size:
            raise EOFError("could not read full CIF header.")
        return cls(cls._struct.unpack(s), verify=verify)

    def tofile(self, fh):
        """Write CIF header to filehandle.

        The header should be valid; this is only checked with assertions.
        """
        assert self['magic'] == CIF_MAGIC
        assert self['version'] == CIF_VERSION
        assert self['sample_nbytes'] in CIF_SAMPLE_NBYTES
        nbytes = super().tofile(fh)
        if nbytes is not None and nbytes < self.nbytes:
            raise OSError("could only write {0} of {1} header bytes."
                          .format(nbytes, self.nbytes))
        return nbytes

    @property
    def nchannel(self):
        """Number of channels, always 4."""
        return CIF_NCHANNEL

    @property
    def sample_nbytes(self):
        """Number of bytes per stored intensity."""
        return self['sample_nbytes']

    @property
    def dtype(self):
        """Numpy type of the stored intensities."""
        return self._dtypes[self['sample_nbytes']]

    @dtype.setter
    def dtype(self, dtype):
        dtype = np.dtype(dtype)
        if dtype.kind != 'i':
            raise ValueError("CIF intensities are signed integers, "
                             "not {0}.".format(dtype))
        self['sample_nbytes'] = dtype.itemsize

    @property
    def sample_shape(self):
        """Shape of one cycle of data, i.e., (nchannel, ncluster)."""
        return CIFSampleShape(CIF_NCHANNEL, self['ncluster'])

    @sample_shape.setter
    def sample_shape(self, sample_shape):
        nchannel, ncluster = sample_shape
        if nchannel != CIF_NCHANNEL:
            raise ValueError("CIF files always have {0} channels."
                             .format(CIF_NCHANNEL))
        self['ncluster'] = ncluster

    @property
    def last_cycle(self):
        """1-based index of the last cycle stored."""
        return self['first_cycle'] + self['ncycle'] - 1

    @property
    def payload_nbytes(self):
        """Size of the intensities following the header in bytes."""
        return (self['ncycle'] * CIF_NCHANNEL * self['ncluster']
                * self['sample_nbytes'])

    @property
    def frame_nbytes(self):
        """Size of the header plus intensities in bytes."""
        return self.nbytes + self.payload_nbytes

    def _repr_value(self, key, value):
        if key == 'magic':
            return repr(value)
        return super()._repr_value(key, value)
