# Licensed under the GPLv3 - see LICENSE
"""
Definitions for CIF frames.

A CIF file holds a single frame: a header describing which cycles and how
many clusters are stored, followed by the intensities.
"""
import numpy as np

from ..base.frame import FrameBase
from .header import CIFHeader
from .payload import CIFPayload


__all__ = ['CIFFrame']


class CIFFrame(FrameBase):
    """Representation of a CIF file, consisting of a header and payload.

    Parameters
    ----------
    header : `~cifio.cif.CIFHeader`
        Wrapper around the header fields.
    payload : `~cifio.cif.CIFPayload`
        Wrapper around the intensities.  The frame becomes its owner.
    verify : bool, optional
        Whether to check the header and payload are consistent.
        Default: `True`.

    Notes
    -----
    The Frame can also be instantiated using class methods:

      fromfile : read header and payload from a filehandle

      fromdata : store an integer array as payload

    Of course, one can also do the opposite:

      tofile : method to write header and payload to filehandle

      data : property that yields the intensities, with shape
             (ncycle, nchannel, ncluster)

    The frame acts as a dictionary, with keys those of the header, and
    header properties such as ``ncycle`` or ``dtype`` are available on it.
    Indexing with anything but a string indexes the data.
    """
    _header_class = CIFHeader
    _payload_class = CIFPayload

    def verify(self):
        """Check that header and payload describe the same intensities."""
        super().verify()
        assert self.payload.dtype == self.header.dtype
        assert self.payload.ncluster == self.header['ncluster']
        assert self.payload.ncycle == self.header['ncycle']

    @classmethod
    def fromdata(cls, data, header=None, *, first_cycle=1,
                 sample_nbytes=None, verify=True):
        """Construct a frame from integer intensities.

        Parameters
        ----------
        data : `~numpy.ndarray`
            Integer intensities with shape (ncycle, nchannel, ncluster).
            The values are stored as is, so should be quantized already.
        header : `~cifio.cif.CIFHeader`, optional
            Header for the frame.  If not given, one is created using the
            shape of the data and the arguments below.
        first_cycle : int, optional
            1-based index of the first cycle in ``data``.  Default: 1.
        sample_nbytes : int, optional
            Bytes per intensity.  Default: the item size of ``data``.
        verify : bool, optional
            Whether to verify the result.  Default: `True`.
        """
        data = np.asanyarray(data)
        if header is None:
            if data.ndim != 3:
                raise ValueError("CIF data should have shape "
                                 "(ncycle, nchannel, ncluster), not {0}."
                                 .format(data.shape))
            if sample_nbytes is None:
                sample_nbytes = data.dtype.itemsize
            header = cls._header_class.fromvalues(
                sample_nbytes=sample_nbytes, first_cycle=first_cycle,
                ncycle=data.shape[0], sample_shape=data.shape[1:])
        return super().fromdata(data, header, verify=verify)

    def copy(self):
        """Create an independent copy of the frame."""
        return self.__class__(self.header.copy(), self.payload.copy())

    def splice(self, offset, count):
        """Extract a cycle range into a new, independent frame.

        See `~cifio.cif.splice.splice` for details.
        """
        from .splice import splice
        return splice(self, offset, count)
