# Licensed under the GPLv3 - see LICENSE
"""
Base definitions for frames.

A frame couples a header, which describes the layout of the data, to the
payload that holds them.  `FrameBase` takes care of reading and writing
the two together, and lets the pair be used both as a dict of header
values and as an array of data.
"""
import numpy as np


__all__ = ['FrameBase']


class FrameBase:
    """Header and payload read or written together.

    Parameters
    ----------
    header : `~cifio.base.header.StructHeaderBase`
        Header describing the payload.
    payload : `~cifio.base.payload.PayloadBase`
        Payload holding the data.
    verify : bool, optional
        Whether to check that header and payload are consistent.
        Default: `True`.

    Notes
    -----
    Subclasses set ``_header_class`` and ``_payload_class``.

    Indexing with a string gets or sets a header value; any other index
    gets or sets data.  Attributes not defined on the frame are looked up
    among the header properties listed in its ``_properties``.
    """

    _header_class = None
    _payload_class = None

    def __init__(self, header, payload, verify=True):
        self.header = header
        self.payload = payload
        if verify:
            self.verify()

    def verify(self):
        """Check header and payload types and the payload size."""
        assert isinstance(self.header, self._header_class)
        assert isinstance(self.payload, self._payload_class)
        assert self.payload.nbytes == self.header.payload_nbytes

    @classmethod
    def fromfile(cls, fh, *args, **kwargs):
        """Read header and then payload from a filehandle.

        Arguments other than ``verify`` are passed on to the payload reader.
        Since the header is read and checked first, no payload is read
        for an invalid header.
        """
        verify = kwargs.pop('verify', True)
        header = cls._header_class.fromfile(fh, verify=verify)
        payload = cls._payload_class.fromfile(fh, header, *args, **kwargs)
        return cls(header, payload, verify=verify)

    def tofile(self, fh):
        """Write header and then payload to a filehandle."""
        self.header.tofile(fh)
        self.payload.tofile(fh)

    @classmethod
    def fromdata(cls, data, header, *args, **kwargs):
        """Create a frame by storing data in a payload described by header.

        Arguments other than ``verify`` are passed on to the payload's
        ``fromdata``.
        """
        verify = kwargs.pop('verify', True)
        payload = cls._payload_class.fromdata(data, header, *args, **kwargs)
        return cls(header, payload, verify=verify)

    @property
    def sample_shape(self):
        return self.payload.sample_shape

    def __len__(self):
        return len(self.payload)

    @property
    def shape(self):
        """Shape of the data."""
        return self.payload.shape

    @property
    def dtype(self):
        return self.payload.dtype

    @property
    def nbytes(self):
        """Size of header plus payload in bytes."""
        return self.header.nbytes + self.payload.nbytes

    def __array__(self, dtype=None, copy=None):
        return self.payload.__array__(dtype, copy=copy)

    def __getitem__(self, item=()):
        if isinstance(item, str):
            return self.header[item]
        return self.payload[item]

    data = property(__getitem__, doc="All data in the frame.")

    def __setitem__(self, item, value):
        if isinstance(item, str):
            self.header[item] = value
        else:
            self.payload[item] = value

    def keys(self):
        return self.header.keys()

    def __contains__(self, key):
        return key in self.header

    def __getattr__(self, attr):
        # Only called for attributes not found normally.
        header = self.__dict__.get('header')
        if header is not None and attr in header._properties:
            return getattr(header, attr)
        raise AttributeError("{0!r} object has no attribute {1!r}"
                             .format(self.__class__.__name__, attr))

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.header == other.header
                and self.payload == other.payload)

    def __repr__(self):
        return "<{0} shape={1} dtype={2}>\n{3}".format(
            self.__class__.__name__, self.shape, np.dtype(self.dtype),
            self.header)
