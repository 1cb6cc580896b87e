# Licensed under the GPLv3 - see LICENSE
"""
Base definitions for payloads of fixed-width integers.

`PayloadBase` keeps the samples exactly as stored: a flat little-endian
integer array whose width (1, 2 or 4 bytes, say) is chosen per payload,
and which is viewed with shape ``(nsample,) + sample_shape`` for access.
No scaling or rounding is done, in either direction.
"""
import operator
from functools import reduce

import numpy as np


__all__ = ['width_range', 'PayloadBase']


def width_range(sample_nbytes):
    """Smallest and largest value that fit in a signed integer of given width.

    Parameters
    ----------
    sample_nbytes : int
        Number of bytes per stored integer.

    Returns
    -------
    min, max : int
    """
    bits = 8 * operator.index(sample_nbytes)
    if bits <= 0:
        raise ValueError("sample width should be positive.")
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _check_integers(data, sample_nbytes):
    """Raise if data are not integers that fit in the given width."""
    if data.dtype.kind not in 'iu':
        raise TypeError("payload data should be integer, not {0}; "
                        "quantize before storing.".format(data.dtype))
    if data.size:
        low, high = width_range(sample_nbytes)
        if data.min() < low or data.max() > high:
            raise ValueError("data values do not fit in {0}-byte integers."
                             .format(sample_nbytes))


class PayloadBase:
    """Integer samples of a frame, stored without transcoding.

    Subclasses define ``_dtypes``, mapping each supported sample width in
    bytes to a numpy dtype, and can set ``_sample_shape_maker`` to a
    namedtuple class for ``sample_shape``.

    Parameters
    ----------
    words : `~numpy.ndarray`
        One-dimensional array with the dtype for the sample width.  It is
        used as is, not copied.
    header : header instance, optional
        If given, ``sample_shape`` and ``sample_nbytes`` are taken from it,
        and the size of ``words`` is checked against its ``payload_nbytes``.
    sample_shape : tuple, optional
        Shape of each sample.  Default: ().
    sample_nbytes : int, optional
        Bytes per stored integer.  Default: the item size of ``words``.
    nsample : int, optional
        Number of samples.  Only needed if samples hold no words (i.e.,
        a dimension of ``sample_shape`` is zero); otherwise it is inferred
        from the size of ``words``, and checked if given.
    """
    _dtypes = {}
    _sample_shape_maker = None

    def __init__(self, words, *, header=None, sample_shape=(),
                 sample_nbytes=None, nsample=None):
        if header is not None:
            sample_shape = header.sample_shape
            sample_nbytes = header.sample_nbytes
            if words.nbytes != header.payload_nbytes:
                raise ValueError("payload has {0} bytes but header "
                                 "requires {1}."
                                 .format(words.nbytes,
                                         header.payload_nbytes))
        if sample_nbytes is None:
            sample_nbytes = words.dtype.itemsize

        dtype = self._dtypes.get(sample_nbytes)
        if dtype is None:
            raise ValueError("{0} cannot hold samples of {1} bytes; "
                             "supported are {2}."
                             .format(self.__class__.__name__, sample_nbytes,
                                     sorted(self._dtypes)))
        if words.dtype != dtype:
            raise ValueError("words should have dtype {0}, not {1}."
                             .format(dtype, words.dtype))
        if words.ndim != 1:
            raise ValueError("words should be one-dimensional.")

        sample_size = reduce(operator.mul, sample_shape, 1)
        if sample_size and words.size % sample_size:
            raise ValueError("number of words {0} is not a multiple of the "
                             "sample size {1}."
                             .format(words.size, sample_size))
        if sample_size:
            if nsample is not None and nsample * sample_size != words.size:
                raise ValueError("{0} samples do not match {1} words."
                                 .format(nsample, words.size))
            nsample = words.size // sample_size
        elif words.size:
            raise ValueError("samples of shape {0} cannot hold any words."
                             .format(tuple(sample_shape)))
        elif nsample is None:
            nsample = 0

        self.words = words
        self.sample_nbytes = sample_nbytes
        self.sample_shape = (self._sample_shape_maker(*sample_shape)
                             if self._sample_shape_maker is not None
                             else tuple(sample_shape))
        self._sample_size = sample_size
        self._nsample = operator.index(nsample)

    @classmethod
    def fromfile(cls, fh, header=None, *, payload_nbytes=None,
                 sample_nbytes=None, **kwargs):
        """Read a payload from a filehandle.

        Parameters
        ----------
        fh : filehandle
            Positioned at the start of the payload.
        header : header instance, optional
            Gives ``payload_nbytes``, ``sample_nbytes`` and the sample
            shape.  Without it, the first two need to be passed in.
        payload_nbytes : int, optional
            Number of bytes to read.
        sample_nbytes : int, optional
            Bytes per stored integer.
        **kwargs
            Passed on to the initialiser (e.g., ``sample_shape``).

        Raises
        ------
        EOFError
            If fewer than ``payload_nbytes`` bytes could be read.
        """
        if header is not None:
            payload_nbytes = header.payload_nbytes
            sample_nbytes = header.sample_nbytes
            kwargs['header'] = header
        elif payload_nbytes is None or sample_nbytes is None:
            raise ValueError("need either a header, or both payload_nbytes "
                             "and sample_nbytes.")
        else:
            kwargs['sample_nbytes'] = sample_nbytes

        dtype = cls._dtypes[sample_nbytes]
        s = fh.read(payload_nbytes)
        if len(s) < payload_nbytes:
            raise EOFError("could only read {0} of {1} payload bytes."
                           .format(len(s), payload_nbytes))
        # frombuffer gives a read-only view of s; the payload owns a copy.
        words = np.frombuffer(s, dtype=dtype).copy()
        return cls(words, **kwargs)

    def tofile(self, fh):
        """Write the words to a filehandle.

        Raises
        ------
        OSError
            If the filehandle reports writing fewer bytes than given.
        """
        s = self.words.tobytes()
        nbytes = fh.write(s)
        if nbytes is not None and nbytes < len(s):
            raise OSError("could only write {0} of {1} payload bytes."
                          .format(nbytes, len(s)))
        return nbytes

    @classmethod
    def fromdata(cls, data, header=None, sample_nbytes=None, **kwargs):
        """Store integer data in a new payload.

        Parameters
        ----------
        data : array_like
            Integers, with shape ``(nsample,) + sample_shape``.  Values
            that do not fit in the sample width raise `ValueError`, and
            non-integer data raise `TypeError`.
        header : header instance, optional
            Gives the sample width, and should match the sample shape.
        sample_nbytes : int, optional
            Bytes per stored integer if no header is given.  Default: the
            item size of ``data``.
        **kwargs
            Passed on to the initialiser.
        """
        data = np.asanyarray(data)
        sample_shape = data.shape[1:]
        if header is not None:
            if tuple(header.sample_shape) != sample_shape:
                raise ValueError("header is for sample_shape={0} but data "
                                 "have {1}.".format(header.sample_shape,
                                                    sample_shape))
            sample_nbytes = header.sample_nbytes
            kwargs['header'] = header
        else:
            if sample_nbytes is None:
                sample_nbytes = data.dtype.itemsize
            kwargs.update(sample_nbytes=sample_nbytes,
                          sample_shape=sample_shape)

        dtype = cls._dtypes.get(sample_nbytes)
        if dtype is None:
            raise ValueError("{0} cannot store {1}-byte samples."
                             .format(cls.__name__, sample_nbytes))
        _check_integers(data, sample_nbytes)
        if data.ndim:
            kwargs.setdefault('nsample', len(data))
        words = np.array(data, dtype=dtype).reshape(-1)
        return cls(words, **kwargs)

    def copy(self):
        """Copy of the payload, with its own words."""
        new = self.__class__.__new__(self.__class__)
        new.__dict__.update(self.__dict__)
        new.words = self.words.copy()
        return new

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            dtype = self.dtype
        if copy or np.dtype(dtype) != self.dtype:
            return self.data.astype(dtype, copy=True)
        return self.data

    @property
    def nbytes(self):
        """Size of the stored words in bytes."""
        return self.words.nbytes

    def __len__(self):
        """Number of samples."""
        return self._nsample

    @property
    def shape(self):
        return (len(self),) + tuple(self.sample_shape)

    @property
    def size(self):
        return self.words.size

    @property
    def ndim(self):
        return 1 + len(self.sample_shape)

    @property
    def dtype(self):
        return self.words.dtype

    def __getitem__(self, item=()):
        return self.words.reshape(self.shape)[item]

    def __setitem__(self, item, data):
        data = np.asanyarray(data)
        _check_integers(data, self.sample_nbytes)
        self.words.reshape(self.shape)[item] = data

    data = property(__getitem__, doc="Samples, with shape ``shape``.")

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.shape == other.shape
                and self.dtype == other.dtype
                and np.array_equal(self.words, other.words))
