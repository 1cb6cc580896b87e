# Licensed under the GPLv3 - see LICENSE
"""Byte-stream transports used to open files in a given encoding.

A transport opens a file as a binary filehandle, possibly decompressing
or compressing on the fly.  Only raw (uncompressed) files are supported
out of the box.  Other encodings, like 'gzip' and 'bzip2' (guessed from
'.gz' and '.bz2' suffixes), need a transport to be registered, either
with `register_transport` or via an entry point in the 'cifio.transports'
group (e.g., 'gzip = mypackage.transports:GzipTransport').

An encoding for which no transport is available raises
`~cifio.base.errors.UnsupportedTransportError` when opening, rather than
returning a handle that cannot be read from or written to.
"""
import io
import os

import entrypoints

from .errors import UnsupportedTransportError


__all__ = ['ENTRY_POINT_GROUP', 'SUFFIX_ENCODINGS', 'guess_encoding',
           'TransportBase', 'RawTransport',
           'register_transport', 'get_transport', 'open_stream']


ENTRY_POINT_GROUP = 'cifio.transports'
"""Entry point group searched for transports not registered explicitly."""

SUFFIX_ENCODINGS = {'gz': 'gzip',
                    'bz2': 'bzip2'}
"""Encodings implied by file name suffixes.  Any other suffix means raw."""

_transports = {}
"""Registered transports, keyed by encoding."""
_bad_entries = set()
"""Encodings whose entry points failed to load. These are not retried."""


def guess_encoding(name):
    """Guess the encoding of a file from its suffix.

    Parameters
    ----------
    name : str or path-like
        File name.

    Returns
    -------
    encoding : str
        'gzip' for '.gz', 'bzip2' for '.bz2', and 'raw' otherwise.
    """
    suffix = os.path.splitext(os.fspath(name))[1].lstrip('.')
    return SUFFIX_ENCODINGS.get(suffix, 'raw')


class TransportBase:
    """Base for transports that open files in a given encoding.

    Subclasses should set ``encoding`` and define an ``open`` classmethod
    that returns a binary filehandle supporting ``read``, ``write`` and
    ``close``.
    """
    encoding = None

    @classmethod
    def open(cls, name, mode='rb'):
        raise NotImplementedError(
            f"{cls.__name__} does not implement opening files.")


class RawTransport(TransportBase):
    """Transport for uncompressed files."""
    encoding = 'raw'

    @classmethod
    def open(cls, name, mode='rb'):
        return io.open(name, mode)


def register_transport(transport, encoding=None):
    """Make a transport available for an encoding.

    Parameters
    ----------
    transport : `TransportBase` subclass
        Class with an ``open(name, mode)`` method.
    encoding : str, optional
        Encoding to register for.  Default: ``transport.encoding``.
    """
    if encoding is None:
        encoding = transport.encoding
    if not encoding:
        raise ValueError("transport should define an encoding.")
    _transports[encoding] = transport
    _bad_entries.discard(encoding)
    return transport


def get_transport(encoding):
    """Get the transport for a given encoding.

    Looks first among registered transports and then among entry points.

    Raises
    ------
    UnsupportedTransportError
        If no transport exists for the encoding, or its entry point
        could not be loaded.
    """
    transport = _transports.get(encoding)
    if transport is not None:
        return transport

    if encoding not in _bad_entries:
        try:
            entry = entrypoints.get_single(ENTRY_POINT_GROUP, encoding)
        except entrypoints.NoSuchEntryPoint:
            pass
        else:
            try:
                transport = entry.load()
            except Exception as exc:
                _bad_entries.add(encoding)
                raise UnsupportedTransportError(
                    f"transport {entry} for '{encoding}' encoding was "
                    f"not loadable.") from exc

            return register_transport(transport, encoding)

    raise UnsupportedTransportError(
        f"no transport available for '{encoding}' encoding "
        f"(available: {sorted(_transports)}).")


def open_stream(name, mode='rb', encoding=None):
    """Open a file as a binary filehandle using the appropriate transport.

    Parameters
    ----------
    name : str or path-like
        File to open.
    mode : {'rb', 'wb'}, optional
        Whether to read or write.  A 'b' is added if missing.
    encoding : str, optional
        Encoding of the file, e.g., 'raw'.  Default: guessed from the name.
    """
    if 'b' not in mode:
        mode += 'b'
    if encoding is None:
        encoding = guess_encoding(name)
    return get_transport(encoding).open(name, mode)


register_transport(RawTransport)
