# Licensed under the GPLv3 - see LICENSE
"""Wrappers that give binary files methods to read and write frames.

Each format defines a reader and a writer, subclasses of `FileBase` that
add ``read_frame`` or ``write_frame`` methods.  Its ``open`` function is
made with `FileOpener.create`, which picks the wrapper for the mode and
opens file names with the transport suitable for their encoding.
"""
import functools
import textwrap
from contextlib import contextmanager

from .transport import open_stream


__all__ = ['FileBase', 'FileOpener']


class FileBase:
    """Wrapper around a binary filehandle.

    Attributes not defined on the wrapper, like ``read`` or ``seek``, are
    taken from the underlying filehandle, ``fh_raw``.

    Parameters
    ----------
    fh_raw : filehandle
        Binary file to wrap.
    """
    fh_raw = None

    def __init__(self, fh_raw):
        self.fh_raw = fh_raw

    def __getattr__(self, attr):
        if not attr.startswith('_') and self.fh_raw is not None:
            try:
                return getattr(self.fh_raw, attr)
            except AttributeError:
                pass
        raise AttributeError("{0!r} object has no attribute {1!r}"
                             .format(self.__class__.__name__, attr))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.fh_raw.close()

    @contextmanager
    def temporary_offset(self, offset=None, whence=0):
        """Seek to ``offset`` for the duration of a ``with`` block.

        The file position is restored afterwards, also if an exception
        occurred.  Without ``offset``, the position is only restored.
        """
        position = self.tell()
        try:
            if offset is not None:
                self.seek(offset, whence)
            yield self
        finally:
            self.seek(position)

    def __repr__(self):
        return "{0}(fh_raw={1})".format(self.__class__.__name__, self.fh_raw)


class FileOpener:
    """Opener of files in a given format.

    Instances are called like a function; see `__call__`.  Usually,
    `create` is used to turn one into an ``open`` function for a format
    module.

    Parameters
    ----------
    fmt : str
        Name of the format.
    classes : dict
        Reader and writer classes, under modes 'rb' and 'wb'.
    """

    def __init__(self, fmt, classes):
        self.fmt = fmt
        self.classes = classes

    def normalize_mode(self, mode):
        """Turn, e.g., 'r', 'rb' or 'br' into 'rb'."""
        for candidate in (mode, mode[::-1], mode + 'b'):
            if candidate in self.classes:
                return candidate

        raise ValueError("invalid mode: {0} ({1} supports {2})."
                         .format(mode, self.fmt, sorted(self.classes)))

    def is_fh(self, name):
        return hasattr(name, 'read') or hasattr(name, 'write')

    def get_fh(self, name, mode, encoding=None):
        """Return name if it is a filehandle, otherwise open it.

        Names are opened with the transport for ``encoding``, guessed from
        the name if not given.
        """
        if self.is_fh(name):
            return name

        return open_stream(name, mode, encoding=encoding)

    def __call__(self, name, mode='rb', *, encoding=None, **kwargs):
        """
        Open file for reading or writing.

        Parameters
        ----------
        name : str, path-like or filehandle
            File name or binary filehandle.
        mode : {'rb', 'wb'}, optional
            Whether to read or write.  Default: 'rb'.
        encoding : str, optional
            Encoding of the file, used to select the transport (see
            `~cifio.base.transport`).  Default: guessed from the file
            name.  Ignored for filehandles.
        **kwargs
            Further arguments for the reader or writer class.
        """
        mode = self.normalize_mode(mode)
        fh = self.get_fh(name, mode, encoding)
        try:
            return self.classes[mode](fh, **kwargs)
        except Exception:
            if fh is not name:
                fh.close()
            raise

    def wrapped(self, module=None, doc=None):
        """Function calling this opener, with given module and docstring."""

        @functools.wraps(self.__call__)
        def open(*args, **kwargs):
            return self(*args, **kwargs)

        if doc:
            open.__doc__ = doc
        if module:
            open.__module__ = module
        return open

    @classmethod
    def create(cls, ns, doc=None):
        """Create the ``open`` function for a format module.

        The namespace should contain ``<fmt>FileReader`` and
        ``<fmt>FileWriter`` classes, from which the format name is taken.

        Parameters
        ----------
        ns : dict
            Namespace of the module, i.e., ``globals()`` at the call site.
        doc : str, optional
            Appended to the docstring of `__call__` to give that of the
            returned function.
        """
        readers = [key for key in ns
                   if key.endswith('FileReader') and key != 'FileReader']
        if not readers:
            raise ValueError("namespace has no <fmt>FileReader class, "
                             "so the format cannot be determined.")

        fmt = readers[0][:-len('FileReader')]
        opener = cls(fmt, {'rb': ns[fmt + 'FileReader'],
                           'wb': ns[fmt + 'FileWriter']})
        if doc is not None:
            doc = (textwrap.dedent(cls.__call__.__doc__)
                   .replace('Open file', f'Open {fmt} file') + doc)
        return opener.wrapped(module=ns.get('__name__'), doc=doc)
