# Licensed under the GPLv3 - see LICENSE
from astropy.utils import lazyproperty

from ..base.base import FileBase, FileOpener
from .header import CIFHeader
from .frame import CIFFrame


__all__ = ['CIFFileReader', 'CIFFileWriter', 'open', 'read', 'write']


class CIFFileReader(FileBase):
    """Simple reader for CIF files.

    Wraps a binary filehandle, providing methods to help interpret the data,
    such as `read_header` and `read_frame`.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    """

    def read_header(self):
        """Read the CIF header from the file.

        Returns
        -------
        header : `~cifio.cif.CIFHeader`

        Raises
        ------
        FormatError
            If the file does not start with a valid CIF header.
        """
        return CIFHeader.fromfile(self.fh_raw)

    @lazyproperty
    def header0(self):
        """Header at the start of the file.

        Read without changing the file position, so the file needs to be
        seekable.
        """
        with self.temporary_offset(0):
            return self.read_header()

    def read_frame(self, verify=True):
        """Read the header and the intensities following it.

        The header is checked before any memory is allocated for the
        intensities.

        Parameters
        ----------
        verify : bool, optional
            Whether to do basic checks of frame integrity.  Default: `True`.

        Returns
        -------
        frame : `~cifio.cif.CIFFrame`
            With ``.header`` and ``.payload`` properties.  The ``.data``
            property returns the intensities as an array with shape
            (ncycle, nchannel, ncluster).

        Raises
        ------
        FormatError
            If the header is not valid.
        EOFError
            If the file ends before all intensities are read.
        """
        return CIFFrame.fromfile(self.fh_raw, verify=verify)


class CIFFileWriter(FileBase):
    """Simple writer for CIF files.

    Adds `write_frame` method to a binary filehandle.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    """

    def write_frame(self, data, header=None, **kwargs):
        """Write a single frame (header plus intensities).

        Parameters
        ----------
        data : `~numpy.ndarray` or `~cifio.cif.CIFFrame`
            If an array, ``header`` or keywords should be given, which will be
            used to construct a frame.
        header : `~cifio.cif.CIFHeader`, optional
            Header for the frame.
        **kwargs
            Used to construct a frame if ``data`` is an array (see
            `~cifio.cif.CIFFrame.fromdata`).
        """
        if not isinstance(data, CIFFrame):
            data = CIFFrame.fromdata(data, header, **kwargs)
        return data.tofile(self.fh_raw)


open = FileOpener.create(globals(), doc="""
Returns
-------
Filehandle
    :class:`~cifio.cif.base.CIFFileReader` or
    :class:`~cifio.cif.base.CIFFileWriter` instance.

Notes
-----
File names ending in '.gz' or '.bz2' are taken to be compressed, and can
only be opened if a transport for that encoding has been registered (see
`~cifio.base.transport`).  Otherwise, a
`~cifio.base.errors.UnsupportedTransportError` is raised.
""")


def read(name, *, encoding=None, verify=True):
    """Read a CIF file into a frame.

    Parameters
    ----------
    name : str, path-like or filehandle
        File to read from.
    encoding : str, optional
        Encoding of the file.  Default: guessed from the file name.
    verify : bool, optional
        Whether to do basic checks of frame integrity.  Default: `True`.

    Returns
    -------
    frame : `~cifio.cif.CIFFrame`
    """
    fh = open(name, 'rb', encoding=encoding)
    try:
        return fh.read_frame(verify=verify)
    finally:
        if fh.fh_raw is not name:
            fh.close()


def write(name, frame, *, encoding=None):
    """Write a frame to a CIF file.

    Parameters
    ----------
    name : str, path-like or filehandle
        File to write to.
    frame : `~cifio.cif.CIFFrame`
        Frame to write.
    encoding : str, optional
        Encoding of the file.  Default: guessed from the file name.
    """
    fh = open(name, 'wb', encoding=encoding)
    try:
        fh.write_frame(frame)
    finally:
        if fh.fh_raw is not name:
            fh.close()
