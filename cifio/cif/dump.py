# Licensed under the GPLv3 - see LICENSE
"""Human-readable rendering of CIF frames."""
from .header import CIF_NCHANNEL


__all__ = ['CHANNEL_NAMES', 'dump']


CHANNEL_NAMES = 'ACGT'
"""Base associated with each channel."""


def dump(frame, fh, max_clusters=0, max_cycles=0):
    """Write a table of intensities to a text filehandle.

    The header values are written first, on lines starting with '@'.  Then,
    for each cluster and channel, a line with the cluster number and the
    base of the channel, followed by the intensities for each cycle.

    Parameters
    ----------
    frame : `~cifio.cif.CIFFrame`
        Frame to render.
    fh : text filehandle
        To write to (e.g., `sys.stdout`).
    max_clusters : int, optional
        Maximum number of clusters to show.  Default: 0, i.e., all.
    max_cycles : int, optional
        Maximum number of cycles to show.  Default: 0, i.e., all.

    Raises
    ------
    ValueError
        If either maximum is negative.  Nothing is written in that case.
    """
    if max_clusters < 0 or max_cycles < 0:
        raise ValueError("maximum numbers of clusters and cycles to show "
                         "cannot be negative.")
    header = frame.header
    ncluster = header['ncluster']
    ncycle = header['ncycle']
    fh.write("@CIF Data version = {}\n".format(header['version']))
    fh.write("@datasize = {} bytes\n".format(header['sample_nbytes']))
    fh.write("@ncycles = {}\n".format(ncycle))
    fh.write("@first cycle = {}\n".format(header['first_cycle']))
    fh.write("@nclusters = {}\n".format(ncluster))

    mcluster = min(max_clusters or ncluster, ncluster)
    mcycle = min(max_cycles or ncycle, ncycle)
    data = frame.data
    for cluster in range(mcluster):
        for channel in range(CIF_NCHANNEL):
            values = ''.join(' {:5d}'.format(int(value))
                             for value in data[:mcycle, channel, cluster])
            fh.write("cluster_{}\t{}{}\n".format(
                cluster + 1, CHANNEL_NAMES[channel], values))

    if mcluster != ncluster:
        fh.write("{} clusters omitted. ".format(ncluster - mcluster))
    if mcycle != ncycle:
        fh.write("{} cycles omitted. ".format(ncycle - mcycle))
    fh.write("\n")
