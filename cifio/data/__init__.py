# Licensed under the GPLv3 - see LICENSE
"""Sample files with intensities stored in CIF format."""

# Use private names to avoid inclusion in the documentation.
from os import path as _path


def _full_path(name, dirname=_path.dirname(_path.abspath(__file__))):
    return _path.join(dirname, name)


SAMPLE_CIF = _full_path('sample.cif')
"""CIF sample.  sample_nbytes=2, first_cycle=1, ncycle=2, ncluster=3.

Intensities are ``37 * i - 400`` for flat index ``i`` from 0 to 23, i.e.,
``np.arange(24).reshape(2, 4, 3) * 37 - 400`` in (cycle, channel, cluster)
order.
"""
