# Licensed under the GPLv3 - see LICENSE
"""CIF cluster intensity file reader/writer.

CIF files store, for a single tile, the intensities measured in each of
four channels, for every cluster and for one or more cycles.
"""
from .base import open, read, write  # noqa
from .header import CIFHeader  # noqa
from .payload import CIFPayload  # noqa
from .frame import CIFFrame  # noqa
from .aggregate import CIFAggregator, aggregate  # noqa
from .splice import splice  # noqa
from .dump import dump  # noqa
from .locate import cif_glob, cycle_files  # noqa
