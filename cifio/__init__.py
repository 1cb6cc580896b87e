# Licensed under the GPLv3 - see LICENSE
"""Reading, writing and combining CIF cluster intensity files."""

from .cif import open, aggregate, splice  # noqa

try:
    from .version import version as __version__
except ImportError:
    __version__ = ''

# Define minima for the documentation, but do not bother to explicitly check.
__minimum_python_version__ = '3.10'
__minimum_numpy_version__ = '1.24'
