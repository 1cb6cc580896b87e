# Licensed under the GPLv3 - see LICENSE
"""Exceptions raised while encoding, decoding and combining CIF data.

All subclass both `CIFError` and a built-in exception, so that code
catching, e.g., `ValueError` or `IndexError` keeps working.
"""


__all__ = ['CIFError', 'FormatError', 'ConsistencyError', 'OverlapError',
           'BoundsError', 'CycleRangeError', 'UnsupportedTransportError']


class CIFError(Exception):
    """Base class for all CIF errors."""
    pass


class FormatError(CIFError, ValueError):
    """Bytes do not form a valid CIF header (magic, version or width)."""
    pass


class ConsistencyError(CIFError, ValueError):
    """A file cannot be combined with those aggregated before it."""
    pass


class OverlapError(ConsistencyError):
    """A file covers cycles that were already filled."""
    pass


class BoundsError(CIFError, IndexError):
    """Data would be placed outside the aggregate buffer."""
    pass


class CycleRangeError(CIFError, IndexError):
    """A requested cycle window lies outside the available cycles."""
    pass


class UnsupportedTransportError(CIFError, ValueError):
    """No transport is available for the requested encoding."""
    pass
