# Licensed under the GPLv3 - see LICENSE
"""
Base definitions for headers stored as fixed-layout binary records.

A header record is unpacked with a `struct.Struct` into a sequence of
fields ("words").  A `HeaderParser` describes, for each named key, which
word it lives in, its struct format and possibly a default value; from
that description it derives functions to get and set the key.  The
`StructHeaderBase` class wraps the words and gives dict-like access to
the keys, as well as to derived properties defined by subclasses.
"""
import struct
import warnings
import functools
from copy import copy


__all__ = ['make_parser', 'make_setter', 'get_default',
           'ParserDict', 'HeaderParser', 'StructHeaderBase']


def make_parser(index, fmt, default=None):
    """Get a function that extracts field ``index`` from unpacked words."""
    def parser(words):
        return words[index]

    return parser


def make_setter(index, fmt, default=None):
    """Get a function that stores a value in field ``index`` of words.

    The function checks that the value can be packed with ``fmt``, so that
    an invalid header is never produced.  A value of `None` is replaced by
    ``default``, or raises `ValueError` if there is no default.
    """
    field = struct.Struct('<' + fmt)

    def setter(words, value):
        if value is None:
            if default is None:
                raise ValueError("no default value so cannot set to 'None'.")
            value = default
        try:
            field.pack(value)
        except struct.error:
            raise ValueError("{0} cannot be represented with format '{1}'"
                             .format(value, fmt)) from None
        words[index] = value
        return words

    return setter


def get_default(index, fmt, default=None):
    """Default of a field description (`None` if it has none)."""
    return default


class ParserDict:
    """Descriptor giving a dict built from a parser's field descriptions.

    On first access from a `HeaderParser` instance, ``function`` is called
    with each field description, and the resulting dict is stored on the
    instance under the same name, hiding the descriptor until the parser
    changes (see `HeaderParser._clear_caches`).
    """

    def __init__(self, function):
        self.function = function

    def __set_name__(self, owner, name):
        self.name = name
        self.__doc__ = f"Dict of {name} for each header key."

    def __get__(self, instance, cls=None):
        if instance is None:
            return self

        result = {key: self.function(*description)
                  for key, description in instance.items()}
        instance.__dict__[self.name] = result
        return result

    def __repr__(self):
        return f"{self.__class__.__name__}({self.function.__name__})"


class HeaderParser(dict):
    """Description of the keys of a fixed-layout header.

    Initialised like a dict, with pairs of key and field description, where
    the description is a tuple of

    index : int
        Position of the field among the words unpacked from the record.
    fmt : str
        `struct` format of the field (little-endian is implied).
    default : int or bytes, optional
        Value to use when creating a new header (e.g., a magic).

    Attributes ``parsers``, ``setters``, and ``defaults`` give dicts with,
    respectively, functions ``parser(words)``, functions
    ``setter(words, value)``, and the default values, for each key.
    They are calculated once and recalculated if the parser is changed.
    """
    parsers = ParserDict(make_parser)
    setters = ParserDict(make_setter)
    defaults = ParserDict(get_default)

    def copy(self):
        return self.__class__(self)

    @property
    def struct_format(self):
        """Little-endian struct format of the full record."""
        descriptions = sorted(self.values(), key=lambda d: d[0])
        return '<' + ''.join(description[1] for description in descriptions)

    def _clear_caches(self):
        """Remove the dicts stored by the ParserDict descriptors."""
        for cls in type(self).__mro__:
            for name, attr in vars(cls).items():
                if isinstance(attr, ParserDict):
                    self.__dict__.pop(name, None)


def _clearing_caches(name):
    method = getattr(dict, name)

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        result = method(self, *args, **kwargs)
        self._clear_caches()
        return result

    return wrapper


for _name in ('__setitem__', '__delitem__', 'update', 'pop', 'popitem',
              'clear', 'setdefault'):
    setattr(HeaderParser, _name, _clearing_caches(_name))

del _name


class StructHeaderBase:
    """Base for headers stored as a single packed binary record.

    Subclasses need to define:

      ``_struct``: `~struct.Struct` that packs and unpacks the record.

      ``_header_parser``: `HeaderParser` describing the keys.

      ``_properties``: names of derived properties that can be used to
      initialise a header with `fromvalues`, in the order they are applied.

    and should define ``payload_nbytes``, the size of the data following
    the header.

    Parameters
    ----------
    words : tuple or list, or None
        Unpacked header fields.  A tuple makes the header immutable.  If
        `None`, a list with the default values is created (zero where no
        default is defined), and verification is skipped.
    verify : bool, optional
        Whether to check the header is consistent.  Default: `True`.
    """

    _struct = struct.Struct('')
    _header_parser = HeaderParser()
    _properties = ('payload_nbytes', 'frame_nbytes')

    def __init__(self, words, verify=True):
        if words is None:
            words = [0] * len(self._header_parser)
            for key, default in self._header_parser.defaults.items():
                if default is not None:
                    words[self._header_parser[key][0]] = default
            verify = False

        self.words = words
        if verify:
            self.verify()

    def verify(self):
        """Check there is a word for each key.  Subclasses can add checks."""
        assert len(self.words) == len(self._header_parser)

    def copy(self, **kwargs):
        """Mutable copy of the header, with words independent of ours."""
        kwargs.setdefault('verify', False)
        new = self.__class__(copy(self.words), **kwargs)
        new.mutable = True
        return new

    def __copy__(self):
        return self.copy()

    @property
    def mutable(self):
        """Whether keys can be set (i.e., whether words is a list)."""
        return isinstance(self.words, list)

    @mutable.setter
    def mutable(self, mutable):
        if not isinstance(self.words, (list, tuple)):
            raise TypeError("cannot change mutability of words of type {0}."
                            .format(type(self.words).__name__))
        self.words = list(self.words) if mutable else tuple(self.words)

    @property
    def nbytes(self):
        """Size of the header record in bytes."""
        return self._struct.size

    @classmethod
    def fromfile(cls, fh, *args, **kwargs):
        """Read and unpack a header record from a filehandle.

        Further arguments are passed on to the initialiser.  The header
        will be immutable.

        Raises
        ------
        EOFError
            If the file holds fewer bytes than a full record.
        """
        s = fh.read(cls._struct.size)
        if len(s) < cls._struct.size:
            raise EOFError("could not read full {0}."
                           .format(cls.__name__))
        return cls(cls._struct.unpack(s), *args, **kwargs)

    def tofile(self, fh):
        """Pack the header and write it to a filehandle."""
        return fh.write(self._struct.pack(*self.words))

    @classmethod
    def fromvalues(cls, *args, **kwargs):
        """Create a header from key values and derived properties.

        Starts from a header with default values, which is then updated
        with ``kwargs`` (see `update`), so, e.g., ``dtype`` can be given
        instead of the key that encodes it.  Any ``args`` are passed on to
        the initialiser.
        """
        self = cls(None, *args, verify=False)
        self.update(**kwargs)
        return self

    @classmethod
    def fromkeys(cls, *args, **kwargs):
        """Create a header from values for exactly all its keys.

        Raises
        ------
        KeyError
            If any key is missing, or any keyword is not a key.
        """
        self = cls(None, *args, verify=False)
        given = set(kwargs) - {'verify'}
        missing = set(self.keys()) - given
        extra = given - set(self.keys())
        if missing or extra:
            problems = []
            if missing:
                problems.append("is missing keywords ({0})".format(missing))
            if extra:
                problems.append("contains extra keywords ({0})".format(extra))
            raise KeyError("input list " + " and ".join(problems))

        self.update(**kwargs)
        return self

    def update(self, *, verify=True, **kwargs):
        """Set keys and derived properties.

        Keywords that are header keys are set first.  Then, any others
        are used to set properties in the order given by ``_properties``.
        Keywords that match neither cause a warning.

        Parameters
        ----------
        verify : bool, optional
            Whether to check the header after updating.  Default: `True`.
        **kwargs
            Values of keys or properties.
        """
        for key in self.keys():
            if key in kwargs:
                self[key] = kwargs.pop(key)

        for name in self._properties:
            if name in kwargs:
                setattr(self, name, kwargs.pop(name))

        if kwargs:
            warnings.warn("some keywords unused in header update: {0}"
                          .format(kwargs))

        if verify:
            self.verify()

    def __getitem__(self, key):
        try:
            parser = self._header_parser.parsers[key]
        except KeyError:
            raise KeyError("{0} header does not contain {1}"
                           .format(self.__class__.__name__, key)) from None
        return parser(self.words)

    def __setitem__(self, key, value):
        """Set a key in the header words.

        A value of `None` sets the key to its default, if it has one.
        """
        try:
            setter = self._header_parser.setters[key]
        except KeyError:
            raise KeyError("{0} header does not contain {1}"
                           .format(self.__class__.__name__, key)) from None
        if not self.mutable:
            raise TypeError("header is immutable; set '.mutable' or use "
                            "a copy.")
        setter(self.words, value)

    def keys(self):
        return self._header_parser.keys()

    def __iter__(self):
        return iter(self.keys())

    def __contains__(self, key):
        return key in self._header_parser

    def __eq__(self, other):
        return (type(self) is type(other)
                and tuple(self.words) == tuple(other.words))

    def _repr_value(self, key, value):
        return str(value)

    def __repr__(self):
        name = self.__class__.__name__
        separator = ",\n" + " " * (len(name) + 2)
        return "<{0} {1}>".format(name, separator.join(
            "{0}: {1}".format(key, self._repr_value(key, self[key]))
            for key in self.keys()))
