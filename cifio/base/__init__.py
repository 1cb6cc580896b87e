# Licensed under the GPLv3 - see LICENSE
"""Base implementations shared between formats.

Files are considered as composed of frames, each of which has a header and
a payload.  Base classes implementing the decoding and encoding and
exposing a standardized interface are found in the corresponding
`~cifio.base.header`, `~cifio.base.payload` and `~cifio.base.frame`
modules.

The `~cifio.base.base` module defines base methods for file readers and
writers, which open files using the byte-stream transports from
`~cifio.base.transport`.  Exceptions shared by all parts are in
`~cifio.base.errors`.
"""
