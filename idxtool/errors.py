"""Errors raised while decoding archive contents.

Every failure the decoders can report is a subclass of DecodeError, so a
caller walking a whole archive can catch that one type per asset and carry
on with the next.
"""


class DecodeError(Exception):
    pass


class BadSignature(DecodeError):
    """The buffer does not start with the magic of the expected format."""


class CorruptStream(DecodeError):
    """A read or write fell outside the buffer, or the data ended early."""


class InvalidDimensions(DecodeError):
    pass


class MissingPalette(DecodeError):
    pass


class PaletteIndexOutOfBounds(DecodeError):
    pass


class MalformedIndex(DecodeError):
    """The index file, or one of its records, does not fit the archive."""


__all__ = [
    "DecodeError", "BadSignature", "CorruptStream", "InvalidDimensions",
    "MissingPalette", "PaletteIndexOutOfBounds", "MalformedIndex",
]
