from enum import Enum


class Format(Enum):
    # Checked in declaration order, first match wins
    BTP     = (b"BTP ", "btp")
    BITMAP  = (b"BM",   "bmp")
    GFXM    = (b"GFXM", "gfxm")
    GT20    = (b"GT20", "gt20")
    UNKNOWN = (None,    "")

    def __init__(self, magic, extension):
        self.magic = magic
        self.extension = extension

    def __str__(self):
        return self.extension


MAGIC_LENGTH = max(len(fmt.magic) for fmt in Format if fmt.magic)


def has_magic(data, fmt):
    return bytes(memoryview(data)[:len(fmt.magic)]) == fmt.magic


def identify_format(data):
    head = bytes(memoryview(data)[:MAGIC_LENGTH])
    for fmt in Format:
        if fmt.magic is not None and head.startswith(fmt.magic):
            return fmt
    return Format.UNKNOWN
