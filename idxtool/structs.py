from construct import *
from construct import ConstError, StreamError

from .errors import BadSignature, CorruptStream

GTHeader = Struct(
    "magic"             / Const(b"GT20"),
    "uncompressed_size" / Int32ul,
    "overlap"           / Int32ul, # in-place decompression hints,
    "skip"              / Int32ul, # unused out of place
)

BTPHeader = Struct(
    "magic"                     / Const(b"BTP "),
    "unknown_1"                 / Int32ul,
    "unknown_2"                 / Int32ul,
    "unknown_3"                 / Int32ul,
    "unknown_4"                 / Int32ul,
    "num_cobjects"              / Int32ul,
    "unknown_5"                 / Int32ul,
    "skybox_data_offset"        / Int32ul,
    "unknown_6"                 / Int32ul,
    "texture_data_offset"       / Int32ul,
    "cobjects_data_offset"      / Int32ul,
    "unknown_7"                 / Int32ul,
    "unknown_8"                 / Int32ul,
    "num_textures"              / Int16ul,
    "num_palettes"              / Int16ul,
    "texture_page_table_offset" / Int32ul,
    "palette_data_offset"       / Int32ul,
)

TexturePage = Struct(
    "width"             / Int16ul,
    "height"            / Int16ul,
    "palette_index"     / Int32ul,
    "pixel_data_offset" / Int32ul, # from BTPHeader.texture_data_offset
)

# on disk order
Colour = Struct(
    "blue"  / Int8ul,
    "green" / Int8ul,
    "red"   / Int8ul,
    "alpha" / Int8ul,
)


def parse(fmt, data, offset=0):
    """Parse a fixed size struct at offset, raising the package's errors."""
    size = fmt.sizeof()
    try:
        return fmt.parse(data[offset:offset + size])
    except ConstError as e:
        raise BadSignature(str(e)) from e
    except StreamError as e:
        raise CorruptStream("%d byte struct at 0x%x runs past end of %d byte buffer"
            % (size, offset, len(data))) from e


def parse_greedy(fmt, data, offset=0, count=None):
    """Parse up to count back to back structs, stopping at the end of data."""
    size = fmt.sizeof()
    end = None if count is None else offset + count * size
    return GreedyRange(fmt).parse(data[offset:end])


def as_tuple(cls, container):
    return cls(*(container[field] for field in cls._fields))


__all__ = [
    "GTHeader", "BTPHeader", "TexturePage", "Colour",
    "parse", "parse_greedy", "as_tuple",
]
