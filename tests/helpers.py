"""Builders for hand assembled GT20 streams and BTP containers."""

from struct import pack


class GTWriter:
    """Emit GT20 ops, keeping track of what they should decode to.

    Control words are placed where the decoder will look for them: a new
    word goes at the current end of the stream when the bit after the 32nd
    is needed.
    """

    def __init__(self):
        self.buf = bytearray()
        self.word = None
        self.used = 32
        self.expected = bytearray()

    def bit(self, value):
        if self.used == 32:
            self.word = len(self.buf)
            self.buf += bytes(4)
            self.used = 0
        if value:
            self.buf[self.word + self.used // 8] |= 1 << (self.used % 8)
        self.used += 1

    def _copy(self, distance, length):
        src = len(self.expected) - distance
        for i in range(length):
            self.expected.append(self.expected[src + i])

    def literal(self, byte):
        self.bit(0)
        self.buf.append(byte)
        self.expected.append(byte)

    def literals(self, data):
        for byte in data:
            self.literal(byte)

    def short(self, distance, more=False, last=False):
        assert 1 <= distance <= 256
        self.bit(1)
        self.bit(0)
        self.buf.append(256 - distance)
        self.bit(more)
        self.bit(last)
        self._copy(distance, 2 + 2 * bool(more) + bool(last))

    def long(self, distance, length):
        assert 1 <= distance <= 16384
        far = distance > 8192
        field = (16384 if far else 8192) - distance
        self.bit(1)
        self.bit(1)
        if 3 <= length <= 9 and not far:
            self.buf += pack("<H", field << 3 | (length - 2))
        elif 10 <= length <= 129 or (far and 4 <= length <= 129):
            self.buf += pack("<HB", field << 3, (length - 2) | (0x80 if far else 0))
        else:
            self.buf += pack("<HBH", field << 3, 0x80 if far else 0, length)
        self._copy(distance, length)

    def end(self):
        self.bit(1)
        self.bit(1)
        self.buf += pack("<HB", 0, 1)

    def stream(self, uncompressed_size=None):
        if uncompressed_size is None:
            uncompressed_size = len(self.expected)
        return gt_header(uncompressed_size) + bytes(self.buf)


def gt_header(uncompressed_size, overlap=0, skip=0):
    return b"GT20" + pack("<3I", uncompressed_size, overlap, skip)


def compress_literals(data):
    writer = GTWriter()
    writer.literals(data)
    writer.end()
    return writer.stream()


HEADER_FORMAT = "<4s12I2H2I"
PAGE_FORMAT = "<2H2I"


def bgra_palette(colours):
    """colours: list of (r, g, b, a), padded with black to 256 entries."""
    colours = list(colours) + [(0, 0, 0, 0)] * (256 - len(colours))
    return b"".join(bytes([b, g, r, a]) for r, g, b, a in colours)


def build_btp(pages, palettes, pixels, num_textures=None, num_palettes=None, truncate=None):
    """Lay out a BTP container: header, page table, palettes, pixel data.

    pages are (width, height, palette index) and pixels the matching index
    planes, which are packed one after the other.
    """
    header_size = 64
    page_table = header_size
    palette_data = page_table + 12 * len(pages)
    texture_data = palette_data + sum(len(p) for p in palettes)

    table = b""
    offset = 0
    for (width, height, palette), plane in zip(pages, pixels):
        table += pack(PAGE_FORMAT, width, height, palette, offset)
        offset += len(plane)

    header = pack(HEADER_FORMAT, b"BTP ",
        0, 0, 0, 0,       # unknown_1-4
        0, 0,             # num_cobjects, unknown_5
        0, 0,             # skybox_data_offset, unknown_6
        texture_data, 0,  # texture_data_offset, cobjects_data_offset
        0, 0,             # unknown_7-8
        len(pages) if num_textures is None else num_textures,
        len(palettes) if num_palettes is None else num_palettes,
        page_table, palette_data)
    data = header + table + b"".join(palettes) + b"".join(pixels)
    if truncate is not None:
        data = data[:truncate]
    return data
