"""BTP texture containers.

A BTP file holds a table of texture pages and a table of 256 colour
palettes, each page being a plane of 8 bit indices into one of the
palettes. Colours are stored blue, green, red, alpha.
"""

import logging

import numpy as np

from collections import namedtuple
from PIL import Image

from . import structs
from .errors import (BadSignature, CorruptStream, DecodeError, InvalidDimensions,
    MissingPalette, PaletteIndexOutOfBounds)
from .formats import Format, has_magic
from .structs import BTPHeader, TexturePage, parse, parse_greedy, as_tuple

logger = logging.getLogger(__name__)

TextureContainerHeader = namedtuple("TextureContainerHeader", """
    magic
    unknown_1
    unknown_2
    unknown_3
    unknown_4
    num_cobjects
    unknown_5
    skybox_data_offset
    unknown_6
    texture_data_offset
    cobjects_data_offset
    unknown_7
    unknown_8
    num_textures
    num_palettes
    texture_page_table_offset
    palette_data_offset
""")

TexturePageInfo = namedtuple("TexturePageInfo", "width height palette_index pixel_data_offset")
Colour = namedtuple("Colour", "red green blue alpha")

PALETTE_SIZE = 256
COLOUR_SIZE = structs.Colour.sizeof()
PALETTE_BYTES = PALETTE_SIZE * COLOUR_SIZE

# BGRA -> RGBA
CHANNEL_ORDER = [2, 1, 0, 3]


def parse_colour(data):
    c = parse(structs.Colour, data)
    return Colour(c.red, c.green, c.blue, c.alpha)


class Palette:
    """256 RGBA colours.

    size is how many of them were actually present in the file, a palette
    table cut short by the end of the container leaves the rest black.
    """
    __slots__ = "colours", "size"

    def __init__(self, colours, size=PALETTE_SIZE):
        colours = np.array(colours, dtype=np.uint8)
        if colours.shape != (PALETTE_SIZE, 4):
            raise ValueError("palette must be %dx4, not %r" % (PALETTE_SIZE, colours.shape))
        if not 0 <= size <= PALETTE_SIZE:
            raise ValueError("palette size %d out of range" % size)
        colours.flags.writeable = False
        self.colours = colours
        self.size = size

    @classmethod
    def from_bytes(cls, data):
        size = min(len(data) // COLOUR_SIZE, PALETTE_SIZE)
        colours = np.zeros([PALETTE_SIZE, 4], dtype=np.uint8)
        if size:
            bgra = np.frombuffer(data, dtype=np.uint8, count=size * COLOUR_SIZE)
            colours[:size] = bgra.reshape(size, 4)[:, CHANNEL_ORDER]
        return cls(colours, size)

    def __len__(self):
        return self.size

    def __getitem__(self, index):
        if not 0 <= index < self.size:
            raise IndexError("colour %d not in palette of %d" % (index, self.size))
        return Colour(*(int(x) for x in self.colours[index]))

    def to_image(self):
        return Image.fromarray(self.colours.reshape(16, 16, 4).copy())


class Texture:
    __slots__ = "info", "palette", "pixels"

    def __init__(self, info, palette, pixels):
        width, height = info.width, info.height
        if width == 0 or height == 0:
            raise InvalidDimensions("texture is %dx%d" % (width, height))
        if len(palette) == 0:
            raise MissingPalette("texture palette has no colours")

        pixels = np.frombuffer(bytes(pixels), dtype=np.uint8)
        if pixels.size != width * height:
            raise InvalidDimensions("%d pixels for a %dx%d texture" % (pixels.size, width, height))
        # every index has to land on a colour that was actually read
        highest = int(pixels.max())
        if highest >= len(palette):
            raise PaletteIndexOutOfBounds("pixel index %d outside palette of %d colours"
                % (highest, len(palette)))

        self.info = info
        self.palette = palette
        self.pixels = pixels.reshape(height, width)

    @property
    def width(self):
        return self.info.width

    @property
    def height(self):
        return self.info.height

    def pixel(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("pixel (%d, %d) outside %dx%d texture" % (x, y, self.width, self.height))
        return self.palette[int(self.pixels[y, x])]

    def to_rgba(self):
        return self.palette.colours[self.pixels]

    def to_image(self):
        return Image.fromarray(self.to_rgba())


def parse_btp_header(data):
    if not has_magic(data, Format.BTP):
        raise BadSignature("not a BTP container")
    return as_tuple(TextureContainerHeader, parse(BTPHeader, data))


def parse_texture_page_infos(data, texture_page_table_offset, num_textures):
    pages = parse_greedy(TexturePage, data, texture_page_table_offset, num_textures)
    return [as_tuple(TexturePageInfo, page) for page in pages]


def parse_palettes(data, palette_data_offset, num_palettes):
    palettes = []
    for i in range(num_palettes):
        start = palette_data_offset + i * PALETTE_BYTES
        if start >= len(data):
            break
        palettes.append(Palette.from_bytes(data[start:start + PALETTE_BYTES]))
    return palettes


def parse_texture_data(data, header, info):
    start = header.texture_data_offset + info.pixel_data_offset
    count = info.width * info.height
    if start + count > len(data):
        raise CorruptStream("%d pixels at 0x%x run past end of %d byte container"
            % (count, start, len(data)))
    return data[start:start + count]


def _parse_texture(data, header, infos, palettes, index):
    if index >= len(infos):
        raise CorruptStream("texture page table ends after %d of %d pages"
            % (len(infos), header.num_textures))
    info = infos[index]
    if info.width == 0 or info.height == 0:
        return None
    if info.palette_index >= len(palettes):
        raise MissingPalette("palette %d requested, container has %d"
            % (info.palette_index, len(palettes)))
    pixels = parse_texture_data(data, header, info)
    return Texture(info, palettes[info.palette_index], pixels)


def parse_textures(data, header=None, failures=None, context=None):
    """Decode every texture page of a BTP container.

    Pages with a zero width or height are skipped. A page that fails to
    decode is logged, appended to failures as (page index, error) when a list
    is given, and the remaining pages are still decoded. context, when given,
    prefixes the log messages so they can be traced back to their asset.
    """
    prefix = "%s: " % context if context else ""
    data = memoryview(data).cast("B")
    if header is None:
        header = parse_btp_header(data)

    textures = []
    if header.num_textures == 0 or header.num_palettes == 0:
        return textures

    infos = parse_texture_page_infos(data, header.texture_page_table_offset, header.num_textures)
    palettes = parse_palettes(data, header.palette_data_offset, header.num_palettes)

    for index in range(header.num_textures):
        try:
            texture = _parse_texture(data, header, infos, palettes, index)
        except DecodeError as e:
            logger.warning("%sFailed to create texture %d: %s", prefix, index, e)
            if failures is not None:
                failures.append((index, e))
            continue
        if texture is None:
            logger.info("%sSkipping empty texture %d", prefix, index)
            continue
        textures.append(texture)
    return textures
