"""Decoders for .idx/.img game archives: GT20 streams and BTP textures."""

from .archive import Archive, Asset, DecodedAsset
from .btp import Colour, Palette, Texture, TexturePageInfo, parse_btp_header, parse_textures
from .errors import *
from .formats import Format, identify_format
from .gt import decompress
from .idx import ArchiveRecord, parse_records

__version__ = "0.1.0"
