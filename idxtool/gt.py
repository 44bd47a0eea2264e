"""GT20 decompression.

GT20 is an LZ77 variant. A 32 bit control word, consumed least significant
bit first, chooses between literal bytes and back references into the
output produced so far:

    0       literal byte
    1 1     long match, 16 bit code: 13 bit offset into an 8k window and
            a 3 bit length, with an extra length byte when that is zero
    1 0     short match, 1 byte offset into the last 256 bytes, copies 2
            bytes then 2 and 1 more depending on the next two control bits

Control words are interleaved with the data, a new one is read from the
input as soon as the previous one runs out of bits.
"""

import logging

from collections import namedtuple

from .errors import BadSignature, CorruptStream
from .formats import Format, has_magic
from .structs import GTHeader, parse, as_tuple

logger = logging.getLogger(__name__)

CompressionHeader = namedtuple("CompressionHeader", "magic uncompressed_size overlap skip")

HEADER_SIZE = GTHeader.sizeof()
MASK = 0xFFFFFFFF

# long match extra length codes
END_OF_STREAM = 1
LONG_LENGTH = 0


class BitReader:
    __slots__ = "data", "pos", "bits", "count"

    def __init__(self, data, pos=0):
        self.data = data
        self.pos = pos
        self.bits = 0
        self.count = 0

    def read_le(self, width):
        end = self.pos + width
        if end > len(self.data):
            raise CorruptStream("%d byte read at 0x%x runs past end of %d byte input"
                % (width, self.pos, len(self.data)))
        value = int.from_bytes(self.data[self.pos:end], "little")
        self.pos = end
        return value

    def refill(self):
        self.bits = self.read_le(4)
        self.count = 32

    @property
    def bit(self):
        return self.bits & 1

    def next_control_bit(self):
        self.bits >>= 1
        self.count -= 1
        if self.count == 0:
            self.refill()
        return self.bits & 1


def _copy(out, dst, src, count):
    """Copy count bytes forward from out[src] to out[dst].

    Source and destination may overlap, in which case the bytes written
    early in the run are read again later in it.
    """
    if count == 0:
        return dst, src
    if dst + count > len(out) or src + count > len(out):
        raise CorruptStream("%d byte match from 0x%x to 0x%x runs past end of %d byte output"
            % (count, src, dst, len(out)))
    # a run that ends before dst reads nothing it writes, so one slice
    # copy gives the same bytes as the forward byte loop
    if src + count <= dst:
        out[dst:dst + count] = out[src:src + count]
    else:
        for i in range(count):
            out[dst + i] = out[src + i]
    return dst + count, src + count


def parse_header(data):
    if not has_magic(data, Format.GT20):
        raise BadSignature("not a GT20 stream")
    return as_tuple(CompressionHeader, parse(GTHeader, data))


def decompress(data, uncompressed_size=None):
    """Decompress a GT20 stream, header included.

    The output is always exactly uncompressed_size bytes, which defaults to
    the size stored in the header. The stream has to end with its own
    terminator, running out of input or output first is a CorruptStream.
    """
    data = memoryview(data).cast("B")
    header = parse_header(data)
    if uncompressed_size is None:
        uncompressed_size = header.uncompressed_size
    if not 0 <= uncompressed_size <= MASK:
        raise ValueError("uncompressed size %r out of range" % (uncompressed_size,))

    out = bytearray(uncompressed_size)
    cursor = 0

    reader = BitReader(data, HEADER_SIZE)
    reader.refill()

    while True:
        if not reader.bit:
            if cursor >= len(out):
                raise CorruptStream("literal at 0x%x past end of %d byte output"
                    % (cursor, len(out)))
            out[cursor] = reader.read_le(1)
            cursor += 1
        elif reader.next_control_bit():
            code = reader.read_le(2)
            # sign extended 13 bit offset
            src = (cursor + ((code >> 3) | 0xFFFFE000)) & MASK
            length = code & 7
            if length:
                length += 2
            else:
                length = reader.read_le(1)
                if length & 0x80:
                    src = (src - 0x2000) & MASK
                length &= 0x7F
                if length == END_OF_STREAM:
                    break
                if length == LONG_LENGTH:
                    length = reader.read_le(2)
                else:
                    length += 2
            cursor, src = _copy(out, cursor, src, length)
        else:
            src = (cursor + reader.read_le(1) - 256) & MASK
            cursor, src = _copy(out, cursor, src, 2)
            if reader.next_control_bit():
                cursor, src = _copy(out, cursor, src, 2)
            if reader.next_control_bit():
                cursor, src = _copy(out, cursor, src, 1)
        reader.next_control_bit()

    if cursor != len(out):
        logger.debug("GT20 stream ended at 0x%x of %d bytes", cursor, len(out))
    return bytes(out)
