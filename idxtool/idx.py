import logging

from collections import namedtuple
from struct import calcsize, iter_unpack

from .errors import MalformedIndex

logger = logging.getLogger(__name__)

ArchiveRecord = namedtuple("ArchiveRecord", """
    file_offset
    compressed_length
    decompressed_length
    reserved
""")

RECORD_FORMAT = "<4I"
RECORD_SIZE = calcsize(RECORD_FORMAT)


def iter_records(data):
    """Yield an ArchiveRecord per whole 16 byte chunk of an index file.

    There is no header or count, the position of a record is the id of the
    asset it describes. A trailing partial record is dropped.
    """
    data = memoryview(data).cast("B")
    whole = len(data) - len(data) % RECORD_SIZE
    for fields in iter_unpack(RECORD_FORMAT, data[:whole]):
        yield ArchiveRecord(*fields)


def parse_records(data, strict=False):
    data = memoryview(data).cast("B")
    trailing = len(data) % RECORD_SIZE
    if trailing:
        msg = "index has %d trailing bytes after %d records" % (
            trailing, len(data) // RECORD_SIZE)
        if strict:
            raise MalformedIndex(msg)
        logger.warning(msg)
    return list(iter_records(data))
