"""Pull style access to an .idx/.img archive pair.

Nothing is decoded up front. Indexing an Archive slices the asset out of
the data file and sniffs its format, decoding happens when asked for.
"""

import logging

from collections import namedtuple

from . import btp, gt
from .errors import DecodeError, MalformedIndex
from .formats import Format, identify_format
from .idx import parse_records

logger = logging.getLogger(__name__)

DecodedAsset = namedtuple("DecodedAsset", "format data")


class Asset:
    __slots__ = "record_id", "record", "data", "format"

    def __init__(self, record_id, record, data):
        self.record_id = record_id
        self.record = record
        self.data = data
        self.format = identify_format(data)

    def __repr__(self):
        return "<Asset %d %s 0x%x+%d>" % (self.record_id, self.format.name,
            self.record.file_offset, self.record.compressed_length)

    def decode(self):
        """Decompress the asset if needed and classify the result."""
        data = self.data
        if self.format is Format.GT20:
            try:
                data = gt.decompress(data, self.record.decompressed_length)
            except DecodeError as e:
                raise type(e)("record %d: %s" % (self.record_id, e)) from e
        return DecodedAsset(identify_format(data), data)

    def textures(self, failures=None, decoded=None):
        """Textures of a BTP asset, empty for anything else.

        decoded is this asset's DecodedAsset when the caller already has it,
        e.g. from Archive.decode_all, so the data is not decompressed again.
        """
        if decoded is None:
            decoded = self.decode()
        if decoded.format is not Format.BTP:
            return []
        try:
            return btp.parse_textures(decoded.data, failures=failures,
                context="record %d" % self.record_id)
        except DecodeError as e:
            raise type(e)("record %d: %s" % (self.record_id, e)) from e


class Archive:
    def __init__(self, index, blob, strict=False):
        self.records = parse_records(index, strict=strict)
        self.blob = memoryview(blob).cast("B")

    def __len__(self):
        return len(self.records)

    def __getitem__(self, record_id):
        if record_id < 0:
            record_id += len(self.records)
        record = self.records[record_id]
        end = record.file_offset + record.compressed_length
        if end > len(self.blob):
            raise MalformedIndex("record %d: 0x%x-0x%x lies outside the %d byte data file"
                % (record_id, record.file_offset, end, len(self.blob)))
        return Asset(record_id, record, self.blob[record.file_offset:end])

    def __iter__(self):
        for record_id in range(len(self.records)):
            yield self[record_id]

    def decode_all(self):
        """Yield (record id, DecodedAsset or DecodeError) in index order.

        A failing asset is logged and handed back instead of raised, so one
        bad record does not stop the rest of the archive.
        """
        for record_id in range(len(self.records)):
            try:
                result = self[record_id].decode()
            except DecodeError as e:
                logger.warning("Could not decode record %d: %s", record_id, e)
                result = e
            yield record_id, result
