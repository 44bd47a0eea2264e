import pytest

from idxtool.formats import Format, has_magic, identify_format


@pytest.mark.parametrize("data, fmt", [
    (b"BTP \x00\x00", Format.BTP),
    (b"BM\x36\x00", Format.BITMAP),
    (b"BM", Format.BITMAP),
    (b"GFXM", Format.GFXM),
    (b"GT20\x10\x00\x00\x00", Format.GT20),
    (b"MODL", Format.UNKNOWN),
    (b"GT2", Format.UNKNOWN),
    (b"B", Format.UNKNOWN),
    (b"", Format.UNKNOWN),
])
def test_identify(data, fmt):
    assert identify_format(data) is fmt


def test_priority_order():
    assert list(Format) == [Format.BTP, Format.BITMAP, Format.GFXM, Format.GT20, Format.UNKNOWN]


def test_only_leading_bytes_matter():
    assert identify_format(b"xxGT20") is Format.UNKNOWN
    assert identify_format(b"BMGT20") is Format.BITMAP


def test_buffer_types():
    assert identify_format(bytearray(b"GFXM....")) is Format.GFXM
    assert identify_format(memoryview(b"..BTP ")[2:]) is Format.BTP
    assert has_magic(memoryview(b"GT20"), Format.GT20)
    assert not has_magic(b"GT", Format.GT20)


def test_extensions():
    assert [str(fmt) for fmt in Format] == ["btp", "bmp", "gfxm", "gt20", ""]
