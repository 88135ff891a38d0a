import struct

import pytest

from hacformats.common import FormatError
from hacformats.ini import MAX_KIP_NUM, IniHeader


def test_to_bytes_layout():
    data = IniHeader(size=0x1234, kip_num=3).to_bytes()
    assert len(data) == 0x10
    assert data[:4] == b"INI1"
    assert struct.unpack_from("<II", data, 4) == (0x1234, 3)
    assert data[12:] == bytes(4)


@pytest.mark.parametrize("size,kips", [(0, 0), (0x100000, MAX_KIP_NUM), (0xFFFFFFFF, 1)])
def test_round_trip(size, kips):
    hdr = IniHeader(size, kips)
    assert IniHeader.from_bytes(hdr.to_bytes()) == hdr


def test_from_bytes_ignores_trailing_data():
    data = IniHeader(64, 2).to_bytes() + b"payload"
    assert IniHeader.from_bytes(data) == IniHeader(64, 2)


def test_too_small():
    with pytest.raises(FormatError, match="too small"):
        IniHeader.from_bytes(IniHeader(1, 1).to_bytes()[:15])


def test_bad_magic():
    data = b"KIP1" + IniHeader(1, 1).to_bytes()[4:]
    with pytest.raises(FormatError, match="signature"):
        IniHeader.from_bytes(data)


def test_too_many_kips_on_read():
    data = b"INI1" + struct.pack("<II4x", 0x10, MAX_KIP_NUM + 1)
    with pytest.raises(FormatError, match="too many KIPs"):
        IniHeader.from_bytes(data)


def test_too_many_kips_on_write():
    hdr = IniHeader(0x10, MAX_KIP_NUM)
    hdr.kip_num = MAX_KIP_NUM + 1
    with pytest.raises(ValueError, match="Too many KIPs"):
        hdr.to_bytes()


def test_negative_values_rejected():
    with pytest.raises(ValueError):
        IniHeader(size=-1)