import pytest

from hacformats.common import FormatError, align, struct_magic_u32, struct_magic_u64


@pytest.mark.parametrize("magic", ["ACI0", "ACID", "INI1", "IVFC", "HEAD", "NCA3"])
def test_magic_u32_is_little_endian_of_text(magic):
    value = struct_magic_u32(magic)
    assert value.to_bytes(4, "little") == magic.encode("ascii")


def test_magic_u32_accepts_bytes():
    assert struct_magic_u32(b"PFS0") == struct_magic_u32("PFS0")


def test_magic_u32_uses_first_four_characters():
    assert struct_magic_u32("HFS0extra") == struct_magic_u32("HFS0")


def test_magic_u64_round_trip():
    value = struct_magic_u64("ABCDEFGH")
    assert value.to_bytes(8, "little") == b"ABCDEFGH"


def test_magic_u64_low_half_matches_u32():
    assert struct_magic_u64("META1234") & 0xFFFFFFFF == struct_magic_u32("META")


def test_magic_too_short_raises():
    with pytest.raises(ValueError):
        struct_magic_u32("AB")
    with pytest.raises(ValueError):
        struct_magic_u64("ABCD")


def test_align_pinned_value():
    assert align(0x1C, 0x10) == 0x20


@pytest.mark.parametrize("value", [0, 1, 3, 4, 5, 0x1C, 0x1F, 0x20, 0x21, 1000])
@pytest.mark.parametrize("alignment", [1, 4, 0x10, 0x20])
def test_align_invariants(value, alignment):
    result = align(value, alignment)
    assert result % alignment == 0
    assert value <= result < value + alignment


def test_align_already_aligned_is_unchanged():
    assert align(0x200, 0x200) == 0x200


def test_align_bad_alignment():
    with pytest.raises(ValueError):
        align(5, 0)


def test_format_error_is_value_error_with_message():
    err = FormatError("bad")
    assert isinstance(err, ValueError)
    assert str(err) == "bad"