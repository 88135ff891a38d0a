"""Shared helpers for the binary formats: struct magics, alignment and errors."""

from __future__ import annotations

__all__ = ["FormatError", "struct_magic_u32", "struct_magic_u64", "align"]


class FormatError(ValueError):
    """Raised when binary data does not match the expected layout."""


def _magic(text: str | bytes, width: int) -> int:
    raw = text.encode("ascii") if isinstance(text, str) else bytes(text)
    if len(raw) < width:
        raise ValueError(f"struct magic needs at least {width} characters, got {len(raw)}")
    return int.from_bytes(raw[:width], "little")


def struct_magic_u32(text: str | bytes) -> int:
    """Return the 32-bit little-endian value of the first four characters of ``text``."""
    return _magic(text, 4)


def struct_magic_u64(text: str | bytes) -> int:
    """Return the 64-bit little-endian value of the first eight characters of ``text``."""
    return _magic(text, 8)


def align(value: int, alignment: int) -> int:
    """Round ``value`` up to the next multiple of ``alignment``."""
    if alignment <= 0:
        raise ValueError("alignment must be positive")
    if value < 0:
        raise ValueError("value must not be negative")
    return -(-value // alignment) * alignment