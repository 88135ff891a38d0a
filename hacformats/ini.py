"""INI1 header: the container of initial kernel processes."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .common import FormatError, struct_magic_u32

__all__ = ["INI_STRUCT_MAGIC", "MAX_KIP_NUM", "IniHeader"]

INI_STRUCT_MAGIC = struct_magic_u32("INI1")
MAX_KIP_NUM = 0x50

_INI_HEADER = struct.Struct("<III4x")


@dataclass
class IniHeader:
    """The INI1 header: total size and the number of KIPs it holds."""

    size: int = 0
    kip_num: int = 0

    SIZE = _INI_HEADER.size

    def __post_init__(self) -> None:
        for name in ("size", "kip_num"):
            if not 0 <= getattr(self, name) <= 0xFFFFFFFF:
                raise ValueError(f"{name} must fit in 32 bits")

    @classmethod
    def from_bytes(cls, data: bytes) -> IniHeader:
        """Decode an INI1 header."""
        if len(data) < cls.SIZE:
            raise FormatError("INI header corrupt (header size is too small)")
        magic, size, kip_num = _INI_HEADER.unpack_from(data)
        if magic != INI_STRUCT_MAGIC:
            raise FormatError("INI header corrupt (unrecognised header signature)")
        if kip_num > MAX_KIP_NUM:
            raise FormatError("INI header corrupt (too many KIPs)")
        return cls(size, kip_num)

    def to_bytes(self) -> bytes:
        """Encode this header."""
        if self.kip_num > MAX_KIP_NUM:
            raise ValueError("Cannot generate INI Header (Too many KIPs)")
        return _INI_HEADER.pack(INI_STRUCT_MAGIC, self.size, self.kip_num)