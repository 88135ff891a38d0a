"""Hierarchical integrity (IVFC) and hierarchical SHA-256 hash tree headers."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .common import FormatError, align, struct_magic_u32

__all__ = [
    "TypeId",
    "INTEGRITY_STRUCT_MAGIC",
    "DEFAULT_LAYER_NUM_FOR_ROMFS",
    "HEADER_ALIGN_LEN",
    "SHA256_DEFAULT_LAYER_NUM",
    "IntegrityLayer",
    "HierarchicalIntegrityHeader",
    "Sha256Layer",
    "HierarchicalSha256Header",
]

INTEGRITY_STRUCT_MAGIC = struct_magic_u32("IVFC")
DEFAULT_LAYER_NUM_FOR_ROMFS = 6
HEADER_ALIGN_LEN = 0x20
SALT_SOURCE_LEN = 0x20
HAC_ROMFS_MASTER_HASH_LEN = 0x20

SHA256_DEFAULT_LAYER_NUM = 2
SHA256_MAX_LAYER_NUM = 2

_HASH_LEN = 32
_U32_MASK = 0xFFFFFFFF

_INTEGRITY_HEADER = struct.Struct("<IIII")
_INTEGRITY_LAYER_INFO = struct.Struct("<QQI4x")

_SHA256_HEADER = struct.Struct("<32sII")
_SHA256_LAYER = struct.Struct("<QQ")
_SHA256_HEADER_SIZE = _SHA256_HEADER.size + _SHA256_LAYER.size * SHA256_MAX_LAYER_NUM


class TypeId(IntEnum):
    CTR_RomFs = 0x10000
    HAC_RomFs = 0x20000


@dataclass(frozen=True)
class IntegrityLayer:
    """One level of an IVFC hash tree."""

    offset: int
    size: int
    block_size: int


@dataclass
class HierarchicalIntegrityHeader:
    """An IVFC header: the hash tree levels and the master hashes."""

    layers: list[IntegrityLayer] = field(default_factory=list)
    master_hashes: list[bytes] = field(default_factory=list)
    raw: bytes = field(default=b"", compare=False, repr=False)

    @classmethod
    def from_bytes(cls, data: bytes) -> HierarchicalIntegrityHeader:
        """Decode an IVFC header followed by its layer table and master hashes."""
        data = bytes(data)
        if len(data) < _INTEGRITY_HEADER.size:
            raise FormatError("Header too small")

        magic, type_id, master_hash_size, layer_num = _INTEGRITY_HEADER.unpack_from(data)
        if magic != INTEGRITY_STRUCT_MAGIC:
            raise FormatError("Invalid struct magic")
        if type_id != TypeId.HAC_RomFs:
            raise FormatError(f"Unsupported type id ({type_id:x})")
        expected_layers = DEFAULT_LAYER_NUM_FOR_ROMFS + 1
        if layer_num != expected_layers:
            raise FormatError(
                f"Invalid layer count. (actual={layer_num}, expected={expected_layers})"
            )

        master_hash_offset = align(
            _INTEGRITY_HEADER.size + _INTEGRITY_LAYER_INFO.size * layer_num, HEADER_ALIGN_LEN
        )
        total_size = master_hash_offset + master_hash_size
        if len(data) < total_size:
            raise FormatError("Header too small")
        raw = data[:total_size]

        layers = [
            IntegrityLayer(offset & _U32_MASK, size & _U32_MASK, block_size)
            for offset, size, block_size in (
                _INTEGRITY_LAYER_INFO.unpack_from(
                    raw, _INTEGRITY_HEADER.size + index * _INTEGRITY_LAYER_INFO.size
                )
                for index in range(DEFAULT_LAYER_NUM_FOR_ROMFS)
            )
        ]
        hash_count = master_hash_size // _HASH_LEN
        hashes = [
            raw[start : start + _HASH_LEN]
            for start in range(master_hash_offset, master_hash_offset + hash_count * _HASH_LEN, _HASH_LEN)
        ]
        return cls(layers, hashes, raw)


@dataclass(frozen=True)
class Sha256Layer:
    """One level of a hierarchical SHA-256 hash tree."""

    offset: int
    size: int


@dataclass
class HierarchicalSha256Header:
    """A hierarchical SHA-256 header: master hash, block size and levels."""

    master_hash: bytes = bytes(_HASH_LEN)
    hash_block_size: int = 0
    layers: list[Sha256Layer] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> HierarchicalSha256Header:
        """Decode a hierarchical SHA-256 header."""
        data = bytes(data)
        if len(data) < _SHA256_HEADER_SIZE:
            raise FormatError("Header too small")

        master_hash, block_size, layer_num = _SHA256_HEADER.unpack_from(data)
        if layer_num != SHA256_DEFAULT_LAYER_NUM:
            raise FormatError(
                f"Invalid layer count. (actual={layer_num}, expected={SHA256_DEFAULT_LAYER_NUM})"
            )

        layers = [
            Sha256Layer(offset & _U32_MASK, size & _U32_MASK)
            for offset, size in (
                _SHA256_LAYER.unpack_from(data, _SHA256_HEADER.size + index * _SHA256_LAYER.size)
                for index in range(layer_num)
            )
        ]
        return cls(master_hash, block_size, layers)