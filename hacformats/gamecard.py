"""Game card (XCI) header: parsing, header decryption and display names."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .common import FormatError, struct_magic_u32

__all__ = [
    "GC_HEADER_STRUCT_MAGIC",
    "HEADER_SIZE",
    "HEADER_ENC_OFFSET",
    "HEADER_ENC_SIZE",
    "PAGE_SIZE",
    "UPP_HASH_LEN",
    "UPDATE_PARTITION",
    "LOGO_PARTITION",
    "NORMAL_PARTITION",
    "SECURE_PARTITION",
    "KekIndex",
    "RomSize",
    "HeaderFlags",
    "FwVersion",
    "CardClockRate",
    "CompatibilityType",
    "GameCardHeader",
    "header_aes_iv",
    "decrypt_header",
    "kek_index_name",
    "rom_size_name",
    "header_flag_name",
    "fw_version_description",
    "clock_rate_name",
    "compatibility_type_name",
]

GC_HEADER_STRUCT_MAGIC = struct_magic_u32("HEAD")
HEADER_SIZE = 0x100
HEADER_ENC_OFFSET = 0x90
HEADER_ENC_SIZE = 0x70
PAGE_SIZE = 0x200
UPP_HASH_LEN = 8
_AES_BLOCK_SIZE = 16
_AES_IV_OFFSET = 0x20
_AES_128_KEY_SIZE = 16

UPDATE_PARTITION = "update"
LOGO_PARTITION = "logo"
NORMAL_PARTITION = "normal"
SECURE_PARTITION = "secure"

_MAIN = struct.Struct("<IIIBBBBQI4x16sQQ32s32sIIII")
_EXTENDED = struct.Struct("<QIIIIIIIB3x8sQ56x")


class KekIndex(IntEnum):
    PROD = 0
    DEV = 1


class RomSize(IntEnum):
    SIZE_1GB = 0xFA
    SIZE_2GB = 0xF8
    SIZE_4GB = 0xF0
    SIZE_8GB = 0xE0
    SIZE_16GB = 0xE1
    SIZE_32GB = 0xE2


class HeaderFlags(IntEnum):
    AUTOBOOT = 0
    HISTORY_ERASE = 1
    REPAIR_TIME_REVISOR_TOOL = 2
    ALLOW_CUP_TO_CHINA = 3
    ALLOW_CUP_TO_GLOBAL = 4


class FwVersion(IntEnum):
    DEV = 0
    PROD = 1
    PROD_SINCE_4_0_0NUP = 2


class CardClockRate(IntEnum):
    RATE_25 = 10551312
    RATE_50 = 10551313


class CompatibilityType(IntEnum):
    GLOBAL = 0
    CHINA = 1


@dataclass
class GameCardHeader:
    """The decoded fields of a 0x100-byte game card header."""

    rom_area_start_page: int = 0
    backup_area_start_page: int = 0
    kek_index: int = 0
    title_key_dec_index: int = 0
    rom_size: int = 0
    card_header_version: int = 0
    flags: int = 0
    package_id: int = 0
    valid_data_end_page: int = 0
    aes_cbc_iv: bytes = bytes(_AES_BLOCK_SIZE)
    partition_fs_address: int = 0
    partition_fs_size: int = 0
    partition_fs_hash: bytes = bytes(32)
    initial_data_hash: bytes = bytes(32)
    sel_sec: int = 0
    sel_t1_key: int = 0
    sel_key: int = 0
    lim_area_page: int = 0
    fw_version: int = 0
    acc_ctrl_1: int = 0
    wait_1_time_read: int = 0
    wait_2_time_read: int = 0
    wait_1_time_write: int = 0
    wait_2_time_write: int = 0
    fw_mode: int = 0
    upp_version: int = 0
    compatibility_type: int = 0
    upp_hash: bytes = bytes(UPP_HASH_LEN)
    upp_id: int = 0
    raw: bytes = field(default=b"", compare=False, repr=False)

    def has_flag(self, flag: int) -> bool:
        """Return whether the given header flag bit is set."""
        return bool((self.flags >> int(flag)) & 1)

    @classmethod
    def from_bytes(cls, data: bytes) -> GameCardHeader:
        """Decode a game card header whose extended part is already decrypted."""
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise FormatError("GameCardImage header size is too small")
        raw = data[:HEADER_SIZE]

        (
            magic,
            rom_area_start_page,
            backup_area_start_page,
            key_flag,
            rom_size,
            card_header_version,
            flags,
            package_id,
            valid_data_end_page,
            iv,
            pfs_address,
            pfs_size,
            pfs_hash,
            initial_data_hash,
            sel_sec,
            sel_t1_key,
            sel_key,
            lim_area,
        ) = _MAIN.unpack_from(raw)
        if magic != GC_HEADER_STRUCT_MAGIC:
            raise FormatError("GameCardImage header corrupt")

        (
            fw_version,
            acc_ctrl_1,
            wait_1_time_read,
            wait_2_time_read,
            wait_1_time_write,
            wait_2_time_write,
            fw_mode,
            upp_version,
            compatibility_type,
            upp_hash,
            upp_id,
        ) = _EXTENDED.unpack_from(raw, HEADER_ENC_OFFSET)

        return cls(
            rom_area_start_page=rom_area_start_page,
            backup_area_start_page=backup_area_start_page,
            kek_index=key_flag & 7,
            title_key_dec_index=(key_flag >> 4) & 7,
            rom_size=rom_size,
            card_header_version=card_header_version,
            flags=flags,
            package_id=package_id,
            valid_data_end_page=valid_data_end_page,
            aes_cbc_iv=iv[::-1],
            partition_fs_address=pfs_address,
            partition_fs_size=pfs_size,
            partition_fs_hash=pfs_hash,
            initial_data_hash=initial_data_hash,
            sel_sec=sel_sec,
            sel_t1_key=sel_t1_key,
            sel_key=sel_key,
            lim_area_page=lim_area,
            fw_version=fw_version,
            acc_ctrl_1=acc_ctrl_1,
            wait_1_time_read=wait_1_time_read,
            wait_2_time_read=wait_2_time_read,
            wait_1_time_write=wait_1_time_write,
            wait_2_time_write=wait_2_time_write,
            fw_mode=fw_mode,
            upp_version=upp_version,
            compatibility_type=compatibility_type,
            upp_hash=upp_hash,
            upp_id=upp_id,
            raw=raw,
        )


def _require_header(header_bytes: bytes) -> bytes:
    header_bytes = bytes(header_bytes)
    if len(header_bytes) < HEADER_SIZE:
        raise FormatError("GameCardImage header size is too small")
    return header_bytes


def header_aes_iv(header_bytes: bytes) -> bytes:
    """Return the AES-CBC IV of a header; it is stored byte-reversed."""
    header_bytes = _require_header(header_bytes)
    return header_bytes[_AES_IV_OFFSET : _AES_IV_OFFSET + _AES_BLOCK_SIZE][::-1]


def decrypt_header(header_bytes: bytes, key: bytes) -> bytes:
    """Return the header with its extended part decrypted using AES-128-CBC."""
    header_bytes = _require_header(header_bytes)
    key = bytes(key)
    if len(key) != _AES_128_KEY_SIZE:
        raise ValueError("header key must be 16 bytes")
    decryptor = Cipher(algorithms.AES(key), modes.CBC(header_aes_iv(header_bytes))).decryptor()
    end = HEADER_ENC_OFFSET + HEADER_ENC_SIZE
    plain = decryptor.update(header_bytes[HEADER_ENC_OFFSET:end]) + decryptor.finalize()
    return header_bytes[:HEADER_ENC_OFFSET] + plain + header_bytes[end:]


def _lookup(names: dict[int, str], value: int, width: int = 2) -> str:
    value = int(value)
    try:
        return names[value]
    except KeyError:
        return f"unk_0x{value:0{width}x}"


_KEK_NAMES = {KekIndex.PROD: "Production", KekIndex.DEV: "Development"}
_ROM_SIZE_NAMES = {
    RomSize.SIZE_1GB: "1GB",
    RomSize.SIZE_2GB: "2GB",
    RomSize.SIZE_4GB: "4GB",
    RomSize.SIZE_8GB: "8GB",
    RomSize.SIZE_16GB: "16GB",
    RomSize.SIZE_32GB: "32GB",
}
_FLAG_NAMES = {
    HeaderFlags.AUTOBOOT: "AutoBoot",
    HeaderFlags.HISTORY_ERASE: "HistoryErase",
    HeaderFlags.REPAIR_TIME_REVISOR_TOOL: "RepairTimeRevisorTool",
    HeaderFlags.ALLOW_CUP_TO_CHINA: "AllowCupToChina",
    HeaderFlags.ALLOW_CUP_TO_GLOBAL: "AllowCupToGlobal",
}
_FW_NAMES = {
    FwVersion.DEV: "ForDevelopment",
    FwVersion.PROD: "1.0.0+",
    FwVersion.PROD_SINCE_4_0_0NUP: "4.0.0+",
}
_CLOCK_NAMES = {CardClockRate.RATE_25: "20 MHz", CardClockRate.RATE_50: "50 MHz"}
_COMPAT_NAMES = {CompatibilityType.GLOBAL: "Global", CompatibilityType.CHINA: "China"}


def kek_index_name(value: int) -> str:
    """Return the display name of a KEK index."""
    return _lookup(_KEK_NAMES, value)


def rom_size_name(value: int) -> str:
    """Return the display name of a ROM size type."""
    return _lookup(_ROM_SIZE_NAMES, value)


def header_flag_name(value: int) -> str:
    """Return the display name of a header flag bit."""
    return _lookup(_FLAG_NAMES, value)


def fw_version_description(value: int) -> str:
    """Return a description of a card firmware version."""
    return _lookup(_FW_NAMES, value, 16)


def clock_rate_name(value: int) -> str:
    """Return the display name of a card clock rate."""
    return _lookup(_CLOCK_NAMES, value, 8)


def compatibility_type_name(value: int) -> str:
    """Return the display name of a region compatibility type."""
    return _lookup(_COMPAT_NAMES, value)