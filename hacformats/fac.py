"""File system access control (FAC) data and its display names."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .common import FormatError, align

__all__ = [
    "FAC_FORMAT_VERSION",
    "SECTION_ALIGN_SIZE",
    "FS_ACCESS_BIT_COUNT",
    "FsAccessFlag",
    "SaveDataOwnerIdAccessType",
    "SaveDataOwnerId",
    "FileSystemAccessControl",
    "fs_access_flag_name",
    "save_data_owner_access_name",
]

FAC_FORMAT_VERSION = 1
SECTION_ALIGN_SIZE = 4
FS_ACCESS_BIT_COUNT = 64

_HEADER = struct.Struct("<IQIIII")
_HEADER_REGION = align(_HEADER.size, SECTION_ALIGN_SIZE)
_U32 = struct.Struct("<I")
_U64_LEN = 8
_U32_MAX = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF
_TOO_SMALL = "FileSystemAccessControlInfo binary is too small"


class FsAccessFlag(IntEnum):
    ApplicationInfo = 0
    BootModeControl = 1
    Calibration = 2
    SystemSaveData = 3
    GameCard = 4
    SaveDataBackUp = 5
    SaveDataManagement = 6
    BisAllRaw = 7
    GameCardRaw = 8
    GameCardPrivate = 9
    SetTime = 10
    ContentManager = 11
    ImageManager = 12
    CreateSaveData = 13
    SystemSaveDataManagement = 14
    BisFileSystem = 15
    SystemUpdate = 16
    SaveDataMeta = 17
    DeviceSaveData = 18
    SettingsControl = 19
    SystemData = 20
    SdCard = 21
    Host = 22
    FillBis = 23
    CorruptSaveData = 24
    SaveDataForDebug = 25
    FormatSdCard = 26
    GetRightsId = 27
    RegisterExternalKey = 28
    RegisterUpdatePartition = 29
    SaveDataTransfer = 30
    DeviceDetection = 31
    AccessFailureResolution = 32
    SaveDataTransferVersion2 = 33
    RegisterProgramIndexMapInfo = 34
    CreateOwnSaveData = 35
    Debug = 62
    FullPermission = 63


class SaveDataOwnerIdAccessType(IntEnum):
    Read = 1
    Write = 2
    ReadWrite = 3


def _access_type(value: int) -> int:
    try:
        return SaveDataOwnerIdAccessType(int(value))
    except ValueError:
        return int(value)


@dataclass(frozen=True)
class SaveDataOwnerId:
    """A save data owner id together with the access granted to it."""

    access_type: int
    owner_id: int

    def __post_init__(self) -> None:
        if not 0 <= int(self.access_type) <= 0xFF:
            raise ValueError("access_type must fit in 8 bits")
        if not 0 <= self.owner_id <= _U64_MAX:
            raise ValueError("owner_id must fit in 64 bits")
        object.__setattr__(self, "access_type", _access_type(self.access_type))


def _read_u32(raw: bytes, offset: int) -> int:
    try:
        return _U32.unpack_from(raw, offset)[0]
    except struct.error as exc:
        raise FormatError(_TOO_SMALL) from exc


def _read_u64s(raw: bytes, offset: int, count: int) -> tuple[int, ...]:
    try:
        return struct.unpack_from(f"<{count}Q", raw, offset)
    except struct.error as exc:
        raise FormatError(_TOO_SMALL) from exc


@dataclass
class FileSystemAccessControl:
    """File system permissions plus the content and save data owner id lists."""

    format_version: int = 0
    fs_access: int = 0
    content_owner_ids: list[int] = field(default_factory=list)
    save_data_owner_ids: list[SaveDataOwnerId] = field(default_factory=list)
    raw: bytes = field(default=b"", compare=False, repr=False)

    def has_access(self, flag: int) -> bool:
        """Return whether the given access bit is set."""
        return bool((self.fs_access >> int(flag)) & 1)

    def access_flags(self) -> Iterator[int]:
        """Yield every set access bit, as an ``FsAccessFlag`` where one is defined."""
        for bit in range(FS_ACCESS_BIT_COUNT):
            if (self.fs_access >> bit) & 1:
                try:
                    yield FsAccessFlag(bit)
                except ValueError:
                    yield bit

    @classmethod
    def from_bytes(cls, data: bytes) -> FileSystemAccessControl:
        """Decode FAC data: header followed by the owner id sections."""
        data = bytes(data)
        if len(data) < _HEADER.size:
            raise FormatError(_TOO_SMALL)

        version, flags, co_offset, co_size, sd_offset, sd_size = _HEADER.unpack_from(data)
        if version != FAC_FORMAT_VERSION:
            raise FormatError("FileSystemAccessControlInfo format version unsupported")

        total_size = max(co_offset + co_size, sd_offset + sd_size, _HEADER_REGION)
        if len(data) < total_size:
            raise FormatError(_TOO_SMALL)
        raw = data[:total_size]

        content_ids: list[int] = []
        if co_size > 0:
            count = _read_u32(raw, co_offset)
            content_ids = list(_read_u64s(raw, co_offset + _U32.size, count))

        save_ids: list[SaveDataOwnerId] = []
        if sd_size > 0:
            count = _read_u32(raw, sd_offset)
            access_start = sd_offset + _U32.size
            access_bytes = raw[access_start : access_start + count]
            if len(access_bytes) < count:
                raise FormatError(_TOO_SMALL)
            ids = _read_u64s(raw, access_start + align(count, SECTION_ALIGN_SIZE), count)
            save_ids = [
                SaveDataOwnerId(access, owner_id) for access, owner_id in zip(access_bytes, ids)
            ]

        return cls(version, flags, content_ids, save_ids, raw)

    def to_bytes(self) -> bytes:
        """Encode this FAC data."""
        if not 0 <= self.format_version <= _U32_MAX:
            raise ValueError("format_version must fit in 32 bits")
        if not 0 <= self.fs_access <= _U64_MAX:
            raise ValueError("fs_access must fit in 64 bits")
        for owner_id in self.content_owner_ids:
            if not 0 <= owner_id <= _U64_MAX:
                raise ValueError("content owner ids must fit in 64 bits")

        content_count = len(self.content_owner_ids)
        save_count = len(self.save_data_owner_ids)

        content_offset = _HEADER_REGION
        content_size = _U32.size + content_count * _U64_LEN if content_count else 0
        save_offset = content_offset + (
            align(content_size, SECTION_ALIGN_SIZE) if content_size else 0
        )
        save_size = (
            _U32.size + align(save_count, SECTION_ALIGN_SIZE) + save_count * _U64_LEN
            if save_count
            else 0
        )
        total_size = max(content_offset + content_size, save_offset + save_size, _HEADER_REGION)

        buffer = bytearray(total_size)
        _HEADER.pack_into(
            buffer,
            0,
            self.format_version,
            self.fs_access,
            content_offset,
            content_size,
            save_offset,
            save_size,
        )

        if content_count:
            _U32.pack_into(buffer, content_offset, content_count)
            struct.pack_into(
                f"<{content_count}Q",
                buffer,
                content_offset + _U32.size,
                *self.content_owner_ids,
            )

        if save_count:
            _U32.pack_into(buffer, save_offset, save_count)
            access_start = save_offset + _U32.size
            buffer[access_start : access_start + save_count] = bytes(
                int(entry.access_type) for entry in self.save_data_owner_ids
            )
            struct.pack_into(
                f"<{save_count}Q",
                buffer,
                access_start + align(save_count, SECTION_ALIGN_SIZE),
                *(entry.owner_id for entry in self.save_data_owner_ids),
            )

        return bytes(buffer)


def _name(enum_type: type[Enum], value: int) -> str:
    try:
        return enum_type(int(value)).name
    except ValueError:
        return f"unk_0x{int(value):02x}"


def fs_access_flag_name(flag: int) -> str:
    """Return the display name of a file system access flag."""
    return _name(FsAccessFlag, flag)


def save_data_owner_access_name(value: int) -> str:
    """Return the display name of a save data owner access type."""
    return _name(SaveDataOwnerIdAccessType, value)