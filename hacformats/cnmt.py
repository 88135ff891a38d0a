"""Content meta enumerations, records and display names."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum

from .common import FormatError

__all__ = [
    "ContentType",
    "ContentMetaType",
    "UpdateType",
    "ContentInstallType",
    "StorageId",
    "ContentMetaAttributeFlag",
    "InstallStateFlag",
    "CONTENT_ID_LEN",
    "DIGEST_LEN",
    "ContentMetaInfo",
    "DeltaMetaExtendedHeader",
    "content_type_name",
    "content_meta_type_name",
    "update_type_name",
    "content_install_type_name",
    "storage_id_name",
    "content_meta_attribute_flag_name",
    "version_string",
]


class ContentType(IntEnum):
    Meta = 0
    Program = 1
    Data = 2
    Control = 3
    HtmlDocument = 4
    LegalInformation = 5
    DeltaFragment = 6


class ContentMetaType(IntEnum):
    SystemProgram = 1
    SystemData = 2
    SystemUpdate = 3
    BootImagePackage = 4
    BootImagePackageSafe = 5
    Application = 0x80
    Patch = 0x81
    AddOnContent = 0x82
    Delta = 0x83


class UpdateType(IntEnum):
    ApplyAsDelta = 0
    Overwrite = 1
    Create = 2


class ContentInstallType(IntEnum):
    Full = 0
    FragmentOnly = 1


class StorageId(IntEnum):
    None_ = 0
    Host = 1
    GameCard = 2
    BuiltInSystem = 3
    BuiltInUser = 4
    SdCard = 5
    Any = 6


class ContentMetaAttributeFlag(IntEnum):
    IncludesExFatDriver = 0
    Rebootless = 1
    Compacted = 2


class InstallStateFlag(IntEnum):
    Committed = 0


CONTENT_ID_LEN = 0x10
DIGEST_LEN = 0x20

_CONTENT_META_INFO = struct.Struct("<QIBB2x")
_DELTA_META_EXTENDED_HEADER = struct.Struct("<QI4x")


def _check_range(name: str, value: int, bits: int) -> None:
    if not 0 <= int(value) < (1 << bits):
        raise ValueError(f"{name} must fit in {bits} bits")


def _meta_type(value: int) -> int:
    try:
        return ContentMetaType(int(value))
    except ValueError:
        return int(value)


@dataclass
class ContentMetaInfo:
    """A reference to another content meta: id, version, type and attributes."""

    title_id: int = 0
    title_version: int = 0
    type: int = ContentMetaType.Application
    attribute: int = 0

    SIZE = _CONTENT_META_INFO.size

    def __post_init__(self) -> None:
        _check_range("title_id", self.title_id, 64)
        _check_range("title_version", self.title_version, 32)
        _check_range("type", self.type, 8)
        _check_range("attribute", self.attribute, 8)
        self.type = _meta_type(self.type)

    def has_attribute(self, flag: ContentMetaAttributeFlag) -> bool:
        """Return whether the given attribute bit is set."""
        return bool((self.attribute >> int(flag)) & 1)

    @classmethod
    def from_bytes(cls, data: bytes) -> ContentMetaInfo:
        """Decode a content meta info record."""
        if len(data) < cls.SIZE:
            raise FormatError("ContentMetaInfo too small")
        title_id, version, meta_type, attribute = _CONTENT_META_INFO.unpack_from(data)
        return cls(title_id, version, meta_type, attribute)

    def to_bytes(self) -> bytes:
        """Encode this record."""
        return _CONTENT_META_INFO.pack(
            self.title_id, self.title_version, int(self.type), self.attribute
        )


@dataclass
class DeltaMetaExtendedHeader:
    """Extended header of a Delta content meta."""

    application_id: int = 0
    extended_data_size: int = 0

    SIZE = _DELTA_META_EXTENDED_HEADER.size

    def __post_init__(self) -> None:
        _check_range("application_id", self.application_id, 64)
        _check_range("extended_data_size", self.extended_data_size, 32)

    @classmethod
    def from_bytes(cls, data: bytes) -> DeltaMetaExtendedHeader:
        """Decode a delta meta extended header."""
        if len(data) < cls.SIZE:
            raise FormatError("DeltaMetaExtendedHeader too small")
        application_id, size = _DELTA_META_EXTENDED_HEADER.unpack_from(data)
        return cls(application_id, size)

    def to_bytes(self) -> bytes:
        """Encode this header."""
        return _DELTA_META_EXTENDED_HEADER.pack(self.application_id, self.extended_data_size)


def _name(enum_type: type[Enum], value: int, names: dict | None = None) -> str:
    try:
        member = enum_type(int(value))
    except ValueError:
        return f"unk_0x{int(value):02x}"
    if names and member in names:
        return names[member]
    return member.name


def content_type_name(value: int) -> str:
    """Return the display name of a content type."""
    return _name(ContentType, value)


def content_meta_type_name(value: int) -> str:
    """Return the display name of a content meta type."""
    return _name(ContentMetaType, value)


def update_type_name(value: int) -> str:
    """Return the display name of an update type."""
    return _name(UpdateType, value)


def content_install_type_name(value: int) -> str:
    """Return the display name of a content install type."""
    return _name(ContentInstallType, value)


def storage_id_name(value: int) -> str:
    """Return the display name of a storage id."""
    return _name(StorageId, value, {StorageId.None_: "None"})


def content_meta_attribute_flag_name(value: int) -> str:
    """Return the display name of a content meta attribute flag."""
    return _name(ContentMetaAttributeFlag, value)


def version_string(version: int) -> str:
    """Format a packed title version as ``major.minor.micro-major_relstep.minor_relstep``."""
    version = int(version)
    return (
        f"{(version >> 26) & 0x3F}.{(version >> 20) & 0x3F}.{(version >> 16) & 0xF}"
        f"-{(version >> 8) & 0xFF}.{version & 0xFF}"
    )