# hacformats

A library for reading, and in some cases writing, the binary structures found
in console system files. Every structure is a plain Python object: decode raw
bytes with the class's `from_bytes()` classmethod and, where the format can be
written, encode it again with `to_bytes()`. Bad or truncated input raises
`hacformats.common.FormatError`, which is a subclass of `ValueError`.

## Modules

| Module | What it holds | Writes? |
| --- | --- | --- |
| `hacformats.common` | `FormatError`, `struct_magic_u32()`, `struct_magic_u64()`, `align()` | n/a |
| `hacformats.kc` | Kernel capability enums (`KernelCapId`, `SystemCallId`, `ProgramType`, `MiscFlagsBit`, `MemoryPermission`, `MappingType`, `RegionType`) and name helpers such as `system_call_name()` | n/a |
| `hacformats.kernel_capability` | `KernelCapabilityEntry`, `HandleTableSizeEntry`, `HandleTableSizeHandler`, `InterruptEntry`, `InterruptHandler` | yes, as capability words |
| `hacformats.cnmt` | Content meta enums, `ContentMetaInfo`, `DeltaMetaExtendedHeader`, name helpers, `version_string()` | yes |
| `hacformats.integrity` | `HierarchicalIntegrityHeader` (IVFC) and `HierarchicalSha256Header` | read only |
| `hacformats.ini` | `IniHeader` (INI1) | yes |
| `hacformats.fac` | `FileSystemAccessControl`, `SaveDataOwnerId`, `FsAccessFlag`, `SaveDataOwnerIdAccessType` and name helpers | yes |
| `hacformats.gamecard` | `GameCardHeader`, `header_aes_iv()`, `decrypt_header()`, card enums and name helpers | read only |

## Installation

```
pip install hacformats
```

With the test tools:

```
pip install "hacformats[test]"
```

## Usage

### Kernel capabilities

A 32-bit capability word encodes its type as the number of low one-bits. Decode
it into a `KernelCapabilityEntry`, then into a typed entry:

```python
from hacformats.kernel_capability import (
    HandleTableSizeEntry, InterruptHandler, KernelCapabilityEntry,
)

entry = KernelCapabilityEntry.from_cap(0x0200_7FFF)   # type HandleTableSize
size = HandleTableSizeEntry.from_capability(entry)
print(size.size)                                      # 512
print(hex(size.to_capability().to_cap()))             # 0x2007fff

handler = InterruptHandler()
handler.set_interrupts([1, 2, 3])
words = [cap.to_cap() for cap in handler.export_capabilities()]
```

`HandleTableSizeEntry` accepts sizes from 0 to 1023 and `InterruptEntry`
interrupt numbers from 0 to 1023; anything else raises `ValueError`. Passing a
capability of the wrong type to `from_capability()` raises `FormatError`, as
does a repeated interrupt in `InterruptHandler`.

### Content metadata records

```python
from hacformats.cnmt import ContentMetaInfo, ContentMetaType, version_string

info = ContentMetaInfo(title_id=0x0100000000001000, title_version=0x04000000,
                       type=ContentMetaType.SystemData)
raw = info.to_bytes()                     # 16 bytes
assert ContentMetaInfo.from_bytes(raw) == info
print(version_string(info.title_version))  # 1.0.0-0.0
```

Name helpers such as `content_meta_type_name()` and `storage_id_name()` return
the member name, or `unk_0x..` for values they do not know.

### INI1 headers

```python
from hacformats.ini import IniHeader

raw = IniHeader(size=0x1000, kip_num=3).to_bytes()
print(IniHeader.from_bytes(raw).kip_num)  # 3
```

More than `MAX_KIP_NUM` (0x50) KIPs is rejected both ways.

### File-system access control

```python
from hacformats.fac import (
    FileSystemAccessControl, FsAccessFlag, SaveDataOwnerId, SaveDataOwnerIdAccessType,
)

fac = FileSystemAccessControl(
    format_version=1,
    fs_access=1 << FsAccessFlag.SdCard,
    content_owner_ids=[0x0100000000002000],
    save_data_owner_ids=[SaveDataOwnerId(SaveDataOwnerIdAccessType.Read, 0x0100000000003000)],
)
parsed = FileSystemAccessControl.from_bytes(fac.to_bytes())
print(parsed.has_access(FsAccessFlag.SdCard), list(parsed.access_flags()))
```

`from_bytes()` only accepts format version 1.

### Integrity headers

`HierarchicalIntegrityHeader.from_bytes()` accepts an IVFC header of type
`TypeId.HAC_RomFs` with seven layer entries and returns the first six layers
(`IntegrityLayer`) and the master hashes. `HierarchicalSha256Header.from_bytes()`
requires a layer count of two and returns the master hash, hash block size and
two `Sha256Layer` entries.

### Game-card headers

`GameCardHeader.from_bytes()` parses a 0x100-byte header whose extended part is
already in plain text. `decrypt_header(header_bytes, key)` decrypts that part
with AES-128-CBC using a 16-byte key you supply and the IV returned by
`header_aes_iv()`, which is stored byte-reversed in the header:

```python
from hacformats.gamecard import GameCardHeader, decrypt_header, rom_size_name

header = GameCardHeader.from_bytes(decrypt_header(raw_header, header_key))
print(rom_size_name(header.rom_size), hex(header.package_id))
```

## What this package does not do

- It decodes individual records and headers only. It does not parse a whole
  content meta file (header, content info list, extended data and digest), nor
  the full kernel capability list of a program descriptor: only the
  handle-table-size and interrupt capabilities have typed entries.
- It does not write integrity or game-card headers.
- It ships no keys; decrypting a game-card header needs a key from elsewhere.
- It has no command-line tool and does not open files itself: pass it bytes.

## Running the tests

```
pytest
```