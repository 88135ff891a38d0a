import pytest

from hacformats.kc import (
    MAX_SYSTEM_CALL_ID,
    MAX_SYSTEM_CALL_NUM,
    KernelCapId,
    MappingType,
    MemoryPermission,
    MiscFlagsBit,
    ProgramType,
    SystemCallId,
    mapping_type_name,
    memory_permission_name,
    misc_flags_bit_name,
    program_type_name,
    system_call_name,
)


def test_kernel_cap_ids_fixed_by_format():
    assert KernelCapId(3) is KernelCapId.ThreadInfo
    assert KernelCapId(15) is KernelCapId.HandleTableSize
    assert KernelCapId(32) is KernelCapId.Stubbed


def test_system_call_limits():
    assert MAX_SYSTEM_CALL_ID == MAX_SYSTEM_CALL_NUM - 1
    assert system_call_name(max(SystemCallId)) == "CallSecureMonitor"
    assert system_call_name(MAX_SYSTEM_CALL_ID) == "syscall_id_bf"


def test_misc_flags_names():
    assert misc_flags_bit_name(MiscFlagsBit.EnableDebug) == "EnableDebug"
    assert misc_flags_bit_name(MiscFlagsBit.ForceDebug) == "ForceDebug"


def test_program_type_names():
    assert program_type_name(ProgramType.System) == "System"
    assert program_type_name(ProgramType.Application) == "Application"
    assert program_type_name(2) == "Applet"


def test_program_type_unknown():
    assert program_type_name(7) == "unk_0x07"


def test_memory_permission_names():
    assert memory_permission_name(MemoryPermission.Rw) == "Rw"
    assert memory_permission_name(MemoryPermission.Ro) == "Ro"


def test_mapping_type_names():
    assert mapping_type_name(MappingType.Io) == "Io"
    assert mapping_type_name(MappingType.Static) == "Static"


def test_unknown_names_use_hex_prefix():
    assert misc_flags_bit_name(0x1F).startswith("unk_0x")
    assert mapping_type_name(0xAB).endswith("ab")


@pytest.mark.parametrize(
    "syscall, expected",
    [
        (SystemCallId.Unknown0, "Unknown0"),
        (SystemCallId.SetHeapSize, "SetHeapSize"),
        (SystemCallId.ChangeKernelTraceState, "ChangeKernelTraceState"),
        (SystemCallId.CallSecureMonitor, "CallSecureMonitor"),
        (41, "GetInfo"),
    ],
)
def test_system_call_names(syscall, expected):
    assert system_call_name(syscall) == expected


def test_system_call_unknown():
    assert system_call_name(0x80) == "syscall_id_80"


def test_system_call_names_are_distinct_and_known():
    names = [system_call_name(sid) for sid in SystemCallId]
    assert len(set(names)) == len(names) == 128
    assert not any(n.startswith("syscall_id_") for n in names)


def test_out_of_range_enum_value_is_unknown():
    for value in range(128, MAX_SYSTEM_CALL_NUM):
        assert system_call_name(value).startswith("syscall_id_")