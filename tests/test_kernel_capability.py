import pytest

from hacformats.common import FormatError
from hacformats.kc import KernelCapId
from hacformats.kernel_capability import (
    INTERRUPT_MAX,
    MAX_HANDLE_TABLE_SIZE,
    HandleTableSizeEntry,
    HandleTableSizeHandler,
    InterruptEntry,
    InterruptHandler,
    KernelCapabilityEntry,
)


def test_all_ones_word_is_stubbed():
    entry = KernelCapabilityEntry.from_cap(0xFFFFFFFF)
    assert entry.type == KernelCapId.Stubbed
    assert entry.to_cap() == 0xFFFFFFFF


def test_type_is_lowest_clear_bit():
    assert KernelCapabilityEntry.from_cap(0b0111).type == KernelCapId.ThreadInfo


def test_all_low_bits_set_without_top_bit_is_invalid():
    assert KernelCapabilityEntry.from_cap(0x7FFFFFFF).type == KernelCapId.Invalid


@pytest.mark.parametrize(
    "cap_type, field",
    [
        (KernelCapId.ThreadInfo, 0x1234),
        (KernelCapId.EnableSystemCalls, 0x3FF),
        (KernelCapId.MemoryMap, 0x12345),
        (KernelCapId.HandleTableSize, 1000),
        (KernelCapId.MiscFlags, 3),
    ],
)
def test_entry_round_trip(cap_type, field):
    entry = KernelCapabilityEntry(cap_type, field)
    decoded = KernelCapabilityEntry.from_cap(entry.to_cap())
    assert decoded == entry
    assert decoded.type == cap_type
    assert decoded.field == field


def test_unknown_type_round_trips_as_int():
    decoded = KernelCapabilityEntry.from_cap(0b01)
    assert decoded.type == 1
    assert KernelCapabilityEntry.from_cap(decoded.to_cap()) == decoded


def test_field_is_masked_to_type_width():
    entry = KernelCapabilityEntry(KernelCapId.MiscFlags, 1 << 20)
    assert entry.field == 0


def test_handle_table_size_limits():
    assert HandleTableSizeEntry(MAX_HANDLE_TABLE_SIZE).size == MAX_HANDLE_TABLE_SIZE
    with pytest.raises(ValueError):
        HandleTableSizeEntry(MAX_HANDLE_TABLE_SIZE + 1)


def test_handle_table_size_capability_round_trip():
    entry = HandleTableSizeEntry(512)
    cap = entry.to_capability()
    assert cap.type == KernelCapId.HandleTableSize
    assert HandleTableSizeEntry.from_capability(KernelCapabilityEntry.from_cap(cap.to_cap())) == entry


def test_handle_table_size_rejects_wrong_type():
    with pytest.raises(FormatError):
        HandleTableSizeEntry.from_capability(KernelCapabilityEntry(KernelCapId.MiscFlags, 1))


def test_handle_table_handler_round_trip():
    handler = HandleTableSizeHandler()
    handler.handle_table_size = 256
    assert handler.is_set
    other = HandleTableSizeHandler()
    other.import_capabilities(handler.export_capabilities())
    assert other == handler
    assert other.handle_table_size == 256


def test_handle_table_handler_unset_exports_nothing():
    handler = HandleTableSizeHandler()
    handler.import_capabilities([])
    assert handler.is_set is False
    assert handler.export_capabilities() == []


def test_handle_table_handler_too_many():
    caps = [HandleTableSizeEntry(1).to_capability(), HandleTableSizeEntry(2).to_capability()]
    with pytest.raises(FormatError):
        HandleTableSizeHandler().import_capabilities(caps)


def test_handle_table_handler_clear():
    handler = HandleTableSizeHandler()
    handler.handle_table_size = 7
    handler.clear()
    assert handler == HandleTableSizeHandler()


def test_interrupt_entry_limits_and_indexing():
    entry = InterruptEntry(4, 9)
    assert (entry[0], entry[1], entry[2]) == (4, 9, 4)
    with pytest.raises(ValueError):
        InterruptEntry(INTERRUPT_MAX + 1, 0)


def test_interrupt_entry_capability_round_trip():
    entry = InterruptEntry(INTERRUPT_MAX, 17)
    cap = entry.to_capability()
    assert cap.type == KernelCapId.EnableInterrupts
    assert InterruptEntry.from_capability(KernelCapabilityEntry.from_cap(cap.to_cap())) == entry


def test_interrupt_entry_rejects_wrong_type():
    with pytest.raises(FormatError):
        InterruptEntry.from_capability(KernelCapabilityEntry(KernelCapId.HandleTableSize, 1))


@pytest.mark.parametrize(
    "interrupts",
    [[1, 2, 3], [2, 3], [5, INTERRUPT_MAX], [INTERRUPT_MAX, 5], [7]],
)
def test_interrupt_handler_round_trip(interrupts):
    handler = InterruptHandler()
    handler.set_interrupts(interrupts)
    other = InterruptHandler()
    other.import_capabilities(handler.export_capabilities())
    assert other.interrupts == interrupts
    assert other == handler


def test_interrupt_handler_odd_list_puts_single_first():
    handler = InterruptHandler()
    handler.set_interrupts([1, 2, 3])
    caps = handler.export_capabilities()
    assert [InterruptEntry.from_capability(c) for c in caps] == [
        InterruptEntry(1, 0),
        InterruptEntry(2, 3),
    ]


def test_interrupt_handler_adds_stub_after_max():
    handler = InterruptHandler()
    handler.set_interrupts([5, INTERRUPT_MAX])
    entries = [InterruptEntry.from_capability(c) for c in handler.export_capabilities()]
    assert entries == [InterruptEntry(5, INTERRUPT_MAX), InterruptEntry(INTERRUPT_MAX, INTERRUPT_MAX)]


def test_interrupt_handler_rejects_duplicates():
    with pytest.raises(FormatError):
        InterruptHandler().set_interrupts([4, 4])
    caps = [InterruptEntry(4, 5).to_capability(), InterruptEntry(5, 6).to_capability()]
    with pytest.raises(FormatError):
        InterruptHandler().import_capabilities(caps)


def test_interrupt_handler_unset_and_clear():
    handler = InterruptHandler()
    assert handler.export_capabilities() == []
    handler.set_interrupts([3])
    handler.clear()
    assert handler.is_set is False
    assert handler.interrupts == []