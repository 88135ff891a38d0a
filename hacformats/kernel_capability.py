"""Kernel capability words and the handle-table-size and interrupt capabilities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field as dc_field

from .common import FormatError
from .kc import KernelCapId

__all__ = [
    "KernelCapabilityEntry",
    "HandleTableSizeEntry",
    "HandleTableSizeHandler",
    "InterruptEntry",
    "InterruptHandler",
    "MAX_HANDLE_TABLE_SIZE",
    "INTERRUPT_BITS",
    "INTERRUPT_MAX",
]

_U32_MASK = 0xFFFFFFFF
_TYPE_SEARCH_BITS = 31


def _normalise_type(value: int) -> int:
    value = int(value)
    if value < 0:
        raise ValueError("kernel capability type must not be negative")
    try:
        return KernelCapId(value)
    except ValueError:
        return value


def _field_shift(cap_type: int) -> int:
    return cap_type + 1


def _field_mask(cap_type: int) -> int:
    if cap_type >= _TYPE_SEARCH_BITS:
        return 0
    return (1 << (31 - cap_type)) - 1


def _cap_mask(cap_type: int) -> int:
    return (1 << cap_type) - 1


def _cap_type(cap: int) -> int:
    for bit in range(_TYPE_SEARCH_BITS):
        if not (cap >> bit) & 1:
            return _normalise_type(bit)
    if cap == _U32_MASK:
        return KernelCapId.Stubbed
    return KernelCapId.Invalid


@dataclass(frozen=True)
class KernelCapabilityEntry:
    """One 32-bit kernel capability word, split into its type and field."""

    type: int = KernelCapId.Invalid
    field: int = 0

    def __post_init__(self) -> None:
        cap_type = _normalise_type(self.type)
        object.__setattr__(self, "type", cap_type)
        object.__setattr__(self, "field", int(self.field) & _field_mask(cap_type))

    @classmethod
    def from_cap(cls, cap: int) -> KernelCapabilityEntry:
        """Decode a raw capability word."""
        cap = int(cap) & _U32_MASK
        cap_type = _cap_type(cap)
        if cap_type == KernelCapId.Stubbed:
            return cls(cap_type, 0)
        return cls(cap_type, (cap >> _field_shift(cap_type)) & _field_mask(cap_type))

    def to_cap(self) -> int:
        """Encode this entry as a raw capability word."""
        if self.type == KernelCapId.Stubbed:
            return _U32_MASK
        word = (self.field << _field_shift(self.type)) | _cap_mask(self.type)
        return word & _U32_MASK


def _require_type(cap: KernelCapabilityEntry, expected: KernelCapId, label: str) -> None:
    if cap.type != expected:
        raise FormatError(f"KernelCapabilityEntry is not type '{label}'")


MAX_HANDLE_TABLE_SIZE = 1023
_HANDLE_TABLE_SIZE_BITS = 10


@dataclass(frozen=True)
class HandleTableSizeEntry:
    """The HandleTableSize kernel capability."""

    size: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.size <= MAX_HANDLE_TABLE_SIZE:
            raise ValueError(
                f"Illegal HandleTableSize. (range: 0-{MAX_HANDLE_TABLE_SIZE} inclusive)"
            )

    @classmethod
    def from_capability(cls, cap: KernelCapabilityEntry) -> HandleTableSizeEntry:
        """Build the entry from a HandleTableSize capability."""
        _require_type(cap, KernelCapId.HandleTableSize, "HandleTableSize")
        return cls(cap.field & ((1 << _HANDLE_TABLE_SIZE_BITS) - 1))

    def to_capability(self) -> KernelCapabilityEntry:
        """Return the capability that encodes this entry."""
        return KernelCapabilityEntry(KernelCapId.HandleTableSize, self.size)


@dataclass
class HandleTableSizeHandler:
    """Holds at most one HandleTableSize capability."""

    is_set: bool = False
    entry: HandleTableSizeEntry = dc_field(default_factory=HandleTableSizeEntry)

    _MAX_CAPS = 1

    @property
    def handle_table_size(self) -> int:
        return self.entry.size

    @handle_table_size.setter
    def handle_table_size(self, size: int) -> None:
        self.entry = HandleTableSizeEntry(size)
        self.is_set = True

    def import_capabilities(self, caps: Sequence[KernelCapabilityEntry]) -> None:
        """Take the handle table size from a list of HandleTableSize capabilities."""
        if len(caps) > self._MAX_CAPS:
            raise FormatError("Too many kernel capabilities")
        if not caps:
            return
        self.entry = HandleTableSizeEntry.from_capability(caps[0])
        self.is_set = True

    def export_capabilities(self) -> list[KernelCapabilityEntry]:
        """Return the capabilities describing this handler, empty when unset."""
        if not self.is_set:
            return []
        return [self.entry.to_capability()]

    def clear(self) -> None:
        self.is_set = False
        self.entry = HandleTableSizeEntry(0)


INTERRUPT_BITS = 10
INTERRUPT_MAX = (1 << INTERRUPT_BITS) - 1
_INTERRUPT_NUM = 2


@dataclass(frozen=True)
class InterruptEntry:
    """The EnableInterrupts kernel capability: a pair of interrupt numbers."""

    interrupt0: int = 0
    interrupt1: int = 0

    def __post_init__(self) -> None:
        for value in (self.interrupt0, self.interrupt1):
            if not 0 <= value <= INTERRUPT_MAX:
                raise ValueError("Illegal interupt value.")

    def __getitem__(self, index: int) -> int:
        return (self.interrupt0, self.interrupt1)[index % _INTERRUPT_NUM]

    @classmethod
    def from_capability(cls, cap: KernelCapabilityEntry) -> InterruptEntry:
        """Build the entry from an EnableInterrupts capability."""
        _require_type(cap, KernelCapId.EnableInterrupts, "EnableInterupts")
        return cls(cap.field & INTERRUPT_MAX, (cap.field >> INTERRUPT_BITS) & INTERRUPT_MAX)

    def to_capability(self) -> KernelCapabilityEntry:
        """Return the capability that encodes this entry."""
        value = self.interrupt0 | (self.interrupt1 << INTERRUPT_BITS)
        return KernelCapabilityEntry(KernelCapId.EnableInterrupts, value)


@dataclass
class InterruptHandler:
    """Holds the list of enabled interrupts."""

    is_set: bool = False
    interrupts: list[int] = dc_field(default_factory=list)

    def import_capabilities(self, caps: Sequence[KernelCapabilityEntry]) -> None:
        """Collect interrupts from a list of EnableInterrupts capabilities."""
        if not caps:
            return
        entries = [InterruptEntry.from_capability(cap) for cap in caps]

        collected: list[int] = []
        for index, entry in enumerate(entries):
            if index == 0 and entry[1] == 0:
                collected.append(entry[0])
                continue
            if entry[0] == INTERRUPT_MAX and entry[1] == INTERRUPT_MAX:
                continue
            for value in (entry[0], entry[1]):
                if value in collected:
                    raise FormatError("Interupt already added")
                collected.append(value)

        self.interrupts = collected
        self.is_set = True

    def export_capabilities(self) -> list[KernelCapabilityEntry]:
        """Return the capabilities describing the interrupt list, empty when unset."""
        if not self.is_set:
            return []
        stub = InterruptEntry(INTERRUPT_MAX, INTERRUPT_MAX).to_capability()
        caps: list[KernelCapabilityEntry] = []
        rest = self.interrupts
        if len(rest) % 2:
            caps.append(InterruptEntry(rest[0], 0).to_capability())
            rest = rest[1:]
        for first, second in zip(rest[::2], rest[1::2]):
            if first == INTERRUPT_MAX:
                caps.append(stub)
            caps.append(InterruptEntry(first, second).to_capability())
            if second == INTERRUPT_MAX:
                caps.append(stub)
        return caps

    def clear(self) -> None:
        self.is_set = False
        self.interrupts = []

    def set_interrupts(self, interrupts: Iterable[int]) -> None:
        """Replace the interrupt list; every interrupt must appear only once."""
        collected: list[int] = []
        for value in interrupts:
            if value in collected:
                raise FormatError("Interupt already added")
            collected.append(value)
        self.interrupts = collected
        self.is_set = True