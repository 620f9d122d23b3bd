"""An open-addressing hash map keyed by byte strings, used for header fields."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

INITIAL_CAPACITY = 256
_LOAD_NUMERATOR = 3
_LOAD_DENOMINATOR = 4
_MASK64 = (1 << 64) - 1


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("latin-1")
    return bytes(data)


def djb2(data: bytes | str) -> int:
    """Return the 64-bit djb2 hash of ``data``; bytes are treated as signed."""
    value = 5381
    for byte in _as_bytes(data):
        signed = byte - 0x100 if byte >= 0x80 else byte
        value = (value * 33 + signed) & _MASK64
    return value


class FieldMap(Mapping):
    """Hash map with linear probing whose iteration follows slot order.

    Two keys are considered the same entry when their djb2 hashes match.
    Capacity starts at 256 and doubles whenever the table is three quarters full.
    """

    __slots__ = ("_slots", "_count")

    def __init__(self) -> None:
        self._slots: list[tuple[int, bytes, bytes] | None] = []
        self._count = 0

    def capacity(self) -> int:
        """Number of slots currently allocated."""
        return len(self._slots)

    def reserve(self, capacity: int) -> None:
        """Grow the table so it holds at least ``capacity`` slots."""
        if capacity <= len(self._slots):
            return
        new_capacity = INITIAL_CAPACITY
        while new_capacity < capacity:
            new_capacity *= 2
        entries = [slot for slot in self._slots if slot is not None]
        self._slots = [None] * new_capacity
        self._count = 0
        for hashed, key, value in entries:
            self._place(hashed, key, value)

    def _probe(self, hashed: int) -> int:
        mask = len(self._slots) - 1
        index = hashed & mask
        while True:
            slot = self._slots[index]
            if slot is None or slot[0] == hashed:
                return index
            index = (index + 1) & mask

    def _place(self, hashed: int, key: bytes, value: bytes) -> None:
        index = self._probe(hashed)
        if self._slots[index] is None:
            self._count += 1
        self._slots[index] = (hashed, key, value)

    def _lookup(self, key: bytes | str) -> tuple[int, bytes, bytes] | None:
        if not self._slots:
            return None
        return self._slots[self._probe(djb2(key))]

    def __setitem__(self, key: bytes | str, value: bytes) -> None:
        if not self._slots:
            self.reserve(INITIAL_CAPACITY)
        capacity = len(self._slots)
        if self._count * _LOAD_DENOMINATOR >= capacity * _LOAD_NUMERATOR:
            self.reserve(capacity * 2)
        key_bytes = _as_bytes(key)
        self._place(djb2(key_bytes), key_bytes, value)

    def __getitem__(self, key: bytes | str) -> bytes:
        slot = self._lookup(key)
        if slot is None:
            raise KeyError(key)
        return slot[2]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (bytes, bytearray, str)):
            return False
        return self._lookup(key) is not None

    def __iter__(self) -> Iterator[bytes]:
        for slot in self._slots:
            if slot is not None:
                yield slot[1]

    def __len__(self) -> int:
        return self._count

    def items(self) -> Iterator[tuple[bytes, bytes]]:
        """Yield ``(key, value)`` pairs in slot order."""
        for slot in self._slots:
            if slot is not None:
                yield slot[1], slot[2]

    def __repr__(self) -> str:
        return f"FieldMap({dict(self.items())!r})"