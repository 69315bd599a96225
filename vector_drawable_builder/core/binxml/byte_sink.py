"""Growable little-endian byte buffer with reserve/patch size fields."""

from __future__ import annotations
import struct
from dataclasses import dataclass
from typing import Set

from .errors import EncodingOverflow, ReservationError


@dataclass(frozen=True)
class Reservation:
    """A 4-byte placeholder written now and patched once its value is known."""

    offset: int


class ByteSink:
    """Accumulates a document in a bytearray.

    Size fields that depend on data written later are reserved with
    reserve_u32() and filled in with patch_u32(). Each reservation must be
    patched exactly once before finish().
    """

    def __init__(self) -> None:
        self._data = bytearray()
        self._pending: Set[int] = set()
        self._patched: Set[int] = set()

    def __len__(self) -> int:
        return len(self._data)

    def current_offset(self) -> int:
        return len(self._data)

    def _extend(self, chunk: bytes) -> None:
        try:
            self._data.extend(chunk)
        except MemoryError as e:
            raise EncodingOverflow(
                f"Could not grow buffer past {len(self._data)} bytes"
            ) from e

    def _pack(self, fmt: str, value, lo: int, hi: int, kind: str) -> None:
        if not lo <= value <= hi:
            raise EncodingOverflow(f"{value} does not fit in {kind}")
        self._extend(struct.pack(fmt, value))

    def put_u8(self, value: int) -> None:
        self._pack("<B", value, 0, 0xFF, "u8")

    def put_u16(self, value: int) -> None:
        self._pack("<H", value, 0, 0xFFFF, "u16")

    def put_i32(self, value: int) -> None:
        self._pack("<i", value, -0x80000000, 0x7FFFFFFF, "i32")

    def put_u32(self, value: int) -> None:
        self._pack("<I", value, 0, 0xFFFFFFFF, "u32")

    def put_f32(self, value: float) -> None:
        try:
            self._extend(struct.pack("<f", value))
        except OverflowError as e:
            raise EncodingOverflow(f"{value} does not fit in f32") from e

    def put_bytes(self, data: bytes) -> None:
        self._extend(bytes(data))

    def pad_to(self, alignment: int) -> int:
        """Write zero bytes until the offset is a multiple of alignment."""
        remainder = len(self._data) % alignment
        if remainder == 0:
            return 0
        padding = alignment - remainder
        self._extend(bytes(padding))
        return padding

    def reserve_u32(self) -> Reservation:
        reservation = Reservation(len(self._data))
        self._extend(b"\x00\x00\x00\x00")
        self._pending.add(reservation.offset)
        return reservation

    def patch_u32(self, reservation: Reservation, value: int) -> None:
        offset = reservation.offset
        if offset in self._patched:
            raise ReservationError(f"Size field at offset {offset} patched twice")
        if offset not in self._pending:
            raise ReservationError(f"No reservation at offset {offset}")
        if not 0 <= value <= 0xFFFFFFFF:
            raise EncodingOverflow(f"{value} does not fit in u32")
        struct.pack_into("<I", self._data, offset, value)
        self._pending.discard(offset)
        self._patched.add(offset)

    @property
    def pending_reservations(self) -> int:
        return len(self._pending)

    def finish(self) -> bytes:
        if self._pending:
            offsets = ", ".join(str(o) for o in sorted(self._pending))
            raise ReservationError(f"Unpatched size fields at offsets: {offsets}")
        return bytes(self._data)
