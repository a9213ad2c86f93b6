"""Big-endian cursor over an archive buffer plus the U8 header/node codec."""

import struct
from dataclasses import dataclass

from .errors import (
    BufferTooLargeError,
    InvalidBooleanError,
    InvalidMagicError,
    InvalidStringError,
    TruncatedReadError,
)

U8_MAGIC = b"\x55\xAA\x38\x2D"
WU8_MAGIC = b"WU8a"

HEADER_SIZE = 32
NODE_SIZE = 12
MAX_OFFSET = 0xFFFFFFFF

_U32 = struct.Struct(">I")
_HEADER = struct.Struct(">4sIII16x")
_NODE = struct.Struct(">B3sII")


@dataclass(frozen=True)
class U8Header:
    magic: bytes
    node_offset: int
    # Bytes from node_offset covering the node and string tables.
    meta_size: int
    data_offset: int


@dataclass(frozen=True)
class U8Node:
    """One 12-byte entry of the node table.

    For files ``data_offset``/``size`` locate the payload in the buffer.
    For directories ``size`` is the index of the first node past the
    directory's last descendant; the root's ``size`` is the node count.
    """

    is_dir: bool
    name_offset: int
    data_offset: int
    size: int


class Parser:
    """Sequential reader over a mutable buffer with explicit positioning."""

    def __init__(self, buffer, position: int = 0):
        self.buffer = buffer
        self._pos = position

    def position(self) -> int:
        if self._pos > MAX_OFFSET:
            raise BufferTooLargeError(self._pos)
        return self._pos

    def set_position(self, pos: int) -> None:
        if pos < 0:
            raise ValueError(f"Negative seek position {pos}")
        self._pos = pos

    def read(self, n: int) -> bytes:
        start = self._pos
        available = max(len(self.buffer) - start, 0)
        if n > available:
            raise TruncatedReadError(start, n, available)
        self._pos = start + n
        return bytes(self.buffer[start:start + n])

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_bool(self) -> bool:
        value = self.read_byte()
        if value == 0:
            return False
        if value == 1:
            return True
        raise InvalidBooleanError(value)

    def read_u24(self) -> int:
        return int.from_bytes(self.read(3), "big")

    def read_u32(self) -> int:
        return _U32.unpack(self.read(4))[0]

    def read_string(self, table_start: int, table_offset: int) -> str:
        """Reads a NUL terminated string from the string table.

        The cursor position is restored afterwards, so lookups can be
        interleaved with sequential node reads.
        """
        starting_pos = self._pos
        start = table_start + table_offset
        end = self.buffer.find(b"\0", start) if start < len(self.buffer) else -1
        if end < 0:
            raise TruncatedReadError(start, 1, max(len(self.buffer) - start, 0))
        raw = bytes(self.buffer[start:end])
        self._pos = starting_pos
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidStringError(start, exc) from exc

    def read_u8_header(self, expected_magic: bytes) -> U8Header:
        raw = self.read(HEADER_SIZE)
        magic, node_offset, meta_size, data_offset = _HEADER.unpack(raw)
        if magic != expected_magic:
            raise InvalidMagicError(expected_magic, magic)
        return U8Header(magic, node_offset, meta_size, data_offset)

    def read_node(self) -> U8Node:
        start = self._pos
        raw = self.read(NODE_SIZE)
        flag, name_offset, data_offset, size = _NODE.unpack(raw)
        if flag > 1:
            self._pos = start + 1
            raise InvalidBooleanError(flag)
        return U8Node(
            is_dir=bool(flag),
            name_offset=int.from_bytes(name_offset, "big"),
            data_offset=data_offset,
            size=size,
        )


def check_buffer_size(buffer) -> int:
    size = len(buffer)
    if size > MAX_OFFSET:
        raise BufferTooLargeError(size)
    return size


__all__ = [
    "HEADER_SIZE",
    "NODE_SIZE",
    "Parser",
    "U8Header",
    "U8Node",
    "U8_MAGIC",
    "WU8_MAGIC",
    "check_buffer_size",
]
