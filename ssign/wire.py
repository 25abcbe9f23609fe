#!/usr/bin/env python3
"""
SSH wire-format encoding (RFC 4251, section 5).

Only the three types the signature format needs: uint32, string and mpint.
"""

import struct

from .errors import FormatError


def pack_uint32(value: int) -> bytes:
    return struct.pack(">I", value)


def pack_string(value) -> bytes:
    """Length-prefix a byte string; str values are UTF-8 encoded."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return struct.pack(">I", len(value)) + value


def pack_mpint(value: int) -> bytes:
    if value < 0:
        raise ValueError("negative mpint not supported")
    if value == 0:
        return pack_string(b"")
    # one extra bit keeps the sign bit clear
    return pack_string(value.to_bytes((value.bit_length() + 8) // 8, "big"))


class WireReader:
    """Sequential reader over a wire-format buffer.

    Every read is bounds checked: a length prefix that points past the end
    of the buffer raises FormatError instead of returning short data.
    """

    def __init__(self, data: bytes, what: str = "data"):
        self._data = memoryview(data)
        self._pos = 0
        self._what = what

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_bytes(self, n: int, field: str = "field") -> bytes:
        if n > self.remaining:
            raise FormatError(
                f"{self._what}: {field} needs {n} bytes, "
                f"only {self.remaining} left"
            )
        chunk = self._data[self._pos:self._pos + n].tobytes()
        self._pos += n
        return chunk

    def read_uint32(self, field: str = "uint32") -> int:
        return struct.unpack(">I", self.read_bytes(4, field))[0]

    def read_string(self, field: str = "string") -> bytes:
        length = self.read_uint32(f"{field} length")
        return self.read_bytes(length, field)

    def read_mpint(self, field: str = "mpint") -> int:
        raw = self.read_string(field)
        if raw and raw[0] & 0x80:
            raise FormatError(f"{self._what}: negative {field}")
        return int.from_bytes(raw, "big")

    def finish(self):
        """Require that the whole buffer has been consumed."""
        if self.remaining:
            raise FormatError(
                f"{self._what}: {self.remaining} trailing bytes after last field"
            )
