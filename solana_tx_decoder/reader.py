"""Bounds-checked sequential reader over serialized Solana data"""

import struct
from typing import Optional

from .errors import BufferExhaustedError, CompactLengthOverflowError, NonCanonicalLengthError

PUBKEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class ByteCursor:
    """
    Reads primitives from an immutable buffer, advancing an offset.

    Every read checks the remaining length first and raises
    BufferExhaustedError instead of returning a short result. The optional
    ``field`` argument names the section being parsed so errors can say
    where decoding stopped.
    """

    def __init__(self, buf: bytes, offset: int = 0):
        self._buf = bytes(buf)
        if not 0 <= offset <= len(self._buf):
            raise ValueError(f"Offset {offset} outside buffer of {len(self._buf)} bytes")
        self._off = offset

    @property
    def offset(self) -> int:
        return self._off

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    @property
    def eof(self) -> bool:
        return self._off >= len(self._buf)

    def _require(self, n: int, field: Optional[str]):
        if n > self.remaining:
            raise BufferExhaustedError(
                f"Buffer exhausted: need {n} bytes, {self.remaining} remaining",
                field,
                self._off,
            )

    def peek_byte(self, field: Optional[str] = None) -> int:
        """Return the next byte without consuming it"""
        self._require(1, field)
        return self._buf[self._off]

    def read_byte(self, field: Optional[str] = None) -> int:
        """Read one unsigned byte"""
        self._require(1, field)
        val = self._buf[self._off]
        self._off += 1
        return val

    def read_bytes(self, n: int, field: Optional[str] = None) -> bytes:
        """Read exactly n bytes"""
        self._require(n, field)
        out = self._buf[self._off:self._off + n]
        self._off += n
        return out

    def read_fixed32(self, field: Optional[str] = None) -> bytes:
        """Read a 32-byte key or hash"""
        return self.read_bytes(PUBKEY_LENGTH, field)

    def read_fixed64(self, field: Optional[str] = None) -> bytes:
        """Read a 64-byte signature"""
        return self.read_bytes(SIGNATURE_LENGTH, field)

    def read_u32le(self, field: Optional[str] = None) -> int:
        """Read a little-endian u32"""
        return struct.unpack('<I', self.read_bytes(4, field))[0]

    def read_u64le(self, field: Optional[str] = None) -> int:
        """Read a little-endian u64"""
        return struct.unpack('<Q', self.read_bytes(8, field))[0]

    def read_compact_u16(self, field: Optional[str] = None) -> int:
        """
        Read a compact-u16 length prefix.

        Each byte carries 7 payload bits, least significant group first, with
        the high bit set when another byte follows. A value occupies at most
        three bytes and the third may only carry the two remaining bits, so
        ``zzyyyyyyyxxxxxxx`` is encoded as ``1xxxxxxx 1yyyyyyy 000000zz``.
        """
        start = self._off
        value = 0
        shift = 0
        while True:
            byte = self.read_byte(field)
            if shift == 14 and byte & 0xFC:
                raise CompactLengthOverflowError(
                    "Compact-u16 length does not fit in 16 bits", field, start
                )
            if shift and not byte:
                raise NonCanonicalLengthError(
                    "Compact-u16 length has a redundant zero byte", field, start
                )
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return value
            shift += 7

    def read_compact_bytes(self, field: Optional[str] = None) -> bytes:
        """Read a compact-u16 length followed by that many bytes"""
        n = self.read_compact_u16(field)
        return self.read_bytes(n, field)
