"""Fixed-size, zero-filled little-endian byte buffer writer."""

import struct


class MemWriter:
    """Writes values one after another into a zeroed buffer of fixed size."""

    def __init__(self, size, align=1):
        if size < 0:
            raise ValueError("size must not be negative")
        if align <= 0 or align & (align - 1):
            raise ValueError("align must be a power of two")
        self._buffer = bytearray(size)
        self._position = 0

    @property
    def position(self):
        """Offset of the next write."""
        return self._position

    def _write(self, data):
        end = self._position + len(data)
        if end > len(self._buffer):
            raise ValueError("write past end of buffer")
        self._buffer[self._position:end] = data
        self._position = end

    def _pack(self, fmt, val):
        try:
            self._write(struct.pack(fmt, val))
        except struct.error as e:
            raise ValueError(str(e)) from e

    def write_bool(self, val):
        self.write_i32(1 if val else 0)

    def write_u32(self, val):
        self._pack("<I", val)

    def write_i32(self, val):
        self._pack("<i", val)

    def write_i64(self, val):
        self._pack("<q", val)

    def write_f64(self, val):
        self._pack("<d", val)

    def write_str(self, val):
        self._write(val.encode("utf-8"))

    def pad(self, count):
        """Move the write position by ``count`` bytes, backwards if negative."""
        new_position = self._position + count
        if not 0 <= new_position <= len(self._buffer):
            raise ValueError("padding moves outside the buffer")
        self._position = new_position

    def getvalue(self):
        """The whole buffer, written and unwritten parts alike."""
        return bytes(self._buffer)