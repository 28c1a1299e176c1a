"""Reading and writing tagged simulation variable data."""

import struct

from .util import InDataTypes

_READ_FORMATS = {
    InDataTypes.BOOL: "<i",
    InDataTypes.I32: "<i",
    InDataTypes.I64: "<q",
    InDataTypes.F64: "<d",
}


class VarReader:
    """Maps variable names to datum ids and decodes tagged data blocks."""

    def __init__(self):
        self._datum_ids = {}
        self._entries = []

    def add_definition(self, data_name, data_type):
        """Register a variable and return its datum id."""
        datum_id = len(self._entries)
        self._datum_ids[data_name] = datum_id
        self._entries.append((data_name, data_type))
        return datum_id

    def read_from_bytes(self, item_count, data):
        """Decode ``item_count`` tagged items: a u32 datum id, then the value."""
        values = {}
        offset = 0
        for _ in range(item_count):
            try:
                (datum_id,) = struct.unpack_from("<I", data, offset)
            except struct.error as e:
                raise ValueError("data ended before all items were read") from e
            if datum_id >= len(self._entries):
                raise ValueError("DatumID wasn't defined.")
            name, data_type = self._entries[datum_id]
            fmt = _READ_FORMATS[data_type]
            try:
                (value,) = struct.unpack_from(fmt, data, offset + 4)
            except struct.error as e:
                raise ValueError("data ended before all items were read") from e
            if data_type is InDataTypes.BOOL:
                value = value != 0
            values[name] = value
            offset += 4 + struct.calcsize(fmt)
        return values

    def write_to_data(self, data):
        """Encode named values as tagged items; integers are written as 64 bits."""
        buffer = bytearray()
        for name, value in data.items():
            buffer += struct.pack("<I", self._datum_ids[name])
            if isinstance(value, float):
                buffer += struct.pack("<d", value)
            else:
                buffer += struct.pack("<q", int(value))
        return bytes(buffer)

    def __len__(self):
        return len(self._entries)