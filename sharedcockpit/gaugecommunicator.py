"""Exchange of calculator strings and values with the in-sim gauge."""

import enum
import math
import struct
from dataclasses import dataclass

from .memwriter import MemWriter

# Client data area ids, used both as client data ids and definition ids.
SEND = 0
SEND_MULTIPLE = 2
RECEIVE_MULTIPLE = 3
MAP_INTERPOLATE = 4
SEND_INTERPOLATE = 5

CLIENT_DATA_SET_FLAG_TAGGED = 1
CLIENT_DATA_PERIOD_ON_SET = 3

_SEND_SIZE = 128
_MULTI_BUFFER_SIZE = 8096
_SEND_MULTIPLE_SIZE = 8064
_DATUMS_PER_BLOCK = 126
_CALCULATOR_SLOT = 64
_INTERPOLATE_BUFFER_SIZE = 2048
_INTERPOLATE_SLOTS = 100
_VALUE_LIMIT = 10e64

_RETURN_HEADER = struct.Struct("<I4x")
_RETURN_DATUM = struct.Struct("<i4xd")


@dataclass(eq=False)
class LVar:
    """A local variable value; equality looks at the floating value only."""

    integer: int
    floating: float

    def __eq__(self, other):
        if not isinstance(other, LVar):
            return NotImplemented
        return self.floating == other.floating

    __hash__ = None


@dataclass(frozen=True)
class GetResult:
    var_name: str
    value: float


@dataclass(frozen=True)
class InterpolateData:
    name: str
    value: float
    time: float


class InterpolationType(enum.Enum):
    """How the gauge interpolates an aircraft variable; values are wire codes."""

    DEFAULT = 0
    WRAP180 = 1
    WRAP90 = 2
    WRAP360 = 3
    INVERT = 4
    DEFAULT_CONSTANT = 5
    INVERT_CONSTANT = 6


@dataclass(frozen=True)
class _Datum:
    friendly_name: str
    calculator: str


@dataclass(frozen=True)
class _InterpolateMapping:
    datum_id: int
    interpolation_type: InterpolationType
    exec_string: str


def format_get(var_name, var_units=None):
    """Calculator expression that reads a variable."""
    if var_units is not None:
        return f"({var_name}, {var_units.strip()})"
    return f"({var_name.strip()})"


class GaugeCommunicator:
    """Defines, reads and writes variables through the gauge's client data areas."""

    def __init__(self):
        self._datums = []
        self._interpolate_datums = {}

    def set(self, conn, var_name, var_units, val):
        """Have the gauge assign ``val`` to a variable."""
        if var_units is not None:
            command = f"{val.strip()} (>{var_name.strip()}, {var_units.strip()})"
        else:
            command = f"{val.strip()} (>{var_name.strip()})"
        self.send_raw(conn, command)

    def send_raw(self, conn, string):
        """Have the gauge execute a raw calculator string."""
        writer = MemWriter(_SEND_SIZE, 4)
        writer.write_i32(0)
        writer.pad(4)
        writer.write_str(string)
        conn.set_client_data(SEND, SEND, 0, 0, _SEND_SIZE, writer.getvalue())

    def add_definition(self, var_name, var_units=None):
        self.add_definition_raw(format_get(var_name, var_units), var_name)

    def add_definition_raw(self, calculator, name):
        self._datums.append(_Datum(name, calculator))

    def send_definitions(self, conn):
        """Send every calculator string, in blocks of 126 slots of 64 bytes."""
        for start in range(0, len(self._datums), _DATUMS_PER_BLOCK):
            writer = MemWriter(_MULTI_BUFFER_SIZE, 4)
            for datum in self._datums[start:start + _DATUMS_PER_BLOCK]:
                writer.write_str(datum.calculator)
                writer.pad(_CALCULATOR_SLOT - len(datum.calculator))
            conn.set_client_data(
                SEND_MULTIPLE,
                SEND_MULTIPLE,
                0,
                0,
                _SEND_MULTIPLE_SIZE,
                writer.getvalue()[:_SEND_MULTIPLE_SIZE],
            )

    def __len__(self):
        return len(self._datums)

    def add_interpolate_mapping(
        self, calculator_var_name, index_var_name, var_units, interpolation_type
    ):
        """Register an aircraft variable the gauge should interpolate."""
        if var_units is not None:
            exec_string = f"(>{calculator_var_name.strip()}, {var_units.strip()})"
        else:
            exec_string = f"(>{calculator_var_name.strip()})"
        self._interpolate_datums[index_var_name] = _InterpolateMapping(
            len(self._interpolate_datums), interpolation_type, exec_string
        )

    def send_new_interpolation_data(self, conn, time, data):
        """Send target values for mapped variables; unmapped names are skipped."""
        writer = MemWriter(_INTERPOLATE_BUFFER_SIZE, 8)
        writer.write_u32(_INTERPOLATE_SLOTS)
        writer.write_f64(time)
        count = 0
        for entry in data:
            mapping = self._interpolate_datums.get(entry.name)
            if mapping is None:
                continue
            writer.write_u32(mapping.datum_id)
            writer.write_f64(entry.value)
            count += 1
        size = count * 12 + 12
        conn.set_client_data(
            SEND_INTERPOLATE,
            SEND_INTERPOLATE,
            CLIENT_DATA_SET_FLAG_TAGGED,
            0,
            size,
            writer.getvalue()[:size],
        )

    def _do_operation(self, operation, conn):
        writer = MemWriter(_SEND_SIZE, 4)
        writer.write_i32(operation)
        conn.set_client_data(SEND, SEND, 0, 0, _SEND_SIZE, writer.getvalue())

    def _clear_definitions(self, conn):
        self._do_operation(-1, conn)

    def stop_interpolation(self, conn):
        self._do_operation(-2, conn)

    def process_client_data(self, data):
        """Decode a block of returned values: a u32 count, then (i32 id, f64) items."""
        (length,) = _RETURN_HEADER.unpack_from(data, 0)
        results = []
        for datum_id, value in _RETURN_DATUM.iter_unpack(
            bytes(data[_RETURN_HEADER.size:_RETURN_HEADER.size + length * _RETURN_DATUM.size])
        ):
            if not 0 <= datum_id < len(self._datums):
                continue
            if not math.isnan(value):
                value = min(max(value, -_VALUE_LIMIT), _VALUE_LIMIT)
            results.append(GetResult(self._datums[datum_id].friendly_name, value))
        return results

    def _write_interpolate_mapping(self, conn):
        writer = MemWriter(_MULTI_BUFFER_SIZE, 4)
        for mapping in self._interpolate_datums.values():
            writer.write_u32(mapping.datum_id)
            writer.write_u32(mapping.interpolation_type.value)
            writer.write_str(mapping.exec_string)
            writer.pad(_CALCULATOR_SLOT - len(mapping.exec_string))
        size = len(self._interpolate_datums) * 72
        conn.set_client_data(
            MAP_INTERPOLATE,
            MAP_INTERPOLATE,
            CLIENT_DATA_SET_FLAG_TAGGED,
            0,
            size,
            writer.getvalue()[:size],
        )

    def on_connected(self, conn):
        """Name and lay out the client data areas, then reset the gauge."""
        conn.map_client_data_name_to_id("YCSEND", SEND)
        conn.map_client_data_name_to_id("YCSENDMULTI", SEND_MULTIPLE)
        conn.map_client_data_name_to_id("YCRECEIVEMULTI", RECEIVE_MULTIPLE)
        conn.map_client_data_name_to_id("YCMAPINTERPOLATE", MAP_INTERPOLATE)
        conn.map_client_data_name_to_id("YCSENDINTERPOLATE", SEND_INTERPOLATE)

        conn.add_to_client_data_definition(SEND, 0, 4, 0.0, 0)
        conn.add_to_client_data_definition(SEND, 4, 124, 0.0, 1)
        conn.add_to_client_data_definition(SEND_INTERPOLATE, 0, 8, 0.0, 100)
        for i in range(_INTERPOLATE_SLOTS):
            conn.add_to_client_data_definition(MAP_INTERPOLATE, i * 68, 68, 0.0, i)
            conn.add_to_client_data_definition(SEND_INTERPOLATE, i * 8 + 8, 8, 0.0, i)
        conn.add_to_client_data_definition(RECEIVE_MULTIPLE, 0, _MULTI_BUFFER_SIZE, 0.0, 0)
        conn.add_to_client_data_definition(SEND_MULTIPLE, 0, _SEND_MULTIPLE_SIZE, 0.0, 0)

        self._clear_definitions(conn)

        conn.request_client_data(
            RECEIVE_MULTIPLE,
            1,
            RECEIVE_MULTIPLE,
            CLIENT_DATA_PERIOD_ON_SET,
            0,
            0,
            0,
            0,
        )
        self._write_interpolate_mapping(conn)