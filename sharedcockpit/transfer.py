"""Event, local variable and aircraft variable bookkeeping over a sim connection."""

from .gaugecommunicator import CLIENT_DATA_SET_FLAG_TAGGED, GaugeCommunicator
from .util import InDataTypes
from .varreader import VarReader

DATATYPE_INT32 = 1
DATATYPE_FLOAT64 = 4


class Events:
    """Two-way mapping between sim event names and client event ids."""

    def __init__(self, group_id):
        self.group_id = group_id
        self._ids_by_name = {}
        self._names_by_id = {}
        self._should_notify = set()

    def get_or_map_event_id(self, event_name, should_notify):
        """Id of an event, assigning the next free one if it is new."""
        event_id = self._ids_by_name.get(event_name)
        if event_id is not None:
            return event_id
        event_id = len(self._ids_by_name)
        self._ids_by_name[event_name] = event_id
        self._names_by_id[event_id] = event_name
        if should_notify:
            self._should_notify.add(event_id)
        return event_id

    def match_event_id(self, event_id):
        """Name mapped to ``event_id``, or None."""
        return self._names_by_id.get(event_id)

    def trigger_event(self, conn, event_name, data):
        """Transmit a mapped event; raises KeyError for an unknown name."""
        try:
            event_id = self._ids_by_name[event_name]
        except KeyError:
            raise KeyError(f"event {event_name!r} is not mapped") from None
        conn.transmit_client_event(1, event_id, data, 0, 0)

    def on_connected(self, conn):
        for event_name, event_id in self._ids_by_name.items():
            conn.map_client_event_to_sim_event(event_id, event_name)
            if event_id in self._should_notify:
                conn.add_client_event_to_notification_group(self.group_id, event_id, True)

    def __len__(self):
        return len(self._ids_by_name)


class LVarSyncer:
    """Local variables read and written through the gauge."""

    def __init__(self):
        self.transfer = GaugeCommunicator()
        self._current_values = {}
        self._raw_count = 0

    def add_var(self, var_name, var_units=None):
        self.transfer.add_definition(var_name, var_units)

    def add_custom_var(self, calculator):
        """Register a raw calculator expression and return its generated name."""
        name = f"CustomLVar{self._raw_count}"
        self.transfer.add_definition_raw(calculator, name)
        self._raw_count += 1
        return name

    def process_client_data(self, data):
        values = self.transfer.process_client_data(data)
        for result in values:
            self._current_values[result.var_name] = result.value
        return values

    def set(self, conn, var_name, value):
        self.transfer.set(conn, var_name, None, value)

    def set_unchecked(self, conn, var_name, var_units, value):
        self.transfer.set(conn, var_name, var_units, value)

    def send_raw(self, conn, raw_string):
        self.transfer.send_raw(conn, raw_string)

    def on_connected(self, conn):
        self.transfer.on_connected(conn)
        self.transfer.send_definitions(conn)

    def get_var(self, var_name):
        """Last received value of a variable, or None."""
        return self._current_values.get(var_name)

    def get_all_vars(self):
        return dict(self._current_values)

    def __len__(self):
        return len(self.transfer)


class _AircraftVar:
    __slots__ = ("datum_id", "var_units", "var_type")

    def __init__(self, datum_id, var_units, var_type):
        self.datum_id = datum_id
        self.var_units = var_units
        self.var_type = var_type


class AircraftVars:
    """Aircraft simulation variables under one data definition."""

    def __init__(self, define_id):
        self.define_id = define_id
        self._vars = {}
        self._current_values = {}
        self._reader = VarReader()

    def add_var(self, var_name, var_units, data_type):
        """Register a variable; a name already added is left as it was."""
        if var_name in self._vars:
            return
        datum_id = self._reader.add_definition(var_name, data_type)
        self._vars[var_name] = _AircraftVar(datum_id, var_units, data_type)

    def read_vars(self, define_count, data):
        """Decode tagged variable data and remember the values."""
        values = self._reader.read_from_bytes(define_count, data)
        self._current_values.update(values)
        return values

    def get_all_vars(self):
        return dict(self._current_values)

    def set_vars(self, conn, data):
        payload = self._reader.write_to_data(data)
        conn.set_data_on_sim_object(
            self.define_id,
            0,
            CLIENT_DATA_SET_FLAG_TAGGED,
            len(data),
            len(payload),
            payload,
        )

    def get_var(self, var_name):
        return self._current_values.get(var_name)

    def on_connected(self, conn):
        conn.clear_data_definition(self.define_id)
        for var_name, var in self._vars.items():
            if var.var_type in (InDataTypes.BOOL, InDataTypes.I32):
                datatype = DATATYPE_INT32
            elif var.var_type is InDataTypes.F64:
                datatype = DATATYPE_FLOAT64
            else:
                continue
            conn.add_data_definition(
                self.define_id, var_name, var.var_units, datatype, var.datum_id
            )

    def __len__(self):
        return len(self._vars)