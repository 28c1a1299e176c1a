import struct

import pytest

from sharedcockpit.gaugecommunicator import CLIENT_DATA_SET_FLAG_TAGGED, GetResult
from sharedcockpit.transfer import (
    DATATYPE_FLOAT64,
    DATATYPE_INT32,
    AircraftVars,
    Events,
    LVarSyncer,
)
from sharedcockpit.util import InDataTypes


class RecordingConn:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))

        return record

    def named(self, name):
        return [args for call, args in self.calls if call == name]


def client_data_block(items):
    data = struct.pack("<I4x", len(items))
    for datum_id, value in items:
        data += struct.pack("<i4xd", datum_id, value)
    return data


def test_events_map_sequential_ids():
    events = Events(5)
    assert events.get_or_map_event_id("TOGGLE_A", False) == 0
    assert events.get_or_map_event_id("TOGGLE_B", True) == 1
    assert events.get_or_map_event_id("TOGGLE_A", True) == 0
    assert len(events) == 2
    assert events.match_event_id(1) == "TOGGLE_B"
    assert events.match_event_id(9) is None


def test_events_trigger():
    events = Events(5)
    event_id = events.get_or_map_event_id("TOGGLE_A", False)
    conn = RecordingConn()
    events.trigger_event(conn, "TOGGLE_A", 7)
    assert conn.named("transmit_client_event") == [(1, event_id, 7, 0, 0)]


def test_events_trigger_unknown_raises():
    with pytest.raises(KeyError):
        Events(5).trigger_event(RecordingConn(), "MISSING", 0)


def test_events_on_connected_notifies_flagged_only():
    events = Events(5)
    events.get_or_map_event_id("QUIET", False)
    loud = events.get_or_map_event_id("LOUD", True)
    conn = RecordingConn()
    events.on_connected(conn)
    assert sorted(conn.named("map_client_event_to_sim_event")) == [(0, "QUIET"), (1, "LOUD")]
    assert conn.named("add_client_event_to_notification_group") == [(5, loud, True)]


def test_lvar_custom_var_names():
    syncer = LVarSyncer()
    assert syncer.add_custom_var("(L:A) 2 *") == "CustomLVar0"
    assert syncer.add_custom_var("(L:B)") == "CustomLVar1"
    syncer.add_var("L:C", "Number")
    assert len(syncer) == 3


def test_lvar_process_client_data_tracks_values():
    syncer = LVarSyncer()
    syncer.add_var("L:A", None)
    syncer.add_var("L:B", None)
    results = syncer.process_client_data(client_data_block([(1, 4.0)]))
    assert results == [GetResult("L:B", 4.0)]
    assert syncer.get_var("L:B") == 4.0
    assert syncer.get_var("L:A") is None
    snapshot = syncer.get_all_vars()
    snapshot["L:B"] = 0.0
    assert syncer.get_var("L:B") == 4.0


def test_lvar_set_and_set_unchecked():
    syncer = LVarSyncer()
    conn = RecordingConn()
    syncer.set(conn, "L:A", "1")
    syncer.set_unchecked(conn, "L:A", "Bool", "0")
    syncer.send_raw(conn, "(L:A) !")
    commands = [args[5][8:].rstrip(b"\0") for args in conn.named("set_client_data")]
    assert commands == [b"1 (>L:A)", b"0 (>L:A, Bool)", b"(L:A) !"]


def test_lvar_on_connected_sends_definitions():
    syncer = LVarSyncer()
    syncer.add_var("L:A", None)
    conn = RecordingConn()
    syncer.on_connected(conn)
    name, args = conn.calls[-1]
    assert name == "set_client_data"
    assert args[0] == 2
    assert args[5][:64].rstrip(b"\0") == b"(L:A)"


def test_aircraft_vars_duplicate_ignored():
    aircraft = AircraftVars(0)
    aircraft.add_var("PLANE LATITUDE", "degrees", InDataTypes.F64)
    aircraft.add_var("PLANE LATITUDE", "radians", InDataTypes.I32)
    assert len(aircraft) == 1


def test_aircraft_vars_set_then_read_round_trip():
    aircraft = AircraftVars(3)
    aircraft.add_var("PLANE LATITUDE", "degrees", InDataTypes.F64)
    aircraft.add_var("PLANE LONGITUDE", "degrees", InDataTypes.F64)
    conn = RecordingConn()
    values = {"PLANE LATITUDE": 42.0, "PLANE LONGITUDE": 128.0}
    aircraft.set_vars(conn, values)
    (args,) = conn.named("set_data_on_sim_object")
    assert args[:5] == (3, 0, CLIENT_DATA_SET_FLAG_TAGGED, 2, len(args[5]))
    read = aircraft.read_vars(2, args[5])
    assert read == values
    assert aircraft.get_all_vars() == values
    assert aircraft.get_var("PLANE LONGITUDE") == 128.0
    assert aircraft.get_var("MISSING") is None


def test_aircraft_vars_read_bad_datum_raises():
    aircraft = AircraftVars(0)
    aircraft.add_var("PLANE LATITUDE", "degrees", InDataTypes.F64)
    with pytest.raises(ValueError):
        aircraft.read_vars(1, struct.pack("<Id", 5, 1.0))


def test_aircraft_vars_on_connected_definitions():
    aircraft = AircraftVars(2)
    aircraft.add_var("ELT ACTIVATED", "Bool", InDataTypes.BOOL)
    aircraft.add_var("BIG", "Number", InDataTypes.I64)
    aircraft.add_var("PLANE LATITUDE", "degrees", InDataTypes.F64)
    conn = RecordingConn()
    aircraft.on_connected(conn)
    assert conn.calls[0] == ("clear_data_definition", (2,))
    assert conn.named("add_data_definition") == [
        (2, "ELT ACTIVATED", "Bool", DATATYPE_INT32, 0),
        (2, "PLANE LATITUDE", "degrees", DATATYPE_FLOAT64, 2),
    ]